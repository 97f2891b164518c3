"""
Shared utilities: logging setup and result stores.
"""
