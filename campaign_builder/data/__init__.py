"""
Data source adapters.
"""
from .sources import rows_from_dataframe, columns_from_dataframe, rows_from_csv

__all__ = ['rows_from_dataframe', 'columns_from_dataframe', 'rows_from_csv']
