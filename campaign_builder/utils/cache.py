"""
Validation result stores.

A Validator keeps its last result in memory. A ResultStore is an optional
second-level cache shared between validator sessions, keyed by a digest of
the validation inputs. The Redis store treats any Redis failure as a cache
miss.
"""

import hashlib
import json
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Optional, Union
import redis

from campaign_builder.config import redis_config
from campaign_builder.utils.logging import setup_logger

logger = setup_logger(__name__)


def digest(key: str) -> str:
    """SHA-256 hex digest of a cache key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class ResultStore(ABC):
    """Key/value store for serialized validation results."""

    @abstractmethod
    def get_json(self, key: str) -> Optional[Any]:
        """Return the cached JSON value for ``key``, or None."""
        pass

    @abstractmethod
    def set_json(self, key: str, value: Any, expire: Optional[Union[int, timedelta]] = None) -> bool:
        """Cache a JSON-serializable value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Drop the value cached for ``key``."""
        pass


class MemoryResultStore(ResultStore):
    """In-process store keeping the most recent ``max_entries`` results."""

    def __init__(self, max_entries: int = 128):
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, str]" = OrderedDict()

    def get_json(self, key: str) -> Optional[Any]:
        value = self._entries.get(key)
        if value is None:
            return None
        self._entries.move_to_end(key)
        return json.loads(value)

    def set_json(self, key: str, value: Any, expire: Optional[Union[int, timedelta]] = None) -> bool:
        try:
            self._entries[key] = json.dumps(value)
        except TypeError as e:
            logger.error(f"JSON encode error: {e}")
            return False
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return True

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._entries)


class RedisResultStore(ResultStore):
    """Redis-backed store."""

    def __init__(self, client: Optional[redis.Redis] = None, prefix: Optional[str] = None):
        """
        Initialize the Redis connection.

        Args:
            client: Existing client; one is created from settings when omitted
            prefix: Key prefix; settings value when omitted
        """
        self.redis = client or redis.from_url(
            redis_config.url,
            password=redis_config.password,
            decode_responses=True
        )
        self.prefix = prefix if prefix is not None else redis_config.prefix + redis_config.validation_prefix

    def _get_key(self, key: str) -> str:
        """
        Get prefixed cache key.

        Args:
            key: Original key

        Returns:
            str: Prefixed key
        """
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(self._get_key(key))
        except redis.RedisError as e:
            logger.error(f"Redis error in get: {e}")
            return None

    def get_json(self, key: str) -> Optional[Any]:
        """
        Get JSON value from cache.

        Args:
            key: Cache key

        Returns:
            Optional[Any]: Deserialized JSON value if exists
        """
        value = self.get(key)
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                logger.error(f"JSON decode error: {e}")
                return None
        return None

    def set(self, key: str, value: str, expire: Optional[Union[int, timedelta]] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            expire: Optional expiration time in seconds or timedelta

        Returns:
            bool: True if successful
        """
        if expire is None:
            expire = redis_config.result_ttl
        if isinstance(expire, timedelta):
            expire = int(expire.total_seconds())
        try:
            self.redis.set(self._get_key(key), value, ex=expire)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis error in set: {e}")
            return False

    def set_json(self, key: str, value: Any, expire: Optional[Union[int, timedelta]] = None) -> bool:
        try:
            payload = json.dumps(value)
        except TypeError as e:
            logger.error(f"JSON encode error: {e}")
            return False
        return self.set(key, payload, expire)

    def delete(self, key: str) -> bool:
        try:
            self.redis.delete(self._get_key(key))
            return True
        except redis.RedisError as e:
            logger.error(f"Redis error in delete: {e}")
            return False

