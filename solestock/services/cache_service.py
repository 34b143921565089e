"""
Redis cache for per-company reference data (items, contacts).

Keys look like {prefix}:company:{company_id}:{module}:{key}. When Redis is
disabled or unreachable every call degrades to a miss and callers fall
back to the database.
"""

import logging
import json
from typing import Any, Optional, Callable, Dict
from datetime import datetime, date
from decimal import Decimal

import redis
from redis.exceptions import RedisError, ConnectionError, TimeoutError
from flask import Flask, current_app

logger = logging.getLogger(__name__)


class CacheService:
    """Company-scoped cache-aside helper around a redis client."""

    def __init__(self, app: Optional[Flask] = None):
        self.client: Optional[redis.Redis] = None
        self._enabled: bool = False
        self._prefix: str = ""

        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Connect using REDIS_URL; a failed ping disables the cache."""
        self._enabled = app.config.get('CACHE_ENABLED', True)
        self._prefix = app.config.get('CACHE_KEY_PREFIX', 'solestock')
        redis_url = app.config.get('REDIS_URL', 'redis://localhost:6379/0')

        if not self._enabled:
            logger.info("[CACHE] disabled by configuration")
            return

        try:
            self.client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=3,
                socket_timeout=3,
                retry_on_timeout=True,
                health_check_interval=30
            )
            self.client.ping()
            logger.info(f"[CACHE] connected to {redis_url}")
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.warning(f"[CACHE] connection failed: {e}. Cache disabled.")
            self._enabled = False
            self.client = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def is_available(self) -> bool:
        if not self._enabled or not self.client:
            return False
        try:
            self.client.ping()
            return True
        except (ConnectionError, RedisError):
            return False

    def build_key(self, company_id: int, module: str, key: str) -> str:
        return f"{self._prefix}:company:{company_id}:{module}:{key}"

    @staticmethod
    def serialize(value: Any) -> str:
        """JSON with Decimals tagged so they come back as Decimals."""
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, Decimal):
                return {"__decimal__": str(obj)}
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
        return json.dumps(value, default=default_handler)

    @staticmethod
    def deserialize(value: str) -> Any:
        def object_hook(dct: Dict[str, Any]) -> Any:
            if "__decimal__" in dct:
                return Decimal(dct["__decimal__"])
            return dct
        return json.loads(value, object_hook=object_hook)

    def get(self, company_id: int, module: str, key: str) -> Optional[Any]:
        if not self.is_available():
            return None
        try:
            value = self.client.get(self.build_key(company_id, module, key))
            if value is None:
                return None
            return self.deserialize(value)
        except (RedisError, json.JSONDecodeError) as e:
            logger.warning(f"[CACHE] get failed: {e}")
            return None

    def set(self, company_id: int, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self.is_available():
            return False
        try:
            if ttl is None:
                ttl = current_app.config.get('CACHE_DEFAULT_TTL', 60)
            self.client.setex(self.build_key(company_id, module, key), ttl, self.serialize(value))
            return True
        except (RedisError, TypeError) as e:
            logger.warning(f"[CACHE] set failed: {e}")
            return False

    def invalidate_module(self, company_id: int, module: str) -> int:
        """Delete every key of one module for a company."""
        if not self.is_available():
            return 0
        try:
            pattern = self.build_key(company_id, module, "*")
            deleted = 0
            for cache_key in self.client.scan_iter(match=pattern, count=100):
                self.client.delete(cache_key)
                deleted += 1
            if deleted:
                logger.info(f"[CACHE] invalidated {pattern} ({deleted} keys)")
            return deleted
        except RedisError as e:
            logger.warning(f"[CACHE] invalidate failed: {e}")
            return 0

    def memoize(self, company_id: int, module: str, key: str, loader_fn: Callable[[], Any],
                ttl: Optional[int] = None) -> Any:
        """Return the cached value, or load it, cache it and return it."""
        cached = self.get(company_id, module, key)
        if cached is not None:
            logger.debug(f"[CACHE] hit {module}:{key} company={company_id}")
            return cached
        value = loader_fn()
        self.set(company_id, module, key, value, ttl)
        return value


_cache_service: Optional[CacheService] = None


def init_cache(app: Flask) -> None:
    global _cache_service
    _cache_service = CacheService(app)
    app.extensions['cache'] = _cache_service


def get_cache() -> CacheService:
    if _cache_service is None:
        raise RuntimeError("Cache not initialized.")
    return _cache_service
