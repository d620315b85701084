import functools
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from slugregistry.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error', 'redis_location', 'to_int']

F = TypeVar('F', bound=Callable[..., Any])


def redis_location(client: redis.Redis) -> str:
    """Describe a client's server as 'host:port/db' for error messages"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def count(self):
        ...     return self.redis.get('count')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper


def to_int(value: Any, default: int = 0) -> int:
    """Convert a Redis reply (str, bytes or None) to int"""
    if value is None:
        return default
    if isinstance(value, bytes):
        value = value.decode('utf-8')
    return int(value)
