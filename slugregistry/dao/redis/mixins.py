"""Shared Redis client plumbing for the registry's Redis DAOs

The registry, ownership and payout DAOs live in the same Redis database and
must see each other's writes, so a Lambda builds one client from its AppConfig
'redis' section and hands it to all three.

Functions:
    - redis_client_from_config: Build a client from an AppConfig 'redis' section.

Classes:
    - RedisClientMixin: Attach a client and the registry key schema to a DAO, then PING it.

Example:
    >>> client = redis_client_from_config({'host': 'redis', 'port': 6379, 'db': 0})
    >>> store = RegistryRedisDAO(redis_client=client, prefix='slugregistry:prod')
    >>> ownership = OwnershipRedisDAO(redis_client=client, prefix='slugregistry:prod')
    >>> store.healthcheck()
    True
"""

from typing import Any

import redis

from slugregistry.dao.redis.redis_key_schema import RedisKeySchema
from slugregistry.dao.redis.helpers import redis_location
from slugregistry.dao.exceptions import DataStoreError


def redis_client_from_config(config: dict[str, Any]) -> redis.Redis:
    """Build a Redis client from an AppConfig 'redis' section

    Args:
        config (dict):
            Connection settings: host, port, db, username, password. Missing
            entries fall back to a local Redis on db 0. Port and db may be
            strings, as AppConfig documents often carry them quoted.

    Returns:
        redis.Redis: client decoding replies to str.
    """
    return redis.Redis(
        host=config.get('host', 'localhost'),
        port=int(config.get('port', 6379)),
        db=int(config.get('db', 0)),
        decode_responses=True,
        username=config.get('username'),
        password=config.get('password'),
    )


class RedisClientMixin:
    """Give a registry DAO its Redis client and namespaced key schema

    Attributes:
        redis (redis.Redis):
            Client shared with the other DAOs of the same registry.
        keys (RedisKeySchema):
            Key names under the app prefix, e.g. 'slugregistry:prod:records:7'.
    """

    def __init__(self, redis_client: redis.Redis | None = None, prefix: str | None = None, **connection):
        """Attach a client, building one from `connection` when none is given

        Args:
            redis_client (redis.Redis | None):
                Client to reuse.
            prefix (str | None):
                Key namespace, usually '<app name>:<env>'.
            **connection:
                AppConfig 'redis' settings, used only without redis_client.

        Raises:
            DataStoreError: If Redis doesn't answer the PING.
        """
        self.redis = redis_client if redis_client is not None else redis_client_from_config(connection)
        self.keys = RedisKeySchema(prefix=prefix)
        self.healthcheck()

    def healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True when Redis answers. False on failure if raise_error is False.

        Raises:
            DataStoreError: If Redis doesn't answer and raise_error is True.
        """
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}. Check the registry's 'redis' configuration.") from e
        return True
