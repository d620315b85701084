from slugregistry.dao.redis.redis_key_schema import RedisKeySchema
from slugregistry.dao.redis.mixins import RedisClientMixin, redis_client_from_config
from slugregistry.dao.redis.registry_redis_dao import RegistryRedisDAO
from slugregistry.dao.redis.ownership_redis_dao import OwnershipRedisDAO
from slugregistry.dao.redis.payout_redis_dao import PayoutRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'redis_client_from_config',
    'RegistryRedisDAO',
    'OwnershipRedisDAO',
    'PayoutRedisDAO',
]
