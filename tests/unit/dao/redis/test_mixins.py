"""Unit tests for the Redis client plumbing in mixins.py

Test coverage includes:
    1. Client construction
       - redis_client_from_config() maps an AppConfig 'redis' section to redis.Redis().
       - Missing settings fall back to a local Redis; quoted ports and dbs are accepted.
    2. Initialization
       - A given client is reused; otherwise one is built from the connection settings.
       - Unreachable Redis raises DataStoreError naming the server.
    3. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises error, or returns False on request.
"""

import re
from unittest.mock import MagicMock, patch

import pytest
import redis

from slugregistry.dao.exceptions import DataStoreError
from slugregistry.dao.redis.mixins import RedisClientMixin, redis_client_from_config


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def redis_client():
    _redis_client = MagicMock(
        spec=redis.Redis, connection_pool=MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0})
    )
    _redis_client.ping.return_value = True
    return _redis_client


# -------------------------------
# 1. Client construction
# -------------------------------


def test_client_from_config():
    config = {'host': 'redis.internal', 'port': '6380', 'db': '3', 'username': 'registry', 'password': 's3cret'}

    with patch('slugregistry.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        client = redis_client_from_config(config)

    redis_mock.assert_called_once_with(host='redis.internal', port=6380, db=3, decode_responses=True, username='registry', password='s3cret')
    assert client is redis_mock.return_value


def test_client_from_empty_config():
    with patch('slugregistry.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_client_from_config({})

    redis_mock.assert_called_once_with(host='localhost', port=6379, db=0, decode_responses=True, username=None, password=None)


# -------------------------------
# 2. Initialization
# -------------------------------


def test_initialize_with_redis_client(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client)
    assert mixin.redis is redis_client
    assert mixin.keys.prefix is None


def test_initialize_from_connection_settings():
    with patch('slugregistry.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        mixin = RedisClientMixin(prefix='testapp:test', host='redis', port=6379, db=1)

    redis_mock.assert_called_once_with(host='redis', port=6379, db=1, decode_responses=True, username=None, password=None)
    assert mixin.redis is redis_mock.return_value
    assert mixin.keys.record_key(7) == 'testapp:test:records:7'


def test_initialize_with_unreachable_redis():
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the registry's 'redis' configuration."

    with patch('slugregistry.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        redis_mock_instance.connection_pool = MagicMock()
        redis_mock_instance.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

        with pytest.raises(DataStoreError, match=re.escape(exception_message)):
            RedisClientMixin(prefix='testapp:test', host='203.0.113.1', port=18000, db=5)


# -------------------------------
# 3. Healthcheck behavior
# -------------------------------


def test_healthcheck_passes(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    redis_client.ping.assert_called_once()  # initialization performs a healthcheck

    assert mixin.healthcheck() is True
    assert redis_client.ping.call_count == 2


def test_healthcheck_fails(redis_client):
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match=re.escape("Can't connect to Redis at redis:6379/0.")):
        RedisClientMixin(redis_client=redis_client, prefix='testapp:test')


def test_healthcheck_without_raising(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client)
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

    assert mixin.healthcheck(raise_error=False) is False
