from unittest.mock import MagicMock

import pytest
import redis

from slugregistry.dao.memory import RegistryMemoryDAO, OwnershipMemoryDAO, PayoutMemoryDAO
from slugregistry.services import Registry


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def operator() -> str:
    return '0xoperator'


@pytest.fixture
def store() -> RegistryMemoryDAO:
    return RegistryMemoryDAO()


@pytest.fixture
def ownership() -> OwnershipMemoryDAO:
    return OwnershipMemoryDAO()


@pytest.fixture
def payouts() -> PayoutMemoryDAO:
    return PayoutMemoryDAO()


@pytest.fixture
def registry(store, ownership, payouts, operator) -> Registry:
    return Registry(store, ownership, payouts, operator=operator)


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.exists.return_value = False
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.get.return_value = None
    return client
