"""Unit tests for Redis DAO helpers.

Test coverage includes:
    1. handle_redis_connection_error
       - Ensures the wrapped method executes and returns its result.
       - Ensures Redis connection and timeout errors are converted into DataStoreError.
       - Confirms functools.wraps preserves the original function's name and docstring.
    2. to_int
       - Converts Redis replies (str, bytes, None) to integers.
"""

from unittest.mock import MagicMock

import pytest
import redis

from slugregistry.dao.redis.helpers import handle_redis_connection_error, to_int
from slugregistry.dao.exceptions import DataStoreError


class DummyDAO:
    def __init__(self, error=None):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'localhost', 'port': 6379, 'db': 0}
        self.error = error

    @handle_redis_connection_error
    def count(self):
        """Read the counter."""
        if self.error is not None:
            raise self.error
        return 42


# -------------------------------
# 1. handle_redis_connection_error
# -------------------------------


def test_decorator_allows_normal_execution():
    assert DummyDAO().count() == 42


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('refused'), redis.exceptions.TimeoutError('timeout')])
def test_decorator_transforms_redis_errors(error):
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0.") as exc_info:
        DummyDAO(error).count()
    assert exc_info.value.__cause__ is error


def test_decorator_keeps_other_errors():
    with pytest.raises(redis.exceptions.ResponseError):
        DummyDAO(redis.exceptions.ResponseError('WRONGTYPE')).count()


def test_decorator_preserves_metadata():
    assert DummyDAO.count.__name__ == 'count'
    assert DummyDAO.count.__doc__ == 'Read the counter.'


# -------------------------------
# 2. to_int
# -------------------------------


@pytest.mark.parametrize('value, expected', [(None, 0), ('7', 7), (b'12', 12), (3, 3)])
def test_to_int(value, expected):
    assert to_int(value) == expected


def test_to_int_default():
    assert to_int(None, default=-1) == -1
