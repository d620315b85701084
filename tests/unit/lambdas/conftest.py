import json
from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Respond with 500 on unexpected errors instead of re-raising them."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture
def app_config(operator) -> dict:
    return {
        'active_backend': 'memory',
        'memory': {},
        'registry': {'operator': operator},
    }


@pytest.fixture
def context():
    return MagicMock()


@pytest.fixture
def make_event():
    """Build an API Gateway proxy event for an authenticated caller"""

    def _make_event(body=None, path_parameters=None, sub='0xalice', raw_body=None):
        claims = {'email': 'pytest@example.com', 'cognito:username': 'pytest-user'}
        if sub is not None:
            claims['sub'] = sub
        return {
            'body': raw_body if raw_body is not None else (None if body is None else json.dumps(body)),
            'pathParameters': path_parameters,
            'headers': {'User-Agent': 'pytest', 'Authorization': 'Bearer fake-jwt-token'},
            'requestContext': {
                'domainName': 'sl.ug',
                'stage': 'Prod',
                'authorizer': {'claims': claims},
            },
        }

    return _make_event
