"""Helper utilities for AWS lambda functions.

Functions:
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(slug, event) -> str
        Get string representation of the public link for a given slug
    caller_address(event) -> str | None
        Extract the caller's address (Cognito 'sub' claim) from API Gateway event
    parse_json_body(event) -> dict
        Decode the JSON request body of an API Gateway event
    json_response(status_code, body, headers=None) -> dict
        Build an API Gateway Lambda Proxy response
    error_response(status_code, message, error_code=None) -> dict
        Build an API Gateway error response
    running_locally() -> bool
        True if the lambda is running in local SAM, False otherwise
    require_environment(*names) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into 500 responses

Example:
    Typical usage inside a Lambda handler:

        >>> from slugregistry.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from typing import Any
from collections.abc import Callable

from slugregistry.exceptions import MissingEnvironmentVariableError
from slugregistry.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV, UNKNOWN_INTERNAL_SERVER_ERROR


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        return f'https://{domain}'
    elif domain:
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(slug: str, event: dict[str, Any]) -> str:
    """Get string representation of the public link for a slug"""
    return f'{base_url(event).rstrip("/")}/{slug}'


def caller_address(event: dict[str, Any]) -> str | None:
    """Extract the caller's address from the Cognito authorizer claims

    Returns:
        str | None: value of the 'sub' claim, None when the request is unauthenticated.
    """
    claims = (event.get('requestContext') or {}).get('authorizer', {}).get('claims', {})
    return claims.get('sub')


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON body of an API Gateway event

    Raises:
        json.JSONDecodeError: If the body isn't valid JSON.
        ValueError: If the body isn't a JSON object.
    """
    body = json.loads(event.get('body') or '{}')
    if not isinstance(body, dict):
        raise ValueError('Request body must be a JSON object.')
    return body


def json_response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict[str, Any]:
    response = {
        'statusCode': int(status_code),
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }
    return response


def error_response(status_code: int, message: str, error_code: str | None = None) -> dict[str, Any]:
    body = {'message': message}
    if error_code:
        body['error_code'] = error_code
    return json_response(status_code, body)


def running_locally() -> bool:
    """Check if the lambda is running locally via sam local invoke

    Example:
        >>> os.environ['APP_ENV'] = 'local'
        >>> running_locally()
        True
    """
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with 500 when a Lambda handler raises unexpectedly

    When running locally (SAM), the original exception is re-raised so the
    stack trace shows up in the console.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return error_response(500, 'Internal Server Error', UNKNOWN_INTERNAL_SERVER_ERROR)

    return wrapper
