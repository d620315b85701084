"""Utility functions for application configuration management.

Lambda functions read their configuration from **AWS AppConfig**. Each
environment (`APP_ENV`) has a dedicated AppConfig *Environment* within the
AppConfig *Application* identified by `APP_NAME`. The configuration JSON
document follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "registry": {
            "operator": "0x...",
            "fee_share_bips": 5000,
            "max_allocation_attempts": 10000
        },
        "configs": {
            "mint_slug": {
                "redis": { ... }
            },
            "lookup_slug": {
                "redis": { ... }
            }
        }
    }

Every Lambda receives the shared "registry" section plus its own backend
section:

    {
        "active_backend": "redis",
        "redis": { ... },
        "registry": { ... }
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), `'local'` by default.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda. Under SAM, read it from a local
        AppConfig agent.

Example:
    >>> from slugregistry.utils.config import load_config
    >>> config = load_config('mint_slug')
    >>> config['active_backend']
    'redis'
    >>> config['registry']['fee_share_bips']
    5000
"""

import os
import json
import functools
import logging
import urllib.parse
import urllib.request
from pathlib import Path
from collections.abc import Callable

import boto3

from slugregistry.exceptions import BadConfigurationError
from slugregistry.types import AppConfig, AppConfigDataClient, LambdaConfiguration
from slugregistry.utils.helpers import require_environment, running_locally
from slugregistry.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    PROJECT_ROOT_ENV,
    APPCONFIG_APP_ID_ENV,
    APPCONFIG_ENV_ID_ENV,
    APPCONFIG_PROFILE_ID_ENV,
    APPCONFIG_AGENT_URL_ENV,
    APPCONFIG_PROFILE_NAME_ENV,
)


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(APP_NAME_ENV)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Falls back to this file's directory when PROJECT_ROOT is not set.
    """
    return Path(os.environ.get(PROJECT_ROOT_ENV, os.path.dirname(__file__)))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'slugregistry'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'slugregistry:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def extract_lambda_config(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    """Select one Lambda's configuration from the full AppConfig document

    Args:
        document (dict):
            Full AppConfig JSON document.
        lambda_name (str):
            Name of the Lambda (e.g., "mint_slug").

    Returns:
        dict: {'active_backend': <backend>, <backend>: {...}, 'registry': {...}}

    Raises:
        BadConfigurationError:
            If the document has no active backend or no section for the Lambda.
    """
    try:
        backend = document['active_backend']
        backend_config = document['configs'][lambda_name][backend]
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no '{lambda_name}' configuration ({e}).") from e

    return {
        'active_backend': backend,
        backend: backend_config,
        'registry': document.get('registry', {}),
    }


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the configuration JSON from the local agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise ValueError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise ValueError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise ValueError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        agent_url = __validate_appconfig_url(os.getenv(APPCONFIG_AGENT_URL_ENV))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(APPCONFIG_PROFILE_NAME_ENV, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return extract_lambda_config(document, lambda_name)

    return wrapper


@_sam_load_local_appconfig
@require_environment(APPCONFIG_APP_ID_ENV, APPCONFIG_ENV_ID_ENV, APPCONFIG_PROFILE_ID_ENV)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "mint_slug" or "lookup_slug").

    Returns:
        dict: The lambda's config section plus the shared registry settings.

    Raises:
        MissingEnvironmentVariableError:
            If any AppConfig identifier is missing from the environment.
        BadConfigurationError:
            If the document has no section for the Lambda.

    Example:
        >>> app_config = load_config('mint_slug')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[APPCONFIG_APP_ID_ENV],
        EnvironmentIdentifier=os.environ[APPCONFIG_ENV_ID_ENV],
        ConfigurationProfileIdentifier=os.environ[APPCONFIG_PROFILE_ID_ENV],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return extract_lambda_config(document, lambda_name)
