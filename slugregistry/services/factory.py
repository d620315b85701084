"""Build a Registry from a Lambda's configuration

Example:
    >>> from slugregistry.utils import load_config
    >>> registry = build_registry(load_config('mint_slug'))
"""

import logging
from typing import Any

from slugregistry.exceptions import BadConfigurationError
from slugregistry.types import LambdaConfiguration
from slugregistry.dao.redis import RegistryRedisDAO, OwnershipRedisDAO, PayoutRedisDAO, redis_client_from_config
from slugregistry.dao.memory import RegistryMemoryDAO, OwnershipMemoryDAO, PayoutMemoryDAO
from slugregistry.services.registry import Registry
from slugregistry.utils.config import app_prefix
from slugregistry.utils.constants import NULL_ADDRESS, DEFAULT_FEE_SHARE_BIPS, DEFAULT_MAX_ALLOCATION_ATTEMPTS


logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = frozenset({'redis', 'memory'})


def _redis_daos(redis_config: dict[str, Any]) -> tuple[RegistryRedisDAO, OwnershipRedisDAO, PayoutRedisDAO]:
    # All three DAOs share a single client (and connection pool)
    client = redis_client_from_config(redis_config)
    prefix = app_prefix()
    return (
        RegistryRedisDAO(redis_client=client, prefix=prefix),
        OwnershipRedisDAO(redis_client=client, prefix=prefix),
        PayoutRedisDAO(redis_client=client, prefix=prefix),
    )


def build_registry(app_config: LambdaConfiguration) -> Registry:
    """Wire a Registry with the DAOs of the active backend

    Args:
        app_config (dict):
            Output of load_config(): {'active_backend': ..., <backend>: {...}, 'registry': {...}}

    Returns:
        Registry: ready-to-use registry.

    Raises:
        BadConfigurationError:
            If the backend is unsupported or the operator address is missing.
    """
    backend = app_config.get('active_backend')
    if backend not in SUPPORTED_BACKENDS:
        raise BadConfigurationError(f"Unsupported backend '{backend}' (supported: {', '.join(sorted(SUPPORTED_BACKENDS))}).")

    settings = app_config.get('registry', {})
    operator = settings.get('operator')
    if not operator or operator == NULL_ADDRESS:
        raise BadConfigurationError("Missing registry 'operator' address in configuration.")

    if backend == 'redis':
        store, ownership, payouts = _redis_daos(app_config.get('redis', {}))
    else:
        logger.debug('Using in-process stores; state is lost when the process exits.')
        store, ownership, payouts = RegistryMemoryDAO(), OwnershipMemoryDAO(), PayoutMemoryDAO()

    return Registry(
        store,
        ownership,
        payouts,
        operator=operator,
        default_fee_share_bips=int(settings.get('fee_share_bips', DEFAULT_FEE_SHARE_BIPS)),
        max_allocation_attempts=int(settings.get('max_allocation_attempts', DEFAULT_MAX_ALLOCATION_ATTEMPTS)),
    )
