import logging
from http import HTTPStatus
from typing import Any

from slugregistry.exceptions import ConfigurationError
from slugregistry.services import build_registry
from slugregistry.lambdas.responses import HANDLED_ERRORS, registry_error_response, status_response
from slugregistry.utils import load_config, guarantee_500_response
from slugregistry.utils.helpers import caller_address, json_response
from slugregistry.utils.constants import MISSING_CALLER, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle POST /balances/withdraw: pay out the caller's whole balance

    HTTP responses:
        200: payout queued
        401: missing caller identity
        409: nothing to withdraw
        500: internal server error
    """
    try:
        app_config = load_config('withdraw')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for withdraw function. Responding with 500.')
        return status_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=CONFIGURATION_ERROR)

    caller = caller_address(event)
    if caller is None:
        logger.info('Missing caller identity. Responding with 401.', extra={'event': MISSING_CALLER})
        return status_response(HTTPStatus.UNAUTHORIZED, "missing 'sub' in JWT claims", MISSING_CALLER)

    registry = build_registry(app_config)
    try:
        amount = registry.withdraw(caller)
    except HANDLED_ERRORS as e:
        logger.info('Withdrawal rejected. Responding with error.', extra={'event': e.error_code})
        return registry_error_response(e)

    return json_response(HTTPStatus.OK, {'message': f'Withdrew {amount}', 'address': caller, 'amount': amount})
