import logging
from http import HTTPStatus
from typing import Any

from slugregistry.exceptions import ConfigurationError
from slugregistry.services import Registry, build_registry
from slugregistry.lambdas.responses import HANDLED_ERRORS, registry_error_response, status_response
from slugregistry.utils import load_config, guarantee_500_response
from slugregistry.utils.helpers import caller_address, parse_json_body, json_response
from slugregistry.utils.constants import MISSING_CALLER, INVALID_REQUEST_BODY, UNKNOWN_ADMIN_ACTION, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


class UnknownAdminActionError(Exception):
    """Raised when the request names no known administrative action."""


def _int_field(body: dict[str, Any], name: str) -> int:
    value = body.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{name}' must be an integer")
    return value


def _str_field(body: dict[str, Any], name: str) -> str:
    value = body.get(name)
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{name}' must be a non-empty string")
    return value


def run_action(registry: Registry, caller: str, body: dict[str, Any]) -> dict[str, Any]:
    """Dispatch one administrative action

    Raises:
        UnknownAdminActionError: If the action is unknown.
        ValueError: If the action's arguments are malformed.
    """
    action = body.get('action')
    match action:
        case 'set_fee_share_bips':
            value = _int_field(body, 'value')
            registry.set_fee_share_bips(caller, value)
            return {'message': f'Referrer fee share set to {value} bips', 'fee_share_bips': value}
        case 'pause':
            registry.pause(caller)
            return {'message': 'Minting paused', 'paused': True}
        case 'unpause':
            registry.unpause(caller)
            return {'message': 'Minting unpaused', 'paused': False}
        case 'recover_foreign_asset':
            asset = _str_field(body, 'asset')
            amount = _int_field(body, 'amount')
            registry.recover_foreign_asset(caller, asset, amount)
            return {'message': f'Recovered {amount} of {asset}', 'asset': asset, 'amount': amount}
        case 'receive_payment':
            payment_id = _str_field(body, 'payment_id')
            amount = registry.receive_verified_payment(caller, payment_id)
            return {'message': f'Received {amount}', 'payment_id': payment_id, 'amount': amount}
        case _:
            raise UnknownAdminActionError(action)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle POST /admin: operator actions and unsolicited payments

    Request body:
        action (str): one of 'set_fee_share_bips', 'pause', 'unpause',
                      'recover_foreign_asset', 'receive_payment'
        value (int): new fee share (set_fee_share_bips)
        asset (str): asset identifier (recover_foreign_asset)
        amount (int): amount (recover_foreign_asset)
        payment_id (str): receipt of the caller's payment on the payment rail (receive_payment)

    Unsolicited payments are open to any caller but are only credited from a
    receipt the payment rail recorded for that caller; every other action is
    operator-only.

    HTTP responses:
        200: action done
        400: bad request (invalid JSON, unknown action, invalid arguments)
        401: missing caller identity
        402: unknown payment receipt, or someone else's receipt
        403: caller is not the operator
        409: payment receipt already spent
        500: internal server error
    """
    try:
        app_config = load_config('admin')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for admin function. Responding with 500.')
        return status_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=CONFIGURATION_ERROR)

    caller = caller_address(event)
    if caller is None:
        logger.info('Missing caller identity. Responding with 401.', extra={'event': MISSING_CALLER})
        return status_response(HTTPStatus.UNAUTHORIZED, "missing 'sub' in JWT claims", MISSING_CALLER)

    try:
        body = parse_json_body(event)
    except ValueError:
        return status_response(HTTPStatus.BAD_REQUEST, 'invalid JSON body', INVALID_REQUEST_BODY)

    registry = build_registry(app_config)
    try:
        result = run_action(registry, caller, body)
    except HANDLED_ERRORS as e:
        logger.info('Admin action rejected. Responding with error.', extra={'event': e.error_code, 'action': body.get('action')})
        return registry_error_response(e)
    except UnknownAdminActionError:
        logger.info('Unknown admin action. Responding with 400.', extra={'event': UNKNOWN_ADMIN_ACTION, 'action': body.get('action')})
        return status_response(HTTPStatus.BAD_REQUEST, f"unknown action '{body.get('action')}'", UNKNOWN_ADMIN_ACTION)
    except ValueError as e:
        return status_response(HTTPStatus.BAD_REQUEST, str(e), INVALID_REQUEST_BODY)

    logger.info('Admin action done.', extra={'action': body.get('action')})
    return json_response(HTTPStatus.OK, result)
