import logging
from http import HTTPStatus
from typing import Any

from slugregistry.exceptions import ConfigurationError
from slugregistry.services import build_registry
from slugregistry.lambdas.responses import HANDLED_ERRORS, registry_error_response, status_response
from slugregistry.utils import load_config, guarantee_500_response
from slugregistry.utils.helpers import caller_address, parse_json_body, json_response
from slugregistry.utils.constants import MISSING_CALLER, INVALID_REQUEST_BODY, INVALID_PATH_PARAMETERS, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle PUT /records/{sequence_id}: point a record's slug to a new URL

    HTTP responses:
        200: URL updated
        400: bad request (invalid sequence id, invalid JSON, empty URL)
        401: missing caller identity
        403: caller doesn't own the record
        404: record not found
        500: internal server error
    """
    # 0- Get application's config
    try:
        app_config = load_config('edit_url')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for edit URL function. Responding with 500.')
        return status_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=CONFIGURATION_ERROR)

    # 1- Extract caller address
    caller = caller_address(event)
    if caller is None:
        logger.info('Missing caller identity. Responding with 401.', extra={'event': MISSING_CALLER})
        return status_response(HTTPStatus.UNAUTHORIZED, "missing 'sub' in JWT claims", MISSING_CALLER)

    # 2- Extract sequence id from path and new URL from body
    raw_sequence_id = str((event.get('pathParameters') or {}).get('sequence_id', ''))
    if not (raw_sequence_id.isascii() and raw_sequence_id.isdecimal()):
        logger.info('Missing or invalid sequence id in path. Responding with 400.', extra={'event': INVALID_PATH_PARAMETERS})
        return status_response(HTTPStatus.BAD_REQUEST, "missing or invalid 'sequence_id' in path", INVALID_PATH_PARAMETERS)
    sequence_id = int(raw_sequence_id)

    try:
        body = parse_json_body(event)
    except ValueError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_REQUEST_BODY})
        return status_response(HTTPStatus.BAD_REQUEST, 'invalid JSON body', INVALID_REQUEST_BODY)

    new_url = body.get('url') or ''
    if not isinstance(new_url, str):
        return status_response(HTTPStatus.BAD_REQUEST, "'url' must be a string", INVALID_REQUEST_BODY)

    # 3- Edit URL
    registry = build_registry(app_config)
    try:
        registry.edit_url(caller, sequence_id, new_url)
    except HANDLED_ERRORS as e:
        logger.info('URL edit rejected. Responding with error.', extra={'event': e.error_code, 'sequence_id': sequence_id})
        return registry_error_response(e)

    return json_response(HTTPStatus.OK, {'message': f'Record {sequence_id} now points to {new_url}', 'sequence_id': sequence_id, 'url': new_url})
