import logging
from http import HTTPStatus
from typing import Any

from slugregistry.exceptions import ConfigurationError
from slugregistry.services import build_registry
from slugregistry.lambdas.responses import HANDLED_ERRORS, registry_error_response, status_response
from slugregistry.utils import load_config, get_short_url, guarantee_500_response
from slugregistry.utils.helpers import caller_address, parse_json_body, json_response
from slugregistry.utils.constants import NULL_ADDRESS, MISSING_CALLER, INVALID_REQUEST_BODY, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to mint slugs

    This Lambda handler follows this procedure to mint a slug:
    - Step 1: Extract the caller's address (Cognito 'sub' claim)
    - Step 2: Extract url, slug, referrer and payment receipt from the request body
    - Step 3: Mint the slug through the registry
    - Step 4: Respond with the minted slug and its record

    Request body:
        url (str): target URL (required)
        slug (str): custom slug, omitted or empty for a free generated one
        referrer (str): referrer address (optional)
        payment_id (str): receipt of a payment the caller made on the payment rail (optional)

    The request can't state a payment amount: custom slugs are paid through a
    payment receipt, and the amount is read from it.

    HTTP responses:
        200: slug minted
        400: bad request (invalid JSON, payment amount in body, empty URL, self-referral)
        401: missing caller identity
        402: unknown payment receipt, someone else's receipt, or payment below the custom slug's cost
        409: custom slug already taken, receipt already spent, or a concurrent mint won the race
        503: minting paused
        500: internal server error

    Example:
        >>> event = {'body': '{"url": "https://example.com"}', 'requestContext': {'authorizer': {'claims': {'sub': '0xalice'}}}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 0- Get application's config
    try:
        app_config = load_config('mint_slug')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for mint slug function. Responding with 500.')
        return status_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=CONFIGURATION_ERROR)

    # 1- Extract caller address
    caller = caller_address(event)
    if caller is None:
        logger.info('Missing caller identity. Responding with 401.', extra={'event': MISSING_CALLER})
        return status_response(HTTPStatus.UNAUTHORIZED, "missing 'sub' in JWT claims", MISSING_CALLER)

    # 2- Extract mint request from body
    try:
        body = parse_json_body(event)
    except ValueError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_REQUEST_BODY})
        return status_response(HTTPStatus.BAD_REQUEST, 'invalid JSON body', INVALID_REQUEST_BODY)

    url = body.get('url') or ''
    slug = body.get('slug') or ''
    referrer = body.get('referrer') or NULL_ADDRESS
    payment_id = body.get('payment_id') or ''
    if 'payment' in body:
        logger.warning('Mint request states its own payment amount. Responding with 400.', extra={'event': INVALID_REQUEST_BODY, 'caller': caller})
        return status_response(HTTPStatus.BAD_REQUEST, "payment amounts are not accepted, pass a 'payment_id' receipt", INVALID_REQUEST_BODY)
    if not all(isinstance(value, str) for value in (url, slug, referrer, payment_id)):
        logger.info('Malformed mint request. Responding with 400.', extra={'event': INVALID_REQUEST_BODY})
        return status_response(HTTPStatus.BAD_REQUEST, "'url', 'slug', 'referrer' and 'payment_id' must be strings", INVALID_REQUEST_BODY)

    # 3- Mint the slug
    registry = build_registry(app_config)
    try:
        slug = registry.mint(caller, url, slug=slug, referrer=referrer, payment_id=payment_id)
    except HANDLED_ERRORS as e:
        logger.info('Mint rejected. Responding with error.', extra={'event': e.error_code, 'reason': str(e)})
        return registry_error_response(e)

    # 4- Respond with the new record
    record = registry.record_of(registry.id_of(slug))
    return json_response(
        HTTPStatus.OK,
        {
            'message': f'Successfully minted {slug} for {url}',
            'slug': slug,
            'short_url': get_short_url(slug, event),
            'url': url,
            'sequence_id': record.sequence_id,
            'is_custom': record.is_custom,
        },
    )
