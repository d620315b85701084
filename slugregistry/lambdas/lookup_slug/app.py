import logging
from http import HTTPStatus
from typing import Any

from slugregistry.exceptions import ConfigurationError
from slugregistry.services import Registry, build_registry
from slugregistry.lambdas.responses import HANDLED_ERRORS, registry_error_response, status_response
from slugregistry.utils import load_config, get_short_url, guarantee_500_response
from slugregistry.utils.helpers import json_response
from slugregistry.utils.constants import INVALID_PATH_PARAMETERS, CONFIGURATION_ERROR


logger = logging.getLogger(__name__)


def describe_slug(registry: Registry, slug: str, event: dict[str, Any]) -> dict[str, Any]:
    sequence_id = registry.id_of(slug)
    record = registry.record_of(sequence_id)
    return {
        'slug': slug,
        'short_url': get_short_url(slug, event),
        'url': registry.url_of(slug),
        'sequence_id': sequence_id,
        'is_custom': record.is_custom,
        'owner': registry.owner_of(sequence_id),
        'metadata': registry.metadata_of(sequence_id),
    }


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle read-only registry queries

    Routes:
        GET /slugs/{slug}    -> URL, sequence id, owner and metadata of a slug
        GET /costs/{length}  -> price of a custom slug of this length

    HTTP responses:
        200: query answered
        400: missing or invalid path parameters
        404: slug not registered
        500: internal server error

    Example:
        >>> event = {'pathParameters': {'length': '6'}}
        >>> json.loads(lambda_handler(event, None)['body'])['cost']
        30000000000000000
    """
    try:
        app_config = load_config('lookup_slug')
    except ConfigurationError:
        logger.exception('Failed to load AppConfig for lookup slug function. Responding with 500.')
        return status_response(HTTPStatus.INTERNAL_SERVER_ERROR, error_code=CONFIGURATION_ERROR)

    path_parameters = event.get('pathParameters') or {}
    registry = build_registry(app_config)

    if 'length' in path_parameters:
        raw_length = str(path_parameters['length'])
        if not (raw_length.isascii() and raw_length.isdecimal()):
            return status_response(HTTPStatus.BAD_REQUEST, "'length' must be a non-negative integer", INVALID_PATH_PARAMETERS)
        length = int(raw_length)
        return json_response(HTTPStatus.OK, {'length': length, 'cost': registry.cost(length)})

    if 'slug' not in path_parameters:
        logger.info('Missing "slug" in path. Responding with 400.', extra={'event': INVALID_PATH_PARAMETERS})
        return status_response(HTTPStatus.BAD_REQUEST, "missing 'slug' in path", INVALID_PATH_PARAMETERS)

    slug = path_parameters['slug']
    try:
        body = describe_slug(registry, slug, event)
    except HANDLED_ERRORS as e:
        logger.info('Slug lookup failed. Responding with error.', extra={'event': e.error_code, 'slug': slug})
        return registry_error_response(e)

    return json_response(HTTPStatus.OK, body)
