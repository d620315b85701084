from slugregistry.utils.config import app_env, app_name, project_root, app_prefix, load_config
from slugregistry.utils.helpers import base_url, get_short_url, require_environment, running_locally, guarantee_500_response
from slugregistry.utils.slugs import generate_slug, advance_slug, allocate_slug
from slugregistry.utils.logging import initialize_logging


__all__ = [
    'generate_slug',
    'advance_slug',
    'allocate_slug',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'running_locally',
    'guarantee_500_response',
    'initialize_logging',
]
