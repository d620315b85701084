from typing import Any
from collections.abc import Callable

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type AppConfig = dict[str, Any]
type LambdaConfiguration = dict[str, Any]

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient

# Registry existence check used by slug allocation
type SlugExistsCheck = Callable[[str], bool]
