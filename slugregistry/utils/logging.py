"""JSON logging for the registry Lambdas

Call `initialize_logging()` in each Lambda package's `__init__.py`, before the
handler module logs anything. Every record becomes one JSON line on stdout,
tagged with the app and environment so CloudWatch Logs Insights can filter
registry events across functions:

{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "slugregistry.services.registry",
    "message": "Minted slug.",
    "app": "slugregistry",
    "env": "prod",
    "event": "SLUG_MINTED",
    "slug": "vanity",
    "sequence_id": 7
}

Amounts are integers in 10**-18 units and routinely exceed 2**53, the largest
integer a JSON reader backed by doubles keeps exact. Such integers are written
as strings.
"""

import os
import json
import logging
import logging.config
from typing import Any
from datetime import datetime, UTC

from slugregistry.utils.config import app_env, app_name
from slugregistry.utils.constants import LOG_LEVEL_ENV


MAX_SAFE_JSON_INT = 2**53

# Attributes every LogRecord has; anything else on a record came from `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime', 'taskName'}

# Third-party loggers that flood DEBUG output with connection chatter
_NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _json_value(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > MAX_SAFE_JSON_INT:
        return str(value)
    return value


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, its `extra` fields and static tags as one JSON object"""

    def __init__(self, static_fields: dict[str, Any] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.static_fields = {key: value for key, value in (static_fields or {}).items() if value is not None}

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.static_fields,
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        log.update((key, _json_value(value)) for key, value in vars(record).items() if key not in _RECORD_ATTRS)
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'static_fields': {'app': app_name(), 'env': app_env()},
                },
            },
            'handlers': {
                'stdout': {'class': 'logging.StreamHandler', 'formatter': 'json', 'stream': 'ext://sys.stdout'},
            },
            'loggers': {name: {'level': 'WARNING'} for name in _NOISY_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
