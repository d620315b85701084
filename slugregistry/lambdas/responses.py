"""Map registry errors to API Gateway responses"""

from http import HTTPStatus

from slugregistry.dao.exceptions import (
    SlugNotFoundError,
    SlugAlreadyExistsError,
    RecordNotFoundError,
    TokenNotFoundError,
    NotTokenOwnerError,
    MintConflictError,
    PaymentNotFoundError,
    PaymentAlreadyClaimedError,
)
from slugregistry.exceptions import (
    RegistryError,
    EmptyURLError,
    EmptySlugError,
    SelfReferralError,
    InvalidFeeShareError,
    NativeAssetRecoveryError,
    InsufficientPaymentError,
    NotOwnerError,
    NotOperatorError,
    ZeroBalanceError,
    RegistryPausedError,
    SlugSpaceExhaustedError,
    UnverifiedPaymentError,
)
from slugregistry.utils.helpers import error_response


# fmt: off
ERROR_STATUS = {
    EmptyURLError:              HTTPStatus.BAD_REQUEST,
    EmptySlugError:             HTTPStatus.BAD_REQUEST,
    SelfReferralError:          HTTPStatus.BAD_REQUEST,
    InvalidFeeShareError:       HTTPStatus.BAD_REQUEST,
    NativeAssetRecoveryError:   HTTPStatus.BAD_REQUEST,
    InsufficientPaymentError:   HTTPStatus.PAYMENT_REQUIRED,
    PaymentNotFoundError:       HTTPStatus.PAYMENT_REQUIRED,
    UnverifiedPaymentError:     HTTPStatus.PAYMENT_REQUIRED,
    NotOwnerError:              HTTPStatus.FORBIDDEN,
    NotOperatorError:           HTTPStatus.FORBIDDEN,
    NotTokenOwnerError:         HTTPStatus.FORBIDDEN,
    SlugNotFoundError:          HTTPStatus.NOT_FOUND,
    RecordNotFoundError:        HTTPStatus.NOT_FOUND,
    TokenNotFoundError:         HTTPStatus.NOT_FOUND,
    SlugAlreadyExistsError:     HTTPStatus.CONFLICT,
    ZeroBalanceError:           HTTPStatus.CONFLICT,
    PaymentAlreadyClaimedError: HTTPStatus.CONFLICT,
    MintConflictError:          HTTPStatus.CONFLICT,
    RegistryPausedError:        HTTPStatus.SERVICE_UNAVAILABLE,
    SlugSpaceExhaustedError:    HTTPStatus.SERVICE_UNAVAILABLE,
}
# fmt: on

# Errors a handler answers itself; anything else ends up as a 500
HANDLED_ERRORS = tuple(ERROR_STATUS) + (RegistryError,)


def status_response(status: HTTPStatus, message: str | None = None, error_code: str | None = None) -> dict:
    body = status.phrase if not message else f'{status.phrase} ({message})'
    return error_response(int(status), body, error_code)


def registry_error_response(error: Exception) -> dict:
    """Build the response for a rejected registry operation

    Example:
        >>> registry_error_response(EmptyURLError('URL must be a non-empty string.'))['statusCode']
        400
    """
    status = next(
        (status for error_type, status in ERROR_STATUS.items() if isinstance(error, error_type)),
        HTTPStatus.BAD_REQUEST,
    )
    return status_response(status, str(error), getattr(error, 'error_code', None))
