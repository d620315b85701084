"""Application-specific exceptions.

Every exception carries an `error_code` which Lambda handlers return to
clients next to the human readable message.

Example:
    >>> from slugregistry.exceptions import EmptyURLError
    >>> try:
    ...     raise EmptyURLError('URL must be a non-empty string.')
    ... except EmptyURLError as e:
    ...     e.error_code
    'mint:empty_url'
"""


class SlugRegistryError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:slug_registry_error'


class RegistryError(SlugRegistryError):
    """Base exception for rejected registry operations."""

    error_code = 'registry:registry_error'


class EmptyURLError(RegistryError):
    """Raised when a mint or edit is requested with an empty URL."""

    error_code = 'mint:empty_url'


class EmptySlugError(RegistryError):
    """Raised when a slug query is made with an empty slug."""

    error_code = 'query:empty_slug'


class SelfReferralError(RegistryError):
    """Raised when the caller names itself as referrer."""

    error_code = 'mint:self_referral'


class InsufficientPaymentError(RegistryError):
    """Raised when the attached payment doesn't cover the custom slug cost."""

    error_code = 'fees:insufficient_payment'


class UnverifiedPaymentError(RegistryError):
    """Raised when a payment receipt was not paid by the caller."""

    error_code = 'fees:unverified_payment'


class NotOwnerError(RegistryError):
    """Raised when the caller doesn't own the record's token."""

    error_code = 'auth:not_owner'


class NotOperatorError(RegistryError):
    """Raised when a non-operator calls an administrative operation."""

    error_code = 'auth:not_operator'


class ZeroBalanceError(RegistryError):
    """Raised when withdrawing from an address without balance."""

    error_code = 'fees:zero_balance'


class InvalidFeeShareError(RegistryError):
    """Raised when the referrer fee share is outside [0, 10000] basis points."""

    error_code = 'fees:invalid_fee_share'


class RegistryPausedError(RegistryError):
    """Raised when minting while the registry is paused."""

    error_code = 'mint:registry_paused'


class SlugSpaceExhaustedError(RegistryError):
    """Raised when collision avoidance gives up without finding a free slug."""

    error_code = 'mint:slug_space_exhausted'


class NativeAssetRecoveryError(RegistryError):
    """Raised when recovering the native currency, which is held as balances."""

    error_code = 'admin:native_asset_recovery'


class ConfigurationError(SlugRegistryError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
