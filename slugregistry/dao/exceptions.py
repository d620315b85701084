"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    SlugNotFoundError:
        Raised when a slug is not registered in the data store.

    SlugAlreadyExistsError:
        Raised when attempting to register a slug that already exists.

    RecordNotFoundError:
        Raised when no record exists for a sequence id.

    TokenNotFoundError:
        Raised when the ownership ledger has no token for a sequence id.

    TokenAlreadyIssuedError:
        Raised when issuing a token id that is already owned.

    NotTokenOwnerError:
        Raised when a token transfer is requested by someone other than its owner.

    MintConflictError:
        Raised when another mint took the next sequence id or the slug first.

    PaymentNotFoundError:
        Raised when the payment rail recorded no payment under an id.

    PaymentAlreadyClaimedError:
        Raised when a received payment was already spent on a mint or credit.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, time, OOM, etc.).

Example:
    >>> from slugregistry.dao.exceptions import SlugNotFoundError
    >>> raise SlugNotFoundError("Slug 'abc' not found.")
    Traceback (most recent call last):
        ...
    slugregistry.dao.exceptions.SlugNotFoundError: Slug 'abc' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class SlugNotFoundError(DAOError):
    """Exception raised when a slug is not found in the data store."""

    error_code = 'dao:slug_not_found'


class SlugAlreadyExistsError(DAOError):
    """Exception raised when attempting to register a slug that already exists in the data store."""

    error_code = 'dao:slug_already_exists'


class RecordNotFoundError(DAOError):
    """Exception raised when no record exists for a sequence id."""

    error_code = 'dao:record_not_found'


class TokenNotFoundError(DAOError):
    """Exception raised when the ownership ledger doesn't know a token id."""

    error_code = 'dao:token_not_found'


class TokenAlreadyIssuedError(DAOError):
    """Exception raised when issuing a token id that already has an owner."""

    error_code = 'dao:token_already_issued'


class NotTokenOwnerError(DAOError):
    """Exception raised when a transfer is requested by someone other than the token owner."""

    error_code = 'dao:not_token_owner'


class MintConflictError(DAOError):
    """Exception raised when a concurrent mint committed the same sequence id or slug first."""

    error_code = 'dao:mint_conflict'


class PaymentNotFoundError(DAOError):
    """Exception raised when no received payment is recorded under an id."""

    error_code = 'dao:payment_not_found'


class PaymentAlreadyClaimedError(DAOError):
    """Exception raised when claiming a received payment a second time."""

    error_code = 'dao:payment_already_claimed'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'
