"""Abstract base class for ownership ledgers.

The ownership ledger tracks which address owns each record's token. The
registry only issues new tokens and reads current ownership. Transfers are the
ledger's business.
"""

from abc import ABC, abstractmethod


class OwnershipBaseDAO(ABC):
    """Interface for ownership ledgers.

    Methods:
        issue(owner: str, token_id: int) -> OwnershipBaseDAO:
            Assign a new token to an owner.
            Raises TokenAlreadyIssuedError if the token already has an owner.

        owner_of(token_id: int) -> str:
            Return the current owner of a token.
            Raises TokenNotFoundError if the token was never issued.

        transfer(sender: str, recipient: str, token_id: int) -> OwnershipBaseDAO:
            Move a token from its current owner to a recipient.
            Raises NotTokenOwnerError if sender doesn't own the token.

        revoke(token_id: int) -> OwnershipBaseDAO:
            Remove a token. Only used to undo an issuance inside a failed mint.

        balance_of(owner: str) -> int:
            Return the number of tokens held by an owner.
    """

    @abstractmethod
    def issue(self, owner: str, token_id: int, **kwargs) -> 'OwnershipBaseDAO':
        pass

    @abstractmethod
    def owner_of(self, token_id: int, **kwargs) -> str:
        pass

    @abstractmethod
    def transfer(self, sender: str, recipient: str, token_id: int, **kwargs) -> 'OwnershipBaseDAO':
        pass

    @abstractmethod
    def revoke(self, token_id: int, **kwargs) -> 'OwnershipBaseDAO':
        pass

    @abstractmethod
    def balance_of(self, owner: str, **kwargs) -> int:
        pass
