from dataclasses import dataclass, field

from beartype import beartype

from slugregistry.dao.base import OwnershipBaseDAO
from slugregistry.dao.exceptions import TokenAlreadyIssuedError, TokenNotFoundError, NotTokenOwnerError


@dataclass(eq=False)
class OwnershipMemoryDAO(OwnershipBaseDAO):
    """In-process ownership ledger (token id -> owner address)."""

    owners: dict[int, str] = field(default_factory=dict)

    @beartype
    def issue(self, owner: str, token_id: int, **kwargs) -> 'OwnershipMemoryDAO':
        if token_id in self.owners:
            raise TokenAlreadyIssuedError(f'Token {token_id} has already been issued.')
        self.owners[token_id] = owner
        return self

    @beartype
    def owner_of(self, token_id: int, **kwargs) -> str:
        try:
            return self.owners[token_id]
        except KeyError:
            raise TokenNotFoundError(f'Token {token_id} not found.') from None

    @beartype
    def transfer(self, sender: str, recipient: str, token_id: int, **kwargs) -> 'OwnershipMemoryDAO':
        if self.owner_of(token_id) != sender:
            raise NotTokenOwnerError(f"Address '{sender}' doesn't own token {token_id}.")
        self.owners[token_id] = recipient
        return self

    @beartype
    def revoke(self, token_id: int, **kwargs) -> 'OwnershipMemoryDAO':
        self.owner_of(token_id)
        del self.owners[token_id]
        return self

    @beartype
    def balance_of(self, owner: str, **kwargs) -> int:
        return sum(1 for holder in self.owners.values() if holder == owner)
