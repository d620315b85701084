"""Abstract base class for registry data access objects (DAOs).

The registry store owns every piece of mutable registry state: the slug→URL
and slug→id maps, the id→record map, the mint counter, per-address balances
and the operator settings (fee share, pause flag). Nothing outside the
registry services writes to it.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from slugregistry.models import SlugRecordModel, MintPlan
        >>> from slugregistry.dao.redis import RegistryRedisDAO

        >>> dao = RegistryRedisDAO(prefix='slugregistry:dev')
        >>> record = SlugRecordModel(slug='vanity', is_custom=True, sequence_id=dao.count() + 1)
        >>> dao.commit_mint(MintPlan(record=record, url='https://example.com', owner='0xabc'))

        >>> dao.url_of('vanity')
        'https://example.com'
        >>> dao.id_of('vanity')
        1
"""

from abc import ABC, abstractmethod

from slugregistry.models import SlugRecordModel, MintPlan


class RegistryBaseDAO(ABC):
    """Interface for registry data access objects (DAOs).

    Methods:
        exists(slug) -> bool
        url_of(slug) -> str                  (SlugNotFoundError)
        id_of(slug) -> int                   (SlugNotFoundError)
        record(sequence_id) -> SlugRecordModel (RecordNotFoundError)
        count() -> int
        commit_mint(plan) -> RegistryBaseDAO (SlugAlreadyExistsError)
        revert_mint(plan) -> RegistryBaseDAO
        set_url(slug, url) -> RegistryBaseDAO (SlugNotFoundError)
        balance(address) -> int
        credit(address, amount) -> int
        zero_balance(address) -> int
        fee_share_bips() -> int | None
        set_fee_share_bips(value) -> RegistryBaseDAO
        paused() -> bool
        set_paused(value) -> RegistryBaseDAO

    Every implementation raises DataStoreError on connection or I/O failures.

    Subclassing:
        Datastore-specific implementations (e.g., RegistryRedisDAO or
        RegistryMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Records never expire and are never deleted, except by revert_mint()
          undoing a mint that failed after its commit.
    """

    @abstractmethod
    def exists(self, slug: str, **kwargs) -> bool:
        """Return True if the slug is mapped to a URL."""
        pass

    @abstractmethod
    def url_of(self, slug: str, **kwargs) -> str:
        """Return the URL mapped to a slug.

        Raises:
            SlugNotFoundError: If the slug is not registered.
        """
        pass

    @abstractmethod
    def id_of(self, slug: str, **kwargs) -> int:
        """Return the sequence id of a slug's record.

        Raises:
            SlugNotFoundError: If the slug is not registered.
        """
        pass

    @abstractmethod
    def record(self, sequence_id: int, **kwargs) -> SlugRecordModel:
        """Return the record minted with a sequence id.

        Raises:
            RecordNotFoundError: If no record carries this sequence id.
        """
        pass

    @abstractmethod
    def count(self, **kwargs) -> int:
        """Return the mint counter (the sequence id of the latest record, 0 if none)."""
        pass

    @abstractmethod
    def commit_mint(self, plan: MintPlan, **kwargs) -> 'RegistryBaseDAO':
        """Apply a mint as a single unit of work.

        Stores the URL under the slug, the slug→id and id→record mappings,
        moves the counter to the record's sequence id and applies the balance
        credits.

        Args:
            plan (MintPlan):
                Every mutation of the mint.

        Returns:
            RegistryBaseDAO: self (for method chaining)

        Raises:
            SlugAlreadyExistsError:
                If the slug is already registered.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def revert_mint(self, plan: MintPlan, **kwargs) -> 'RegistryBaseDAO':
        """Undo a previously committed plan (used when a later mint step fails)."""
        pass

    @abstractmethod
    def set_url(self, slug: str, url: str, **kwargs) -> 'RegistryBaseDAO':
        """Overwrite the URL of a registered slug.

        Raises:
            SlugNotFoundError: If the slug is not registered.
        """
        pass

    @abstractmethod
    def balance(self, address: str, **kwargs) -> int:
        """Return the withdrawable balance of an address (0 if never credited)."""
        pass

    @abstractmethod
    def credit(self, address: str, amount: int, **kwargs) -> int:
        """Add an amount to an address's balance and return the new balance.

        A negative amount undoes an earlier credit.
        """
        pass

    @abstractmethod
    def zero_balance(self, address: str, **kwargs) -> int:
        """Reset an address's balance to zero and return the previous balance."""
        pass

    @abstractmethod
    def fee_share_bips(self, **kwargs) -> int | None:
        """Return the stored referrer fee share, None if it was never set."""
        pass

    @abstractmethod
    def set_fee_share_bips(self, value: int, **kwargs) -> 'RegistryBaseDAO':
        pass

    @abstractmethod
    def paused(self, **kwargs) -> bool:
        pass

    @abstractmethod
    def set_paused(self, value: bool, **kwargs) -> 'RegistryBaseDAO':
        pass
