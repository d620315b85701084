"""In-process registry store

Keeps registry state in plain dictionaries owned by the DAO instance. Used for
local runs and tests. State lives as long as the instance.
"""

from dataclasses import dataclass, field

from beartype import beartype

from slugregistry.models import SlugRecordModel, MintPlan
from slugregistry.dao.base import RegistryBaseDAO
from slugregistry.dao.exceptions import SlugAlreadyExistsError, SlugNotFoundError, RecordNotFoundError, MintConflictError


@dataclass(eq=False)
class RegistryMemoryDAO(RegistryBaseDAO):
    urls: dict[str, str] = field(default_factory=dict)
    ids: dict[str, int] = field(default_factory=dict)
    records: dict[int, SlugRecordModel] = field(default_factory=dict)
    balances: dict[str, int] = field(default_factory=dict)
    counter: int = 0
    fee_share: int | None = None
    is_paused: bool = False

    @beartype
    def exists(self, slug: str, **kwargs) -> bool:
        return slug in self.urls

    @beartype
    def url_of(self, slug: str, **kwargs) -> str:
        try:
            return self.urls[slug]
        except KeyError:
            raise SlugNotFoundError(f"Slug '{slug}' not found.") from None

    @beartype
    def id_of(self, slug: str, **kwargs) -> int:
        try:
            return self.ids[slug]
        except KeyError:
            raise SlugNotFoundError(f"Slug '{slug}' not found.") from None

    @beartype
    def record(self, sequence_id: int, **kwargs) -> SlugRecordModel:
        try:
            return self.records[sequence_id]
        except KeyError:
            raise RecordNotFoundError(f'Record with sequence id {sequence_id} not found.') from None

    def count(self, **kwargs) -> int:
        return self.counter

    @beartype
    def commit_mint(self, plan: MintPlan, **kwargs) -> 'RegistryMemoryDAO':
        record = plan.record
        if record.slug in self.urls:
            raise SlugAlreadyExistsError(f"Slug '{record.slug}' already exists.")
        if self.counter != record.sequence_id - 1:
            raise MintConflictError(f'Sequence id {record.sequence_id} is no longer next (counter is at {self.counter}).')

        self.urls[record.slug] = plan.url
        self.ids[record.slug] = record.sequence_id
        self.records[record.sequence_id] = record
        self.counter = record.sequence_id
        for address, amount in plan.credits.items():
            self.balances[address] = self.balances.get(address, 0) + amount
        return self

    @beartype
    def revert_mint(self, plan: MintPlan, **kwargs) -> 'RegistryMemoryDAO':
        record = plan.record
        self.urls.pop(record.slug, None)
        self.ids.pop(record.slug, None)
        self.records.pop(record.sequence_id, None)
        if self.counter == record.sequence_id:
            self.counter -= 1
        for address, amount in plan.credits.items():
            self.balances[address] = self.balances.get(address, 0) - amount
        return self

    @beartype
    def set_url(self, slug: str, url: str, **kwargs) -> 'RegistryMemoryDAO':
        if slug not in self.urls:
            raise SlugNotFoundError(f"Slug '{slug}' not found.")
        self.urls[slug] = url
        return self

    @beartype
    def balance(self, address: str, **kwargs) -> int:
        return self.balances.get(address, 0)

    @beartype
    def credit(self, address: str, amount: int, **kwargs) -> int:
        self.balances[address] = self.balances.get(address, 0) + amount
        return self.balances[address]

    @beartype
    def zero_balance(self, address: str, **kwargs) -> int:
        return self.balances.pop(address, 0)

    def fee_share_bips(self, **kwargs) -> int | None:
        return self.fee_share

    @beartype
    def set_fee_share_bips(self, value: int, **kwargs) -> 'RegistryMemoryDAO':
        self.fee_share = value
        return self

    def paused(self, **kwargs) -> bool:
        return self.is_paused

    @beartype
    def set_paused(self, value: bool, **kwargs) -> 'RegistryMemoryDAO':
        self.is_paused = value
        return self
