from dataclasses import dataclass, field

from slugregistry.models.record_model import SlugRecordModel


# fmt: off
@dataclass(frozen=True)
class Settlement:
    refund: int                 # Excess payment returned to the payer
    referrer: str               # Address credited with the referrer share (operator when no referrer)
    referrer_credit: int        # cost * fee_share_bips // 10000
    operator_credit: int        # cost - referrer_credit
    credits: dict[str, int] = field(default_factory=dict)  # Balance credits per address
# fmt: on


@dataclass(frozen=True)
class MintPlan:
    """Every mutation a mint applies, gathered before anything is written.

    Stores commit a plan as a single unit of work and can revert it if a later
    step of the mint fails.

    Attributes:
        record (SlugRecordModel):
            The record to store.
        url (str):
            URL mapped to the record's slug.
        owner (str):
            Address receiving the ownership token.
        credits (dict[str, int]):
            Balance credits per address.
        refund (int):
            Payment returned to the owner after the commit.
        payment_id (str):
            Received payment funding the mint, claimed before the commit.
            Empty when the payment was not verified against a receipt.
    """

    record: SlugRecordModel
    url: str
    owner: str
    credits: dict[str, int] = field(default_factory=dict)
    refund: int = 0
    payment_id: str = ''


@dataclass(frozen=True)
class MintEvent:
    """Notification emitted after every successful mint."""

    sender: str
    url: str
    slug: str
    sequence_id: int
    is_custom: bool
    referrer: str
