from dataclasses import dataclass, field, replace

from beartype import beartype

from slugregistry.models import PayoutModel, PaymentReceiptModel
from slugregistry.dao.base import PayoutBaseDAO
from slugregistry.dao.exceptions import PaymentNotFoundError, PaymentAlreadyClaimedError
from slugregistry.utils.constants import NATIVE_ASSET


@dataclass(eq=False)
class PayoutMemoryDAO(PayoutBaseDAO):
    """In-process payment ledger; payouts are kept in release order."""

    receipts: dict[str, PaymentReceiptModel] = field(default_factory=dict)
    payouts: list[PayoutModel] = field(default_factory=list)

    @beartype
    def record_receipt(self, payment_id: str, payer: str, amount: int, **kwargs) -> PaymentReceiptModel:
        self.receipts[payment_id] = PaymentReceiptModel(payment_id=payment_id, payer=payer, amount=amount)
        return self.receipts[payment_id]

    @beartype
    def receipt(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        try:
            return self.receipts[payment_id]
        except KeyError:
            raise PaymentNotFoundError(f"No payment received under id '{payment_id}'.") from None

    @beartype
    def claim(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        receipt = self.receipt(payment_id)
        if receipt.claimed:
            raise PaymentAlreadyClaimedError(f"Payment '{payment_id}' was already claimed.")
        self.receipts[payment_id] = replace(receipt, claimed=True)
        return receipt

    @beartype
    def unclaim(self, payment_id: str, **kwargs) -> None:
        self.receipts[payment_id] = replace(self.receipt(payment_id), claimed=False)

    @beartype
    def release(self, recipient: str, amount: int, reason: str, asset: str = NATIVE_ASSET, **kwargs) -> PayoutModel:
        payout = PayoutModel(recipient=recipient, amount=amount, asset=asset, reason=reason)
        self.payouts.append(payout)
        return payout

    def pending(self, **kwargs) -> list[PayoutModel]:
        return list(self.payouts)
