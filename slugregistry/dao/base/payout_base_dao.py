"""Abstract base class for the payment rail's registry-side ledger.

Incoming funds are recorded by the payment rail as receipts once the transfer
has settled. The registry only spends money it finds in a receipt, and spends
each receipt once.

Outgoing funds (refunds, withdrawals, recovered foreign assets) are recorded as
payout instructions. Settling them on the payment rail is left to an external
worker consuming the outbox.
"""

from abc import ABC, abstractmethod

from slugregistry.models import PayoutModel, PaymentReceiptModel
from slugregistry.utils.constants import NATIVE_ASSET


class PayoutBaseDAO(ABC):
    """Interface for payment receipts and the payout outbox.

    Methods:
        record_receipt(payment_id, payer, amount) -> PaymentReceiptModel:
            Record a settled incoming payment. Called by the payment rail.

        receipt(payment_id) -> PaymentReceiptModel:
            Return a recorded payment, with its claimed flag.
            Raises PaymentNotFoundError if nothing is recorded under the id.

        claim(payment_id) -> PaymentReceiptModel:
            Atomically mark a payment as spent and return it.
            Raises PaymentNotFoundError or PaymentAlreadyClaimedError.

        unclaim(payment_id) -> None:
            Give back a claim whose mint or credit was rolled back.

        release(recipient, amount, reason, asset='native') -> PayoutModel:
            Record a payout instruction and return it.
            Raises DataStoreError on connection or write failure.

        pending() -> list[PayoutModel]:
            Return the payout instructions not yet consumed, oldest first.
    """

    @abstractmethod
    def record_receipt(self, payment_id: str, payer: str, amount: int, **kwargs) -> PaymentReceiptModel:
        pass

    @abstractmethod
    def receipt(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        pass

    @abstractmethod
    def claim(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        pass

    @abstractmethod
    def unclaim(self, payment_id: str, **kwargs) -> None:
        pass

    @abstractmethod
    def release(self, recipient: str, amount: int, reason: str, asset: str = NATIVE_ASSET, **kwargs) -> PayoutModel:
        pass

    @abstractmethod
    def pending(self, **kwargs) -> list[PayoutModel]:
        pass
