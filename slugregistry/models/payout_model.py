from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class PayoutModel:
    recipient: str       # Address receiving the funds
    amount: int          # Amount in the asset's smallest unit
    asset: str           # 'native' for the registry's payment currency
    reason: str          # 'refund', 'withdrawal' or 'recovery'


@dataclass(frozen=True)
class PaymentReceiptModel:
    payment_id: str      # Identifier the payment rail assigned to the incoming transfer
    payer: str           # Address the funds came from
    amount: int          # Native amount received, in the smallest unit
    claimed: bool = False  # True once spent on a mint or credited to the operator
# fmt: on
