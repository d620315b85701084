from slugregistry.models.record_model import SlugRecordModel
from slugregistry.models.mint_model import Settlement, MintPlan, MintEvent
from slugregistry.models.payout_model import PayoutModel, PaymentReceiptModel


__all__ = [
    'SlugRecordModel',
    'Settlement',
    'MintPlan',
    'MintEvent',
    'PayoutModel',
    'PaymentReceiptModel',
]
