"""Redis-backed payment receipts and payout outbox

The payment rail records every settled incoming transfer as a receipt hash
(<prefix>:payments:<id>:receipt). Spending a receipt sets its claim flag
(<prefix>:payments:<id>:claimed) with SET NX, so two mints racing for the same
payment can't both succeed.

Payout instructions are appended as JSON documents to a Redis list
(<prefix>:payouts). An external settlement worker pops them (LPOP) and moves
the funds on the payment rail.
"""

import json
import logging
from dataclasses import asdict

from beartype import beartype

from slugregistry.models import PayoutModel, PaymentReceiptModel
from slugregistry.dao.base import PayoutBaseDAO
from slugregistry.dao.redis.mixins import RedisClientMixin
from slugregistry.dao.redis.helpers import handle_redis_connection_error, to_int
from slugregistry.dao.exceptions import PaymentNotFoundError, PaymentAlreadyClaimedError
from slugregistry.utils.constants import NATIVE_ASSET


logger = logging.getLogger(__name__)


class PayoutRedisDAO(RedisClientMixin, PayoutBaseDAO):
    @handle_redis_connection_error
    @beartype
    def record_receipt(self, payment_id: str, payer: str, amount: int, **kwargs) -> PaymentReceiptModel:
        self.redis.hset(self.keys.payment_receipt_key(payment_id), mapping={'payer': payer, 'amount': amount})
        logger.debug('Recorded payment receipt.', extra={'payment_id': payment_id, 'payer': payer, 'amount': amount})
        return PaymentReceiptModel(payment_id=payment_id, payer=payer, amount=amount)

    @handle_redis_connection_error
    @beartype
    def receipt(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        fields = self.redis.hgetall(self.keys.payment_receipt_key(payment_id))
        if not fields:
            raise PaymentNotFoundError(f"No payment received under id '{payment_id}'.")

        return PaymentReceiptModel(
            payment_id=payment_id,
            payer=fields['payer'],
            amount=to_int(fields['amount']),
            claimed=bool(self.redis.exists(self.keys.payment_claimed_key(payment_id))),
        )

    @handle_redis_connection_error
    @beartype
    def claim(self, payment_id: str, **kwargs) -> PaymentReceiptModel:
        receipt = self.receipt(payment_id)
        if not self.redis.set(self.keys.payment_claimed_key(payment_id), 1, nx=True):
            raise PaymentAlreadyClaimedError(f"Payment '{payment_id}' was already claimed.")
        return PaymentReceiptModel(payment_id=payment_id, payer=receipt.payer, amount=receipt.amount)

    @handle_redis_connection_error
    @beartype
    def unclaim(self, payment_id: str, **kwargs) -> None:
        self.redis.delete(self.keys.payment_claimed_key(payment_id))

    @handle_redis_connection_error
    @beartype
    def release(self, recipient: str, amount: int, reason: str, asset: str = NATIVE_ASSET, **kwargs) -> PayoutModel:
        payout = PayoutModel(recipient=recipient, amount=amount, asset=asset, reason=reason)
        self.redis.rpush(self.keys.payouts_key(), json.dumps(asdict(payout)))
        logger.debug('Queued payout.', extra={'recipient': recipient, 'amount': amount, 'asset': asset, 'reason': reason})
        return payout

    @handle_redis_connection_error
    def pending(self, **kwargs) -> list[PayoutModel]:
        return [PayoutModel(**json.loads(item)) for item in self.redis.lrange(self.keys.payouts_key(), 0, -1)]
