"""Fee accounting for custom slugs

Custom slug fees are split between an optional referrer and the registry
operator. Credits accumulate as per-address balances held in the registry
store, which owners withdraw through the payout outbox.

Classes:
    FeeLedger:
        Settle payments, keep balances and process withdrawals.

Example:
    >>> from slugregistry.dao.memory import RegistryMemoryDAO, PayoutMemoryDAO
    >>> ledger = FeeLedger(RegistryMemoryDAO(), PayoutMemoryDAO(), operator='0xoperator')
    >>> settlement = ledger.settle_payment(amount_paid=150, cost=100, referrer='0xref', operator='0xoperator')
    >>> settlement.refund, settlement.referrer_credit, settlement.operator_credit
    (50, 50, 50)
"""

import logging

from slugregistry.models import Settlement
from slugregistry.dao.base import RegistryBaseDAO, PayoutBaseDAO
from slugregistry.exceptions import InsufficientPaymentError, InvalidFeeShareError, ZeroBalanceError
from slugregistry.utils.constants import (
    NULL_ADDRESS,
    MAX_FEE_SHARE_BIPS,
    DEFAULT_FEE_SHARE_BIPS,
    BALANCE_CREDITED,
    BALANCE_WITHDRAWN,
    FEE_SHARE_UPDATED,
)


logger = logging.getLogger(__name__)


def validate_fee_share_bips(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFeeShareError(f'Fee share must be an integer number of basis points (given type: {type(value)}).')
    if not 0 <= value <= MAX_FEE_SHARE_BIPS:
        raise InvalidFeeShareError(f'Fee share must be between 0 and {MAX_FEE_SHARE_BIPS} basis points (given value: {value}).')
    return value


class FeeLedger:
    """Split custom slug fees and manage withdrawable balances

    Attributes:
        store (RegistryBaseDAO):
            Registry store holding balances and the fee share setting.
        payouts (PayoutBaseDAO):
            Outbox receiving withdrawal payouts.
        operator (str):
            Registry operator address.
        default_fee_share_bips (int):
            Fee share used until the operator sets one.
    """

    def __init__(
        self,
        store: RegistryBaseDAO,
        payouts: PayoutBaseDAO,
        operator: str,
        default_fee_share_bips: int = DEFAULT_FEE_SHARE_BIPS,
    ):
        self.store = store
        self.payouts = payouts
        self.operator = operator
        self.default_fee_share_bips = validate_fee_share_bips(default_fee_share_bips)

    @property
    def fee_share_bips(self) -> int:
        stored = self.store.fee_share_bips()
        return self.default_fee_share_bips if stored is None else stored

    def set_fee_share_bips(self, value: int) -> None:
        """Set the referrer share of every future custom slug fee

        Raises:
            InvalidFeeShareError: If value is outside [0, 10000].
        """
        validate_fee_share_bips(value)
        self.store.set_fee_share_bips(value)
        logger.info('Updated referrer fee share.', extra={'event': FEE_SHARE_UPDATED, 'fee_share_bips': value})

    def settle_payment(self, amount_paid: int, cost: int, referrer: str, operator: str) -> Settlement:
        """Compute refund and fee split of a custom slug payment

        Nothing is written here: the mint commits the returned credits together
        with the record, so a rejected mint never touches balances.

        Args:
            amount_paid (int):
                Payment attached to the mint.
            cost (int):
                Price of the requested slug.
            referrer (str):
                Referrer address. The null address routes the whole fee to the operator.
            operator (str):
                Operator address.

        Returns:
            Settlement: refund, referrer and operator credits, and credits per address.

        Raises:
            InsufficientPaymentError: If amount_paid < cost.
        """
        if amount_paid < cost:
            raise InsufficientPaymentError(f'Payment of {amount_paid} does not cover the cost of {cost}.')

        if referrer == NULL_ADDRESS:
            referrer = operator

        referrer_credit = cost * self.fee_share_bips // MAX_FEE_SHARE_BIPS
        operator_credit = cost - referrer_credit

        credits: dict[str, int] = {}
        for address, amount in ((referrer, referrer_credit), (operator, operator_credit)):
            if amount:
                credits[address] = credits.get(address, 0) + amount

        return Settlement(
            refund=amount_paid - cost,
            referrer=referrer,
            referrer_credit=referrer_credit,
            operator_credit=operator_credit,
            credits=credits,
        )

    def balance_of(self, address: str) -> int:
        return self.store.balance(address)

    def receive_payment(self, amount: int) -> int:
        """Credit an unsolicited payment to the operator

        Returns:
            int: the operator's new balance.
        """
        if amount < 0:
            raise ValueError(f'Payment must be a non-negative integer (given value: {amount}).')
        if amount == 0:
            return self.store.balance(self.operator)

        balance = self.store.credit(self.operator, amount)
        logger.info('Credited unsolicited payment to operator.', extra={'event': BALANCE_CREDITED, 'amount': amount})
        return balance

    def withdraw(self, address: str) -> int:
        """Pay out an address's whole balance

        The balance is zeroed before the payout is released, so nothing running
        during the release can observe (and withdraw) the same funds again. If
        the release fails, the balance is restored.

        Returns:
            int: the amount paid out.

        Raises:
            ZeroBalanceError: If the address has nothing to withdraw.
        """
        amount = self.store.balance(address)
        if amount <= 0:
            raise ZeroBalanceError(f"Address '{address}' has no balance to withdraw.")

        amount = self.store.zero_balance(address)
        try:
            self.payouts.release(address, amount, reason='withdrawal')
        except Exception:
            self.store.credit(address, amount)
            raise

        logger.info('Withdrew balance.', extra={'event': BALANCE_WITHDRAWN, 'address': address, 'amount': amount})
        return amount
