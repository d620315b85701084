"""Slug registry: the only write path for records

The registry ties together slug allocation, pricing, fee settlement, record
storage and token issuance. Every public operation either completes or raises
before leaving any trace.

Classes:
    Registry:
        Mint slugs, edit URLs, withdraw balances, answer queries and run the
        operator's administrative actions.

Example:
    >>> from slugregistry.dao.memory import RegistryMemoryDAO, OwnershipMemoryDAO, PayoutMemoryDAO
    >>> registry = Registry(RegistryMemoryDAO(), OwnershipMemoryDAO(), PayoutMemoryDAO(), operator='0xoperator')
    >>> slug = registry.mint('0xalice', 'https://example.com')
    >>> len(slug)
    8
    >>> registry.url_of(slug)
    'https://example.com'
"""

import logging
from collections.abc import Callable

from slugregistry.models import SlugRecordModel, MintPlan, MintEvent, PaymentReceiptModel
from slugregistry.dao.base import RegistryBaseDAO, OwnershipBaseDAO, PayoutBaseDAO
from slugregistry.dao.exceptions import SlugAlreadyExistsError, PaymentAlreadyClaimedError
from slugregistry.exceptions import (
    EmptyURLError,
    EmptySlugError,
    SelfReferralError,
    NotOwnerError,
    NotOperatorError,
    RegistryPausedError,
    NativeAssetRecoveryError,
    UnverifiedPaymentError,
)
from slugregistry.services.pricing import PricingEngine
from slugregistry.services.fee_ledger import FeeLedger
from slugregistry.services.renderer import token_uri
from slugregistry.utils.slugs import allocate_slug
from slugregistry.utils.constants import (
    NULL_ADDRESS,
    NATIVE_ASSET,
    DEFAULT_FEE_SHARE_BIPS,
    DEFAULT_MAX_ALLOCATION_ATTEMPTS,
    SLUG_MINTED,
    MINT_REVERTED,
    URL_EDITED,
    REGISTRY_PAUSED,
    REGISTRY_UNPAUSED,
    FOREIGN_ASSET_RECOVERED,
    PAYMENT_RECEIVED,
)


logger = logging.getLogger(__name__)

type MintListener = Callable[[MintEvent], None]


class Registry:
    """Registry of slug→URL mappings backed by transferable records

    Attributes:
        store (RegistryBaseDAO):
            Owns slugs, URLs, records, the counter, balances and settings.
        ownership (OwnershipBaseDAO):
            Ownership ledger issuing one token per record.
        payouts (PayoutBaseDAO):
            Payment receipts, and the outbox for refunds, withdrawals and recovered assets.
        operator (str):
            Address allowed to run administrative actions; receives fees.
        pricing (PricingEngine):
            Custom slug price table.
        fees (FeeLedger):
            Fee split and balances.

    Methods:
        mint(caller, url, slug='', referrer=NULL_ADDRESS, payment=0, payment_id='') -> str
        edit_url(caller, sequence_id, new_url) -> None
        withdraw(caller) -> int
        transfer(caller, recipient, sequence_id) -> None
        cost(length) -> int
        url_of(slug) -> str
        id_of(slug) -> int
        record_of(sequence_id) -> SlugRecordModel
        owner_of(sequence_id) -> str
        metadata_of(sequence_id) -> str
        balance_of(address) -> int
        receive_payment(sender, amount) -> None
        receive_verified_payment(sender, payment_id) -> int
        set_fee_share_bips(caller, value) -> None
        pause(caller) / unpause(caller) -> None
        recover_foreign_asset(caller, asset, amount) -> None
    """

    def __init__(
        self,
        store: RegistryBaseDAO,
        ownership: OwnershipBaseDAO,
        payouts: PayoutBaseDAO,
        operator: str,
        pricing: PricingEngine | None = None,
        default_fee_share_bips: int = DEFAULT_FEE_SHARE_BIPS,
        max_allocation_attempts: int = DEFAULT_MAX_ALLOCATION_ATTEMPTS,
    ):
        if not operator or operator == NULL_ADDRESS:
            raise ValueError('Operator must be a non-null address.')

        self.store = store
        self.ownership = ownership
        self.payouts = payouts
        self.operator = operator
        self.pricing = pricing or PricingEngine()
        self.fees = FeeLedger(store, payouts, operator, default_fee_share_bips=default_fee_share_bips)
        self.max_allocation_attempts = max_allocation_attempts
        self._listeners: list[MintListener] = []

    # -------------------------------
    # Minting
    # -------------------------------

    def subscribe(self, listener: MintListener) -> None:
        """Register a callback receiving a MintEvent after every successful mint"""
        self._listeners.append(listener)

    def mint(self, caller: str, url: str, slug: str = '', referrer: str = NULL_ADDRESS, payment: int = 0, payment_id: str = '') -> str:
        """Mint a record mapping a slug to a URL

        Procedure:
        - Step 1: Validate the request (pause flag, URL, slug availability, referrer, payment receipt)
        - Step 2: Pick the slug: generate a free one, or price the custom one
        - Step 3: Claim the payment receipt, then commit record, URL, counter and
                  fee credits in one unit of work
        - Step 4: Issue the record's token to the caller
        - Step 5: Refund any excess payment
        - Step 6: Notify listeners

        Steps 1-2 write nothing. If step 3, 4 or 5 fails, the steps before it are
        undone and the error propagates.

        `payment` is trusted as given and is meant for in-process callers that
        already hold the funds. Callers reaching the registry over the network
        pass `payment_id` instead: the amount is then read from the receipt the
        payment rail recorded, and the receipt is spent by this mint.

        Args:
            caller (str):
                Address minting the record; becomes the token owner.
            url (str):
                Non-empty URL.
            slug (str):
                Custom slug, or '' for a free generated one.
            referrer (str):
                Address receiving the referrer share of a custom slug fee.
            payment (int):
                Amount attached to the request, in the smallest currency unit.
            payment_id (str):
                Receipt of a payment the caller made on the payment rail.

        Returns:
            str: the minted slug.

        Raises:
            RegistryPausedError: If minting is paused.
            EmptyURLError: If url is empty.
            SlugAlreadyExistsError: If the custom slug is taken.
            SelfReferralError: If referrer == caller.
            PaymentNotFoundError: If no payment was received under payment_id.
            UnverifiedPaymentError: If the caller didn't make that payment.
            PaymentAlreadyClaimedError: If that payment was already spent.
            MintConflictError: If a concurrent mint took the sequence id or slug first.
            InsufficientPaymentError: If payment doesn't cover a custom slug's cost.
            SlugSpaceExhaustedError: If no free slug could be generated.
        """
        # 1- Validate request
        if payment < 0:
            raise ValueError(f'Payment must be a non-negative integer (given value: {payment}).')
        if self.store.paused():
            raise RegistryPausedError('Minting is paused.')
        if not url:
            raise EmptyURLError('URL must be a non-empty string.')
        if slug and self.store.exists(slug):
            raise SlugAlreadyExistsError(f"Slug '{slug}' already exists.")
        if referrer == caller:
            raise SelfReferralError('Caller cannot refer itself.')
        if payment_id:
            if payment:
                raise ValueError('Pass either a payment amount or a payment receipt, not both.')
            payment = self._verified_receipt(caller, payment_id).amount

        # 2- Pick the slug and settle payment
        counter = self.store.count()
        if not slug:
            slug = allocate_slug(counter, self.store.exists, self.max_allocation_attempts)
            is_custom = False
            refund = 0
            credits = {self.operator: payment} if payment else {}  # donation
        else:
            is_custom = True
            settlement = self.fees.settle_payment(payment, self.pricing.cost(len(slug)), referrer, self.operator)
            refund = settlement.refund
            credits = settlement.credits

        record = SlugRecordModel(slug=slug, is_custom=is_custom, sequence_id=counter + 1)
        plan = MintPlan(record=record, url=url, owner=caller, credits=credits, refund=refund, payment_id=payment_id)

        # 3- Claim receipt and commit, 4- issue token, 5- refund
        self._apply(plan)

        # 6- Notify listeners
        event = MintEvent(
            sender=caller,
            url=url,
            slug=slug,
            sequence_id=record.sequence_id,
            is_custom=is_custom,
            referrer=referrer,
        )
        logger.info(
            'Minted slug.',
            extra={'event': SLUG_MINTED, 'slug': slug, 'sequence_id': record.sequence_id, 'is_custom': is_custom, 'referrer': referrer},
        )
        for listener in self._listeners:
            listener(event)
        return slug

    def _apply(self, plan: MintPlan) -> None:
        if plan.payment_id:
            self.payouts.claim(plan.payment_id)
        try:
            self.store.commit_mint(plan)
        except Exception:
            self._unclaim(plan.payment_id)
            raise

        try:
            self.ownership.issue(plan.owner, plan.record.sequence_id)
        except Exception:
            logger.warning('Token issuance failed. Reverting mint.', extra={'event': MINT_REVERTED, 'slug': plan.record.slug})
            self.store.revert_mint(plan)
            self._unclaim(plan.payment_id)
            raise

        if not plan.refund:
            return
        try:
            self.payouts.release(plan.owner, plan.refund, reason='refund')
        except Exception:
            logger.warning('Refund failed. Reverting mint.', extra={'event': MINT_REVERTED, 'slug': plan.record.slug})
            self.ownership.revoke(plan.record.sequence_id)
            self.store.revert_mint(plan)
            self._unclaim(plan.payment_id)
            raise

    def _verified_receipt(self, caller: str, payment_id: str) -> PaymentReceiptModel:
        receipt = self.payouts.receipt(payment_id)
        if receipt.payer != caller:
            raise UnverifiedPaymentError(f"Payment '{payment_id}' was not made by '{caller}'.")
        if receipt.claimed:
            raise PaymentAlreadyClaimedError(f"Payment '{payment_id}' was already claimed.")
        return receipt

    def _unclaim(self, payment_id: str) -> None:
        if payment_id:
            self.payouts.unclaim(payment_id)

    # -------------------------------
    # Record owner actions
    # -------------------------------

    def edit_url(self, caller: str, sequence_id: int, new_url: str) -> None:
        """Point a record's slug to a new URL

        Raises:
            RecordNotFoundError: If no record has this sequence id.
            NotOwnerError: If caller doesn't own the record's token.
            EmptyURLError: If new_url is empty.
        """
        record = self.store.record(sequence_id)
        if self.ownership.owner_of(sequence_id) != caller:
            raise NotOwnerError(f"Address '{caller}' doesn't own record {sequence_id}.")
        if not new_url:
            raise EmptyURLError('URL must be a non-empty string.')

        self.store.set_url(record.slug, new_url)
        logger.info('Edited URL.', extra={'event': URL_EDITED, 'slug': record.slug, 'sequence_id': sequence_id})

    def transfer(self, caller: str, recipient: str, sequence_id: int) -> None:
        """Hand a record's token over to another address (delegated to the ownership ledger)"""
        self.ownership.transfer(caller, recipient, sequence_id)

    def withdraw(self, caller: str) -> int:
        return self.fees.withdraw(caller)

    # -------------------------------
    # Queries
    # -------------------------------

    def cost(self, length: int) -> int:
        return self.pricing.cost(length)

    def url_of(self, slug: str) -> str:
        if not slug:
            raise EmptySlugError('Slug must be a non-empty string.')
        return self.store.url_of(slug)

    def id_of(self, slug: str) -> int:
        if not slug:
            raise EmptySlugError('Slug must be a non-empty string.')
        return self.store.id_of(slug)

    def record_of(self, sequence_id: int) -> SlugRecordModel:
        return self.store.record(sequence_id)

    def owner_of(self, sequence_id: int) -> str:
        return self.ownership.owner_of(sequence_id)

    def metadata_of(self, sequence_id: int) -> str:
        """Return the record's metadata as a base64 JSON data URI"""
        return token_uri(self.store.record(sequence_id))

    def balance_of(self, address: str) -> int:
        return self.fees.balance_of(address)

    def total_minted(self) -> int:
        return self.store.count()

    @property
    def paused(self) -> bool:
        return self.store.paused()

    @property
    def fee_share_bips(self) -> int:
        return self.fees.fee_share_bips

    # -------------------------------
    # Payments and administration
    # -------------------------------

    def receive_payment(self, sender: str, amount: int) -> None:
        """Accept a payment not tied to any mint; the operator gets all of it"""
        self.fees.receive_payment(amount)
        logger.debug('Received unsolicited payment.', extra={'sender': sender, 'amount': amount})

    def receive_verified_payment(self, sender: str, payment_id: str) -> int:
        """Credit the operator with a payment the rail received from sender

        Returns:
            int: the amount credited.

        Raises:
            PaymentNotFoundError: If no payment was received under payment_id.
            UnverifiedPaymentError: If sender didn't make that payment.
            PaymentAlreadyClaimedError: If that payment was already spent.
        """
        receipt = self._verified_receipt(sender, payment_id)
        self.payouts.claim(payment_id)
        try:
            self.fees.receive_payment(receipt.amount)
        except Exception:
            self.payouts.unclaim(payment_id)
            raise

        logger.info('Received verified payment.', extra={'event': PAYMENT_RECEIVED, 'payment_id': payment_id, 'amount': receipt.amount})
        return receipt.amount

    def set_fee_share_bips(self, caller: str, value: int) -> None:
        self._require_operator(caller)
        self.fees.set_fee_share_bips(value)

    def pause(self, caller: str) -> None:
        self._require_operator(caller)
        self.store.set_paused(True)
        logger.info('Paused minting.', extra={'event': REGISTRY_PAUSED})

    def unpause(self, caller: str) -> None:
        self._require_operator(caller)
        self.store.set_paused(False)
        logger.info('Unpaused minting.', extra={'event': REGISTRY_UNPAUSED})

    def recover_foreign_asset(self, caller: str, asset: str, amount: int) -> None:
        """Sweep an asset sent to the registry by mistake to the operator

        Raises:
            NotOperatorError: If caller is not the operator.
            NativeAssetRecoveryError: If asset is the registry's own currency.
            ValueError: If amount is not positive.
        """
        self._require_operator(caller)
        if asset == NATIVE_ASSET:
            raise NativeAssetRecoveryError('Native funds are held as balances and can only be withdrawn.')
        if amount <= 0:
            raise ValueError(f'Amount must be a positive integer (given value: {amount}).')

        self.payouts.release(self.operator, amount, reason='recovery', asset=asset)
        logger.info('Recovered foreign asset.', extra={'event': FOREIGN_ASSET_RECOVERED, 'asset': asset, 'amount': amount})

    def _require_operator(self, caller: str) -> None:
        if caller != self.operator:
            raise NotOperatorError(f"Address '{caller}' is not the registry operator.")
