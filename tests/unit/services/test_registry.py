"""Unit tests for the slug registry in registry.py

The registry runs on the in-process DAOs, which behave like the Redis ones
but keep their state in plain dictionaries the tests can inspect.

Test coverage includes:

1. Random slugs
   - Free, 8 characters, unique; attached payments go to the operator.

2. Custom slugs
   - Priced by length, refund excess, split the fee between referrer and operator.
   - Duplicates, self-referrals and insufficient payments leave no trace.

3. Atomicity
   - A failing token issuance or refund reverts every write of the mint.
   - A concurrent mint committing the same sequence id first leaves no trace of the loser.

4. Editing URLs and ownership
   - Only the current token owner can edit a record's URL.

5. Queries
   - url_of(), id_of(), record_of(), metadata_of(), cost().

6. Withdrawals and unsolicited payments

7. Administration
   - Fee share, pause / unpause and foreign asset recovery are operator-only.

8. Mint notifications

9. Payment receipts
   - Mints and unsolicited payments funded by a receipt spend it once.
   - Unknown, foreign and spent receipts are refused before anything is written.
"""

import copy
import json
import base64
from unittest.mock import MagicMock

import pytest

from slugregistry.models import SlugRecordModel, MintEvent
from slugregistry.dao.base import OwnershipBaseDAO, PayoutBaseDAO
from slugregistry.dao.exceptions import (
    SlugAlreadyExistsError,
    SlugNotFoundError,
    RecordNotFoundError,
    NotTokenOwnerError,
    MintConflictError,
    PaymentNotFoundError,
    PaymentAlreadyClaimedError,
)
from slugregistry.services import Registry
from slugregistry.services.pricing import PricingEngine
from slugregistry.exceptions import (
    EmptyURLError,
    EmptySlugError,
    SelfReferralError,
    InsufficientPaymentError,
    NotOwnerError,
    NotOperatorError,
    ZeroBalanceError,
    InvalidFeeShareError,
    RegistryPausedError,
    SlugSpaceExhaustedError,
    NativeAssetRecoveryError,
    UnverifiedPaymentError,
)
from slugregistry.utils import generate_slug
from slugregistry.utils.constants import UNIT, NULL_ADDRESS, SLUG_ALPHABET


ALICE = '0xalice'
BOB = '0xbob'
REFERRER = '0xreferrer'
URL = 'https://example.com'


def snapshot(store, ownership, payouts):
    return copy.deepcopy((vars(store), vars(ownership), vars(payouts)))


# -------------------------------
# Construction
# -------------------------------


@pytest.mark.parametrize('operator', ['', NULL_ADDRESS])
def test_registry_requires_operator(store, ownership, payouts, operator):
    with pytest.raises(ValueError):
        Registry(store, ownership, payouts, operator=operator)


# -------------------------------
# 1. Random slugs
# -------------------------------


def test_mint_random_slug(registry, ownership, payouts):
    slug = registry.mint(ALICE, URL, referrer=REFERRER)

    assert len(slug) == 8
    assert all(character in SLUG_ALPHABET for character in slug)
    assert slug == generate_slug(0)
    assert registry.url_of(slug) == URL
    assert registry.id_of(slug) == 1
    assert registry.record_of(1) == SlugRecordModel(slug=slug, is_custom=False, sequence_id=1)
    assert registry.owner_of(1) == ALICE
    assert registry.total_minted() == 1
    assert registry.balance_of(REFERRER) == 0
    assert payouts.pending() == []


def test_mint_many_random_slugs_are_unique(registry):
    slugs = [registry.mint(ALICE, f'{URL}/{i}') for i in range(50)]

    assert len(set(slugs)) == 50
    assert [registry.id_of(slug) for slug in slugs] == list(range(1, 51))


def test_mint_random_slug_skips_taken_custom_slug(registry, operator):
    taken = generate_slug(1)
    registry.mint(BOB, URL, slug=taken, payment=UNIT)  # sequence id 1, counter now 1

    slug = registry.mint(ALICE, URL)

    assert slug != taken
    assert registry.url_of(slug) == URL
    assert registry.id_of(slug) == 2


def test_mint_random_slug_with_payment_is_a_donation(registry, operator, payouts):
    registry.mint(ALICE, URL, referrer=REFERRER, payment=123)

    assert registry.balance_of(operator) == 123
    assert registry.balance_of(REFERRER) == 0
    assert payouts.pending() == []


def test_mint_random_slug_fails_closed(store, ownership, payouts, operator, monkeypatch):
    registry = Registry(store, ownership, payouts, operator=operator, max_allocation_attempts=3)
    monkeypatch.setattr(store, 'exists', lambda slug: True)

    with pytest.raises(SlugSpaceExhaustedError):
        registry.mint(ALICE, URL)
    assert store.counter == 0
    assert ownership.owners == {}


# -------------------------------
# 2. Custom slugs
# -------------------------------


def test_mint_custom_slug(registry, operator, payouts):
    cost = registry.cost(6)
    assert cost == UNIT * 3 // 100

    slug = registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=cost + 5)

    assert slug == 'vanity'
    assert registry.url_of('vanity') == URL
    assert registry.record_of(1).is_custom is True
    assert registry.owner_of(1) == ALICE
    # 50% fee share: 0.015 each
    assert registry.balance_of(operator) == UNIT * 15 // 1000
    assert registry.balance_of(REFERRER) == UNIT * 15 // 1000
    assert [(p.recipient, p.amount, p.reason) for p in payouts.pending()] == [(ALICE, 5, 'refund')]


def test_mint_custom_slug_exact_payment_has_no_refund(registry, payouts):
    registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=registry.cost(6))
    assert payouts.pending() == []


def test_mint_custom_slug_with_null_referrer(registry, operator):
    registry.mint(ALICE, URL, slug='vanity', payment=registry.cost(6))
    assert registry.balance_of(operator) == registry.cost(6)


@pytest.mark.parametrize('fee_share', [0, 1, 3333, 5000, 9999, 10000])
def test_mint_custom_slug_credits_add_up_to_cost(registry, operator, fee_share):
    registry.set_fee_share_bips(operator, fee_share)
    cost = registry.cost(7)

    registry.mint(ALICE, URL, slug='seven77', referrer=REFERRER, payment=cost)

    assert registry.balance_of(REFERRER) + registry.balance_of(operator) == cost
    assert registry.balance_of(REFERRER) == cost * fee_share // 10000


def test_mint_custom_slug_accepts_any_characters(registry):
    registry.mint(ALICE, URL, slug='a:b/ü 0O', payment=UNIT)
    assert registry.url_of('a:b/ü 0O') == URL


def test_mint_custom_slug_with_custom_pricing(store, ownership, payouts, operator):
    registry = Registry(store, ownership, payouts, operator=operator, pricing=PricingEngine([0, 10, 5]))
    registry.mint(ALICE, URL, slug='abc', payment=5)
    assert registry.balance_of(operator) == 5


def test_mint_duplicate_custom_slug(registry, store, ownership, payouts):
    registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=UNIT)
    before = snapshot(store, ownership, payouts)

    with pytest.raises(SlugAlreadyExistsError):
        registry.mint(BOB, 'https://other.example.com', slug='vanity', payment=UNIT)

    assert registry.url_of('vanity') == URL
    assert registry.owner_of(1) == ALICE
    assert snapshot(store, ownership, payouts) == before


@pytest.mark.parametrize(
    'kwargs, error',
    [
        ({'url': ''}, EmptyURLError),
        ({'slug': 'vanity', 'referrer': ALICE, 'payment': UNIT}, SelfReferralError),
        ({'referrer': ALICE}, SelfReferralError),
        ({'slug': 'vanity', 'payment': UNIT * 3 // 100 - 1}, InsufficientPaymentError),
        ({'slug': 'v', 'payment': 0}, InsufficientPaymentError),
        ({'payment': -1}, ValueError),
    ],
)
def test_rejected_mint_leaves_no_trace(registry, store, ownership, payouts, kwargs, error):
    before = snapshot(store, ownership, payouts)
    kwargs = {'url': URL, **kwargs}

    with pytest.raises(error):
        registry.mint(ALICE, **kwargs)

    assert snapshot(store, ownership, payouts) == before


# -------------------------------
# 3. Atomicity
# -------------------------------


def test_failed_token_issuance_reverts_mint(store, payouts, operator):
    ownership = MagicMock(spec=OwnershipBaseDAO)
    ownership.issue.side_effect = RuntimeError('ledger down')
    registry = Registry(store, ownership, payouts, operator=operator)

    with pytest.raises(RuntimeError):
        registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=UNIT)

    assert not store.exists('vanity')
    assert store.records == {}
    assert store.counter == 0
    assert all(amount == 0 for amount in store.balances.values())
    assert payouts.pending() == []


def test_failed_refund_reverts_mint(store, ownership, operator):
    payouts = MagicMock(spec=PayoutBaseDAO)
    payouts.release.side_effect = RuntimeError('payment rail down')
    registry = Registry(store, ownership, payouts, operator=operator)

    with pytest.raises(RuntimeError):
        registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=UNIT)

    assert not store.exists('vanity')
    assert store.counter == 0
    assert ownership.owners == {}
    assert all(amount == 0 for amount in store.balances.values())


def test_concurrent_mint_of_same_sequence_id(registry, store, ownership, payouts, operator, monkeypatch):
    rival = Registry(store, ownership, payouts, operator=operator)
    commit_mint = store.commit_mint

    def rival_commits_first(plan):
        # Another Lambda reads the same counter and commits before this one
        monkeypatch.setattr(store, 'commit_mint', commit_mint)
        rival.mint(BOB, 'https://bob.example.com', slug='bob-link', payment=UNIT)
        return commit_mint(plan)

    monkeypatch.setattr(store, 'commit_mint', rival_commits_first)

    with pytest.raises(MintConflictError):
        registry.mint(ALICE, URL, slug='alice-link', payment=UNIT)

    assert not store.exists('alice-link')
    assert registry.url_of('bob-link') == 'https://bob.example.com'
    assert registry.record_of(1).slug == 'bob-link'
    assert registry.owner_of(1) == BOB
    assert registry.total_minted() == 1
    assert [payout.recipient for payout in payouts.pending()] == [BOB]


def test_failed_token_issuance_gives_back_payment_receipt(store, payouts, operator):
    ownership = MagicMock(spec=OwnershipBaseDAO)
    ownership.issue.side_effect = RuntimeError('ledger down')
    registry = Registry(store, ownership, payouts, operator=operator)
    payouts.record_receipt('pay-1', ALICE, UNIT)

    with pytest.raises(RuntimeError):
        registry.mint(ALICE, URL, slug='vanity', payment_id='pay-1')

    assert not store.exists('vanity')
    assert payouts.receipt('pay-1').claimed is False
    assert payouts.pending() == []


def test_sequence_ids_are_not_skipped_after_failure(store, payouts, operator, ownership):
    registry = Registry(store, ownership, payouts, operator=operator)
    registry.mint(ALICE, URL, slug='taken', payment=UNIT)

    with pytest.raises(SlugAlreadyExistsError):
        registry.mint(BOB, URL, slug='taken', payment=UNIT)
    slug = registry.mint(BOB, URL)

    assert registry.id_of(slug) == 2


# -------------------------------
# 4. Editing URLs and ownership
# -------------------------------


def test_edit_url(registry):
    registry.mint(ALICE, URL, slug='vanity', payment=UNIT)
    registry.edit_url(ALICE, 1, 'https://new.example.com')
    assert registry.url_of('vanity') == 'https://new.example.com'


def test_edit_url_by_non_owner(registry):
    registry.mint(ALICE, URL, slug='vanity', payment=UNIT)

    with pytest.raises(NotOwnerError):
        registry.edit_url(BOB, 1, 'https://evil.example.com')
    assert registry.url_of('vanity') == URL


def test_edit_url_with_empty_url(registry):
    registry.mint(ALICE, URL, slug='vanity', payment=UNIT)

    with pytest.raises(EmptyURLError):
        registry.edit_url(ALICE, 1, '')
    assert registry.url_of('vanity') == URL


def test_edit_url_of_unknown_record(registry):
    with pytest.raises(RecordNotFoundError):
        registry.edit_url(ALICE, 42, URL)


def test_edit_url_after_transfer(registry):
    registry.mint(ALICE, URL, slug='vanity', payment=UNIT)
    registry.transfer(ALICE, BOB, 1)

    registry.edit_url(BOB, 1, 'https://bob.example.com')
    with pytest.raises(NotOwnerError):
        registry.edit_url(ALICE, 1, 'https://alice.example.com')

    assert registry.owner_of(1) == BOB
    assert registry.url_of('vanity') == 'https://bob.example.com'
    assert registry.record_of(1).slug == 'vanity'


def test_transfer_by_non_owner(registry):
    registry.mint(ALICE, URL)
    with pytest.raises(NotTokenOwnerError):
        registry.transfer(BOB, BOB, 1)


# -------------------------------
# 5. Queries
# -------------------------------


@pytest.mark.parametrize('length, expected', [(0, 0), (1, UNIT), (8, UNIT // 100), (20, UNIT // 100)])
def test_cost(registry, length, expected):
    assert registry.cost(length) == expected


@pytest.mark.parametrize('query', ['url_of', 'id_of'])
def test_query_with_empty_slug(registry, query):
    with pytest.raises(EmptySlugError):
        getattr(registry, query)('')


@pytest.mark.parametrize('query', ['url_of', 'id_of'])
def test_query_with_unknown_slug(registry, query):
    with pytest.raises(SlugNotFoundError):
        getattr(registry, query)('missing')


def test_metadata_of(registry):
    registry.mint(ALICE, URL, slug='vanity', payment=UNIT)

    uri = registry.metadata_of(1)
    metadata = json.loads(base64.b64decode(uri.removeprefix('data:application/json;base64,')))

    assert metadata['name'] == '/vanity'
    assert registry.metadata_of(1) == uri


def test_metadata_of_unknown_record(registry):
    with pytest.raises(RecordNotFoundError):
        registry.metadata_of(1)


# -------------------------------
# 6. Withdrawals and unsolicited payments
# -------------------------------


def test_withdraw_after_custom_mint(registry, payouts):
    registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=registry.cost(6))

    amount = registry.withdraw(REFERRER)

    assert amount == UNIT * 15 // 1000
    assert registry.balance_of(REFERRER) == 0
    assert payouts.pending()[-1].recipient == REFERRER
    with pytest.raises(ZeroBalanceError):
        registry.withdraw(REFERRER)


def test_receive_payment(registry, operator):
    registry.receive_payment(BOB, 77)
    assert registry.balance_of(operator) == 77
    assert registry.balance_of(BOB) == 0


# -------------------------------
# 7. Administration
# -------------------------------


def test_set_fee_share_bips(registry, operator):
    registry.set_fee_share_bips(operator, 1000)
    assert registry.fee_share_bips == 1000


def test_set_fee_share_bips_above_maximum(registry, operator):
    with pytest.raises(InvalidFeeShareError):
        registry.set_fee_share_bips(operator, 10001)
    assert registry.fee_share_bips == 5000


@pytest.mark.parametrize(
    'action, args',
    [
        ('set_fee_share_bips', (1000,)),
        ('pause', ()),
        ('unpause', ()),
        ('recover_foreign_asset', ('erc20:0xtoken', 10)),
    ],
)
def test_admin_actions_are_operator_only(registry, store, ownership, payouts, action, args):
    before = snapshot(store, ownership, payouts)

    with pytest.raises(NotOperatorError):
        getattr(registry, action)(ALICE, *args)

    assert snapshot(store, ownership, payouts) == before


def test_pause_blocks_mint(registry, operator, store):
    registry.pause(operator)
    assert registry.paused is True

    with pytest.raises(RegistryPausedError):
        registry.mint(ALICE, URL)
    assert store.counter == 0

    registry.unpause(operator)
    assert registry.paused is False
    assert len(registry.mint(ALICE, URL)) == 8


def test_pause_keeps_edits_and_withdrawals(registry, operator):
    registry.mint(ALICE, URL, slug='vanity', payment=registry.cost(6))
    registry.pause(operator)

    registry.edit_url(ALICE, 1, 'https://new.example.com')
    assert registry.withdraw(operator) == registry.cost(6)


def test_recover_foreign_asset(registry, operator, payouts):
    registry.recover_foreign_asset(operator, 'erc20:0xtoken', 10)

    payout = payouts.pending()[-1]
    assert (payout.recipient, payout.amount, payout.asset, payout.reason) == (operator, 10, 'erc20:0xtoken', 'recovery')


def test_recover_native_asset(registry, operator, payouts):
    with pytest.raises(NativeAssetRecoveryError):
        registry.recover_foreign_asset(operator, 'native', 10)
    assert payouts.pending() == []


@pytest.mark.parametrize('amount', [0, -5])
def test_recover_foreign_asset_with_invalid_amount(registry, operator, amount):
    with pytest.raises(ValueError):
        registry.recover_foreign_asset(operator, 'erc20:0xtoken', amount)


# -------------------------------
# 8. Mint notifications
# -------------------------------


def test_mint_notifies_listeners(registry):
    events = []
    registry.subscribe(events.append)

    registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment=UNIT)

    assert events == [MintEvent(sender=ALICE, url=URL, slug='vanity', sequence_id=1, is_custom=True, referrer=REFERRER)]


def test_rejected_mint_does_not_notify(registry):
    listener = MagicMock()
    registry.subscribe(listener)

    with pytest.raises(EmptyURLError):
        registry.mint(ALICE, '')
    listener.assert_not_called()


# -------------------------------
# 9. Payment receipts
# -------------------------------


def test_mint_with_payment_receipt(registry, payouts, operator):
    payouts.record_receipt('pay-1', ALICE, UNIT)

    registry.mint(ALICE, URL, slug='vanity', referrer=REFERRER, payment_id='pay-1')

    cost = registry.cost(6)
    assert payouts.receipt('pay-1').claimed is True
    assert payouts.pending()[-1].amount == UNIT - cost
    assert registry.balance_of(REFERRER) + registry.balance_of(operator) == cost


def test_mint_random_slug_with_payment_receipt_is_a_donation(registry, payouts, operator):
    payouts.record_receipt('pay-1', ALICE, 40)

    registry.mint(ALICE, URL, payment_id='pay-1')

    assert registry.balance_of(operator) == 40
    assert payouts.pending() == []


def test_mint_with_payment_receipt_and_amount(registry, store, ownership, payouts):
    payouts.record_receipt('pay-1', ALICE, UNIT)
    before = snapshot(store, ownership, payouts)

    with pytest.raises(ValueError):
        registry.mint(ALICE, URL, slug='vanity', payment=UNIT, payment_id='pay-1')
    assert snapshot(store, ownership, payouts) == before


@pytest.mark.parametrize(
    'payment_id, error',
    [
        ('forged', PaymentNotFoundError),
        ('pay-bob', UnverifiedPaymentError),
        ('pay-spent', PaymentAlreadyClaimedError),
    ],
)
def test_mint_with_bad_payment_receipt(registry, store, ownership, payouts, payment_id, error):
    payouts.record_receipt('pay-bob', BOB, UNIT)
    payouts.record_receipt('pay-spent', ALICE, UNIT)
    payouts.claim('pay-spent')
    before = snapshot(store, ownership, payouts)

    with pytest.raises(error):
        registry.mint(ALICE, URL, slug='vanity', payment_id=payment_id)
    assert snapshot(store, ownership, payouts) == before


def test_payment_receipt_is_spent_once(registry, payouts):
    payouts.record_receipt('pay-1', ALICE, UNIT)
    registry.mint(ALICE, URL, slug='vanity', payment_id='pay-1')

    with pytest.raises(PaymentAlreadyClaimedError):
        registry.mint(ALICE, URL, slug='second', payment_id='pay-1')
    assert not registry.store.exists('second')
    assert len(payouts.pending()) == 1


def test_receive_verified_payment(registry, payouts, operator):
    payouts.record_receipt('pay-1', BOB, 77)

    assert registry.receive_verified_payment(BOB, 'pay-1') == 77
    assert registry.balance_of(operator) == 77
    with pytest.raises(PaymentAlreadyClaimedError):
        registry.receive_verified_payment(BOB, 'pay-1')
    assert registry.balance_of(operator) == 77


def test_receive_verified_payment_of_another_payer(registry, payouts, operator):
    payouts.record_receipt('pay-1', BOB, 77)

    with pytest.raises(UnverifiedPaymentError):
        registry.receive_verified_payment(ALICE, 'pay-1')
    assert registry.balance_of(operator) == 0
    assert payouts.receipt('pay-1').claimed is False


def test_failed_credit_gives_back_payment_receipt(registry, store, payouts, monkeypatch):
    payouts.record_receipt('pay-1', BOB, 77)

    def failing_credit(address, amount, **kwargs):
        raise RuntimeError('store down')

    monkeypatch.setattr(store, 'credit', failing_credit)

    with pytest.raises(RuntimeError):
        registry.receive_verified_payment(BOB, 'pay-1')
    assert payouts.receipt('pay-1').claimed is False
