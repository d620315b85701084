"""Length-tiered pricing for custom slugs

Shorter slugs are scarcer, so they cost more. Prices are looked up in a fixed
table indexed by slug length; lengths past the end of the table pay the last
tier.

Example:
    >>> from slugregistry.services.pricing import PricingEngine
    >>> from slugregistry.utils.constants import UNIT
    >>> pricing = PricingEngine()
    >>> pricing.cost(1) == UNIT
    True
    >>> pricing.cost(20) == pricing.cost(8) == UNIT // 100
    True
"""

from collections.abc import Sequence

from slugregistry.utils.constants import DEFAULT_PRICE_TIERS


class PricingEngine:
    """Map a slug length to its price, in the currency's smallest unit.

    The table is copied into a tuple at construction; there is no way to change
    prices on a live engine.
    """

    def __init__(self, tiers: Sequence[int] = DEFAULT_PRICE_TIERS):
        tiers = tuple(tiers)
        if not tiers:
            raise ValueError('Price table must have at least one tier.')
        if any(not isinstance(price, int) or price < 0 for price in tiers):
            raise ValueError(f'Prices must be non-negative integers (given tiers: {tiers}).')
        # Index 0 is the empty slug; only lengths >= 1 must be non-increasing
        if any(earlier < later for earlier, later in zip(tiers[1:], tiers[2:])):
            raise ValueError(f'Prices must not increase with slug length (given tiers: {tiers}).')

        self._tiers = tiers

    @property
    def tiers(self) -> tuple[int, ...]:
        return self._tiers

    def cost(self, length: int) -> int:
        """Return the price of a custom slug of the given length

        Raises:
            ValueError: If length is negative.
        """
        if length < 0:
            raise ValueError(f'Slug length must be a non-negative integer (given value: {length}).')
        return self._tiers[min(length, len(self._tiers) - 1)]
