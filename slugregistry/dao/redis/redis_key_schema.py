import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for registry state.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "slugregistry:prod" or "slugregistry:dev".

    NOTE: custom slugs may contain any character, including ':'. Slug keys
          stay unambiguous because each key type ends with a fixed suffix.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def slug_url_key(self, slug: str) -> str:
        return f'slugs:{slug}:url'

    @prefix_key
    def slug_id_key(self, slug: str) -> str:
        return f'slugs:{slug}:id'

    @prefix_key
    def record_key(self, sequence_id: int) -> str:
        return f'records:{sequence_id}'

    @prefix_key
    def counter_key(self) -> str:
        return 'records:counter'

    @prefix_key
    def balances_key(self) -> str:
        return 'balances'

    @prefix_key
    def fee_share_key(self) -> str:
        return 'settings:fee_share_bips'

    @prefix_key
    def paused_key(self) -> str:
        return 'settings:paused'

    @prefix_key
    def token_owner_key(self, token_id: int) -> str:
        return f'tokens:{token_id}:owner'

    @prefix_key
    def owner_count_key(self, owner: str) -> str:
        return f'owners:{owner}:count'

    @prefix_key
    def payouts_key(self) -> str:
        return 'payouts'

    @prefix_key
    def payment_receipt_key(self, payment_id: str) -> str:
        return f'payments:{payment_id}:receipt'

    @prefix_key
    def payment_claimed_key(self, payment_id: str) -> str:
        return f'payments:{payment_id}:claimed'
