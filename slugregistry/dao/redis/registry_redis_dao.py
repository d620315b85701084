"""Data Access Object (DAO) implementation for registry state in Redis

Responsibilities:
    - Store and resolve slug→URL and slug→id mappings;
    - Store records and the mint counter;
    - Keep per-address balances and the operator settings;
    - Commit and revert mints as Redis transactions (WATCH + MULTI/EXEC).

Key layout (see RedisKeySchema):
    <prefix>:slugs:<slug>:url       STRING  URL
    <prefix>:slugs:<slug>:id        STRING  sequence id
    <prefix>:records:<id>           HASH    {slug, is_custom}
    <prefix>:records:counter        STRING  latest sequence id
    <prefix>:balances               HASH    {address: amount}
    <prefix>:settings:fee_share_bips STRING
    <prefix>:settings:paused        STRING  '1' | '0'

Example:
    >>> from slugregistry.models import SlugRecordModel, MintPlan
    >>> from slugregistry.dao.redis import RegistryRedisDAO

    >>> dao = RegistryRedisDAO(prefix="slugregistry:dev")
    >>> record = SlugRecordModel(slug='vanity', is_custom=True, sequence_id=1)
    >>> dao.commit_mint(MintPlan(record=record, url='https://example.com', owner='0xabc'))
    <RegistryRedisDAO>
    >>> dao.url_of('vanity')
    'https://example.com'
"""

import redis
from beartype import beartype

from slugregistry.models import SlugRecordModel, MintPlan
from slugregistry.dao.base import RegistryBaseDAO
from slugregistry.dao.redis.mixins import RedisClientMixin
from slugregistry.dao.redis.helpers import handle_redis_connection_error, to_int
from slugregistry.dao.exceptions import SlugAlreadyExistsError, SlugNotFoundError, RecordNotFoundError, MintConflictError


class RegistryRedisDAO(RedisClientMixin, RegistryBaseDAO):
    """Redis-based Data Access Object (DAO) for registry state

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE: Slug keys carry no TTL. Slugs, once minted, persist indefinitely.
    """

    @handle_redis_connection_error
    @beartype
    def exists(self, slug: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.slug_url_key(slug)))

    @handle_redis_connection_error
    @beartype
    def url_of(self, slug: str, **kwargs) -> str:
        url = self.redis.get(self.keys.slug_url_key(slug))
        if url is None:
            raise SlugNotFoundError(f"Slug '{slug}' not found.")
        return url

    @handle_redis_connection_error
    @beartype
    def id_of(self, slug: str, **kwargs) -> int:
        sequence_id = self.redis.get(self.keys.slug_id_key(slug))
        if sequence_id is None:
            raise SlugNotFoundError(f"Slug '{slug}' not found.")
        return to_int(sequence_id)

    @handle_redis_connection_error
    @beartype
    def record(self, sequence_id: int, **kwargs) -> SlugRecordModel:
        fields = self.redis.hgetall(self.keys.record_key(sequence_id))
        if not fields:
            raise RecordNotFoundError(f'Record with sequence id {sequence_id} not found.')

        return SlugRecordModel(
            slug=fields['slug'],
            is_custom=fields['is_custom'] == '1',
            sequence_id=sequence_id,
        )

    @handle_redis_connection_error
    def count(self, **kwargs) -> int:
        return to_int(self.redis.get(self.keys.counter_key()))

    @handle_redis_connection_error
    @beartype
    def commit_mint(self, plan: MintPlan, **kwargs) -> 'RegistryRedisDAO':
        """Apply a mint inside a single Redis transaction

        The counter and slug keys are WATCHed. The commit only goes through if
        the counter still holds the id just before this record's and the slug is
        still free when EXEC runs. Concurrent mints racing for the same id or
        slug therefore commit at most once.

        Args:
            plan (MintPlan):
                Record, URL and balance credits of the mint.

        Returns:
            RegistryRedisDAO: self (for method chaining)

        Raises:
            SlugAlreadyExistsError:
                If the slug is already registered.
            MintConflictError:
                If another mint moved the counter or took the slug first.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        record = plan.record
        slug_url_key = self.keys.slug_url_key(record.slug)
        counter_key = self.keys.counter_key()

        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(counter_key, slug_url_key)
                if pipe.exists(slug_url_key):
                    raise SlugAlreadyExistsError(f"Slug '{record.slug}' already exists.")
                current = to_int(pipe.get(counter_key))
                if current != record.sequence_id - 1:
                    raise MintConflictError(f'Sequence id {record.sequence_id} is no longer next (counter is at {current}).')

                pipe.multi()
                pipe.set(slug_url_key, plan.url)
                pipe.set(self.keys.slug_id_key(record.slug), record.sequence_id)
                pipe.hset(self.keys.record_key(record.sequence_id), mapping={'slug': record.slug, 'is_custom': int(record.is_custom)})
                pipe.set(counter_key, record.sequence_id)
                for address, amount in plan.credits.items():
                    pipe.hincrby(self.keys.balances_key(), address, amount)
                pipe.execute()
            except redis.WatchError as e:
                raise MintConflictError(f"Another mint changed the counter or slug '{record.slug}' while committing.") from e
        return self

    @handle_redis_connection_error
    @beartype
    def revert_mint(self, plan: MintPlan, **kwargs) -> 'RegistryRedisDAO':
        """Undo a committed mint

        The counter is rewound only while it still points at this record. Once
        a later mint has committed on top of it, the id stays burnt and only
        this mint's own keys and credits are removed.
        """
        counter_key = self.keys.counter_key()
        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(counter_key)
                rewind = to_int(pipe.get(counter_key)) == plan.record.sequence_id
                pipe.multi()
                self._queue_revert(pipe, plan, rewind=rewind)
                pipe.execute()
            except redis.WatchError:
                # The counter moved after the check: a later mint owns it now
                pipe.reset()
                self._queue_revert(pipe, plan, rewind=False)
                pipe.execute()
        return self

    def _queue_revert(self, pipe: redis.client.Pipeline, plan: MintPlan, rewind: bool) -> None:
        record = plan.record
        pipe.delete(
            self.keys.slug_url_key(record.slug),
            self.keys.slug_id_key(record.slug),
            self.keys.record_key(record.sequence_id),
        )
        if rewind:
            pipe.set(self.keys.counter_key(), record.sequence_id - 1)
        for address, amount in plan.credits.items():
            pipe.hincrby(self.keys.balances_key(), address, -amount)

    @handle_redis_connection_error
    @beartype
    def set_url(self, slug: str, url: str, **kwargs) -> 'RegistryRedisDAO':
        slug_url_key = self.keys.slug_url_key(slug)
        if not self.redis.exists(slug_url_key):
            raise SlugNotFoundError(f"Slug '{slug}' not found.")
        self.redis.set(slug_url_key, url)
        return self

    @handle_redis_connection_error
    @beartype
    def balance(self, address: str, **kwargs) -> int:
        return to_int(self.redis.hget(self.keys.balances_key(), address))

    @handle_redis_connection_error
    @beartype
    def credit(self, address: str, amount: int, **kwargs) -> int:
        return self.redis.hincrby(self.keys.balances_key(), address, amount)

    @handle_redis_connection_error
    @beartype
    def zero_balance(self, address: str, **kwargs) -> int:
        """Reset a balance to zero and return what it held

        HGET and HDEL run in one transaction, so a concurrent credit lands
        either before (and is returned) or after (and is kept).
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hget(self.keys.balances_key(), address)
            pipe.hdel(self.keys.balances_key(), address)
            previous, _ = pipe.execute()
        return to_int(previous)

    @handle_redis_connection_error
    def fee_share_bips(self, **kwargs) -> int | None:
        value = self.redis.get(self.keys.fee_share_key())
        return None if value is None else to_int(value)

    @handle_redis_connection_error
    @beartype
    def set_fee_share_bips(self, value: int, **kwargs) -> 'RegistryRedisDAO':
        self.redis.set(self.keys.fee_share_key(), value)
        return self

    @handle_redis_connection_error
    def paused(self, **kwargs) -> bool:
        return to_int(self.redis.get(self.keys.paused_key())) == 1

    @handle_redis_connection_error
    @beartype
    def set_paused(self, value: bool, **kwargs) -> 'RegistryRedisDAO':
        self.redis.set(self.keys.paused_key(), int(value))
        return self
