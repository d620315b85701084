"""Redis-backed ownership ledger

Key layout (see RedisKeySchema):
    <prefix>:tokens:<id>:owner      STRING  owner address
    <prefix>:owners:<owner>:count   STRING  number of tokens held
"""

from beartype import beartype

from slugregistry.dao.base import OwnershipBaseDAO
from slugregistry.dao.redis.mixins import RedisClientMixin
from slugregistry.dao.redis.helpers import handle_redis_connection_error, to_int
from slugregistry.dao.exceptions import TokenAlreadyIssuedError, TokenNotFoundError, NotTokenOwnerError


class OwnershipRedisDAO(RedisClientMixin, OwnershipBaseDAO):
    """Redis-based ownership ledger for record tokens

    Example:
        >>> ledger = OwnershipRedisDAO(prefix='slugregistry:dev')
        >>> ledger.issue('0xabc', 1)
        <OwnershipRedisDAO>
        >>> ledger.owner_of(1)
        '0xabc'
    """

    @handle_redis_connection_error
    @beartype
    def issue(self, owner: str, token_id: int, **kwargs) -> 'OwnershipRedisDAO':
        token_owner_key = self.keys.token_owner_key(token_id)
        if self.redis.exists(token_owner_key):
            raise TokenAlreadyIssuedError(f'Token {token_id} has already been issued.')

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(token_owner_key, owner)
            pipe.incr(self.keys.owner_count_key(owner))
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def owner_of(self, token_id: int, **kwargs) -> str:
        owner = self.redis.get(self.keys.token_owner_key(token_id))
        if owner is None:
            raise TokenNotFoundError(f'Token {token_id} not found.')
        return owner

    @handle_redis_connection_error
    @beartype
    def transfer(self, sender: str, recipient: str, token_id: int, **kwargs) -> 'OwnershipRedisDAO':
        owner = self.owner_of(token_id)
        if owner != sender:
            raise NotTokenOwnerError(f"Address '{sender}' doesn't own token {token_id}.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self.keys.token_owner_key(token_id), recipient)
            pipe.decr(self.keys.owner_count_key(sender))
            pipe.incr(self.keys.owner_count_key(recipient))
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def revoke(self, token_id: int, **kwargs) -> 'OwnershipRedisDAO':
        owner = self.owner_of(token_id)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.token_owner_key(token_id))
            pipe.decr(self.keys.owner_count_key(owner))
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def balance_of(self, owner: str, **kwargs) -> int:
        return to_int(self.redis.get(self.keys.owner_count_key(owner)))
