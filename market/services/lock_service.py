import uuid
from contextlib import contextmanager

import redis

from market.domain.errors import CheckoutInProgressError
from market.utils.retry import redis_retry
from market.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, REDIS_URL
from market.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete: only the holder of the token may release the key
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user checkout guard in Redis.

    -SET NX EX to acquire, the key expires on its own if the holder dies
    -Lua compare-and-delete to release
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def checkout_guard(self, user_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex
        if not self.acquire_checkout_lock(user_id, token, ttl):
            raise CheckoutInProgressError("A checkout is already in progress for this account")
        try:
            yield
        finally:
            try:
                self.release_checkout_lock(user_id, token)
            except redis.RedisError:
                # the key expires on its own; the checkout outcome stands
                logger.exception(f"Could not release checkout lock for user {user_id}")
