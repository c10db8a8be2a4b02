import time
import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from qrmenu.domain.errors import ConflictError, StorageUnavailable
from qrmenu.utils.retry import redis_retry
from qrmenu.utils.settings import REDIS_URL, CART_LOCK_ENABLED, CART_LOCK_TTL_SECONDS
from qrmenu.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie mozna wcisnac sie miedzy GET a DEL


class LockService:
    """
    -sekcja krytyczna koszyka per konto (lock w redis)
    -zwalnianie locka tylko przez wlasciciela (token)
    -konta nie blokuja sie nawzajem
    """

    def __init__(
        self,
        url: str | None = None,
        enabled: bool | None = None,
        ttl: int | None = None,
        wait_timeout: float = 2.0,
        poll_interval: float = 0.05,
    ):
        self.enabled = CART_LOCK_ENABLED if enabled is None else enabled
        self.ttl = ttl or CART_LOCK_TTL_SECONDS
        self.wait_timeout = wait_timeout
        self.poll_interval = poll_interval
        self.redis = redis.Redis.from_url(url or REDIS_URL, decode_responses=True) if self.enabled else None

    @staticmethod
    def _key(account_id: int) -> str:
        return f"cart:{account_id}:lock"

    @redis_retry()
    def acquire_cart_lock(self, account_id: int, token: str) -> bool:
        #SET cart:1:lock "<token>" NX EX 10
        return bool(self.redis.set(name=self._key(account_id), value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def release_cart_lock(self, account_id: int, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, self._key(account_id), token)
        return bool(res)

    def _try_acquire(self, account_id: int, token: str) -> bool:
        try:
            return self.acquire_cart_lock(account_id, token)
        except RedisError as e:
            logger.error(f"Redis unavailable, cannot lock cart of account {account_id}: {e}")
            raise StorageUnavailable("Cart lock service is not available")

    @contextmanager
    def cart_lock(self, account_id: int):
        if not self.enabled:
            yield
            return

        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.wait_timeout
        while not self._try_acquire(account_id, token):
            if time.monotonic() >= deadline:
                raise ConflictError(f"Cart of account {account_id} is busy, retry later")
            time.sleep(self.poll_interval)

        logger.info(f"Acquired cart lock for account {account_id}")
        try:
            yield
        finally:
            try:
                self.release_cart_lock(account_id, token)
            except RedisError as e:
                # lock i tak wygasnie po ttl
                logger.warning(f"Failed to release cart lock for account {account_id}: {e}")
