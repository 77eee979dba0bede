# checkout/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis

from checkout.domain.errors import CheckoutInProgress
from checkout.utils.retry import redis_retry
from checkout.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from checkout.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec lock zwolni tylko ten kto go zalozyl (porownanie tokenu)


class LockService:
    """
    -lock na checkout jednego usera (ten sam koszyk nie pojdzie dwa razy)
    -zwalnianie locka tylko przez wlasciciela tokenu
    -stan magazynu pilnuje baza, nie ten lock
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:user:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        #SET checkout:user:1:lock "<token>" NX EX 10
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,  # tylko jesli nikt nie trzyma locka
                ex=ttl,  # wygasa sam, gdyby proces padl w trakcie checkoutu
            )
        )

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def checkout_lock(self, user_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex
        if not self.acquire_checkout_lock(user_id, token, ttl):
            raise CheckoutInProgress(user_id)
        try:
            yield
        finally:
            try:
                self.release_checkout_lock(user_id, token)
            except redis.RedisError as e:
                # klucz i tak wygasnie po ttl, wynik checkoutu jest juz ustalony
                logger.error(f"Nie udalo sie zwolnic locka usera {user_id}: {e}")
