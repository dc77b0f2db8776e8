from contextlib import contextmanager
import uuid

import redis
from redis.exceptions import RedisError

from app.domain.errors import ConcurrentModification, StoreUnavailable
from app.utils.retry import redis_retry, lock_wait
from app.utils.settings import REDIS_URL, USER_LOCK_TTL_SECONDS, USER_LOCK_WAIT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec tu jest get + porownanie + del wszystko naraz


class LockService:
    """
    -jeden pisarz na uzytkownika (koszyk + ksiega punktow)
    -lock z tokenem, zwalnia tylko wlasciciel
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        ttl: int = USER_LOCK_TTL_SECONDS,
        max_wait: float = USER_LOCK_WAIT_SECONDS,
    ):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.max_wait = max_wait

    @staticmethod
    def _key(user_id: int) -> str:
        return f"user:{user_id}:lock"

    @redis_retry()
    def acquire_user_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.debug(f"Acquire lock {key}")
        #SET user:1:lock "<token>" NX EX 10
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_user_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.debug(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex

        @lock_wait(self.max_wait)
        def _acquire() -> bool:
            return self.acquire_user_lock(user_id, token, self.ttl)

        try:
            acquired = _acquire()
        except RedisError as e:
            raise StoreUnavailable("Serwis blokad jest niedostepny") from e

        if not acquired:
            logger.warning(f"Nie udalo sie zablokowac uzytkownika {user_id} w {self.max_wait}s")
            raise ConcurrentModification()

        try:
            yield
        finally:
            try:
                self.release_user_lock(user_id, token)
            except RedisError as e:
                #lock i tak wygasnie po ttl
                logger.warning(f"Failed to release lock for user {user_id}: {e}")
