import pytest

from app.domain.errors import ConcurrentModification
from app.services.lock_service import LockService
from tests.fakes import FakeRedis


@pytest.fixture
def lock_service():
    svc = LockService(url="redis://localhost:6379/15", ttl=5, max_wait=0.3)
    svc.redis = FakeRedis()
    return svc


def test_lock_is_released_after_block(lock_service):
    with lock_service.user_lock(1):
        assert "user:1:lock" in lock_service.redis.store

    assert lock_service.redis.store == {}


def test_lock_held_by_other_writer_times_out(lock_service):
    lock_service.redis.store["user:1:lock"] = "someone-else"

    with pytest.raises(ConcurrentModification):
        with lock_service.user_lock(1):
            pass

    assert lock_service.redis.store["user:1:lock"] == "someone-else"


def test_release_only_by_owner(lock_service):
    assert lock_service.acquire_user_lock(1, "token-a", 5) is True
    assert lock_service.acquire_user_lock(1, "token-b", 5) is False

    assert lock_service.release_user_lock(1, "token-b") is False
    assert lock_service.release_user_lock(1, "token-a") is True


def test_locks_are_per_user(lock_service):
    with lock_service.user_lock(1):
        with lock_service.user_lock(2):
            assert set(lock_service.redis.store) == {"user:1:lock", "user:2:lock"}
