import fakeredis
import pytest
import redis

from checkout.domain.errors import CheckoutInProgress
from checkout.services.lock_service import LockService

KEY = "checkout:user:1:lock"


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def locks(redis_client):
    return LockService(client=redis_client)


def test_lock_is_exclusive_per_user(locks):
    assert locks.acquire_checkout_lock(1, "a", ttl=10) is True
    assert locks.acquire_checkout_lock(1, "b", ttl=10) is False
    assert locks.acquire_checkout_lock(2, "c", ttl=10) is True


def test_lock_expires_with_ttl(locks, redis_client):
    locks.acquire_checkout_lock(1, "a", ttl=10)

    assert redis_client.get(KEY) == "a"
    assert 0 < redis_client.ttl(KEY) <= 10


def test_only_owner_releases(locks, redis_client):
    locks.acquire_checkout_lock(1, "a", ttl=10)

    # skrypt lua porownuje token
    assert locks.release_checkout_lock(1, "b") is False
    assert redis_client.get(KEY) == "a"
    assert locks.release_checkout_lock(1, "a") is True
    assert redis_client.exists(KEY) == 0


def test_checkout_lock_context(locks, redis_client):
    with locks.checkout_lock(1):
        assert redis_client.exists(KEY) == 1
        with pytest.raises(CheckoutInProgress):
            with locks.checkout_lock(1):
                pass

    assert redis_client.exists(KEY) == 0


def test_checkout_lock_released_on_error(locks, redis_client):
    with pytest.raises(RuntimeError):
        with locks.checkout_lock(1):
            raise RuntimeError("boom")

    assert redis_client.exists(KEY) == 0


def test_release_failure_does_not_escape(locks, redis_client, monkeypatch):
    def broken_eval(*args, **kwargs):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(redis_client, "eval", broken_eval)

    with locks.checkout_lock(1):
        pass

    # klucz zostaje do wygasniecia
    assert redis_client.exists(KEY) == 1


def test_release_failure_keeps_original_error(locks, redis_client, monkeypatch):
    def broken_eval(*args, **kwargs):
        raise redis.ConnectionError("redis down")

    monkeypatch.setattr(redis_client, "eval", broken_eval)

    with pytest.raises(RuntimeError, match="boom"):
        with locks.checkout_lock(1):
            raise RuntimeError("boom")
