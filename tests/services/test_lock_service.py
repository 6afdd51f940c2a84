import pytest

from market.domain.errors import CheckoutInProgressError
from market.services.lock_service import LockService
from tests.helpers import FakeRedis


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def locks(fake_redis):
    return LockService(client=fake_redis)


def test_guard_holds_key_and_releases(locks, fake_redis):
    with locks.checkout_guard(5, ttl=30):
        assert "checkout:5:lock" in fake_redis.store
        assert fake_redis.ttls["checkout:5:lock"] == 30

    assert fake_redis.store == {}


def test_second_checkout_for_same_user_is_refused(locks, fake_redis):
    with locks.checkout_guard(5):
        with pytest.raises(CheckoutInProgressError):
            with locks.checkout_guard(5):
                pass
        # the refused attempt must not release the holder's key
        assert "checkout:5:lock" in fake_redis.store


def test_other_users_are_independent(locks):
    with locks.checkout_guard(1):
        with locks.checkout_guard(2):
            pass


def test_released_on_error(locks, fake_redis):
    with pytest.raises(RuntimeError):
        with locks.checkout_guard(3):
            raise RuntimeError("boom")

    assert fake_redis.store == {}


def test_release_with_stale_token_keeps_new_holder(locks, fake_redis):
    fake_redis.store["checkout:9:lock"] = "new-holder"

    assert locks.release_checkout_lock(9, "expired-holder") is False
    assert fake_redis.store["checkout:9:lock"] == "new-holder"


def test_failed_release_does_not_mask_the_outcome():
    flaky = FakeRedis(fail_release=True)
    locks = LockService(client=flaky)

    with locks.checkout_guard(4):
        pass

    # left to expire through its TTL
    assert "checkout:4:lock" in flaky.store
    assert flaky.release_attempts == 3
