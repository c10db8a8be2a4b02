from unittest.mock import MagicMock

import pytest
from redis.exceptions import RedisError

from qrmenu.domain.errors import ConflictError, StorageUnavailable
from qrmenu.services.lock_service import LockService


@pytest.fixture
def locks():
    svc = LockService(enabled=False, ttl=10, wait_timeout=0.1, poll_interval=0.01)
    # wlaczony lock na mocku redis
    svc.enabled = True
    svc.redis = MagicMock()
    return svc


def test_disabled_lock_does_not_touch_redis():
    svc = LockService(enabled=False)
    assert svc.redis is None
    with svc.cart_lock(1):
        pass


def test_lock_is_acquired_and_released(locks):
    locks.redis.set.return_value = True
    locks.redis.eval.return_value = 1

    with locks.cart_lock(5):
        kwargs = locks.redis.set.call_args.kwargs
        assert kwargs["name"] == "cart:5:lock"
        assert kwargs["nx"] is True
        assert kwargs["ex"] == 10
        locks.redis.eval.assert_not_called()

    token = kwargs["value"]
    args = locks.redis.eval.call_args.args
    assert args[1:] == (1, "cart:5:lock", token)


def test_lock_is_released_when_body_fails(locks):
    locks.redis.set.return_value = True

    with pytest.raises(ValueError):
        with locks.cart_lock(5):
            raise ValueError("boom")

    locks.redis.eval.assert_called_once()


def test_busy_lock_raises_conflict(locks):
    locks.redis.set.return_value = False

    with pytest.raises(ConflictError):
        with locks.cart_lock(5):
            pass
    locks.redis.eval.assert_not_called()


def test_waits_for_lock_holder(locks):
    locks.redis.set.side_effect = [False, False, True]

    with locks.cart_lock(5):
        pass
    assert locks.redis.set.call_count == 3


def test_release_failure_is_not_fatal(locks):
    locks.redis.set.return_value = True
    locks.redis.eval.side_effect = RedisError("gone")

    with locks.cart_lock(5):
        pass
    # redis_retry probuje 3 razy
    assert locks.redis.eval.call_count == 3


def test_redis_down_is_unavailable(locks):
    locks.redis.set.side_effect = RedisError("connection refused")

    with pytest.raises(StorageUnavailable) as exc:
        with locks.cart_lock(5):
            pass

    assert exc.value.kind == "Unavailable"
    assert locks.redis.set.call_count == 3
    locks.redis.eval.assert_not_called()
