from contextlib import contextmanager
from typing import Dict, List, Tuple

import redis

from market.data.models import UserModel
from market.domain.enums import Role
from market.domain.errors import CheckoutInProgressError
from market.domain.principal import Principal
from market.services.payment_client import PaymentResult
from market.utils.security import create_access_token


class FakeLockService:
    """In-process stand-in for the Redis checkout guard."""

    def __init__(self) -> None:
        self.held: set[int] = set()
        self.acquired: List[int] = []

    @contextmanager
    def checkout_guard(self, user_id: int, ttl: int = 60):
        if user_id in self.held:
            raise CheckoutInProgressError("A checkout is already in progress for this account")
        self.held.add(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakeRedis:
    """Just enough of redis.Redis for SET NX and the release script."""

    def __init__(self, fail_release: bool = False):
        self.store = {}
        self.ttls = {}
        self.fail_release = fail_release
        self.release_attempts = 0

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        self.ttls[name] = ex
        return True

    def eval(self, script, numkeys, key, token):
        self.release_attempts += 1
        if self.fail_release:
            raise redis.ConnectionError("redis went away")
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: List[Tuple[int, int]] = []

    def send_purchase_receipt(self, user_id: int, order_id: int):
        self.sent.append((user_id, order_id))


class FailingGateway:
    def __init__(self, message: str = "Card declined") -> None:
        self.message = message
        self.calls = 0

    def charge(self, order_id, amount, method):
        self.calls += 1
        return PaymentResult(success=False, message=self.message)


def principal_for(user: UserModel) -> Principal:
    return Principal(user_id=user.id, email=user.email, role=Role(user.role))


def auth_headers(user: UserModel) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(principal_for(user))}"}
