"""
Shared fixtures for the cloud-auth tests.
"""
from typing import Dict, Optional

import pytest

from cloud_auth.auth.exceptions import UserAlreadyExistsError, UserNotFoundError, UserStoreError
from cloud_auth.auth.jwt import TokenIssuer
from cloud_auth.auth.models import User
from cloud_auth.auth.password import CredentialHasher
from cloud_auth.auth.router import ApiHandler
from cloud_auth.auth.users import AuthService
from cloud_auth.database.store import UserStore

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
START_TIME = 1_700_000_000


class FakeClock:
    """Settable stand-in for time.time."""
    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now


class InMemoryUserStore(UserStore):
    """UserStore kept in a dict, with switchable faults."""
    def __init__(self):
        self.users: Dict[str, User] = {}
        self.fail_exists = False
        self.fail_insert = False
        self.fail_get = False
        # Simulates a concurrent registration slipping in after the existence check
        self.race_on_insert: Optional[str] = None

    async def exists(self, username: str) -> bool:
        if self.fail_exists:
            raise UserStoreError("exists unavailable")
        return username in self.users

    async def insert(self, user: User) -> None:
        if self.fail_insert:
            raise UserStoreError("insert unavailable")
        if self.race_on_insert == user.username:
            self.users[user.username] = user
        if user.username in self.users:
            raise UserAlreadyExistsError(user.username)
        self.users[user.username] = user

    async def get(self, username: str) -> User:
        if self.fail_get:
            raise UserStoreError("get unavailable")
        try:
            return self.users[username]
        except KeyError:
            raise UserNotFoundError(username)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return CredentialHasher(rounds=4)


@pytest.fixture
def issuer(clock):
    return TokenIssuer(TEST_SECRET, clock=clock)


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def auth_service(store, hasher, issuer):
    return AuthService(store=store, hasher=hasher, issuer=issuer)


@pytest.fixture
def api_handler(auth_service):
    return ApiHandler(auth_service)
