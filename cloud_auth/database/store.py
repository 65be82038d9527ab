"""
User store interface.

The auth service only needs three capabilities from persistence: an
existence check, an insert that refuses to overwrite, and a lookup by
username. Adapters must raise ``UserStoreError`` for faults so they are
never confused with "not found" or "already exists".
"""
from abc import ABC, abstractmethod

from cloud_auth.auth.models import User


class UserStore(ABC):
    """Key-value persistence of users keyed by username."""

    @abstractmethod
    async def exists(self, username: str) -> bool:
        """
        Check whether a user is stored under ``username``.

        Raises:
            UserStoreError: On storage fault
        """

    @abstractmethod
    async def insert(self, user: User) -> None:
        """
        Store a new user, atomically refusing to overwrite an existing one.

        Raises:
            UserAlreadyExistsError: If the username is taken
            UserStoreError: On storage fault
        """

    @abstractmethod
    async def get(self, username: str) -> User:
        """
        Fetch a user by username.

        Raises:
            UserNotFoundError: If no such user exists
            UserStoreError: On storage fault
        """
