"""
User registration and login.

``AuthService`` orchestrates the credential hasher, the token issuer and
the user store. It raises only the service-level errors from
``cloud_auth.auth.exceptions``; callers map those to responses.
"""
import logging

from cloud_auth.auth.exceptions import (
    ConflictError, HashingError, InternalError, TokenSigningError, UnauthorizedError,
    UserAlreadyExistsError, UserNotFoundError, UserStoreError, ValidationError,
)
from cloud_auth.auth.jwt import TokenIssuer
from cloud_auth.auth.models import LoginRequest, RegisterUser, User
from cloud_auth.auth.password import CredentialHasher
from cloud_auth.database.store import UserStore

logger = logging.getLogger("cloud_auth")


class AuthService:
    """
    Service for registration and login.
    """

    def __init__(self, store: UserStore, hasher: CredentialHasher, issuer: TokenIssuer):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        # Compared against when the user is unknown so timing matches a real check
        self._decoy_hash = hasher.hash("decoy-password")

    async def register(self, request: RegisterUser) -> User:
        """
        Register a new user.

        Args:
            request: Username and plaintext password

        Returns:
            The stored user

        Raises:
            ValidationError: If username or password is empty
            ConflictError: If the username is already registered
            InternalError: On store or hashing fault
        """
        if not request.username or not request.password:
            raise ValidationError("register user request fields cannot be empty")

        try:
            if await self.store.exists(request.username):
                raise ConflictError("user already exists")
        except UserStoreError as e:
            raise InternalError("checking if user exists failed") from e

        try:
            password_hash = self.hasher.hash(request.password)
        except HashingError as e:
            raise InternalError("error hashing user password") from e

        user = User(username=request.username, password_hash=password_hash)
        try:
            await self.store.insert(user)
        except UserAlreadyExistsError as e:
            # Lost a race with a concurrent registration of the same name
            raise ConflictError("user already exists") from e
        except UserStoreError as e:
            raise InternalError("error inserting user into the database") from e

        return user

    async def login(self, request: LoginRequest) -> str:
        """
        Authenticate a user and return an access token.

        Unknown usernames and wrong passwords are indistinguishable to the
        caller.

        Raises:
            ValidationError: If username or password is empty
            UnauthorizedError: If the credentials are invalid
            InternalError: On store fault or token signing failure
        """
        if not request.username or not request.password:
            raise ValidationError("login request fields cannot be empty")

        try:
            user = await self.store.get(request.username)
        except UserNotFoundError:
            self.hasher.verify(self._decoy_hash, request.password)
            raise UnauthorizedError("invalid credentials")
        except UserStoreError as e:
            raise InternalError("fetching user failed") from e

        if not self.hasher.verify(user.password_hash, request.password):
            raise UnauthorizedError("invalid credentials")

        try:
            return self.issuer.issue(user.username)
        except TokenSigningError as e:
            raise InternalError("token signing failed") from e

