"""
Error taxonomy for the authentication core.

Service errors map one-to-one onto HTTP outcomes. Leaf errors are raised
by the hasher, the token issuer and the user store and are translated
into service errors by ``AuthService``.
"""


class AuthError(Exception):
    """Base class for errors surfaced by the auth service."""


class ValidationError(AuthError):
    """Request is missing required fields or is malformed."""


class ConflictError(AuthError):
    """A user with the requested username already exists."""


class UnauthorizedError(AuthError):
    """Credentials or token were rejected."""


class InternalError(AuthError):
    """A store, hashing or signing fault prevented the operation."""


class HashingError(Exception):
    """The password hasher failed internally."""


class TokenError(Exception):
    """Base class for token issuance and validation failures."""


class InvalidTokenError(TokenError):
    """Bad signature, unsupported algorithm or unparseable claims."""


class ExpiredTokenError(TokenError):
    """The token's expiry has passed."""


class TokenSigningError(TokenError):
    """The token could not be signed."""


class UserStoreError(Exception):
    """The user store failed to complete a request."""


class UserNotFoundError(UserStoreError):
    """No user is stored under the requested username."""


class UserAlreadyExistsError(UserStoreError):
    """A conditional insert found the username already taken."""
