"""
JWT token handling for authentication.

This module provides functionality for:
- Issuing signed access tokens
- Validating tokens and enforcing expiry

Tokens are HS256 JWTs carrying two claims: ``user`` (the username) and
``expires`` (a unix timestamp in seconds).
"""
import logging
import time
from typing import Callable

import jwt
from jwt.exceptions import PyJWTError
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as ClaimsValidationError

from cloud_auth.auth.exceptions import ExpiredTokenError, InvalidTokenError, TokenSigningError

logger = logging.getLogger("cloud_auth")

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL_SECONDS = 60 * 60


class TokenClaims(BaseModel):
    """Token payload model."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: str = Field(alias="user", min_length=1, strict=True)
    expires_at: int = Field(alias="expires", strict=True)


class TokenIssuer:
    """
    Stateless token issuance and validation with a single shared secret.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def issue(self, username: str) -> str:
        """
        Create a signed access token for a user.

        Args:
            username: Subject of the token

        Returns:
            Encoded JWT token string

        Raises:
            TokenSigningError: If the token could not be signed
        """
        try:
            claims = TokenClaims(subject=username, expires_at=self._now() + self.ttl_seconds)
            return jwt.encode(claims.model_dump(by_alias=True), self._secret, algorithm=ALGORITHM)
        except (PyJWTError, ClaimsValidationError, TypeError, ValueError) as e:
            logger.error(f"ERROR: token signing failed: {e!r}")
            raise TokenSigningError("token signing failed") from e

    def validate(self, token: str) -> TokenClaims:
        """
        Verify a token's signature and expiry.

        Args:
            token: JWT token string

        Returns:
            The token's claims

        Raises:
            InvalidTokenError: Bad signature, algorithm or claims
            ExpiredTokenError: The current time is past the token's expiry
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
            claims = TokenClaims.model_validate(payload)
        except PyJWTError as e:
            raise InvalidTokenError("unauthorized") from e
        except ClaimsValidationError as e:
            raise InvalidTokenError("token claims of unrecognized shape") from e

        if self._now() > claims.expires_at:
            raise ExpiredTokenError("token expired")
        return claims
