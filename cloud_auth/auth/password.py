"""
Password hashing and verification.

Uses bcrypt with automatic salting and a fixed work factor.
"""
import bcrypt

from cloud_auth.auth.exceptions import HashingError

DEFAULT_ROUNDS = 10


class CredentialHasher:
    """One-way password hashing with bcrypt."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            HashingError: If bcrypt fails (bad input, resource exhaustion)
        """
        try:
            return bcrypt.hashpw(
                password.encode('utf-8'),
                bcrypt.gensalt(rounds=self.rounds)
            ).decode('utf-8')
        except (ValueError, TypeError, MemoryError) as e:
            raise HashingError(str(e)) from e

    def verify(self, password_hash: str, password: str) -> bool:
        """Check if provided password matches the stored hash."""
        try:
            return bcrypt.checkpw(
                password.encode('utf-8'),
                password_hash.encode('utf-8')
            )
        except (ValueError, TypeError):
            # Malformed stored hash
            return False
