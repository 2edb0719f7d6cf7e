"""Password hashing service using Argon2.

Provides salted, adaptive-cost password hashing and verification using the
Argon2id algorithm. Each digest embeds its own parameters
(``$argon2id$v=19$m=...,t=...,p=...``), so raising the cost never invalidates
digests that are already stored.
"""

import secrets

from argon2 import PasswordHasher, Type
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from authcore.core.config import Settings


class PasswordHashingError(Exception):
    """Raised when a digest cannot be computed. Fatal, not retryable."""


class PasswordHashingService:
    """Hash and verify passwords with a configurable work factor."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        """Initialize the hashing service.

        Args:
            time_cost: Number of Argon2 iterations.
            memory_cost: Memory usage in KiB.
            parallelism: Number of parallel lanes.
        """
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )
        # Verified against when an identity does not exist, so that branch
        # costs the same as a wrong password.
        self._dummy_hash = self.hash(secrets.token_urlsafe(16))

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHashingService":
        return cls(
            time_cost=settings.password_hash_time_cost,
            memory_cost=settings.password_hash_memory_cost,
            parallelism=settings.password_hash_parallelism,
        )

    def hash(self, password: str) -> str:
        """Hash a password using Argon2id.

        Args:
            password: The plaintext password to hash.

        Returns:
            The encoded digest.

        Raises:
            PasswordHashingError: If the digest cannot be computed.

        Example:
            >>> hasher = PasswordHashingService(time_cost=1, memory_cost=1024, parallelism=1)
            >>> hasher.hash("SecureP@ss123!").startswith("$argon2id$")
            True
        """
        try:
            return self._hasher.hash(password)
        except HashingError as e:
            raise PasswordHashingError("Failed to hash password") from e

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a digest.

        Never raises: a mismatch and a malformed digest both return False.

        Args:
            password: The plaintext password to verify.
            hashed: The stored digest.

        Returns:
            True if the password matches, False otherwise.
        """
        try:
            return self._hasher.verify(hashed, password)
        except (VerificationError, InvalidHashError):
            return False

    def verify_dummy(self, password: str) -> None:
        """Spend one full verification without a real digest."""
        self.verify(password, self._dummy_hash)

    def needs_rehash(self, hashed: str) -> bool:
        """Check if a digest was produced with different parameters.

        Should be called after successful verification. If True, the password
        should be rehashed with the current parameters.
        """
        try:
            return self._hasher.check_needs_rehash(hashed)
        except InvalidHashError:
            return True
