"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

import bcrypt

from sso.kernel.identity.errors import HashingError

# Default bcrypt cost factor; raise it as hardware gets faster
BCRYPT_ROUNDS = 12

# bcrypt only uses the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    Password hashing policy.

    Salted bcrypt with a tunable cost factor. Hashes are returned as raw
    bytes so storage never has to care about their encoding.
    """

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Truncate password to 72 bytes (bcrypt limit) and encode.

        Recent bcrypt releases reject longer inputs instead of truncating
        them silently.
        """
        return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]

    def hash(self, password: str) -> bytes:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            bcrypt hash (includes algorithm, cost and salt)

        Raises:
            ValueError: If the password is empty
            HashingError: If the bcrypt primitive fails
        """
        if not password:
            raise ValueError("password must not be empty")

        pwd_bytes = self._truncate_password(password)
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(pwd_bytes, salt)
        except (ValueError, TypeError, MemoryError) as e:
            raise HashingError("PasswordHasher.hash") from e

    def verify(self, password: str, password_hash: bytes) -> bool:
        """
        Verify a password against its hash in constant time.

        Args:
            password: Plain text password to verify
            password_hash: Stored bcrypt hash

        Returns:
            True if password matches, False otherwise (including malformed hashes)
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(self._truncate_password(password), password_hash)
        except (ValueError, TypeError):
            return False

    def needs_rehash(self, password_hash: bytes) -> bool:
        """
        Check if a password hash was made with a different cost factor.

        Format: $2b$XX$... where XX is the rounds.
        """
        parts = password_hash.split(b"$")
        if len(parts) < 4:
            return True
        try:
            return int(parts[2]) != self.rounds
        except ValueError:
            return True


_default_hasher: Optional[PasswordHasher] = None


def get_password_hasher() -> PasswordHasher:
    """Get or create the default password hasher."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


# Convenience functions
def hash_password(password: str) -> bytes:
    """Hash a password."""
    return get_password_hasher().hash(password)


def verify_password(password: str, password_hash: bytes) -> bool:
    """Verify a password."""
    return get_password_hasher().verify(password, password_hash)
