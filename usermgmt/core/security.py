"""Password hashing helpers (bcrypt)."""

from typing import Optional

import bcrypt

from usermgmt.config import DEFAULT_SALT_ROUNDS

# bcrypt only reads the first 72 bytes of a secret; newer releases raise
# instead of ignoring the rest.
BCRYPT_MAX_BYTES = 72

# Digest compared against when the account does not exist, so an unknown
# email costs about as much as a wrong password.
_DUMMY_DIGEST: Optional[str] = None


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_SALT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Verify a password against its hash. Any failure is a non-match."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


def burn_verification(password: str, rounds: int = DEFAULT_SALT_ROUNDS) -> bool:
    """Run a verification that always fails."""
    global _DUMMY_DIGEST
    if _DUMMY_DIGEST is None:
        _DUMMY_DIGEST = hash_password("not-a-real-password", rounds)
    verify_password(password or "", _DUMMY_DIGEST)
    return False
