"""
Password hashing - bcrypt wrappers.

Hashes are bcrypt with a cost factor of at least 10. Verification is
bcrypt's own constant-time comparison. ``verify_password`` accepts
``None`` as the stored hash and then checks against a pre-computed dummy
hash, so a lookup miss costs the same bcrypt round as a real comparison.
"""

import bcrypt

DEFAULT_COST = 10

# bcrypt only reads the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72

# Hash of a throwaway value, compared against when no stored hash exists.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(DEFAULT_COST))


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, cost: int = DEFAULT_COST) -> str:
    """Hash a plaintext password with a fresh salt."""
    if cost < DEFAULT_COST:
        raise ValueError(f"bcrypt cost must be at least {DEFAULT_COST}")
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=cost)).decode()


def verify_password(password: str, hashed_password: str | None) -> bool:
    """
    Check a plaintext password against a stored bcrypt hash.

    Returns False (after a full bcrypt round) when hashed_password is None.

    Raises:
        ValueError: If the stored value is not a bcrypt hash
    """
    if hashed_password is None:
        bcrypt.checkpw(_encode(password), _DUMMY_BCRYPT_HASH)
        return False
    return bcrypt.checkpw(_encode(password), hashed_password.encode())
