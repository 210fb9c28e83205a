"""Password hashing helpers using passlib.

- hash_password(plain: str) -> str
- verify_password(plain: str, hashed: str) -> bool
- dummy_verify() burns the same time as a real check, for unknown usernames

bcrypt via passlib's CryptContext. The cost can be set with ``BCRYPT_ROUNDS``.
If the bcrypt backend cannot initialize, pbkdf2_sha256 is used instead.
"""
from __future__ import annotations

import warnings

from passlib.context import CryptContext

from notekeeper.core import config


def _build_context() -> CryptContext:
    rounds = config.bcrypt_rounds()
    try:
        if rounds:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        else:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")
        ctx.hash("probe")
        return ctx
    except Exception as exc:
        warnings.warn(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256. "
            f"Original error: {exc}",
            RuntimeWarning,
        )
    if rounds:
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__rounds=rounds)
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


pwd_context = _build_context()


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the encoded hash string."""
    if not plain:
        raise ValueError("Password must not be empty")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against a stored hash.

    Returns True if the password matches, False otherwise (including for
    malformed hashes).
    """
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    pwd_context.dummy_verify()
