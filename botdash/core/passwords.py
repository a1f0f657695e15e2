"""
Password hashing with scrypt.

Stored format is "<hex hash>.<hex salt>". A fresh salt is drawn from
the `secrets` module for every hash.
"""

import hashlib
import hmac
import secrets

from botdash.config import get_settings

settings = get_settings()

# scrypt cost parameters (N=2^14, r=8, p=1)
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=settings.auth.KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """
    Hash a password with a newly generated salt.

    Args:
        password: Plaintext password

    Returns:
        Encoded "hash.salt" string
    """
    salt = secrets.token_hex(settings.auth.SALT_BYTES)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    """
    Check a plaintext password against a stored "hash.salt" value.

    Args:
        supplied: Plaintext password to check
        stored: Value previously returned by hash_password()

    Returns:
        True on match. False on mismatch or a malformed stored value.
    """
    hashed, sep, salt = (stored or "").partition(".")
    if not sep or not hashed or not salt:
        return False

    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False

    supplied_hash = _derive(supplied, salt)
    if len(supplied_hash) != len(expected):
        return False

    return hmac.compare_digest(supplied_hash, expected)
