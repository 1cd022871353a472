"""Password hashing: salted PBKDF2 with read-only support for legacy digests.

Stored format for new hashes is ``"<salt hex>:<derived key hex>"``.
A stored value without the separator is a legacy unsalted SHA-256 hex digest;
such hashes still verify but are never produced.
"""

import hashlib
import hmac
import secrets

PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
KEY_BYTES = 32
SEPARATOR = ':'


def _derive(password: str, salt: bytes) -> str:
    key = hashlib.pbkdf2_hmac(
        'sha256', password.encode('utf-8'), salt, PBKDF2_ITERATIONS, dklen=KEY_BYTES
    )
    return key.hex()


def _legacy_digest(password: str) -> str:
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


def is_legacy_hash(stored_hash: str) -> bool:
    return SEPARATOR not in stored_hash


def hash_password(password: str) -> str:
    """Hash password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{salt.hex()}{SEPARATOR}{_derive(password, salt)}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check password against a stored hash of either format.

    Returns False for malformed stored values instead of raising.
    """
    if not stored_hash:
        return False

    if is_legacy_hash(stored_hash):
        return _legacy_digest(password) == stored_hash

    salt_hex, expected = stored_hash.split(SEPARATOR, 1)
    try:
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    return hmac.compare_digest(_derive(password, salt).encode(), expected.encode("utf-8"))
