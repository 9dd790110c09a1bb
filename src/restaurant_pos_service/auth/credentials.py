"""Password digests and login tokens.

Digests are unsalted SHA-256 hex, kept for compatibility with existing user
records. Tokens are random and not stored anywhere; nothing validates them on
later requests.
"""

import hashlib
import hmac
import secrets


def hash_password(password: str) -> str:
    """Return the SHA-256 hex digest of a plaintext password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored digest."""
    return hmac.compare_digest(hash_password(password), password_hash)


def generate_token() -> str:
    """Return an opaque 64-character hex token."""
    return secrets.token_hex(32)
