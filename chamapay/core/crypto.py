"""Password hashing and payload signing helpers."""

from __future__ import annotations

import hashlib
import hmac

import bcrypt


def hash_password(password: str) -> str:
    """Hash plain text password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def sign_payload(secret: str, payload: bytes) -> str:
    """Hex HMAC-SHA512 digest, the scheme Paystack uses for webhook signatures."""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha512).hexdigest()


def signature_matches(secret: str, payload: bytes, signature: str) -> bool:
    if not secret or not signature:
        return False
    return hmac.compare_digest(sign_payload(secret, payload), signature.strip().lower())


__all__ = ["hash_password", "verify_password", "sign_payload", "signature_matches"]
