"""Security helpers for opaque session tokens and password hashing."""

from __future__ import annotations

import hashlib
import secrets

from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from seshlock.core.exceptions import MalformedTokenError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

TOKEN_BYTES = 32
DIGEST_PREFIX = "sha256:"
BEARER_SCHEME = "bearer"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except PasswordSizeError:
        return False


def generate_raw_token() -> str:
    """Return 32 random bytes as 64 lowercase hex characters."""
    return secrets.token_hex(TOKEN_BYTES)


def digest_token(raw: str) -> str:
    """Return the storage digest of a raw token.

    The ``sha256:`` prefix and 64-char hex body are the lookup key for rows
    already in the database, so both must stay fixed.
    """
    return DIGEST_PREFIX + hashlib.sha256(raw.encode("utf-8")).hexdigest()


def extract_bearer_token(authorization: str | None) -> str | None:
    """Pull the raw token out of an Authorization header value.

    Returns ``None`` when there is nothing to authenticate with and raises
    ``MalformedTokenError`` when a header is present with another scheme.

    Deliberately lenient: the scheme matches in any case (RFC 7235), and a
    bare ``Bearer`` with no token counts as missing rather than malformed.
    """
    if authorization is None or not authorization.strip():
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        raise MalformedTokenError()
    cleaned = token.strip()
    return cleaned or None
