"""Opaque access/refresh session tokens backed by a SQL store."""

from seshlock.core.config import Settings, get_settings
from seshlock.core.exceptions import (
    InvalidCredentialsError,
    InvalidGrantError,
    InvalidTokenError,
    MalformedTokenError,
    MissingCredentialsError,
    MissingTokenError,
    SeshlockError,
    TokenGenerationError,
)
from seshlock.core.security import digest_token, generate_raw_token
from seshlock.models import AccessToken, RefreshToken, User
from seshlock.services.gateway import AuthenticatedSession, AuthenticationGateway, LoginResult
from seshlock.services.sessions import SessionEngine, TokenPair

__version__ = "0.1.0"

__all__ = [
    "AccessToken",
    "AuthenticatedSession",
    "AuthenticationGateway",
    "InvalidCredentialsError",
    "InvalidGrantError",
    "InvalidTokenError",
    "LoginResult",
    "MalformedTokenError",
    "MissingCredentialsError",
    "MissingTokenError",
    "RefreshToken",
    "SeshlockError",
    "SessionEngine",
    "Settings",
    "TokenGenerationError",
    "TokenPair",
    "User",
    "digest_token",
    "generate_raw_token",
    "get_settings",
]
