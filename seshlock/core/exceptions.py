"""Custom exceptions for session and credential error handling."""

from __future__ import annotations

from typing import Optional, Dict, Any


class SeshlockError(Exception):
    """Base exception for all session errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 401,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


# ===== TOKEN EXCEPTIONS =====


class MissingTokenError(SeshlockError):
    """Raised when no token is provided."""

    def __init__(self, message: str = "Token not provided"):
        super().__init__(
            message,
            error_code="MISSING_TOKEN",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class MalformedTokenError(SeshlockError):
    """Raised when the Authorization header is not in "Bearer <token>" format."""

    def __init__(self, message: str = "Authorization header must start with 'Bearer'"):
        super().__init__(
            message,
            error_code="MALFORMED_TOKEN",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(SeshlockError):
    """Raised when the access token is unknown, expired or revoked."""

    def __init__(self, message: str = "Token is expired or revoked"):
        super().__init__(
            message,
            error_code="INVALID_TOKEN",
            status_code=401,
            headers={"WWW-Authenticate": 'Bearer error="invalid_token"'},
        )


class InvalidGrantError(SeshlockError):
    """Raised when the refresh token is unknown, expired or revoked."""

    def __init__(self, message: str = "The refresh token is invalid or has expired"):
        super().__init__(message, error_code="INVALID_GRANT", status_code=400)


# ===== CREDENTIAL EXCEPTIONS =====


class MissingCredentialsError(SeshlockError):
    """Raised when email or password is not provided."""

    def __init__(self, message: str = "Email and password are required"):
        super().__init__(message, error_code="MISSING_CREDENTIALS", status_code=400)


class InvalidCredentialsError(SeshlockError):
    """Raised when email or password is incorrect."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, error_code="INVALID_CREDENTIALS", status_code=401)


# ===== STORE EXCEPTIONS =====


class TokenGenerationError(SeshlockError):
    """Raised when no unique token could be stored within the attempt budget."""

    def __init__(self, kind: str, attempts: int):
        super().__init__(
            f"Could not store a unique {kind} token after {attempts} attempts",
            error_code="TOKEN_GENERATION_FAILED",
            details={"kind": kind, "attempts": attempts},
            status_code=500,
        )
