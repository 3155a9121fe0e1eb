"""Convenience imports for Alembic metadata discovery."""

from seshlock.models.user import User
from seshlock.models.refresh_token import RefreshToken
from seshlock.models.access_token import AccessToken

__all__ = ["AccessToken", "RefreshToken", "User"]
