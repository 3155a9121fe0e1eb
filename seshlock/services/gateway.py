"""Resolve raw credentials to active session records for request handlers.

Lookups never say why a token failed: unknown, expired and revoked tokens
raise the same error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session, joinedload

from seshlock.core.exceptions import (
    InvalidCredentialsError,
    InvalidGrantError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingTokenError,
)
from seshlock.core.security import digest_token, extract_bearer_token
from seshlock.models.access_token import AccessToken
from seshlock.models.refresh_token import RefreshToken
from seshlock.services.sessions import SessionEngine, TokenPair
from seshlock.services.users import PrincipalAuthenticator, authenticate_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedSession:
    principal: Any
    access_token: AccessToken


@dataclass(frozen=True)
class LoginResult:
    principal: Any
    tokens: TokenPair


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AuthenticationGateway:
    def __init__(
        self,
        sessions: SessionEngine,
        authenticator: PrincipalAuthenticator = authenticate_user,
    ) -> None:
        self.sessions = sessions
        self.authenticator = authenticator

    # ─── Bearer flow ─────────────────────────────

    def resolve_access_token(self, db: Session, authorization: str | None) -> AuthenticatedSession:
        """Authenticate an ``Authorization: Bearer <token>`` header value."""
        raw = extract_bearer_token(authorization)
        if raw is None:
            raise MissingTokenError("Access token not provided")
        return self.authenticate_access_token(db, raw)

    def authenticate_access_token(self, db: Session, raw: str | None) -> AuthenticatedSession:
        if _is_blank(raw):
            raise MissingTokenError("Access token not provided")

        # Parent refresh token and principal come back in the same query.
        token = (
            db.query(AccessToken)
            .options(joinedload(AccessToken.refresh_token).joinedload(RefreshToken.principal))
            .filter(
                AccessToken.token_digest == digest_token(raw),
                AccessToken.active_filter(self.sessions.now()),
            )
            .first()
        )
        if token is None:
            raise InvalidTokenError()
        return AuthenticatedSession(principal=token.refresh_token.principal, access_token=token)

    # ─── Grant flow ──────────────────────────────

    def resolve_refresh_token(self, db: Session, raw: str | None) -> RefreshToken:
        if _is_blank(raw):
            raise MissingTokenError("Refresh token not provided")
        token = self.sessions.find_active_refresh_token(db, raw)
        if token is None:
            raise InvalidGrantError()
        return token

    def refresh(self, db: Session, raw: str | None, device: str | None = None) -> LoginResult:
        token = self.resolve_refresh_token(db, raw)
        principal = token.principal
        tokens = self.sessions.redeem(db, token, device=device)
        if tokens is None:
            raise InvalidGrantError()
        return LoginResult(principal=principal, tokens=tokens)

    def logout(self, db: Session, raw: str | None) -> None:
        token = self.resolve_refresh_token(db, raw)
        self.sessions.revoke(db, token)

    # ─── Login ───────────────────────────────────

    def login(
        self,
        db: Session,
        email: str | None,
        password: str | None,
        device: str | None = None,
    ) -> LoginResult:
        if _is_blank(email) or _is_blank(password):
            raise MissingCredentialsError()

        principal = self.authenticator(db, email, password)
        if principal is None:
            raise InvalidCredentialsError()

        tokens = self.sessions.issue(db, principal, device=device)
        logger.info("Login succeeded: principal=%s", principal.id)
        return LoginResult(principal=principal, tokens=tokens)
