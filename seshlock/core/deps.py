"""Common FastAPI dependencies for session authentication."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from seshlock.db.session import get_db
from seshlock.services.gateway import AuthenticatedSession, AuthenticationGateway
from seshlock.services.sessions import SessionEngine


def get_session_engine(request: Request) -> SessionEngine:
    return request.app.state.session_engine


def get_gateway(request: Request) -> AuthenticationGateway:
    return request.app.state.gateway


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
    gateway: AuthenticationGateway = Depends(get_gateway),
) -> AuthenticatedSession:
    return gateway.resolve_access_token(db, request.headers.get("Authorization"))
