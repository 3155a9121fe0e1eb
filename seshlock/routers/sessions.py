"""Session endpoints (login, refresh, logout, me)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from seshlock.core.deps import get_current_session, get_gateway
from seshlock.db.session import get_db
from seshlock.schemas.auth import LoginRequest, LogoutRequest, MessageResponse, RefreshRequest, TokenResponse
from seshlock.schemas.user import UserOut
from seshlock.services.gateway import AuthenticatedSession, AuthenticationGateway, LoginResult

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_response(result: LoginResult) -> TokenResponse:
    return TokenResponse(
        **result.tokens.to_dict(),
        user=UserOut.model_validate(result.principal),
    )


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    gateway: AuthenticationGateway = Depends(get_gateway),
) -> TokenResponse:
    result = gateway.login(db, payload.email, payload.password, device=payload.device)
    return _token_response(result)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    gateway: AuthenticationGateway = Depends(get_gateway),
) -> TokenResponse:
    result = gateway.refresh(db, payload.refresh_token, device=payload.device)
    return _token_response(result)


@router.post("/logout", response_model=MessageResponse)
def logout(
    payload: LogoutRequest,
    db: Session = Depends(get_db),
    gateway: AuthenticationGateway = Depends(get_gateway),
) -> MessageResponse:
    gateway.logout(db, payload.refresh_token)
    return MessageResponse(message="logged_out")


@router.get("/me", response_model=UserOut)
def me(current: AuthenticatedSession = Depends(get_current_session)) -> UserOut:
    return UserOut.model_validate(current.principal)
