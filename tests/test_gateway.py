from __future__ import annotations

import datetime as dt
import logging

import pytest
from sqlalchemy import event

from seshlock.core.exceptions import (
    InvalidCredentialsError,
    InvalidGrantError,
    InvalidTokenError,
    MalformedTokenError,
    MissingCredentialsError,
    MissingTokenError,
)
from seshlock.services.gateway import AuthenticationGateway
from seshlock.services.users import create_user

PASSWORD = "correct horse battery staple"


def _bearer(raw: str) -> str:
    return f"Bearer {raw}"


# ─── access tokens ───────────────────────────────


def test_resolve_access_token_returns_principal(db, gateway, sessions, user) -> None:
    pair = sessions.issue(db, user)

    current = gateway.resolve_access_token(db, _bearer(pair.access_token))

    assert current.principal.id == user.id
    assert current.access_token.refresh_token.principal_id == user.id


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   "])
def test_resolve_access_token_without_token(db, gateway, header) -> None:  # noqa: ANN001
    with pytest.raises(MissingTokenError):
        gateway.resolve_access_token(db, header)


@pytest.mark.parametrize("header", ["Token abc", "Basic dXNlcjpwYXNz", "abc"])
def test_resolve_access_token_with_other_scheme(db, gateway, header: str) -> None:
    with pytest.raises(MalformedTokenError):
        gateway.resolve_access_token(db, header)


def test_resolve_access_token_unknown(db, gateway) -> None:
    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer("does-not-exist"))


def test_access_token_expires_exactly_at_expiry(db, gateway, sessions, clock, user) -> None:
    pair = sessions.issue(db, user)

    clock.now = pair.access_token_expires_at - dt.timedelta(seconds=1)
    assert gateway.resolve_access_token(db, _bearer(pair.access_token)).principal.id == user.id

    clock.now = pair.access_token_expires_at
    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(pair.access_token))


def test_access_token_rejected_after_session_revoked(db, gateway, sessions, user) -> None:
    pair = sessions.issue(db, user)
    sessions.revoke_by_raw_token(db, pair.refresh_token)

    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(pair.access_token))


def test_access_token_lookup_is_a_single_query(
    db, db_engine, session_factory, gateway, sessions, user
) -> None:  # noqa: ANN001
    pair = sessions.issue(db, user)
    statements: list[str] = []

    def _count(conn, cursor, statement, parameters, context, executemany) -> None:  # noqa: ANN001
        statements.append(statement)

    event.listen(db_engine, "before_cursor_execute", _count)
    try:
        with session_factory() as fresh:
            current = gateway.resolve_access_token(fresh, _bearer(pair.access_token))
            assert current.principal.email == "u1@example.com"
            assert current.access_token.refresh_token.id is not None
    finally:
        event.remove(db_engine, "before_cursor_execute", _count)

    assert len(statements) == 1


# ─── refresh tokens ──────────────────────────────


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_resolve_refresh_token_missing(db, gateway, raw) -> None:  # noqa: ANN001
    with pytest.raises(MissingTokenError):
        gateway.resolve_refresh_token(db, raw)


def test_resolve_refresh_token_unknown_expired_or_revoked(db, gateway, sessions, clock, user) -> None:
    with pytest.raises(InvalidGrantError):
        gateway.resolve_refresh_token(db, "does-not-exist")

    expired = sessions.issue(db, user)
    revoked = sessions.issue(db, user)
    sessions.revoke_by_raw_token(db, revoked.refresh_token)
    with pytest.raises(InvalidGrantError):
        gateway.resolve_refresh_token(db, revoked.refresh_token)

    clock.now = expired.refresh_token_expires_at
    with pytest.raises(InvalidGrantError):
        gateway.resolve_refresh_token(db, expired.refresh_token)


def test_refresh_rotates_session(db, gateway, sessions, clock, user) -> None:
    pair = sessions.issue(db, user)

    result = gateway.refresh(db, pair.refresh_token, device="phone")

    assert result.principal.id == user.id
    assert result.tokens.refresh_token != pair.refresh_token
    with pytest.raises(InvalidGrantError):
        gateway.refresh(db, pair.refresh_token)
    assert gateway.resolve_access_token(db, _bearer(result.tokens.access_token)).principal.id == user.id


def test_refresh_fails_closed_when_token_was_already_redeemed(db, gateway, sessions, user, monkeypatch) -> None:
    pair = sessions.issue(db, user)
    stale = sessions.find_active_refresh_token(db, pair.refresh_token)
    sessions.revoke(db, stale)
    monkeypatch.setattr(gateway, "resolve_refresh_token", lambda _db, _raw: stale)

    with pytest.raises(InvalidGrantError):
        gateway.refresh(db, pair.refresh_token)


def test_logout_revokes_session(db, gateway, sessions, user) -> None:
    pair = sessions.issue(db, user)

    gateway.logout(db, pair.refresh_token)

    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(pair.access_token))
    with pytest.raises(InvalidGrantError):
        gateway.logout(db, pair.refresh_token)


def test_logout_without_token(db, gateway) -> None:
    with pytest.raises(MissingTokenError):
        gateway.logout(db, None)


# ─── login ───────────────────────────────────────


def test_login_issues_session(db, gateway, user) -> None:
    result = gateway.login(db, "u1@example.com", PASSWORD, device="laptop")

    assert result.principal.id == user.id
    current = gateway.resolve_access_token(db, _bearer(result.tokens.access_token))
    assert current.access_token.refresh_token.device_identifier == "laptop"


@pytest.mark.parametrize(
    ("email", "password"),
    [(None, PASSWORD), ("u1@example.com", None), ("", PASSWORD), ("u1@example.com", "  ")],
)
def test_login_requires_email_and_password(db, gateway, user, email, password) -> None:  # noqa: ANN001
    with pytest.raises(MissingCredentialsError):
        gateway.login(db, email, password)


@pytest.mark.parametrize(
    ("email", "password"),
    [("u1@example.com", "wrong password"), ("nobody@example.com", PASSWORD)],
)
def test_login_rejects_bad_credentials(db, gateway, user, email: str, password: str) -> None:
    with pytest.raises(InvalidCredentialsError):
        gateway.login(db, email, password)


def test_login_uses_custom_authenticator(db, sessions, user) -> None:
    calls: list[tuple[str, str]] = []

    def _authenticate(_db, email: str, password: str):  # noqa: ANN001, ANN202
        calls.append((email, password))
        return user if password == "pin-1234" else None

    gateway = AuthenticationGateway(sessions, authenticator=_authenticate)

    assert gateway.login(db, "anyone", "pin-1234").principal is user
    with pytest.raises(InvalidCredentialsError):
        gateway.login(db, "anyone", PASSWORD)
    assert calls == [("anyone", "pin-1234"), ("anyone", PASSWORD)]


# ─── lifecycle ───────────────────────────────────


def test_full_session_lifecycle(db, gateway, sessions, clock) -> None:
    user = create_user(db, "lifecycle@example.com", PASSWORD)

    login = gateway.login(db, "lifecycle@example.com", PASSWORD)
    assert gateway.resolve_access_token(db, _bearer(login.tokens.access_token)).principal.id == user.id

    clock.advance(minutes=10)
    rotated = gateway.refresh(db, login.tokens.refresh_token)
    assert rotated.tokens.access_token_expires_at == clock.now + dt.timedelta(minutes=15)
    with pytest.raises(InvalidGrantError):
        gateway.refresh(db, login.tokens.refresh_token)
    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(login.tokens.access_token))

    clock.advance(minutes=16)
    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(rotated.tokens.access_token))

    again = gateway.refresh(db, rotated.tokens.refresh_token)
    gateway.logout(db, again.tokens.refresh_token)
    with pytest.raises(InvalidTokenError):
        gateway.resolve_access_token(db, _bearer(again.tokens.access_token))
    with pytest.raises(InvalidGrantError):
        gateway.refresh(db, again.tokens.refresh_token)


def test_session_flows_keep_tokens_out_of_logs(db, gateway, sessions, user, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="seshlock")

    issued = sessions.issue(db, user)
    rotated = sessions.rotate(db, issued.refresh_token)
    sessions.revoke_by_raw_token(db, rotated.refresh_token)
    sessions.revoke_by_raw_token(db, rotated.refresh_token)
    login = gateway.login(db, "u1@example.com", PASSWORD)
    refreshed = gateway.refresh(db, login.tokens.refresh_token)
    gateway.logout(db, refreshed.tokens.refresh_token)

    raw_tokens = [
        token
        for pair in (issued, rotated, login.tokens, refreshed.tokens)
        for token in (pair.access_token, pair.refresh_token)
    ]
    messages = [record.getMessage() for record in caplog.records if record.name.startswith("seshlock")]
    assert any("Session issued" in message for message in messages)
    for message in messages:
        assert "sha256:" not in message
        assert PASSWORD not in message
        for token in raw_tokens:
            assert token not in message
