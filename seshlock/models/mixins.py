"""Columns and status helpers shared by the access and refresh token tables."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import ColumnElement, DateTime, String, and_
from sqlalchemy.orm import Mapped, mapped_column

DIGEST_LENGTH = 71


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def as_utc(value: dt.datetime) -> dt.datetime:
    # SQLite hands back naive datetimes; every stored value is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


class TokenStatusMixin:
    """Digest, lifetime and revocation columns for an issued credential.

    A token is active while ``revoked_at`` is unset and ``expires_at`` is
    strictly later than the evaluation time. ``revoked_at`` only ever moves
    from ``None`` to a timestamp.
    """

    token_digest: Mapped[str] = mapped_column(String(DIGEST_LENGTH), unique=True, index=True, nullable=False)
    expires_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: dt.datetime | None = None) -> bool:
        return (now or utcnow()) >= as_utc(self.expires_at)

    def is_active(self, now: dt.datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_expired(now)

    @classmethod
    def active_filter(cls, now: dt.datetime) -> ColumnElement[bool]:
        return and_(cls.revoked_at.is_(None), cls.expires_at > now)
