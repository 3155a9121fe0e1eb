"""Session lifecycle: issue, rotate and revoke paired access/refresh tokens.

Raw tokens leave this module exactly once, inside the ``TokenPair`` returned
by ``issue``. Only their digests are written to the store.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from seshlock.core.config import Settings
from seshlock.core.exceptions import TokenGenerationError
from seshlock.core.security import digest_token, generate_raw_token
from seshlock.models.access_token import AccessToken
from seshlock.models.mixins import utcnow
from seshlock.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"
MYSQL_DUPLICATE_ENTRY = 1062
UNIQUE_VIOLATION_MARKERS = ("unique constraint", "unique violation", "duplicate key", "duplicate entry")

RecordT = TypeVar("RecordT", RefreshToken, AccessToken)


@dataclass(frozen=True)
class TokenPair:
    access_token: str = field(repr=False)
    access_token_expires_at: dt.datetime
    refresh_token: str = field(repr=False)
    refresh_token_expires_at: dt.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "access_token_expires_at": self.access_token_expires_at,
            "refresh_token": self.refresh_token,
            "refresh_token_expires_at": self.refresh_token_expires_at,
        }


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    args = getattr(orig, "args", None) or ()
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    message = str(orig if orig is not None else exc).lower()
    return any(marker in message for marker in UNIQUE_VIOLATION_MARKERS)


class SessionEngine:
    """Issues, rotates and revokes sessions against a SQLAlchemy session.

    Every method takes the caller's ``Session`` and commits its own work. No
    locks are held in process; uniqueness and atomicity come from the store.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Callable[[], dt.datetime] = utcnow,
        token_factory: Callable[[], str] = generate_raw_token,
    ) -> None:
        self.settings = settings
        self._clock = clock
        self._token_factory = token_factory

    def now(self) -> dt.datetime:
        return self._clock()

    # ─── Issue ───────────────────────────────────

    def issue(self, db: Session, principal: Any, device: str | None = None) -> TokenPair:
        now = self._clock()
        refresh_expires_at = now + self.settings.refresh_token_ttl
        access_expires_at = now + self.settings.access_token_ttl
        principal_id = principal.id

        raw_refresh_token, refresh_record = self._insert_unique(
            db,
            "refresh",
            lambda digest: RefreshToken(
                principal_id=principal_id,
                token_digest=digest,
                expires_at=refresh_expires_at,
                device_identifier=device,
                created_at=now,
            ),
        )
        refresh_id = refresh_record.id

        # A refresh row without its access row yet is a valid transient state.
        raw_access_token, access_record = self._insert_unique(
            db,
            "access",
            lambda digest: AccessToken(
                refresh_token_id=refresh_id,
                token_digest=digest,
                expires_at=access_expires_at,
                created_at=now,
            ),
        )
        logger.info(
            "Session issued: principal=%s refresh_token=%s access_token=%s",
            principal_id,
            refresh_id,
            access_record.id,
        )
        return TokenPair(
            access_token=raw_access_token,
            access_token_expires_at=access_expires_at,
            refresh_token=raw_refresh_token,
            refresh_token_expires_at=refresh_expires_at,
        )

    def _insert_unique(
        self,
        db: Session,
        kind: str,
        build: Callable[[str], RecordT],
    ) -> tuple[str, RecordT]:
        max_attempts = self.settings.TOKEN_INSERT_MAX_ATTEMPTS
        for attempt in range(1, max_attempts + 1):
            raw = self._token_factory()
            record = build(digest_token(raw))
            db.add(record)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if not _is_unique_violation(exc):
                    raise
                logger.warning("Token digest collision on %s insert (attempt %s/%s)", kind, attempt, max_attempts)
                continue
            return raw, record

        logger.error("Gave up storing a unique %s token after %s attempts", kind, max_attempts)
        raise TokenGenerationError(kind, max_attempts)

    # ─── Revoke ──────────────────────────────────

    def revoke(self, db: Session, refresh_token: RefreshToken) -> bool:
        """Revoke a refresh token and every access token issued under it.

        Both updates share one transaction. Returns ``True`` when this call
        revoked the refresh token and ``False`` when it was already revoked;
        the second case is a successful no-op.
        """
        now = self._clock()
        refresh_id = refresh_token.id
        try:
            cascaded = (
                db.query(AccessToken)
                .filter(AccessToken.refresh_token_id == refresh_id, AccessToken.revoked_at.is_(None))
                .update({AccessToken.revoked_at: now}, synchronize_session=False)
            )
            claimed = (
                db.query(RefreshToken)
                .filter(RefreshToken.id == refresh_id, RefreshToken.revoked_at.is_(None))
                .update({RefreshToken.revoked_at: now}, synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        if claimed:
            logger.info("Refresh token revoked: id=%s access_tokens=%s", refresh_id, cascaded)
        else:
            logger.debug("Refresh token already revoked: id=%s", refresh_id)
        return bool(claimed)

    def revoke_by_raw_token(self, db: Session, raw_refresh_token: str | None) -> None:
        """Revoke by raw value, active or not; unknown tokens are ignored."""
        if not raw_refresh_token:
            return
        record = (
            db.query(RefreshToken)
            .filter(RefreshToken.token_digest == digest_token(raw_refresh_token))
            .first()
        )
        if record is None:
            return
        self.revoke(db, record)

    # ─── Rotate ──────────────────────────────────

    def find_active_refresh_token(self, db: Session, raw_refresh_token: str) -> RefreshToken | None:
        return (
            db.query(RefreshToken)
            .filter(
                RefreshToken.token_digest == digest_token(raw_refresh_token),
                RefreshToken.active_filter(self._clock()),
            )
            .first()
        )

    def redeem(self, db: Session, refresh_token: RefreshToken, device: str | None = None) -> TokenPair | None:
        """Single-use exchange of an already-resolved refresh token.

        Fails closed: if a concurrent caller revoked the row first, nothing
        is issued and ``None`` is returned.
        """
        principal = refresh_token.principal
        refresh_id = refresh_token.id
        if not self.revoke(db, refresh_token):
            logger.warning("Refresh token redeemed concurrently, rotation refused: id=%s", refresh_id)
            return None
        logger.info("Refresh token rotated: id=%s principal=%s", refresh_id, principal.id)
        return self.issue(db, principal, device=device)

    def rotate(self, db: Session, raw_refresh_token: str | None, device: str | None = None) -> TokenPair | None:
        """Exchange a raw refresh token for a new pair.

        Unknown, expired and revoked tokens all yield ``None``.
        """
        if not raw_refresh_token:
            return None
        record = self.find_active_refresh_token(db, raw_refresh_token)
        if record is None:
            return None
        return self.redeem(db, record, device=device)
