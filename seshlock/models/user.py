"""User model: the reference principal that owns sessions."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from seshlock.db.base import Base
from seshlock.models.mixins import utcnow

if TYPE_CHECKING:
    from seshlock.models.refresh_token import RefreshToken
    from seshlock.services.sessions import SessionEngine, TokenPair


class User(Base):
    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Deleting a user removes its tokens through ON DELETE CASCADE, not the ORM.
    refresh_tokens: Mapped[list["RefreshToken"]] = relationship(
        back_populates="principal",
        passive_deletes="all",
    )

    def issue_session(self, db: Session, engine: "SessionEngine", device: str | None = None) -> "TokenPair":
        return engine.issue(db, self, device=device)
