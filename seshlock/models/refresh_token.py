"""Refresh token model: the long-lived half of a session."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seshlock.db.base import Base
from seshlock.models.mixins import TokenStatusMixin

if TYPE_CHECKING:
    from seshlock.models.access_token import AccessToken
    from seshlock.models.user import User


class RefreshToken(TokenStatusMixin, Base):
    __tablename__ = "seshlock_refresh_tokens"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    principal_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_identifier: Mapped[str | None] = mapped_column(String(255), nullable=True)

    principal: Mapped["User"] = relationship(back_populates="refresh_tokens")
    access_tokens: Mapped[list["AccessToken"]] = relationship(
        back_populates="refresh_token",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"<RefreshToken id={self.id} principal_id={self.principal_id}>"
