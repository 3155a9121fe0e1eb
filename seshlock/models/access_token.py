"""Access token model: the short-lived bearer credential."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seshlock.db.base import Base
from seshlock.models.mixins import TokenStatusMixin

if TYPE_CHECKING:
    from seshlock.models.refresh_token import RefreshToken


class AccessToken(TokenStatusMixin, Base):
    __tablename__ = "seshlock_access_tokens"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    # The principal is reached through the parent refresh token only.
    refresh_token_id: Mapped[UUID] = mapped_column(
        ForeignKey("seshlock_refresh_tokens.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    refresh_token: Mapped["RefreshToken"] = relationship(back_populates="access_tokens")

    def __repr__(self) -> str:
        return f"<AccessToken id={self.id} refresh_token_id={self.refresh_token_id}>"
