"""Pydantic schemas for principal responses."""

from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel


class UserOut(BaseModel):
    id: UUID
    email: str
    created_at: dt.datetime

    class Config:
        from_attributes = True
