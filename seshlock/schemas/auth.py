"""Session schemas (login, refresh, logout, token response).

Credential and token fields are optional here so that absent values reach
the gateway and fail as missing credentials or missing tokens instead of
as schema validation errors.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, field_validator

from seshlock.core.sanitize import clean_email, clean_single_line, clean_token
from seshlock.schemas.user import UserOut

MAX_DEVICE_LEN = 255


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    device: str | None = Field(default=None, max_length=MAX_DEVICE_LEN)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return clean_email(value)

    @field_validator("device", mode="before")
    @classmethod
    def normalize_device(cls, value: str | None) -> str | None:
        return clean_single_line(value) or None


class RefreshRequest(BaseModel):
    refresh_token: str | None = None
    device: str | None = Field(default=None, max_length=MAX_DEVICE_LEN)

    @field_validator("refresh_token", mode="before")
    @classmethod
    def normalize_refresh_token(cls, value: str | None) -> str | None:
        return clean_token(value)

    @field_validator("device", mode="before")
    @classmethod
    def normalize_device(cls, value: str | None) -> str | None:
        return clean_single_line(value) or None


class LogoutRequest(BaseModel):
    refresh_token: str | None = None

    @field_validator("refresh_token", mode="before")
    @classmethod
    def normalize_refresh_token(cls, value: str | None) -> str | None:
        return clean_token(value)


class TokenResponse(BaseModel):
    access_token: str
    access_token_expires_at: dt.datetime
    refresh_token: str
    refresh_token_expires_at: dt.datetime
    token_type: str = "bearer"
    user: UserOut


class MessageResponse(BaseModel):
    message: str
