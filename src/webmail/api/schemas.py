from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from webmail.core.db import DEFAULT_COMPOSE_FOLDER


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ComposeRequest(BaseModel):
    recipient: str | None = None
    subject: str | None = None
    body: str | None = None
    folder: str | None = DEFAULT_COMPOSE_FOLDER


class EmailUpdateRequest(BaseModel):
    """Partial update; only keys present in the JSON body are applied."""

    folder: str | None = None
    is_important: Any = None
    is_read: Any = None


class EmailRecord(BaseModel):
    id: int
    sender: str | None = None
    recipient: str | None = None
    subject: str | None = None
    body: str | None = None
    timestamp: str | None = None
    folder: str | None = None
    is_important: int = 0
    is_read: int = 0


class FolderSummary(BaseModel):
    folder: str
    total: int
    unread: int
