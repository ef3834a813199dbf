from __future__ import annotations

from pydantic import BaseModel, Field


class RemoteImage(BaseModel):
    content: bytes
    declared_length: int | None = Field(default=None, ge=0)
    content_type: str | None = None  # as reported by the remote server, unverified
