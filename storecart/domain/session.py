"""Externally maintained visitor session record."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Session(BaseModel):
    """Current user as written by the host site's login flow."""

    id: Optional[str] = Field(None, description="Authenticated user id")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Contact email")

    class Config:
        """Pydantic config."""

        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_authenticated(self) -> bool:
        return bool(self.id)


def session_id(session: Session | None) -> str | None:
    """Authenticated id of a session, or ``None`` for guests."""
    if session is None or not session.is_authenticated:
        return None
    return session.id
