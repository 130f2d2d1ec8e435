"""Write events.

Every completed write is described by a :class:`WriteEvent`, handed to the
registry's ``on_write`` hook once the listener fan-out has finished.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WriteKind(StrEnum):
    PATH = "path"
    ROOT = "root"


class WriteEvent(BaseModel):
    """A write that has been applied and dispatched."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Namespace written to")
    kind: WriteKind
    path: str | None = Field(default=None, description="Dotted path, None for root writes")
    segments: tuple[str, ...] = ()
    changed: bool = Field(default=True, description="Whether the leaf identity changed")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("namespace")
    @classmethod
    def _check_namespace(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("namespace must be non-empty")
        return value

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _check_kind(self) -> WriteEvent:
        if self.kind is WriteKind.ROOT and self.segments:
            raise ValueError("root writes carry no segments")
        if self.kind is WriteKind.PATH and not self.segments:
            raise ValueError("path writes need at least one segment")
        return self
