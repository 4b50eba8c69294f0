"""Pydantic models for API request/response."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from offline_sync.core.record import Record

# ============ Request Models ============


class RecordCreateRequest(BaseModel):
    """Request to create a record. The server assigns the id."""

    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    email: str = Field(..., min_length=1, max_length=320, description="Unique email address")
    department: str = Field("", max_length=200)
    position: str = Field("", max_length=200)
    updated_at: datetime | None = Field(None, description="Last modification time (default: now)")

    def to_record(self, record_id: int = 0) -> Record:
        data: dict[str, Any] = self.model_dump(exclude_none=True)
        data["id"] = record_id
        return Record.from_dict(data)


class RecordUpdateRequest(RecordCreateRequest):
    """Request to replace a record. A body id, when given, must match the path."""

    id: int | None = Field(None, description="Record id; must equal the path id")


# ============ Response Models ============


class RecordResponse(BaseModel):
    """A stored record."""

    id: int
    name: str
    email: str
    department: str
    position: str
    updated_at: datetime

    @classmethod
    def from_record(cls, record: Record) -> RecordResponse:
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            department=record.department,
            position=record.position,
            updated_at=record.updated_at,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    records: int = Field(0, description="Number of stored records")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
