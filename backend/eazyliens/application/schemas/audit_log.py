"""Pydantic DTOs for audit log entries and the current user."""

from datetime import datetime

from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    action: str
    record_id: int | None
    column: str | None
    old_value: str | None
    new_value: str | None
    username: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserResponse(BaseModel):
    username: str
    role: str
    capabilities: list[str]
