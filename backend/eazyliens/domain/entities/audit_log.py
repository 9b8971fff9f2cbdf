"""Domain entity for audit log entries — one per successful record mutation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class AuditAction(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    COLOR = "COLOR"
    DELETE = "DELETE"


@dataclass
class AuditLogEntry:
    action: AuditAction
    record_id: int | None
    column: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    username: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
