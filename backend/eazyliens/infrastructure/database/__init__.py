from .base import Base
from .session import engine, async_session_factory, get_db_session
from .models import AuditLogModel, DropdownOptionModel, ListColorModel, RecordModel, UserModel

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_db_session",
    "AuditLogModel",
    "DropdownOptionModel",
    "ListColorModel",
    "RecordModel",
    "UserModel",
]
