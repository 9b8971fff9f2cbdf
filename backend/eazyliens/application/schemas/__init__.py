from .record import (
    CellColorResponse,
    ColorsUpdate,
    FieldUpdate,
    RecordPageResponse,
    RecordResponse,
)
from .dropdown_option import DropdownOptionRowResponse, OptionWrite
from .audit_log import AuditLogResponse, CurrentUserResponse
from .color_rule import ColorRuleResponse

__all__ = [
    "CellColorResponse",
    "ColorsUpdate",
    "FieldUpdate",
    "RecordPageResponse",
    "RecordResponse",
    "DropdownOptionRowResponse",
    "OptionWrite",
    "AuditLogResponse",
    "CurrentUserResponse",
    "ColorRuleResponse",
]
