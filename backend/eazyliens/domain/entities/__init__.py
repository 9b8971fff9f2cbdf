from .record import (
    COLOR_FIELD,
    COLUMN_ATTRIBUTES,
    COLUMN_MAX_LENGTHS,
    DATE_COLUMN,
    RECORD_COLUMNS,
    Record,
    RecordPage,
    length_error,
    parse_color_map,
    placeholder_values,
)
from .dropdown_option import LIST_COLUMNS, DropdownOptionRow, group_options
from .user import ROLE_CAPABILITIES, Capability, Role, User, has_capability
from .audit_log import AuditAction, AuditLogEntry
from .record_change import ChangeAction, RecordChange

__all__ = [
    "COLOR_FIELD",
    "COLUMN_ATTRIBUTES",
    "COLUMN_MAX_LENGTHS",
    "DATE_COLUMN",
    "RECORD_COLUMNS",
    "Record",
    "RecordPage",
    "length_error",
    "parse_color_map",
    "placeholder_values",
    "LIST_COLUMNS",
    "DropdownOptionRow",
    "group_options",
    "ROLE_CAPABILITIES",
    "Capability",
    "Role",
    "User",
    "has_capability",
    "AuditAction",
    "AuditLogEntry",
    "ChangeAction",
    "RecordChange",
]
