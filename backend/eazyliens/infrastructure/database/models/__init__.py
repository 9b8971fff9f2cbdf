from .record import RecordModel
from .dropdown_option import DropdownOptionModel, OPTION_ATTRIBUTES
from .user import UserModel
from .audit_log import AuditLogModel
from .list_color import ListColorModel

__all__ = [
    "RecordModel",
    "DropdownOptionModel",
    "OPTION_ATTRIBUTES",
    "UserModel",
    "AuditLogModel",
    "ListColorModel",
]
