from .audit_log_service import AuditLogService
from .change_notifier import ChangeNotifier
from .dropdown_option_service import DropdownOptionService
from .record_service import RecordService

__all__ = [
    "AuditLogService",
    "ChangeNotifier",
    "DropdownOptionService",
    "RecordService",
]
