from .record_repository import RecordRepository
from .dropdown_option_repository import DropdownOptionRepository
from .user_repository import UserRepository
from .audit_log_repository import AuditLogRepository
from .color_rule_repository import ColorRuleRepository

__all__ = [
    "RecordRepository",
    "DropdownOptionRepository",
    "UserRepository",
    "AuditLogRepository",
    "ColorRuleRepository",
]
