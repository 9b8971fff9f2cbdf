from .record_repository import SQLAlchemyRecordRepository
from .dropdown_option_repository import SQLAlchemyDropdownOptionRepository
from .user_repository import SQLAlchemyUserRepository
from .audit_log_repository import SQLAlchemyAuditLogRepository
from .color_rule_repository import SQLAlchemyColorRuleRepository

__all__ = [
    "SQLAlchemyRecordRepository",
    "SQLAlchemyDropdownOptionRepository",
    "SQLAlchemyUserRepository",
    "SQLAlchemyAuditLogRepository",
    "SQLAlchemyColorRuleRepository",
]
