"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.config import get_settings
from eazyliens.application.services import (
    AuditLogService,
    ChangeNotifier,
    DropdownOptionService,
    RecordService,
)
from eazyliens.domain.coloring import DEFAULT_COLOR_RULES, ColorRuleTable
from eazyliens.domain.entities import User
from eazyliens.infrastructure.database.session import get_db_session
from eazyliens.infrastructure.database.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyDropdownOptionRepository,
    SQLAlchemyRecordRepository,
    SQLAlchemyUserRepository,
)
from eazyliens.infrastructure.export.excel_exporter import RecordExcelExporter


_color_rules: ColorRuleTable = DEFAULT_COLOR_RULES


def install_color_rules(rules: ColorRuleTable) -> None:
    """Publish the rule table loaded at startup to every later request."""
    global _color_rules
    _color_rules = rules


def get_color_rules() -> ColorRuleTable:
    return _color_rules


@lru_cache
def get_change_notifier() -> ChangeNotifier:
    """Process-wide change broadcaster shared by all requests."""
    return ChangeNotifier()


async def get_current_user(
    x_username: str | None = Header(None),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolves the caller from the X-Username header; unknown or inactive users are rejected."""
    if not x_username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-Username header")
    user = await SQLAlchemyUserRepository(session).get_by_username(x_username)
    if user is None or not user.active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown or inactive user")
    return user


async def get_audit_log_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AuditLogService, None]:
    """Provides an AuditLogService with its repository wired up."""
    settings = get_settings()
    yield AuditLogService(
        SQLAlchemyAuditLogRepository(session),
        default_limit=settings.audit_log_limit,
    )


async def get_record_service(
    session: AsyncSession = Depends(get_db_session),
    audit_log: AuditLogService = Depends(get_audit_log_service),
    notifier: ChangeNotifier = Depends(get_change_notifier),
    color_rules: ColorRuleTable = Depends(get_color_rules),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService that commits before it notifies subscribers."""
    yield RecordService(
        repository=SQLAlchemyRecordRepository(session),
        audit_log=audit_log,
        notifier=notifier,
        commit=session.commit,
        color_rules=color_rules,
    )


async def get_dropdown_option_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[DropdownOptionService, None]:
    """Provides a DropdownOptionService with its repository wired up."""
    yield DropdownOptionService(
        SQLAlchemyDropdownOptionRepository(session),
        commit=session.commit,
    )


def get_excel_exporter(
    color_rules: ColorRuleTable = Depends(get_color_rules),
) -> RecordExcelExporter:
    return RecordExcelExporter(color_rules=color_rules)
