"""Audit log — single entry point for recording and reading record mutations."""

import logging

from eazyliens.application.interfaces import AuditLogRepository
from eazyliens.domain.entities import AuditAction, AuditLogEntry, Capability, User
from eazyliens.domain.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


class AuditLogService:
    """Persists one entry per successful mutation and serves the history view.

    Usage:
        audit = AuditLogService(log_repository)
        await audit.record(
            AuditAction.UPDATE,
            record_id=42,
            column="Status",
            old_value="Open",
            new_value="Closed",
            actor=user,
        )
    """

    def __init__(self, repository: AuditLogRepository, default_limit: int = 500):
        self._repo = repository
        self._default_limit = default_limit

    async def record(
        self,
        action: AuditAction,
        *,
        record_id: int | None,
        actor: User | None,
        column: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            action=action,
            record_id=record_id,
            column=column,
            old_value=old_value,
            new_value=new_value,
            username=actor.username if actor else None,
        )
        saved = await self._repo.add(entry)
        logger.info(
            "AUDIT %s record=%s column=%s by=%s",
            action.value,
            record_id,
            column or "-",
            entry.username or "-",
        )
        return saved

    async def list_recent(self, actor: User, limit: int | None = None) -> list[AuditLogEntry]:
        if not actor.can(Capability.VIEW_LOGS):
            raise PermissionDeniedError(actor.role.value, Capability.VIEW_LOGS.value)
        return await self._repo.get_recent(limit=limit or self._default_limit)
