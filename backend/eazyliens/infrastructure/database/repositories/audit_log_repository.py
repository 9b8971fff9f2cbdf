"""Concrete repository implementation for the audit log backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.interfaces import AuditLogRepository
from eazyliens.domain.entities import AuditAction, AuditLogEntry
from eazyliens.infrastructure.database.models import AuditLogModel


class SQLAlchemyAuditLogRepository(AuditLogRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: AuditLogModel) -> AuditLogEntry:
        return AuditLogEntry(
            id=model.id,
            action=AuditAction(model.action),
            record_id=model.record_id,
            column=model.column,
            old_value=model.old_value,
            new_value=model.new_value,
            username=model.username,
            created_at=model.created_at,
        )

    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        model = AuditLogModel(
            action=entry.action.value,
            record_id=entry.record_id,
            column=entry.column,
            old_value=entry.old_value,
            new_value=entry.new_value,
            username=entry.username,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_recent(self, limit: int = 500) -> list[AuditLogEntry]:
        result = await self._session.execute(
            select(AuditLogModel)
            .order_by(AuditLogModel.created_at.desc(), AuditLogModel.id.desc())
            .limit(limit)
        )
        return [self._to_entity(row) for row in result.scalars().all()]
