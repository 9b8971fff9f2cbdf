"""Application service (use case) for Record operations."""

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import date

from eazyliens.application.interfaces import RecordRepository
from eazyliens.application.services.audit_log_service import AuditLogService
from eazyliens.application.services.change_notifier import ChangeNotifier
from eazyliens.domain.coloring import (
    ColorRuleTable,
    ResolvedColor,
    eligible_colors,
    resolve_color,
)
from eazyliens.domain.entities import (
    COLOR_FIELD,
    COLUMN_ATTRIBUTES,
    RECORD_COLUMNS,
    AuditAction,
    Capability,
    ChangeAction,
    Record,
    RecordChange,
    RecordPage,
    User,
    length_error,
    placeholder_values,
)
from eazyliens.domain.exceptions import (
    EntityNotFoundError,
    InvalidValueError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)

_EXPORT_BATCH = 500


async def _no_commit() -> None:
    return None


def _require(actor: User, capability: Capability) -> None:
    if not actor.can(capability):
        raise PermissionDeniedError(actor.role.value, capability.value)


class RecordService:
    """Orchestrates record reads and single-field writes.

    Every successful write is committed, audited and then broadcast to change
    subscribers, in that order, so a client re-fetching on the notification
    always sees the new state.
    """

    def __init__(
        self,
        repository: RecordRepository,
        audit_log: AuditLogService,
        notifier: ChangeNotifier | None = None,
        commit: Callable[[], Awaitable[None]] | None = None,
        today: Callable[[], date] = date.today,
        color_rules: ColorRuleTable | None = None,
    ):
        self._repository = repository
        self._audit_log = audit_log
        self._notifier = notifier
        self._commit = commit or _no_commit
        self._today = today
        self._rules = color_rules

    async def get_record(self, record_id: int) -> Record:
        record = await self._repository.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError("Record", record_id)
        return record

    async def list_records(
        self,
        *,
        search: str = "",
        page: int = 0,
        page_size: int = 50,
    ) -> RecordPage:
        page = max(page, 0)
        items, total = await self._repository.search(
            search=search.strip(),
            skip=page * page_size,
            limit=page_size,
        )
        return RecordPage(items=items, total=total, page=page, page_size=page_size)

    async def list_all(self, actor: User, *, search: str = "") -> list[Record]:
        """Every record matching ``search``, newest first — used by the export."""
        _require(actor, Capability.EXPORT_RECORDS)
        records: list[Record] = []
        skip = 0
        while True:
            batch, total = await self._repository.search(
                search=search.strip(), skip=skip, limit=_EXPORT_BATCH
            )
            records.extend(batch)
            skip += len(batch)
            if not batch or skip >= total:
                return records

    async def create_record(self, actor: User) -> Record:
        _require(actor, Capability.CREATE_RECORD)
        record = await self._repository.create(
            Record(values=placeholder_values(self._today()))
        )
        await self._audit_log.record(AuditAction.INSERT, record_id=record.id, actor=actor)
        await self._finish(ChangeAction.INSERT, record.id)
        return record

    async def update_field(
        self, record_id: int, column: str, value: str | None, actor: User
    ) -> Record:
        _require(actor, Capability.EDIT_RECORD)
        if column not in COLUMN_ATTRIBUTES:
            raise InvalidValueError("column", f"unknown column '{column}'")
        problem = length_error(column, value)
        if problem is not None:
            raise InvalidValueError(column, problem)

        record = await self.get_record(record_id)
        old_value = record.get(column)
        if old_value == value:
            return record

        updated = await self._repository.update_field(record_id, column, value)
        await self._audit_log.record(
            AuditAction.UPDATE,
            record_id=record_id,
            column=column,
            old_value=old_value,
            new_value=value,
            actor=actor,
        )
        await self._finish(ChangeAction.UPDATE, record_id)
        return updated

    async def update_colors(
        self, record_id: int, colors: dict[str, str], actor: User
    ) -> Record:
        """Replace the record's manual colors, dropping cells that are colored automatically."""
        _require(actor, Capability.PAINT_RECORD)
        record = await self.get_record(record_id)

        accepted = eligible_colors(record, colors, today=self._today(), rules=self._rules)
        ignored = sorted(set(colors) - set(accepted))
        if ignored:
            logger.debug("Record %s: ignoring manual colors for %s", record_id, ignored)

        if accepted == record.bg_color:
            return record

        updated = await self._repository.update_colors(record_id, accepted)
        await self._audit_log.record(
            AuditAction.COLOR,
            record_id=record_id,
            column=COLOR_FIELD,
            old_value=json.dumps(record.bg_color, sort_keys=True),
            new_value=json.dumps(accepted, sort_keys=True),
            actor=actor,
        )
        await self._finish(ChangeAction.UPDATE, record_id)
        return updated

    async def delete_record(self, record_id: int, actor: User) -> bool:
        _require(actor, Capability.DELETE_RECORD)
        exists = await self._repository.get_by_id(record_id)
        if exists is None:
            raise EntityNotFoundError("Record", record_id)
        deleted = await self._repository.delete(record_id)
        await self._audit_log.record(
            AuditAction.DELETE,
            record_id=record_id,
            old_value=exists.get("Name"),
            actor=actor,
        )
        await self._finish(ChangeAction.DELETE, record_id)
        return deleted

    async def resolve_cell_colors(self, record_id: int) -> dict[str, ResolvedColor]:
        record = await self.get_record(record_id)
        today = self._today()
        return {
            column: resolve_color(record, column, today=today, rules=self._rules)
            for column in RECORD_COLUMNS
        }

    async def _finish(self, action: ChangeAction, record_id: int | None) -> None:
        await self._commit()
        if self._notifier is not None:
            await self._notifier.publish(RecordChange(action=action, record_id=record_id))
