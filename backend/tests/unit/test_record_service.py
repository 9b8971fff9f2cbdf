"""Unit tests for the RecordService and AuditLogService."""

from datetime import date

import pytest

from eazyliens.application.interfaces import AuditLogRepository, RecordRepository
from eazyliens.application.services import AuditLogService, ChangeNotifier, RecordService
from eazyliens.domain.coloring import ColorRule, ColorRuleTable
from eazyliens.domain.entities import (
    AuditAction,
    AuditLogEntry,
    ChangeAction,
    Record,
    RecordChange,
    Role,
    User,
)
from eazyliens.domain.exceptions import (
    EntityNotFoundError,
    InvalidValueError,
    PermissionDeniedError,
)

TODAY = date(2024, 1, 1)

SUPERADMIN = User(username="root", role=Role.SUPERADMIN, id=1)
USUARIO = User(username="ana", role=Role.USUARIO, id=2)


class FakeRecordRepository(RecordRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self._records: dict[int, Record] = {}
        self._next_id = 1

    async def get_by_id(self, record_id: int) -> Record | None:
        record = self._records.get(record_id)
        return record.copy() if record else None

    async def search(self, *, search: str = "", skip: int = 0, limit: int = 50):
        needle = search.lower()
        matches = [
            r
            for r in sorted(self._records.values(), key=lambda r: r.id, reverse=True)
            if not needle or any(needle in (v or "").lower() for v in r.values.values())
        ]
        return [r.copy() for r in matches[skip : skip + limit]], len(matches)

    async def create(self, record: Record) -> Record:
        record.id = self._next_id
        self._next_id += 1
        self._records[record.id] = record.copy()
        return record

    async def update_field(self, record_id: int, column: str, value: str | None) -> Record:
        self._records[record_id].values[column] = value
        return self._records[record_id].copy()

    async def update_colors(self, record_id: int, colors: dict[str, str]) -> Record:
        self._records[record_id].bg_color = dict(colors)
        return self._records[record_id].copy()

    async def delete(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None


class FakeAuditLogRepository(AuditLogRepository):
    def __init__(self):
        self.entries: list[AuditLogEntry] = []

    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        entry.id = len(self.entries) + 1
        self.entries.append(entry)
        return entry

    async def get_recent(self, limit: int = 500) -> list[AuditLogEntry]:
        return list(reversed(self.entries))[:limit]


class RecordingNotifier(ChangeNotifier):
    def __init__(self, events: list):
        super().__init__()
        self.events = events

    async def publish(self, change: RecordChange) -> None:
        self.events.append(("publish", change))


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def audit_repo() -> FakeAuditLogRepository:
    return FakeAuditLogRepository()


@pytest.fixture
def service(events: list, audit_repo: FakeAuditLogRepository) -> RecordService:
    async def commit() -> None:
        events.append(("commit", None))

    return RecordService(
        repository=FakeRecordRepository(),
        audit_log=AuditLogService(audit_repo),
        notifier=RecordingNotifier(events),
        commit=commit,
        today=lambda: TODAY,
    )


@pytest.mark.asyncio
async def test_create_record_uses_placeholders(service: RecordService, events: list):
    record = await service.create_record(USUARIO)
    assert record.id == 1
    assert record.get("T/F") == "F"
    assert record.get("Date") == "2024-01-01"
    assert record.get("Name") == ""
    assert events == [("commit", None), ("publish", RecordChange(ChangeAction.INSERT, 1))]


@pytest.mark.asyncio
async def test_get_record_not_found(service: RecordService):
    with pytest.raises(EntityNotFoundError):
        await service.get_record(999)


@pytest.mark.asyncio
async def test_list_records_pages_newest_first(service: RecordService):
    for _ in range(5):
        await service.create_record(USUARIO)
    page = await service.list_records(page=1, page_size=2)
    assert [r.id for r in page.items] == [3, 2]
    assert page.total == 5
    assert page.total_pages == 3


@pytest.mark.asyncio
async def test_list_records_search_is_case_insensitive(service: RecordService):
    first = await service.create_record(USUARIO)
    await service.create_record(USUARIO)
    await service.update_field(first.id, "Name", "Maria Lopez", USUARIO)

    page = await service.list_records(search="  LOPEZ ")
    assert [r.id for r in page.items] == [first.id]
    assert page.total == 1


@pytest.mark.asyncio
async def test_update_field_audits_and_publishes(
    service: RecordService, events: list, audit_repo: FakeAuditLogRepository
):
    record = await service.create_record(USUARIO)
    events.clear()

    updated = await service.update_field(record.id, "Status", "Open", USUARIO)

    assert updated.get("Status") == "Open"
    assert events == [("commit", None), ("publish", RecordChange(ChangeAction.UPDATE, record.id))]
    entry = audit_repo.entries[-1]
    assert entry.action == AuditAction.UPDATE
    assert (entry.column, entry.old_value, entry.new_value) == ("Status", "", "Open")
    assert entry.username == "ana"


@pytest.mark.asyncio
async def test_update_field_unchanged_is_noop(service: RecordService, events: list):
    record = await service.create_record(USUARIO)
    events.clear()
    await service.update_field(record.id, "T/F", "F", USUARIO)
    assert events == []


@pytest.mark.asyncio
async def test_update_field_rejects_unknown_column(service: RecordService):
    record = await service.create_record(USUARIO)
    with pytest.raises(InvalidValueError):
        await service.update_field(record.id, "Salary", "1", USUARIO)


@pytest.mark.asyncio
async def test_update_field_rejects_values_longer_than_the_column(
    service: RecordService, events: list, audit_repo: FakeAuditLogRepository
):
    record = await service.create_record(USUARIO)
    events.clear()

    with pytest.raises(InvalidValueError) as exc_info:
        await service.update_field(record.id, "Name", "x" * 256, USUARIO)
    assert "255" in str(exc_info.value)
    with pytest.raises(InvalidValueError):
        await service.update_field(record.id, "T/F", "x" * 21, USUARIO)

    assert events == []
    assert (await service.get_record(record.id)).get("Name") == ""

    long_note = "x" * 5000
    updated = await service.update_field(record.id, "Notes", long_note, USUARIO)
    assert updated.get("Notes") == long_note


@pytest.mark.asyncio
async def test_update_colors_drops_automatic_cells(
    service: RecordService, audit_repo: FakeAuditLogRepository
):
    record = await service.create_record(USUARIO)
    await service.update_field(record.id, "Type", "Surgery", USUARIO)

    updated = await service.update_colors(
        record.id,
        {"Type": "#111111", "Date": "#222222", "Notes": "#333333"},
        USUARIO,
    )

    assert updated.bg_color == {"Notes": "#333333"}
    entry = audit_repo.entries[-1]
    assert entry.action == AuditAction.COLOR
    assert entry.new_value == '{"Notes": "#333333"}'


@pytest.mark.asyncio
async def test_delete_requires_capability(service: RecordService):
    record = await service.create_record(USUARIO)
    with pytest.raises(PermissionDeniedError):
        await service.delete_record(record.id, USUARIO)


@pytest.mark.asyncio
async def test_delete_record(service: RecordService, events: list):
    record = await service.create_record(SUPERADMIN)
    events.clear()
    assert await service.delete_record(record.id, SUPERADMIN) is True
    assert events[-1] == ("publish", RecordChange(ChangeAction.DELETE, record.id))
    with pytest.raises(EntityNotFoundError):
        await service.delete_record(record.id, SUPERADMIN)


@pytest.mark.asyncio
async def test_resolve_cell_colors(service: RecordService):
    record = await service.create_record(USUARIO)
    await service.update_field(record.id, "Law Firm", "Pish & Pish", USUARIO)

    colors = await service.resolve_cell_colors(record.id)

    assert colors["Law Firm"].background == "#ADD8E6"
    assert colors["Name"].background == "#FFFFFF"
    assert colors["Date"].paintable is False


@pytest.mark.asyncio
async def test_service_uses_the_given_color_rules(events: list, audit_repo: FakeAuditLogRepository):
    async def commit() -> None:
        pass

    service = RecordService(
        repository=FakeRecordRepository(),
        audit_log=AuditLogService(audit_repo),
        notifier=RecordingNotifier(events),
        commit=commit,
        today=lambda: TODAY,
        color_rules=ColorRuleTable([ColorRule("Status", "Closed", "#8B5CF6", "#FFFFFF")]),
    )
    record = await service.create_record(USUARIO)
    await service.update_field(record.id, "Status", "Closed", USUARIO)
    await service.update_field(record.id, "Law Firm", "Pish & Pish", USUARIO)

    colors = await service.resolve_cell_colors(record.id)
    assert colors["Status"].background == "#8B5CF6"
    assert colors["Law Firm"].paintable is True

    updated = await service.update_colors(
        record.id, {"Status": "#111111", "Law Firm": "#222222"}, USUARIO
    )
    assert updated.bg_color == {"Law Firm": "#222222"}


@pytest.mark.asyncio
async def test_list_all_collects_every_batch(service: RecordService):
    for _ in range(3):
        await service.create_record(USUARIO)
    records = await service.list_all(USUARIO)
    assert [r.id for r in records] == [3, 2, 1]


@pytest.mark.asyncio
async def test_audit_log_requires_view_logs(audit_repo: FakeAuditLogRepository):
    audit = AuditLogService(audit_repo, default_limit=2)
    for record_id in (1, 2, 3):
        await audit.record(AuditAction.INSERT, record_id=record_id, actor=USUARIO)

    with pytest.raises(PermissionDeniedError):
        await audit.list_recent(USUARIO)

    recent = await audit.list_recent(SUPERADMIN)
    assert [e.record_id for e in recent] == [3, 2]
