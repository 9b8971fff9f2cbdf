"""Shared fakes for the grid client tests."""

import asyncio

import pytest

from eazyliens.domain.coloring import DEFAULT_COLOR_RULES
from eazyliens.domain.entities import (
    RECORD_COLUMNS,
    DropdownOptionRow,
    Record,
    RecordPage,
    Role,
)
from eazyliens.domain.exceptions import RemoteOperationError


def make_record(record_id: int, **values) -> Record:
    base = {column: "" for column in RECORD_COLUMNS}
    base["Date"] = "not a date"
    for key, value in values.items():
        base[key.replace("_", " ")] = value
    return Record(values=base, bg_color={}, id=record_id)


class FakeGridApi:
    """In-memory stand-in for EazyLiensApiClient."""

    def __init__(self, records: list[Record] | None = None, role: Role = Role.SUPERADMIN):
        self.records: dict[int, Record] = {r.id: r.copy() for r in records or []}
        self.role = role
        self.option_rows: list[DropdownOptionRow] = []
        self.color_rules = DEFAULT_COLOR_RULES
        self.fail_rules = False
        self.fail_writes = False
        self.fail_fetch = False
        self.calls: list[tuple] = []
        # One entry per connection: a list of events, or an exception to raise
        self.streams: list = []
        # Keep a connection open once its events are sent
        self.hold_open = True
        self.connections = 0

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_writes:
            raise RemoteOperationError(operation, 500, "boom")

    async def fetch_records(self, *, search: str = "", page: int = 0, page_size: int = 50) -> RecordPage:
        self.calls.append(("fetch_records", search, page))
        if self.fail_fetch:
            raise RemoteOperationError("fetch_records", 0, "offline")
        needle = search.lower()
        matches = [
            r.copy()
            for r in sorted(self.records.values(), key=lambda r: r.id, reverse=True)
            if not needle or any(needle in (v or "").lower() for v in r.values.values())
        ]
        return RecordPage(
            items=matches[page * page_size : (page + 1) * page_size],
            total=len(matches),
            page=page,
            page_size=page_size,
        )

    async def create_record(self) -> Record:
        self.calls.append(("create_record",))
        self._maybe_fail("create_record")
        record = Record(values={c: "" for c in RECORD_COLUMNS}, id=max(self.records, default=0) + 1)
        self.records[record.id] = record
        return record.copy()

    async def update_field(self, record_id: int, column: str, value: str | None) -> Record:
        self.calls.append(("update_field", record_id, column, value))
        self._maybe_fail("update_field")
        self.records[record_id].values[column] = value
        return self.records[record_id].copy()

    async def update_colors(self, record_id: int, colors: dict[str, str]) -> Record:
        self.calls.append(("update_colors", record_id, dict(colors)))
        self._maybe_fail("update_colors")
        self.records[record_id].bg_color = dict(colors)
        return self.records[record_id].copy()

    async def delete_record(self, record_id: int) -> None:
        self.calls.append(("delete_record", record_id))
        self._maybe_fail("delete_record")
        del self.records[record_id]

    async def fetch_dropdown_rows(self) -> list[DropdownOptionRow]:
        return list(self.option_rows)

    async def fetch_color_rules(self):
        if self.fail_rules:
            raise RemoteOperationError("fetch_color_rules", 503, "unavailable")
        return self.color_rules

    async def fetch_role(self) -> Role:
        return self.role

    async def stream_changes(self):
        self.connections += 1
        script = self.streams.pop(0) if self.streams else []
        if isinstance(script, Exception):
            raise script
        for event in script:
            yield event
        if self.hold_open:
            await asyncio.Event().wait()

    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("update_field", "update_colors", "delete_record")]


@pytest.fixture
def fake_api() -> FakeGridApi:
    return FakeGridApi(
        [
            make_record(1, Name="Ana", Notes="first"),
            make_record(2, Name="Bea", Law_Firm="Pish & Pish"),
            make_record(3, Name="Cris"),
        ]
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def api_factory():
    return FakeGridApi
