"""Application service for the dropdown option lists."""

import logging
from collections.abc import Awaitable, Callable

from eazyliens.application.interfaces import DropdownOptionRepository
from eazyliens.domain.entities import LIST_COLUMNS, Capability, DropdownOptionRow, User
from eazyliens.domain.entities.dropdown_option import is_valid_option
from eazyliens.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidValueError,
    PermissionDeniedError,
)

logger = logging.getLogger(__name__)


async def _no_commit() -> None:
    return None


class DropdownOptionService:
    """Reads the option table and validates list edits before writing them.

    Validation (blank value, case-insensitive duplicate within the column)
    happens before any write, so a rejected edit leaves the table untouched.
    """

    def __init__(
        self,
        repository: DropdownOptionRepository,
        commit: Callable[[], Awaitable[None]] | None = None,
    ):
        self._repository = repository
        self._commit = commit or _no_commit

    async def list_rows(self) -> list[DropdownOptionRow]:
        return await self._repository.get_all()

    async def add_option(self, column: str, value: str, actor: User) -> DropdownOptionRow:
        self._require_edit(actor)
        rows = await self._repository.get_all()
        clean = self._validate(rows, column, value)

        free_row = next((row for row in rows if row.has_free_slot(column)), None)
        if free_row is not None:
            saved = await self._repository.set_value(free_row.id, column, clean)
        else:
            values: dict[str, str | None] = {col: None for col in LIST_COLUMNS}
            values[column] = clean
            saved = await self._repository.create(DropdownOptionRow(values=values))

        await self._commit()
        logger.info("Added option %r to %s (row %s)", clean, column, saved.id)
        return saved

    async def rename_option(
        self, row_id: int, column: str, value: str, actor: User
    ) -> DropdownOptionRow:
        self._require_edit(actor)
        rows = await self._repository.get_all()
        if not any(row.id == row_id for row in rows):
            raise EntityNotFoundError("DropdownOptionRow", row_id)
        clean = self._validate(rows, column, value, exclude_row_id=row_id)

        saved = await self._repository.set_value(row_id, column, clean)
        await self._commit()
        return saved

    async def remove_option(self, row_id: int, column: str, actor: User) -> DropdownOptionRow:
        self._require_edit(actor)
        if column not in LIST_COLUMNS:
            raise InvalidValueError("column", f"'{column}' has no option list")
        row = await self._repository.get_by_id(row_id)
        if row is None:
            raise EntityNotFoundError("DropdownOptionRow", row_id)

        saved = await self._repository.set_value(row_id, column, None)
        await self._commit()
        logger.info("Removed option %r from %s (row %s)", row.get(column), column, row_id)
        return saved

    @staticmethod
    def _require_edit(actor: User) -> None:
        if not actor.can(Capability.EDIT_LISTS):
            raise PermissionDeniedError(actor.role.value, Capability.EDIT_LISTS.value)

    @staticmethod
    def _validate(
        rows: list[DropdownOptionRow],
        column: str,
        value: str,
        exclude_row_id: int | None = None,
    ) -> str:
        if column not in LIST_COLUMNS:
            raise InvalidValueError("column", f"'{column}' has no option list")
        if not is_valid_option(value):
            raise InvalidValueError("value", "must not be empty")

        clean = value.strip()
        for row in rows:
            if row.id == exclude_row_id:
                continue
            existing = row.get(column)
            if is_valid_option(existing) and existing.strip().lower() == clean.lower():
                raise DuplicateEntityError("DropdownOption", column, clean)
        return clean
