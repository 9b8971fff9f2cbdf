"""Optimistic mutation coordinator.

Edits and paints are applied to the in-memory grid immediately, then sent
to the API. A failed write puts back only the cells it touched, posts a
notice and closes the editor. Other cells of the same record keep whatever
succeeded meanwhile. Nothing is retried and nothing is merged: the last
write to reach the server wins and other clients catch up through the
change stream.
"""

import logging
from collections.abc import Callable
from datetime import date

from eazyliens.client.api_client import EazyLiensApiClient
from eazyliens.client.state import GridState, Selection
from eazyliens.domain.coloring import is_paintable
from eazyliens.domain.entities import COLUMN_ATTRIBUTES, RECORD_COLUMNS, Record, length_error
from eazyliens.domain.entities.record import is_hex_color
from eazyliens.domain.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "Could not save the change. It has been undone."
PAINT_FAILED_NOTICE = "Could not save the color. It has been undone."
AUTOMATIC_CELL_NOTICE = "This cell is colored automatically and cannot be painted."
ALL_AUTOMATIC_NOTICE = "All cells in this row are colored automatically; nothing to paint."
MISSING_ROW_NOTICE = "That row is no longer on this page."


class OptimisticMutationCoordinator:
    """Applies edits and paints to GridState optimistically."""

    def __init__(
        self,
        state: GridState,
        api: EazyLiensApiClient,
        today: Callable[[], date] = date.today,
        paint_check: Callable[..., bool] | None = None,
    ):
        self._state = state
        self._api = api
        self._today = today
        self._paint_check = paint_check or self._is_paintable

    async def apply_mutation(self, record_id: int, column: str, new_value: str | None) -> bool:
        """Set one cell and persist it. Returns True when the server accepted it."""
        if column not in COLUMN_ATTRIBUTES:
            self._state.notify(f"Unknown column '{column}'.")
            return False
        problem = length_error(column, new_value)
        if problem is not None:
            self._state.notify(f"{column} is {problem}.")
            return False

        record = self._state.find_record(record_id)
        if record is None:
            self._state.notify(MISSING_ROW_NOTICE)
            return False

        previous = record.get(column)
        record.set(column, new_value)

        try:
            await self._api.update_field(record_id, column, new_value)
        except RemoteOperationError as e:
            logger.warning("Edit of record %d column %r failed: %s", record_id, column, e)
            self._state.revert_value(record_id, column, previous, written=new_value)
            self._rollback(SAVE_FAILED_NOTICE)
            return False
        return True

    async def apply_color(self, target: Selection, color: str) -> bool:
        """Paint one cell, or every paintable cell of a row, with ``color``.

        Cells governed by a fixed or date rule are never painted. The whole
        new color map goes out as a single write of the record.
        """
        if not is_hex_color(color):
            self._state.notify(f"'{color}' is not a valid color.")
            return False
        color = color.upper()

        record = self._state.find_record(target.record_id)
        if record is None:
            self._state.notify(MISSING_ROW_NOTICE)
            return False

        columns = self._paint_columns(record, target)
        if columns is None:
            return False

        previous = {column: record.bg_color.get(column) for column in columns}
        new_colors = dict(record.bg_color)
        for column in columns:
            new_colors[column] = color
        record.bg_color = new_colors

        try:
            await self._api.update_colors(target.record_id, new_colors)
        except RemoteOperationError as e:
            logger.warning("Paint of record %d failed: %s", target.record_id, e)
            self._state.revert_colors(target.record_id, previous, written=color)
            self._rollback(PAINT_FAILED_NOTICE)
            return False
        return True

    def _paint_columns(self, record: Record, target: Selection) -> list[str] | None:
        today = self._today()
        if target.column is not None:
            if target.column not in COLUMN_ATTRIBUTES:
                self._state.notify(f"Unknown column '{target.column}'.")
                return None
            if not self._paint_check(record, target.column, today=today):
                self._state.notify(AUTOMATIC_CELL_NOTICE)
                return None
            return [target.column]

        columns = [c for c in RECORD_COLUMNS if self._paint_check(record, c, today=today)]
        if not columns:
            self._state.notify(ALL_AUTOMATIC_NOTICE)
            return None
        return columns

    def _is_paintable(self, record: Record, column: str, *, today: date) -> bool:
        return is_paintable(record, column, today=today, rules=self._state.color_rules)

    def _rollback(self, message: str) -> None:
        self._state.notify(message)
        self._state.clear_editor_and_selection()
