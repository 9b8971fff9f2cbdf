"""Explicit application state for the record grid.

Everything the grid shows lives here; the controller and the mutation
coordinator are the only writers.
"""

from dataclasses import dataclass, field
from enum import Enum

from eazyliens.client.cell_editor import CellEditor
from eazyliens.client.layout import GridLayout
from eazyliens.domain.coloring import DEFAULT_COLOR_RULES, ColorRuleTable
from eazyliens.domain.entities import LIST_COLUMNS, Record, Role


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    message: str
    level: NoticeLevel = NoticeLevel.ERROR


@dataclass(frozen=True)
class Selection:
    """A selected cell, or the whole row when ``column`` is None."""

    record_id: int
    column: str | None = None

    @property
    def is_row(self) -> bool:
        return self.column is None


@dataclass
class EditorState:
    record_id: int
    column: str
    cell: CellEditor


@dataclass
class GridState:
    rows: list[Record] = field(default_factory=list)
    total: int = 0
    page: int = 0
    page_size: int = 50
    search: str = ""
    selection: Selection | None = None
    editor: EditorState | None = None
    loading: bool = False
    notices: list[Notice] = field(default_factory=list)
    options: dict[str, list[str]] = field(
        default_factory=lambda: {column: [] for column in LIST_COLUMNS}
    )
    layout: GridLayout = field(default_factory=GridLayout)
    role: Role = Role.USUARIO
    color_rules: ColorRuleTable = DEFAULT_COLOR_RULES

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    def find_record(self, record_id: int) -> Record | None:
        for record in self.rows:
            if record.id == record_id:
                return record
        return None

    def revert_value(
        self, record_id: int, column: str, previous: str | None, *, written: str | None
    ) -> bool:
        """Put ``previous`` back into one cell if it still holds ``written``.

        A cell that has moved on (a newer edit, or a refetch) is left alone.
        Returns True when the cell was reverted.
        """
        record = self.find_record(record_id)
        if record is None or record.get(column) != written:
            return False
        record.set(column, previous)
        return True

    def revert_colors(
        self, record_id: int, previous: dict[str, str | None], *, written: str
    ) -> list[str]:
        """Undo a paint of ``written`` on the columns in ``previous``.

        Only columns still showing ``written`` are touched; a None entry means
        the column had no manual color. Returns the reverted columns.
        """
        record = self.find_record(record_id)
        if record is None:
            return []
        colors = dict(record.bg_color)
        reverted = []
        for column, color in previous.items():
            if colors.get(column) != written:
                continue
            if color is None:
                colors.pop(column)
            else:
                colors[column] = color
            reverted.append(column)
        record.bg_color = colors
        return reverted

    def remove_record(self, record_id: int) -> None:
        self.rows = [record for record in self.rows if record.id != record_id]

    def notify(self, message: str, level: NoticeLevel = NoticeLevel.ERROR) -> None:
        self.notices.append(Notice(message, level))

    def clear_editor_and_selection(self) -> None:
        self.editor = None
        self.selection = None
