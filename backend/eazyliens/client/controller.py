"""Grid controller — the headless presentation layer of the record grid.

Owns a GridState and drives it from user intents (search, paging,
selection, editing, painting) and from the change stream. A UI binds to
``state`` and ``render()``; nothing here draws anything.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import httpx

from eazyliens.client.api_client import EazyLiensApiClient
from eazyliens.client.cell_editor import CellEditor
from eazyliens.client.debounce import Debouncer
from eazyliens.client.layout import GridLayout, LayoutStore
from eazyliens.client.mutations import OptimisticMutationCoordinator
from eazyliens.client.realtime import RealtimeListener
from eazyliens.client.state import EditorState, GridState, NoticeLevel, Selection
from eazyliens.config import Settings
from eazyliens.domain.coloring import is_paintable, resolve_color
from eazyliens.domain.entities import (
    COLUMN_ATTRIBUTES,
    RECORD_COLUMNS,
    Capability,
    Record,
    RecordChange,
    group_options,
    has_capability,
)
from eazyliens.domain.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)

FETCH_FAILED_NOTICE = "Could not load records. Showing the last loaded page."


@dataclass(frozen=True)
class RenderedCell:
    column: str
    text: str
    background: str
    text_color: str
    paintable: bool
    selected: bool
    width: int


@dataclass(frozen=True)
class RenderedRow:
    record_id: int
    height: int
    selected: bool
    cells: list[RenderedCell]


class GridController:
    def __init__(
        self,
        api: EazyLiensApiClient,
        *,
        layout_store: LayoutStore | None = None,
        page_size: int = 50,
        search_debounce: float = 0.5,
        reconnect_delay: float = 5.0,
        today: Callable[[], date] = date.today,
    ):
        self.state = GridState(page_size=page_size)
        self._api = api
        self._layout_store = layout_store
        self._today = today
        self._mutations = OptimisticMutationCoordinator(self.state, api, today=today)
        self._debouncer = Debouncer(search_debounce, self._commit_search)
        self._listener = RealtimeListener(api, self._on_change, reconnect_delay=reconnect_delay)
        self._request_token = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "GridController":
        api = EazyLiensApiClient(
            settings.api_base_url,
            settings.client_username,
            http_client=http_client,
        )
        store = LayoutStore(
            settings.layout_file,
            default_column_width=settings.default_column_width,
            default_row_height=settings.default_row_height,
        )
        return cls(
            api,
            layout_store=store,
            page_size=settings.default_page_size,
            search_debounce=settings.search_debounce_seconds,
            reconnect_delay=settings.realtime_reconnect_delay,
        )

    @property
    def listener(self) -> RealtimeListener:
        return self._listener

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self) -> None:
        """Load layout, role, color rules and options, fetch the first page and subscribe."""
        if self._layout_store is not None:
            self.state.layout = self._layout_store.load()

        try:
            self.state.role = await self._api.fetch_role()
        except RemoteOperationError as e:
            logger.warning("Could not fetch the current role, staying at %s: %s", self.state.role.value, e)

        await self.load_color_rules()
        await self.load_options()
        await self.refresh()
        self._listener.start()

    async def stop(self) -> None:
        self._debouncer.cancel()
        await self._listener.stop()

    async def load_color_rules(self) -> None:
        try:
            self.state.color_rules = await self._api.fetch_color_rules()
        except RemoteOperationError as e:
            logger.warning("Could not load color rules, keeping %r: %s", self.state.color_rules, e)

    async def load_options(self) -> None:
        try:
            rows = await self._api.fetch_dropdown_rows()
        except RemoteOperationError as e:
            logger.warning("Could not load dropdown options: %s", e)
            return
        self.state.options = group_options(rows)

    # ── Fetching ─────────────────────────────────────────────────────

    async def refresh(self, silent: bool = False) -> bool:
        """Fetch the current page with the committed search.

        Only the response to the newest request is applied; an older one that
        arrives late is dropped. On failure the rows already shown stay.
        """
        self._request_token += 1
        token = self._request_token
        if not silent:
            self.state.loading = True

        try:
            page = await self._api.fetch_records(
                search=self.state.search,
                page=self.state.page,
                page_size=self.state.page_size,
            )
        except RemoteOperationError as e:
            if token != self._request_token:
                return False
            logger.warning("Record fetch failed: %s", e)
            self.state.loading = False
            if not silent:
                self.state.notify(FETCH_FAILED_NOTICE)
            return False

        if token != self._request_token:
            logger.debug("Discarding stale fetch %d (newest is %d)", token, self._request_token)
            return False

        self.state.rows = page.items
        self.state.total = page.total
        self.state.loading = False
        self._drop_missing_targets()

        # The page emptied under us (e.g. its last row was deleted elsewhere)
        if not page.items and self.state.page > 0 and page.total > 0:
            self.state.page = self.state.total_pages - 1
            return await self.refresh(silent=silent)
        return True

    def _drop_missing_targets(self) -> None:
        selection = self.state.selection
        if selection is not None and self.state.find_record(selection.record_id) is None:
            self.state.selection = None
        editor = self.state.editor
        if editor is not None and self.state.find_record(editor.record_id) is None:
            self.state.editor = None

    async def _on_change(self, change: RecordChange) -> None:
        await self.refresh(silent=True)

    # ── Search & paging ──────────────────────────────────────────────

    def set_search(self, term: str) -> None:
        """Schedule a search; a newer term before the quiet period ends replaces it."""
        self._debouncer.call(term)

    async def flush_search(self) -> None:
        await self._debouncer.flush()

    async def _commit_search(self, term: str) -> None:
        self.state.search = term.strip()
        self.state.page = 0
        self.state.clear_editor_and_selection()
        await self.refresh()

    async def go_to_page(self, page: int) -> bool:
        last = max(self.state.total_pages - 1, 0)
        self.state.page = min(max(page, 0), last)
        self.state.clear_editor_and_selection()
        return await self.refresh()

    # ── Selection & editing ──────────────────────────────────────────

    def select_cell(self, record_id: int, column: str) -> None:
        if column not in COLUMN_ATTRIBUTES:
            raise ValueError(f"Unknown column '{column}'")
        if self.state.find_record(record_id) is None:
            self.state.selection = None
            return
        self.state.selection = Selection(record_id, column)

    def select_row(self, record_id: int) -> None:
        if self.state.find_record(record_id) is None:
            self.state.selection = None
            return
        self.state.selection = Selection(record_id)

    def open_editor(self, record_id: int, column: str) -> CellEditor | None:
        if not self._require(Capability.EDIT_RECORD, "edit records"):
            return None
        record = self.state.find_record(record_id)
        if record is None or column not in COLUMN_ATTRIBUTES:
            return None
        cell = CellEditor(self.state.options.get(column, []), record.get(column) or "")
        self.state.editor = EditorState(record_id, column, cell)
        self.state.selection = Selection(record_id, column)
        return cell

    async def commit_editor(self) -> bool:
        editor = self.state.editor
        if editor is None:
            return False
        self.state.editor = None

        record = self.state.find_record(editor.record_id)
        if record is None:
            return False
        if (record.get(editor.column) or "") == editor.cell.text:
            return True
        return await self._mutations.apply_mutation(editor.record_id, editor.column, editor.cell.text)

    async def select_option(self, option: str) -> bool:
        """Pick a dropdown option in the open editor and commit it right away."""
        editor = self.state.editor
        if editor is None:
            return False
        editor.cell.select(option)
        return await self.commit_editor()

    def cancel_editor(self) -> None:
        self.state.editor = None

    # ── Painting ─────────────────────────────────────────────────────

    def can_paint(self) -> bool:
        selection = self.state.selection
        if selection is None or not has_capability(self.state.role, Capability.PAINT_RECORD):
            return False
        record = self.state.find_record(selection.record_id)
        if record is None:
            return False
        today = self._today()
        rules = self.state.color_rules
        if selection.column is not None:
            return is_paintable(record, selection.column, today=today, rules=rules)
        return any(is_paintable(record, column, today=today, rules=rules) for column in RECORD_COLUMNS)

    async def paint(self, color: str) -> bool:
        selection = self.state.selection
        if selection is None:
            self.state.notify("Select a cell or a row to paint.", NoticeLevel.INFO)
            return False
        if not self._require(Capability.PAINT_RECORD, "paint records"):
            return False
        return await self._mutations.apply_color(selection, color)

    # ── Rows ─────────────────────────────────────────────────────────

    async def add_record(self) -> Record | None:
        """Insert a placeholder record and jump to the first page to show it."""
        if not self._require(Capability.CREATE_RECORD, "add records"):
            return None
        try:
            record = await self._api.create_record()
        except RemoteOperationError as e:
            logger.warning("Record insert failed: %s", e)
            self.state.notify("Could not add a record.")
            return None

        self.state.page = 0
        await self.refresh(silent=True)
        if record.id is not None and self.state.find_record(record.id) is not None:
            self.state.selection = Selection(record.id)
        return record

    async def delete_selected_row(self) -> bool:
        selection = self.state.selection
        if selection is None:
            self.state.notify("Select a row to delete.", NoticeLevel.INFO)
            return False
        if not self._require(Capability.DELETE_RECORD, "delete records"):
            return False

        try:
            await self._api.delete_record(selection.record_id)
        except RemoteOperationError as e:
            logger.warning("Delete of record %d failed: %s", selection.record_id, e)
            self.state.notify("Could not delete the record.")
            return False

        self.state.remove_record(selection.record_id)
        self.state.clear_editor_and_selection()
        await self.refresh(silent=True)
        return True

    # ── Rendering & layout ───────────────────────────────────────────

    def render(self) -> list[RenderedRow]:
        """Build the visible grid. Colors are resolved afresh on every call."""
        today = self._today()
        selection = self.state.selection
        layout = self.state.layout
        rows: list[RenderedRow] = []

        for record in self.state.rows:
            row_selected = selection is not None and selection.is_row and selection.record_id == record.id
            cells = []
            for column in RECORD_COLUMNS:
                color = resolve_color(record, column, today=today, rules=self.state.color_rules)
                cells.append(
                    RenderedCell(
                        column=column,
                        text=record.get(column) or "",
                        background=color.background,
                        text_color=color.text,
                        paintable=color.paintable,
                        selected=row_selected or (
                            selection is not None
                            and selection.record_id == record.id
                            and selection.column == column
                        ),
                        width=layout.column_width(column),
                    )
                )
            rows.append(
                RenderedRow(
                    record_id=record.id,
                    height=layout.row_height(record.id),
                    selected=row_selected,
                    cells=cells,
                )
            )
        return rows

    def resize_column(self, column: str, width: int) -> None:
        if column not in COLUMN_ATTRIBUTES:
            raise ValueError(f"Unknown column '{column}'")
        if width <= 0:
            raise ValueError("Column width must be positive")
        self.state.layout.column_widths[column] = width
        self._save_layout()

    def resize_row(self, record_id: int, height: int) -> None:
        if height <= 0:
            raise ValueError("Row height must be positive")
        self.state.layout.row_heights[record_id] = height
        self._save_layout()

    def reset_layout(self) -> bool:
        if not self._require(Capability.RESET_LAYOUT, "reset the layout"):
            return False
        if self._layout_store is not None:
            self.state.layout = self._layout_store.reset()
        else:
            self.state.layout = GridLayout(
                default_column_width=self.state.layout.default_column_width,
                default_row_height=self.state.layout.default_row_height,
            )
        return True

    def _save_layout(self) -> None:
        if self._layout_store is None:
            return
        try:
            self._layout_store.save(self.state.layout)
        except OSError as e:
            logger.warning("Could not save layout to %s: %s", self._layout_store.path, e)

    def _require(self, capability: Capability, action: str) -> bool:
        if has_capability(self.state.role, capability):
            return True
        self.state.notify(f"Your role ({self.state.role.value}) cannot {action}.")
        return False
