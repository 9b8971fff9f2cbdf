"""Grid layout persistence — column widths and row heights in a JSON file.

Layout lives outside the database so a user's sizing survives restarts
without touching shared data.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class GridLayout:
    """Column widths by column name, row heights by record id."""

    default_column_width: int = 150
    default_row_height: int = 32
    column_widths: dict[str, int] = field(default_factory=dict)
    row_heights: dict[int, int] = field(default_factory=dict)

    def column_width(self, column: str) -> int:
        return self.column_widths.get(column, self.default_column_width)

    def row_height(self, record_id: int | None) -> int:
        if record_id is None:
            return self.default_row_height
        return self.row_heights.get(record_id, self.default_row_height)

    def to_dict(self) -> dict[str, Any]:
        return {
            "column_widths": dict(self.column_widths),
            # JSON object keys are strings
            "row_heights": {str(k): v for k, v in self.row_heights.items()},
        }


def _positive_ints(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(key): value
        for key, value in raw.items()
        if isinstance(value, int) and not isinstance(value, bool) and value > 0
    }


class LayoutStore:
    """Loads and saves a GridLayout at a fixed path."""

    def __init__(
        self,
        path: str | Path,
        default_column_width: int = 150,
        default_row_height: int = 32,
    ):
        self._path = Path(path)
        self._default_column_width = default_column_width
        self._default_row_height = default_row_height

    @property
    def path(self) -> Path:
        return self._path

    def defaults(self) -> GridLayout:
        return GridLayout(
            default_column_width=self._default_column_width,
            default_row_height=self._default_row_height,
        )

    def load(self) -> GridLayout:
        """Read the layout file, falling back to defaults if missing or corrupt."""
        layout = self.defaults()
        if not self._path.exists():
            return layout
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Could not read %s — using default layout", self._path)
            return layout
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed layout file %s", self._path)
            return layout

        layout.column_widths = _positive_ints(data.get("column_widths"))
        row_heights: dict[int, int] = {}
        for key, value in _positive_ints(data.get("row_heights")).items():
            try:
                row_heights[int(key)] = value
            except ValueError:
                logger.debug("Skipping row height for non-numeric key %r", key)
        layout.row_heights = row_heights
        return layout

    def save(self, layout: GridLayout) -> None:
        """Persist the layout to the JSON file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")

    def reset(self) -> GridLayout:
        """Delete the saved layout and return the defaults."""
        if self._path.exists():
            self._path.unlink()
            logger.info("Layout reset — removed %s", self._path)
        return self.defaults()
