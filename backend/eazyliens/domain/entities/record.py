"""Domain entity — a referral record, one row of the main grid."""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any

logger = logging.getLogger(__name__)

# Display order of the grid. The names double as the public field keys.
RECORD_COLUMNS: tuple[str, ...] = (
    "T/F",
    "Calls",
    "Date",
    "Name",
    "Status",
    "Law Firm",
    "Point of Contact",
    "Specialty",
    "Type",
    "Facility",
    "Doctor",
    "Location",
    "Text",
    "Attorney",
    "Employee",
    "Notes",
)

# Column name → storage attribute name
COLUMN_ATTRIBUTES: dict[str, str] = {
    "T/F": "tf",
    "Calls": "calls",
    "Date": "date",
    "Name": "name",
    "Status": "status",
    "Law Firm": "law_firm",
    "Point of Contact": "point_of_contact",
    "Specialty": "specialty",
    "Type": "type",
    "Facility": "facility",
    "Doctor": "doctor",
    "Location": "location",
    "Text": "text",
    "Attorney": "attorney",
    "Employee": "employee",
    "Notes": "notes",
}

DATE_COLUMN = "Date"
COLOR_FIELD = "bg_color"

# Longest text a column stores; None is unbounded.
COLUMN_MAX_LENGTHS: dict[str, int | None] = {column: 255 for column in RECORD_COLUMNS}
COLUMN_MAX_LENGTHS.update({"T/F": 20, DATE_COLUMN: 50, "Text": None, "Notes": None})

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def parse_color_map(raw: Any) -> dict[str, str]:
    """Validate a stored manual-color mapping.

    Accepts only ``{column: "#RRGGBB"}`` entries for known columns; anything
    else is dropped with a warning so a single bad entry never hides the rest.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Discarding non-mapping color map: %r", raw)
        return {}

    colors: dict[str, str] = {}
    for column, color in raw.items():
        if column not in COLUMN_ATTRIBUTES:
            logger.warning("Dropping color for unknown column %r", column)
            continue
        if not is_hex_color(color):
            logger.warning("Dropping malformed color %r for column %r", color, column)
            continue
        colors[column] = color.upper()
    return colors


def length_error(column: str, value: str | None) -> str | None:
    """Why ``value`` does not fit ``column``, or None when it does."""
    limit = COLUMN_MAX_LENGTHS.get(column)
    if value is None or limit is None or len(value) <= limit:
        return None
    return f"longer than {limit} characters"


def placeholder_values(today: date | None = None) -> dict[str, str]:
    """Values a freshly inserted record starts with."""
    today = today or date.today()
    values = {column: "" for column in RECORD_COLUMNS}
    values["T/F"] = "F"
    values[DATE_COLUMN] = today.isoformat()
    return values


@dataclass
class Record:
    """Core domain entity for a referral record.

    ``values`` maps every column in RECORD_COLUMNS to its text (or None);
    ``bg_color`` holds manual override colors keyed by column.
    """

    values: dict[str, str | None] = field(default_factory=dict)
    bg_color: dict[str, str] = field(default_factory=dict)
    id: int | None = None

    def get(self, column: str) -> str | None:
        return self.values.get(column)

    def set(self, column: str, value: str | None) -> None:
        if column not in COLUMN_ATTRIBUTES:
            raise KeyError(column)
        self.values[column] = value

    def copy(self) -> "Record":
        """Detached copy — mutating it never touches this record."""
        return Record(values=dict(self.values), bg_color=dict(self.bg_color), id=self.id)


@dataclass
class RecordPage:
    """One page of records plus the total number of matches."""

    items: list[Record]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size
