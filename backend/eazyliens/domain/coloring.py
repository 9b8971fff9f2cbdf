"""Cell color rules: fixed-value table, date rotation and manual overrides.

Resolution order for a cell (first match wins):

    1. Fixed-value rule: the rule table has an entry for the cell's exact value.
    2. Date rotation: the Date column holds a valid YYYY-MM-DD date.
    3. Manual override: the record's bg_color has a color for the column.
    4. Default: white background, black text.

Only cells resolved by (3) or (4) may be painted by hand. The fixed-value
table is loaded once at startup and never changes afterwards; the date
color is computed on every call and moves with the calendar.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType

from eazyliens.domain.entities.record import DATE_COLUMN, Record

DEFAULT_BACKGROUND = "#FFFFFF"
DEFAULT_TEXT = "#000000"


@dataclass(frozen=True)
class ColorPair:
    background: str
    text: str


# The eight colors an administrator can assign to a list value.
FIXED_PALETTE: MappingProxyType = MappingProxyType({
    "Celeste": ColorPair("#ADD8E6", "#000000"),
    "Rojo": ColorPair("#FF0000", "#FFFFFF"),
    "Azul": ColorPair("#3B82F6", "#FFFFFF"),
    "Café": ColorPair("#92400E", "#FFFFFF"),
    "Amarillo": ColorPair("#EAB308", "#000000"),
    "Verde": ColorPair("#90EE90", "#000000"),
    "Naranja": ColorPair("#F97316", "#FFFFFF"),
    "Morado": ColorPair("#8B5CF6", "#FFFFFF"),
})


@dataclass(frozen=True)
class ColorRule:
    """One (column, exact value) → colors assignment."""

    column: str
    value: str
    background: str
    text: str

    @property
    def pair(self) -> ColorPair:
        return ColorPair(self.background, self.text)


class ColorRuleTable:
    """Read-only lookup of fixed-value rules.

    Later rules for the same (column, value) replace earlier ones. Colors are
    stored uppercase.
    """

    def __init__(self, rules: Iterable[ColorRule] = ()):
        table: dict[str, dict[str, ColorPair]] = {}
        for rule in rules:
            table.setdefault(rule.column, {})[rule.value] = ColorPair(
                rule.background.upper(), rule.text.upper()
            )
        self._table = MappingProxyType(
            {column: MappingProxyType(values) for column, values in table.items()}
        )

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self._table)

    def lookup(self, column: str, value: str | None) -> ColorPair | None:
        values = self._table.get(column)
        if values is None or value is None:
            return None
        return values.get(value)

    def rules(self) -> list[ColorRule]:
        return [
            ColorRule(column, value, pair.background, pair.text)
            for column, values in self._table.items()
            for value, pair in values.items()
        ]

    def __len__(self) -> int:
        return sum(len(values) for values in self._table.values())

    def __repr__(self) -> str:
        return f"<ColorRuleTable({len(self)} rules over {list(self._table)})>"


# Written to an empty rule table on first start.
SEED_COLOR_RULES: tuple[ColorRule, ...] = (
    ColorRule("Law Firm", "Pish & Pish", "#ADD8E6", "#000000"),
    ColorRule("Type", "Surgery", "#FF0000", "#FFFFFF"),
)

DEFAULT_COLOR_RULES = ColorRuleTable(SEED_COLOR_RULES)

# Indexed by abs(days between today and the row date) mod len.
DATE_PALETTE: tuple[ColorPair, ...] = (
    ColorPair("#FDE68A", "#000000"),
    ColorPair("#BBF7D0", "#000000"),
    ColorPair("#BFDBFE", "#000000"),
    ColorPair("#FBCFE8", "#000000"),
    ColorPair("#DDD6FE", "#000000"),
    ColorPair("#FED7AA", "#000000"),
    ColorPair("#A5F3FC", "#000000"),
    ColorPair("#D9F99D", "#000000"),
    ColorPair("#FECACA", "#000000"),
    ColorPair("#E5E7EB", "#000000"),
)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class ColorSource(str, Enum):
    FIXED = "fixed"
    DATE = "date"
    MANUAL = "manual"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedColor:
    background: str
    text: str
    paintable: bool
    source: ColorSource


def parse_iso_date(value: str | None) -> date | None:
    """Parse a strict YYYY-MM-DD string; anything else (or an impossible date) is None."""
    if not value:
        return None
    match = _ISO_DATE.match(value.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def date_palette_index(row_date: date, today: date) -> int:
    return abs((today - row_date).days) % len(DATE_PALETTE)


def fixed_rule_for(
    column: str, value: str | None, rules: ColorRuleTable | None = None
) -> ColorPair | None:
    rules = DEFAULT_COLOR_RULES if rules is None else rules
    return rules.lookup(column, value)


def resolve_cell_color(
    column: str,
    value: str | None,
    manual_color: str | None = None,
    *,
    today: date | None = None,
    rules: ColorRuleTable | None = None,
) -> ResolvedColor:
    """Resolve the final colors of one cell from its column, value and manual color."""
    fixed = fixed_rule_for(column, value, rules)
    if fixed is not None:
        return ResolvedColor(fixed.background, fixed.text, False, ColorSource.FIXED)

    if column == DATE_COLUMN:
        row_date = parse_iso_date(value)
        if row_date is not None:
            today = today or date.today()
            pair = DATE_PALETTE[date_palette_index(row_date, today)]
            return ResolvedColor(pair.background, pair.text, False, ColorSource.DATE)

    if manual_color:
        return ResolvedColor(manual_color, DEFAULT_TEXT, True, ColorSource.MANUAL)

    return ResolvedColor(DEFAULT_BACKGROUND, DEFAULT_TEXT, True, ColorSource.DEFAULT)


def resolve_color(
    record: Record,
    column: str,
    *,
    today: date | None = None,
    rules: ColorRuleTable | None = None,
) -> ResolvedColor:
    """Resolve the colors of ``record``'s cell in ``column``."""
    return resolve_cell_color(
        column,
        record.get(column),
        record.bg_color.get(column),
        today=today,
        rules=rules,
    )


def is_paintable(
    record: Record,
    column: str,
    *,
    today: date | None = None,
    rules: ColorRuleTable | None = None,
) -> bool:
    return resolve_color(record, column, today=today, rules=rules).paintable


def eligible_colors(
    record: Record,
    colors: dict[str, str],
    *,
    today: date | None = None,
    rules: ColorRuleTable | None = None,
) -> dict[str, str]:
    """Keep only the manual colors whose column is not governed by an automatic rule."""
    return {
        column: color
        for column, color in colors.items()
        if is_paintable(record, column, today=today, rules=rules)
    }
