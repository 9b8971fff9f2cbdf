"""Domain entity for dropdown option rows — the lists behind cell autocomplete."""

from dataclasses import dataclass, field

# Columns that have an option list, in admin-panel order.
LIST_COLUMNS: tuple[str, ...] = (
    "Calls",
    "Status",
    "Law Firm",
    "Specialty",
    "Type",
    "Facility",
    "Doctor",
    "Employee",
)


def is_valid_option(value: str | None) -> bool:
    return isinstance(value, str) and value.strip() != ""


@dataclass
class DropdownOptionRow:
    """A row of the option table.

    Each row holds at most one value per list column; a list is the union of
    one column across all rows, so a column can have free slots in some rows.
    """

    values: dict[str, str | None] = field(default_factory=dict)
    id: int | None = None

    def get(self, column: str) -> str | None:
        return self.values.get(column)

    def has_free_slot(self, column: str) -> bool:
        return not is_valid_option(self.values.get(column))


def group_options(rows: list[DropdownOptionRow]) -> dict[str, list[str]]:
    """Group option rows into one de-duplicated list per column.

    Blank values are skipped and the first occurrence of a value wins, so the
    resulting order follows row order.
    """
    grouped: dict[str, list[str]] = {column: [] for column in LIST_COLUMNS}
    seen: dict[str, set[str]] = {column: set() for column in LIST_COLUMNS}

    for row in rows:
        for column in LIST_COLUMNS:
            value = row.get(column)
            if not is_valid_option(value):
                continue
            value = value.strip()
            if value in seen[column]:
                continue
            seen[column].add(value)
            grouped[column].append(value)
    return grouped
