"""Excel export of the record grid using openpyxl.

Each cell keeps the colors the grid would show for it on the export date,
so the workbook looks like the screen at the moment it was produced.
"""

import io
import logging
from datetime import date

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill

from eazyliens.domain.coloring import ColorRuleTable, ColorSource, resolve_color
from eazyliens.domain.entities import RECORD_COLUMNS, Record

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Leading characters a spreadsheet would evaluate as a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _argb(hex_color: str) -> str:
    return "FF" + hex_color.lstrip("#").upper()


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    return ILLEGAL_CHARACTERS_RE.sub("", value)


class RecordExcelExporter:
    """Builds an .xlsx workbook from a list of records."""

    def __init__(self, sheet_title: str = "EazyLiens", color_rules: ColorRuleTable | None = None):
        self._sheet_title = sheet_title
        self._rules = color_rules

    def export(self, records: list[Record], *, today: date | None = None) -> bytes:
        today = today or date.today()
        wb = Workbook()
        ws = wb.active
        ws.title = self._sheet_title

        ws.append(list(RECORD_COLUMNS))
        for cell in ws[1]:
            cell.font = Font(bold=True)

        for row_idx, record in enumerate(records, start=2):
            for col_idx, column in enumerate(RECORD_COLUMNS, start=1):
                value = _clean_text(record.get(column))
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if value and value.startswith(_FORMULA_PREFIXES):
                    # Stored text, never a formula
                    cell.data_type = "s"
                resolved = resolve_color(record, column, today=today, rules=self._rules)
                if resolved.source is ColorSource.DEFAULT:
                    continue
                cell.fill = PatternFill(
                    fill_type="solid",
                    start_color=_argb(resolved.background),
                    end_color=_argb(resolved.background),
                )
                cell.font = Font(color=_argb(resolved.text))

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.info("Exported %d records to xlsx", len(records))
        return buffer.getvalue()
