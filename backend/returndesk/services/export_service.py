import io
from datetime import date
from typing import Iterable, Optional, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from returndesk.config import settings
from returndesk.entities import EntityConfig
from returndesk.utils.log import get_logger

log = get_logger("export")

HEADER_FONT = Font(bold=True)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_filename(entity: EntityConfig, today: Optional[date] = None) -> str:
    return f"{entity.collection}_{(today or date.today()).isoformat()}.xlsx"


class ExportService:
    """Flat spreadsheet of records with the entity's fixed column set."""

    def __init__(self, entity: EntityConfig, placeholder: Optional[str] = None):
        self.entity = entity
        self.placeholder = settings.EXPORT_PLACEHOLDER if placeholder is None else placeholder

    def build(self, rows: Iterable, today: Optional[date] = None) -> Tuple[str, bytes]:
        wb = Workbook()
        ws = wb.active
        ws.title = self.entity.sheet_title

        headers = [col.header for col in self.entity.columns]
        ws.append(headers)
        for cell in ws[1]:
            cell.font = HEADER_FONT

        count = 0
        for row in rows:
            ws.append([col.display(row, self.placeholder) for col in self.entity.columns])
            count += 1

        for idx, header in enumerate(headers, start=1):
            width = max(
                [len(header)] + [len(str(c.value or "")) for c in ws[get_column_letter(idx)]]
            )
            ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)

        buf = io.BytesIO()
        wb.save(buf)
        filename = export_filename(self.entity, today)
        log.info("exported %d %s to %s", count, self.entity.plural, filename)
        return filename, buf.getvalue()
