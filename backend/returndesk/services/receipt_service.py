import os
from datetime import date
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from returndesk.adapters.browser_print import BrowserPrintAdapter
from returndesk.config import settings
from returndesk.entities import EntityConfig, format_date

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")

templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
templates.filters["ddmmyyyy"] = format_date

# peripherals listed on a return item receipt, in print order
RETURNED_PERIPHERALS = (
    ("canon_printer_sn", "Canon Printer"),
    ("receipt_printer_sn", "Receipt Printer"),
    ("usb_hub", "USB Hub"),
    ("keyboard", "Keyboard"),
    ("mouse", "Mouse"),
    ("scanner", "Scanner"),
)


def returned_items(record) -> List[Dict]:
    lines = []
    for field, name in RETURNED_PERIPHERALS:
        serial = getattr(record, field, None)
        if serial:
            lines.append({"no": len(lines) + 1, "name": name, "qty": 1, "serial_number": serial})
    return lines


class ReceiptRenderer:
    """
    Turns one loaded record into a printable HTML receipt.

    Rendering is pure: same record and date in, same document out. It never
    reads storage or runs validation.
    """

    def __init__(self, entity: EntityConfig, printer: Optional[BrowserPrintAdapter] = None):
        self.entity = entity
        self.printer = printer or BrowserPrintAdapter()

    def render(self, record, today: Optional[date] = None) -> str:
        today = today or date.today()
        template = templates.get_template(self.entity.receipt_template)
        return template.render(
            item=record,
            title=self.entity.receipt_title,
            returned_items=returned_items(record),
            year=today.year,
            system_name=settings.RECEIPT_SYSTEM_NAME,
            powered_by=settings.RECEIPT_POWERED_BY,
        )

    def preview(self, record, today: Optional[date] = None) -> str:
        return self.render(record, today=today)

    def print(self, record, today: Optional[date] = None) -> str:
        return self.printer.submit(self.render(record, today=today))
