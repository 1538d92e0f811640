from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, String

from returndesk.db import Base


def _now():
    return datetime.now(timezone.utc)


class ReturnItem(Base):
    """Peripheral hardware handed back by a shop (printers, hubs, keyboards ...)."""

    __tablename__ = "return_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    return_date = Column(Date, nullable=False, index=True)
    brand_name = Column(String(255), nullable=False, index=True)
    store_code = Column(String(100), nullable=True, index=True)
    shop_location = Column(String(255), nullable=True)
    canon_printer_sn = Column(String(100), nullable=True)
    canon_printer_model = Column(String(100), nullable=True)
    receipt_printer_sn = Column(String(100), nullable=True)
    receipt_printer_model = Column(String(100), nullable=True)
    usb_hub = Column(String(100), nullable=True)
    keyboard = Column(String(100), nullable=True)
    mouse = Column(String(100), nullable=True)
    scanner = Column(String(100), nullable=True)
    other_1 = Column(String(255), nullable=True)
    other_2 = Column(String(255), nullable=True)
    receiver_signature = Column(String(255), nullable=True)
    remark = Column(String(500), nullable=True)

    user_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    def __repr__(self):
        return f"<ReturnItem id={self.id} brand={self.brand_name} date={self.return_date}>"
