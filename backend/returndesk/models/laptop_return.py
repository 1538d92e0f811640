from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Boolean, Column, Date, DateTime, String

from returndesk.db import Base


def _now():
    return datetime.now(timezone.utc)


class LaptopReturn(Base):
    __tablename__ = "laptop_returns"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    return_date = Column(Date, nullable=False, index=True)
    brand = Column(String(255), nullable=False, index=True)
    store_code = Column(String(100), nullable=True, index=True)
    location = Column(String(255), nullable=True)
    laptop_model = Column(String(255), nullable=False)
    serial_number = Column(String(100), nullable=False)
    has_charger = Column(Boolean, nullable=False, default=True)
    remark = Column(String(500), nullable=True)

    user_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    def __repr__(self):
        return f"<LaptopReturn id={self.id} model={self.laptop_model} sn={self.serial_number}>"
