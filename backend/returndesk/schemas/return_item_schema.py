from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from returndesk.schemas.validation import OptionalText, RequiredDate, RequiredText


class ReturnItemIn(BaseModel):
    """Editable fields of a return item, in the order they are validated."""

    return_date: RequiredDate("Return date")
    brand_name: RequiredText(255, "Brand name")
    store_code: OptionalText(100, "Store code") = None
    shop_location: OptionalText(255, "Shop location") = None
    canon_printer_sn: OptionalText(100, "Canon printer S/N") = None
    canon_printer_model: OptionalText(100, "Canon printer model") = None
    receipt_printer_sn: OptionalText(100, "Receipt printer S/N") = None
    receipt_printer_model: OptionalText(100, "Receipt printer model") = None
    usb_hub: OptionalText(100, "USB hub") = None
    keyboard: OptionalText(100, "Keyboard") = None
    mouse: OptionalText(100, "Mouse") = None
    scanner: OptionalText(100, "Scanner") = None
    other_1: OptionalText(255, "Other 1") = None
    other_2: OptionalText(255, "Other 2") = None
    receiver_signature: OptionalText(255, "Receiver signature") = None
    remark: OptionalText(500, "Remark") = None


class ReturnItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    return_date: date
    brand_name: str
    store_code: Optional[str] = None
    shop_location: Optional[str] = None
    canon_printer_sn: Optional[str] = None
    canon_printer_model: Optional[str] = None
    receipt_printer_sn: Optional[str] = None
    receipt_printer_model: Optional[str] = None
    usb_hub: Optional[str] = None
    keyboard: Optional[str] = None
    mouse: Optional[str] = None
    scanner: Optional[str] = None
    other_1: Optional[str] = None
    other_2: Optional[str] = None
    receiver_signature: Optional[str] = None
    remark: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
