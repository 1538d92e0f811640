from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from returndesk.schemas.validation import OptionalText, RequiredDate, RequiredText


class LaptopReturnIn(BaseModel):
    return_date: RequiredDate("Return date")
    brand: RequiredText(255, "Brand")
    store_code: OptionalText(100, "Store code") = None
    location: OptionalText(255, "Location") = None
    laptop_model: RequiredText(255, "Laptop model")
    serial_number: RequiredText(100, "Serial number")
    # strict: "yes"/1 are rejected rather than coerced
    has_charger: Annotated[StrictBool, Field(title="Charger status")] = True
    remark: OptionalText(500, "Remark") = None


class LaptopReturnOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    return_date: date
    brand: str
    store_code: Optional[str] = None
    location: Optional[str] = None
    laptop_model: str
    serial_number: str
    has_charger: bool
    remark: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
