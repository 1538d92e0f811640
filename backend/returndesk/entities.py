"""
Per-collection configuration shared by the store, forms, lists, exports,
receipts and statistics. There is exactly one config per collection; the
components take it as a parameter instead of having per-entity variants.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel

from returndesk.models.laptop_return import LaptopReturn
from returndesk.models.return_item import ReturnItem
from returndesk.schemas.laptop_return_schema import LaptopReturnIn, LaptopReturnOut
from returndesk.schemas.return_item_schema import ReturnItemIn, ReturnItemOut


def format_date(value: Optional[date]) -> str:
    """DD-MM-YYYY, the format used on screen, on receipts and in exports."""
    if value is None:
        return ""
    return value.strftime("%d-%m-%Y")


def yes_no(value: Any) -> str:
    return "Yes" if value else "No"


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    header: str
    formatter: Optional[Callable[[Any], str]] = None
    # optional columns show the placeholder when the stored value is null
    optional: bool = True

    def display(self, record: Any, placeholder: str) -> str:
        value = getattr(record, self.key, None)
        if self.formatter is not None:
            return self.formatter(value)
        if value is None or value == "":
            return placeholder if self.optional else ""
        return str(value)


@dataclass(frozen=True)
class EntityConfig:
    collection: str
    label: str
    plural: str
    model: type
    schema_in: Type[BaseModel]
    schema_out: Type[BaseModel]
    search_fields: Tuple[str, ...]
    brand_field: str
    columns: Tuple[ColumnSpec, ...]
    sheet_title: str
    receipt_template: str
    receipt_title: str
    store_field: str = "store_code"
    date_field: str = "return_date"
    # defaults a blank create form starts from, besides return_date
    form_defaults: Dict[str, Any] = field(default_factory=dict)

    @property
    def editable_fields(self) -> Tuple[str, ...]:
        return tuple(self.schema_in.model_fields)

    @property
    def slug(self) -> str:
        return self.collection.replace("_", "-")


RETURN_ITEMS = EntityConfig(
    collection="return_items",
    label="return item",
    plural="return items",
    model=ReturnItem,
    schema_in=ReturnItemIn,
    schema_out=ReturnItemOut,
    search_fields=("brand_name", "store_code", "shop_location", "receiver_signature"),
    brand_field="brand_name",
    columns=(
        ColumnSpec("return_date", "Return Date", format_date, optional=False),
        ColumnSpec("brand_name", "Brand", optional=False),
        ColumnSpec("store_code", "Store Code"),
        ColumnSpec("shop_location", "Location"),
        ColumnSpec("canon_printer_sn", "Canon Printer S/N"),
        ColumnSpec("canon_printer_model", "Canon Printer Model"),
        ColumnSpec("receipt_printer_sn", "Receipt Printer S/N"),
        ColumnSpec("receipt_printer_model", "Receipt Printer Model"),
        ColumnSpec("usb_hub", "USB Hub"),
        ColumnSpec("keyboard", "Keyboard"),
        ColumnSpec("mouse", "Mouse"),
        ColumnSpec("scanner", "Scanner"),
        ColumnSpec("other_1", "Other 1"),
        ColumnSpec("other_2", "Other 2"),
        ColumnSpec("receiver_signature", "Receiver"),
        ColumnSpec("remark", "Remark"),
    ),
    sheet_title="Return Items",
    receipt_template="receipts/return_item.html",
    receipt_title="Return Receipt",
)

LAPTOP_RETURNS = EntityConfig(
    collection="laptop_returns",
    label="laptop return",
    plural="laptop returns",
    model=LaptopReturn,
    schema_in=LaptopReturnIn,
    schema_out=LaptopReturnOut,
    search_fields=("brand", "store_code", "location", "laptop_model", "serial_number", "remark"),
    brand_field="brand",
    columns=(
        ColumnSpec("return_date", "Return Date", format_date, optional=False),
        ColumnSpec("brand", "Brand", optional=False),
        ColumnSpec("store_code", "Store Code"),
        ColumnSpec("location", "Location"),
        ColumnSpec("laptop_model", "Laptop Model", optional=False),
        ColumnSpec("serial_number", "Serial Number", optional=False),
        ColumnSpec("has_charger", "Charger", yes_no, optional=False),
        ColumnSpec("remark", "Remark"),
    ),
    sheet_title="Laptop Returns",
    receipt_template="receipts/laptop_return.html",
    receipt_title="Laptop Return Receipt",
    form_defaults={"has_charger": True},
)

ENTITIES = {e.collection: e for e in (RETURN_ITEMS, LAPTOP_RETURNS)}


def get_entity(collection: str) -> EntityConfig:
    """Look up by collection name ("return_items") or URL slug ("return-items")."""
    key = collection.replace("-", "_")
    if key not in ENTITIES:
        raise KeyError(collection)
    return ENTITIES[key]
