from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class FilterValues(BaseModel):
    """Structured filters applied to a record list. None means "not filtered"."""

    brand: Optional[str] = None
    store_code: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    def is_active(self) -> bool:
        return any(
            v not in (None, "")
            for v in (self.brand, self.store_code, self.date_from, self.date_to)
        )


class Facets(BaseModel):
    brands: List[str] = []
    store_codes: List[str] = []
