"""Helpers for turning raw query-string values into typed filter values."""

from datetime import date
from typing import Optional

from fastapi import HTTPException


def optional_text(value: Optional[str] = None) -> Optional[str]:
    """Empty or whitespace-only values mean "no filter"."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def optional_date(value: Optional[str] = None) -> Optional[date]:
    """
    Convert a query parameter to an optional date.

    Date inputs left blank arrive as empty strings; those are treated as
    absent instead of failing request validation.

    Raises:
        HTTPException(422): if the value is not an ISO date
    """
    if value is None or value.strip() == "":
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date: {value}")
