"""
Shared field rules for record input schemas and the first-failure contract.

Every input schema trims strings before checking them. Required text must be
non-empty after trimming; optional text that trims to "" becomes None so
storage never holds empty strings. Length limits apply to the trimmed value.
"""
from datetime import date
from typing import Annotated, Any, Dict, Optional, Type

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError


class ValidationError(Exception):
    """A record failed its schema; `field` names the first violated rule."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def _trim(value):
    if isinstance(value, str):
        return value.strip()
    return value


def _required(value):
    value = _trim(value)
    if value is None or value == "":
        raise PydanticCustomError("required", "Field is required")
    return value


def _blank_to_none(value):
    value = _trim(value)
    if value == "":
        return None
    return value


def RequiredText(max_length: int, title: str):
    return Annotated[
        Annotated[str, StringConstraints(max_length=max_length)],
        BeforeValidator(_required),
        Field(title=title),
    ]


def OptionalText(max_length: int, title: str):
    return Annotated[
        Optional[Annotated[str, StringConstraints(max_length=max_length)]],
        BeforeValidator(_blank_to_none),
        Field(title=title),
    ]


def RequiredDate(title: str):
    return Annotated[date, BeforeValidator(_required), Field(title=title)]


def _message(label: str, error: Dict[str, Any]) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind in ("missing", "required"):
        return f"{label} is required"
    if kind == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if kind.startswith("bool"):
        return f"{label} must be true or false"
    if kind.startswith("date"):
        return f"{label} must be a valid date"
    if kind == "string_type":
        return f"{label} must be text"
    return f"{label} is invalid"


def validate_record(schema: Type[BaseModel], values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate `values` against `schema` and return the normalized record.

    Raises ValidationError describing only the first violated rule, in the
    order fields are declared on the schema.
    """
    try:
        parsed = schema.model_validate(values)
    except PydanticValidationError as e:
        errors = e.errors()
        order = list(schema.model_fields)
        errors.sort(key=lambda err: order.index(err["loc"][0]) if err["loc"] and err["loc"][0] in order else len(order))
        first = errors[0]
        field = str(first["loc"][0]) if first["loc"] else ""
        info = schema.model_fields.get(field)
        label = (info.title if info and info.title else field.replace("_", " ").capitalize())
        raise ValidationError(field, _message(label, first)) from None
    return parsed.model_dump()
