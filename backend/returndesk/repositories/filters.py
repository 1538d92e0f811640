"""
Filter expressions understood by the record repository.

Predicates are small immutable values so callers can build, compare and log
them without touching SQLAlchemy; `compile_predicates` turns them into
clauses for a given model.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match; `%` and `_` in `text` are literal."""

    field: str
    text: str


@dataclass(frozen=True)
class IsNull:
    field: str


@dataclass(frozen=True)
class NotNull:
    field: str


@dataclass(frozen=True)
class Gte:
    field: str
    value: Any


@dataclass(frozen=True)
class Lte:
    field: str
    value: Any


@dataclass(frozen=True)
class AnyOf:
    predicates: Tuple[Any, ...]


def _column(model, field: str):
    col = getattr(model, field, None)
    if col is None or not hasattr(col, "property"):
        raise ValueError(f"{model.__name__} has no column {field!r}")
    return col


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def compile_predicate(model, pred) -> ColumnElement:
    if isinstance(pred, Eq):
        return _column(model, pred.field) == pred.value
    if isinstance(pred, Contains):
        return _column(model, pred.field).ilike(f"%{_escape_like(pred.text)}%", escape="\\")
    if isinstance(pred, IsNull):
        return _column(model, pred.field).is_(None)
    if isinstance(pred, NotNull):
        return _column(model, pred.field).isnot(None)
    if isinstance(pred, Gte):
        return _column(model, pred.field) >= pred.value
    if isinstance(pred, Lte):
        return _column(model, pred.field) <= pred.value
    if isinstance(pred, AnyOf):
        return or_(*[compile_predicate(model, p) for p in pred.predicates])
    raise ValueError(f"Unsupported predicate: {pred!r}")


def compile_predicates(model, preds: Iterable) -> List[ColumnElement]:
    """AND-combined list of clauses, one per predicate."""
    return [compile_predicate(model, p) for p in preds]

