from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from returndesk.repositories.filters import compile_predicates
from returndesk.utils.log import get_logger
from returndesk.utils.transactions import smart_transaction

log = get_logger("records")


class PersistenceError(Exception):
    """Storage or transport failure; the message is safe to log, not to show."""


class RecordNotFound(PersistenceError):
    pass


class RecordRepository:
    """
    Create/read/update/delete/count over one table.

    Every SQLAlchemy failure surfaces as PersistenceError with the original
    exception chained. A failed write only undoes its own SAVEPOINT, so work
    the caller already had pending on the session survives; a successful
    write commits the session.
    """

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    @property
    def collection(self) -> str:
        return self.model.__tablename__

    def _fail(self, action: str, exc: Exception, rollback: bool = True):
        log.warning("%s on %s failed: %s", action, self.collection, exc)
        if rollback:
            try:
                self.db.rollback()
            except SQLAlchemyError:
                pass
        return PersistenceError(f"{action} on {self.collection} failed")

    def get(self, record_id: str):
        try:
            return self.db.get(self.model, record_id)
        except SQLAlchemyError as e:
            raise self._fail("get", e) from e

    def _commit(self, action: str, obj=None):
        """Make a finished write durable; a SAVEPOINT leaves the outer transaction open."""
        try:
            if self.db.in_transaction():
                self.db.commit()
            if obj is not None:
                self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise self._fail(action, e) from e
        return obj

    def insert(self, row: Dict[str, Any]):
        try:
            with smart_transaction(self.db):
                obj = self.model(**row)
                self.db.add(obj)
                self.db.flush()
        except SQLAlchemyError as e:
            # the transaction block already undid its own work
            raise self._fail("insert", e, rollback=False) from e
        self._commit("insert", obj)
        log.info("inserted %s id=%s", self.collection, obj.id)
        return obj

    def update(self, record_id: str, row: Dict[str, Any]):
        try:
            with smart_transaction(self.db):
                obj = self.db.get(self.model, record_id)
                if obj is None:
                    raise RecordNotFound(f"{self.collection} {record_id} not found")
                for key, value in row.items():
                    setattr(obj, key, value)
                self.db.flush()
        except SQLAlchemyError as e:
            raise self._fail("update", e, rollback=False) from e
        self._commit("update", obj)
        log.info("updated %s id=%s", self.collection, record_id)
        return obj

    def delete(self, record_id: str) -> None:
        try:
            with smart_transaction(self.db):
                obj = self.db.get(self.model, record_id)
                if obj is None:
                    raise RecordNotFound(f"{self.collection} {record_id} not found")
                self.db.delete(obj)
                self.db.flush()
        except SQLAlchemyError as e:
            raise self._fail("delete", e, rollback=False) from e
        self._commit("delete")
        log.info("deleted %s id=%s", self.collection, record_id)

    def select(self, predicates: Iterable = (), order_by: Sequence = ()) -> List:
        try:
            qry = self.db.query(self.model).filter(*compile_predicates(self.model, predicates))
            if order_by:
                qry = qry.order_by(*order_by)
            return qry.all()
        except SQLAlchemyError as e:
            raise self._fail("select", e) from e

    def count(self, predicates: Iterable = ()) -> int:
        try:
            return (
                self.db.query(func.count(self.model.id))
                .filter(*compile_predicates(self.model, predicates))
                .scalar()
                or 0
            )
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e

    def distinct(self, field: str) -> List[Any]:
        """Distinct non-null values of `field`, unordered."""
        col = getattr(self.model, field)
        try:
            rows = self.db.query(col).filter(col.isnot(None)).distinct().all()
        except SQLAlchemyError as e:
            raise self._fail("distinct", e) from e
        return [r[0] for r in rows]

    def column_values(self, field: str, predicates: Iterable = ()) -> List[Any]:
        col = getattr(self.model, field)
        try:
            rows = (
                self.db.query(col)
                .filter(*compile_predicates(self.model, predicates))
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("select", e) from e
        return [r[0] for r in rows]

    def count_by(self, field: str, predicates: Iterable = ()) -> List[tuple]:
        """(value, count) pairs grouped by `field`, nulls excluded."""
        col = getattr(self.model, field)
        try:
            return [
                (value, int(n))
                for value, n in self.db.query(col, func.count(self.model.id))
                .filter(col.isnot(None))
                .filter(*compile_predicates(self.model, predicates))
                .group_by(col)
                .all()
            ]
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e
