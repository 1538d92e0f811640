from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from returndesk.adapters.auth_provider import AuthError, SessionContext
from returndesk.entities import EntityConfig
from returndesk.repositories.filters import AnyOf, Contains, Eq, Gte, Lte
from returndesk.repositories.record_repo import RecordRepository
from returndesk.schemas.filter_schema import FilterValues
from returndesk.utils.log import get_logger

log = get_logger("store")

# never written by callers: assigned by the store or the database
SYSTEM_FIELDS = ("id", "user_id", "created_at", "updated_at")


@dataclass(frozen=True)
class SortSpec:
    field: str = "return_date"
    descending: bool = True


class RecordStore:
    """
    insert/update/delete/query/count for one collection, on behalf of the
    user in `session_context`.

    Reads are not scoped by owner: every authenticated user sees every record.
    Inserts are stamped with the current user's id; every write is refused
    without a session before storage is touched.
    """

    def __init__(self, db: Session, entity: EntityConfig, session_context: SessionContext):
        self.db = db
        self.entity = entity
        self.session_context = session_context
        self.repo = RecordRepository(db, entity.model)

    def _require_session(self, action: str) -> str:
        if not self.session_context.is_authenticated:
            log.warning("refused %s on %s: no session", action, self.entity.collection)
            raise AuthError(f"You must be logged in to {action} {self.entity.plural}")
        return self.session_context.require_user_id()

    def insert(self, record: Dict[str, Any]):
        user_id = self._require_session("add")
        row = {k: v for k, v in record.items() if k not in SYSTEM_FIELDS}
        row["user_id"] = user_id
        return self.repo.insert(row)

    def update(self, record_id: str, fields: Dict[str, Any]):
        self._require_session("edit")
        row = {k: v for k, v in fields.items() if k not in SYSTEM_FIELDS}
        return self.repo.update(record_id, row)

    def delete(self, record_id: str) -> None:
        self._require_session("delete")
        self.repo.delete(record_id)

    def get(self, record_id: str):
        return self.repo.get(record_id)

    def _predicates(self, search_text: Optional[str], filters: Optional[FilterValues]) -> List:
        preds = []
        if search_text:
            preds.append(AnyOf(tuple(Contains(f, search_text) for f in self.entity.search_fields)))
        if filters is not None:
            if filters.brand:
                preds.append(Eq(self.entity.brand_field, filters.brand))
            if filters.store_code:
                preds.append(Eq(self.entity.store_field, filters.store_code))
            if filters.date_from:
                preds.append(Gte(self.entity.date_field, filters.date_from))
            if filters.date_to:
                preds.append(Lte(self.entity.date_field, filters.date_to))
        return preds

    def query(self, search_text: Optional[str] = None, filters: Optional[FilterValues] = None,
              sort: Optional[SortSpec] = None) -> List:
        """
        Every record matching the search AND all structured filters, full set,
        no paging. Default order is return_date descending; equal keys fall
        back to newest created_at, then id, so the order is stable.
        """
        model = self.entity.model
        sort = sort or SortSpec()
        col = getattr(model, sort.field)
        order_by = [col.desc() if sort.descending else col.asc()]
        if sort.field != "created_at":
            order_by.append(model.created_at.desc())
        order_by.append(model.id.desc())
        return self.repo.select(self._predicates(search_text, filters), order_by)

    def count(self, filters: Optional[FilterValues] = None, predicates: Optional[List] = None) -> int:
        preds = self._predicates(None, filters) + list(predicates or [])
        return self.repo.count(preds)

    def distinct(self, field: str) -> List[Any]:
        return self.repo.distinct(field)
