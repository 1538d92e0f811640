from datetime import date
from typing import Dict, List, Optional, Tuple

from returndesk.adapters.auth_provider import AuthError
from returndesk.config import settings
from returndesk.entities import EntityConfig
from returndesk.repositories.record_repo import PersistenceError
from returndesk.schemas.filter_schema import FilterValues
from returndesk.services.export_service import ExportService
from returndesk.services.record_store import RecordStore
from returndesk.services.signals import RefreshSignal
from returndesk.utils.log import get_logger

log = get_logger("list")


class EntityList:
    """
    The record table: current rows for a search text and applied filters.

    Rows are owned here. They are replaced wholesale by load(), which runs
    whenever the search, the filters or the refresh signal change; deleting a
    row removes it locally without re-querying. Failed loads and deletes keep
    the previous rows and set `error`.
    """

    def __init__(self, store: RecordStore, entity: EntityConfig,
                 signal: Optional[RefreshSignal] = None):
        self.store = store
        self.entity = entity
        self.search = ""
        self.filters = FilterValues()
        self.rows: List = []
        self.loaded = False
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self.pending_delete_id: Optional[str] = None
        self._unsubscribe = signal.subscribe(self.load) if signal is not None else None

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def load(self) -> List:
        try:
            self.rows = list(self.store.query(self.search, self.filters))
            self.error = None
        except PersistenceError as e:
            log.warning("loading %s failed: %s", self.entity.plural, e)
            self.error = f"Failed to load {self.entity.plural}"
        self.loaded = True
        return self.rows

    def set_search(self, text: str) -> List:
        self.search = text or ""
        return self.load()

    def apply_filters(self, filters: FilterValues) -> List:
        self.filters = filters.model_copy()
        return self.load()

    @property
    def empty_message(self) -> Optional[str]:
        """None while there are rows; otherwise tells "nothing yet" from "nothing matches"."""
        if self.rows:
            return None
        if self.search or self.filters.is_active():
            return f"No {self.entity.plural} found matching your search"
        return f"No {self.entity.plural} yet. Add your first {self.entity.label} above."

    # delete flow: stage one id, then confirm or cancel

    def request_delete(self, record_id: str) -> None:
        self.pending_delete_id = record_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    def confirm_delete(self) -> bool:
        record_id = self.pending_delete_id
        if record_id is None:
            return False
        remaining = [r for r in self.rows if r.id != record_id]
        try:
            self.store.delete(record_id)
        except (AuthError, PersistenceError) as e:
            # any failure means "not confirmed": the row stays
            log.warning("deleting %s %s failed: %s", self.entity.label, record_id, e)
            self.error = f"Failed to delete {self.entity.label}"
            return False
        finally:
            self.pending_delete_id = None
        self.rows = remaining
        self.notice = f"{self.entity.label.capitalize()} deleted successfully"
        return True

    def display_rows(self) -> List[Dict[str, str]]:
        placeholder = settings.EXPORT_PLACEHOLDER
        return [
            {col.header: col.display(row, placeholder) for col in self.entity.columns}
            for row in self.rows
        ]

    def export(self, today: Optional[date] = None) -> Tuple[str, bytes]:
        """Spreadsheet of the rows as currently displayed: (filename, xlsx bytes)."""
        return ExportService(self.entity).build(self.rows, today=today)
