from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from returndesk.adapters.auth_provider import AuthError
from returndesk.entities import EntityConfig
from returndesk.repositories.record_repo import PersistenceError
from returndesk.schemas.validation import ValidationError, validate_record
from returndesk.services.record_store import RecordStore
from returndesk.services.signals import RefreshSignal
from returndesk.utils.log import get_logger

log = get_logger("forms")

SAVED = "saved"
INVALID = "invalid"
UNAUTHENTICATED = "unauthenticated"
FAILED = "failed"
BUSY = "busy"


@dataclass
class FormResult:
    status: str
    message: str = ""
    field: Optional[str] = None
    record: Any = None

    @property
    def ok(self) -> bool:
        return self.status == SAVED


def _as_form_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return value


class EntityForm:
    """
    Single-record input surface, in a create or an edit flavour.

    `values` holds what the user typed. submit() validates (only the first
    broken rule is reported and nothing is sent to the store), then writes
    exactly one record. While a submit is running `disabled` is true and any
    further submit is refused. Failures leave `values` untouched so the user
    can fix and retry.
    """

    def __init__(self, store: RecordStore, entity: EntityConfig, record=None,
                 signal: Optional[RefreshSignal] = None):
        self.store = store
        self.entity = entity
        self.record = record
        self.signal = signal
        self.submitting = False
        self.closed = False
        self.values: Dict[str, Any] = self._initial_values()

    @classmethod
    def create(cls, store: RecordStore, entity: EntityConfig,
               signal: Optional[RefreshSignal] = None) -> "EntityForm":
        return cls(store, entity, None, signal)

    @classmethod
    def edit(cls, store: RecordStore, entity: EntityConfig, record,
             signal: Optional[RefreshSignal] = None) -> "EntityForm":
        return cls(store, entity, record, signal)

    @property
    def is_edit(self) -> bool:
        return self.record is not None

    @property
    def disabled(self) -> bool:
        return self.submitting

    def _initial_values(self) -> Dict[str, Any]:
        if self.is_edit:
            return {
                name: _as_form_value(getattr(self.record, name, None))
                for name in self.entity.editable_fields
            }
        return default_values(self.entity)

    def reset(self) -> None:
        self.values = self._initial_values()

    def change(self, field: str, value: Any) -> None:
        if self.disabled:
            return
        self.values[field] = value

    def submit(self, changes: Optional[Dict[str, Any]] = None) -> FormResult:
        if self.submitting:
            return FormResult(BUSY, "Already saving")
        if changes:
            for key, value in changes.items():
                if key in self.entity.editable_fields:
                    self.values[key] = value

        self.submitting = True
        try:
            return self._submit()
        finally:
            self.submitting = False

    def _submit(self) -> FormResult:
        try:
            normalized = validate_record(self.entity.schema_in, self.values)
        except ValidationError as e:
            return FormResult(INVALID, e.message, field=e.field)

        try:
            if self.is_edit:
                saved = self.store.update(self.record.id, normalized)
            else:
                saved = self.store.insert(normalized)
        except AuthError as e:
            return FormResult(UNAUTHENTICATED, str(e))
        except PersistenceError as e:
            log.warning("saving %s failed: %s", self.entity.label, e)
            verb = "update" if self.is_edit else "save"
            return FormResult(FAILED, f"Failed to {verb} {self.entity.label}")

        if self.is_edit:
            self.record = saved
        else:
            self.reset()
        self.closed = True
        if self.signal is not None:
            self.signal.emit()
        done = "updated" if self.is_edit else "saved"
        return FormResult(SAVED, f"{self.entity.label.capitalize()} {done} successfully", record=saved)


def default_values(entity: EntityConfig, today: Optional[date] = None) -> Dict[str, Any]:
    """Blank create-form values: today's date, empty text, entity defaults."""
    values: Dict[str, Any] = {name: "" for name in entity.editable_fields}
    values[entity.date_field] = (today or date.today()).isoformat()
    values.update(entity.form_defaults)
    return values
