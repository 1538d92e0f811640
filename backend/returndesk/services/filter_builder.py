from typing import Callable, Optional

from returndesk.entities import EntityConfig
from returndesk.schemas.filter_schema import Facets, FilterValues
from returndesk.services.record_store import RecordStore


class FilterBuilder:
    """
    Holds filter edits until they are applied.

    activate() loads the facet choices (distinct brands and store codes) the
    first time it is called. edit() only touches the pending values; apply()
    hands the whole pending set to `on_apply` in one go, and reset() clears
    everything and applies the empty set.
    """

    def __init__(self, store: RecordStore, entity: EntityConfig,
                 on_apply: Optional[Callable[[FilterValues], None]] = None):
        self.store = store
        self.entity = entity
        self.on_apply = on_apply
        self.facets: Optional[Facets] = None
        self.applied = FilterValues()
        self.pending = FilterValues()

    def activate(self) -> Facets:
        if self.facets is None:
            self.facets = Facets(
                brands=sorted(str(v) for v in self.store.distinct(self.entity.brand_field)),
                store_codes=sorted(str(v) for v in self.store.distinct(self.entity.store_field)),
            )
        return self.facets

    def edit(self, **changes) -> FilterValues:
        unknown = sorted(set(changes) - set(FilterValues.model_fields))
        if unknown:
            raise ValueError(f"Unknown filter field(s): {', '.join(unknown)}")
        # "all" is how a select box says "no filter"
        cleaned = {k: (None if v in ("", "all") else v) for k, v in changes.items()}
        self.pending = FilterValues.model_validate({**self.pending.model_dump(), **cleaned})
        return self.pending

    def apply(self) -> FilterValues:
        self.applied = self.pending.model_copy()
        if self.on_apply is not None:
            self.on_apply(self.applied)
        return self.applied

    def cancel(self) -> FilterValues:
        self.pending = self.applied.model_copy()
        return self.pending

    def reset(self) -> FilterValues:
        self.pending = FilterValues()
        return self.apply()

    @property
    def has_active_filters(self) -> bool:
        return self.applied.is_active()
