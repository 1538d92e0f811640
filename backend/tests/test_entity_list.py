from datetime import date

from returndesk.entities import LAPTOP_RETURNS, RETURN_ITEMS
from returndesk.repositories.record_repo import PersistenceError
from returndesk.schemas.filter_schema import FilterValues
from returndesk.schemas.validation import validate_record
from returndesk.services.entity_form import EntityForm
from returndesk.services.entity_list import EntityList
from returndesk.services.record_store import RecordStore
from returndesk.services.signals import RefreshSignal


def _add(store, entity, **values):
    return store.insert(validate_record(entity.schema_in, values))


def test_empty_messages(db, ctx):
    lst = EntityList(RecordStore(db, RETURN_ITEMS, ctx), RETURN_ITEMS)
    lst.load()
    assert lst.empty_message == "No return items yet. Add your first return item above."

    lst.set_search("canon")
    assert lst.empty_message == "No return items found matching your search"

    lst.set_search("")
    lst.apply_filters(FilterValues(brand="Canon"))
    assert lst.empty_message == "No return items found matching your search"


def test_refresh_signal_reloads(db, ctx):
    signal = RefreshSignal()
    store = RecordStore(db, RETURN_ITEMS, ctx)
    lst = EntityList(store, RETURN_ITEMS, signal=signal)
    lst.load()
    assert lst.rows == []

    EntityForm.create(store, RETURN_ITEMS, signal=signal).submit({"brand_name": "Canon"})
    assert len(lst.rows) == 1
    assert lst.empty_message is None

    lst.close()
    EntityForm.create(store, RETURN_ITEMS, signal=signal).submit({"brand_name": "Epson"})
    assert len(lst.rows) == 1


def test_delete_flow(db, ctx):
    store = RecordStore(db, RETURN_ITEMS, ctx)
    keep = _add(store, RETURN_ITEMS, return_date="2024-01-10", brand_name="Canon")
    gone = _add(store, RETURN_ITEMS, return_date="2024-01-11", brand_name="Epson")
    lst = EntityList(store, RETURN_ITEMS)
    lst.load()

    lst.request_delete(gone.id)
    lst.cancel_delete()
    assert lst.confirm_delete() is False
    assert len(lst.rows) == 2

    lst.request_delete(gone.id)
    assert lst.confirm_delete() is True
    assert [r.id for r in lst.rows] == [keep.id]
    assert lst.notice == "Return item deleted successfully"
    assert lst.pending_delete_id is None
    assert store.get(gone.id) is None


def test_failed_delete_keeps_the_row(db, ctx, anon_ctx):
    row = _add(RecordStore(db, RETURN_ITEMS, ctx), RETURN_ITEMS,
               return_date="2024-01-10", brand_name="Canon")
    lst = EntityList(RecordStore(db, RETURN_ITEMS, anon_ctx), RETURN_ITEMS)
    lst.load()

    lst.request_delete(row.id)
    assert lst.confirm_delete() is False
    assert lst.error == "Failed to delete return item"
    assert [r.id for r in lst.rows] == [row.id]


def test_failed_load_keeps_previous_rows(db, ctx):
    store = RecordStore(db, RETURN_ITEMS, ctx)
    _add(store, RETURN_ITEMS, return_date="2024-01-10", brand_name="Canon")
    lst = EntityList(store, RETURN_ITEMS)
    lst.load()

    def broken(*args, **kwargs):
        raise PersistenceError("select on return_items failed")

    store.query = broken
    lst.set_search("anything")
    assert lst.error == "Failed to load return items"
    assert len(lst.rows) == 1


def test_display_rows(db, ctx):
    store = RecordStore(db, LAPTOP_RETURNS, ctx)
    _add(store, LAPTOP_RETURNS, return_date="2024-03-01", brand="Dell",
         laptop_model="Latitude 5520", serial_number="SN123", has_charger=True)
    lst = EntityList(store, LAPTOP_RETURNS)
    lst.load()

    [row] = lst.display_rows()
    assert row["Return Date"] == "01-03-2024"
    assert row["Brand"] == "Dell"
    assert row["Charger"] == "Yes"
    assert row["Store Code"] == "-"
    assert row["Remark"] == "-"


def test_export_uses_current_rows(db, ctx):
    store = RecordStore(db, RETURN_ITEMS, ctx)
    _add(store, RETURN_ITEMS, return_date="2024-01-10", brand_name="Canon")
    lst = EntityList(store, RETURN_ITEMS)
    lst.load()

    filename, data = lst.export(today=date(2024, 5, 2))
    assert filename == "return_items_2024-05-02.xlsx"
    assert data[:2] == b"PK"
