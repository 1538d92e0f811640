from datetime import date, datetime, timezone

from returndesk.entities import LAPTOP_RETURNS, RETURN_ITEMS
from returndesk.models.return_item import ReturnItem
from returndesk.schemas.validation import validate_record
from returndesk.services import stats_service
from returndesk.services.record_store import RecordStore
from returndesk.services.stats_service import StatsService, start_of_month, start_of_week


def _seed(db, ctx):
    store = RecordStore(db, RETURN_ITEMS, ctx)
    for return_date, brand, code in (
        ("2024-03-06", "Canon", "S001"),
        ("2024-03-03", "Canon", "S002"),
        ("2024-03-01", "Epson", "S001"),
        ("2024-02-20", "HP", None),
    ):
        store.insert(validate_record(RETURN_ITEMS.schema_in, {
            "return_date": return_date, "brand_name": brand, "store_code": code,
        }))


def test_week_starts_on_sunday():
    assert start_of_week(date(2024, 3, 6)) == date(2024, 3, 3)
    assert start_of_week(date(2024, 3, 3)) == date(2024, 3, 3)
    assert start_of_week(date(2024, 3, 9)) == date(2024, 3, 3)
    assert start_of_month(date(2024, 3, 9)) == date(2024, 3, 1)


def test_overview(db, ctx):
    _seed(db, ctx)
    stats = StatsService(db, RETURN_ITEMS).overview(today=date(2024, 3, 6))

    assert stats["total"] == 4
    assert stats["this_month"] == 3
    assert stats["this_week"] == 2
    assert stats["active_stores"] == 2
    assert stats["top_brands"][0] == {"value": "Canon", "count": 2, "share": 50.0}
    assert [b["value"] for b in stats["top_brands"]] == ["Canon", "Epson", "HP"]


def test_overview_of_empty_collection(db):
    stats = StatsService(db, LAPTOP_RETURNS).overview(today=date(2024, 3, 6))
    assert stats == {"total": 0, "this_month": 0, "this_week": 0,
                     "active_stores": 0, "top_brands": []}


def test_by_field_limit_and_ties(db, ctx):
    _seed(db, ctx)
    rows = StatsService(db, RETURN_ITEMS).by_field("store_code")
    assert rows == [{"value": "S001", "count": 2}, {"value": "S002", "count": 1}]
    assert len(StatsService(db, RETURN_ITEMS).by_field("brand_name", limit=1)) == 1


def test_monthly_and_report_count_by_creation_time(db, ctx):
    _seed(db, ctx)
    today = datetime.now(timezone.utc).date()
    service = StatsService(db, RETURN_ITEMS)

    assert service.monthly() == [{"month": today.strftime("%Y-%m"), "count": 4}]

    report = service.report(today=today)
    assert report["total"] == 4
    assert report["this_month"] == 4
    assert report["this_week"] == 4
    assert report["by_brand"][0] == {"value": "Canon", "count": 2}


def test_report_windows_follow_the_utc_clock(db, monkeypatch):
    class LateNight(datetime):
        @classmethod
        def now(cls, tz=None):
            return datetime(2024, 4, 1, 0, 30, tzinfo=timezone.utc)

    db.add_all([
        ReturnItem(return_date=date(2024, 3, 31), brand_name="Canon", user_id="user-1",
                   created_at=datetime(2024, 3, 31, 23, 0)),
        ReturnItem(return_date=date(2024, 4, 1), brand_name="Epson", user_id="user-1",
                   created_at=datetime(2024, 4, 1, 0, 10)),
    ])
    db.commit()
    monkeypatch.setattr(stats_service, "datetime", LateNight)

    report = StatsService(db, RETURN_ITEMS).report()
    assert report["total"] == 2
    assert report["this_month"] == 1
