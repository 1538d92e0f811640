from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from returndesk.entities import EntityConfig
from returndesk.repositories.filters import Gte
from returndesk.repositories.record_repo import RecordRepository


def start_of_month(today: date) -> date:
    return today.replace(day=1)


def start_of_week(today: date) -> date:
    """Weeks start on Sunday."""
    return today - timedelta(days=(today.weekday() + 1) % 7)


class StatsService:
    """Read-only counts for the dashboard, analytics and report pages."""

    def __init__(self, db: Session, entity: EntityConfig):
        self.entity = entity
        self.repo = RecordRepository(db, entity.model)

    def by_field(self, field: str, limit: Optional[int] = None) -> List[Dict]:
        """Counts per distinct value, most frequent first (ties by value)."""
        pairs = sorted(self.repo.count_by(field), key=lambda p: (-p[1], str(p[0])))
        if limit:
            pairs = pairs[:limit]
        return [{"value": value, "count": n} for value, n in pairs]

    def overview(self, today: Optional[date] = None) -> Dict:
        today = today or date.today()
        date_field = self.entity.date_field
        total = self.repo.count()
        top = self.by_field(self.entity.brand_field, limit=5)
        for row in top:
            row["share"] = round(row["count"] * 100.0 / total, 1) if total else 0.0
        return {
            "total": total,
            "this_month": self.repo.count([Gte(date_field, start_of_month(today))]),
            "this_week": self.repo.count([Gte(date_field, start_of_week(today))]),
            "active_stores": len(self.repo.distinct(self.entity.store_field)),
            "top_brands": top,
        }

    def monthly(self, months: int = 6) -> List[Dict]:
        """Records created per YYYY-MM, the last `months` months that have any."""
        counts = Counter(
            created.strftime("%Y-%m")
            for created in self.repo.column_values("created_at")
            if created is not None
        )
        keys = sorted(counts)[-months:] if months > 0 else []
        return [{"month": k, "count": counts[k]} for k in keys]

    def report(self, today: Optional[date] = None) -> Dict:
        """Totals by creation time plus the full per-brand breakdown."""
        # created_at is stored in UTC
        today = today or datetime.now(timezone.utc).date()
        month_start = datetime.combine(start_of_month(today), time.min)
        week_start = datetime.combine(start_of_week(today), time.min)
        return {
            "total": self.repo.count(),
            "this_month": self.repo.count([Gte("created_at", month_start)]),
            "this_week": self.repo.count([Gte("created_at", week_start)]),
            "by_brand": self.by_field(self.entity.brand_field),
        }
