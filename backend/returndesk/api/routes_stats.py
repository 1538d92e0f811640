from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from returndesk.adapters.auth_provider import SessionContext
from returndesk.api.deps import require_session
from returndesk.db import get_db
from returndesk.entities import EntityConfig, get_entity
from returndesk.services.stats_service import StatsService

router = APIRouter(prefix="/api/stats", tags=["stats"])


def _entity(collection: str) -> EntityConfig:
    try:
        return get_entity(collection)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown collection {collection}")


@router.get("/{collection}/overview", summary="Dashboard counters")
def overview(collection: str, db: Session = Depends(get_db),
             ctx: SessionContext = Depends(require_session)):
    return StatsService(db, _entity(collection)).overview()


@router.get("/{collection}/monthly", summary="Records created per month")
def monthly(collection: str, months: int = Query(6, ge=1, le=60),
            db: Session = Depends(get_db), ctx: SessionContext = Depends(require_session)):
    return StatsService(db, _entity(collection)).monthly(months=months)


@router.get("/{collection}/by-field", summary="Counts per field value")
def by_field(collection: str, field: str = Query("brand"), limit: int = Query(10, ge=1, le=500),
             db: Session = Depends(get_db), ctx: SessionContext = Depends(require_session)):
    entity = _entity(collection)
    # "brand" is an alias for the entity's own brand column
    column = entity.brand_field if field == "brand" else field
    allowed = {entity.brand_field, entity.store_field} | set(entity.search_fields)
    if column not in allowed:
        raise HTTPException(status_code=400, detail=f"Cannot group by {field}")
    return StatsService(db, entity).by_field(column, limit=limit)


@router.get("/{collection}/report", summary="Totals and full brand breakdown")
def report(collection: str, db: Session = Depends(get_db),
           ctx: SessionContext = Depends(require_session)):
    return StatsService(db, _entity(collection)).report()
