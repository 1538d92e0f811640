from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from returndesk.adapters.auth_provider import AuthError, SessionContext
from returndesk.api.deps import require_session
from returndesk.db import get_db
from returndesk.entities import EntityConfig
from returndesk.schemas.filter_schema import FilterValues
from returndesk.schemas.validation import ValidationError
from returndesk.services import entity_form
from returndesk.services.entity_form import EntityForm, FormResult, default_values
from returndesk.services.entity_list import EntityList
from returndesk.services.export_service import XLSX_MEDIA_TYPE
from returndesk.services.filter_builder import FilterBuilder
from returndesk.services.receipt_service import ReceiptRenderer
from returndesk.services.record_store import RecordStore
from returndesk.utils.query_params import optional_date, optional_text


def _raise_for(result: FormResult):
    if result.status == entity_form.INVALID:
        raise ValidationError(result.field, result.message)
    if result.status == entity_form.UNAUTHENTICATED:
        raise AuthError(result.message)
    if result.status == entity_form.BUSY:
        raise HTTPException(status_code=409, detail=result.message)
    raise HTTPException(status_code=500, detail=result.message)


def build_records_router(entity: EntityConfig) -> APIRouter:
    """CRUD, search, facets, export and receipts for one collection."""
    router = APIRouter(prefix=f"/api/{entity.slug}", tags=[entity.slug])

    def _out(record) -> Dict[str, Any]:
        return entity.schema_out.model_validate(record).model_dump(mode="json")

    def _list(db: Session, ctx: SessionContext, q, brand, store_code, date_from, date_to) -> EntityList:
        lst = EntityList(RecordStore(db, entity, ctx), entity)
        lst.search = q or ""
        lst.filters = FilterValues(
            brand=optional_text(brand),
            store_code=optional_text(store_code),
            date_from=optional_date(date_from),
            date_to=optional_date(date_to),
        )
        lst.load()
        if lst.error:
            raise HTTPException(status_code=500, detail=lst.error)
        return lst

    def _get_or_404(store: RecordStore, record_id: str):
        record = store.get(record_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"{entity.label.capitalize()} not found")
        return record

    @router.get("", summary=f"List {entity.plural}")
    def list_records(
        q: Optional[str] = Query(None, description="search term"),
        brand: Optional[str] = Query(None),
        store_code: Optional[str] = Query(None),
        date_from: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
        date_to: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
        db: Session = Depends(get_db),
        ctx: SessionContext = Depends(require_session),
    ):
        lst = _list(db, ctx, q, brand, store_code, date_from, date_to)
        return {
            "items": [_out(r) for r in lst.rows],
            "display": lst.display_rows(),
            "total": len(lst.rows),
            "empty_message": lst.empty_message,
        }

    @router.get("/form-defaults", summary="Initial values for a new record")
    def form_defaults(ctx: SessionContext = Depends(require_session)):
        return default_values(entity)

    @router.get("/facets", summary="Distinct brands and store codes")
    def facets(db: Session = Depends(get_db), ctx: SessionContext = Depends(require_session)):
        builder = FilterBuilder(RecordStore(db, entity, ctx), entity)
        return builder.activate().model_dump()

    @router.get("/export", summary=f"Download the filtered {entity.plural} as xlsx")
    def export(
        q: Optional[str] = Query(None),
        brand: Optional[str] = Query(None),
        store_code: Optional[str] = Query(None),
        date_from: Optional[str] = Query(None),
        date_to: Optional[str] = Query(None),
        db: Session = Depends(get_db),
        ctx: SessionContext = Depends(require_session),
    ):
        lst = _list(db, ctx, q, brand, store_code, date_from, date_to)
        filename, data = lst.export()
        return Response(
            content=data,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @router.get("/{record_id}", summary=f"Get one {entity.label}")
    def get_record(record_id: str, db: Session = Depends(get_db),
                   ctx: SessionContext = Depends(require_session)):
        return _out(_get_or_404(RecordStore(db, entity, ctx), record_id))

    @router.post("", status_code=201, summary=f"Create a {entity.label}")
    def create_record(
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        ctx: SessionContext = Depends(require_session),
    ):
        form = EntityForm.create(RecordStore(db, entity, ctx), entity)
        result = form.submit(payload)
        if not result.ok:
            _raise_for(result)
        return _out(result.record)

    @router.put("/{record_id}", summary=f"Replace the editable fields of a {entity.label}")
    def update_record(
        record_id: str,
        payload: Dict[str, Any] = Body(...),
        db: Session = Depends(get_db),
        ctx: SessionContext = Depends(require_session),
    ):
        store = RecordStore(db, entity, ctx)
        form = EntityForm.edit(store, entity, _get_or_404(store, record_id))
        result = form.submit(payload)
        if not result.ok:
            _raise_for(result)
        return _out(result.record)

    @router.delete("/{record_id}", summary=f"Delete a {entity.label}")
    def delete_record(record_id: str, db: Session = Depends(get_db),
                      ctx: SessionContext = Depends(require_session)):
        lst = EntityList(RecordStore(db, entity, ctx), entity)
        lst.request_delete(record_id)
        if not lst.confirm_delete():
            # a missing id reports the same failure as a storage error
            raise HTTPException(status_code=500, detail=lst.error)
        return {"ok": True}

    @router.get("/{record_id}/receipt", response_class=HTMLResponse, summary="Printable receipt")
    def receipt(
        record_id: str,
        mode: str = Query("preview", pattern="^(preview|print)$"),
        db: Session = Depends(get_db),
        ctx: SessionContext = Depends(require_session),
    ):
        record = _get_or_404(RecordStore(db, entity, ctx), record_id)
        renderer = ReceiptRenderer(entity)
        html = renderer.print(record) if mode == "print" else renderer.preview(record)
        return HTMLResponse(html)

    return router
