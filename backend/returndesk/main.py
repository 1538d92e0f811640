from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from returndesk.adapters.auth_provider import AuthError
from returndesk.api.health import router as health_router
from returndesk.api.routes_records import build_records_router
from returndesk.api.routes_stats import router as stats_router
from returndesk.config import settings
from returndesk.db import init_db
from returndesk.entities import LAPTOP_RETURNS, RETURN_ITEMS
from returndesk.repositories.record_repo import PersistenceError
from returndesk.schemas.validation import ValidationError
from returndesk.utils.log import get_logger

log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    init_db(reset=settings.RESET_DB)
    yield


app = FastAPI(title="Return Desk - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    # cause is logged where it happened; the caller gets a generic message
    log.warning("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong, please try again"})


app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(build_records_router(RETURN_ITEMS))

app.include_router(build_records_router(LAPTOP_RETURNS))

app.include_router(stats_router)
