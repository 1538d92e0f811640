import importlib
import os
import sys

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from returndesk.config import settings
from returndesk.utils.log import get_logger

log = get_logger("db")

DATABASE_URL = settings.DATABASE_URL
# sqlite connections are handed between the request threadpool and the app thread
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)

if DATABASE_URL.startswith("sqlite"):
    # let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside a real transaction
    @event.listens_for(engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# model modules that must be imported before create_all (add new modules here)
MODEL_MODULES = [
    "returndesk.models.return_item",
    "returndesk.models.laptop_return",
]


def _running_pytest() -> bool:
    if any("pytest" in os.path.basename(a).lower() for a in sys.argv):
        return True
    return any(k.upper().startswith("PYTEST") for k in os.environ.keys())


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Behavior:
      - If `reset` is true, RESET_DB is set, or we detect a pytest run, drop &
        recreate tables so tests start from a clean database.
      - Otherwise, leave existing tables in place and create missing ones.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset or settings.RESET_DB or _running_pytest():
        log.info("Resetting database tables")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized (%s)", ", ".join(sorted(Base.metadata.tables)))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
