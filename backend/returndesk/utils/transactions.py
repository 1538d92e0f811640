from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


def _has_open_work(session: Session) -> bool:
    return session.in_transaction() or bool(session.new or session.dirty or session.deleted)


@contextmanager
def smart_transaction(session: Session) -> Iterator[Session]:
    """
    Context manager that begins a transaction on the given Session.

    If a transaction is already active, or the session holds pending changes
    of its own, start a nested SAVEPOINT (begin_nested) so a failure only
    undoes the enclosed work. Otherwise start a normal transaction (begin).
    Leaving a SAVEPOINT does not commit the outer transaction; that is up to
    the caller.

    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    if _has_open_work(session):
        cm = session.begin_nested()
    else:
        cm = session.begin()
    with cm:
        yield session
