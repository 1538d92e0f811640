import os

# tests get their own sqlite file, recreated for every test
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_returndesk.db")

import pytest

from returndesk.adapters.auth_provider import SessionContext, TokenAuthProvider
from returndesk.db import SessionLocal, init_db

USER_ID = "user-1"


@pytest.fixture(autouse=True)
def clean_db():
    init_db(reset=True)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def provider():
    return TokenAuthProvider()


@pytest.fixture
def ctx(provider):
    context = SessionContext(provider)
    context.initialize(provider.issue_token(USER_ID, email="desk@example.com"))
    yield context
    context.teardown()


@pytest.fixture
def anon_ctx(provider):
    context = SessionContext(provider)
    context.initialize(None)
    return context


@pytest.fixture
def auth_headers(provider):
    return {"Authorization": f"Bearer {provider.issue_token(USER_ID)}"}
