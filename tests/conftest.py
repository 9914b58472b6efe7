import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["DATABASE_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from anonboard.db import SqlStorage
from anonboard.main import app, get_service
from anonboard.service import BoardService
from anonboard.storage import Storage


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each store implementation behind the same contract."""
    if request.param == "memory":
        return Storage()
    return SqlStorage("sqlite://")


@pytest.fixture
def service(store):
    return BoardService(store)


@pytest.fixture
def api_service():
    return BoardService(Storage())


@pytest.fixture
def client(api_service):
    app.dependency_overrides[get_service] = lambda: api_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
