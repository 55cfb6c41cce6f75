# flake8: noqa
import os
import sys
from pathlib import Path

# Ensure project root is on sys.path so `recipeshare` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

# Must be set before recipeshare reads its settings
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from recipeshare import models
from recipeshare.app import app, get_db, get_store
from recipeshare.seed import SEED_RECIPES, parse_recipes, seed_recipes
from recipeshare.storage import InMemoryRecipeStore


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db_session():
    """A freshly created database holding the three seed recipes."""
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_recipes(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def memory_store():
    store = InMemoryRecipeStore()
    for recipe in parse_recipes(SEED_RECIPES):
        store.create(recipe)
    return store


@pytest.fixture(params=["sqlalchemy", "memory"])
def client(request):
    """API client backed by SQLite or by the in-memory store."""
    if request.param == "sqlalchemy":
        request.getfixturevalue("db_session")
        app.dependency_overrides[get_db] = override_get_db
    else:
        store = request.getfixturevalue("memory_store")
        app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sql_client(db_session):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
