"""
Configuration partagée pour tous les tests.

Le magasin relationnel tourne sur SQLite en mémoire : aucune connexion à PostgreSQL.
La fixture `store` exécute chaque test sur les deux backends.
"""

import datetime as dt
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from portal.database import init_db, make_engine, make_session_factory
from portal.main import app
from portal.schemas.common import EntityKind
from portal.stores.factory import get_store
from portal.stores.local_store import LocalDocumentStore
from portal.stores.sql_store import SqlEntityStore


class TickingClock:
    """Horloge de test : chaque appel avance d'une seconde."""

    def __init__(self, start=datetime(2025, 9, 1, 8, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def sql_store():
    engine = make_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    init_db(engine)
    yield SqlEntityStore(make_session_factory(engine), clock=TickingClock())
    engine.dispose()


@pytest.fixture
def local_store():
    return LocalDocumentStore(clock=TickingClock())


@pytest.fixture(params=["sql", "local"])
def store(request):
    """Magasin paramétré : chaque test tourne sur les deux backends."""
    return request.getfixturevalue(f"{request.param}_store")


# --- Fabriques ---

@pytest.fixture
def add_user(store):
    counter = iter(range(1, 10_000))

    def _add(role="parent", name=None, email=None):
        n = next(counter)
        return store.insert(EntityKind.USERS, {
            "name": name or f"Parent {n}",
            "email": email or f"user{n}@ecole.be",
            "role": role,
        })

    return _add


@pytest.fixture
def add_student(store):
    def _add(parent_id, class_label="CP", first_name="Léa", last_name="Martin", is_archived=False):
        return store.insert(EntityKind.STUDENTS, {
            "last_name": last_name,
            "first_name": first_name,
            "birth_date": dt.date(2018, 4, 12),
            "class_label": class_label,
            "parent_id": parent_id,
            "is_archived": is_archived,
        })

    return _add


@pytest.fixture
def api_store():
    return LocalDocumentStore(clock=TickingClock())


@pytest.fixture
def client(api_store):
    """Client HTTP de test branché sur un magasin local en mémoire."""
    app.dependency_overrides[get_store] = lambda: api_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
