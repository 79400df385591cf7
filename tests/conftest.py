# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from taskdesk.database import Base
from taskdesk.services.table_store import SqlTableStore, get_store


@pytest.fixture
def store():
    """A real SqlTableStore on a private in-memory SQLite database"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield SqlTableStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(store):
    """Insert a user row directly; the password hash is irrelevant for most tests"""
    def _make(username, role="User", supervisor_id=None):
        return store.insert("users", {
            "username": username,
            "password_hash": "not-a-hash",
            "role": role,
            "supervisor_id": supervisor_id,
        })
    return _make


@pytest.fixture
def make_task(store):
    def _make(owner, title="task", creator=None):
        return store.insert("tasks", {
            "title": title,
            "user_id": owner["id"],
            "created_by": (creator or owner)["id"],
            "completed": False,
        })
    return _make


@pytest.fixture
def org(make_user):
    """Manager M; supervisors S1, S2 under M; users U1, U2 under S1, U3 under S2, U4 unassigned"""
    m = make_user("manager", "Manager")
    s1 = make_user("sup1", "Supervisor", m["id"])
    s2 = make_user("sup2", "Supervisor", m["id"])
    return {
        "m": m,
        "s1": s1,
        "s2": s2,
        "u1": make_user("user1", "User", s1["id"]),
        "u2": make_user("user2", "User", s1["id"]),
        "u3": make_user("user3", "User", s2["id"]),
        "u4": make_user("user4", "User"),
    }
