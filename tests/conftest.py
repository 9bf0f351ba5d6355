# tests/conftest.py
from datetime import datetime

import pytest

import db
from models.project import Project
from models.user import User

NOW = datetime(2026, 3, 11, 10, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def crew():
    return {
        "alex": User(name="Alex Martin", phone_number="+1 600-000-0001"),
        "maria": User(name="Maria Garcia", phone_number="+1 600-000-0002"),
        "diego": User(name="Diego Lopez", phone_number="+1 600-000-0003"),
        "sara": User(name="Sara Chen", phone_number="+1 600-000-0004"),
    }


@pytest.fixture
def store(crew):
    return db.MemoryStore(users=list(crew.values()))


@pytest.fixture
def as_user(store, crew):
    def _session(name):
        return db.get_session(store, crew[name].id)
    return _session


@pytest.fixture
def project(store, as_user, crew, now) -> Project:
    maria = as_user("maria")
    return db.create_project(maria, "Kitchen Renovation", "Maple Street",
                             [crew["alex"].id, crew["diego"].id], now=now)
