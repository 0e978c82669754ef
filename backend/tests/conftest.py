"""
Pytest configuration and fixtures for tests.

Firestore is replaced by an in-memory fake that understands the calls the
repositories make (`document`, `set`, `update`, `delete`, `where(filter=FieldFilter)`,
`stream`), and Firebase authentication is replaced through FastAPI dependency
overrides, so no credentials or network are needed.
"""
import copy
import itertools
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from tienda.config import get_db
from tienda.core.security import get_current_admin, get_current_user
from tienda.main import app


# ============================================================================
# In-memory Firestore
# ============================================================================

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocument:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    def set(self, data):
        self._store[self.id] = copy.deepcopy(data)

    def update(self, fields):
        if self.id not in self._store:
            raise KeyError(self.id)
        self._store[self.id].update(copy.deepcopy(fields))

    def delete(self):
        self._store.pop(self.id, None)


def _matches(data, flt):
    value = data.get(flt.field_path)
    if flt.op_string == "==":
        return value == flt.value
    if flt.op_string == "array_contains":
        return isinstance(value, list) and flt.value in value
    raise NotImplementedError(flt.op_string)


class FakeQuery:
    def __init__(self, store, filters=()):
        self._store = store
        self._filters = tuple(filters)

    def where(self, filter=None):
        return FakeQuery(self._store, self._filters + (filter,))

    def stream(self):
        for doc_id, data in list(self._store.items()):
            if all(_matches(data, f) for f in self._filters):
                yield FakeSnapshot(doc_id, data)


class FakeCollection(FakeQuery):
    _ids = itertools.count(1)

    def document(self, doc_id=None):
        return FakeDocument(self._store, doc_id or f"auto-{next(self._ids)}")


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))

    def docs(self, name):
        return self.collections.get(name, {})


# ============================================================================
# Fixtures
# ============================================================================

ADMIN = {"id": "admin-1", "email": "admin@frutos.cl", "name": "Admin", "is_admin": True}
CUSTOMER = {"id": "user-1", "email": "cliente@frutos.cl", "name": "Cliente", "is_admin": False}


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def seed(db):
    """seed("products", "p1", {...}) writes a document straight into the fake store."""
    def _seed(collection, doc_id, data):
        db.collection(collection).document(doc_id).set(data)
        return data
    return _seed


@pytest.fixture
def fixed_now():
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _client(db, user=None, admin=False):
    app.dependency_overrides[get_db] = lambda: db
    if user is not None:
        app.dependency_overrides[get_current_user] = lambda: user
    if admin:
        app.dependency_overrides[get_current_admin] = lambda: user
    return TestClient(app)


@pytest.fixture
def admin_client(db):
    """Authenticated admin (also a regular user for /cart)."""
    yield _client(db, ADMIN, admin=True)
    app.dependency_overrides.clear()


@pytest.fixture
def client(db):
    """Authenticated customer without the admin claim."""
    yield _client(db, CUSTOMER)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(db):
    """No Authorization header at all."""
    yield _client(db)
    app.dependency_overrides.clear()


@pytest.fixture
def product_draft():
    """Almendras at $15.000/kg, four tiers, the second image flagged as primary."""
    return {
        "name": "Almendras",
        "description": "Almendras tostadas sin sal",
        "pricePerKilo": 15000,
        "pricesByWeight": [
            {"weight": 100, "stock": 5},
            {"weight": 250, "stock": 0},
            {"weight": 500, "stock": 3},
            {"weight": 1000, "stock": 2},
        ],
        "images": [
            {"url": "/uploads/products/almendras_1.jpg"},
            {"url": "/uploads/products/almendras_2.jpg", "isPrimary": True},
        ],
        "category": "Frutos secos",
    }
