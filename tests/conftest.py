import copy
import itertools

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_auth_service, get_notification_service
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.schemas import Identity
from app.modules.auth.service import clear_auth_cache
from app.modules.notifications.service import NotificationService

TABLE_DEFAULTS = {
    "water_fetch_posts": {
        "partner_user_id": None,
        "verification_status": "pending",
        "verified_by": [],
        "rejected_by": [],
    },
    "user_profiles": {"photo_url": None, "email": None},
}


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Just enough of the postgrest query builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.ordering = []
        self.row_limit = None
        self.row_offset = 0

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def upsert(self, payload, on_conflict=None):
        self.op, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def offset(self, count):
        self.row_offset = count
        return self

    def _matches(self):
        return [r for r in self.db.tables[self.table] if all(f(r) for f in self.filters)]

    def _project(self, row):
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        keys = [c.strip() for c in self.columns.split(",")]
        return {k: copy.deepcopy(row.get(k)) for k in keys}

    def execute(self):
        handler = getattr(self, f"_execute_{self.op}")
        return FakeResponse(handler())

    def _execute_select(self):
        rows = self._matches()
        for column, desc in reversed(self.ordering):
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        rows = rows[self.row_offset:]
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        return [self._project(r) for r in rows]

    def _execute_insert(self):
        return [copy.deepcopy(self.db.insert(self.table, self.payload))]

    def _execute_update(self):
        if self.db.before_update:
            self.db.before_update(self.table)
        updated = []
        for row in self._matches():
            row.update(copy.deepcopy(self.payload))
            row["updated_at"] = self.db.next_timestamp()
            updated.append(copy.deepcopy(row))
        return updated

    def _execute_upsert(self):
        key = self.on_conflict
        for row in self.db.tables[self.table]:
            if key and row.get(key) == self.payload.get(key):
                row.update(copy.deepcopy(self.payload))
                row["updated_at"] = self.db.next_timestamp()
                return [copy.deepcopy(row)]
        return [copy.deepcopy(self.db.insert(self.table, self.payload))]

    def _execute_delete(self):
        matched = self._matches()
        if self.db.block_deletes:
            return []
        self.db.tables[self.table] = [r for r in self.db.tables[self.table] if r not in matched]
        return copy.deepcopy(matched)


class FakeSupabase:
    def __init__(self):
        self.tables = {"user_profiles": [], "water_fetch_posts": []}
        self._ids = {name: itertools.count(1) for name in self.tables}
        self._clock = itertools.count(1)
        self.before_update = None
        self.block_deletes = False

    def next_timestamp(self):
        return f"2026-01-01T00:00:00.{next(self._clock):06d}+00:00"

    def insert(self, table, payload):
        row = copy.deepcopy(TABLE_DEFAULTS.get(table, {}))
        row.update(copy.deepcopy(payload))
        row.setdefault("id", next(self._ids[table]))
        row.setdefault("created_at", self.next_timestamp())
        row.setdefault("updated_at", self.next_timestamp())
        self.tables[table].append(row)
        return row

    def seed(self, table, rows):
        return [self.insert(table, r) for r in rows]

    def table(self, name):
        return FakeQuery(self, name)


class RecordingSender:
    def __init__(self):
        self.sent = []

    def send(self, notification):
        self.sent.append(notification)


class FakeAuthService:
    def __init__(self, identities):
        self.identities = identities

    def verify_token(self, token):
        from fastapi import HTTPException
        if token not in self.identities:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return self.identities[token]


IDENTITIES = {
    "alice-token": Identity(uid="uid-alice", email="alice@example.com", display_name="Alice Waters"),
    "bob-token": Identity(uid="uid-bob", email="bob@example.com", display_name="Bob Rivers"),
    "carol-token": Identity(uid="uid-carol", email="carol@example.com", display_name="Carol Brooks"),
    "dave-token": Identity(uid="uid-dave", email="dave@example.com", display_name="D" * 120,
                           photo_url="https://img/dave.png"),
}


def auth_header(name):
    return {"Authorization": f"Bearer {name}-token"}


@pytest.fixture
def db():
    fake = FakeSupabase()
    fake.seed("user_profiles", [
        {"firebase_uid": "uid-alice", "display_name": "Alice Waters", "photo_url": "https://img/alice.png"},
        {"firebase_uid": "uid-bob", "display_name": "Bob Rivers"},
        {"firebase_uid": "uid-carol", "display_name": "Carol Brooks"},
    ])
    return fake


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def client(db, sender):
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_auth_service] = lambda: FakeAuthService(IDENTITIES)
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(sender)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
