"""Pytest configuration and fixtures for flock-backend tests.

API tests run against an in-memory stand-in for the Supabase PostgREST query
builder, injected through app.dependency_overrides, so no Supabase project is
needed.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.main import app
from app.core.dependencies import get_current_user_id
from app.database.supabase_client import get_supabase


# ── In-memory Supabase ───────────────────────────────────────────

# Timestamp columns filled by column defaults in the real schema
_TIMESTAMP_DEFAULTS = {
    "church_members": "joined_at",
    "member_departures": "departed_at",
    "join_request_denials": "denied_at",
    "ministry_volunteers": "joined_at",
    "safety_team_members": "joined_at",
}


class FakeResult:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Chainable subset of the postgrest request builder used by the services."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.ordering: List[tuple] = []
        self.row_limit: Optional[int] = None
        self.row_offset = 0

    # operations
    def select(self, *columns, **kwargs):
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    # filters
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

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def gt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] > value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] < value)
        return self

    # modifiers
    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def offset(self, count):
        self.row_offset = count
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        rows = self.db.tables.setdefault(self.table_name, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self) -> FakeResult:
        self.db.queries.append((self.table_name, self.operation))
        if (self.table_name, self.operation) in self.db.failures:
            raise APIError({"message": f"{self.operation} on {self.table_name} failed", "code": "08006"})
        if self.operation == "insert":
            return FakeResult(self.db.insert(self.table_name, self.payload))
        if self.operation == "update":
            matched = self._matching()
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(row) for row in matched])
        if self.operation == "delete":
            matched = self._matching()
            self.db.tables[self.table_name] = [
                row for row in self.db.tables[self.table_name] if row not in matched
            ]
            return FakeResult([dict(row) for row in matched])

        rows = self._matching()
        for column, desc in reversed(self.ordering):
            rows.sort(key=lambda row: (row.get(column) is None, row.get(column) or ""), reverse=desc)
        rows = rows[self.row_offset:]
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        return FakeResult([dict(row) for row in rows])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.queries: List[tuple] = []
        self.failures: Set[tuple] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def insert(self, table: str, payload) -> List[Dict[str, Any]]:
        rows = payload if isinstance(payload, list) else [payload]
        now = datetime.now(timezone.utc).isoformat()
        inserted = []
        for data in rows:
            row = {"id": str(uuid.uuid4()), "created_at": now}
            if table in _TIMESTAMP_DEFAULTS:
                row[_TIMESTAMP_DEFAULTS[table]] = now
            row.update(data)
            self.tables.setdefault(table, []).append(row)
            inserted.append(dict(row))
        return inserted

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def fail(self, table: str, operation: str) -> None:
        """Make every later (table, operation) query raise like a dropped connection."""
        self.failures.add((table, operation))


# ── Fixtures ─────────────────────────────────────────────────────

CHURCH_ID = "church-1"
WEST = "campus-west"
EAST = "campus-east"

USERS = {
    "owner": {"id": "user-owner", "email": "owner@example.com", "user_metadata": {"full_name": "Olivia Owner"}},
    "overseer": {"id": "user-overseer", "email": "overseer@example.com", "user_metadata": {"full_name": "Oscar Overseer"}},
    "moderator": {"id": "user-moderator", "email": "mod@example.com", "user_metadata": {"full_name": "Mia Moderator"}},
    "member": {"id": "user-member", "email": "member@example.com", "user_metadata": {"full_name": "Max Member"}},
    "member_east": {"id": "user-member-east", "email": "east@example.com", "user_metadata": {"full_name": "Eve East"}},
    "outsider": {"id": "user-outsider", "email": "outsider@example.com", "user_metadata": {"full_name": "Otto Outsider"}},
}

MEMBER_IDS = {
    "owner": "member-owner",
    "overseer": "member-overseer",
    "moderator": "member-moderator",
    "member": "member-member",
    "member_east": "member-member-east",
}


@pytest.fixture
def db() -> FakeSupabase:
    """Church with a west and an east campus and one membership per role."""
    fake = FakeSupabase()
    fake.insert("churches", {"id": CHURCH_ID, "name": "Grace Fellowship", "owner_id": USERS["owner"]["id"], "is_public": True})
    fake.insert("campuses", {"id": WEST, "church_id": CHURCH_ID, "name": "West"})
    fake.insert("campuses", {"id": EAST, "church_id": CHURCH_ID, "name": "East"})
    memberships = [
        ("owner", "owner", None),
        ("overseer", "overseer", WEST),
        ("moderator", "moderator", WEST),
        ("member", "member", WEST),
        ("member_east", "member", EAST),
    ]
    for key, role, campus_id in memberships:
        user = USERS[key]
        fake.insert("church_members", {
            "id": MEMBER_IDS[key],
            "church_id": CHURCH_ID,
            "campus_id": campus_id,
            "user_id": user["id"],
            "role": role,
            "user_name": user["user_metadata"]["full_name"],
            "user_email": user["email"],
        })
    return fake


@pytest.fixture
def current_user() -> Dict[str, Any]:
    """Mutable holder for the authenticated user; tests switch it with login_as."""
    return dict(USERS["owner"])


@pytest.fixture
def login_as(current_user) -> Callable[[str], None]:
    def switch(key: str) -> None:
        current_user.clear()
        current_user.update(USERS[key])
    return switch


@pytest.fixture
def client(db, current_user):
    """Test client with Supabase and authentication overridden."""
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_current_user_id] = lambda: current_user

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def church_url() -> str:
    return f"/api/v1/churches/{CHURCH_ID}"


@pytest.fixture
def church_id() -> str:
    return CHURCH_ID
