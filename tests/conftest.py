"""
Pytest configuration and shared fixtures
"""
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from db.store import DataStore  # noqa: E402


class FakeQuery:
    """Records the builder chain and answers from the owning FakeSupabase."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.operation = None
        self.payload = None
        self.columns = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, columns="*"):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, row):
        self.operation = "insert"
        self.payload = row
        return self

    def update(self, values):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, col, val):
        self.filters.append(("eq", col, val))
        return self

    def in_(self, col, vals):
        self.filters.append(("in", col, list(vals)))
        return self

    def gte(self, col, val):
        self.filters.append(("gte", col, val))
        return self

    def lt(self, col, val):
        self.filters.append(("lt", col, val))
        return self

    def order(self, col, desc=False):
        self.order_by = (col, desc)
        return self

    def limit(self, n):
        self.limit_to = n
        return self

    def _matches(self, row):
        for op, col, val in self.filters:
            have = row.get(col)
            if op == "eq" and have != val:
                return False
            if op == "in" and have not in val:
                return False
            if op == "gte" and (have is None or str(have) < str(val)):
                return False
            if op == "lt" and (have is None or str(have) >= str(val)):
                return False
        return True

    def execute(self):
        self.client.calls.append(self)
        error = self.client.errors.get((self.table, self.operation)) or self.client.errors.get(self.table)
        if error is not None:
            raise error

        rows = self.client.tables.setdefault(self.table, [])
        if self.operation == "insert":
            new = dict(self.payload)
            new.setdefault("id", f"{self.table}-{len(rows) + 1}")
            rows.append(new)
            return SimpleNamespace(data=[new])
        if self.operation == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(dict(row))
            return SimpleNamespace(data=changed)
        if self.operation == "delete":
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[])

        found = [dict(r) for r in rows if self._matches(r)]
        if self.order_by:
            col, desc = self.order_by
            found.sort(key=lambda r: str(r.get(col) or ""), reverse=desc)
        if self.limit_to is not None:
            found = found[: self.limit_to]
        return SimpleNamespace(data=found)


class FakeAuth:
    def __init__(self):
        self.user = SimpleNamespace(id="user-1", email="jane@example.com")
        self.error = None
        self.calls = []

    def _answer(self, name, payload=None):
        self.calls.append((name, payload))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(user=self.user, session=None)

    def sign_in_with_password(self, credentials):
        return self._answer("sign_in_with_password", credentials)

    def sign_up(self, credentials):
        return self._answer("sign_up", credentials)

    def sign_out(self):
        return self._answer("sign_out")


class FakeSupabase:
    """In-memory stand-in for the supabase client's table builder."""

    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.errors = {}
        self.calls = []
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, operation=None, error=None):
        key = (table, operation) if operation else table
        self.errors[key] = error or RuntimeError(f"{table} unavailable")


@pytest.fixture
def fake_client():
    """Fixture providing an empty fake Supabase client"""
    return FakeSupabase()


@pytest.fixture
def store(fake_client):
    """Fixture providing a DataStore over the fake client"""
    return DataStore(fake_client)


@pytest.fixture
def sample_bookings():
    """Fixture providing booking rows for three customers"""
    return [
        {
            "id": "b1",
            "user_id": "u1",
            "customer_name": "Jane Doe",
            "customer_email": "jane@example.com",
            "customer_phone": "9876543210",
            "service_name": "Deep Cleaning",
            "booking_date": "2024-03-10",
            "booking_time": "10:00",
            "address": "12 Park Street",
            "total_amount": 2500,
            "status": "Completed",
            "created_at": "2024-03-01T10:00:00",
        },
        {
            "id": "b2",
            "user_id": "u1",
            "customer_name": "Jane Doe",
            "customer_email": "jane@example.com",
            "customer_phone": "9876543210",
            "service_name": "Kitchen Cleaning",
            "booking_date": "2024-04-02",
            "booking_time": "11:00",
            "address": "12 Park Street",
            "total_amount": 1500,
            "status": "Pending",
            "created_at": "2024-03-20T10:00:00",
        },
        {
            "id": "b3",
            "user_id": None,
            "customer_name": "Ravi Kumar",
            "customer_email": "",
            "customer_phone": "",
            "service_name": "Sofa Cleaning",
            "booking_date": "2024-02-15",
            "booking_time": "09:00",
            "address": "4 Lake Road",
            "total_amount": "800",
            "status": "Confirmed",
            "created_at": "2024-02-10T09:00:00",
        },
    ]


@pytest.fixture
def notices():
    """Collects messages passed to notify callbacks instead of st.toast"""
    messages = []
    return messages
