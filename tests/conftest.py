import copy
import os
from types import SimpleNamespace

import pytest

# Configuration is read at import time, so the environment must be set first
os.environ.update({
    "ENVIRONMENT": "development",
    "SUPABASE_URL": "https://example.supabase.co",
    "SUPABASE_SERVICE_KEY": "service-key",
    "SESSION_SECRET": "test-session-secret-with-enough-length",
    "ADMIN_PASSWORD": "correct-horse",
    "PREVIEW_SECRET": "preview-secret",
    "CLERK_WEBHOOK_SECRET": "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw",
    "SITE_URL": "https://goldengateadvisors.com",
    "ADMIN_EMAIL": "hello@goldengateadvisors.com",
    "CLERK_JWT_KEY": "",
    "CLERK_JWKS_URL": "",
    "CLERK_ISSUER": "",
    "RESEND_API_KEY": "",
    "SENTRY_DSN": "",
    "GA_MEASUREMENT_ID": "G-TEST123",
})

from fastapi.testclient import TestClient  # noqa: E402

from goldengate.app import app  # noqa: E402
from goldengate.core.auth import get_current_user_id  # noqa: E402
from goldengate.core.rate_limit import limiter  # noqa: E402
from goldengate.services import supabase_service  # noqa: E402


class FakeQuery:
    """Chainable subset of the PostgREST query builder backed by a list of dicts."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.filters = []
        self.order_by = None
        self.row_limit = None
        self.operation = "select"
        self.payload = None

    def select(self, columns="*"):
        self.operation = "select"
        return self

    def insert(self, record):
        self.operation = "insert"
        self.payload = record
        return self

    def update(self, values):
        self.operation = "update"
        self.payload = values
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, options):
        options = list(options)
        self.filters.append(lambda row: row.get(column) in options)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matching(self):
        return [row for row in self.db.tables.setdefault(self.table, []) if all(f(row) for f in self.filters)]

    def execute(self):
        if self.db.fail_tables and self.table in self.db.fail_tables:
            raise RuntimeError(f"{self.table} is unavailable")

        if self.operation == "insert":
            row = copy.deepcopy(self.payload)
            self.db.tables.setdefault(self.table, []).append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self.operation == "update":
            rows = self._matching()
            for row in rows:
                row.update(copy.deepcopy(self.payload))
            return SimpleNamespace(data=copy.deepcopy(rows))

        rows = self._matching()
        if self.order_by:
            column, desc = self.order_by
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            # PostgREST puts nulls last ascending and first descending
            rows = missing + present if desc else present + missing
        if self.row_limit is not None:
            rows = rows[: self.row_limit]
        return SimpleNamespace(data=copy.deepcopy(rows))


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        self.storage.objects[(self.name, path)] = (file, (file_options or {}).get("content-type"))
        return {"Key": f"{self.name}/{path}"}

    def create_signed_url(self, path, expires_in):
        return {"signedURL": f"https://example.supabase.co/storage/v1/sign/{self.name}/{path}?expires={expires_in}"}


class FakeStorage:
    def __init__(self):
        self.objects = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.storage = FakeStorage()
        self.fail_tables = set()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))

    def rows(self, table):
        return self.tables.get(table, [])

    def row(self, table, row_id):
        return next((r for r in self.rows(table) if r.get("id") == row_id), None)


INVESTOR_USER_ID = "user_investor_1"
OTHER_USER_ID = "user_investor_2"


@pytest.fixture
def db():
    fake = FakeSupabase()
    supabase_service._client = fake
    yield fake
    supabase_service.reset_client()


@pytest.fixture(autouse=True)
def _reset_state():
    limiter.reset()
    yield
    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/admin/login", data={"password": "correct-horse"}, follow_redirects=False)
    assert response.status_code == 303
    return client


@pytest.fixture
def login_as():
    """Authenticate subsequent requests as the given Clerk user id."""
    def _login(user_id):
        app.dependency_overrides[get_current_user_id] = lambda: user_id
    return _login


@pytest.fixture
def investor_client(client, login_as):
    login_as(INVESTOR_USER_ID)
    return client


@pytest.fixture
def investor(db):
    record = {
        "id": "inv-1",
        "clerk_id": INVESTOR_USER_ID,
        "name": "Ada Investor",
        "email": "ada@example.com",
        "phone": "415-555-0100",
        "status": "active",
        "accredited_status": "pending",
    }
    db.seed("investors", record)
    return record


@pytest.fixture
def other_investor(db):
    record = {
        "id": "inv-2",
        "clerk_id": OTHER_USER_ID,
        "name": "Bo Other",
        "email": "bo@example.com",
        "status": "active",
        "accredited_status": "verified",
    }
    db.seed("investors", record)
    return record


@pytest.fixture
def prospectuses(db):
    rows = [
        {
            "id": "pro-1",
            "title": "Noe Valley Duplex",
            "slug": "noe-valley-duplex",
            "status": "open",
            "project_type": "fix-flip",
            "location": "Noe Valley, San Francisco",
            "minimum_investment": 50000,
            "total_raise": 1200000,
            "target_return": "18% IRR",
            "close_date": "2026-12-01",
            "highlights": ["Corner lot", "Permits in hand"],
        },
        {
            "id": "pro-2",
            "title": "Sunset Fourplex",
            "slug": "sunset-fourplex",
            "status": "closed",
            "minimum_investment": 100000,
            "close_date": "2026-06-01",
        },
        {
            "id": "pro-3",
            "title": "Mission Lofts",
            "slug": "mission-lofts",
            "status": "draft",
            "minimum_investment": 25000,
            "close_date": "2027-01-01",
        },
    ]
    db.seed("prospectuses", *rows)
    return rows


SIGNATURE_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture
def signature():
    return SIGNATURE_DATA_URL
