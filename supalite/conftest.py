import pytest

from supalite.client import Client
from supalite.database import DatabaseEngine
from supalite.schema import BOOKKEEPING_RELATIONS

SCHEMA = """
CREATE TABLE customers (id TEXT PRIMARY KEY, name TEXT, email TEXT);
CREATE TABLE invoices (
    id TEXT PRIMARY KEY, customer_id TEXT, invoice_number TEXT,
    total REAL, status TEXT, due_date TEXT, paid_at TEXT
);
CREATE TABLE invoice_items (id TEXT PRIMARY KEY, invoice_id TEXT, description TEXT, amount REAL);
CREATE TABLE categories (id TEXT PRIMARY KEY, name TEXT UNIQUE, description TEXT);
CREATE TABLE expenses (id TEXT PRIMARY KEY, category_id TEXT, amount REAL);
"""


class RecordingExecutor:
    """Async execution primitive that records statements and replays canned rows."""

    def __init__(self, responses=None):
        self.calls = []
        self.responses = list(responses or [])

    async def execute(self, sql, params):
        self.calls.append((sql, list(params)))
        return self.responses.pop(0) if self.responses else []


@pytest.fixture
def engine():
    engine = DatabaseEngine(":memory:")
    engine.executescript(SCHEMA)
    yield engine
    engine.close()


@pytest.fixture
def client(engine):
    return Client(engine, relations=BOOKKEEPING_RELATIONS)


@pytest.fixture
def recorder():
    return RecordingExecutor()


@pytest.fixture
def recording_client(recorder):
    return Client(recorder, relations=BOOKKEEPING_RELATIONS)


@pytest.fixture
def seeded(engine):
    engine.executescript("""
    INSERT INTO customers VALUES ('c1', 'Acme', 'billing@acme.test');
    INSERT INTO customers VALUES ('c2', 'Globex', 'ap@globex.test');
    INSERT INTO invoices VALUES ('i1', 'c1', 'INV-001', 120.0, 'sent', '2026-01-10', NULL);
    INSERT INTO invoices VALUES ('i2', 'c2', 'INV-002', 80.0, 'paid', '2026-01-05', '2026-01-04');
    INSERT INTO invoices VALUES ('i3', NULL, 'INV-003', 45.5, 'draft', '2026-02-01', NULL);
    INSERT INTO invoices VALUES ('i4', 'c9', 'INV-004', 300.0, 'sent', '2026-01-20', NULL);
    INSERT INTO invoice_items VALUES ('it1', 'i1', 'Consulting', 100.0);
    INSERT INTO invoice_items VALUES ('it2', 'i1', 'Travel', 20.0);
    INSERT INTO invoice_items VALUES ('it3', 'i2', 'Support', 80.0);
    """)
    return engine
