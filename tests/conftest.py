import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

sys.path.insert(0, str(SRC))


class FakeCursor:
    """Forward-only cursor over a list of documents."""

    def __init__(self, docs, fail_at=None):
        self._docs = list(docs)
        self._pos = 0
        self._fail_at = fail_at
        self.closed = False
        self.fetched = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.closed or self._pos >= len(self._docs):
            raise StopIteration
        if self._fail_at is not None and self._pos == self._fail_at:
            raise ConnectionResetError("cursor fetch failed")
        doc = self._docs[self._pos]
        self._pos += 1
        self.fetched += 1
        return doc

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.close_count = 0

    @property
    def closed(self):
        return self.close_count > 0

    def close(self):
        self.close_count += 1


class FakeQuery:
    """Minimal stand-in for a ReQL term: table scans with filter/limit."""

    def __init__(self, driver, table, predicates=(), limit=None):
        self._driver = driver
        self.table = table
        self.predicates = tuple(predicates)
        self.limit_n = limit

    def filter(self, predicate):
        return FakeQuery(self._driver, self.table, self.predicates + (predicate,), self.limit_n)

    def limit(self, n):
        return FakeQuery(self._driver, self.table, self.predicates, n)

    def _matches(self, doc):
        for pred in self.predicates:
            if callable(pred):
                if not pred(doc):
                    return False
            elif any(doc.get(k) != v for k, v in pred.items()):
                return False
        return True

    def run(self, conn):
        if conn.closed:
            raise RuntimeError("connection is closed")
        self._driver.run_calls.append(self)
        docs = [d for d in self._driver.tables.get(self.table, []) if self._matches(d)]
        if self.limit_n is not None:
            docs = docs[: self.limit_n]
        cursor = FakeCursor(docs, fail_at=self._driver.fail_at)
        self._driver.cursors.append(cursor)
        return cursor

    def __repr__(self):
        return f"r.table({self.table!r})"


class FakeExpr:
    def __init__(self, driver, value):
        self._driver = driver
        self.value = value

    def run(self, conn):
        self._driver.run_calls.append(self)
        return self.value


class FakeDriver:
    """Models the driver surface the connector uses: query building, connect, run."""

    def __init__(self, tables=None, connect_error=None, fail_at=None):
        self.tables = tables or {}
        self.connect_error = connect_error
        self.fail_at = fail_at
        self.connect_calls = []
        self.connections = []
        self.cursors = []
        self.run_calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def expr(self, value):
        return FakeExpr(self, value)

    def connect(self, **kwargs):
        self.connect_calls.append(kwargs)
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(**kwargs)
        self.connections.append(conn)
        return conn


ITEMS = [
    {"id": 1, "name": "apple", "qty": 3},
    {"id": 2, "name": "pear", "qty": 0},
    {"id": 3, "name": "plum", "qty": 7, "tags": ["a", "b"]},
]


@pytest.fixture
def fake_driver():
    """Returns a FakeDriver with an 'items' table."""
    return FakeDriver(tables={"items": [dict(d) for d in ITEMS]})


@pytest.fixture
def base_config():
    """Returns a minimal valid plugin config mapping."""
    return {
        "host": "h",
        "database": "d",
        "user": "u",
        "password": "p",
        "table": "items",
    }
