from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

# Ensure repository root is on sys.path for `import newsboard`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


class _FakeTransaction:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn

    async def __aenter__(self):
        self.conn.open_transactions += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.conn.open_transactions -= 1
        if exc_type is not None:
            self.conn.rolled_back += 1
        return False


class FakeConnection:
    """Stands in for an asyncpg connection.

    ``responses`` maps a SQL fragment to the value returned by the first
    statement containing it; a callable value is called with the query args.
    Unmatched statements return asyncpg's "nothing found" values.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, error: Optional[BaseException] = None):
        self.responses = responses or {}
        self.error = error
        self.calls: List[Tuple[str, str, tuple]] = []
        self.transactions: List[dict] = []
        self.open_transactions = 0
        self.rolled_back = 0

    def _answer(self, method: str, sql: str, args: tuple, default: Any) -> Any:
        normalized = " ".join(sql.split())
        self.calls.append((method, normalized, args))
        if self.error is not None:
            raise self.error
        for fragment, value in self.responses.items():
            if fragment in normalized:
                if isinstance(value, BaseException):
                    raise value
                return value(*args) if callable(value) else value
        return default

    def statements(self, fragment: str) -> List[Tuple[str, str, tuple]]:
        return [c for c in self.calls if fragment in c[1]]

    async def fetch(self, sql: str, *args, timeout=None):
        return self._answer("fetch", sql, args, [])

    async def fetchrow(self, sql: str, *args, timeout=None):
        return self._answer("fetchrow", sql, args, None)

    async def fetchval(self, sql: str, *args, column=0, timeout=None):
        return self._answer("fetchval", sql, args, None)

    def transaction(self, **kwargs):
        self.transactions.append(kwargs)
        return _FakeTransaction(self)


@pytest.fixture()
def make_conn() -> Callable[..., FakeConnection]:
    return FakeConnection


@pytest.fixture()
def client(monkeypatch):
    # Patch DB init/close in lifespan to no-op
    import newsboard.db.pool as db_pool
    import newsboard.db.sa as db_sa

    async def _noop(*args, **kwargs):
        return None

    async def _fake_sa_engine(*args, **kwargs):
        return None, None

    monkeypatch.setattr(db_pool, "connect_db", _noop)
    monkeypatch.setattr(db_pool, "close_db", _noop)
    monkeypatch.setattr(db_sa, "init_sa_engine", _fake_sa_engine)
    monkeypatch.setattr(db_sa, "create_tables", _noop)
    monkeypatch.setattr(db_sa, "close_sa_engine", _noop)

    from newsboard import main as main_mod

    async def fake_conn():
        yield FakeConnection()

    async def fake_session():
        yield object()

    app = main_mod.app
    app.dependency_overrides[db_pool.get_conn] = fake_conn
    app.dependency_overrides[db_sa.get_session] = fake_session

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
