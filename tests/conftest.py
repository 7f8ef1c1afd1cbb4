import threading
from typing import Dict, List, Optional
import pytest
from sqlalchemy import create_engine, text
from dbsetup.config import WizardSettings
from dbsetup.domain.models import Credentials, QueryError, QueryResult

class FakeStoreClient:
    """
    In-memory stand-in for a remote store client.
    `errors` maps resource name -> error message (or QueryError); anything
    not listed answers with one row.
    """
    def __init__(self, errors: Optional[Dict[str, object]] = None, gate: Optional[threading.Event] = None):
        self.errors = errors or {}
        self.gate = gate
        self.calls: List[tuple] = []
        self.closed = False

    def query(self, resource: str, projection: str = "*", limit: int = 1) -> QueryResult:
        self.calls.append((resource, projection, limit))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        error = self.errors.get(resource)
        if error is None:
            return QueryResult(resource=resource, rows=[{"id": 1}])
        if isinstance(error, Exception):
            raise error
        if isinstance(error, str):
            error = QueryError(message=error)
        return QueryResult(resource=resource, error=error)

    def close(self) -> None:
        self.closed = True

class FakeClientFactory:
    def __init__(self, client: Optional[FakeStoreClient] = None, raises: Optional[Exception] = None):
        self.client = client or FakeStoreClient()
        self.raises = raises
        self.credentials_seen: List[Credentials] = []

    def __call__(self, credentials: Credentials) -> FakeStoreClient:
        self.credentials_seen.append(credentials)
        if self.raises is not None:
            raise self.raises
        return self.client

    @property
    def calls(self) -> List[tuple]:
        return self.client.calls

class MemoryConfigStore:
    def __init__(self, fail_with: Optional[Exception] = None):
        self.saved: Optional[Credentials] = None
        self.save_count = 0
        self.fail_with = fail_with

    def save(self, credentials: Credentials) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.saved = credentials
        self.save_count += 1

    def load(self) -> Optional[Credentials]:
        return self.saved

    def clear(self) -> None:
        self.saved = None

@pytest.fixture
def settings(tmp_path):
    return WizardSettings(config_path=tmp_path / "connection.yaml", redirect_delay_s=0.0)

@pytest.fixture
def credentials():
    return Credentials(endpoint="https://abcdefgh.supabase.co", access_key="anon-key-123456")

@pytest.fixture
def sqlite_store(tmp_path):
    """File-backed SQLite database with all four application tables."""
    db_path = tmp_path / "store.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        for name in ("products", "sales", "profiles", "shop_settings"):
            conn.execute(text(f"CREATE TABLE {name} (id INTEGER PRIMARY KEY, name TEXT)"))
        conn.execute(text("INSERT INTO products (id, name) VALUES (1, 'Espresso')"))
    engine.dispose()
    return db_path

@pytest.fixture
def drop_table():
    def _drop(db_path, name):
        engine = create_engine(f"sqlite:///{db_path}")
        with engine.begin() as conn:
            conn.execute(text(f"DROP TABLE {name}"))
        engine.dispose()
    return _drop
