# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import copy
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from greenmaster_core.ai import AIGateway, GreenMasterInsights, RetryPolicy
from greenmaster_core.config import AppSettings
from greenmaster_core.context import build_app_context
from greenmaster_core.models import DEFAULT_ADMIN, UserProfile, seed_documents
from greenmaster_core.state import AuditLogger, CollectionSynchronizer
from greenmaster_core.store import KeyValueStorage, LocalDocumentStore, LocalMirrorStore


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def storage(tmp_path):
    """SQLite slot storage in a temporary directory"""
    kv = KeyValueStorage(tmp_path / "greenmaster.db")
    yield kv
    kv.close()


@pytest.fixture
def mirror(storage):
    return LocalMirrorStore(storage)


@pytest.fixture
def local_store(mirror):
    return LocalDocumentStore(mirror)


@pytest.fixture
def clock():
    """Deterministic millisecond clock; every call advances by one second"""
    state = {"now": 1_716_000_000_000}

    def tick():
        state["now"] += 1000
        return state["now"]

    return tick


@pytest.fixture
def acting_user():
    """Mutable holder for the user the audit logger attributes actions to"""
    return {"user": DEFAULT_ADMIN}


@pytest.fixture
def audit(local_store, acting_user, clock):
    return AuditLogger(local_store, current_user=lambda: acting_user["user"], clock=clock)


@pytest.fixture
def sync(local_store, audit, clock):
    """Started synchronizer over the local store, seeded with the sample data"""
    synchronizer = CollectionSynchronizer(
        local_store, audit, seeds=seed_documents(now_ms=1_716_000_000_000), clock=clock
    )
    synchronizer.start()
    yield synchronizer
    synchronizer.stop()


@pytest.fixture
def settings(tmp_path):
    """Mock-mode settings (no remote database, no AI key)"""
    return AppSettings(db_path=tmp_path / "app.db")


@pytest.fixture
def app_context(settings, storage):
    ctx = build_app_context(settings=settings, storage=storage).start()
    yield ctx
    ctx.close()


# =============================================================================
# AI FIXTURES
# =============================================================================

class FakeCompletions:
    """Stands in for ``client.chat.completions``; replays queued outcomes."""

    def __init__(self):
        self.outcomes: List[Any] = []
        self.calls: List[Dict[str, Any]] = []

    def queue(self, content=None, finish_reason="stop", error=None):
        self.outcomes.append(error if error is not None else (content, finish_reason))

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        content, finish_reason = outcome
        message = SimpleNamespace(role="assistant", content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


@pytest.fixture
def fake_completions():
    return FakeCompletions()


@pytest.fixture
def gateway(fake_completions):
    client = SimpleNamespace(chat=SimpleNamespace(completions=fake_completions))
    return AIGateway(
        api_key="test-key",
        model="main-model",
        fast_model="fast-model",
        retry=RetryPolicy(max_attempts=3, base_delay=0.01, sleep=lambda _: None),
        client=client,
    )


@pytest.fixture
def insights(gateway):
    return GreenMasterInsights(gateway)


# =============================================================================
# SUPABASE FIXTURES
# =============================================================================

class FakeQuery:
    """Chainable subset of the postgrest query builder over an in-memory table."""

    def __init__(self, client, table: str):
        self.client = client
        self.table = table
        self._op = "select"
        self._payload = None
        self._filters: List[tuple] = []
        self._order = None
        self._range = None
        self._limit = None

    def select(self, *_columns, **_kwargs):
        self._op = "select"
        return self

    def upsert(self, rows):
        self._op = "upsert"
        self._payload = rows
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = column
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self):
        if self.client.fail_next:
            self.client.fail_next = False
            raise RuntimeError("connection reset")
        rows = self.client.tables.setdefault(self.table, {})
        if self._op == "upsert":
            for row in self._payload:
                rows[row["id"]] = copy.deepcopy(row)
            self.client.writes += 1
            return SimpleNamespace(data=list(self._payload))
        matched = [
            row for row in rows.values()
            if all(row.get(column) == value for column, value in self._filters)
        ]
        if self._op == "delete":
            for row in matched:
                rows.pop(row["id"], None)
            return SimpleNamespace(data=matched)
        if self._order:
            matched.sort(key=lambda row: row.get(self._order) or "")
        if self._range:
            matched = matched[self._range[0]:self._range[1] + 1]
        if self._limit is not None:
            matched = matched[:self._limit]
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeSupabaseClient:
    def __init__(self):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_next = False
        self.writes = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    """In-memory Supabase client"""
    return FakeSupabaseClient()


# =============================================================================
# HELPER FIXTURES
# =============================================================================

@pytest.fixture
def make_user():
    """Factory for approved intermediate profiles (override any stored field)"""

    def factory(user_id="u-1", email="kim@greenmaster.com", **overrides) -> UserProfile:
        doc = {
            "id": user_id,
            "name": "김현장",
            "email": email,
            "role": "중급자 (Intermediate)",
            "department": "영업",
            "status": "APPROVED",
        }
        doc.update(overrides)
        return UserProfile.from_document(doc)

    return factory
