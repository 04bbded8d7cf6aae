# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import copy
import threading

import pytest
from unittest.mock import MagicMock

from daycare_core.offline.events import EventBus
from daycare_core.offline.local_store import LocalStore
from daycare_core.offline.models import Child, Parent, Settings


VALID_CLOUD_URL = "https://abcd1234.supabase.co"
VALID_CLOUD_KEY = "anon-test-key"


# =============================================================================
# FAKE CLOUD MIRROR
# =============================================================================

class FakeMirror:
    """
    In-memory stand-in for CloudMirror.

    Tables are lists of dict rows keyed by ``id``. ``offline`` makes every
    call fail the way a real mirror does (None / False); ``fail_writes``
    fails only upserts and deletes. ``upsert_gate`` lets a test hold a
    write in flight.
    """

    def __init__(self, enabled=True, tables=None):
        self._enabled = enabled
        self.disabled_reason = None if enabled else "cloud URL is blank"
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.offline = False
        self.fail_writes = False
        self.upsert_gate = None
        self.calls = []
        self._lock = threading.Lock()

    @property
    def enabled(self):
        return self._enabled

    def fetch_all(self, table):
        self.calls.append(("fetch_all", table))
        if not self._enabled or self.offline:
            return None
        return copy.deepcopy(self.tables.get(table, []))

    def fetch_by_id(self, table, record_id):
        self.calls.append(("fetch_by_id", table, record_id))
        if not self._enabled or self.offline:
            return None
        for row in self.tables.get(table, []):
            if row.get("id") == record_id:
                return copy.deepcopy(row)
        return None

    def upsert(self, table, rows):
        self.calls.append(("upsert", table, copy.deepcopy(rows)))
        if self.upsert_gate is not None:
            self.upsert_gate.wait(timeout=5)
        if not self._enabled or self.offline or self.fail_writes:
            return False
        with self._lock:
            existing = self.tables.setdefault(table, [])
            for row in rows:
                for i, current in enumerate(existing):
                    if current.get("id") == row.get("id"):
                        existing[i] = copy.deepcopy(row)
                        break
                else:
                    existing.append(copy.deepcopy(row))
        return True

    def delete(self, table, record_id):
        self.calls.append(("delete", table, record_id))
        if not self._enabled or self.offline or self.fail_writes:
            return False
        self.tables[table] = [r for r in self.tables.get(table, []) if r.get("id") != record_id]
        return True

    def count(self, table):
        self.calls.append(("count", table))
        if not self._enabled or self.offline:
            return None
        return len(self.tables.get(table, []))

    def calls_to(self, operation, table=None):
        return [c for c in self.calls if c[0] == operation and (table is None or c[1] == table)]


# =============================================================================
# STORE FIXTURES
# =============================================================================

@pytest.fixture
def local_store(tmp_path):
    """Fresh SQLite-backed local store in a temp directory"""
    store = LocalStore(tmp_path / "daycare.db")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def fake_mirror():
    """The FakeMirror class, for tests that need a custom cloud"""
    return FakeMirror


@pytest.fixture
def offline_mirror():
    """Mirror that is configured off (no URL)"""
    return FakeMirror(enabled=False)


@pytest.fixture
def cloud():
    """Enabled, empty in-memory cloud"""
    return FakeMirror(enabled=True)


@pytest.fixture
def make_store(local_store, bus):
    """Factory building a DaycareStore over the shared local store with inline mirror writes"""
    from daycare_core.offline.data_store import DaycareStore

    created = []

    def _make(mirror, background_writes=False):
        store = DaycareStore(
            local_store,
            mirror_factory=lambda url, key: mirror,
            bus=bus,
            background_writes=background_writes,
        )
        created.append(store)
        return store

    yield _make

    for store in created:
        store.close()


@pytest.fixture
def store(make_store, offline_mirror):
    """Local-only DaycareStore"""
    return make_store(offline_mirror)


@pytest.fixture
def cloud_store(make_store, cloud):
    """DaycareStore mirrored to the in-memory cloud"""
    return make_store(cloud)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_parents():
    return [
        Parent(id="p1", full_name="Sara Khan", email="sara@example.org", phone="555-0101"),
        Parent(id="p2", full_name="Omar Khan", email="omar@example.org", relationship="Dad",
               receives_email=False),
    ]


@pytest.fixture
def sample_child():
    return Child(id="c1", first_name="Aisha", last_name="Khan", allergies="Peanuts",
                 parent_ids=["p1", "p2"])


@pytest.fixture
def seeded_store(store, sample_child, sample_parents):
    """Local-only store holding one child and two parents"""
    store.save_parents(sample_parents)
    store.save_child(sample_child)
    return store


@pytest.fixture
def relay_settings():
    return Settings(
        test_email="office@example.org",
        emailjs_service_id="service_1",
        emailjs_template_id="template_1",
        emailjs_public_key="public_1",
    )


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.upsert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture
def mock_session():
    """requests.Session whose POST succeeds"""
    session = MagicMock()
    session.post.return_value = MagicMock(status_code=200, text="OK")
    return session


@pytest.fixture
def gate():
    return threading.Event()

