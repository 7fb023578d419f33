"""Service test fixtures — controller wired to fakes, SQL store on the test DB.

Invariants:
    - Controller fixtures never sleep for real (RecordingSleep replaces asyncio.sleep)
    - Clock is deterministic: every now_ms() call advances by 1 ms

Design Decisions:
    - Controller tests use MemoryStore; SqlWorkspaceStore is exercised in its own
      module against the in-memory SQLite engine from the root conftest
"""

from itertools import count

import pytest

from genstudio.services.session_controller import GenerationSessionController
from genstudio.services.workspace_store import SqlWorkspaceStore

from tests.services.fakes import MemoryStore, RecordingSleep, ScriptedGenerator


@pytest.fixture
def clock():
    ticks = count(1_700_000_000_000)
    return lambda: next(ticks)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_controller(memory_store, recording_sleep, clock):
    """Factory: controller around a ScriptedGenerator with the given outcomes."""
    def _make(outcomes=(), gate=None, store=None, coding_floor_ms=500, sleep=None):
        generator = ScriptedGenerator(outcomes, gate=gate)
        return GenerationSessionController(
            generator=generator,
            store=store or memory_store,
            coding_floor_ms=coding_floor_ms,
            now_ms=clock,
            sleep=sleep or recording_sleep,
        )
    return _make


@pytest.fixture
def sql_store(test_db_manager, clock):
    return SqlWorkspaceStore(test_db_manager, "test.workspace", now_ms=clock)
