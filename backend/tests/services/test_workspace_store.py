"""Integration Tests: SqlWorkspaceStore — snapshot slot on in-memory SQLite.

Invariants:
    - save() then hydrate() reproduces the session (updated_at = saved-at ms)
    - Absent, malformed or unreachable storage hydrates as None
    - save() overwrites the slot; one row per slot
    - clear() removes the slot; no method raises
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from genstudio.core.artifacts import Artifact
from genstudio.core.domain_types import Role
from genstudio.core.session_state import Session
from genstudio.infrastructure.database import DatabaseSessionManager
from genstudio.models.workspace_snapshot import WorkspaceSnapshot
from genstudio.services.session_controller import GenerationSessionController
from genstudio.services.workspace_store import SqlWorkspaceStore

from tests.services.fakes import ScriptedGenerator, make_result


# -- Helpers -------------------------------------------------------------------

def _populated_session() -> Session:
    session = Session(request_count=3)
    session.record_user_turn("Build a landing page", 1_000)
    session.commit_result(make_result(), 2_000)
    return session


async def _row_count(test_session_factory) -> int:
    async with test_session_factory() as db:
        return await db.scalar(select(func.count()).select_from(WorkspaceSnapshot))


async def _write_raw(test_session_factory, slot, payload):
    async with test_session_factory() as db:
        db.add(WorkspaceSnapshot(slot=slot, payload=payload))
        await db.commit()


# ==============================================================================
# Roundtrip
# ==============================================================================


async def test_hydrate_empty_slot_returns_none(sql_store):
    assert await sql_store.hydrate() is None


async def test_save_then_hydrate_roundtrip(sql_store):
    session = _populated_session()

    saved_at = await sql_store.save(session)
    restored = await sql_store.hydrate()

    assert saved_at is not None
    assert restored.history.turns == session.history.turns
    assert restored.artifacts == session.artifacts
    assert restored.preview_html == session.preview_html
    assert restored.request_count == 3
    assert restored.updated_at == saved_at


async def test_save_does_not_mutate_session(sql_store):
    session = _populated_session()
    await sql_store.save(session)
    assert session.updated_at is None


async def test_save_overwrites_single_row(sql_store, test_session_factory):
    first = _populated_session()
    await sql_store.save(first)

    second = Session(request_count=4)
    second.record_user_turn("replace everything", 3_000)
    second.artifacts = (Artifact("main.py", "python", "print(1)"),)
    await sql_store.save(second)

    restored = await sql_store.hydrate()
    assert await _row_count(test_session_factory) == 1
    assert [t.text for t in restored.history] == ["replace everything"]
    assert restored.artifacts == second.artifacts
    assert restored.history.turns[0].role == Role.USER


async def test_slots_are_independent(sql_store, test_db_manager):
    other = SqlWorkspaceStore(test_db_manager, "other.workspace")
    await sql_store.save(_populated_session())
    assert await other.hydrate() is None


# ==============================================================================
# Clear
# ==============================================================================


async def test_clear_removes_snapshot(sql_store, test_session_factory):
    await sql_store.save(_populated_session())

    assert await sql_store.clear() is True
    assert await sql_store.hydrate() is None
    assert await _row_count(test_session_factory) == 0


async def test_clear_on_empty_slot_succeeds(sql_store):
    assert await sql_store.clear() is True


async def test_save_after_clear_hydrates_fresh_session(sql_store):
    await sql_store.save(_populated_session())
    await sql_store.clear()

    fresh = Session()
    fresh.record_user_turn("start over", 5_000)
    await sql_store.save(fresh)

    restored = await sql_store.hydrate()
    assert [t.text for t in restored.history] == ["start over"]
    assert restored.artifacts == ()
    assert restored.request_count == 0


# ==============================================================================
# Failure handling
# ==============================================================================


async def test_malformed_payload_hydrates_as_none(sql_store, test_session_factory):
    await _write_raw(test_session_factory, sql_store.slot, {"messages": "not-a-list"})
    assert await sql_store.hydrate() is None


async def test_unknown_role_hydrates_as_none(sql_store, test_session_factory):
    payload = {
        "messages": [{"id": "1", "role": "robot", "text": "hi", "timestamp": 1}],
    }
    await _write_raw(test_session_factory, sql_store.slot, payload)
    assert await sql_store.hydrate() is None


async def test_missing_database_never_raises():
    store = SqlWorkspaceStore(None, "test.workspace")

    assert await store.hydrate() is None
    assert await store.save(_populated_session()) is None
    assert await store.clear() is False


async def test_unreachable_table_never_raises():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    store = SqlWorkspaceStore(manager, "test.workspace")

    assert await store.hydrate() is None
    assert await store.save(_populated_session()) is None
    assert await store.clear() is False
    await engine.dispose()


async def test_bad_updated_at_hydrates_as_none(sql_store, test_session_factory):
    await _write_raw(
        test_session_factory, sql_store.slot,
        {"messages": [], "updatedAt": "yesterday"},
    )
    assert await sql_store.hydrate() is None


async def test_controller_starts_empty_on_unreadable_snapshot(
    sql_store, test_session_factory,
):
    await _write_raw(test_session_factory, sql_store.slot, {"updatedAt": [1]})
    controller = GenerationSessionController(
        generator=ScriptedGenerator([]), store=sql_store, coding_floor_ms=0,
    )

    session = await controller.hydrate()

    assert session.is_empty
    assert session.updated_at is None
    assert controller.guard.request_count == 0
