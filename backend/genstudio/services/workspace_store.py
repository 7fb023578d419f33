"""Workspace Store — durable, best-effort snapshot of the Session in one named slot.

Invariants:
    - hydrate() returns None when the slot is absent, unreadable or malformed
      (SnapshotFormatError or any other decode failure)
    - save() overwrites the whole slot; it never writes a partial snapshot
    - save() returns the saved-at epoch ms on success, None on failure
    - No method raises: failures are logged as PersistenceError and swallowed
    - The store never mutates the Session it is given (the controller stamps updated_at)

Design Decisions:
    - One row keyed by slot name (ADR: key-value slot semantics, not a message table)
    - Best-effort persistence: a failed write leaves the session running in memory only
"""

import logging
import time
from collections.abc import Callable

from genstudio.core.errors import ErrorContext, PersistenceError
from genstudio.core.session_snapshot import (
    session_from_snapshot, session_to_snapshot,
)
from genstudio.core.session_state import Session
from genstudio.infrastructure.database import DatabaseSessionManager
from genstudio.models.workspace_snapshot import WorkspaceSnapshot

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SqlWorkspaceStore:
    """WorkspaceStore backed by the workspace_snapshots table."""

    def __init__(
        self,
        db_manager: DatabaseSessionManager | None,
        slot: str,
        now_ms: Callable[[], int] = _wall_clock_ms,
    ):
        self._db = db_manager
        self.slot = slot
        self._now_ms = now_ms

    async def hydrate(self) -> Session | None:
        """Read the last snapshot. None if absent or unparsable."""
        try:
            payload = await self._read_payload()
        except Exception as e:
            self._log_failure("hydrate", e)
            return None

        if payload is None:
            logger.info("No stored workspace", extra={"slot": self.slot})
            return None
        try:
            return session_from_snapshot(payload)
        except Exception as e:
            self._log_failure("hydrate", e)
            return None

    async def save(self, session: Session) -> int | None:
        """Overwrite the slot with a full snapshot. Returns saved-at ms or None."""
        saved_at = self._now_ms()
        payload = {**session_to_snapshot(session), "updatedAt": saved_at}
        try:
            await self._write_payload(payload)
        except Exception as e:
            self._log_failure("save", e)
            return None
        return saved_at

    async def clear(self) -> bool:
        """Delete the slot. Returns False on failure."""
        try:
            await self._delete_slot()
        except Exception as e:
            self._log_failure("clear", e)
            return False
        logger.info("Workspace snapshot cleared", extra={"slot": self.slot})
        return True

    # -- IO ------------------------------------------------------------------

    def _require_db(self) -> DatabaseSessionManager:
        if self._db is None:
            raise RuntimeError("Database not initialized")
        return self._db

    async def _read_payload(self) -> dict | None:
        async with self._require_db().session() as db:
            row = await db.get(WorkspaceSnapshot, self.slot)
            return row.payload if row is not None else None

    async def _write_payload(self, payload: dict) -> None:
        async with self._require_db().session() as db:
            row = await db.get(WorkspaceSnapshot, self.slot)
            if row is None:
                db.add(WorkspaceSnapshot(slot=self.slot, payload=payload))
            else:
                row.payload = payload
            await db.commit()

    async def _delete_slot(self) -> None:
        async with self._require_db().session() as db:
            row = await db.get(WorkspaceSnapshot, self.slot)
            if row is not None:
                await db.delete(row)
                await db.commit()

    def _log_failure(self, operation: str, cause: Exception) -> None:
        error = PersistenceError(
            str(cause), operation, ErrorContext(slot=self.slot),
        )
        logger.error(
            error.message,
            extra={"slot": self.slot, "error_code": error.code},
        )
