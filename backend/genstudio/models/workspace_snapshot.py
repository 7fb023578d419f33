"""Workspace Snapshot ORM — one named slot holding the serialized Session.

Invariants:
    - slot is the primary key: one row per named slot, overwritten on every save
    - payload holds the full snapshot dict (messages, files, previewHtml, requestCount, updatedAt)
    - No partial updates: payload is always replaced wholesale

Design Decisions:
    - JSON column over normalized tables: the snapshot is read and written as one unit,
      never queried by field (ADR: key-value slot semantics)
    - Generic JSON type: portable between SQLite (text) and PostgreSQL (json)
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from genstudio.db.base import Base


class WorkspaceSnapshot(Base):
    """Durable key-value slot for the workspace session."""
    __tablename__ = "workspace_snapshots"

    slot: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
