"""ORM Models — SQLAlchemy declarative models for durable storage.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all / alembic
"""

from genstudio.models.workspace_snapshot import WorkspaceSnapshot  # noqa: F401
