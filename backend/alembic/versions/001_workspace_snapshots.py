"""Create workspace_snapshots table.

Revision ID: 001_workspace_snapshots
Revises:
Create Date: 2026-10-18

One row per named slot; payload holds the full serialized Session
(messages, files, previewHtml, requestCount, updatedAt).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_workspace_snapshots'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'workspace_snapshots',
        sa.Column('slot', sa.String(length=128), primary_key=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('workspace_snapshots')
