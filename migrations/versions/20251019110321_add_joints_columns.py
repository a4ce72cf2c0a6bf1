"""add description and is_active to joints

Revision ID: 20251019110321
Revises: 20251019110320
Create Date: 2025-10-19 11:03:21

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019110321'
down_revision: Union[str, Sequence[str], None] = '20251019110320'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('ALTER TABLE joints ADD COLUMN IF NOT EXISTS description TEXT')
    op.execute('ALTER TABLE joints ADD COLUMN IF NOT EXISTS is_active BOOLEAN DEFAULT TRUE NOT NULL')

    op.execute('CREATE INDEX IF NOT EXISTS idx_joints_active ON joints(is_active) WHERE is_active = true')

    op.execute("COMMENT ON COLUMN joints.description IS 'Optional description of the joint'")
    op.execute("COMMENT ON COLUMN joints.is_active IS 'Whether the joint is currently active'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP INDEX IF EXISTS idx_joints_active')
    op.execute('ALTER TABLE joints DROP COLUMN IF EXISTS is_active')
    op.execute('ALTER TABLE joints DROP COLUMN IF EXISTS description')
