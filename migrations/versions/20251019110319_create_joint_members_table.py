"""create joint_members table

Revision ID: 20251019110319
Revises: 20251019104928
Create Date: 2025-10-19 11:03:19

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019110319'
down_revision: Union[str, Sequence[str], None] = '20251019104928'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE joint_members (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            joint_id UUID NOT NULL REFERENCES joints(id) ON DELETE CASCADE,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(20) NOT NULL DEFAULT 'member',
            joined_at TIMESTAMPTZ DEFAULT NOW(),

            UNIQUE(joint_id, user_id)
        )
    """)

    op.execute('CREATE INDEX idx_joint_members_joint ON joint_members(joint_id)')
    op.execute('CREATE INDEX idx_joint_members_user ON joint_members(user_id)')
    op.execute('CREATE INDEX idx_joint_members_role ON joint_members(joint_id, role)')

    op.execute("COMMENT ON TABLE joint_members IS 'Tracks which users are in which joints'")
    op.execute("COMMENT ON COLUMN joint_members.role IS 'creator, moderator, or member'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS joint_members')
