"""create messages table

Revision ID: 20251019110320
Revises: 20251019110319
Create Date: 2025-10-19 11:03:20

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019110320'
down_revision: Union[str, Sequence[str], None] = '20251019110319'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE messages (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            joint_id UUID NOT NULL REFERENCES joints(id) ON DELETE CASCADE,
            user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            content TEXT NOT NULL,
            message_type VARCHAR(20) DEFAULT 'text',
            media_url TEXT,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    op.execute('CREATE INDEX idx_messages_joint ON messages(joint_id)')
    op.execute('CREATE INDEX idx_messages_user ON messages(user_id)')
    op.execute('CREATE INDEX idx_messages_created ON messages(joint_id, created_at DESC)')

    op.execute("COMMENT ON TABLE messages IS 'Chat messages within joints'")
    op.execute("COMMENT ON COLUMN messages.message_type IS 'text, image, audio, or video'")
    op.execute("COMMENT ON COLUMN messages.media_url IS 'URL to media in R2 storage (for non-text messages)'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS messages')
