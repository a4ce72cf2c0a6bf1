"""add profile fields to users

Revision ID: 20251019110322
Revises: 20251019110321
Create Date: 2025-10-19 11:03:22

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019110322'
down_revision: Union[str, Sequence[str], None] = '20251019110321'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('ALTER TABLE users ADD COLUMN IF NOT EXISTS display_name VARCHAR(100)')
    op.execute('ALTER TABLE users ADD COLUMN IF NOT EXISTS profile_picture_url TEXT')
    op.execute('ALTER TABLE users ADD COLUMN IF NOT EXISTS phone_number VARCHAR(20)')

    op.execute("COMMENT ON COLUMN users.display_name IS 'User display name (optional)'")
    op.execute("COMMENT ON COLUMN users.profile_picture_url IS 'URL to user profile picture'")
    op.execute("COMMENT ON COLUMN users.phone_number IS 'User phone number (optional)'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('ALTER TABLE users DROP COLUMN IF EXISTS phone_number')
    op.execute('ALTER TABLE users DROP COLUMN IF EXISTS profile_picture_url')
    op.execute('ALTER TABLE users DROP COLUMN IF EXISTS display_name')
