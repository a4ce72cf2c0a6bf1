"""create users table

Revision ID: 20251019102429
Revises:
Create Date: 2025-10-19 10:24:29

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019102429'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            username VARCHAR(50) UNIQUE NOT NULL,
            email VARCHAR(255) UNIQUE NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            profile_pic_url TEXT,
            phone VARCHAR(20),
            is_18_plus BOOLEAN NOT NULL DEFAULT FALSE,
            is_verified BOOLEAN DEFAULT FALSE,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    op.execute('CREATE INDEX idx_users_email ON users(email)')
    op.execute('CREATE INDEX idx_users_username ON users(username)')

    op.execute("COMMENT ON TABLE users IS 'User accounts for Spot Feed'")
    op.execute("COMMENT ON COLUMN users.is_18_plus IS 'Age verification - user confirmed they are 18+'")
    op.execute("COMMENT ON COLUMN users.is_verified IS 'Email verification status via OTP'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS users')
