"""create otp_codes table

Revision ID: 20251019104402
Revises: 20251019102429
Create Date: 2025-10-19 10:44:02

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019104402'
down_revision: Union[str, Sequence[str], None] = '20251019102429'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE otp_codes (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            code VARCHAR(6) NOT NULL,
            expires_at TIMESTAMPTZ NOT NULL,
            is_used BOOLEAN DEFAULT FALSE,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    op.execute('CREATE INDEX idx_otp_user_id ON otp_codes(user_id)')
    op.execute('CREATE INDEX idx_otp_expires_at ON otp_codes(expires_at)')
    op.execute('CREATE INDEX idx_otp_code ON otp_codes(code)')

    op.execute("COMMENT ON TABLE otp_codes IS 'One-time passwords for email verification'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS otp_codes')
