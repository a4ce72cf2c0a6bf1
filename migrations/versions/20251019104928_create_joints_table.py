"""create joints table

Plain latitude/longitude columns instead of a geography type.

Revision ID: 20251019104928
Revises: 20251019104402
Create Date: 2025-10-19 10:49:28

"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '20251019104928'
down_revision: Union[str, Sequence[str], None] = '20251019104402'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE joints (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(100) NOT NULL,
            creator_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            joint_type VARCHAR(20) NOT NULL DEFAULT 'public',
            visibility VARCHAR(20) NOT NULL DEFAULT 'visible',
            latitude DOUBLE PRECISION NOT NULL,
            longitude DOUBLE PRECISION NOT NULL,
            radius INTEGER NOT NULL DEFAULT 500,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            expires_at TIMESTAMPTZ NOT NULL,

            CONSTRAINT valid_latitude CHECK (latitude >= -90 AND latitude <= 90),
            CONSTRAINT valid_longitude CHECK (longitude >= -180 AND longitude <= 180)
        )
    """)

    op.execute('CREATE INDEX idx_joints_creator ON joints(creator_id)')
    op.execute('CREATE INDEX idx_joints_expires_at ON joints(expires_at)')
    op.execute('CREATE INDEX idx_joints_location ON joints(latitude, longitude)')
    op.execute('CREATE INDEX idx_joints_type ON joints(joint_type)')

    op.execute("COMMENT ON TABLE joints IS 'Location-based groups that expire after 6 hours'")
    op.execute("COMMENT ON COLUMN joints.latitude IS 'Latitude coordinate (-90 to 90)'")
    op.execute("COMMENT ON COLUMN joints.longitude IS 'Longitude coordinate (-180 to 180)'")
    op.execute("COMMENT ON COLUMN joints.radius IS 'Visibility radius in meters (default 500m)'")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute('DROP TABLE IF EXISTS joints')
