"""create verification_records

Revision ID: 001_verification_records
Revises:
Create Date: 2026-10-18 09:12:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_verification_records'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'verification_records',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_verification_records_id', 'verification_records', ['id'])
    op.create_index('ix_verification_records_email', 'verification_records', ['email'], unique=True)
    op.create_index('ix_verification_records_expires_at', 'verification_records', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_verification_records_expires_at', table_name='verification_records')
    op.drop_index('ix_verification_records_email', table_name='verification_records')
    op.drop_index('ix_verification_records_id', table_name='verification_records')
    op.drop_table('verification_records')
