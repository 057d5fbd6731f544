"""create persons and activity_entries tables

Revision ID: b2d3f4a5c6e7
Revises: a1c2e3f4b5d6
Create Date: 2025-08-20
"""
from alembic import op
import sqlalchemy as sa


revision = 'b2d3f4a5c6e7'
down_revision = 'a1c2e3f4b5d6'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'persons',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_persons_account_id', 'persons', ['account_id'])

    op.create_table(
        'activity_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('activity_date', sa.Date(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('minutes', sa.Integer(), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('person_id', sa.Integer(), sa.ForeignKey('persons.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(500), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('minutes IS NULL OR minutes >= 0', name='ck_activity_entries_minutes'),
    )
    op.create_index('ix_activity_entries_account_date', 'activity_entries', ['account_id', 'activity_date'])


def downgrade():
    op.drop_index('ix_activity_entries_account_date', 'activity_entries')
    op.drop_table('activity_entries')
    op.drop_index('ix_persons_account_id', 'persons')
    op.drop_table('persons')
