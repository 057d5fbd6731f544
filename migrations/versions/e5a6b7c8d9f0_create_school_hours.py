"""create school_hours table

Revision ID: e5a6b7c8d9f0
Revises: d4f5b6c7e8a9
Create Date: 2025-11-03
"""
from alembic import op
import sqlalchemy as sa


revision = 'e5a6b7c8d9f0'
down_revision = 'd4f5b6c7e8a9'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'school_hours',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('school_date', sa.Date(), nullable=False),
        sa.Column('hours', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('hours > 0', name='ck_school_hours_hours'),
    )
    op.create_index('ix_school_hours_account_date', 'school_hours', ['account_id', 'school_date'])


def downgrade():
    op.drop_index('ix_school_hours_account_date', 'school_hours')
    op.drop_table('school_hours')
