"""create monthly_reports table

Revision ID: c3e4a5b6d7f8
Revises: b2d3f4a5c6e7
Create Date: 2025-09-02
"""
from alembic import op
import sqlalchemy as sa


revision = 'c3e4a5b6d7f8'
down_revision = 'b2d3f4a5c6e7'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'monthly_reports',
        sa.Column('id', sa.Integer(), autoincrement=True, primary_key=True),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('period_year', sa.Integer(), nullable=False),
        sa.Column('month_index', sa.SmallInteger(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('total_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('carried_in_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('carried_out_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('whole_hours', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('leftover_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('effective_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('distinct_studies', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sacred_service_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('locked', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('account_id', 'period_year', 'month_index', name='uq_monthly_reports_period'),
        sa.CheckConstraint('month_index >= 0 AND month_index <= 11', name='ck_monthly_reports_month_index'),
        sa.CheckConstraint('whole_hours >= 0', name='ck_monthly_reports_whole_hours'),
        sa.CheckConstraint('leftover_minutes >= 0 AND leftover_minutes <= 59', name='ck_monthly_reports_leftover'),
        sa.CheckConstraint(
            'total_minutes >= 0 AND carried_in_minutes >= 0 AND sacred_service_minutes >= 0',
            name='ck_monthly_reports_minutes',
        ),
    )


def downgrade():
    op.drop_table('monthly_reports')
