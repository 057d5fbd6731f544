"""add unlock_last_report() function

Unlocks a report only if it is the last one (highest month_index) of its
theocratic year for the same account. Any other report is rejected with
SQLSTATE MR001.

Revision ID: d4f5b6c7e8a9
Revises: c3e4a5b6d7f8
Create Date: 2025-10-11
"""
from alembic import op


revision = 'd4f5b6c7e8a9'
down_revision = 'c3e4a5b6d7f8'
branch_labels = None
depends_on = None


def upgrade():
    op.execute(
        """
        CREATE OR REPLACE FUNCTION unlock_last_report(report_id integer)
        RETURNS void
        LANGUAGE plpgsql
        AS $$
        DECLARE
            target monthly_reports%ROWTYPE;
            last_index smallint;
        BEGIN
            SELECT * INTO target FROM monthly_reports WHERE id = report_id FOR UPDATE;
            IF NOT FOUND THEN
                RAISE EXCEPTION 'report % not found', report_id;
            END IF;

            SELECT max(month_index) INTO last_index
            FROM monthly_reports
            WHERE account_id = target.account_id AND period_year = target.period_year;

            IF target.month_index <> last_index THEN
                RAISE EXCEPTION 'report % is not the last report of %', report_id, target.period_year
                    USING ERRCODE = 'MR001';
            END IF;

            UPDATE monthly_reports SET locked = false WHERE id = report_id;
        END;
        $$;
        """
    )


def downgrade():
    op.execute("DROP FUNCTION IF EXISTS unlock_last_report(integer)")
