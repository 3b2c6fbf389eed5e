# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Initial work time schema.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

user_role = sa.Enum("ADMIN", "OFFICE", "INSTALLER", "APPRENTICE", name="userrole")
entry_category = sa.Enum(
    "WORK",
    "BREAK",
    "COMPANY",
    "OFFICE",
    "WAREHOUSE",
    "CAR",
    "VACATION",
    "SICK",
    "HOLIDAY",
    "UNPAID",
    "SICK_CHILD",
    "SICK_PAY",
    "SPECIAL_HOLIDAY",
    "OVERTIME_REDUCTION",
    "EMERGENCY_SERVICE",
    name="entrycategory",
)
absence_category = sa.Enum(
    "VACATION",
    "SICK",
    "HOLIDAY",
    "UNPAID",
    "SICK_CHILD",
    "SICK_PAY",
    name="absencecategory",
)
change_status = sa.Enum("PENDING", "CONFIRMED", "REJECTED", name="changestatus")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Create all work time tables."""
    op.create_table(
        "departments",
        sa.Column("id", sa.String(50), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("responsible_user_id", sa.Uuid(), nullable=True),
        sa.Column("substitute_user_id", sa.Uuid(), nullable=True),
        sa.Column("is_substitute_active", sa.Boolean(), nullable=False),
        sa.Column("additional_responsible_ids", sa.JSON(), nullable=False),
        sa.Column("retro_responsible_user_id", sa.Uuid(), nullable=True),
        sa.Column("retro_substitute_user_id", sa.Uuid(), nullable=True),
        sa.Column("is_retro_substitute_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("require_confirmation", sa.Boolean(), nullable=False),
        sa.Column("employment_start_date", sa.Date(), nullable=True),
        sa.Column("department_id", sa.String(50), nullable=True),
        sa.Column("vacation_days_yearly", sa.Float(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.ForeignKeyConstraint(
            ["department_id"], ["departments.id"], ondelete="SET NULL"
        ),
    )

    op.create_table(
        "work_model_days",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("weekday", sa.Integer(), nullable=False),
        sa.Column("target_hours", sa.Float(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "weekday", name="uq_work_model_user_weekday"),
    )

    op.create_table(
        "time_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("category", entry_category, nullable=False),
        sa.Column("description", sa.String(200), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("hours", sa.Numeric(6, 2), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("surcharge_percent", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("submitted", sa.Boolean(), nullable=False),
        sa.Column("reviewer_id", sa.Uuid(), nullable=True),
        sa.Column("late_reason", sa.Text(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(), nullable=True),
        sa.Column("confirmed_by", sa.Uuid(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(), nullable=True),
        sa.Column("rejected_by", sa.Uuid(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_by", sa.Uuid(), nullable=True),
        sa.Column("deletion_reason", sa.Text(), nullable=True),
        sa.Column("deletion_confirmed_by_user", sa.Boolean(), nullable=True),
        sa.Column("deletion_requested_at", sa.DateTime(), nullable=True),
        sa.Column("deletion_requested_by", sa.Uuid(), nullable=True),
        sa.Column("deletion_request_reason", sa.Text(), nullable=True),
        sa.Column("change_confirmed_by_user", sa.Boolean(), nullable=True),
        sa.Column("pending_change_id", sa.Uuid(), nullable=True),
        sa.Column("last_changed_by", sa.Uuid(), nullable=True),
        sa.Column("change_reason", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_entry_user_date", "time_entries", ["user_id", "date"])
    op.create_index("idx_entry_reviewer", "time_entries", ["reviewer_id"])

    op.create_table(
        "entry_change_history",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("entry_id", sa.Uuid(), nullable=False),
        sa.Column("changed_at", sa.DateTime(), nullable=False),
        sa.Column("changed_by", sa.Uuid(), nullable=False),
        sa.Column("old_values", sa.JSON(), nullable=False),
        sa.Column("new_values", sa.JSON(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", change_status, nullable=False),
        sa.Column("user_response_at", sa.DateTime(), nullable=True),
        sa.Column("user_response_note", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["entry_id"], ["time_entries.id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        "idx_history_entry", "entry_change_history", ["entry_id", "changed_at"]
    )

    op.create_table(
        "absences",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("category", absence_category, nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("submitted", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_absence_user_range", "absences", ["user_id", "start_date"])

    op.create_table(
        "locked_days",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("locked_by", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "date", name="uq_locked_day"),
    )

    op.create_table(
        "balance_adjustments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("hours", sa.Numeric(8, 2), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "yearly_quotas",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("base_days", sa.Float(), nullable=False),
        sa.Column("carryover_days", sa.Float(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "year", name="uq_quota_user_year"),
    )

    op.create_table(
        "quota_audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("quota_id", sa.Uuid(), nullable=False),
        sa.Column("changed_by", sa.Uuid(), nullable=True),
        sa.Column("previous_value", sa.JSON(), nullable=False),
        sa.Column("new_value", sa.JSON(), nullable=False),
        sa.Column("change_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["quota_id"], ["yearly_quotas.id"], ondelete="CASCADE"
        ),
    )

    op.create_table(
        "quota_change_notifications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("changed_by", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("previous_value", sa.JSON(), nullable=False),
        sa.Column("new_value", sa.JSON(), nullable=False),
        sa.Column("status", change_status, nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )


def downgrade() -> None:
    """Drop all work time tables."""
    op.drop_table("quota_change_notifications")
    op.drop_table("quota_audit_log")
    op.drop_table("yearly_quotas")
    op.drop_table("balance_adjustments")
    op.drop_table("locked_days")
    op.drop_index("idx_absence_user_range", table_name="absences")
    op.drop_table("absences")
    op.drop_index("idx_history_entry", table_name="entry_change_history")
    op.drop_table("entry_change_history")
    op.drop_index("idx_entry_reviewer", table_name="time_entries")
    op.drop_index("idx_entry_user_date", table_name="time_entries")
    op.drop_table("time_entries")
    op.drop_table("work_model_days")
    op.drop_table("users")
    op.drop_table("departments")
