# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time entry model."""

import uuid as uuid_lib
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin
from worktime.models.enums import EntryCategory


class TimeEntry(Base, TimestampMixin):
    """One unit of reported time for one day and category.

    The review/edit/deletion state is not stored as a single column. It is
    derived from the nullable timestamp and flag fields below, see
    worktime.engine.lifecycle.compute_status().
    """

    __tablename__ = "time_entries"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    user_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[EntryCategory] = mapped_column(
        Enum(EntryCategory), default=EntryCategory.WORK, nullable=False
    )
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Measurement
    hours: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    surcharge_percent: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    submitted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Review
    reviewer_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    late_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    confirmed_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejected_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Soft delete
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    deletion_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    deletion_confirmed_by_user: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )

    # Pending deletion request
    deletion_requested_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    deletion_requested_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    deletion_request_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Modification tracking
    change_confirmed_by_user: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True
    )
    pending_change_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    last_changed_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    change_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("idx_entry_user_date", "user_id", "date"),
        Index("idx_entry_reviewer", "reviewer_id"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TimeEntry(id={self.id}, date={self.date}, "
            f"category={self.category}, hours={self.hours})>"
        )
