# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Absence range and locked day models."""

import uuid as uuid_lib
from datetime import date

from sqlalchemy import (
    Boolean,
    Date,
    Enum,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin
from worktime.models.enums import AbsenceCategory


class Absence(Base, TimestampMixin):
    """A contiguous, inclusive date range of non-work time."""

    __tablename__ = "absences"

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
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[AbsenceCategory] = mapped_column(
        Enum(AbsenceCategory), nullable=False
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (Index("idx_absence_user_range", "user_id", "start_date"),)

    def covers(self, day: date) -> bool:
        """Check whether the range includes a day."""
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Absence(id={self.id}, {self.category}, "
            f"{self.start_date} to {self.end_date})>"
        )


class LockedDay(Base, TimestampMixin):
    """A day on which a user's entries can no longer be changed."""

    __tablename__ = "locked_days"

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
    locked_by: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False
    )

    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_locked_day"),)
