# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User model with time tracking settings."""

import uuid as uuid_lib
from datetime import date

from sqlalchemy import Boolean, Date, Enum, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin
from worktime.models.enums import UserRole


class User(Base, TimestampMixin):
    """Employee account and time tracking settings."""

    __tablename__ = "users"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.INSTALLER, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    require_confirmation: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    employment_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    department_id: Mapped[str | None] = mapped_column(
        String(50),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True,
    )
    vacation_days_yearly: Mapped[float] = mapped_column(
        Float, default=30.0, nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<User(id={self.id}, name={self.display_name!r}, role={self.role})>"
