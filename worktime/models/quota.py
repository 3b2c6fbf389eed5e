# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Yearly vacation quota models."""

import uuid as uuid_lib
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin, utcnow
from worktime.models.enums import ChangeStatus


class YearlyQuota(Base, TimestampMixin):
    """Vacation entitlement of one user for one calendar year."""

    __tablename__ = "yearly_quotas"

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
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    base_days: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    carryover_days: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    updated_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )

    __table_args__ = (UniqueConstraint("user_id", "year", name="uq_quota_user_year"),)

    @property
    def total_days(self) -> float:
        """Base entitlement plus carry-over."""
        return (self.base_days or 0.0) + (self.carryover_days or 0.0)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<YearlyQuota(user_id={self.user_id}, year={self.year})>"


class QuotaAuditLog(Base):
    """Audit trail of applied quota changes."""

    __tablename__ = "quota_audit_log"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    quota_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("yearly_quotas.id", ondelete="CASCADE"),
        nullable=False,
    )
    changed_by: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    previous_value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    new_value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    change_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )


class QuotaChangeNotification(Base):
    """A proposed quota change awaiting the employee's acknowledgement."""

    __tablename__ = "quota_change_notifications"

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
    changed_by: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    new_value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    status: Mapped[ChangeStatus] = mapped_column(
        Enum(ChangeStatus), default=ChangeStatus.PENDING, nullable=False
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
