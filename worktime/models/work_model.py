# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Per-weekday target hours."""

import uuid as uuid_lib
from datetime import time

from sqlalchemy import Float, ForeignKey, Integer, Time, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin


class WorkModelDay(Base, TimestampMixin):
    """Target hours and default start time for one weekday of a user.

    Weekdays follow date.weekday(): 0 = Monday ... 6 = Sunday.
    """

    __tablename__ = "work_model_days"

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
    weekday: Mapped[int] = mapped_column(Integer, nullable=False)
    target_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "weekday", name="uq_work_model_user_weekday"),
    )
