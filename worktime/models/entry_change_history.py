# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Change history of already existing time entries."""

import uuid as uuid_lib
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, utcnow
from worktime.models.enums import ChangeStatus


class EntryChangeHistory(Base):
    """One edit applied to an existing entry, with its owner acknowledgement."""

    __tablename__ = "entry_change_history"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    entry_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("time_entries.id", ondelete="CASCADE"),
        nullable=False,
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    changed_by: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False
    )
    old_values: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    new_values: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ChangeStatus] = mapped_column(
        Enum(ChangeStatus), default=ChangeStatus.PENDING, nullable=False
    )
    user_response_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    user_response_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_history_entry", "entry_id", "changed_at"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<EntryChangeHistory(id={self.id}, entry_id={self.entry_id}, "
            f"status={self.status})>"
        )
