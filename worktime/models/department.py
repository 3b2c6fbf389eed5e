# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Department model holding approver configuration."""

import uuid as uuid_lib

from sqlalchemy import JSON, Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from worktime.models.base import Base, TimestampMixin


class Department(Base, TimestampMixin):
    """Department with responsible users for reviews and late approvals."""

    __tablename__ = "departments"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)

    # Office review of location entries
    responsible_user_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    substitute_user_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    is_substitute_active: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    additional_responsible_ids: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    # Approval of retroactive (late) entries
    retro_responsible_user_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    retro_substitute_user_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    is_retro_substitute_active: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Department(id={self.id!r}, label={self.label!r})>"
