# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time entry schemas."""

import datetime
import uuid
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from worktime.engine.lifecycle import OwnerAction, compute_status, pending_owner_action
from worktime.models.enums import ChangeStatus, EntryCategory, EntryStatus
from worktime.schemas.common import TransitionRequest


class EntryCreate(BaseModel):
    """Schema for creating a time entry."""

    user_id: uuid.UUID | None = None
    date: datetime.date
    category: EntryCategory = EntryCategory.WORK
    description: str | None = Field(None, max_length=200)
    note: str | None = None
    hours: Decimal | None = Field(None, ge=0, le=24)
    start_time: datetime.time | None = None
    end_time: datetime.time | None = None
    surcharge_percent: int | None = None
    reviewer_id: uuid.UUID | None = None
    late_reason: str | None = None

    @field_validator("hours")
    @classmethod
    def round_hours(cls, v: Decimal | None) -> Decimal | None:
        """Round hours to 2 decimal places."""
        return round(v, 2) if v is not None else v

    def to_values(self) -> dict[str, Any]:
        """Return the values handed to the lifecycle engine."""
        return self.model_dump(exclude={"user_id"})


class EntryEdit(TransitionRequest):
    """Schema for editing an existing entry. Unset fields stay unchanged."""

    reason: str | None = None
    date: datetime.date | None = None
    category: EntryCategory | None = None
    description: str | None = Field(None, max_length=200)
    note: str | None = None
    hours: Decimal | None = Field(None, ge=0, le=24)
    start_time: datetime.time | None = None
    end_time: datetime.time | None = None
    surcharge_percent: int | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client sent."""
        return self.model_dump(
            exclude_unset=True, exclude={"reason", "expected_version"}
        )


class RejectRequest(TransitionRequest):
    """Schema for rejecting an entry."""

    reason: str | None = None


class EditResponseRequest(TransitionRequest):
    """Owner's answer to pending edits."""

    accept: bool
    note: str | None = None


class DeletionRequest(TransitionRequest):
    """Schema for deleting an entry.

    With direct=True a manager deletes at once and the owner only
    acknowledges afterwards.
    """

    reason: str | None = None
    direct: bool = False


class SubmitRequest(BaseModel):
    """Schema for marking entries as submitted."""

    user_id: uuid.UUID | None = None
    entry_ids: list[uuid.UUID]


class EntryResponse(BaseModel):
    """Schema for time entry response."""

    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime.date
    category: EntryCategory
    description: str
    note: str | None
    hours: Decimal | None
    start_time: datetime.time | None
    end_time: datetime.time | None
    surcharge_percent: int | None
    submitted: bool
    created_by: uuid.UUID | None
    reviewer_id: uuid.UUID | None
    late_reason: str | None
    confirmed_at: datetime.datetime | None
    confirmed_by: uuid.UUID | None
    rejected_at: datetime.datetime | None
    rejected_by: uuid.UUID | None
    rejection_reason: str | None
    is_deleted: bool
    deleted_at: datetime.datetime | None
    deletion_reason: str | None
    deletion_confirmed_by_user: bool | None
    deletion_requested_at: datetime.datetime | None
    deletion_requested_by: uuid.UUID | None
    deletion_request_reason: str | None
    change_confirmed_by_user: bool | None
    pending_change_id: uuid.UUID | None
    change_reason: str | None
    version: int
    status: EntryStatus | None = None
    owner_action: OwnerAction | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_entry(cls, entry: Any) -> "EntryResponse":
        """Build the response including the computed lifecycle status."""
        response = cls.model_validate(entry)
        response.status = compute_status(entry)
        response.owner_action = pending_owner_action(entry)
        return response


class EntryHistoryResponse(BaseModel):
    """Schema for one change history row."""

    id: uuid.UUID
    entry_id: uuid.UUID
    changed_at: datetime.datetime
    changed_by: uuid.UUID
    old_values: dict[str, Any]
    new_values: dict[str, Any]
    reason: str | None
    status: ChangeStatus
    user_response_at: datetime.datetime | None
    user_response_note: str | None

    model_config = {"from_attributes": True}
