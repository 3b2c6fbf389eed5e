# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time entry API endpoints."""

import datetime
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from worktime.api.deps import get_current_user, get_db
from worktime.engine.errors import NotFoundError
from worktime.models import TimeEntry, User
from worktime.schemas.common import TransitionRequest
from worktime.schemas.entry import (
    DeletionRequest,
    EditResponseRequest,
    EntryCreate,
    EntryEdit,
    EntryHistoryResponse,
    EntryResponse,
    RejectRequest,
    SubmitRequest,
)
from worktime.services import entry_service, user_service

router = APIRouter()


def _get_visible_entry(db: Session, entry_id: uuid.UUID, actor: User) -> TimeEntry:
    """Get an entry the actor may look at."""
    entry = entry_service.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError(f"Entry {entry_id} not found")
    if entry.reviewer_id != actor.id:
        user_service.require_self_or_manager(db, actor, entry.user_id)
    return entry


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    data: EntryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Create a time entry for the current user or, for managers, another user."""
    entry = entry_service.create_entry(db, current_user, data)
    return EntryResponse.from_entry(entry)


@router.get("", response_model=list[EntryResponse])
def list_entries(
    user_id: uuid.UUID | None = None,
    start: datetime.date | None = None,
    end: datetime.date | None = None,
    include_deleted: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EntryResponse]:
    """List entries of a user in a date range."""
    owner_id = user_id or current_user.id
    user_service.require_self_or_manager(db, current_user, owner_id)
    entries = entry_service.get_entries(db, owner_id, start, end, include_deleted)
    return [EntryResponse.from_entry(e) for e in entries]


@router.get("/reviews", response_model=list[EntryResponse])
def list_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EntryResponse]:
    """List entries waiting for the current user's review."""
    return [
        EntryResponse.from_entry(e)
        for e in entry_service.review_queue(db, current_user)
    ]


@router.get("/notifications", response_model=list[EntryResponse])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EntryResponse]:
    """List entries the current user still has to acknowledge."""
    return [
        EntryResponse.from_entry(entry)
        for entry, _ in entry_service.owner_notifications(db, current_user.id)
    ]


@router.post("/submit", response_model=list[EntryResponse])
def submit_entries(
    data: SubmitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EntryResponse]:
    """Mark entries as submitted."""
    changed = entry_service.submit_entries(
        db, current_user, data.user_id or current_user.id, data.entry_ids
    )
    return [EntryResponse.from_entry(e) for e in changed]


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(
    entry_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Get a specific entry."""
    return EntryResponse.from_entry(_get_visible_entry(db, entry_id, current_user))


@router.get("/{entry_id}/history", response_model=list[EntryHistoryResponse])
def get_entry_history(
    entry_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[EntryHistoryResponse]:
    """List the change history of an entry."""
    _get_visible_entry(db, entry_id, current_user)
    return [
        EntryHistoryResponse.model_validate(h)
        for h in entry_service.get_history(db, entry_id)
    ]


@router.post("/{entry_id}/confirm", response_model=EntryResponse)
def confirm_entry(
    entry_id: uuid.UUID,
    data: TransitionRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Confirm an entry."""
    version = data.expected_version if data else None
    entry = entry_service.confirm_entry(db, entry_id, current_user, version)
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/reject", response_model=EntryResponse)
def reject_entry(
    entry_id: uuid.UUID,
    data: RejectRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Reject an entry with a reason."""
    entry = entry_service.reject_entry(
        db, entry_id, current_user, data.reason, data.expected_version
    )
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/edit", response_model=EntryResponse)
def edit_entry(
    entry_id: uuid.UUID,
    data: EntryEdit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Edit an entry."""
    entry = entry_service.edit_entry(
        db,
        entry_id,
        current_user,
        data.changes(),
        data.reason,
        data.expected_version,
    )
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/edit/respond", response_model=EntryResponse)
def respond_to_edit(
    entry_id: uuid.UUID,
    data: EditResponseRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Accept or revert pending edits of an own entry."""
    entry = entry_service.respond_to_edit(
        db, entry_id, current_user, data.accept, data.note, data.expected_version
    )
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/deletion", response_model=EntryResponse)
def request_deletion(
    entry_id: uuid.UUID,
    data: DeletionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Delete an entry or request its deletion."""
    if data.direct:
        entry = entry_service.delete_entry_directly(
            db, entry_id, current_user, data.reason, data.expected_version
        )
    else:
        entry = entry_service.request_deletion(
            db, entry_id, current_user, data.reason, data.expected_version
        )
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/deletion/confirm", response_model=EntryResponse)
def confirm_deletion(
    entry_id: uuid.UUID,
    data: TransitionRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Agree to a pending deletion request."""
    version = data.expected_version if data else None
    entry = entry_service.confirm_deletion(db, entry_id, current_user, version)
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/deletion/withdraw", response_model=EntryResponse)
def withdraw_deletion(
    entry_id: uuid.UUID,
    data: TransitionRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Withdraw or decline a pending deletion request."""
    version = data.expected_version if data else None
    entry = entry_service.withdraw_deletion(db, entry_id, current_user, version)
    return EntryResponse.from_entry(entry)


@router.post("/{entry_id}/deletion/acknowledge", response_model=EntryResponse)
def acknowledge_deletion(
    entry_id: uuid.UUID,
    data: TransitionRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EntryResponse:
    """Acknowledge a deletion made by the office."""
    version = data.expected_version if data else None
    entry = entry_service.acknowledge_deletion(db, entry_id, current_user, version)
    return EntryResponse.from_entry(entry)
