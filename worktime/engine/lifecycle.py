# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Entry lifecycle state machine.

The review, edit and deletion state of an entry is stored as a set of
independent timestamp and flag columns. compute_status() folds them into one
EntryStatus with a fixed precedence. The transition functions below check
their guards, mutate the entry in place and return the resulting status. They
never touch the database; loading, committing and publishing are done by the
service layer.
"""

import uuid as uuid_lib
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from worktime.engine.errors import (
    AlreadyConfirmedError,
    AlreadyRejectedError,
    ConcurrentModificationError,
    DayLockedError,
    MissingReasonError,
    MissingReviewerError,
    PermissionDeniedError,
    ValidationError,
)
from worktime.engine.grace import (
    DEFAULT_GRACE_WORKING_DAYS,
    DepartmentApprovers,
    is_late,
)
from worktime.engine.intervals import duration_minutes, format_clock, parse_clock
from worktime.engine.reconciler import ALLOWED_SURCHARGES, as_decimal
from worktime.models.entry_change_history import EntryChangeHistory
from worktime.models.enums import (
    ABSENCE_ENTRY_CATEGORIES,
    CATEGORY_LABELS,
    LOCATION_CATEGORIES,
    OFFICE_REVIEW_CATEGORIES,
    ChangeStatus,
    EntryCategory,
    EntryStatus,
    UserRole,
)
from worktime.models.time_entry import TimeEntry

EDITABLE_FIELDS = (
    "date",
    "category",
    "description",
    "note",
    "hours",
    "start_time",
    "end_time",
    "surcharge_percent",
)

MAX_HOURS_PER_ENTRY = Decimal("24")

PEER_REVIEW_ROLES = frozenset({UserRole.APPRENTICE})
PEER_REVIEW_CATEGORIES = frozenset({EntryCategory.WORK, EntryCategory.BREAK})

REVIEW_STATUSES = frozenset(
    {
        EntryStatus.PENDING_PEER_REVIEW,
        EntryStatus.PENDING_LATE_APPROVAL,
        EntryStatus.PENDING_OFFICE_REVIEW,
    }
)


class OwnerAction(str, Enum):
    """Things the entry owner still has to acknowledge."""

    DELETION_REQUEST = "deletion_request"
    DELETION_ACKNOWLEDGEMENT = "deletion_acknowledgement"
    EDIT_ACKNOWLEDGEMENT = "edit_acknowledgement"


@dataclass(frozen=True)
class Actor:
    """The user attempting a transition."""

    id: uuid_lib.UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_office_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.OFFICE)


@dataclass(frozen=True)
class OwnerContext:
    """Everything about the entry owner that guards depend on."""

    user_id: uuid_lib.UUID
    role: UserRole = UserRole.INSTALLER
    require_confirmation: bool = True
    approvers: DepartmentApprovers = field(default_factory=DepartmentApprovers)
    locked_days: frozenset[date] = field(default_factory=frozenset)


@dataclass
class Transition:
    """Result of a transition: the new status and any history row created."""

    status: EntryStatus
    history: EntryChangeHistory | None = None


# Status


def compute_status(entry: TimeEntry) -> EntryStatus:
    """Derive the single lifecycle status of an entry from its stored fields.

    Precedence, first match wins:
        deleted, deletion requested, edit awaiting owner acknowledgement,
        peer review, late approval, office review, confirmed, rejected, active.

    The three review states only apply while the entry is neither confirmed
    nor rejected.
    """
    if entry.is_deleted:
        return EntryStatus.DELETED
    if entry.deletion_requested_at is not None:
        return EntryStatus.DELETION_REQUESTED
    if entry.change_confirmed_by_user is False and entry.pending_change_id is not None:
        return EntryStatus.EDIT_PENDING_OWNER_ACK
    if entry.confirmed_at is None and entry.rejected_at is None:
        path = review_path(entry)
        if path is not None:
            return path
    if entry.confirmed_at is not None:
        return EntryStatus.CONFIRMED
    if entry.rejected_at is not None:
        return EntryStatus.REJECTED
    return EntryStatus.ACTIVE


def review_path(entry: TimeEntry) -> EntryStatus | None:
    """Return which review the entry goes through, ignoring its outcome."""
    if entry.reviewer_id is not None and entry.reviewer_id != entry.user_id:
        return EntryStatus.PENDING_PEER_REVIEW
    if entry.late_reason:
        return EntryStatus.PENDING_LATE_APPROVAL
    if EntryCategory(entry.category) in OFFICE_REVIEW_CATEGORIES:
        return EntryStatus.PENDING_OFFICE_REVIEW
    return None


def pending_owner_action(entry: TimeEntry) -> OwnerAction | None:
    """Return what the owner still needs to acknowledge on this entry."""
    if entry.is_deleted:
        if entry.deletion_confirmed_by_user is False:
            return OwnerAction.DELETION_ACKNOWLEDGEMENT
        return None
    if entry.deletion_requested_at is not None:
        return OwnerAction.DELETION_REQUEST
    if entry.change_confirmed_by_user is False and entry.pending_change_id is not None:
        return OwnerAction.EDIT_ACKNOWLEDGEMENT
    return None


# Authority


def is_manager(actor: Actor, owner: OwnerContext) -> bool:
    """Check if the actor has management authority over the owner."""
    if actor.id == owner.user_id:
        return False
    return (
        actor.is_office_staff
        or actor.id in owner.approvers.responsible
        or actor.id in owner.approvers.late
    )


def can_review(entry: TimeEntry, actor: Actor, owner: OwnerContext) -> bool:
    """Check if the actor may confirm or reject the entry.

    Peer reviewed entries can only be decided by the assigned reviewer. Late
    entries go to the department's late approver, or to any administrator
    when the department has none. Everything else needs management authority.
    Nobody reviews their own entries.
    """
    if actor.id == entry.user_id:
        return False

    path = review_path(entry)
    if path == EntryStatus.PENDING_PEER_REVIEW:
        return actor.id == entry.reviewer_id
    if path == EntryStatus.PENDING_LATE_APPROVAL:
        if owner.approvers.late:
            return actor.id in owner.approvers.late
        return actor.is_admin
    return is_manager(actor, owner)


def awaits_review_by(entry: TimeEntry, actor: Actor, owner: OwnerContext) -> bool:
    """Check if the entry sits in the actor's review queue."""
    return compute_status(entry) in REVIEW_STATUSES and can_review(entry, actor, owner)


def _require_reason(reason: str | None, action: str) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise MissingReasonError(f"A reason is required to {action}")
    return cleaned


def _check_unlocked(owner: OwnerContext, *days: date) -> None:
    for day in days:
        if day in owner.locked_days:
            raise DayLockedError(f"{day.isoformat()} is locked")


# Values


def _to_time(value: Any, field_name: str) -> time | None:
    if value is None or value == "":
        return None
    minutes = parse_clock(value)
    if minutes is None:
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    return time(minutes // 60, minutes % 60)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value!r}") from e


def validate_values(values: dict[str, Any]) -> dict[str, Any]:
    """Validate and normalize the editable fields of an entry.

    Args:
        values: Raw field values. Keys outside EDITABLE_FIELDS are ignored.

    Returns:
        Normalized values for every editable field.

    Raises:
        ValidationError: If any value is malformed or a required one is missing.
    """
    if values.get("date") is None:
        raise ValidationError("Date is required")
    day = _to_date(values["date"])

    try:
        category = EntryCategory(values.get("category") or EntryCategory.WORK)
    except ValueError as e:
        raise ValidationError(f"Unknown category: {values.get('category')!r}") from e

    description = (values.get("description") or "").strip()
    if not description:
        if category not in ABSENCE_ENTRY_CATEGORIES:
            raise ValidationError("Description is required")
        description = CATEGORY_LABELS[category]

    try:
        hours = as_decimal(values.get("hours"))
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if hours is not None and not (0 <= hours <= MAX_HOURS_PER_ENTRY):
        raise ValidationError(f"Hours must be between 0 and 24, got {hours}")

    start = _to_time(values.get("start_time"), "start time")
    end = _to_time(values.get("end_time"), "end time")
    if (start is None) != (end is None):
        raise ValidationError("Start and end time must be given together")

    if category not in ABSENCE_ENTRY_CATEGORIES and hours is None:
        minutes = duration_minutes(start, end)
        if not minutes:
            raise ValidationError("Either hours or a start and end time is required")
        hours = (Decimal(minutes) / 60).quantize(Decimal("0.01"))

    surcharge = values.get("surcharge_percent")
    if surcharge in (None, ""):
        surcharge = None
    else:
        try:
            surcharge = int(surcharge)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid surcharge: {surcharge!r}") from e
        if surcharge not in ALLOWED_SURCHARGES:
            raise ValidationError(
                f"Surcharge must be one of 0, 25, 50, 100, got {surcharge}"
            )
        if surcharge and category != EntryCategory.EMERGENCY_SERVICE:
            raise ValidationError("Surcharges only apply to emergency service")

    note = (values.get("note") or "").strip() or None

    return {
        "date": day,
        "category": category,
        "description": description,
        "note": note,
        "hours": hours,
        "start_time": start,
        "end_time": end,
        "surcharge_percent": surcharge,
    }


def current_values(entry: TimeEntry) -> dict[str, Any]:
    """Return the editable fields of an entry."""
    return {name: getattr(entry, name) for name in EDITABLE_FIELDS}


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, time):
        return format_clock(value.hour * 60 + value.minute)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def serialize_values(values: dict[str, Any]) -> dict[str, Any]:
    """Convert entry values to a JSON safe snapshot."""
    return {key: _json_value(value) for key, value in values.items()}


def restore_values(entry: TimeEntry, snapshot: dict[str, Any]) -> None:
    """Write a snapshot taken by serialize_values() back onto an entry."""
    for key, value in snapshot.items():
        if key not in EDITABLE_FIELDS:
            continue
        if value is not None:
            if key == "date":
                value = date.fromisoformat(value)
            elif key == "category":
                value = EntryCategory(value)
            elif key == "hours":
                value = Decimal(value)
            elif key in ("start_time", "end_time"):
                value = _to_time(value, key)
        setattr(entry, key, value)


def _clear_rejection(entry: TimeEntry) -> None:
    entry.rejected_at = None
    entry.rejected_by = None
    entry.rejection_reason = None


# Transitions


def create_entry(
    values: dict[str, Any],
    actor: Actor,
    owner: OwnerContext,
    today: date,
    now: datetime,
    grace_working_days: int = DEFAULT_GRACE_WORKING_DAYS,
) -> TimeEntry:
    """Create a new entry for the owner.

    Args:
        values: Editable fields plus optional reviewer_id and late_reason.
        actor: The owner or a manager creating on the owner's behalf.
        owner: Owner context.
        today: Reference date for the grace period.
        now: Timestamp used for automatic confirmation.
        grace_working_days: Grace period budget.

    Returns:
        The new, not yet persisted entry.

    Raises:
        PermissionDeniedError: If the actor may not create entries for the owner.
        ValidationError: On malformed input or a late entry without justification.
        DayLockedError: If the day is locked.
        MissingReviewerError: If the owner's role requires a peer reviewer.
    """
    if actor.id != owner.user_id and not is_manager(actor, owner):
        raise PermissionDeniedError("Not allowed to create entries for this user")

    data = validate_values(values)
    _check_unlocked(owner, data["date"])

    late = is_late(data["date"], today, grace_working_days)
    late_reason = (values.get("late_reason") or "").strip() or None
    reviewer_id = values.get("reviewer_id")
    if late:
        if not late_reason:
            raise ValidationError(
                f"Entry for {data['date'].isoformat()} is past the grace period "
                "and needs a justification"
            )
        # Late entries are approved by the department, not by a peer
        reviewer_id = None
    else:
        late_reason = None

    if reviewer_id is not None and reviewer_id == owner.user_id:
        raise ValidationError("Owner cannot review their own entry")

    category = data["category"]
    if (
        owner.role in PEER_REVIEW_ROLES
        and category in PEER_REVIEW_CATEGORIES
        and reviewer_id is None
        and not late
    ):
        raise MissingReviewerError("A reviewer is required for this entry")

    entry = TimeEntry(
        id=uuid_lib.uuid4(),
        user_id=owner.user_id,
        created_by=actor.id,
        reviewer_id=reviewer_id,
        late_reason=late_reason,
        submitted=False,
        is_deleted=False,
        **data,
    )

    if (
        category in LOCATION_CATEGORIES
        and not owner.require_confirmation
        and reviewer_id is None
        and not late
    ):
        entry.confirmed_at = now
        entry.confirmed_by = actor.id

    return entry


def confirm(
    entry: TimeEntry, actor: Actor, owner: OwnerContext, now: datetime
) -> Transition:
    """Confirm an entry. Confirming twice is a no-op.

    Raises:
        ValidationError: If the entry is deleted.
        PermissionDeniedError: If the actor may not review the entry.
        AlreadyRejectedError: If the entry was rejected.
    """
    if entry.is_deleted:
        raise ValidationError("Deleted entries cannot be confirmed")
    if not can_review(entry, actor, owner):
        raise PermissionDeniedError("Not allowed to confirm this entry")
    if entry.rejected_at is not None:
        raise AlreadyRejectedError("Rejected entries must be corrected first")
    if entry.confirmed_at is not None:
        return Transition(compute_status(entry))

    entry.confirmed_at = now
    entry.confirmed_by = actor.id
    if entry.late_reason:
        entry.submitted = True
    return Transition(compute_status(entry))


def reject(
    entry: TimeEntry,
    actor: Actor,
    owner: OwnerContext,
    reason: str | None,
    now: datetime,
) -> Transition:
    """Reject an entry. Rejecting again with a new reason updates the reason.

    Raises:
        MissingReasonError: If no reason is given.
        ValidationError: If the entry is deleted.
        PermissionDeniedError: If the actor may not review the entry.
        AlreadyConfirmedError: If the entry was confirmed.
    """
    reason = _require_reason(reason, "reject an entry")
    if entry.is_deleted:
        raise ValidationError("Deleted entries cannot be rejected")
    if not can_review(entry, actor, owner):
        raise PermissionDeniedError("Not allowed to reject this entry")
    if entry.confirmed_at is not None:
        raise AlreadyConfirmedError("Entry is already confirmed")

    if entry.rejected_at is None:
        entry.rejected_at = now
    entry.rejected_by = actor.id
    entry.rejection_reason = reason
    return Transition(compute_status(entry))


def request_edit(
    entry: TimeEntry,
    actor: Actor,
    owner: OwnerContext,
    changes: dict[str, Any],
    reason: str | None,
    now: datetime,
    pending: Sequence[EntryChangeHistory] = (),
) -> Transition:
    """Change an entry's values.

    The owner editing their own unconfirmed entry changes it directly. Any
    other edit is applied as well but recorded in a pending history row which
    the owner has to accept, or reject to restore the previous values.

    Args:
        entry: Entry to change.
        actor: Editing user.
        owner: Owner context.
        changes: New values for a subset of EDITABLE_FIELDS.
        reason: Mandatory justification.
        now: Timestamp of the change.
        pending: The entry's pending history rows, accepted implicitly when the
            owner edits the entry directly.

    Returns:
        The new status and the history row, if one was created.

    Raises:
        MissingReasonError: If no reason is given.
        ValidationError: If the entry is deleted or the new values are invalid.
        PermissionDeniedError: If the actor is neither owner nor manager.
        DayLockedError: If the old or new day is locked.
    """
    reason = _require_reason(reason, "edit an entry")
    if entry.is_deleted or entry.deletion_requested_at is not None:
        raise ValidationError("Entries pending deletion cannot be edited")

    is_owner = actor.id == entry.user_id
    if not is_owner and not is_manager(actor, owner):
        raise PermissionDeniedError("Not allowed to edit this entry")

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    before = current_values(entry)
    merged = {**before, **changes}
    if (
        "hours" not in changes
        and {"start_time", "end_time"} & set(changes)
        and merged.get("start_time") not in (None, "")
        and merged.get("end_time") not in (None, "")
    ):
        # New times without explicit hours: derive hours from the interval
        merged["hours"] = None
    after = validate_values(merged)
    _check_unlocked(owner, before["date"], after["date"])

    changed = [key for key in EDITABLE_FIELDS if after[key] != before[key]]
    if not changed:
        return Transition(compute_status(entry))

    for key in changed:
        setattr(entry, key, after[key])
    _clear_rejection(entry)
    entry.last_changed_by = actor.id
    entry.change_reason = reason

    if is_owner and entry.confirmed_at is None:
        for row in pending:
            row.status = ChangeStatus.CONFIRMED
            row.user_response_at = now
        entry.change_confirmed_by_user = True
        entry.pending_change_id = None
        return Transition(compute_status(entry))

    history = EntryChangeHistory(
        id=uuid_lib.uuid4(),
        entry_id=entry.id,
        changed_at=now,
        changed_by=actor.id,
        old_values=serialize_values({key: before[key] for key in changed}),
        new_values=serialize_values({key: after[key] for key in changed}),
        reason=reason,
        status=ChangeStatus.PENDING,
    )
    entry.change_confirmed_by_user = False
    entry.pending_change_id = history.id
    return Transition(compute_status(entry), history)


def respond_to_edit(
    entry: TimeEntry,
    actor: Actor,
    pending: Sequence[EntryChangeHistory],
    accept: bool,
    note: str | None,
    now: datetime,
) -> Transition:
    """Accept or reject the pending edits of an entry.

    Rejecting restores the values from before the oldest pending edit. Without
    pending edits this is a no-op.

    Raises:
        PermissionDeniedError: If the actor is not the owner.
    """
    if actor.id != entry.user_id:
        raise PermissionDeniedError("Only the owner can respond to edits")

    rows = [row for row in pending if row.status == ChangeStatus.PENDING]
    if rows and not accept:
        # Newest first, so the oldest snapshot is written last
        for row in sorted(rows, key=lambda r: r.changed_at, reverse=True):
            restore_values(entry, row.old_values)

    status = ChangeStatus.CONFIRMED if accept else ChangeStatus.REJECTED
    note = (note or "").strip() or None
    for row in rows:
        row.status = status
        row.user_response_at = now
        row.user_response_note = note

    if entry.change_confirmed_by_user is False:
        entry.change_confirmed_by_user = True
    entry.pending_change_id = None
    return Transition(compute_status(entry))


def _soft_delete(
    entry: TimeEntry,
    deleted_by: uuid_lib.UUID | None,
    reason: str | None,
    acknowledged: bool,
    now: datetime,
) -> None:
    entry.is_deleted = True
    entry.deleted_at = now
    entry.deleted_by = deleted_by
    entry.deletion_reason = reason
    entry.deletion_confirmed_by_user = acknowledged
    entry.deletion_requested_at = None
    entry.deletion_requested_by = None
    entry.deletion_request_reason = None


def request_deletion(
    entry: TimeEntry,
    actor: Actor,
    owner: OwnerContext,
    reason: str | None,
    now: datetime,
) -> Transition:
    """Delete an entry or ask its owner to agree to the deletion.

    The owner deleting a never confirmed entry deletes it at once. A manager
    only files a request which the owner has to confirm.

    Raises:
        MissingReasonError: If no reason is given.
        ValidationError: If the entry is already deleted.
        DayLockedError: If the entry's day is locked.
        PermissionDeniedError: If the owner tries to delete a confirmed entry,
            or the actor is neither owner nor manager.
        ConcurrentModificationError: If a different request is already pending.
    """
    reason = _require_reason(reason, "delete an entry")
    if entry.is_deleted:
        raise ValidationError("Entry is already deleted")
    _check_unlocked(owner, entry.date)

    if actor.id == entry.user_id:
        if entry.confirmed_at is not None:
            raise PermissionDeniedError(
                "Confirmed entries can only be deleted by the office"
            )
        _soft_delete(entry, actor.id, reason, acknowledged=True, now=now)
        return Transition(compute_status(entry))

    if not is_manager(actor, owner):
        raise PermissionDeniedError("Not allowed to delete this entry")

    if entry.deletion_requested_at is not None:
        if (
            entry.deletion_requested_by == actor.id
            and entry.deletion_request_reason == reason
        ):
            return Transition(compute_status(entry))
        raise ConcurrentModificationError("A deletion request is already pending")

    entry.deletion_requested_at = now
    entry.deletion_requested_by = actor.id
    entry.deletion_request_reason = reason
    return Transition(compute_status(entry))


def confirm_deletion(entry: TimeEntry, actor: Actor, now: datetime) -> Transition:
    """Owner agrees to a pending deletion request. Repeating it is a no-op.

    Raises:
        PermissionDeniedError: If the actor is not the owner.
        ConcurrentModificationError: If there is no request to confirm.
    """
    if actor.id != entry.user_id:
        raise PermissionDeniedError("Only the owner can confirm a deletion request")
    if entry.is_deleted:
        return Transition(compute_status(entry))
    if entry.deletion_requested_at is None:
        raise ConcurrentModificationError("No deletion request is pending")

    _soft_delete(
        entry,
        entry.deletion_requested_by,
        entry.deletion_request_reason,
        acknowledged=True,
        now=now,
    )
    return Transition(compute_status(entry))


def withdraw_deletion_request(
    entry: TimeEntry, actor: Actor, owner: OwnerContext
) -> Transition:
    """Drop a pending deletion request.

    The requester, any manager of the owner, or the owner (declining) may do
    this. Without a pending request it is a no-op.

    Raises:
        PermissionDeniedError: If the actor has none of these roles.
    """
    if entry.deletion_requested_at is None:
        return Transition(compute_status(entry))
    allowed = (
        actor.id == entry.user_id
        or actor.id == entry.deletion_requested_by
        or is_manager(actor, owner)
    )
    if not allowed:
        raise PermissionDeniedError("Not allowed to withdraw this deletion request")

    entry.deletion_requested_at = None
    entry.deletion_requested_by = None
    entry.deletion_request_reason = None
    return Transition(compute_status(entry))


def delete_directly(
    entry: TimeEntry,
    actor: Actor,
    owner: OwnerContext,
    reason: str | None,
    now: datetime,
) -> Transition:
    """Soft delete an entry at once; the owner is told afterwards.

    Raises:
        MissingReasonError: If no reason is given.
        PermissionDeniedError: If the actor is not a manager of the owner.
        DayLockedError: If the entry's day is locked.
    """
    reason = _require_reason(reason, "delete an entry")
    if not is_manager(actor, owner):
        raise PermissionDeniedError("Only managers can delete entries directly")
    if entry.is_deleted:
        return Transition(compute_status(entry))
    _check_unlocked(owner, entry.date)

    _soft_delete(entry, actor.id, reason, acknowledged=False, now=now)
    return Transition(compute_status(entry))


def acknowledge_deletion(entry: TimeEntry, actor: Actor) -> Transition:
    """Owner acknowledges a deletion done without asking. Idempotent.

    Raises:
        PermissionDeniedError: If the actor is not the owner.
        ValidationError: If the entry is not deleted.
    """
    if actor.id != entry.user_id:
        raise PermissionDeniedError("Only the owner can acknowledge a deletion")
    if not entry.is_deleted:
        raise ValidationError("Entry is not deleted")
    entry.deletion_confirmed_by_user = True
    return Transition(compute_status(entry))


def mark_submitted(
    entries: Iterable[TimeEntry],
    actor: Actor,
    owner: OwnerContext,
    now: datetime,
) -> list[TimeEntry]:
    """Mark the owner's entries as submitted.

    Deleted entries and late entries that are not yet approved are skipped.
    Owners without confirmation requirement get their entries confirmed on
    submission.

    Returns:
        The entries that were changed.

    Raises:
        PermissionDeniedError: If the actor is neither owner nor manager.
        ValidationError: If an entry belongs to someone else.
    """
    if actor.id != owner.user_id and not is_manager(actor, owner):
        raise PermissionDeniedError("Not allowed to submit entries for this user")

    changed = []
    for entry in entries:
        if entry.user_id != owner.user_id:
            raise ValidationError(f"Entry {entry.id} belongs to another user")
        if entry.is_deleted:
            continue
        if entry.late_reason and entry.confirmed_at is None:
            continue

        touched = False
        if not entry.submitted:
            entry.submitted = True
            touched = True
        if (
            not owner.require_confirmation
            and entry.confirmed_at is None
            and entry.rejected_at is None
        ):
            entry.confirmed_at = now
            entry.confirmed_by = actor.id
            touched = True
        if touched:
            changed.append(entry)
    return changed
