# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Time entry service.

Every transition follows the same compare-and-apply cycle: re-read the entry,
check the version the caller saw, let the lifecycle engine apply its guards,
commit, and publish a change event. SQLAlchemy's version counter on TimeEntry
turns a lost race between two writers into ConcurrentModificationError.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from worktime.config import settings
from worktime.engine import lifecycle
from worktime.engine.errors import (
    ConcurrentModificationError,
    NotFoundError,
    WorkTimeError,
)
from worktime.engine.lifecycle import OwnerAction, OwnerContext, Transition
from worktime.events import ChangeEvent, event_bus
from worktime.models import ChangeStatus, EntryChangeHistory, TimeEntry, User
from worktime.models.base import utcnow
from worktime.schemas.entry import EntryCreate
from worktime.services import user_service

logger = logging.getLogger(__name__)


def get_entries(
    db: Session,
    user_id: uuid.UUID,
    start: date | None = None,
    end: date | None = None,
    include_deleted: bool = False,
) -> list[TimeEntry]:
    """Get a user's entries, optionally limited to a date range."""
    query = db.query(TimeEntry).filter(TimeEntry.user_id == user_id)
    if start:
        query = query.filter(TimeEntry.date >= start)
    if end:
        query = query.filter(TimeEntry.date <= end)
    if not include_deleted:
        query = query.filter(TimeEntry.is_deleted.is_(False))
    return query.order_by(TimeEntry.date, TimeEntry.start_time).all()


def get_entry(db: Session, entry_id: uuid.UUID) -> TimeEntry | None:
    """Get an entry by ID."""
    return db.query(TimeEntry).filter(TimeEntry.id == entry_id).first()


def get_history(db: Session, entry_id: uuid.UUID) -> list[EntryChangeHistory]:
    """Get the change history of an entry, oldest first."""
    return (
        db.query(EntryChangeHistory)
        .filter(EntryChangeHistory.entry_id == entry_id)
        .order_by(EntryChangeHistory.changed_at)
        .all()
    )


def get_pending_history(db: Session, entry_id: uuid.UUID) -> list[EntryChangeHistory]:
    """Get the edits of an entry still waiting for the owner."""
    return (
        db.query(EntryChangeHistory)
        .filter(
            EntryChangeHistory.entry_id == entry_id,
            EntryChangeHistory.status == ChangeStatus.PENDING,
        )
        .order_by(EntryChangeHistory.changed_at)
        .all()
    )


def _load_for_update(
    db: Session, entry_id: uuid.UUID, expected_version: int | None
) -> TimeEntry:
    """Re-read an entry from the database right before changing it."""
    entry = (
        db.query(TimeEntry)
        .filter(TimeEntry.id == entry_id)
        .populate_existing()
        .first()
    )
    if entry is None:
        raise NotFoundError(f"Entry {entry_id} not found")
    if expected_version is not None and entry.version != expected_version:
        raise ConcurrentModificationError(
            f"Entry {entry_id} is at version {entry.version}, "
            f"expected {expected_version}"
        )
    return entry


def _commit(db: Session, entry: TimeEntry, action: str) -> None:
    """Persist a transition and announce it."""
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Entry {entry.id}: {action} lost a concurrent update")
        raise ConcurrentModificationError(
            f"Entry {entry.id} was changed concurrently"
        ) from e
    db.refresh(entry)
    event_bus.publish_sync(
        ChangeEvent.ENTRY_CHANGED,
        entry.user_id,
        {"entry_id": str(entry.id), "action": action},
    )


def _transition(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    expected_version: int | None,
    action: str,
    apply: Callable[[TimeEntry, OwnerContext], Transition],
) -> TimeEntry:
    """Run one lifecycle transition with compare-and-apply semantics."""
    entry = _load_for_update(db, entry_id, expected_version)
    owner = user_service.require_user(db, entry.user_id)
    context = user_service.owner_context(db, owner)

    try:
        result = apply(entry, context)
    except WorkTimeError as e:
        db.rollback()
        logger.warning(f"Entry {entry_id}: {action} by {actor.id} refused: {e.message}")
        raise

    if result.history is not None:
        db.add(result.history)
    _commit(db, entry, action)
    logger.info(f"Entry {entry.id}: {action} by {actor.id} -> {result.status.value}")
    return entry


def create_entry(
    db: Session,
    actor: User,
    data: EntryCreate,
    today: date | None = None,
) -> TimeEntry:
    """Create a new entry for the actor or, for managers, another user."""
    owner = user_service.require_user(db, data.user_id or actor.id)
    context = user_service.owner_context(db, owner)

    try:
        entry = lifecycle.create_entry(
            data.to_values(),
            user_service.actor_for(actor),
            context,
            today=today or date.today(),
            now=utcnow(),
            grace_working_days=settings.grace_working_days,
        )
    except WorkTimeError as e:
        logger.warning(f"Entry creation by {actor.id} refused: {e.message}")
        raise

    db.add(entry)
    _commit(db, entry, "created")
    logger.info(
        f"Entry {entry.id} created for {owner.id} by {actor.id} "
        f"({entry.category.value}, {entry.date})"
    )
    return entry


def confirm_entry(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    expected_version: int | None = None,
) -> TimeEntry:
    """Confirm an entry."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "confirm",
        lambda entry, owner: lifecycle.confirm(entry, who, owner, utcnow()),
    )


def reject_entry(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    reason: str | None,
    expected_version: int | None = None,
) -> TimeEntry:
    """Reject an entry with a reason."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "reject",
        lambda entry, owner: lifecycle.reject(
            entry, who, owner, reason, utcnow()
        ),
    )


def edit_entry(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    changes: dict,
    reason: str | None,
    expected_version: int | None = None,
) -> TimeEntry:
    """Edit an entry, recording a pending change for the owner if needed."""
    who = user_service.actor_for(actor)
    pending = get_pending_history(db, entry_id)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "edit",
        lambda entry, owner: lifecycle.request_edit(
            entry, who, owner, changes, reason, utcnow(), pending
        ),
    )


def respond_to_edit(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    accept: bool,
    note: str | None = None,
    expected_version: int | None = None,
) -> TimeEntry:
    """Owner accepts or reverts the pending edits of an entry."""
    who = user_service.actor_for(actor)
    pending = get_pending_history(db, entry_id)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "accept edit" if accept else "reject edit",
        lambda entry, owner: lifecycle.respond_to_edit(
            entry, who, pending, accept, note, utcnow()
        ),
    )


def request_deletion(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    reason: str | None,
    expected_version: int | None = None,
) -> TimeEntry:
    """Delete an own draft entry or ask the owner to agree to a deletion."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "request deletion",
        lambda entry, owner: lifecycle.request_deletion(
            entry, who, owner, reason, utcnow()
        ),
    )


def delete_entry_directly(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    reason: str | None,
    expected_version: int | None = None,
) -> TimeEntry:
    """Manager deletes an entry at once; the owner acknowledges later."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "delete",
        lambda entry, owner: lifecycle.delete_directly(
            entry, who, owner, reason, utcnow()
        ),
    )


def confirm_deletion(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    expected_version: int | None = None,
) -> TimeEntry:
    """Owner agrees to a pending deletion request."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "confirm deletion",
        lambda entry, owner: lifecycle.confirm_deletion(entry, who, utcnow()),
    )


def withdraw_deletion(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    expected_version: int | None = None,
) -> TimeEntry:
    """Withdraw or decline a pending deletion request."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "withdraw deletion",
        lambda entry, owner: lifecycle.withdraw_deletion_request(entry, who, owner),
    )


def acknowledge_deletion(
    db: Session,
    entry_id: uuid.UUID,
    actor: User,
    expected_version: int | None = None,
) -> TimeEntry:
    """Owner acknowledges a deletion made without asking."""
    who = user_service.actor_for(actor)
    return _transition(
        db,
        entry_id,
        actor,
        expected_version,
        "acknowledge deletion",
        lambda entry, owner: lifecycle.acknowledge_deletion(entry, who),
    )


def submit_entries(
    db: Session,
    actor: User,
    user_id: uuid.UUID,
    entry_ids: list[uuid.UUID],
) -> list[TimeEntry]:
    """Mark entries as submitted. Returns the entries that changed."""
    owner = user_service.require_user(db, user_id)
    context = user_service.owner_context(db, owner)
    entries = (
        db.query(TimeEntry)
        .filter(TimeEntry.id.in_(entry_ids))
        .populate_existing()
        .all()
    )
    missing = set(entry_ids) - {e.id for e in entries}
    if missing:
        raise NotFoundError(f"Entries not found: {', '.join(map(str, missing))}")

    try:
        changed = lifecycle.mark_submitted(
            entries, user_service.actor_for(actor), context, utcnow()
        )
    except WorkTimeError as e:
        db.rollback()
        logger.warning(f"Submission by {actor.id} refused: {e.message}")
        raise

    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        raise ConcurrentModificationError("Entries were changed concurrently") from e

    if changed:
        logger.info(f"{len(changed)} entries of {user_id} submitted by {actor.id}")
        event_bus.publish_sync(
            ChangeEvent.ENTRY_CHANGED,
            user_id,
            {"action": "submit", "entry_ids": [str(e.id) for e in changed]},
        )
    return changed


def review_queue(db: Session, actor: User) -> list[TimeEntry]:
    """Get entries of other users waiting for the actor's decision."""
    who = user_service.actor_for(actor)
    candidates = (
        db.query(TimeEntry)
        .filter(
            TimeEntry.user_id != actor.id,
            TimeEntry.is_deleted.is_(False),
            TimeEntry.confirmed_at.is_(None),
            TimeEntry.rejected_at.is_(None),
        )
        .order_by(TimeEntry.date)
        .all()
    )

    contexts: dict[uuid.UUID, OwnerContext] = {}
    queue = []
    for entry in candidates:
        if entry.user_id not in contexts:
            owner = user_service.get_user(db, entry.user_id)
            if owner is None:
                continue
            contexts[entry.user_id] = user_service.owner_context(db, owner)
        if lifecycle.awaits_review_by(entry, who, contexts[entry.user_id]):
            queue.append(entry)
    return queue


def owner_notifications(
    db: Session, user_id: uuid.UUID
) -> list[tuple[TimeEntry, OwnerAction]]:
    """Get entries the owner still has to acknowledge."""
    entries = (
        db.query(TimeEntry)
        .filter(TimeEntry.user_id == user_id)
        .order_by(TimeEntry.date)
        .all()
    )
    notifications = []
    for entry in entries:
        action = lifecycle.pending_owner_action(entry)
        if action is not None:
            notifications.append((entry, action))
    return notifications
