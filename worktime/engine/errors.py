# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Typed errors raised by the engine and the service layer."""


class WorkTimeError(Exception):
    """Base class for all guard violations."""

    code = "worktime_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human readable description for logs and API clients.
        """
        super().__init__(message)
        self.message = message


class ValidationError(WorkTimeError):
    """Malformed or missing required input."""

    code = "validation_error"
    status_code = 422


class DayLockedError(ValidationError):
    """The entry's day has been locked by the office."""

    code = "day_locked"


class MissingReasonError(WorkTimeError):
    """A mandatory justification was not given."""

    code = "missing_reason"
    status_code = 422


class MissingReviewerError(WorkTimeError):
    """The owner must name a peer reviewer for this entry."""

    code = "missing_reviewer"
    status_code = 422


class AlreadyRejectedError(WorkTimeError):
    """The entry was rejected and must be corrected before confirming."""

    code = "already_rejected"
    status_code = 409


class AlreadyConfirmedError(WorkTimeError):
    """The entry or change is already confirmed."""

    code = "already_confirmed"
    status_code = 409


class ConcurrentModificationError(WorkTimeError):
    """The persisted state changed since the caller last read it."""

    code = "concurrent_modification"
    status_code = 409


class PermissionDeniedError(WorkTimeError):
    """The actor lacks authority for the transition."""

    code = "permission_denied"
    status_code = 403


class NotFoundError(WorkTimeError):
    """A referenced record does not exist."""

    code = "not_found"
    status_code = 404
