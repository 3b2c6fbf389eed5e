# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Enumeration types for database models."""

from enum import Enum


class UserRole(str, Enum):
    """User role enumeration."""

    ADMIN = "admin"
    OFFICE = "office"
    INSTALLER = "installer"
    APPRENTICE = "apprentice"


class EntryCategory(str, Enum):
    """Time entry category enumeration."""

    WORK = "work"
    BREAK = "break"
    # Location categories count like work but need office confirmation
    COMPANY = "company"
    OFFICE = "office"
    WAREHOUSE = "warehouse"
    CAR = "car"
    # Absence categories
    VACATION = "vacation"
    SICK = "sick"
    HOLIDAY = "holiday"
    UNPAID = "unpaid"
    SICK_CHILD = "sick_child"
    SICK_PAY = "sick_pay"
    SPECIAL_HOLIDAY = "special_holiday"
    OVERTIME_REDUCTION = "overtime_reduction"
    EMERGENCY_SERVICE = "emergency_service"


LOCATION_CATEGORIES = frozenset(
    {
        EntryCategory.COMPANY,
        EntryCategory.OFFICE,
        EntryCategory.WAREHOUSE,
        EntryCategory.CAR,
    }
)

WORK_LIKE_CATEGORIES = frozenset(
    {EntryCategory.WORK, EntryCategory.EMERGENCY_SERVICE} | LOCATION_CATEGORIES
)

# Confirmed by management even without a peer reviewer
OFFICE_REVIEW_CATEGORIES = LOCATION_CATEGORIES | {EntryCategory.OVERTIME_REDUCTION}

ABSENCE_ENTRY_CATEGORIES = frozenset(
    {
        EntryCategory.VACATION,
        EntryCategory.SICK,
        EntryCategory.HOLIDAY,
        EntryCategory.UNPAID,
        EntryCategory.SICK_CHILD,
        EntryCategory.SICK_PAY,
        EntryCategory.SPECIAL_HOLIDAY,
        EntryCategory.OVERTIME_REDUCTION,
    }
)

CATEGORY_LABELS = {
    EntryCategory.VACATION: "Vacation",
    EntryCategory.SICK: "Sick",
    EntryCategory.HOLIDAY: "Public holiday",
    EntryCategory.UNPAID: "Unpaid leave",
    EntryCategory.SICK_CHILD: "Sick child",
    EntryCategory.SICK_PAY: "Sick pay",
    EntryCategory.SPECIAL_HOLIDAY: "Special leave",
    EntryCategory.OVERTIME_REDUCTION: "Overtime reduction",
}


class AbsenceCategory(str, Enum):
    """Absence range category enumeration."""

    VACATION = "vacation"
    SICK = "sick"
    HOLIDAY = "holiday"
    UNPAID = "unpaid"
    SICK_CHILD = "sick_child"
    SICK_PAY = "sick_pay"


# When ranges overlap on a day, the first category in this list wins
ABSENCE_PRIORITY = (
    AbsenceCategory.HOLIDAY,
    AbsenceCategory.SICK,
    AbsenceCategory.SICK_PAY,
    AbsenceCategory.SICK_CHILD,
    AbsenceCategory.VACATION,
    AbsenceCategory.UNPAID,
)


class ChangeStatus(str, Enum):
    """Status of a two-party change workflow.

    Status flow:
        PENDING → CONFIRMED
           ↓
        REJECTED
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class EntryStatus(str, Enum):
    """Computed lifecycle status of a time entry - derived from stored fields."""

    DELETED = "deleted"
    DELETION_REQUESTED = "deletion_requested"
    EDIT_PENDING_OWNER_ACK = "edit_pending_owner_ack"
    PENDING_PEER_REVIEW = "pending_peer_review"
    PENDING_LATE_APPROVAL = "pending_late_approval"
    PENDING_OFFICE_REVIEW = "pending_office_review"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    ACTIVE = "active"
