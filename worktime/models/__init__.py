# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from worktime.models.absence import Absence, LockedDay
from worktime.models.balance_adjustment import BalanceAdjustment
from worktime.models.base import Base, TimestampMixin
from worktime.models.department import Department
from worktime.models.entry_change_history import EntryChangeHistory
from worktime.models.enums import (
    AbsenceCategory,
    ChangeStatus,
    EntryCategory,
    EntryStatus,
    UserRole,
)
from worktime.models.quota import (
    QuotaAuditLog,
    QuotaChangeNotification,
    YearlyQuota,
)
from worktime.models.time_entry import TimeEntry
from worktime.models.user import User
from worktime.models.work_model import WorkModelDay

__all__ = [
    "Absence",
    "AbsenceCategory",
    "BalanceAdjustment",
    "Base",
    "ChangeStatus",
    "Department",
    "EntryCategory",
    "EntryChangeHistory",
    "EntryStatus",
    "LockedDay",
    "QuotaAuditLog",
    "QuotaChangeNotification",
    "TimeEntry",
    "TimestampMixin",
    "User",
    "UserRole",
    "WorkModelDay",
    "YearlyQuota",
]
