# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for balance_service."""

from datetime import date, time
from decimal import Decimal

import pytest

from worktime.engine.errors import MissingReasonError, PermissionDeniedError
from worktime.models import AbsenceCategory, EntryCategory
from worktime.schemas.absence import AbsenceCreate
from worktime.schemas.entry import EntryCreate
from worktime.services import (
    absence_service,
    balance_service,
    entry_service,
    quota_service,
)

DAY = date(2026, 8, 3)


def add_entry(db_session, user, day=DAY, **values):
    data = {
        "date": day,
        "category": EntryCategory.WORK,
        "description": "Solar panels",
        "start_time": time(7, 0),
        "end_time": time(15, 30),
    }
    data.update(values)
    return entry_service.create_entry(db_session, user, EntryCreate(**data), day)


def test_daily_balance(db_session, owner_user, eight_hour_model):
    work = add_entry(db_session, owner_user)
    add_entry(
        db_session,
        owner_user,
        category=EntryCategory.BREAK,
        description="Lunch",
        start_time=time(12, 0),
        end_time=time(12, 30),
    )

    result = balance_service.daily_balance(db_session, owner_user.id, DAY)

    assert result.target == 8.0
    assert result.actual == 8.0
    assert result.totals.break_hours == 0.5
    assert result.totals.per_entry[work.id].break_overlap_minutes == 30


def test_monthly_balance(db_session, owner_user, eight_hour_model):
    add_entry(db_session, owner_user, hours=Decimal("8"))

    stats = balance_service.monthly_balance(db_session, owner_user.id, 2026, 8)

    assert stats.target == 168
    assert stats.actual == 8
    assert stats.diff == -160


def test_lifetime_balance_cached_until_change(
    db_session, owner_user, office_user, eight_hour_model
):
    entry = add_entry(db_session, owner_user)
    entry_service.submit_entries(db_session, owner_user, owner_user.id, [entry.id])
    today = date(2026, 8, 10)

    first = balance_service.lifetime_balance(db_session, owner_user.id, today)
    assert first.cutoff_date == DAY
    assert first.start_date == date(2026, 1, 1)
    assert balance_service.lifetime_balance(db_session, owner_user.id, today) is first

    balance_service.add_adjustment(
        db_session, office_user, owner_user.id, Decimal("5"), "Import from paper"
    )

    second = balance_service.lifetime_balance(db_session, owner_user.id, today)
    assert second is not first
    assert second.adjustments == 5
    assert second.diff == pytest.approx(first.diff + 5)


def test_lifetime_balance_without_submissions(db_session, owner_user):
    add_entry(db_session, owner_user)
    stats = balance_service.lifetime_balance(
        db_session, owner_user.id, date(2026, 8, 10)
    )
    assert stats.cutoff_date is None
    assert stats.diff == 0


def test_adjustment_guards(db_session, owner_user, office_user):
    with pytest.raises(PermissionDeniedError):
        balance_service.add_adjustment(
            db_session, owner_user, owner_user.id, Decimal("5"), "Gift"
        )
    with pytest.raises(MissingReasonError):
        balance_service.add_adjustment(
            db_session, office_user, owner_user.id, Decimal("5"), "  "
        )
    assert balance_service.get_adjustments(db_session, owner_user.id) == []


def test_vacation_summary_and_rollover(db_session, owner_user, office_user):
    quota_service.update_quota(db_session, office_user, owner_user.id, 2026, 30, 2)
    absence_service.create_absence(
        db_session,
        owner_user,
        AbsenceCreate(
            start_date=date(2026, 9, 7),
            end_date=date(2026, 10, 12),
            category=AbsenceCategory.UNPAID,
        ),
    )
    absence_service.create_absence(
        db_session,
        owner_user,
        AbsenceCreate(
            start_date=date(2026, 8, 3),
            end_date=date(2026, 8, 7),
            category=AbsenceCategory.VACATION,
        ),
    )

    summary = balance_service.vacation_summary(db_session, owner_user.id, 2026)

    assert summary["unpaid_days"] == 26
    assert summary["entitlement"] == 29
    assert summary["taken"] == 5
    assert summary["remaining"] == 24
    assert summary["carryover_next_year"] == 27

    with pytest.raises(PermissionDeniedError):
        balance_service.roll_over_vacation(db_session, owner_user, owner_user.id, 2026)

    next_quota = balance_service.roll_over_vacation(
        db_session, office_user, owner_user.id, 2026
    )
    assert next_quota.year == 2027
    assert next_quota.base_days == 30
    assert next_quota.carryover_days == 27


def test_vacation_summary_without_quota(db_session, owner_user):
    summary = balance_service.vacation_summary(db_session, owner_user.id, 2026)
    assert summary["base_days"] == 30
    assert summary["entitlement"] == 30
    assert summary["taken"] == 0


def test_check_late():
    cutoff, late = balance_service.check_late(date(2026, 10, 14), date(2026, 10, 19))
    assert cutoff == date(2026, 10, 15)
    assert late is True
