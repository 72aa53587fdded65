from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.workforce_system.workforce_system.common.query_keys import UserKeys
from src.workforce_system.workforce_system.core.enums import WeekDay
from src.workforce_system.workforce_system.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError

NOW = datetime(2024, 2, 15, 10, 0)


@pytest.fixture
def employee(users):
    return users.add(base_salary=Decimal("4000"), daily_working_hours=8)


def test_change_effective_today_applies_immediately(container, users, employee):
    result = container.salary_history_service.change_salary(
        user_id=employee.user_id,
        base_salary="4500",
        working_days=["saturday", "monday"],
        daily_hours=7.5,
        changed_by=1,
        reason="Promotion",
        effective_from=NOW.date(),
        now=NOW,
    )
    row = result.data
    assert row.is_applied
    assert row.applied_at == NOW
    assert row.previous_base_salary == Decimal("4000")
    assert row.new_working_days == (WeekDay.MONDAY, WeekDay.SATURDAY)
    assert result.affects(UserKeys.detail(employee.user_id))

    user = users.get_by_id(employee.user_id)
    assert user.base_salary == Decimal("4500")
    assert user.working_days == (WeekDay.MONDAY, WeekDay.SATURDAY)
    assert user.daily_working_hours == 7.5


def test_default_effective_date_is_next_month(container, users, employee):
    svc = container.salary_history_service
    row = svc.change_salary(
        user_id=employee.user_id,
        base_salary="5000",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        now=NOW,
    ).data

    assert row.effective_from == date(2024, 3, 1)
    assert not row.is_applied
    assert users.get_by_id(employee.user_id).base_salary == Decimal("4000")
    assert svc.pending(employee.user_id, today=NOW.date()).history_id == row.history_id


def test_apply_pending_applies_due_changes(container, users, employee):
    svc = container.salary_history_service
    march = svc.change_salary(
        user_id=employee.user_id,
        base_salary="5000",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        effective_from=date(2024, 3, 1),
        now=NOW,
    ).data
    svc.change_salary(
        user_id=employee.user_id,
        base_salary="6000",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        effective_from=date(2024, 4, 1),
        now=NOW,
    )

    nothing = svc.apply_pending(now=NOW)
    assert nothing.data == []

    result = svc.apply_pending(now=datetime(2024, 3, 1, 0, 5))
    assert result.data == [march.history_id]
    assert users.get_by_id(employee.user_id).base_salary == Decimal("5000")
    assert svc.pending(employee.user_id, today=date(2024, 3, 1)).effective_from == date(2024, 4, 1)


def test_change_validates_terms(container, employee):
    svc = container.salary_history_service
    with pytest.raises(ValidationError):
        svc.change_salary(user_id=employee.user_id, base_salary="1", working_days=[], daily_hours=8, changed_by=1, now=NOW)
    with pytest.raises(ValidationError):
        svc.change_salary(user_id=employee.user_id, base_salary="1", working_days=["monday"], daily_hours=25, changed_by=1, now=NOW)
    with pytest.raises(ValidationError):
        svc.change_salary(user_id=employee.user_id, base_salary="1", working_days=["monday"], daily_hours="eight", changed_by=1, now=NOW)
    with pytest.raises(NotFoundError):
        svc.change_salary(user_id=404, base_salary="1", working_days=["monday"], daily_hours=8, changed_by=1, now=NOW)


def test_applied_change_cannot_be_deleted(container, employee):
    svc = container.salary_history_service
    applied = svc.change_salary(
        user_id=employee.user_id,
        base_salary="4500",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        effective_from=date(2024, 2, 1),
        now=NOW,
    ).data
    scheduled = svc.change_salary(
        user_id=employee.user_id,
        base_salary="4800",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        now=NOW,
    ).data

    with pytest.raises(InvalidTransitionError):
        svc.delete(applied.history_id)

    svc.delete(scheduled.history_id)
    assert [r.history_id for r in svc.list_for_user(employee.user_id)] == [applied.history_id]


def test_notes_and_latest(container, employee):
    svc = container.salary_history_service
    assert svc.latest(employee.user_id) is None

    row = svc.change_salary(
        user_id=employee.user_id,
        base_salary="4500",
        working_days=["monday"],
        daily_hours=8,
        changed_by=1,
        now=NOW,
    ).data
    svc.update_notes(row.history_id, " approved by board ")
    assert svc.latest(employee.user_id).notes == "approved by board"
