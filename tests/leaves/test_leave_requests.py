from __future__ import annotations

from datetime import date, datetime

import pytest

from src.workforce_system.workforce_system.common.query_keys import LeaveKeys
from src.workforce_system.workforce_system.core.enums import LeaveStatus, LeaveType
from src.workforce_system.workforce_system.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


def _request(container, user_id: int, **overrides):
    fields = dict(
        user_id=user_id,
        leave_type="sick",
        start_date=date(2024, 2, 5),
        end_date=date(2024, 2, 7),
        reason="Flu",
    )
    fields.update(overrides)
    return container.leave_service.create(**fields)


def test_create_leave_request(container, users):
    user = users.add()
    result = _request(container, user.user_id)
    req = result.data

    assert req.status == LeaveStatus.PENDING
    assert req.leave_type == LeaveType.SICK
    assert req.total_days == 3
    assert result.affects(LeaveKeys.mine(user.user_id))


def test_single_day_leave_counts_one(container, users):
    req = _request(container, users.add().user_id, end_date=date(2024, 2, 5)).data
    assert container.leave_service.total_days(req) == 1


def test_invalid_requests(container, users):
    user = users.add()
    with pytest.raises(ValidationError, match="leave type"):
        _request(container, user.user_id, leave_type="holiday")
    with pytest.raises(ValidationError):
        _request(container, user.user_id, reason="   ")
    with pytest.raises(ValidationError):
        _request(container, user.user_id, end_date=date(2024, 2, 4))


def test_review_is_terminal(container, users):
    user = users.add()
    hr = users.add()
    svc = container.leave_service
    req = _request(container, user.user_id).data

    approved = svc.review(
        req.request_id,
        status="approved",
        reviewed_by=hr.user_id,
        notes="Get well",
        now=datetime(2024, 2, 2, 10, 0),
    ).data
    assert approved.status == LeaveStatus.APPROVED
    assert approved.reviewed_by == hr.user_id
    assert approved.review_notes == "Get well"

    with pytest.raises(InvalidTransitionError):
        svc.review(req.request_id, status="rejected", reviewed_by=hr.user_id)
    with pytest.raises(InvalidTransitionError):
        svc.cancel(req.request_id, user_id=user.user_id)
    with pytest.raises(InvalidTransitionError):
        svc.update(req.request_id, user_id=user.user_id, reason="Still sick")


def test_review_must_approve_or_reject(container, users):
    req = _request(container, users.add().user_id).data
    with pytest.raises(ValidationError):
        container.leave_service.review(req.request_id, status="cancelled", reviewed_by=1)
    with pytest.raises(ValidationError):
        container.leave_service.review(req.request_id, status="maybe", reviewed_by=1)


def test_owner_updates_pending_request(container, users):
    user = users.add()
    svc = container.leave_service
    req = _request(container, user.user_id).data

    updated = svc.update(req.request_id, user_id=user.user_id, leave_type="casual", end_date=date(2024, 2, 9)).data
    assert updated.leave_type == LeaveType.CASUAL
    assert updated.start_date == date(2024, 2, 5)
    assert updated.total_days == 5
    assert updated.reason == "Flu"

    with pytest.raises(AuthorizationError):
        svc.update(req.request_id, user_id=users.add().user_id, reason="x")


def test_cancel(container, users):
    user = users.add()
    req = _request(container, user.user_id).data

    cancelled = container.leave_service.cancel(req.request_id, user_id=user.user_id).data
    assert cancelled.status == LeaveStatus.CANCELLED


def test_pending_list_is_scoped_to_organization(container, users):
    ours = users.add(organization_id=1)
    theirs = users.add(organization_id=2)
    _request(container, ours.user_id)
    _request(container, theirs.user_id)

    pending = container.leave_service.list_pending(organization_id=1)
    assert [r.user_id for r in pending] == [ours.user_id]
    assert len(container.leave_service.list_pending()) == 2


def test_delete(container, users):
    req = _request(container, users.add().user_id).data
    container.leave_service.delete(req.request_id)
    with pytest.raises(NotFoundError):
        container.leave_service.get(req.request_id)
