"""Unit tests for request payload validation."""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from pydantic import ValidationError

from intranet.models.enums import AttendanceAction, LeaveCategory, Team, UserRole
from intranet.schemas.attendance import AttendancePayload
from intranet.schemas.balance import CreateAdjustmentRequest
from intranet.schemas.employee import UpsertEmployeeRequest
from intranet.schemas.leave import ReviewPayload, SubmitLeavePayload

# ---------------------------------------------------------------------------
# SubmitLeavePayload
# ---------------------------------------------------------------------------


def test_submit_leave_valid_range() -> None:
    payload = SubmitLeavePayload(
        employee_id=uuid.uuid4(),
        category=LeaveCategory.FULL_DAY,
        start_date=date(2025, 7, 7),
        end_date=date(2025, 7, 9),
    )
    assert payload.reason is None


def test_submit_leave_end_before_start() -> None:
    with pytest.raises(ValidationError, match="end_date must not be before start_date"):
        SubmitLeavePayload(
            employee_id=uuid.uuid4(),
            category=LeaveCategory.FULL_DAY,
            start_date=date(2025, 7, 9),
            end_date=date(2025, 7, 7),
        )


def test_submit_half_day_single_day() -> None:
    payload = SubmitLeavePayload(
        employee_id=uuid.uuid4(),
        category=LeaveCategory.HALF_DAY,
        start_date=date(2025, 7, 7),
        end_date=date(2025, 7, 7),
    )
    assert payload.category == LeaveCategory.HALF_DAY


def test_submit_half_day_spanning_days_rejected() -> None:
    with pytest.raises(ValidationError, match="half-day"):
        SubmitLeavePayload(
            employee_id=uuid.uuid4(),
            category=LeaveCategory.HALF_DAY,
            start_date=date(2025, 7, 7),
            end_date=date(2025, 7, 8),
        )


def test_submit_unknown_category_rejected() -> None:
    with pytest.raises(ValidationError):
        SubmitLeavePayload.model_validate(
            {
                "employee_id": str(uuid.uuid4()),
                "category": "SICK",
                "start_date": "2025-07-07",
                "end_date": "2025-07-07",
            }
        )


def test_review_payload_note_length() -> None:
    assert ReviewPayload().note is None
    with pytest.raises(ValidationError):
        ReviewPayload(note="x" * 1001)


# ---------------------------------------------------------------------------
# CreateAdjustmentRequest
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("amount", [0.5, 1.0, -0.5, -3.0, 10.5])
def test_adjustment_amount_valid(amount: float) -> None:
    request = CreateAdjustmentRequest(employee_id=uuid.uuid4(), amount=amount, reason="correction")
    assert request.amount == amount


@pytest.mark.parametrize("amount", [0, 0.0, 0.25, -1.3])
def test_adjustment_amount_invalid(amount: float) -> None:
    with pytest.raises(ValidationError):
        CreateAdjustmentRequest(employee_id=uuid.uuid4(), amount=amount, reason="correction")


def test_adjustment_requires_reason() -> None:
    with pytest.raises(ValidationError):
        CreateAdjustmentRequest(employee_id=uuid.uuid4(), amount=1, reason="")


# ---------------------------------------------------------------------------
# UpsertEmployeeRequest
# ---------------------------------------------------------------------------


def test_upsert_employee_defaults() -> None:
    request = UpsertEmployeeRequest(email="a@example.com", display_name="A")
    assert request.role == UserRole.USER
    assert request.team is None
    assert request.joined_at is None


def test_upsert_employee_team_enum() -> None:
    request = UpsertEmployeeRequest.model_validate(
        {"email": "a@example.com", "display_name": "A", "team": "CONTENT", "joined_at": "2022-03-02"}
    )
    assert request.team == Team.CONTENT
    assert request.joined_at == date(2022, 3, 2)


@pytest.mark.parametrize("email", ["plain", "a b@example.com", "@example.com"])
def test_upsert_employee_bad_email(email: str) -> None:
    with pytest.raises(ValidationError):
        UpsertEmployeeRequest(email=email, display_name="A")


# ---------------------------------------------------------------------------
# AttendancePayload
# ---------------------------------------------------------------------------


def test_attendance_payload_actions() -> None:
    assert AttendancePayload.model_validate({"action": "check_in"}).action == AttendanceAction.CHECK_IN
    assert AttendancePayload.model_validate({"action": "check_out"}).action == AttendanceAction.CHECK_OUT
    with pytest.raises(ValidationError):
        AttendancePayload.model_validate({"action": "lunch"})
