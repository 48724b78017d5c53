# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field, field_validator

from intranet.models.enums import LeaveRegime


def _check_half_multiple(value: float) -> float:
    if not float(value * 2).is_integer():
        msg = "must be a multiple of 0.5"
        raise ValueError(msg)
    return value


# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class LeaveBalanceSchema(BaseModel):
    """Numeric leave balance; only present when a join date is recorded."""

    regime: LeaveRegime
    months_worked: int
    years_worked: int
    total_entitlement: int
    used_amount: float
    remaining: float
    manual_adjustment: float
    description: str


class BalanceResponse(BaseModel):
    """Leave balance of one employee as of a date."""

    employee_id: uuid.UUID
    as_of: date
    join_date_required: bool
    balance: LeaveBalanceSchema | None  # None when the join date is missing
    pending_amount: float
    can_use_leave: bool


# ---------------------------------------------------------------------------
# Adjustment schemas
# ---------------------------------------------------------------------------


class CreateAdjustmentRequest(BaseModel):
    """Request body for an administrative balance adjustment."""

    employee_id: uuid.UUID
    amount: float = Field(description="Signed multiple of 0.5: positive grants, negative claws back")
    reason: str = Field(min_length=1, max_length=1000)

    @field_validator("amount")
    @classmethod
    def _validate_amount(cls, value: float) -> float:
        if value == 0:
            msg = "amount must not be zero"
            raise ValueError(msg)
        return _check_half_multiple(value)


class AdjustmentResponse(BaseModel):
    """Result of an adjustment: the new running adjustment and balance."""

    employee_id: uuid.UUID
    amount: float
    leave_adjustment: float
    reason: str
    balance: BalanceResponse
