"""Leave balance calculator: tenure-based monthly/annual entitlement, net of usage and adjustments.

Everything in this module is pure. The regime is never stored; it is derived
from the join date and the evaluation date on every call, so an employee moves
from the monthly to the annual regime on their first anniversary without any
migration step.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from typing import TYPE_CHECKING

from intranet.models.enums import LeaveCategory, LeaveRegime

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

MONTHLY_CAP = 11
ANNUAL_BASE = 15
ANNUAL_CAP = 25
BONUS_START_YEARS = 3

CATEGORY_WEIGHTS: dict[LeaveCategory, float] = {
    LeaveCategory.FULL_DAY: 1.0,
    LeaveCategory.HALF_DAY: 0.5,
    LeaveCategory.MONTHLY: 1.0,
}

# NOTE: HALF_DAY in the monthly regime is unresolved upstream. One revision of
# the directory counted it at 0.5 against the monthly pool, another ignored it.
# We count it; confirm with HR before changing either way.
REGIME_CATEGORIES: dict[LeaveRegime, frozenset[LeaveCategory]] = {
    LeaveRegime.MONTHLY: frozenset({LeaveCategory.MONTHLY, LeaveCategory.HALF_DAY}),
    LeaveRegime.ANNUAL: frozenset({LeaveCategory.FULL_DAY, LeaveCategory.HALF_DAY}),
}


class InvalidEntryWeightError(ValueError):
    """Raised when a used-leave entry carries a negative or non-half-day weight."""


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


def _is_half_multiple(value: float) -> bool:
    return float(value * 2).is_integer()


@dataclass(frozen=True)
class UsedLeaveEntry:
    """One consumed unit of leave.

    The weight defaults to the category weight. An explicit weight must be a
    non-negative multiple of 0.5.
    """

    category: LeaveCategory
    weight: float | None = None

    def __post_init__(self) -> None:
        if self.weight is None:
            object.__setattr__(self, "weight", CATEGORY_WEIGHTS[self.category])
            return
        if self.weight < 0 or not _is_half_multiple(self.weight):
            msg = f"Invalid weight {self.weight!r} for {self.category} entry"
            raise InvalidEntryWeightError(msg)


@dataclass(frozen=True)
class LeaveBalance:
    """Derived balance for a single evaluation date."""

    regime: LeaveRegime
    months_worked: int
    years_worked: int
    total_entitlement: int
    used_amount: float
    remaining: float
    manual_adjustment: float


# ---------------------------------------------------------------------------
# Pure computation helpers
# ---------------------------------------------------------------------------


def _add_months(start: date, months: int) -> date:
    """Shift by whole months, clamping the day to the end of the target month."""
    total = start.month - 1 + months
    year = start.year + total // 12
    month = total % 12 + 1
    day = min(start.day, monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def months_between(start: date, end: date) -> int:
    """Count whole calendar months elapsed from start to end.

    Jan 15 -> Feb 14 is 0 and Jan 15 -> Feb 15 is 1. When the target month is
    shorter than the start day, its last day completes the month
    (Jan 31 -> Feb 28 is 1).
    """
    if end < start:
        msg = f"end ({end}) is before start ({start})"
        raise ValueError(msg)

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if _add_months(start, months) > end:
        months -= 1
    return months


def regime_for(months_worked: int) -> LeaveRegime:
    return LeaveRegime.MONTHLY if months_worked // 12 < 1 else LeaveRegime.ANNUAL


def entitlement_for(months_worked: int) -> int:
    """Return the pool size for the regime implied by months_worked.

    Monthly regime: one unit per elapsed month, capped at 11.
    Annual regime: 15 units; from year 3 one more unit every two years
    ((years - 1) // 2), capped at 25.
    """
    years_worked = months_worked // 12
    if years_worked < 1:
        return min(months_worked, MONTHLY_CAP)

    if years_worked < BONUS_START_YEARS:
        return ANNUAL_BASE
    return min(ANNUAL_BASE + (years_worked - 1) // 2, ANNUAL_CAP)


def used_amount_for(regime: LeaveRegime, entries: Iterable[UsedLeaveEntry]) -> float:
    """Sum entry weights for the categories that draw on the regime's pool."""
    valid = REGIME_CATEGORIES[regime]
    return sum((entry.weight or 0.0 for entry in entries if entry.category in valid), 0.0)


def compute_balance(
    join_date: date | None,
    evaluation_date: date,
    used_entries: Iterable[UsedLeaveEntry] = (),
    manual_adjustment: float = 0,
) -> LeaveBalance | None:
    """Compute the leave balance of an employee as of evaluation_date.

    Returns None when no join date is known: no entitlement is computable and
    callers must not render a number. The pre-adjustment difference is floored
    at zero, then the manual adjustment is added unclamped, so an over-sized
    claw-back shows up as a negative remaining balance.
    """
    if join_date is None:
        return None
    if join_date > evaluation_date:
        msg = f"join_date ({join_date}) is after evaluation_date ({evaluation_date})"
        raise ValueError(msg)

    months_worked = months_between(join_date, evaluation_date)
    regime = regime_for(months_worked)
    total = entitlement_for(months_worked)
    used = used_amount_for(regime, used_entries)
    adjustment = float(manual_adjustment)

    return LeaveBalance(
        regime=regime,
        months_worked=months_worked,
        years_worked=months_worked // 12,
        total_entitlement=total,
        used_amount=used,
        remaining=max(0.0, total - used) + adjustment,
        manual_adjustment=adjustment,
    )


def can_use_leave(balance: LeaveBalance | None) -> bool:
    """Whether any leave is left to take."""
    return balance is not None and balance.remaining > 0


def describe(balance: LeaveBalance) -> str:
    """Short tenure label for display next to the balance."""
    if balance.regime == LeaveRegime.MONTHLY:
        return f"Month {balance.months_worked} of service (monthly leave)"
    return f"Year {balance.years_worked} of service (annual leave)"
