"""
Savings estimation for process automation.

Pure and total: every input (zero hours, zero rate, empty selection) yields a
finite result. Arithmetic is done in Decimal with round-half-up so that
results match the calculator UI to the unit.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from app.modules.estimation.domain.catalog import select_processes
from app.schemas.estimation import EstimationInput, EstimationResult

DEFAULT_SAVINGS_MULTIPLIER = Decimal("0.65")
WEEKS_PER_YEAR = Decimal("52")
WEEKS_PER_MONTH = Decimal("4.33")
IMPLEMENTATION_COST_FLOOR = Decimal("2000")
IMPLEMENTATION_COST_RATE = Decimal("0.15")
VALUE_HORIZON_YEARS = 5


def _round(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


def average_multiplier(process_ids: Iterable[str]) -> Decimal:
    """Mean savings multiplier of the selected catalog entries, or the 0.65 default."""
    selected = select_processes(process_ids)
    if not selected:
        return DEFAULT_SAVINGS_MULTIPLIER
    total = sum((p.savings_multiplier for p in selected), Decimal("0"))
    return total / len(selected)


def implementation_cost(annual_savings: int | Decimal) -> Decimal:
    return max(IMPLEMENTATION_COST_FLOOR, Decimal(annual_savings) * IMPLEMENTATION_COST_RATE)


def payback_weeks(cost: Decimal, annual_savings: int) -> int | None:
    """Weeks of savings needed to cover ``cost``; None when nothing is saved."""
    if annual_savings <= 0:
        return None
    return _round(cost / (Decimal(annual_savings) / WEEKS_PER_YEAR))


def estimate(inputs: EstimationInput) -> EstimationResult:
    multiplier = average_multiplier(inputs.processes)
    hours = _decimal(inputs.manual_hours_per_week)
    rate = _decimal(inputs.avg_hourly_rate)

    annual_manual_cost = hours * rate * WEEKS_PER_YEAR
    annual_savings = _round(annual_manual_cost * multiplier)
    cost = implementation_cost(annual_savings)

    return EstimationResult(
        annual_manual_cost=float(annual_manual_cost),
        estimated_savings_percent=_round(multiplier * 100),
        annual_savings=annual_savings,
        monthly_productivity_gain=_round(hours * multiplier * WEEKS_PER_MONTH),
        payback_weeks=payback_weeks(cost, annual_savings),
        five_year_value=float(annual_savings * VALUE_HORIZON_YEARS - cost),
    )
