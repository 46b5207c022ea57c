import math
from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


# Largest accepted hours, rate or headcount. Keeps every derived figure finite.
MAX_INPUT_AMOUNT = 1_000_000_000.0


def coerce_non_negative_number(value: Any) -> float:
    """
    Coerce arbitrary JSON input into a finite, non-negative float.
    Missing, non-numeric, negative, NaN, infinite or unrepresentably large
    values become 0; finite values above MAX_INPUT_AMOUNT are clamped to it.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float, Decimal)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return 0.0
    except (ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return min(number, MAX_INPUT_AMOUNT)


def _coerce_process_ids(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    seen: dict[str, None] = {}
    for item in value:
        if isinstance(item, str) and item.strip():
            seen.setdefault(item.strip(), None)
    return tuple(seen)


class EstimationInput(BaseModel):
    """
    Calculator inputs. Construction never fails: every field is coerced to a
    safe default instead of raising.
    """

    company_name: str = ""
    industry: str = ""
    employees: int = 0
    manual_hours_per_week: float = 0.0
    avg_hourly_rate: float = 0.0
    processes: tuple[str, ...] = ()

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("company_name", "industry", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("employees", mode="before")
    @classmethod
    def _employees(cls, value: Any) -> int:
        return int(coerce_non_negative_number(value))

    @field_validator("manual_hours_per_week", "avg_hourly_rate", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> float:
        return coerce_non_negative_number(value)

    @field_validator("processes", mode="before")
    @classmethod
    def _processes(cls, value: Any) -> tuple[str, ...]:
        return _coerce_process_ids(value)

    @classmethod
    def from_payload(cls, payload: Any) -> "EstimationInput":
        """Build inputs from an untrusted JSON value; non-objects yield all defaults."""
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))


class EstimationResult(BaseModel):
    """Cost/benefit projection for one set of calculator inputs."""

    annual_manual_cost: float
    estimated_savings_percent: int
    annual_savings: int
    monthly_productivity_gain: int
    # None when there are no savings to pay the implementation cost back.
    payback_weeks: int | None = Field(
        default=None, description="Weeks to recover implementation cost; null if never."
    )
    five_year_value: float

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ProcessCategoryResponse(BaseModel):
    id: str
    label: str
    savings_multiplier: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CatalogResponse(BaseModel):
    processes: list[ProcessCategoryResponse]
    industries: list[str]
    default_multiplier: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
