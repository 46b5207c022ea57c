from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-10-19T08:00:00.000Z."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LeadRecord(BaseModel):
    """
    One line of the append-only lead log.

    Falsy or missing submission fields fall back to empty defaults, mirroring
    what the calculator UI sends for untouched form fields. ``timestamp`` is
    assigned by the recorder at write time.
    """

    timestamp: str = ""
    company_name: str = ""
    industry: str = ""
    employees: int = 0
    manual_hours_per_week: float = 0
    avg_hourly_rate: float = 0
    processes: list[str] = []
    email: str = ""
    result: dict[str, Any] | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("company_name", "industry", "email", mode="before")
    @classmethod
    def _text_default(cls, value: Any) -> Any:
        return value or ""

    @field_validator("employees", "manual_hours_per_week", "avg_hourly_rate", mode="before")
    @classmethod
    def _number_default(cls, value: Any) -> Any:
        return value or 0

    @field_validator("processes", mode="before")
    @classmethod
    def _processes_default(cls, value: Any) -> Any:
        return value or []

    @field_validator("result", mode="before")
    @classmethod
    def _result_default(cls, value: Any) -> Any:
        return value or None

    @classmethod
    def from_submission(cls, body: Any) -> "LeadRecord":
        """Validate a POSTed lead body. Any client-supplied timestamp is discarded."""
        if not isinstance(body, dict):
            raise ValueError("Lead submission must be a JSON object")
        fields = {k: v for k, v in body.items() if k != "timestamp"}
        return cls.model_validate(fields)

    def to_line(self) -> str:
        return self.model_dump_json(by_alias=True) + "\n"

    @classmethod
    def from_line(cls, line: str) -> "LeadRecord":
        return cls.model_validate_json(line)


class LeadAck(BaseModel):
    timestamp: str
    bytes_written: int


class LeadCaptureResponse(BaseModel):
    ok: bool
