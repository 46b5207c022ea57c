"""
Static process catalog and industry list for the savings calculator.

Both tables are immutable module-level constants built once at import time;
nothing writes to them at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable


@dataclass(frozen=True)
class ProcessCategory:
    id: str
    label: str
    # Fraction (0-1) of time/cost assumed recoverable through automation.
    savings_multiplier: Decimal

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.savings_multiplier <= Decimal("1"):
            raise ValueError(
                f"savings_multiplier for {self.id!r} must be within [0, 1]"
            )


PROCESS_CATALOG: tuple[ProcessCategory, ...] = (
    ProcessCategory("data-entry", "Data Entry & Processing", Decimal("0.85")),
    ProcessCategory("email-comms", "Email & Communications", Decimal("0.60")),
    ProcessCategory("reporting", "Reporting & Analytics", Decimal("0.75")),
    ProcessCategory("scheduling", "Scheduling & Calendar", Decimal("0.70")),
    ProcessCategory("invoicing", "Invoicing & Billing", Decimal("0.80")),
    ProcessCategory("customer-support", "Customer Support", Decimal("0.65")),
    ProcessCategory("document-mgmt", "Document Management", Decimal("0.70")),
    ProcessCategory("social-media", "Social Media Management", Decimal("0.55")),
    ProcessCategory("crm-updates", "CRM Updates", Decimal("0.75")),
    ProcessCategory("inventory", "Inventory Management", Decimal("0.65")),
)

INDUSTRIES: tuple[str, ...] = (
    "Professional Services",
    "Healthcare",
    "Real Estate",
    "E-Commerce",
    "Manufacturing",
    "Financial Services",
    "Legal",
    "Marketing Agency",
    "Construction",
    "Other",
)

_CATALOG_BY_ID: dict[str, ProcessCategory] = {p.id: p for p in PROCESS_CATALOG}


def get_process(process_id: str) -> ProcessCategory | None:
    return _CATALOG_BY_ID.get(process_id)


def select_processes(process_ids: Iterable[str]) -> tuple[ProcessCategory, ...]:
    """Catalog entries whose id is selected, in catalog order. Unknown ids are ignored."""
    selected = set(process_ids)
    return tuple(p for p in PROCESS_CATALOG if p.id in selected)
