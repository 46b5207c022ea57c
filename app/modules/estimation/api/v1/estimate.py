from __future__ import annotations

import structlog
from fastapi import APIRouter, Request

from app.modules.estimation.domain.calculator import DEFAULT_SAVINGS_MULTIPLIER, estimate
from app.modules.estimation.domain.catalog import INDUSTRIES, PROCESS_CATALOG, select_processes
from app.schemas.estimation import (
    CatalogResponse,
    EstimationInput,
    EstimationResult,
    ProcessCategoryResponse,
)
from app.shared.core.ops_metrics import ESTIMATES_COMPUTED_TOTAL

router = APIRouter(tags=["Estimation"])
logger = structlog.get_logger()


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog() -> CatalogResponse:
    """Process categories and industries offered by the calculator form."""
    return CatalogResponse(
        processes=[
            ProcessCategoryResponse(
                id=p.id, label=p.label, savings_multiplier=float(p.savings_multiplier)
            )
            for p in PROCESS_CATALOG
        ],
        industries=list(INDUSTRIES),
        default_multiplier=float(DEFAULT_SAVINGS_MULTIPLIER),
    )


@router.post("/estimate", response_model=EstimationResult)
async def create_estimate(request: Request) -> EstimationResult:
    """
    Compute a savings projection.
    Odd field values are coerced to safe defaults; only an unparseable body is rejected.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValueError("Request body must be valid JSON") from exc

    inputs = EstimationInput.from_payload(payload)
    result = estimate(inputs)

    selection = "catalog" if select_processes(inputs.processes) else "default"
    ESTIMATES_COMPUTED_TOTAL.labels(selection=selection).inc()
    logger.info(
        "estimate_computed",
        selection=selection,
        process_count=len(inputs.processes),
        savings_percent=result.estimated_savings_percent,
        payback_applicable=result.payback_weeks is not None,
    )
    return result
