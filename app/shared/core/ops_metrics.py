"""
Operational Metrics for AutomateROI

Prometheus counters for the calculator funnel (estimates computed, leads
captured) and API error rates.
"""

from prometheus_client import Counter

ESTIMATES_COMPUTED_TOTAL = Counter(
    "automate_roi_estimates_computed_total",
    "Total number of savings estimates computed via the API",
    ["selection"],  # "catalog" or "default"
)

LEADS_RECORDED_TOTAL = Counter(
    "automate_roi_leads_recorded_total",
    "Total number of lead records appended to the lead log",
)

LEAD_CAPTURE_FAILURES_TOTAL = Counter(
    "automate_roi_lead_capture_failures_total",
    "Total number of lead submissions that could not be recorded",
    ["reason"],  # malformed_body, invalid_fields, storage_unavailable, unexpected
)

API_ERRORS_TOTAL = Counter(
    "automate_roi_api_errors_total",
    "Total API errors by path and status code",
    ["path", "method", "status_code"],
)
