from typing import Any, Dict, Optional

from opentelemetry import trace


class AutomateROIException(Exception):
    """Base exception for all AutomateROI errors."""

    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def record_to_otel(self) -> None:
        span = trace.get_current_span()
        span.record_exception(self)
        span.set_attribute("error.code", self.code)
        span.set_status(trace.Status(trace.StatusCode.ERROR, self.message))


class LeadRecordError(AutomateROIException):
    """Raised when a lead record cannot be appended to or read from the log."""

    def __init__(
        self,
        message: str,
        code: str = "record_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, code=code, status_code=status_code, details=details)


class LeadStorageUnavailableError(LeadRecordError):
    """Raised when the append-only lead store cannot be written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message, code="storage_unavailable", status_code=503, details=details
        )


class LeadLogCorruptError(LeadRecordError):
    """Raised when a persisted lead line cannot be parsed back."""

    def __init__(
        self, message: str, line_number: int, details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            code="lead_log_corrupt",
            status_code=500,
            details={"line_number": line_number, **(details or {})},
        )
        self.line_number = line_number
