"""Domain exceptions for the city dashboard.

Two failure families matter to callers: a snapshot that could not be computed
(AggregationFailure, wrapping the FetchFailure that caused it) and invalid
request parameters (ValidationException). Unparsable timestamps are not an
exception at all; they are absorbed by the timestamp normalizer. The
presentation layer maps these to HTTP responses in exception handlers.
"""

from typing import Any


class DashboardException(Exception):
    """Base exception for all dashboard errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, source).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DashboardException):
    """Raised when a window, limit, or locale parameter is invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional parameter that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class FetchFailure(DashboardException):
    """Raised by a record fetcher when one data-source call fails.

    ``source`` names the collection (or count selector) that was being read.
    The underlying error is chained as ``__cause__`` by the raiser.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(
            f"Failed to fetch {source}: {reason}",
            "FETCH_FAILURE",
            {"source": source},
        )
        self.source = source


class AggregationFailure(DashboardException):
    """Raised when a dashboard snapshot cannot be computed.

    There is no partial result: the first failing source aborts the whole
    snapshot. ``details['source']`` names it when known.
    """

    def __init__(self, source: str | None = None, reason: str | None = None) -> None:
        message = "Failed to compute dashboard snapshot"
        if reason:
            message = f"{message}: {reason}"
        details = {"source": source} if source else {}
        super().__init__(message, "AGGREGATION_FAILURE", details)
        self.source = source


class DataSourceNotConfiguredException(DashboardException):
    """Raised when no document-store client is configured (missing credentials)."""

    def __init__(self) -> None:
        super().__init__(
            "Firestore is not configured; set FIREBASE_SERVICE_ACCOUNT_KEY "
            "or FIREBASE_SERVICE_ACCOUNT_PATH.",
            "DATA_SOURCE_NOT_CONFIGURED",
        )
