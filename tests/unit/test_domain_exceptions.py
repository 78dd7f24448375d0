"""Tests for domain exceptions (error_code, message, details)."""

from city_dashboard.domain.exceptions import (
    AggregationFailure,
    DashboardException,
    DataSourceNotConfiguredException,
    FetchFailure,
    ValidationException,
)


def test_dashboard_exception_default_error_code() -> None:
    """Base DashboardException uses class name as error_code when not provided."""
    exc = DashboardException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "DashboardException"
    assert exc.details == {}


def test_dashboard_exception_to_dict() -> None:
    exc = DashboardException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid window", field="recent_window_days")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "recent_window_days"}
    assert ValidationException("Invalid").details == {}


def test_fetch_failure_names_source() -> None:
    exc = FetchFailure("users", "HTTP 500 from Firestore")
    assert exc.error_code == "FETCH_FAILURE"
    assert exc.source == "users"
    assert exc.details == {"source": "users"}
    assert "users" in exc.message and "HTTP 500" in exc.message


def test_aggregation_failure() -> None:
    exc = AggregationFailure(source="items/**", reason="timeout")
    assert exc.error_code == "AGGREGATION_FAILURE"
    assert exc.details == {"source": "items/**"}
    assert exc.message.endswith("timeout")

    bare = AggregationFailure()
    assert bare.details == {}
    assert bare.source is None


def test_data_source_not_configured() -> None:
    exc = DataSourceNotConfiguredException()
    assert exc.error_code == "DATA_SOURCE_NOT_CONFIGURED"
    assert "FIREBASE_SERVICE_ACCOUNT_KEY" in exc.message
