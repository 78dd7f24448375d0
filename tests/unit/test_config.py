"""Settings validation."""

import pytest
from pydantic import ValidationError

from city_dashboard.core.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.recent_window_days == 30
    assert settings.activity_window_days == 7
    assert settings.monthly_series_months == 6
    assert settings.dashboard_locale == "ar"
    assert settings.firestore_configured is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"recent_window_days": 0},
        {"activity_window_days": -1},
        {"activity_output_limit": 0},
        {"monthly_series_months": 0},
        {"firestore_timeout_seconds": 0},
        {"dashboard_locale": "fr"},
        {"telemetry_sample_rate": 1.5},
    ],
)
def test_invalid_dashboard_settings_are_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_firestore_configured_from_path() -> None:
    settings = Settings(_env_file=None, firebase_service_account_path="/secrets/sa.json")
    assert settings.firestore_configured is True
