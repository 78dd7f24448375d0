"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Dashboard windows and limits are validated at load time;
Firestore credentials are optional so the service can start (and report
not-ready) without them.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_LOCALES = ("ar", "en")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "city-dashboard"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_timeout_seconds: float = 30.0
    firestore_page_size: int = 300

    # Dashboard windows and limits
    recent_window_days: int = 30
    activity_window_days: int = 7
    activity_per_source_fetch_limit: int = 10
    activity_emergency_fetch_limit: int = 5
    activity_output_limit: int = 5
    monthly_series_months: int = 6
    dashboard_locale: str = "ar"

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def firestore_configured(self) -> bool:
        """True when either service-account source is set."""
        has_key = (
            self.firebase_service_account_key is not None
            and bool(self.firebase_service_account_key.get_secret_value())
        )
        return has_key or bool(self.firebase_service_account_path)

    @model_validator(mode="after")
    def validate_dashboard(self) -> "Settings":
        """Reject non-positive windows, limits, page size, and unknown locales."""
        positive = {
            "recent_window_days": self.recent_window_days,
            "activity_window_days": self.activity_window_days,
            "activity_per_source_fetch_limit": self.activity_per_source_fetch_limit,
            "activity_emergency_fetch_limit": self.activity_emergency_fetch_limit,
            "activity_output_limit": self.activity_output_limit,
            "monthly_series_months": self.monthly_series_months,
            "firestore_page_size": self.firestore_page_size,
        }
        for name, value in positive.items():
            if value < 1:
                raise ValueError(f"{name.upper()} must be >= 1, got: {value}")
        if self.firestore_timeout_seconds <= 0:
            raise ValueError(
                f"FIRESTORE_TIMEOUT_SECONDS must be > 0, got: {self.firestore_timeout_seconds}"
            )
        if self.dashboard_locale not in SUPPORTED_LOCALES:
            raise ValueError(
                f"dashboard_locale must be one of {SUPPORTED_LOCALES}, got: {self.dashboard_locale!r}"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError(
                f"telemetry_sample_rate must be between 0.0 and 1.0, got: {self.telemetry_sample_rate}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
