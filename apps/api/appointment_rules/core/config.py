"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: major.minor.patch)
    VERSION: str = "0.1.0"

    LOG_LEVEL: str = "INFO"

    # Local-day boundary for appointments that carry no timezone of their own.
    # Naive ISO strings are interpreted in this zone as well.
    DEFAULT_TIMEZONE: str = "America/Los_Angeles"

    # Rule thresholds (minutes)
    START_EARLY_WINDOW_MINUTES: int = 45  # Earliest start before scheduled start
    SELF_ASSIGN_LATE_WINDOW_MINUTES: int = 15  # Latest self-assign after scheduled start
    UNIT_MINUTES: int = 15  # One billing unit

    # Warn when a booking consumes more than this share of remaining units
    LOW_UNITS_WARNING_RATIO: float = 0.8

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute, <= 0 disables)
    RATE_LIMIT_API: int = 120

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
