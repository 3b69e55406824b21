"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Clinic Operations Engine")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(
        default=None,
        description="Force JSON log output; defaults to on in production",
    )

    # Clinic REST backend (signal sources)
    clinic_api_base_url: str = Field(
        default="http://localhost:4000/api/v1",
        description="Base URL of the clinic REST API polled for signal counts",
    )
    clinic_api_token: str = Field(
        default="",
        description="Bearer token sent with every signal request",
    )
    signal_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Independent timeout applied to each signal source call",
    )

    # Notification polling
    notification_polling_enabled: bool = Field(default=True)
    notification_poll_interval_seconds: float = Field(default=60.0, gt=0)
    pending_tasks_signal: Literal["local", "remote"] = Field(
        default="local",
        description="Count pending tasks from the in-process store or the REST API",
    )

    # Reminders
    reminder_window_minutes: int = Field(
        default=5,
        ge=1,
        description="Look-back window used when listing reminders that are due",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def use_json_logs(self) -> bool:
        """JSON logs unless explicitly disabled, console output in development."""
        if self.log_json is not None:
            return self.log_json
        return self.is_production

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
