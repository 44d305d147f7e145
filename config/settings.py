"""Configuration Management with Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Web process settings.

    Loaded from environment variables and an optional ``.env`` file.
    Generation settings (API key, models) live in ``backend.settings``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Flask
    port: int = 8000
    flask_debug: bool = False
    flask_secret_key: str = "dev-secret-change-in-production"

    # Uploads
    max_upload_mb: int = 16

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def get_app_settings() -> AppSettings:
    """
    Get web process settings.

    Returns:
        AppSettings instance
    """
    return AppSettings()
