"""Application settings and configuration.

This module defines the configuration options for the rolling identifier
store. Settings are loaded from environment variables (or a ``.env`` file)
with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = 86_400


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    The store validates step size and window itself; these values are only
    defaults for the CLI and :func:`get_rotating_id_store`.
    """

    # Application metadata
    app_name: str = Field(default="Rolling ID", alias="APP_NAME")

    # Seed storage
    storage_location: str = Field(
        default="./seeds.txt",
        alias="ROLLING_ID_STORAGE_LOCATION",
    )

    # Rotation timing, in seconds
    step_size_seconds: int = Field(
        default=15 * SECONDS_PER_MINUTE,
        alias="ROLLING_ID_STEP_SIZE_SECONDS",
    )
    window_seconds: int = Field(
        default=14 * SECONDS_PER_DAY,
        alias="ROLLING_ID_WINDOW_SECONDS",
    )

    # Logging
    log_level: str = Field(default="INFO", alias="ROLLING_ID_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )


settings = Settings()
