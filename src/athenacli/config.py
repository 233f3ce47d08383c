"""Configuration management for athenacli."""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_RESULT_PATH_TEMPLATE = (
    "s3://aws-athena-query-results-{{ account() }}-{{ region }}/Unsaved/"
    "{{ now.strftime('%Y') }}/{{ now.strftime('%m') }}/{{ now.strftime('%d') }}"
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every CLI flag takes its default from here, so a deployment can
    pin region, timeout and result path without repeating flags.
    """

    # Application
    APP_NAME: str = "athenacli"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # AWS
    AWS_REGION: str = "eu-central-1"

    # Athena execution
    QUERY_TIMEOUT_SECONDS: float = 3600.0
    POLL_INTERVAL_SECONDS: float = 0.5
    RESULT_PATH_TEMPLATE: str = DEFAULT_RESULT_PATH_TEMPLATE
    ATHENA_DATABASE: Optional[str] = None
    ATHENA_WORKGROUP: Optional[str] = None

    # Observability
    METRICS_TEXTFILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Singleton settings instance
    """
    return Settings()
