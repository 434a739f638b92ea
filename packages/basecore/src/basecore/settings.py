"""
Settings for basecore services.

Values are read from the environment (or a local .env file).
"""

import functools

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven service settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SERVICE_NAME: str = "engine-bridge"
    LOG_LEVEL: str = "INFO"

    # Header used to carry the correlator id in and out of the service
    CORRELATOR_HEADER: str = "Fiware-Correlator"

    # Thread pool size for action delivery
    ACTION_WORKERS: int = 4

    HOST: str = "0.0.0.0"
    PORT: int = 8080


@functools.lru_cache()
def get_settings() -> Settings:
    """
    Get settings (cached).

    Call get_settings.cache_clear() after changing the environment in tests.
    """
    return Settings()
