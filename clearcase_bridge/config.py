# File: clearcase_bridge/config.py
# Purpose: Runner configuration with pydantic-settings, read from the environment and .env
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


VERBOSE_ON = "1"


class Settings(BaseSettings):
    """
    Settings for the cleartool bridge.

    Values come from environment variables (case sensitive) and an optional
    .env file. HUDSON_CLEARCASE_VERBOSE is the operator's switch for forcing
    verbose job logs without touching job configuration. The runner's
    per-call lookup (load_environment_settings) skips .env, so only the real
    environment can set it there.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Verbose override: "1" streams every command's output into the job log
    HUDSON_CLEARCASE_VERBOSE: str = ""

    # Tool Configuration
    CLEARTOOL_EXECUTABLE: str = "cleartool"
    SCM_NAME: str = "ClearCase"

    # Quiet-mode temporary logs
    TEMP_LOG_DIR: Optional[str] = None
    TEMP_LOG_PREFIX: str = "cleartool"
    TEMP_LOG_SUFFIX: str = "log"

    # Diagnostic Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @property
    def verbose_forced(self) -> bool:
        """True when the environment forces verbose logging for every command"""
        return self.HUDSON_CLEARCASE_VERBOSE == VERBOSE_ON


def load_settings() -> Settings:
    """
    Build a fresh settings instance from the environment and .env.
    """
    return Settings()


def load_environment_settings() -> Settings:
    """
    Build a fresh settings instance from process environment variables only.

    The runner calls this once per invocation so changes to the environment
    are picked up at call time, and a stray .env in the working directory
    cannot switch on verbose logging.
    """
    return Settings(_env_file=None)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance for application wiring.
    Uses lru_cache to ensure singleton pattern.
    """
    return Settings()
