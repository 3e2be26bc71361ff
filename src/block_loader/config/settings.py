"""Environment presets and settings for block-loader.

One environment signal selects a preset at process start; the preset is
applied to a loader through ``ComponentLoader.configure``.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..features.components.entities.config import LoaderConfig


class Environment(str, Enum):
    """Deployment environments with their own loader preset."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


# Quick turnaround while components are being edited
DEVELOPMENT_CONFIG = LoaderConfig(
    cache_enabled=True,
    cache_ttl=60.0,
    retry_attempts=2,
    retry_delay=0.5,
    timeout=5.0,
)

PRODUCTION_CONFIG = LoaderConfig(
    cache_enabled=True,
    cache_ttl=900.0,
    retry_attempts=3,
    retry_delay=1.0,
    timeout=10.0,
)

# No caching and a single attempt so tests observe every fetch
TEST_CONFIG = LoaderConfig(
    cache_enabled=False,
    cache_ttl=0.0,
    retry_attempts=1,
    retry_delay=0.0,
    timeout=3.0,
)

ENVIRONMENT_PRESETS: Dict[Environment, LoaderConfig] = {
    Environment.DEVELOPMENT: DEVELOPMENT_CONFIG,
    Environment.PRODUCTION: PRODUCTION_CONFIG,
    Environment.TEST: TEST_CONFIG,
}


class LoaderSettings(BaseSettings):
    """Process settings read from the environment (``BLOCK_LOADER_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="BLOCK_LOADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field(
        default=Environment.DEVELOPMENT.value,
        validation_alias=AliasChoices("BLOCK_LOADER_ENVIRONMENT", "ENVIRONMENT"),
        description="Selects the loader preset",
    )
    base_url: str = Field(
        default="http://localhost:3000/api/components/load",
        description="Root of the component source endpoint",
    )
    request_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every endpoint request",
    )

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base_url format: {v}")
        return v.rstrip("/")


def get_environment_config(environment: Optional[str] = None) -> LoaderConfig:
    """Return the preset for ``environment``; unknown values fall back to development."""
    if environment is None:
        environment = LoaderSettings().environment

    try:
        return ENVIRONMENT_PRESETS[Environment(environment.strip().lower())]
    except ValueError:
        return DEVELOPMENT_CONFIG
