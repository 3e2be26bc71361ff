"""Configuration for block-loader - logging setup and environment presets."""

from .logging_config import LoggingConfig, setup_logging
from .settings import (
    Environment,
    LoaderSettings,
    DEVELOPMENT_CONFIG,
    PRODUCTION_CONFIG,
    TEST_CONFIG,
    ENVIRONMENT_PRESETS,
    get_environment_config,
)

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "Environment",
    "LoaderSettings",
    "DEVELOPMENT_CONFIG",
    "PRODUCTION_CONFIG",
    "TEST_CONFIG",
    "ENVIRONMENT_PRESETS",
    "get_environment_config",
]
