"""Wiring helpers that build a loader from process settings."""

import logging
from typing import Optional

import httpx

from .config.settings import LoaderSettings, get_environment_config
from .features.components.adapters.http_fetcher import HttpComponentFetcher
from .features.components.adapters.memory_cache import ComponentCache
from .features.components.adapters.python_compiler import PythonSourceCompiler
from .features.components.entities.config import LoaderConfig
from .features.components.services.component_loader import ComponentLoader

logger = logging.getLogger(__name__)


def configure_from_environment(
    loader: ComponentLoader,
    settings: Optional[LoaderSettings] = None,
) -> LoaderConfig:
    """Apply the preset selected by the environment signal to ``loader``."""
    settings = settings or LoaderSettings()
    preset = get_environment_config(settings.environment)
    config = loader.configure(preset.model_dump())
    logger.info(f"Loader configured for {settings.environment} environment")
    return config


def create_loader(
    settings: Optional[LoaderSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ComponentLoader:
    """Build a loader with the HTTP fetcher, Python compiler and memory cache."""
    settings = settings or LoaderSettings()
    preset = get_environment_config(settings.environment)

    fetcher = HttpComponentFetcher(
        settings.base_url,
        client=client,
        headers=settings.request_headers,
        config=preset,
    )
    loader = ComponentLoader(
        fetcher,
        compiler=PythonSourceCompiler(),
        cache=ComponentCache(ttl=preset.cache_ttl),
    )
    configure_from_environment(loader, settings)
    return loader
