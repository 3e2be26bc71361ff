"""Pytest configuration and fixtures for block-loader tests."""

import asyncio
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from block_loader.core.exceptions import ComponentSourceError
from block_loader.features.components.adapters.memory_cache import ComponentCache
from block_loader.features.components.entities.config import LoaderConfig
from block_loader.features.components.entities.models import ComponentSourceResponse
from block_loader.features.components.services.component_loader import ComponentLoader

BASE_URL = "http://testserver/api/components/load"

HERO_SOURCE = '''
def HeroBlock(content, brand="BOOM"):
    title, set_title = use_state(content.get("title", ""))
    return {"type": "hero", "title": title, "brand": brand}

exports["default"] = HeroBlock
'''

PRICING_SOURCE = '''
def PricingBlock(content, brand="BOOM"):
    total = use_memo(lambda: sum(item["price"] for item in content["items"]), [len(content["items"])])
    return {"type": "pricing", "total": total}

__default__ = PricingBlock
'''

BROKEN_SOURCE = '''
def Broken(content):
    return None

raise ValueError("component exploded")
'''


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """In-memory stand-in for the HTTP fetcher.

    Identifiers missing from ``sources`` fail with a logical error. A gate
    registered for an identifier holds its fetch until the gate is set.
    """

    def __init__(self, sources: Optional[Dict[str, str]] = None):
        self.sources: Dict[str, str] = dict(sources or {})
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.invalidated: List[str] = []
        self.invalidate_configs: List[Optional[LoaderConfig]] = []
        self.gates: Dict[str, asyncio.Event] = {}

    def gate(self, identifier: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[identifier] = event
        return event

    def count(self, identifier: str) -> int:
        return sum(1 for called, _ in self.calls if called == identifier)

    async def fetch(self, identifier, variant=None, config=None):
        self.calls.append((identifier, variant))
        gate = self.gates.get(identifier)
        if gate is not None:
            await gate.wait()

        key = f"{identifier}:{variant}" if variant else identifier
        source = self.sources.get(key)
        if source is None:
            raise ComponentSourceError(f"No component source received for {identifier}", identifier=identifier)
        return ComponentSourceResponse(success=True, source_text=source, identifier=identifier)

    async def invalidate(self, identifier, config=None):
        self.invalidated.append(identifier)
        self.invalidate_configs.append(config)
        return {"success": True, "message": f"Cache entry for {identifier} cleared"}


class RecordingSleep:
    """Replacement for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher({"HERO": HERO_SOURCE, "PRICING_TABLE": PRICING_SOURCE})


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def loader(fake_fetcher, clock):
    """Loader over the fake fetcher with a controllable cache clock."""
    return ComponentLoader(
        fake_fetcher,
        cache=ComponentCache(clock=clock),
        config=LoaderConfig(cache_ttl=60.0, retry_attempts=1, retry_delay=0.0),
    )


@pytest.fixture
def source_payload():
    def _payload(identifier: str = "HERO", source: str = HERO_SOURCE, **extra):
        return {"success": True, "sourceText": source, "identifier": identifier, **extra}
    return _payload


@pytest.fixture
def mock_client():
    """Build an AsyncClient whose requests are answered by ``handler``."""
    def _client(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _client


@pytest.fixture
def hero_source():
    return HERO_SOURCE


@pytest.fixture
def pricing_source():
    return PRICING_SOURCE


@pytest.fixture
def broken_source():
    return BROKEN_SOURCE
