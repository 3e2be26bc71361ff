"""Tests for lifecycle-bound component bindings."""

import asyncio
from unittest.mock import MagicMock

import pytest

from block_loader.core.exceptions import ComponentLoadError
from block_loader.features.components.entities.models import LoadState
from block_loader.features.components.services.bindings import ComponentBinding, PreloadBinding


class TestComponentBinding:
    """Test the idle/loading/success/error state machine."""

    @pytest.mark.asyncio
    async def test_mount_loads_component(self, loader):
        snapshots = []
        binding = ComponentBinding(loader, "HERO", on_change=snapshots.append)

        assert binding.state is LoadState.IDLE
        await binding.mount()

        assert binding.state is LoadState.SUCCESS
        assert binding.component.__name__ == "HeroBlock"
        assert binding.error is None
        assert [s.state for s in snapshots] == [LoadState.LOADING, LoadState.SUCCESS]

    @pytest.mark.asyncio
    async def test_mount_is_idempotent(self, loader, fake_fetcher):
        binding = ComponentBinding(loader, "HERO")

        first = binding.mount()
        second = binding.mount()
        await first

        assert first is second
        assert fake_fetcher.count("HERO") == 1

    @pytest.mark.asyncio
    async def test_failure_exposes_load_error(self, loader):
        binding = ComponentBinding(loader, "MISSING")

        await binding.mount()

        assert binding.state is LoadState.ERROR
        assert isinstance(binding.error, ComponentLoadError)
        assert binding.error.identifier == "MISSING"
        assert binding.component is None

    @pytest.mark.asyncio
    async def test_retry_goes_through_idle_and_reloads(self, loader, fake_fetcher, hero_source):
        snapshots = []
        binding = ComponentBinding(loader, "LATE", on_change=snapshots.append)
        await binding.mount()
        fake_fetcher.sources["LATE"] = hero_source

        await binding.retry()

        assert [s.state for s in snapshots] == [
            LoadState.LOADING,
            LoadState.ERROR,
            LoadState.IDLE,
            LoadState.LOADING,
            LoadState.SUCCESS,
        ]
        assert binding.error is None
        assert fake_fetcher.count("LATE") == 2

    @pytest.mark.asyncio
    async def test_retry_outside_error_state_is_ignored(self, loader):
        binding = ComponentBinding(loader, "HERO")
        await binding.mount()

        assert binding.retry() is None
        assert binding.state is LoadState.SUCCESS

    @pytest.mark.asyncio
    async def test_unmount_while_loading_applies_nothing(self, loader, fake_fetcher):
        on_change = MagicMock()
        gate = fake_fetcher.gate("HERO")
        binding = ComponentBinding(loader, "HERO", on_change=on_change)
        task = binding.mount()
        await asyncio.sleep(0)
        calls_before_teardown = on_change.call_count

        binding.unmount()
        gate.set()
        await task

        assert on_change.call_count == calls_before_teardown
        assert binding.state is LoadState.LOADING
        assert binding.component is None
        # The load itself still completes and populates the cache
        assert loader.is_cached("HERO")

    @pytest.mark.asyncio
    async def test_unmount_while_loading_ignores_failure(self, loader, fake_fetcher):
        on_change = MagicMock()
        gate = fake_fetcher.gate("MISSING")
        binding = ComponentBinding(loader, "MISSING", on_change=on_change)
        task = binding.mount()
        await asyncio.sleep(0)

        binding.unmount()
        gate.set()
        await task

        assert on_change.call_count == 1
        assert binding.error is None

    @pytest.mark.asyncio
    async def test_identifier_change_discards_stale_result(self, loader, fake_fetcher):
        snapshots = []
        hero_gate = fake_fetcher.gate("HERO")
        binding = ComponentBinding(loader, "HERO", on_change=snapshots.append)
        stale = binding.mount()
        await asyncio.sleep(0)

        current = binding.set_identifier("PRICING_TABLE")
        await current
        hero_gate.set()
        await stale

        assert binding.identifier == "PRICING_TABLE"
        assert binding.state is LoadState.SUCCESS
        assert binding.component.__name__ == "PricingBlock"
        assert [(s.identifier, s.state) for s in snapshots] == [
            ("HERO", LoadState.LOADING),
            ("PRICING_TABLE", LoadState.LOADING),
            ("PRICING_TABLE", LoadState.SUCCESS),
        ]
        assert loader.is_cached("HERO")

    @pytest.mark.asyncio
    async def test_same_identifier_does_not_restart(self, loader, fake_fetcher):
        binding = ComponentBinding(loader, "HERO")
        await binding.mount()

        assert binding.set_identifier("HERO") is None
        assert fake_fetcher.count("HERO") == 1

    @pytest.mark.asyncio
    async def test_variant_is_passed_to_loader(self, loader, fake_fetcher, hero_source):
        fake_fetcher.sources["HERO:custom-3"] = hero_source
        binding = ComponentBinding(loader, "HERO", variant="custom-3")

        await binding.mount()

        assert fake_fetcher.calls == [("HERO", "custom-3")]
        assert binding.state is LoadState.SUCCESS

    def test_identifier_change_before_mount_does_not_load(self, loader):
        binding = ComponentBinding(loader, "HERO")

        assert binding.set_identifier("CTA") is None
        assert binding.state is LoadState.IDLE


class TestPreloadBinding:
    """Test the batch preloading binding."""

    @pytest.mark.asyncio
    async def test_mount_reports_loaded_and_failed(self, loader):
        snapshots = []
        binding = PreloadBinding(loader, ["HERO", "MISSING"], on_change=snapshots.append)

        await binding.mount()

        assert binding.loaded == ["HERO"]
        assert binding.failed == ["MISSING"]
        assert binding.loading is False
        assert [s.loading for s in snapshots] == [True, False]

    @pytest.mark.asyncio
    async def test_empty_batch_does_nothing(self, loader):
        on_change = MagicMock()
        binding = PreloadBinding(loader, [], on_change=on_change)

        assert binding.mount() is None
        on_change.assert_not_called()

    @pytest.mark.asyncio
    async def test_unmount_during_preload_applies_nothing(self, loader, fake_fetcher):
        on_change = MagicMock()
        gate = fake_fetcher.gate("HERO")
        binding = PreloadBinding(loader, ["HERO"], on_change=on_change)
        task = binding.mount()
        await asyncio.sleep(0)

        binding.unmount()
        gate.set()
        await task

        assert on_change.call_count == 1
        assert binding.loading is True
        assert binding.loaded == []

    @pytest.mark.asyncio
    async def test_new_identifiers_supersede_running_preload(self, loader, fake_fetcher):
        gate = fake_fetcher.gate("HERO")
        binding = PreloadBinding(loader, ["HERO"])
        stale = binding.mount()
        await asyncio.sleep(0)

        await binding.set_identifiers(["PRICING_TABLE"])
        gate.set()
        await stale

        assert binding.loaded == ["PRICING_TABLE"]
        assert binding.identifiers == ["PRICING_TABLE"]
