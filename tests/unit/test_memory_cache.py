"""Tests for the in-memory component cache."""

from block_loader.features.components.adapters.memory_cache import ComponentCache


def hero_component(content):
    return {"type": "hero"}


def pricing_component(content):
    return {"type": "pricing"}


class TestComponentCache:
    """Test TTL handling and bookkeeping of the component cache."""

    def test_get_returns_stored_component(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)

        assert cache.get("HERO") is hero_component
        assert cache.has("HERO")
        assert "HERO" in cache

    def test_missing_key_is_absent(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)

        assert cache.get("HERO") is None
        assert not cache.has("HERO")

    def test_expired_entry_is_removed_on_get(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)

        clock.advance(59.9)
        assert cache.get("HERO") is hero_component

        clock.advance(0.2)
        assert cache.get("HERO") is None
        assert len(cache) == 0

    def test_expired_entry_is_removed_on_has(self, clock):
        cache = ComponentCache(ttl=10, clock=clock)
        cache.set("HERO", hero_component)

        clock.advance(11)

        assert not cache.has("HERO")
        assert cache.stats() == {"size": 0, "identifiers": []}

    def test_zero_ttl_never_hits(self, clock):
        cache = ComponentCache(ttl=0, clock=clock)
        cache.set("HERO", hero_component)

        assert cache.get("HERO") is None

    def test_ttl_change_applies_to_existing_entries(self, clock):
        cache = ComponentCache(ttl=600, clock=clock)
        cache.set("HERO", hero_component)
        clock.advance(120)

        cache.ttl = 60

        assert cache.get("HERO") is None

    def test_set_replaces_entry_and_restarts_age(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)
        clock.advance(50)
        cache.set("HERO", pricing_component)
        clock.advance(50)

        assert cache.get("HERO") is pricing_component
        assert cache.stats()["size"] == 1

    def test_entry_records_identifier_and_load_time(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO:custom-1", hero_component)

        entry = cache.get_entry("HERO:custom-1")

        assert entry.identifier == "HERO:custom-1"
        assert entry.loaded_at == clock.now
        assert entry.component is hero_component

    def test_delete_reports_presence(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)

        assert cache.delete("HERO") is True
        assert cache.delete("HERO") is False

    def test_clear(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)
        cache.set("PRICING_TABLE", pricing_component)

        cache.clear()

        assert len(cache) == 0

    def test_sweep_removes_only_expired_entries(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)
        clock.advance(30)
        cache.set("PRICING_TABLE", pricing_component)
        clock.advance(40)

        assert cache.sweep() == 1
        assert cache.keys() == ["PRICING_TABLE"]
        assert cache.sweep() == 0

    def test_stats_lists_identifiers(self, clock):
        cache = ComponentCache(ttl=60, clock=clock)
        cache.set("HERO", hero_component)
        cache.set("PRICING_TABLE", pricing_component)

        stats = cache.stats()

        assert stats["size"] == 2
        assert set(stats["identifiers"]) == {"HERO", "PRICING_TABLE"}
