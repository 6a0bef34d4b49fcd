"""
Unit tests for the in-memory token registry.

Covers registration, collision rejection, destructive lookup and
concurrent at-most-once consumption.
"""

import threading

import pytest

from filedrop.domain.errors import TokenCollisionError
from filedrop.domain.file_transfer import InMemoryFileRegistry, RegistryEntry


class TestRegister:
    def test_register_makes_token_claimable(self, registry):
        entry = registry.register("abcd", "abcd_a.txt")

        assert isinstance(entry, RegistryEntry)
        assert entry.storage_name == "abcd_a.txt"
        assert len(registry) == 1

    def test_register_honours_explicit_timestamp(self, registry):
        entry = registry.register("abcd", "abcd_a.txt", registered_at=1000.0)
        assert entry.registered_at == 1000.0

    def test_duplicate_token_is_rejected(self, registry):
        registry.register("abcd", "abcd_first.txt")

        with pytest.raises(TokenCollisionError):
            registry.register("abcd", "abcd_second.txt")

        # The original mapping survives the failed attempt
        assert registry.consume_once("abcd").storage_name == "abcd_first.txt"


class TestConsumeOnce:
    def test_second_consume_returns_none(self, registry):
        registry.register("abcd", "abcd_a.txt")

        assert registry.consume_once("abcd") is not None
        assert registry.consume_once("abcd") is None
        assert len(registry) == 0

    def test_unknown_token_returns_none(self, registry):
        assert registry.consume_once("ffff") is None

    def test_consume_does_not_touch_other_tokens(self, registry):
        registry.register("aaaa", "aaaa_x")
        registry.register("bbbb", "bbbb_y")

        registry.consume_once("aaaa")

        assert len(registry) == 1
        assert registry.consume_once("bbbb").storage_name == "bbbb_y"

    def test_concurrent_consumers_get_at_most_one_entry(self):
        registry = InMemoryFileRegistry()
        registry.register("abcd", "abcd_a.txt")

        workers = 16
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def consume():
            barrier.wait()
            entry = registry.consume_once("abcd")
            with results_lock:
                results.append(entry)

        threads = [threading.Thread(target=consume) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [r for r in results if r is not None]
        assert len(winners) == 1
        assert len(results) == workers


class TestEvictExpired:
    def test_evicts_only_old_entries(self, registry):
        registry.register("aaaa", "aaaa_old", registered_at=100.0)
        registry.register("bbbb", "bbbb_new", registered_at=950.0)

        evicted = registry.evict_expired(300, now=1000.0)

        assert [e.token for e in evicted] == ["aaaa"]
        assert registry.consume_once("aaaa") is None
        assert registry.consume_once("bbbb") is not None

    def test_nothing_to_evict(self, registry):
        registry.register("aaaa", "aaaa_x", registered_at=990.0)
        assert registry.evict_expired(300, now=1000.0) == []
        assert len(registry) == 1


class TestRegistryEntry:
    def test_age_is_never_negative(self):
        entry = RegistryEntry("abcd", "abcd_a", registered_at=2000.0)
        assert entry.age_seconds(now=1000.0) == 0.0

    def test_is_older_than(self):
        entry = RegistryEntry("abcd", "abcd_a", registered_at=1000.0)
        assert entry.is_older_than(10, now=1011.0)
        assert not entry.is_older_than(10, now=1010.0)
