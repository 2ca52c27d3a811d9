"""Tests for BoundedExpiringCache."""

import copy
import pickle

import pytest

from toolcache.core.cache import (
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_MS,
    MISSING,
    BoundedExpiringCache,
    CacheConfigError,
)


@pytest.fixture
def cache(make_cache):
    """Small cache: 3 entries, 100ms TTL."""
    return make_cache(max_size=3, ttl_ms=100)


class TestConstructor:
    """Tests for construction and configuration validation."""

    def test_defaults(self):
        default_cache = BoundedExpiringCache()
        assert default_cache.max_size == DEFAULT_MAX_SIZE == 100
        assert default_cache.ttl_ms == DEFAULT_TTL_MS == 60000
        assert default_cache.max_value_size is None

    def test_custom_options(self):
        custom = BoundedExpiringCache(max_size=50, ttl_ms=5000, max_value_size=1024)
        assert custom.max_size == 50
        assert custom.ttl_ms == 5000
        assert custom.max_value_size == 1024

    @pytest.mark.parametrize("max_size", [0, -1, 1.5, "10", None, True])
    def test_rejects_invalid_max_size(self, max_size):
        with pytest.raises(CacheConfigError) as exc_info:
            BoundedExpiringCache(max_size=max_size)
        assert exc_info.value.option == "max_size"

    @pytest.mark.parametrize("ttl_ms", [0, -100, "60000", None, float("nan")])
    def test_rejects_non_positive_ttl(self, ttl_ms):
        with pytest.raises(CacheConfigError) as exc_info:
            BoundedExpiringCache(ttl_ms=ttl_ms)
        assert exc_info.value.option == "ttl_ms"

    @pytest.mark.parametrize("max_value_size", [-1, 2.5, "10"])
    def test_rejects_invalid_max_value_size(self, max_value_size):
        with pytest.raises(CacheConfigError) as exc_info:
            BoundedExpiringCache(max_value_size=max_value_size)
        assert exc_info.value.option == "max_value_size"

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            BoundedExpiringCache(max_size=0)

    def test_fractional_ttl_allowed(self):
        assert BoundedExpiringCache(ttl_ms=0.5).ttl_ms == 0.5

    def test_starts_empty(self, cache):
        assert cache.size == 0
        assert len(cache) == 0


class TestSetAndGet:
    """Tests for storing and retrieving values."""

    def test_store_and_retrieve(self, cache):
        assert cache.set("key1", "value1") is True
        assert cache.get("key1") == "value1"

    def test_missing_key_returns_sentinel(self, cache):
        assert cache.get("nonexistent") is MISSING

    def test_missing_key_returns_explicit_default(self, cache):
        assert cache.get("nonexistent", "fallback") == "fallback"

    def test_tuple_key(self, cache):
        assert cache.set(("scan", 1), "result") is True
        assert cache.get(("scan", 1)) == "result"

    @pytest.mark.parametrize("operation", ["set", "get", "has", "delete"])
    def test_unhashable_key_raises(self, cache, operation):
        cache.set("key1", "value1")
        args = (["a"], 1) if operation == "set" else (["a"],)
        with pytest.raises(TypeError):
            getattr(cache, operation)(*args)
        assert cache.size == 1
        assert cache.get("key1") == "value1"

    def test_overwrite(self, cache):
        cache.set("key1", "value1")
        cache.set("key1", "value2")
        assert cache.get("key1") == "value2"
        assert cache.size == 1

    def test_different_value_types(self, cache):
        big = BoundedExpiringCache(max_size=10)
        big.set("string", "hello")
        big.set("number", 42)
        big.set("object", {"foo": "bar"})
        big.set("array", [1, 2, 3])
        big.set("null", None)

        assert big.get("string") == "hello"
        assert big.get("number") == 42
        assert big.get("object") == {"foo": "bar"}
        assert big.get("array") == [1, 2, 3]
        assert big.get("null") is None

    def test_none_is_distinct_from_missing(self, cache):
        cache.set("null", None)
        assert cache.get("null") is None
        assert cache.get("null") is not MISSING
        assert cache.get("undefined") is MISSING
        assert cache.has("null") is True

    def test_empty_string_key(self, cache):
        cache.set("", "empty key")
        assert cache.get("") == "empty key"

    def test_empty_string_value(self, cache):
        cache.set("key1", "")
        assert cache.get("key1") == ""

    def test_non_string_keys(self, cache):
        cache.set(1, "int")
        cache.set(("a", 2), "tuple")
        cache.set(None, "none")
        assert cache.get(1) == "int"
        assert cache.get(("a", 2)) == "tuple"
        assert cache.get(None) == "none"

    def test_values_are_stored_by_reference(self, cache):
        value = {"items": [1]}
        cache.set("key", value)
        value["items"].append(2)
        assert cache.get("key") == {"items": [1, 2]}


class TestTTL:
    """Tests for lazy time-to-live expiry."""

    def test_fresh_then_expired(self, cache, clock):
        cache.set("k", "v")
        clock.advance_ms(50)
        assert cache.get("k") == "v"
        clock.advance_ms(100)
        assert cache.get("k") is MISSING

    def test_expires_exactly_at_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance_ms(99)
        assert cache.has("k") is True
        clock.advance_ms(1)
        assert cache.has("k") is False

    def test_expired_entry_still_counted_in_size(self, cache, clock):
        cache.set("k", "v")
        clock.advance_ms(150)
        assert cache.get("k") is MISSING
        assert cache.size == 1

    def test_overwrite_refreshes_timestamp(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance_ms(60)
        cache.set("key1", "value2")
        assert cache.get("key1") == "value2"

        # Past the original window, inside the refreshed one
        clock.advance_ms(50)
        assert cache.get("key1") == "value2"

        clock.advance_ms(50)
        assert cache.get("key1") is MISSING

    def test_expired_key_can_be_set_again(self, cache, clock):
        cache.set("k", "old")
        clock.advance_ms(200)
        cache.set("k", "new")
        assert cache.get("k") == "new"
        assert cache.size == 1


class TestFifoEviction:
    """Tests for max_size enforcement."""

    def test_evicts_oldest_when_full(self, cache):
        for key in ("a", "b", "c", "d"):
            cache.set(key, key.upper())

        assert cache.get("a") is MISSING
        assert cache.get("b") == "B"
        assert cache.get("c") == "C"
        assert cache.get("d") == "D"

    def test_fifo_across_multiple_evictions(self, cache):
        for key in ("a", "b", "c", "d", "e"):
            cache.set(key, key)

        assert not cache.has("a")
        assert not cache.has("b")
        assert [k for k in "cde" if cache.has(k)] == ["c", "d", "e"]

    def test_size_never_exceeds_max(self, cache):
        for i in range(4):
            cache.set(f"key{i}", i)
        assert cache.size == 3

    def test_rapid_sets_keep_last_entries(self, cache):
        for i in range(100):
            cache.set(f"key{i}", f"value{i}")

        assert cache.size == 3
        assert cache.get("key97") == "value97"
        assert cache.get("key98") == "value98"
        assert cache.get("key99") == "value99"

    def test_overwrite_keeps_fifo_position(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.set("a", 10)  # refresh, stays oldest
        cache.set("d", 4)

        assert not cache.has("a")
        assert cache.get("b") == 2
        assert cache.get("d") == 4

    def test_overwrite_never_evicts(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        for i in range(10):
            cache.set("b", i)
        assert cache.size == 3
        assert cache.get("a") == 1

    def test_access_does_not_affect_order(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.get("a")
        cache.has("a")
        cache.set("d", 4)
        assert not cache.has("a")

    def test_eviction_can_remove_expired_entries(self, cache, clock):
        cache.set("a", 1)
        clock.advance_ms(200)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.set("d", 4)
        assert cache.size == 3
        assert cache.prune() == 0

    def test_deleted_key_reinserted_at_back(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.delete("a")
        cache.set("a", 1)
        cache.set("d", 4)
        assert not cache.has("b")
        assert cache.has("a")

    def test_max_size_one(self, make_cache):
        single = make_cache(max_size=1)
        single.set("a", 1)
        single.set("b", 2)
        assert single.size == 1
        assert single.get("a") is MISSING
        assert single.get("b") == 2


class TestMaxValueSize:
    """Tests for the string length admission guard."""

    def test_rejects_oversized_string(self, make_cache):
        sized = make_cache(max_value_size=10)
        assert sized.set("key1", "12345678901") is False
        assert sized.get("key1") is MISSING
        assert sized.size == 0

    def test_accepts_string_at_limit(self, make_cache):
        sized = make_cache(max_value_size=10)
        assert sized.set("key1", "1234567890") is True
        assert sized.get("key1") == "1234567890"

    def test_only_strings_are_checked(self, make_cache):
        sized = make_cache(max_value_size=10)
        large_object = {"data": "x" * 100}
        assert sized.set("key1", large_object) is True
        assert sized.get("key1") == large_object
        assert sized.set("key2", list(range(100))) is True
        assert sized.set("key3", b"x" * 100) is True

    def test_rejection_leaves_existing_entry(self, make_cache, clock):
        sized = make_cache(max_value_size=5, ttl_ms=100)
        sized.set("k", "short")
        clock.advance_ms(60)
        assert sized.set("k", "far too long") is False
        assert sized.get("k") == "short"

        # Timestamp was not refreshed by the rejected write
        clock.advance_ms(50)
        assert sized.get("k") is MISSING

    def test_rejection_does_not_evict(self, make_cache):
        sized = make_cache(max_size=2, max_value_size=3)
        sized.set("a", "1")
        sized.set("b", "2")
        assert sized.set("c", "toolong") is False
        assert sized.has("a")
        assert sized.has("b")

    def test_zero_limit_allows_only_empty_strings(self, make_cache):
        sized = make_cache(max_value_size=0)
        assert sized.set("a", "") is True
        assert sized.set("b", "x") is False


class TestHas:
    """Tests for has()."""

    def test_existing_key(self, cache):
        cache.set("key1", "value1")
        assert cache.has("key1") is True
        assert "key1" in cache

    def test_missing_key(self, cache):
        assert cache.has("nonexistent") is False
        assert "nonexistent" not in cache

    def test_expired_key(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance_ms(150)
        assert cache.has("key1") is False


class TestDelete:
    """Tests for delete()."""

    def test_removes_entry(self, cache):
        cache.set("key1", "value1")
        assert cache.delete("key1") is True
        assert cache.get("key1") is MISSING
        assert cache.size == 0

    def test_missing_key(self, cache):
        assert cache.delete("nonexistent") is False

    def test_removes_expired_entry(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance_ms(500)
        assert cache.delete("key1") is True
        assert cache.size == 0

    def test_delete_twice(self, cache):
        cache.set("key1", None)
        assert cache.delete("key1") is True
        assert cache.delete("key1") is False


class TestClear:
    """Tests for clear()."""

    def test_removes_all_entries(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")
        cache.set("key3", "value3")

        cache.clear()

        assert cache.get("key1") is MISSING
        assert cache.get("key2") is MISSING
        assert cache.get("key3") is MISSING
        assert cache.size == 0

    def test_capacity_available_after_clear(self, cache):
        for key in "abc":
            cache.set(key, key)
        cache.clear()
        for key in "xyz":
            cache.set(key, key)
        assert [k for k in "xyz" if cache.has(k)] == ["x", "y", "z"]


class TestSize:
    """Tests for the size property."""

    def test_tracks_entries(self, cache):
        assert cache.size == 0
        cache.set("key1", "value1")
        assert cache.size == 1
        cache.set("key2", "value2")
        assert cache.size == 2
        cache.delete("key1")
        assert cache.size == 1

    def test_read_only(self, cache):
        with pytest.raises(AttributeError):
            cache.size = 10


class TestPrune:
    """Tests for prune()."""

    def test_removes_expired_and_returns_count(self, cache, clock):
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        clock.advance_ms(150)
        cache.set("key3", "value3")
        removed = cache.prune()

        assert removed == 2
        assert cache.get("key1") is MISSING
        assert cache.get("key2") is MISSING
        assert cache.get("key3") == "value3"
        assert cache.size == 1

    def test_returns_zero_when_nothing_expired(self, cache):
        cache.set("key1", "value1")
        assert cache.prune() == 0
        assert cache.size == 1

    def test_second_prune_returns_zero(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance_ms(100)
        assert cache.prune() == 1
        assert cache.prune() == 0

    def test_empty_cache(self, cache):
        assert cache.prune() == 0

    def test_pruned_slots_reusable_without_eviction(self, cache, clock):
        cache.set("a", 1)
        cache.set("b", 2)
        clock.advance_ms(150)
        cache.set("c", 3)
        cache.prune()
        cache.set("d", 4)
        cache.set("e", 5)
        assert [k for k in "cde" if cache.has(k)] == ["c", "d", "e"]


class TestGetStats:
    """Tests for get_stats()."""

    def test_returns_statistics(self, cache):
        cache.set("key1", "value1")
        cache.set("key2", "value2")

        stats = cache.get_stats()
        assert stats == {
            "size": 2,
            "max_size": 3,
            "ttl": 100,
            "max_value_size": None,
        }

    def test_has_no_side_effects(self, cache, clock):
        cache.set("key1", "value1")
        clock.advance_ms(500)
        assert cache.get_stats()["size"] == 1
        assert cache.get_stats()["size"] == 1

    def test_reports_max_value_size(self, make_cache):
        assert make_cache(max_value_size=64).get_stats()["max_value_size"] == 64


class TestMissingSentinel:
    """Tests for the MISSING sentinel."""

    def test_is_falsy(self):
        assert not MISSING

    def test_repr(self):
        assert repr(MISSING) == "MISSING"

    def test_survives_copy_and_pickle(self):
        assert copy.copy(MISSING) is MISSING
        assert copy.deepcopy(MISSING) is MISSING
        assert pickle.loads(pickle.dumps(MISSING)) is MISSING


class TestExampleScenarios:
    """End-to-end scenarios combining the operations."""

    def test_capacity_scenario(self, make_cache):
        c = make_cache(max_size=3)
        for key in "abcd":
            c.set(key, key)
        assert [k for k in "abcd" if c.has(k)] == ["b", "c", "d"]
        c.set("e", "e")
        assert [k for k in "abcde" if c.has(k)] == ["c", "d", "e"]

    def test_ttl_scenario(self, make_cache, clock):
        c = make_cache(ttl_ms=100)
        c.set("k", "value")
        clock.advance_ms(50)
        assert c.get("k") == "value"
        clock.advance_ms(100)
        assert c.get("k") is MISSING

    def test_admission_scenario(self, make_cache):
        c = make_cache(max_value_size=10)
        assert c.set("k", "12345678901") is False
        assert c.set("k", "1234567890") is True
