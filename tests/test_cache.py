def test_get_returns_default_for_missing_key(cache):
    assert cache.get("missing") is None
    assert cache.get("missing", "fallback") == "fallback"


def test_entries_expire_after_their_own_ttl(cache, clock):
    cache.set("short", "a", ttl=10)
    cache.set("long", "b", ttl=100)

    clock.advance(11)

    assert cache.get("short") is None
    assert cache.get("long") == "b"
    assert cache.keys() == ["long"]


def test_default_ttl_applies_when_none_given(cache, clock):
    cache.set("key", 1)
    clock.advance(cache.default_ttl - 1)
    assert cache.has("key")
    clock.advance(2)
    assert not cache.has("key")


def test_falsy_values_are_still_hits(cache):
    cache.set("empty", ())
    assert cache.get("empty") == ()
    assert cache.hits == 1


def test_stats_track_hits_and_misses(cache):
    cache.set("a", 1)
    cache.get("a")
    cache.get("a")
    cache.get("b")
    assert cache.stats() == {"keys": 1, "hits": 2, "misses": 1, "hitRate": "66.67%"}


def test_stats_without_hits(cache):
    assert cache.stats()["hitRate"] == "0%"


def test_delete_and_delete_pattern(cache):
    for key in ("clan:#A", "clan:#B", "war:#A", "stats:clan:#A"):
        cache.set(key, key)

    assert cache.delete("war:#A") == 1
    assert cache.delete("war:#A") == 0
    assert cache.delete_pattern("clan:*") == 3
    assert cache.keys() == []


def test_delete_pattern_treats_other_characters_literally(cache):
    cache.set("sheets:cwl-clans", 1)
    cache.set("sheets:cwlXclans", 2)
    assert cache.delete_pattern("cwl-clans") == 1
    assert cache.keys() == ["sheets:cwlXclans"]


def test_flush_clears_entries_and_counters(cache):
    cache.set("a", 1)
    cache.get("a")
    cache.flush()
    assert cache.keys() == []
    assert cache.stats() == {"keys": 0, "hits": 0, "misses": 0, "hitRate": "0%"}
