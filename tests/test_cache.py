"""Tests for routecache.cache — RouteCache lifecycle and consistency rules."""

import os
from pathlib import Path

import pytest

import routecache.cache as cache_module
from routecache.cache import RouteCache
from routecache.config import CacheConfig
from routecache.errors import InvalidCache, InvalidCacheDirectory, WriteCacheFailure
from routecache.routing.collection import RouteCollection
from routecache.routing.route import CompiledRoute, Route


def _enabled(path: Path) -> RouteCache:
    return RouteCache(CacheConfig(enabled=True, file_path=path))


@pytest.fixture
def cache_file(tmp_path) -> Path:
    return tmp_path / "routes.json"


@pytest.fixture
def write_calls(monkeypatch) -> list[Path]:
    """Record every artifact write while still performing it."""
    calls: list[Path] = []
    real = cache_module.atomic_write_bytes

    def recording(target: Path, payload: bytes) -> int:
        calls.append(target)
        return real(target, payload)

    monkeypatch.setattr(cache_module, "atomic_write_bytes", recording)
    return calls


@pytest.fixture
def no_io(monkeypatch) -> None:
    """Fail the test if the cache touches the filesystem."""

    def forbidden(*args, **kwargs):
        raise AssertionError("unexpected file I/O")

    monkeypatch.setattr(cache_module, "atomic_write_bytes", forbidden)
    monkeypatch.setattr(Path, "read_bytes", forbidden)
    monkeypatch.setattr(Path, "unlink", forbidden)
    monkeypatch.setattr(Path, "is_file", forbidden)
    monkeypatch.setattr(Path, "is_dir", forbidden)


class TestConstruction:
    def test_default_is_disabled(self) -> None:
        cache = RouteCache()
        assert cache.is_cache_enabled is False
        assert cache.cache_file is None
        assert cache.needs_update is False

    def test_accepts_mapping(self, cache_file) -> None:
        cache = RouteCache({"cache_enabled": True, "cache_file": str(cache_file)})
        assert cache.is_cache_enabled is True
        assert cache.cache_file == cache_file

    def test_no_io_at_construction(self, cache_file, no_io) -> None:
        _enabled(cache_file)


class TestDisabled:
    def test_every_operation_is_a_noop(self, tmp_path, no_io) -> None:
        path = tmp_path / "missing-dir" / "routes.json"
        cache = RouteCache(CacheConfig(enabled=False, file_path=path))
        collection = RouteCollection()

        cache.add("home", Route("/"))
        assert cache.populate_from_cache(collection) is collection
        assert len(collection) == 0
        assert cache.write_cache() is True
        cache.invalidate_cache_file()
        assert cache.fetch_cache() == {}
        assert cache.has("home") is False
        assert cache.needs_update is False

    def test_existing_artifact_left_alone(self, cache_file) -> None:
        cache_file.write_bytes(b"garbage")
        cache = RouteCache(CacheConfig(enabled=False, file_path=cache_file))

        assert cache.fetch_cache() == {}
        cache.invalidate_cache_file()
        assert cache_file.read_bytes() == b"garbage"


class TestAdd:
    def test_compiles_and_marks_dirty(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("user", Route("/users/{id:int}"))

        assert cache.has("user") is True
        assert cache.needs_update is True
        assert cache.route_names() == ["user"]
        assert not cache_file.exists()

    def test_stores_compiled_form(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("user", Route("/users/{id:int}"))
        assert isinstance(cache._table["user"], CompiledRoute)

    def test_already_compiled_route_kept(self, cache_file) -> None:
        cache = _enabled(cache_file)
        compiled = Route("/").compile()
        cache.add("home", compiled)
        assert cache._table["home"] is compiled

    def test_last_write_wins(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/old"))
        cache.add("home", Route("/new"))
        assert cache._table["home"].path == "/new"

    def test_has_unknown_name(self, cache_file) -> None:
        assert _enabled(cache_file).has("nope") is False


class TestWriteCache:
    def test_clean_cache_is_noop(self, cache_file, write_calls) -> None:
        assert _enabled(cache_file).write_cache() is True
        assert write_calls == []
        assert not cache_file.exists()

    def test_writes_artifact(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/", name="home"))

        assert cache.write_cache() is True
        assert cache_file.is_file()
        assert cache.needs_update is False

    def test_second_write_is_noop(self, cache_file, write_calls) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))

        cache.write_cache()
        cache.write_cache()
        assert write_calls == [cache_file]

    def test_add_after_write_rewrites_identical_content(self, cache_file, write_calls) -> None:
        # Re-adding the same route dirties the cache again; the rewrite
        # produces the same bytes an always-rewrite policy would.
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))
        cache.write_cache()
        first = cache_file.read_bytes()

        cache.add("home", Route("/"))
        assert cache.needs_update is True
        cache.write_cache()
        assert write_calls == [cache_file, cache_file]
        assert cache_file.read_bytes() == first

    def test_missing_directory(self, tmp_path) -> None:
        path = tmp_path / "missing" / "routes.json"
        cache = _enabled(path)
        cache.add("home", Route("/"))

        with pytest.raises(InvalidCacheDirectory, match="does not exist"):
            cache.write_cache()
        assert not path.parent.exists()
        assert cache.needs_update is True

    def test_unwritable_directory(self, cache_file, monkeypatch) -> None:
        monkeypatch.setattr(os, "access", lambda path, mode: False)
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))

        with pytest.raises(InvalidCacheDirectory, match="not writable"):
            cache.write_cache()
        assert not cache_file.exists()

    def test_no_file_configured(self) -> None:
        cache = RouteCache(CacheConfig(enabled=True))
        cache.add("home", Route("/"))

        with pytest.raises(InvalidCacheDirectory, match="No cache file"):
            cache.write_cache()

    def test_write_error(self, cache_file, monkeypatch) -> None:
        def failing(target: Path, payload: bytes) -> int:
            raise OSError("disk full")

        monkeypatch.setattr(cache_module, "atomic_write_bytes", failing)
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))

        with pytest.raises(WriteCacheFailure, match="Unable to write cache file") as exc_info:
            cache.write_cache()
        assert isinstance(exc_info.value.__cause__, OSError)
        assert cache.needs_update is True

    def test_short_write(self, cache_file, monkeypatch) -> None:
        monkeypatch.setattr(cache_module, "atomic_write_bytes", lambda target, payload: 0)
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))

        with pytest.raises(WriteCacheFailure):
            cache.write_cache()
        assert cache.needs_update is True

    def test_failed_write_keeps_previous_artifact(self, cache_file, monkeypatch) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))
        cache.write_cache()
        previous = cache_file.read_bytes()

        def failing_replace(src, dst):
            raise OSError("boom")

        monkeypatch.setattr(os, "replace", failing_replace)
        cache.add("about", Route("/about"))
        with pytest.raises(WriteCacheFailure):
            cache.write_cache()

        assert cache_file.read_bytes() == previous
        assert sorted(p.name for p in cache_file.parent.iterdir()) == [cache_file.name]


class TestFetchCache:
    def test_cold_cache_is_empty(self, cache_file) -> None:
        assert _enabled(cache_file).fetch_cache() == {}

    def test_no_file_configured(self) -> None:
        assert RouteCache(CacheConfig(enabled=True)).fetch_cache() == {}

    def test_round_trip(self, cache_file) -> None:
        route = Route("/users/{id:int}", methods=frozenset({"GET"}), name="user")
        writer = _enabled(cache_file)
        writer.add("user", route)
        writer.write_cache()

        table = _enabled(cache_file).fetch_cache()
        assert list(table) == ["user"]
        assert table["user"] == route.compile()
        assert table["user"].match("/users/42") == {"id": 42}
        assert table["user"].match("/users/abc") is None

    def test_garbage_is_invalid(self, cache_file) -> None:
        cache_file.write_bytes(b"a:1:{garbage")
        with pytest.raises(InvalidCache):
            _enabled(cache_file).fetch_cache()

    @pytest.mark.parametrize("garbage", [b"1" * 5000, b"[" * 200_000])
    def test_pathological_json_is_invalid(self, cache_file, garbage: bytes) -> None:
        cache_file.write_bytes(garbage)
        with pytest.raises(InvalidCache):
            _enabled(cache_file).fetch_cache()

    def test_empty_file_is_invalid(self, cache_file) -> None:
        cache_file.write_bytes(b"")
        with pytest.raises(InvalidCache):
            _enabled(cache_file).fetch_cache()

    def test_directory_at_path_is_cold(self, cache_file) -> None:
        cache_file.mkdir()
        assert _enabled(cache_file).fetch_cache() == {}

    def test_memoized(self, cache_file) -> None:
        writer = _enabled(cache_file)
        writer.add("home", Route("/"))
        writer.write_cache()

        reader = _enabled(cache_file)
        first = reader.fetch_cache()
        cache_file.unlink()
        assert reader.fetch_cache() == first
        assert list(first) == ["home"]

    def test_failed_fetch_not_memoized(self, cache_file) -> None:
        cache_file.write_bytes(b"garbage")
        cache = _enabled(cache_file)
        with pytest.raises(InvalidCache):
            cache.fetch_cache()

        cache_file.unlink()
        assert cache.fetch_cache() == {}

    def test_returned_table_is_a_copy(self, cache_file) -> None:
        writer = _enabled(cache_file)
        writer.add("home", Route("/"))
        writer.write_cache()

        reader = _enabled(cache_file)
        reader.fetch_cache()["injected"] = Route("/x").compile()
        reader.fetch_cache().clear()

        assert reader.route_names() == ["home"]
        assert reader.needs_update is False

    def test_fetch_replaces_table(self, cache_file) -> None:
        writer = _enabled(cache_file)
        writer.add("home", Route("/"))
        writer.write_cache()

        reader = _enabled(cache_file)
        reader.fetch_cache()
        assert reader.has("home") is True
        assert reader.needs_update is False


class TestPopulateFromCache:
    def test_cold_cache_leaves_collection(self, cache_file) -> None:
        collection = RouteCollection()
        collection.add("home", Route("/"))
        result = _enabled(cache_file).populate_from_cache(collection)
        assert result is collection
        assert collection.names() == ["home"]

    def test_adds_cached_routes(self, cache_file) -> None:
        writer = _enabled(cache_file)
        writer.add("home", Route("/"))
        writer.add("about", Route("/about"))
        writer.write_cache()

        result = _enabled(cache_file).populate_from_cache(RouteCollection())
        assert result.names() == ["home", "about"]
        assert isinstance(result.get("about"), CompiledRoute)

    def test_cache_wins_on_name_collision(self, cache_file) -> None:
        writer = _enabled(cache_file)
        writer.add("page", Route("/route-b"))
        writer.write_cache()

        collection = RouteCollection()
        collection.add("page", Route("/route-a"))
        collection.add("other", Route("/other"))
        _enabled(cache_file).populate_from_cache(collection)

        assert collection.get("page").path == "/route-b"
        assert collection.get("other").path == "/other"

    def test_corrupt_artifact_propagates(self, cache_file) -> None:
        cache_file.write_bytes(b"not a cache")
        with pytest.raises(InvalidCache):
            _enabled(cache_file).populate_from_cache(RouteCollection())


class TestInvalidateCacheFile:
    def test_removes_artifact(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))
        cache.write_cache()

        cache.invalidate_cache_file()
        assert not cache_file.exists()
        assert _enabled(cache_file).fetch_cache() == {}

    def test_keeps_memory_state(self, cache_file) -> None:
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))
        cache.write_cache()
        cache.add("about", Route("/about"))

        cache.invalidate_cache_file()
        assert cache.has("home") is True
        assert cache.needs_update is True

    def test_missing_file_is_noop(self, cache_file) -> None:
        _enabled(cache_file).invalidate_cache_file()
        assert not cache_file.exists()

    def test_no_file_configured(self) -> None:
        RouteCache(CacheConfig(enabled=True)).invalidate_cache_file()

    def test_directory_not_removed(self, cache_file) -> None:
        cache_file.mkdir()
        _enabled(cache_file).invalidate_cache_file()
        assert cache_file.is_dir()

    def test_corrupt_artifact_removed(self, cache_file) -> None:
        cache_file.write_bytes(b"garbage")
        _enabled(cache_file).invalidate_cache_file()
        assert not cache_file.exists()


class TestWritePermissions:
    def test_rewrite_keeps_artifact_mode(self, cache_file) -> None:
        cache_file.write_bytes(b"")
        cache_file.chmod(0o644)
        cache = _enabled(cache_file)
        cache.add("home", Route("/"))

        cache.write_cache()
        assert cache_file.stat().st_mode & 0o777 == 0o644
