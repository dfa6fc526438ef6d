"""
Tests for the on-disk catalog store.
"""

import pytest

from fanart_resolver.cache import CacheStore
from fanart_resolver.errors import FetchCancelled
from fanart_resolver.transport import CancellationToken


class TestPaths:
    """Path computation is pure and one directory per identifier."""

    def test_layout(self, store, config):
        path = store.path_for("abc")
        assert path == config.cache_root / "fanart-music" / "abc" / "fanart.json"

    def test_distinct_identifiers_do_not_collide(self, store):
        assert store.path_for("a").parent != store.path_for("b").parent

    def test_path_for_does_not_touch_disk(self, store, config):
        store.path_for("abc")
        assert not config.cache_root.exists()

    @pytest.mark.parametrize("identifier", ["", "   "])
    def test_blank_identifier_rejected(self, store, identifier):
        with pytest.raises(ValueError):
            store.path_for(identifier)

    @pytest.mark.parametrize(
        "identifier",
        ["/tmp/outside", "abc/..", "..", ".", "a\\b", "nul\0byte"],
    )
    def test_identifier_must_be_one_path_component(self, store, identifier):
        with pytest.raises(ValueError):
            store.path_for(identifier)


class TestQueries:
    """Existence and mtime queries report absence instead of raising."""

    def test_missing_path(self, store):
        path = store.path_for("missing")
        assert store.exists(path) is False
        assert store.last_modified(path) is None

    def test_written_path(self, store):
        path = store.path_for("abc")
        store.write(path, b"{}")
        assert store.exists(path) is True
        assert store.last_modified(path) is not None


class TestWrites:
    """Writes create parents and publish atomically."""

    def test_write_creates_parents_and_overwrites(self, store):
        path = store.path_for("abc")
        store.write(path, b"first")
        store.write(path, b"second")
        assert path.read_bytes() == b"second"

    def test_stream_write_counts_bytes(self, store):
        path = store.path_for("abc")
        written = store.write_stream(path, [b"ab", b"", b"cde"])
        assert written == 5
        assert path.read_bytes() == b"abcde"

    def test_failed_stream_keeps_previous_copy(self, store):
        path = store.path_for("abc")
        store.write(path, b"previous")

        def broken():
            yield b"partial"
            raise ConnectionError("reset")

        with pytest.raises(ConnectionError):
            store.write_stream(path, broken())

        assert path.read_bytes() == b"previous"
        assert list(path.parent.iterdir()) == [path]

    def test_cancelled_stream_leaves_nothing_behind(self, store):
        path = store.path_for("abc")
        token = CancellationToken()

        def chunks():
            yield b"partial"
            token.cancel()
            yield b"more"

        with pytest.raises(FetchCancelled):
            store.write_stream(path, chunks(), token)

        assert not path.exists()
        assert list(path.parent.iterdir()) == []

    def test_custom_service_dir(self, tmp_path):
        store = CacheStore(tmp_path, service_dir="fanart-tv", filename="catalog.json")
        assert store.path_for("x") == tmp_path / "fanart-tv" / "x" / "catalog.json"
