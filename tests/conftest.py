"""
Shared fixtures for the resolver tests.

The network is replaced by ``FakeHttpClient``, injected through the
resolver's constructor, so no test performs real I/O beyond ``tmp_path``.
"""

import json
import os
import time
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import pytest

from fanart_resolver.cache import CacheStore
from fanart_resolver.config import ResolverConfig
from fanart_resolver.errors import FetchCancelled, FetchError
from fanart_resolver.resolver import ArtworkResolver

ARTIST_ID = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        chunks: Optional[List[bytes]] = None,
        fail_after: Optional[int] = None,
    ):
        self.status_code = status_code
        self.headers = headers or {}
        self._chunks = chunks if chunks is not None else [body]
        self._fail_after = fail_after
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise ConnectionError("connection reset mid-body")
            yield chunk

    def close(self) -> None:
        self.closed = True


class FakeHttpClient:
    """Records every URL requested and replays queued responses or errors."""

    def __init__(self, *responses):
        self.queue = list(responses)
        self.calls: List[str] = []
        self.closed = False

    def send(self, url, *, timeout, cancellation=None):
        self.calls.append(url)
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        if not self.queue:
            raise AssertionError(f"unexpected request to {url}")
        item = self.queue.pop(0)
        if isinstance(item, (FetchError, FetchCancelled)):
            raise item
        if callable(item):
            return item(url)
        return item

    def close(self) -> None:
        self.closed = True


def make_catalog(**categories) -> bytes:
    document = {"name": "Test Artist", "mbid_id": ARTIST_ID}
    document.update(categories)
    return json.dumps(document).encode("utf-8")


def set_age(path: Path, seconds: float) -> None:
    stamp = time.time() - seconds
    os.utime(path, (stamp, stamp))


@pytest.fixture
def config(tmp_path) -> ResolverConfig:
    return ResolverConfig(cache_root=tmp_path / "cache", api_key="service-key-1234")


@pytest.fixture
def store(config) -> CacheStore:
    return CacheStore(config.cache_root)


@pytest.fixture
def sample_catalog() -> bytes:
    return make_catalog(
        artistbackground=[
            {"id": "1", "url": "http://assets.example.org/bg-en.jpg", "lang": "en", "likes": "4"},
            {"id": "2", "url": "https://assets.example.org/bg-none.jpg", "lang": "", "likes": "9"},
        ],
        artistthumb=[
            {"id": "3", "url": "https://assets.example.org/thumb-de.jpg", "lang": "de", "likes": "1"},
            {"id": "4", "url": "", "lang": "de", "likes": "100"},
        ],
        musiclogo=[
            {"id": "5", "url": "https://assets.example.org/logo.png", "likes": "n/a"},
        ],
        hdmusiclogo=None,
        albums={
            "rg-1": {"albumcover": [{"id": "6", "url": "https://assets.example.org/cover.jpg"}]},
        },
        unknown_field={"ignored": True},
    )


@pytest.fixture
def make_resolver(config, store):
    def _make(*responses) -> ArtworkResolver:
        http = FakeHttpClient(*responses)
        return ArtworkResolver(config, http=http, store=store)

    return _make
