"""
Tests for the command-line entry point against a pre-populated cache.
"""

import json

from fanart_resolver.cache import CacheStore
from fanart_resolver.cli import main, parse_args
from fanart_resolver.transport import RequestsHttpClient

from conftest import ARTIST_ID


def _seed(tmp_path, sample_catalog):
    store = CacheStore(tmp_path)
    store.write(store.path_for(ARTIST_ID), sample_catalog)


class TestParseArgs:
    """Argument parsing and the implicit default command."""

    def test_default_command_is_resolve(self):
        args = parse_args([ARTIST_ID, "--language", "de"])

        assert args.command == "resolve"
        assert args.identifiers == [ARTIST_ID]
        assert args.language == "de"

    def test_repeated_types(self):
        args = parse_args(["resolve", ARTIST_ID, "--type", "logo", "--type", "art"])

        assert args.image_types == ["logo", "art"]


class TestMain:
    """End-to-end CLI runs that never leave the cache."""

    def test_resolve_json(self, tmp_path, capsys, sample_catalog):
        _seed(tmp_path, sample_catalog)

        code = main([ARTIST_ID, "--json", "--cache-dir", str(tmp_path), "--api-key", "k"])

        payload = json.loads(capsys.readouterr().out)
        assert code == 0
        assert payload[ARTIST_ID][0]["url"] == "https://assets.example.org/bg-none.jpg"
        assert payload[ARTIST_ID][0]["type"] == "backdrop"

    def test_resolve_limit_and_type(self, tmp_path, capsys, sample_catalog):
        _seed(tmp_path, sample_catalog)

        code = main(
            [
                "resolve",
                ARTIST_ID,
                "--json",
                "--limit",
                "1",
                "--type",
                "logo",
                "--cache-dir",
                str(tmp_path),
                "--api-key",
                "k",
            ]
        )

        payload = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [item["url"] for item in payload[ARTIST_ID]] == [
            "https://assets.example.org/logo.png"
        ]

    def test_text_output(self, tmp_path, capsys, sample_catalog):
        _seed(tmp_path, sample_catalog)

        code = main([ARTIST_ID, "--cache-dir", str(tmp_path), "--api-key", "k"])

        out = capsys.readouterr().out
        assert code == 0
        assert f"{ARTIST_ID} (4 images)" in out
        assert "https://assets.example.org/thumb-de.jpg" in out

    def test_missing_api_key(self, tmp_path, monkeypatch):
        monkeypatch.delenv("FANART_API_KEY", raising=False)

        assert main([ARTIST_ID, "--cache-dir", str(tmp_path)]) == 2

    def test_resolve_closes_http_session(self, tmp_path, monkeypatch, sample_catalog):
        _seed(tmp_path, sample_catalog)
        closed = []
        monkeypatch.setattr(RequestsHttpClient, "close", lambda self: closed.append(self))

        assert main([ARTIST_ID, "--json", "--cache-dir", str(tmp_path), "--api-key", "k"]) == 0
        assert len(closed) == 1

    def test_download_closes_http_session(self, tmp_path, monkeypatch):
        _seed(tmp_path, b"{}")
        closed = []
        monkeypatch.setattr(RequestsHttpClient, "close", lambda self: closed.append(self))

        code = main(
            [
                "download",
                ARTIST_ID,
                "--output",
                str(tmp_path / "out"),
                "--cache-dir",
                str(tmp_path),
                "--api-key",
                "k",
            ]
        )

        assert code == 1
        assert len(closed) == 1
