"""Deserialization of cached catalog documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import CorruptDataError, NotFoundError
from .models import RawAlbum, RawCatalog, RawImage

logger = logging.getLogger("fanart_resolver")

IMAGE_LIST_FIELDS = (
    "artistbackground",
    "artistthumb",
    "hdmusiclogo",
    "musicbanner",
    "musiclogo",
    "hdmusicarts",
    "musicarts",
)
_IMAGE_FIELDS = ("url", "lang", "likes", "id", "disc", "size")


def _optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        # One malformed value drops that field only, not the whole catalog.
        logger.debug("Ignoring non-scalar value for %r: %r", field_name, value)
        return None
    return str(value)


def _parse_image(entry: Any) -> RawImage:
    if not isinstance(entry, dict):
        raise ValueError("image entries must be objects")
    return RawImage(**{name: _optional_text(entry.get(name), name) for name in _IMAGE_FIELDS})


def _parse_images(value: Any, field_name: str) -> List[RawImage]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {field_name!r} must be a list")
    return [_parse_image(entry) for entry in value]


def _parse_album(entry: Any, release_group_id: Optional[str] = None) -> RawAlbum:
    if not isinstance(entry, dict):
        raise ValueError("album entries must be objects")
    return RawAlbum(
        release_group_id=_optional_text(
            entry.get("release_group_id", release_group_id), "release_group_id"
        ),
        cdart=_parse_images(entry.get("cdart"), "cdart"),
        albumcover=_parse_images(entry.get("albumcover"), "albumcover"),
    )


def _parse_albums(value: Any) -> List[RawAlbum]:
    # The live service keys albums by release group; older documents use a list.
    if value is None:
        return []
    if isinstance(value, dict):
        return [_parse_album(entry, key) for key, entry in value.items()]
    if isinstance(value, list):
        return [_parse_album(entry) for entry in value]
    raise ValueError("field 'albums' must be a list or an object")


def parse_document(document: Dict[str, Any]) -> RawCatalog:
    """Map a decoded JSON object onto ``RawCatalog``; unknown keys are ignored."""
    images: Dict[str, List[RawImage]] = {
        name: _parse_images(document.get(name), name) for name in IMAGE_LIST_FIELDS
    }
    return RawCatalog(
        name=_optional_text(document.get("name"), "name"),
        mbid_id=_optional_text(document.get("mbid_id"), "mbid_id"),
        albums=_parse_albums(document.get("albums")),
        **images,
    )


def parse_catalog(path: Path) -> RawCatalog:
    """Read and parse the catalog stored at ``path``.

    Raises ``NotFoundError`` when the file is absent and ``CorruptDataError``
    when it is not a catalog-shaped JSON object.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError(path) from exc
    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptDataError(path, str(exc)) from exc
    if not isinstance(document, dict):
        raise CorruptDataError(path, "top-level value is not an object")
    try:
        return parse_document(document)
    except ValueError as exc:
        raise CorruptDataError(path, str(exc)) from exc
