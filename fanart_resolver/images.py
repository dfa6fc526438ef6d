"""Image downloading and validation utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from filetype import guess

from .errors import FetchError
from .models import ImageResult
from .resolver import ArtworkResolver
from .transport import CancellationToken
from .utils import slugify

logger = logging.getLogger("fanart_resolver")

MAX_IMAGE_BYTES = 25 * 1024 * 1024
MIN_IMAGE_BYTES = 512
ALLOWED_IMAGE_TYPES = {"png", "jpg", "gif", "webp", "bmp", "tiff"}


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext in ("jpeg", "jpe"):
            return "jpg"
        if ext == "tif":
            return "tiff"
        return ext
    return None


def infer_image_extension(content_type: Optional[str], data: bytes) -> Optional[str]:
    """Guess an image file extension from the file signature or HTTP metadata."""
    detected = detect_image_format(data)
    if detected:
        return detected
    if not content_type:
        return None
    parts = content_type.split(";")[0].split("/")
    if len(parts) == 2 and parts[0].strip().lower() == "image":
        ext = parts[1].strip().lower()
        if ext == "jpeg":
            ext = "jpg"
        return ext
    return None


def read_image(
    resolver: ArtworkResolver,
    url: str,
    cancellation: Optional[CancellationToken] = None,
) -> Tuple[bytes, str]:
    """Read an image body through the resolver, enforcing the size ceiling."""
    resp = resolver.fetch_image_bytes(url, cancellation)
    try:
        if not 200 <= resp.status_code < 300:
            raise FetchError(
                f"Image request returned HTTP {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            )
        content_type = resp.headers.get("Content-Type", "")
        chunks = []
        total = 0
        for chunk in resp.iter_content(chunk_size=64 * 1024):
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            total += len(chunk)
            if total > MAX_IMAGE_BYTES:
                raise FetchError(
                    f"Image larger than {MAX_IMAGE_BYTES} bytes", url=url
                )
            chunks.append(chunk)
    finally:
        resp.close()
    return b"".join(chunks), content_type


def save_image(
    resolver: ArtworkResolver,
    result: ImageResult,
    output_dir: Path,
    stem: str,
    cancellation: Optional[CancellationToken] = None,
) -> Optional[Path]:
    """Download ``result`` into ``output_dir``; returns ``None`` when rejected."""
    try:
        data, content_type = read_image(resolver, result.url, cancellation)
    except (FetchError, OSError) as exc:
        logger.warning("Failed to fetch image %s: %s", result.url, exc)
        return None

    if len(data) < MIN_IMAGE_BYTES:
        logger.warning("Skipping %s: response too small", result.url)
        return None

    extension = infer_image_extension(content_type, data)
    if not extension or extension not in ALLOWED_IMAGE_TYPES:
        logger.warning(
            "Skipping %s: unsupported image type (Content-Type=%s)",
            result.url,
            content_type,
        )
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{slugify(stem)}-{result.image_type.value}"[:80] + f".{extension}"
    destination = output_dir / filename
    try:
        destination.write_bytes(data)
    except OSError as exc:
        logger.warning("Failed to write image %s: %s", destination, exc)
        return None
    logger.info("Saved %s to %s", result.url, destination)
    return destination
