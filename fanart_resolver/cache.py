"""On-disk storage for raw catalog documents."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from .config import CATALOG_FILENAME, SERVICE_DIR_NAME
from .transport import CancellationToken
from .utils import is_blank

logger = logging.getLogger("fanart_resolver")

_SEPARATORS = {"/", "\\", "\0"} | {sep for sep in (os.sep, os.altsep) if sep}


def is_valid_identifier(identifier: Optional[str]) -> bool:
    """True when ``identifier`` can name its own cache directory."""
    if is_blank(identifier) or identifier in (".", ".."):
        return False
    return not any(sep in identifier for sep in _SEPARATORS)


class CacheStore:
    """Maps identifiers to catalog files under a fixed cache root.

    Writes go to a scratch file in the destination directory and are published
    with ``os.replace``, so readers either see the previous document or the
    complete new one.
    """

    def __init__(
        self,
        cache_root: Path,
        service_dir: str = SERVICE_DIR_NAME,
        filename: str = CATALOG_FILENAME,
    ) -> None:
        self.cache_root = Path(cache_root)
        self.service_dir = service_dir
        self.filename = filename

    @property
    def service_root(self) -> Path:
        return self.cache_root / self.service_dir

    def path_for(self, identifier: str) -> Path:
        """Return the catalog path for ``identifier``.

        The identifier must map to exactly one directory under
        ``service_root``; blank values, path separators, NUL and the ``.``
        and ``..`` entries raise ``ValueError``.
        """
        if not is_valid_identifier(identifier):
            raise ValueError(f"identifier {identifier!r} is not a single path component")
        return self.service_root / identifier / self.filename

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def last_modified(self, path: Path) -> Optional[float]:
        """Return the mtime as a POSIX timestamp, or ``None`` when absent."""
        try:
            return path.stat().st_mtime
        except OSError:
            return None

    def write(self, path: Path, data: bytes) -> None:
        self.write_stream(path, [data])

    def write_stream(
        self,
        path: Path,
        chunks: Iterable[bytes],
        cancellation: Optional[CancellationToken] = None,
    ) -> int:
        """Write chunks to a scratch file and atomically publish it at ``path``.

        Raises ``FetchCancelled`` if the token fires between chunks; the
        scratch file is removed and ``path`` is left as it was.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=path.name + ".",
            suffix=".part",
            dir=str(path.parent),
        )
        tmp_path = Path(tmp_name)
        written = 0
        try:
            with os.fdopen(fd, "wb") as handle:
                for chunk in chunks:
                    if cancellation is not None:
                        cancellation.raise_if_cancelled()
                    if not chunk:
                        continue
                    handle.write(chunk)
                    written += len(chunk)
                handle.flush()
                os.fsync(handle.fileno())
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)
        logger.debug("Published %d bytes to %s", written, path)
        return written
