"""Decides whether a cached catalog can be reused."""

from __future__ import annotations

import time
from datetime import timedelta
from pathlib import Path
from typing import Callable

from .cache import CacheStore
from .config import STALENESS_THRESHOLD


class FreshnessPolicy:
    """Reuse a cache entry until it is older than ``threshold``."""

    def __init__(
        self,
        store: CacheStore,
        threshold: timedelta = STALENESS_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.threshold = threshold
        self.clock = clock

    def needs_refresh(self, path: Path) -> bool:
        if not self.store.exists(path):
            return True
        modified = self.store.last_modified(path)
        if modified is None:
            return True
        # Negative ages (clock skew) fall under the threshold and count as fresh.
        return timedelta(seconds=self.clock() - modified) > self.threshold
