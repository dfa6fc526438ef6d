"""Fetch-or-reuse logic for remote catalog documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .cache import CacheStore
from .config import ResolverConfig
from .errors import FetchCancelled, FetchError
from .freshness import FreshnessPolicy
from .models import EMPTY_CATALOG_DOCUMENT
from .transport import CancellationToken, HttpClient
from .utils import is_blank, mask_secret

logger = logging.getLogger("fanart_resolver")


class FetchStatus(str, Enum):
    FRESH = "fresh"
    SUCCESS = "success"
    EMPTY_NOT_FOUND = "empty_not_found"
    TRANSPORT_ERROR = "transport_error"
    CANCELLED = "cancelled"


@dataclass
class FetchOutcome:
    """Result of ``RemoteFetcher.ensure_fresh``."""

    status: FetchStatus
    path: Path
    error: Optional[FetchError] = None

    @property
    def has_catalog(self) -> bool:
        return self.status in (
            FetchStatus.FRESH,
            FetchStatus.SUCCESS,
            FetchStatus.EMPTY_NOT_FOUND,
        )


def build_catalog_url(config: ResolverConfig, identifier: str) -> str:
    """Format the catalog URL, appending the personal key when one is set."""
    url = config.base_url.format(
        api_key=config.api_key,
        identifier=identifier,
        section=config.section,
    )
    if not is_blank(config.personal_api_key):
        url += "&client_key=" + config.personal_api_key.strip()
    return url


def _masked(url: str, config: ResolverConfig) -> str:
    masked = url
    if config.api_key:
        masked = masked.replace(config.api_key, mask_secret(config.api_key))
    if not is_blank(config.personal_api_key):
        key = config.personal_api_key.strip()
        masked = masked.replace(key, mask_secret(key))
    return masked


class RemoteFetcher:
    """Keeps the cached catalog for an identifier within the freshness window."""

    def __init__(
        self,
        config: ResolverConfig,
        http: HttpClient,
        store: CacheStore,
        policy: Optional[FreshnessPolicy] = None,
    ) -> None:
        self.config = config
        self.http = http
        self.store = store
        self.policy = policy or FreshnessPolicy(store)

    def ensure_fresh(
        self,
        identifier: str,
        cancellation: Optional[CancellationToken] = None,
        force: bool = False,
    ) -> FetchOutcome:
        path = self.store.path_for(identifier)
        if not force and not self.policy.needs_refresh(path):
            logger.debug("Reusing cached catalog for %s", identifier)
            return FetchOutcome(FetchStatus.FRESH, path)
        return self.download(identifier, cancellation)

    def download(
        self,
        identifier: str,
        cancellation: Optional[CancellationToken] = None,
    ) -> FetchOutcome:
        path = self.store.path_for(identifier)
        url = build_catalog_url(self.config, identifier)
        display_url = _masked(url, self.config)
        logger.info("Fetching catalog %s", display_url)

        try:
            if cancellation is not None:
                cancellation.raise_if_cancelled()
            resp = self.http.send(
                url, timeout=self.config.request_timeout, cancellation=cancellation
            )
        except FetchCancelled:
            logger.info("Fetch for %s cancelled before the request completed", identifier)
            return FetchOutcome(FetchStatus.CANCELLED, path)
        except FetchError as exc:
            error = FetchError(
                f"Failed to fetch catalog {display_url}", url=display_url
            )
            error.__cause__ = exc
            return FetchOutcome(FetchStatus.TRANSPORT_ERROR, path, error)

        try:
            if resp.status_code == 404:
                logger.info("No artwork known for %s; caching empty catalog", identifier)
                self.store.write(path, json.dumps(EMPTY_CATALOG_DOCUMENT).encode("utf-8"))
                return FetchOutcome(FetchStatus.EMPTY_NOT_FOUND, path)
            if not 200 <= resp.status_code < 300:
                error = FetchError(
                    f"Catalog request {display_url} returned HTTP {resp.status_code}",
                    url=display_url,
                    status_code=resp.status_code,
                )
                return FetchOutcome(FetchStatus.TRANSPORT_ERROR, path, error)
            written = self.store.write_stream(
                path,
                resp.iter_content(chunk_size=self.config.chunk_size),
                cancellation,
            )
        except FetchCancelled:
            logger.info("Fetch for %s cancelled; keeping previous cache state", identifier)
            return FetchOutcome(FetchStatus.CANCELLED, path)
        except OSError as exc:
            # requests.RequestException derives from IOError, so body read
            # failures land here alongside disk errors.
            error = FetchError(
                f"Failed to store catalog {display_url}: {exc}", url=display_url
            )
            error.__cause__ = exc
            return FetchOutcome(FetchStatus.TRANSPORT_ERROR, path, error)
        finally:
            resp.close()

        logger.info("Cached catalog for %s (%d bytes)", identifier, written)
        return FetchOutcome(FetchStatus.SUCCESS, path)
