"""High-level orchestration: fetch or reuse, parse, normalize, rank."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .builder import build_results
from .cache import CacheStore, is_valid_identifier
from .catalog import parse_catalog
from .config import PROVIDER_NAME, ResolverConfig
from .errors import CorruptDataError, FetchCancelled, FetchError, NotFoundError
from .fetcher import FetchStatus, RemoteFetcher
from .freshness import FreshnessPolicy
from .models import ImageResult, ImageType
from .ranker import rank
from .transport import CancellationToken, HttpClient, HttpResponse, RequestsHttpClient
from .utils import is_blank

logger = logging.getLogger("fanart_resolver")

SUPPORTED_IMAGE_TYPES = (
    ImageType.PRIMARY,
    ImageType.LOGO,
    ImageType.ART,
    ImageType.BANNER,
    ImageType.BACKDROP,
)


class ArtworkResolver:
    """Resolves ranked artwork for an identifier from the remote catalog."""

    order = 0

    def __init__(
        self,
        config: ResolverConfig,
        http: Optional[HttpClient] = None,
        store: Optional[CacheStore] = None,
        policy: Optional[FreshnessPolicy] = None,
    ) -> None:
        self.config = config
        self._owns_http = http is None
        self.http = http or RequestsHttpClient(config.user_agent)
        self.store = store or CacheStore(config.cache_root)
        self.fetcher = RemoteFetcher(config, self.http, self.store, policy)

    def close(self) -> None:
        """Release the HTTP client if this resolver created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ArtworkResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    def supported_image_types(self) -> List[ImageType]:
        return list(SUPPORTED_IMAGE_TYPES)

    def resolve_images(
        self,
        identifier: str,
        preferred_language: Optional[str],
        image_types: Optional[Iterable[ImageType]] = None,
        cancellation: Optional[CancellationToken] = None,
        force_refresh: bool = False,
    ) -> List[ImageResult]:
        """Return ranked images for ``identifier``.

        Raises ``FetchError`` when a needed refresh fails and ``FetchCancelled``
        when ``cancellation`` fires mid-fetch. A missing or corrupt cached
        catalog yields an empty list.
        """
        if is_blank(identifier):
            return []
        if not is_valid_identifier(identifier):
            logger.warning("Ignoring identifier %r: not usable as a cache key", identifier)
            return []

        outcome = self.fetcher.ensure_fresh(identifier, cancellation, force=force_refresh)
        if outcome.status is FetchStatus.TRANSPORT_ERROR:
            raise outcome.error or FetchError(f"Failed to fetch catalog for {identifier}")
        if outcome.status is FetchStatus.CANCELLED:
            raise FetchCancelled(f"Resolution of {identifier} was cancelled")

        try:
            catalog = parse_catalog(outcome.path)
        except NotFoundError:
            logger.debug("No cached catalog for %s", identifier)
            return []
        except CorruptDataError as exc:
            logger.warning("Ignoring corrupt catalog for %s: %s", identifier, exc.reason)
            return []

        ranked = rank(build_results(catalog, self.name), preferred_language)
        if image_types is not None:
            wanted = {ImageType(kind) for kind in image_types}
            ranked = [result for result in ranked if result.image_type in wanted]
        logger.debug("Resolved %d images for %s", len(ranked), identifier)
        return ranked

    def fetch_image_bytes(
        self,
        url: str,
        cancellation: Optional[CancellationToken] = None,
    ) -> HttpResponse:
        """Pass-through GET for an image URL; the body is left unread."""
        return self.http.send(
            url, timeout=self.config.request_timeout, cancellation=cancellation
        )
