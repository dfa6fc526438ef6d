"""HTTP capability used for catalog fetches and image pass-through."""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Mapping, Optional, Protocol

import requests

from .errors import FetchCancelled, FetchError

logger = logging.getLogger("fanart_resolver")


class CancellationToken:
    """Cooperative cancellation flag that can be set from any thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise FetchCancelled("Operation cancelled by caller")


class HttpResponse(Protocol):
    """The subset of ``requests.Response`` the resolver relies on."""

    status_code: int
    headers: Mapping[str, str]

    def iter_content(self, chunk_size: int = ...) -> Iterator[bytes]:
        ...

    def close(self) -> None:
        ...


class HttpClient(Protocol):
    def send(
        self,
        url: str,
        *,
        timeout: float,
        cancellation: Optional[CancellationToken] = None,
    ) -> HttpResponse:
        """Issue a GET and return the response without reading the body.

        Non-2xx statuses are returned, not raised. Transport failures raise
        ``FetchError``; an already-cancelled token raises ``FetchCancelled``.
        """
        ...


class RequestsHttpClient:
    """``HttpClient`` backed by a shared ``requests.Session``."""

    def __init__(
        self,
        user_agent: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def send(
        self,
        url: str,
        *,
        timeout: float,
        cancellation: Optional[CancellationToken] = None,
    ) -> requests.Response:
        """Issue a streaming GET for ``url``.

        The token is checked before the request is sent and again once the
        response headers arrive. A ``session.get`` that is already blocked is
        not interrupted by a cancel; it returns or fails when ``timeout``
        elapses. Body chunks are checked by the caller while streaming.
        """
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        try:
            resp = self.session.get(url, timeout=timeout, stream=True)
        except requests.RequestException as exc:
            raise FetchError(f"Request failed: {exc}") from exc
        if cancellation is not None and cancellation.cancelled:
            resp.close()
            raise FetchCancelled("Operation cancelled by caller")
        return resp

    def close(self) -> None:
        self.session.close()
