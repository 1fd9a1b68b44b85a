"""HTTP transport primitive used by every network adapter.

The contract is intentionally small: issue one request, hand back the status
code and the body text. Non-2xx responses are returned, never raised, so each
adapter decides what a rejection means for its backend. Network-level faults
are raised as :class:`TransportError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType
from typing import Mapping, Optional, Type

import httpx

from .exceptions import TransportError
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status code and body text of a completed HTTP exchange."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpTransport(ABC):
    """Abstract transport consumed by the adapters."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
    ) -> HttpResponse:
        """Send one request and return the raw response.

        Raises:
            TransportError: If the request could not be completed.
        """
        ...

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(
        self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[TracebackType]
    ) -> None:
        await self.aclose()


class HttpxTransport(HttpTransport):
    """:class:`HttpTransport` backed by ``httpx.AsyncClient``.

    The client is created lazily on first use unless one is injected. An
    injected client is owned by the caller and is not closed by ``aclose``.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[str] = None,
    ) -> HttpResponse:
        logger.debug("%s %s", method, url)
        content = body.encode("utf-8") if body is not None else None
        try:
            response = await self._get_client().request(method, url, headers=dict(headers or {}), content=content)
        except httpx.HTTPError as exc:
            msg = f"{type(exc).__name__} during {method} {url}: {exc}"
            logger.warning(msg)
            raise TransportError(msg) from exc

        logger.debug("%s %s -> %d", method, url, response.status_code)
        return HttpResponse(status=response.status_code, text=response.text)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
