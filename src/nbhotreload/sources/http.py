"""HTTP notebook source.

Notebooks written by remote jobs are often only reachable over HTTP.  The
change signal is taken from the response validators: ``ETag`` first, then
``Last-Modified``.  Servers that send neither are stat'ed with a GET and
the body digest becomes the signal.

Transport failures and non-2xx responses raise
:class:`~nbhotreload.errors.NotebookReadError`; the poller treats those as
transient and tries again on the next tick.
"""

from __future__ import annotations

import httpx

from nbhotreload.errors import NotebookReadError
from nbhotreload.utils.hashing import md5_hash


class HttpSource:
    """Async HTTP source backed by a shared :class:`httpx.AsyncClient`.

    Parameters
    ----------
    timeout_seconds:
        Per-request timeout.
    client:
        Optional pre-configured client (e.g. with auth headers or a mock
        transport).  A client passed in is not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def stat(self, location: str) -> str:
        """Return a change signal for *location*.

        Tries ``HEAD`` first; falls back to a body digest from ``GET`` when
        the server offers no validators (or does not support ``HEAD``).
        """
        response = await self._send("HEAD", location, operation="stat", allow_status={405, 501})
        if response.status_code < 400:
            signal = _validator(response)
            if signal is not None:
                return signal

        response = await self._send("GET", location, operation="stat")
        return _validator(response) or f"md5:{md5_hash(response.content)}"

    async def read(self, location: str) -> bytes:
        """GET *location* and return the response body."""
        response = await self._send("GET", location, operation="read")
        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(
        self,
        method: str,
        location: str,
        *,
        operation: str,
        allow_status: set[int] | frozenset[int] = frozenset(),
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, location)
        except httpx.HTTPError as exc:
            raise NotebookReadError(
                f"Network error on {method} {location}: {exc}",
                context={"location": location, "operation": operation},
                cause=exc,
            ) from exc

        if response.status_code >= 400 and response.status_code not in allow_status:
            raise NotebookReadError(
                f"{method} {location} returned HTTP {response.status_code}",
                context={
                    "location": location,
                    "operation": operation,
                    "status_code": response.status_code,
                },
            )
        return response


def _validator(response: httpx.Response) -> str | None:
    etag = response.headers.get("etag")
    if etag:
        return f"etag:{etag}"
    last_modified = response.headers.get("last-modified")
    if last_modified:
        return f"last-modified:{last_modified}"
    return None
