"""Change-signal and read primitives for watched notebooks.

Exports
-------
NotebookSource
    Protocol every source satisfies: ``stat`` and ``read``.
LocalFileSource
    Modification-time signals for files on disk.
HttpSource
    ``ETag`` / ``Last-Modified`` signals for notebooks served over HTTP.
CompositeSource
    Dispatches by location scheme.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol, runtime_checkable

from .http import HttpSource
from .local import LocalFileSource


@runtime_checkable
class NotebookSource(Protocol):
    """Where the external representation of a notebook is read from."""

    async def stat(self, location: str) -> Hashable:
        """Return a change signal; a different value means "rewritten"."""
        ...

    async def read(self, location: str) -> bytes:
        """Return the serialized notebook."""
        ...


class CompositeSource:
    """Route ``http(s)://`` locations to an :class:`HttpSource` and the
    rest to a :class:`LocalFileSource`.

    The HTTP source is created lazily so sessions that only watch local
    files never open an HTTP client.
    """

    def __init__(
        self,
        local: LocalFileSource | None = None,
        http: HttpSource | None = None,
        *,
        http_timeout_seconds: float = 10.0,
    ) -> None:
        self._local = local or LocalFileSource()
        self._http = http
        self._http_timeout = http_timeout_seconds

    def _for(self, location: str) -> LocalFileSource | HttpSource:
        if location.startswith(("http://", "https://")):
            if self._http is None:
                self._http = HttpSource(self._http_timeout)
            return self._http
        return self._local

    async def stat(self, location: str) -> Hashable:
        return await self._for(location).stat(location)

    async def read(self, location: str) -> bytes:
        return await self._for(location).read(location)

    async def aclose(self) -> None:
        await self._local.aclose()
        if self._http is not None:
            await self._http.aclose()


__all__ = [
    "CompositeSource",
    "HttpSource",
    "LocalFileSource",
    "NotebookSource",
]
