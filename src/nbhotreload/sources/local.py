"""Local filesystem notebook source.

The change signal is the file's modification time in nanoseconds.  Both
the stat and the read run in a worker thread via :func:`asyncio.to_thread`
so a slow disk never blocks the polling loop.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from nbhotreload.errors import NotebookReadError


def _to_path(location: str) -> Path:
    if location.startswith("file://"):
        location = location[len("file://"):]
    return Path(location)


class LocalFileSource:
    """Reads notebooks from the local filesystem."""

    async def stat(self, location: str) -> int:
        """Return the modification time of *location* in nanoseconds."""
        path = _to_path(location)
        try:
            result = await asyncio.to_thread(os.stat, path)
        except OSError as exc:
            raise NotebookReadError(
                f"Cannot stat {path}: {exc.strerror or exc}",
                context={"location": location, "operation": "stat"},
                cause=exc,
            ) from exc
        return result.st_mtime_ns

    async def read(self, location: str) -> bytes:
        """Return the raw bytes of *location*."""
        path = _to_path(location)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise NotebookReadError(
                f"Cannot read {path}: {exc.strerror or exc}",
                context={"location": location, "operation": "read"},
                cause=exc,
            ) from exc

    async def aclose(self) -> None:
        """Nothing to release; present for symmetry with :class:`HttpSource`."""
