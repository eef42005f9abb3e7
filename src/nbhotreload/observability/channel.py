"""Append-only reload channel.

The channel is the only user-visible surface of a hot-reload session.  It
receives one line per reload attempt::

    analysis.ipynb: replaced cells [2..3) → 1 cells (ok)

one line per error (``Error: <message>``), and a handful of lifecycle
lines.  Failures never interrupt the user; they only show up here.

Each line is kept in a bounded in-memory buffer (for hosts that render an
output panel) and forwarded to the structured logger.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from .logger import get_logger

CHANNEL_NAME = "Notebook Hot Reload"


class ReloadChannel:
    """Bounded, append-only buffer of human-readable reload lines.

    Parameters
    ----------
    name:
        Display name of the channel.
    max_lines:
        How many recent lines to retain in :attr:`lines`.
    logger:
        Where every line is also logged.  Defaults to the
        ``nbhotreload.channel`` structured logger.
    """

    def __init__(
        self,
        name: str = CHANNEL_NAME,
        *,
        max_lines: int = 1000,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_lines < 1:
            raise ValueError(f"max_lines must be >= 1, got {max_lines}")
        self.name = name
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._log = logger if logger is not None else get_logger("nbhotreload.channel")

    @property
    def lines(self) -> list[str]:
        """Snapshot of the retained lines, oldest first."""
        return list(self._lines)

    def append_line(self, line: str, **fields: Any) -> None:
        """Append an informational line."""
        self._lines.append(line)
        self._log.info(line, extra={"extra_fields": {"channel": self.name, **fields}})

    def append_error(self, message: str, **fields: Any) -> None:
        """Append an ``Error: ...`` line."""
        line = f"Error: {message}"
        self._lines.append(line)
        self._log.warning(line, extra={"extra_fields": {"channel": self.name, **fields}})

    def clear(self) -> None:
        self._lines.clear()
