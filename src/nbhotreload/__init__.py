"""nbhotreload — keep a live notebook in step with its ``.ipynb`` file.

The external file may be rewritten at any time by agents, scripts or
remote jobs.  A session polls each open notebook's change signal and, when
it moves, replaces the smallest contiguous run of cells that differs, in
one atomic edit.

Public re-exports
-----------------

* **Session:** :class:`HotReloadSession`, :class:`Poller`,
  :class:`ReloadOrchestrator`
* **Configuration:** :class:`HotReloadConfig`
* **Core:** :func:`parse_notebook`, :func:`reconcile`, :func:`cells_match`
* **Host side:** :class:`InMemoryHost`, :class:`NotebookDocument`, sources
* **Errors and models**

Usage::

    from nbhotreload import parse_notebook, reconcile

    live = parse_notebook(old_bytes)
    fresh = parse_notebook(new_bytes)
    edit = reconcile(live, fresh)   # None when nothing changed
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from nbhotreload.config import HotReloadConfig

# ── Core ────────────────────────────────────────────────────────────────
from nbhotreload.converter import convert_output, parse_notebook
from nbhotreload.diff import cells_match, cells_match_strict, reconcile

# ── Host side ───────────────────────────────────────────────────────────
from nbhotreload.document import NotebookDocument
from nbhotreload.errors import (
    EditApplyError,
    ErrorCode,
    HotReloadError,
    NotebookParseError,
    NotebookReadError,
)
from nbhotreload.host import InMemoryHost, LiveCell, LiveNotebook, NotebookHost

# ── Models ──────────────────────────────────────────────────────────────
from nbhotreload.models import (
    CellData,
    CellKind,
    CellOutput,
    OutputItem,
    OutputKind,
    ReloadOutcome,
    ReloadResult,
    ReplaceRange,
    WatchedDocument,
)
from nbhotreload.observability import ReloadChannel

# ── Session ─────────────────────────────────────────────────────────────
from nbhotreload.reload import Poller, ReloadOrchestrator
from nbhotreload.session import HotReloadSession
from nbhotreload.sources import CompositeSource, HttpSource, LocalFileSource, NotebookSource

__all__ = [
    # Session
    "HotReloadSession",
    "Poller",
    "ReloadOrchestrator",
    "ReloadChannel",
    # Configuration
    "HotReloadConfig",
    # Core
    "parse_notebook",
    "convert_output",
    "reconcile",
    "cells_match",
    "cells_match_strict",
    # Host side
    "NotebookHost",
    "LiveNotebook",
    "LiveCell",
    "InMemoryHost",
    "NotebookDocument",
    "NotebookSource",
    "LocalFileSource",
    "HttpSource",
    "CompositeSource",
    # Errors
    "HotReloadError",
    "ErrorCode",
    "NotebookReadError",
    "NotebookParseError",
    "EditApplyError",
    # Models
    "CellKind",
    "CellData",
    "CellOutput",
    "OutputItem",
    "OutputKind",
    "ReplaceRange",
    "WatchedDocument",
    "ReloadOutcome",
    "ReloadResult",
]
