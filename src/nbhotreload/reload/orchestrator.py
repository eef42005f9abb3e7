"""Reload orchestrator: one reconciliation pass for one document.

A pass reads the external representation, parses it into canonical cells,
reconciles them against the host's live cells, and issues at most one
replace-range edit.  Two guards wrap every pass:

* **Single flight.**  Only one pass runs at a time across the whole
  session.  A pass requested while another is in flight is skipped, not
  queued; the next poll tick picks the change up again if it is still
  outstanding.
* **Self-trigger suppression.**  After an edit is applied the document is
  ignored by the poller for ``suppression_window_seconds``, so that side
  effects of the edit itself are not mistaken for an external change.

Every failure is contained here: the pass is recorded as failed, a line is
written to the reload channel, and nothing propagates to the poller.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from nbhotreload.config import HotReloadConfig
from nbhotreload.converter import parse_notebook
from nbhotreload.diff import CellSequenceView, reconcile, select_matcher
from nbhotreload.document import display_name
from nbhotreload.errors import EditApplyError, NotebookParseError, NotebookReadError
from nbhotreload.models import ReloadOutcome, ReloadResult, ReplaceRange
from nbhotreload.observability import (
    CELLS_REPLACED_TOTAL,
    RELOAD_DURATION_MS,
    RELOADS_TOTAL,
    ReloadChannel,
    document_logger,
    get_logger,
    resolve_metrics,
)

log = get_logger("nbhotreload.orchestrator")


class ReloadOrchestrator:
    """Runs reload passes for the documents a poller reports as changed.

    Parameters
    ----------
    host:
        A :class:`~nbhotreload.host.NotebookHost`.
    source:
        A :class:`~nbhotreload.sources.NotebookSource`.
    config:
        Session configuration.  May be swapped with :meth:`configure`.
    channel:
        Reload channel receiving one line per attempt and per error.
    clock:
        Monotonic clock used for suppression deadlines.
    """

    def __init__(
        self,
        host: Any,
        source: Any,
        config: HotReloadConfig | None = None,
        channel: ReloadChannel | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._host = host
        self._source = source
        self._channel = channel if channel is not None else ReloadChannel()
        self._clock = clock
        self._reloading = False
        # location -> monotonic deadline
        self._suppressed: dict[str, float] = {}
        self.configure(config if config is not None else HotReloadConfig())

    def configure(self, config: HotReloadConfig) -> None:
        """Adopt a new configuration for subsequent passes."""
        self._config = config
        self._matches = select_matcher(config.compare_output_content)
        self._metrics = resolve_metrics(config.metrics)

    @property
    def config(self) -> HotReloadConfig:
        return self._config

    @property
    def reloading(self) -> bool:
        """``True`` while a pass is in flight."""
        return self._reloading

    # -- suppression -------------------------------------------------------

    def is_suppressed(self, location: str) -> bool:
        """Whether *location* is inside its post-edit suppression window."""
        deadline = self._suppressed.get(location)
        if deadline is None:
            return False
        if self._clock() >= deadline:
            del self._suppressed[location]
            return False
        return True

    def suppress(self, location: str) -> None:
        """Start (or restart) the suppression window for *location*."""
        window = self._config.suppression_window_seconds
        if window <= 0:
            return
        now = self._clock()
        for other, deadline in list(self._suppressed.items()):
            if now >= deadline:
                del self._suppressed[other]
        self._suppressed[location] = now + window

    def forget(self, location: str) -> None:
        """Drop any suppression window held for *location*."""
        self._suppressed.pop(location, None)

    def clear(self) -> None:
        """Forget every suppression window."""
        self._suppressed.clear()

    # -- reload pass ---------------------------------------------------------

    async def reload(self, notebook: Any) -> ReloadResult:
        """Run one reconciliation pass for *notebook*.

        Returns
        -------
        ReloadResult
            Never raises for read, parse, edit, or host failures; those are
            reported through the result and the reload channel.
        """
        location: str = notebook.location
        if self._reloading:
            return ReloadResult(location, ReloadOutcome.SKIPPED)

        self._reloading = True
        t0 = time.monotonic()
        try:
            result = await self._reload(notebook, location)
        finally:
            self._reloading = False

        self._metrics.increment(
            RELOADS_TOTAL, tags={"outcome": result.outcome.value},
        )
        self._metrics.timing(
            RELOAD_DURATION_MS,
            (time.monotonic() - t0) * 1000,
            tags={"outcome": result.outcome.value},
        )
        return result

    async def _reload(self, notebook: Any, location: str) -> ReloadResult:
        name = display_name(location)
        fields = {"location": location}
        doc_log = document_logger(log, location)
        replace: ReplaceRange | None = None
        try:
            raw = await self._source.read(location)
            cells = parse_notebook(
                raw,
                self._config.default_language,
                markup_language=self._config.markup_language,
            )

            replace = reconcile(CellSequenceView(notebook), cells, self._matches)
            if replace is None:
                doc_log.debug("no changes")
                return ReloadResult(location, ReloadOutcome.UNCHANGED)

            if self._config.debug_dump_diff:
                doc_log.debug("replace range computed", extra={"extra_fields": {
                    "range": replace,
                    "live_cells": notebook.cell_count,
                    "canonical_cells": len(cells),
                }})

            replacement = cells[replace.start:replace.new_end]
            success = await self._host.apply_replace_range(notebook, replace, replacement)
            self._channel.append_line(
                _describe(name, replace, success),
                location=location,
                ok=bool(success),
            )
            if not success:
                raise EditApplyError(
                    f"{name}: host rejected the replace-range edit",
                    context={
                        **fields,
                        "start": replace.start,
                        "old_end": replace.old_end,
                        "new_end": replace.new_end,
                    },
                )

            self.suppress(location)
            self._metrics.increment(CELLS_REPLACED_TOTAL, replace.inserted)
            return ReloadResult(location, ReloadOutcome.APPLIED, range=replace)

        except NotebookReadError as exc:
            self._channel.append_error(exc.message, **exc.context)
            return ReloadResult(location, ReloadOutcome.READ_FAILED, message=exc.message)

        except NotebookParseError as exc:
            self._channel.append_error(f"{name}: {exc.message}", **fields, **exc.context)
            return ReloadResult(location, ReloadOutcome.PARSE_FAILED, message=exc.message)

        except EditApplyError as exc:
            doc_log.warning(exc.message, extra={"extra_fields": exc.context})
            if "start" not in exc.context:
                # Raised by the host itself, so no FAIL line was written.
                self._channel.append_error(exc.message, **fields)
            return ReloadResult(location, ReloadOutcome.EDIT_FAILED, range=replace, message=exc.message)

        except Exception as exc:
            doc_log.exception("reload failed")
            self._channel.append_error(f"{name}: {exc}", **fields)
            return ReloadResult(location, ReloadOutcome.ERROR, message=str(exc))


def _describe(name: str, replace: ReplaceRange, success: bool) -> str:
    status = "ok" if success else "FAIL"
    return (
        f"{name}: replaced cells [{replace.start}..{replace.old_end}) "
        f"→ {replace.inserted} cells ({status})"
    )
