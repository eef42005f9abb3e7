"""Change detector: the timer loop that drives every reload.

On each tick the poller asks the host which notebooks are open, stats each
one, and hands the documents whose change signal moved to the
:class:`~nbhotreload.reload.orchestrator.ReloadOrchestrator`.

The first time a document is seen its signal only becomes the baseline;
the live content is considered current at that point, so no reload is
triggered.  Baselines are dropped when a document closes and when polling
stops.

Ticks never overlap: the loop awaits the whole tick before sleeping again,
and :meth:`Poller.stop` lets a tick that is already running finish.
"""

from __future__ import annotations

import asyncio
from typing import Any

from nbhotreload.config import HotReloadConfig
from nbhotreload.errors import NotebookReadError
from nbhotreload.models import ReloadOutcome, ReloadResult, WatchedDocument
from nbhotreload.observability import (
    POLLS_TOTAL,
    WATCHED_DOCUMENTS,
    ReloadChannel,
    document_logger,
    get_logger,
    resolve_metrics,
)

from .orchestrator import ReloadOrchestrator

log = get_logger("nbhotreload.poller")


class Poller:
    """Periodically checks watched notebooks for external changes.

    Parameters
    ----------
    host:
        A :class:`~nbhotreload.host.NotebookHost` listing open notebooks.
    source:
        A :class:`~nbhotreload.sources.NotebookSource` providing signals.
    orchestrator:
        Runs the reload pass for documents whose signal advanced.
    config:
        Polling configuration (interval, suffix filter, metrics).
    channel:
        Reload channel for lifecycle lines.
    """

    def __init__(
        self,
        host: Any,
        source: Any,
        orchestrator: ReloadOrchestrator,
        config: HotReloadConfig | None = None,
        channel: ReloadChannel | None = None,
    ) -> None:
        self._host = host
        self._source = source
        self._orchestrator = orchestrator
        self._config = config if config is not None else orchestrator.config
        self._channel = channel if channel is not None else ReloadChannel()
        self._metrics = resolve_metrics(self._config.metrics)
        self._watched: dict[str, WatchedDocument] = {}
        self._task: asyncio.Task[None] | None = None
        self._stopping: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        """``True`` while the loop is ticking and has not been asked to stop."""
        return (
            self._task is not None
            and not self._task.done()
            and self._stopping is not None
            and not self._stopping.is_set()
        )

    @property
    def watched(self) -> dict[str, WatchedDocument]:
        """Snapshot of the watched documents keyed by location."""
        return dict(self._watched)

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> bool:
        """Start the timer loop on the running event loop.

        Returns ``False`` (and logs why) when polling is disabled.
        """
        if not self._config.enabled:
            self._channel.append_line("Hot reload is disabled via settings.")
            return False
        if self.running:
            return True

        self._stopping = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._stopping), name="nbhotreload-poller",
        )
        self._channel.append_line(
            f"Polling every {self._config.polling_interval_ms}ms "
            f"for {self._config.watched_suffix} changes...",
            interval_ms=self._config.polling_interval_ms,
        )
        return True

    def stop(self) -> None:
        """Stop ticking.  A tick already in progress runs to completion."""
        if self._stopping is not None:
            self._stopping.set()
        self._watched.clear()

    async def wait_stopped(self) -> None:
        """Wait until the loop has exited after :meth:`stop`."""
        task = self._task
        if task is not None:
            await task
            self._task = None

    async def _run(self, stopping: asyncio.Event) -> None:
        interval = self._config.interval_seconds
        while not stopping.is_set():
            try:
                await asyncio.wait_for(stopping.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            if stopping.is_set():
                break
            try:
                await self.poll_once()
            except Exception:
                # A tick must never take the timer down with it.
                log.exception("poll tick failed")

    # -- single tick ---------------------------------------------------------

    async def poll_once(self) -> list[ReloadResult]:
        """Run one tick and return the results of any reloads it triggered."""
        self._metrics.increment(POLLS_TOTAL)
        if self._orchestrator.reloading:
            return []

        suffix = self._config.watched_suffix
        notebooks = [
            notebook for notebook in self._host.open_notebooks()
            if notebook.location.endswith(suffix)
        ]
        self._forget_closed({notebook.location for notebook in notebooks})
        self._metrics.gauge(WATCHED_DOCUMENTS, len(notebooks))

        results: list[ReloadResult] = []
        for notebook in notebooks:
            location = notebook.location
            if self._orchestrator.reloading:
                break
            if self._orchestrator.is_suppressed(location):
                continue

            try:
                signal = await self._source.stat(location)
            except NotebookReadError as exc:
                document_logger(log, location, error=exc.message).debug("stat failed")
                continue
            except Exception as exc:
                # One unreadable document must not starve the others.
                document_logger(log, location, error=str(exc)).debug(
                    "stat raised", exc_info=True,
                )
                continue

            watched = self._watched.get(location)
            if watched is None:
                self._watched[location] = WatchedDocument(location, signal)
                continue

            if signal != watched.last_signal:
                previous, watched.last_signal = watched.last_signal, signal
                result = await self._orchestrator.reload(notebook)
                if result.outcome is ReloadOutcome.SKIPPED:
                    # Not consumed; let a later tick see the change again.
                    watched.last_signal = previous
                results.append(result)

        return results

    def _forget_closed(self, open_locations: set[str]) -> None:
        for location in list(self._watched):
            if location not in open_locations:
                del self._watched[location]
                self._orchestrator.forget(location)
