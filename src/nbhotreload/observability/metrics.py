"""Metrics hook protocol and no-op default implementation.

nbhotreload emits counters, timings, and gauges around polling and
reloading.  By default a :class:`NoopMetricsHook` is used.  Anything
satisfying :class:`MetricsHook` can be passed as ``HotReloadConfig.metrics``
to route the data points to a real backend.

Emitted metric names (module constants):

* :data:`POLLS_TOTAL`          -- counter, one per tick
* :data:`RELOADS_TOTAL`        -- counter, tagged ``outcome``
* :data:`CELLS_REPLACED_TOTAL` -- counter, cells inserted by applied edits
* :data:`RELOAD_DURATION_MS`   -- timing, tagged ``outcome``
* :data:`WATCHED_DOCUMENTS`    -- gauge, open documents passing the suffix filter

Hosts that only want running totals for a status display can use
:class:`CountingMetricsHook` instead of wiring a backend.
"""

from __future__ import annotations

from collections import Counter
from typing import Protocol, runtime_checkable

POLLS_TOTAL = "nbhotreload.polls_total"
RELOADS_TOTAL = "nbhotreload.reloads_total"
CELLS_REPLACED_TOTAL = "nbhotreload.cells_replaced_total"
RELOAD_DURATION_MS = "nbhotreload.reload_duration_ms"
WATCHED_DOCUMENTS = "nbhotreload.watched_documents"

METRIC_NAMES = frozenset({
    POLLS_TOTAL,
    RELOADS_TOTAL,
    CELLS_REPLACED_TOTAL,
    RELOAD_DURATION_MS,
    WATCHED_DOCUMENTS,
})


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


class CountingMetricsHook:
    """Keeps running totals in memory.

    Counters are keyed by ``(name, outcome)`` where *outcome* is the
    ``outcome`` tag or ``None``; gauges keep their latest value; timings
    keep the last duration and a sample count per name.
    """

    def __init__(self) -> None:
        self.counters: Counter[tuple[str, str | None]] = Counter()
        self.gauges: dict[str, float] = {}
        self.last_timing: dict[str, float] = {}
        self.timing_samples: Counter[str] = Counter()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.counters[(name, (tags or {}).get("outcome"))] += value

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.last_timing[name] = ms
        self.timing_samples[name] += 1

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges[name] = value

    def total(self, name: str) -> int:
        """Sum of a counter across every ``outcome`` tag."""
        return sum(v for (n, _), v in self.counters.items() if n == name)


def resolve_metrics(metrics: MetricsHook | None) -> MetricsHook:
    """Return *metrics*, or a shared no-op hook when it is ``None``."""
    return metrics if metrics is not None else _NOOP


_NOOP = NoopMetricsHook()
