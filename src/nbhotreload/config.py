"""Configuration for nbhotreload.

:class:`HotReloadConfig` captures every tuneable knob of a hot-reload
session.  Hosts that keep settings in a flat key/value store (using the
camelCase option names ``enabled`` and ``pollingInterval``) can build one
with :meth:`HotReloadConfig.from_settings`.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Polling bounds
# ---------------------------------------------------------------------------

DEFAULT_POLLING_INTERVAL_MS = 1500

MIN_POLLING_INTERVAL_MS = 500

MAX_POLLING_INTERVAL_MS = 10_000

SETTINGS_SECTION = "notebookHotReload"
"""Prefix under which hosts namespace the settings keys."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class HotReloadConfig:
    """Complete configuration for a hot-reload session.

    Every parameter has a default, so ``HotReloadConfig()`` is usable as-is.

    Parameters
    ----------
    enabled:
        When ``False`` polling never starts.
    polling_interval_ms:
        Timer period in milliseconds.  Out-of-range values are clamped to
        ``[500, 10000]`` rather than rejected.
    suppression_window_seconds:
        How long a freshly reloaded document is ignored by the poller, so
        that the edit's own side effects are not mistaken for an external
        change.
    default_language:
        Language tag given to code cells when the notebook does not
        declare ``metadata.kernelspec.language``.
    markup_language:
        Language tag given to every markup cell.
    watched_suffix:
        Only open documents whose location ends with this suffix are
        watched.
    compare_output_content:
        Use the strict comparator, which also compares output content.
        The default compares output *counts* only.
    http_timeout_seconds:
        Request timeout for notebooks served over HTTP.
    metrics:
        Optional :class:`~nbhotreload.observability.MetricsHook`.
    debug_dump_diff:
        Log every computed replace range at ``DEBUG`` level.
    """

    # ── Polling ─────────────────────────────────────────────────────────
    enabled: bool = True

    polling_interval_ms: int = DEFAULT_POLLING_INTERVAL_MS

    suppression_window_seconds: float = 3.0

    watched_suffix: str = ".ipynb"

    # ── Parsing ─────────────────────────────────────────────────────────
    default_language: str = "python"

    markup_language: str = "markdown"

    # ── Reconciliation ──────────────────────────────────────────────────
    compare_output_content: bool = False

    # ── Sources ─────────────────────────────────────────────────────────
    http_timeout_seconds: float = 10.0

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_diff: bool = False

    def __post_init__(self) -> None:
        """Clamp the polling interval and validate the remaining knobs."""
        self.polling_interval_ms = clamp_interval(self.polling_interval_ms)

        if self.suppression_window_seconds < 0:
            raise ValueError(
                f"suppression_window_seconds must be >= 0, got {self.suppression_window_seconds}"
            )
        if self.http_timeout_seconds <= 0:
            raise ValueError(
                f"http_timeout_seconds must be > 0, got {self.http_timeout_seconds}"
            )
        if not self.default_language:
            raise ValueError("default_language must be a non-empty string")

    @property
    def interval_seconds(self) -> float:
        """The (clamped) polling interval in seconds."""
        return self.polling_interval_ms / 1000

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> HotReloadConfig:
        """Build a config from a host key/value settings store.

        Recognised keys are ``enabled`` and ``pollingInterval``, either bare
        or prefixed with ``"notebookHotReload."``.  Unknown keys are
        ignored; missing or mistyped values fall back to the defaults.
        *overrides* are passed straight to the constructor.
        """
        enabled = _lookup(settings, "enabled")
        interval = _lookup(settings, "pollingInterval")

        kwargs: dict[str, Any] = {}
        if isinstance(enabled, bool):
            kwargs["enabled"] = enabled
        if _is_interval(interval):
            kwargs["polling_interval_ms"] = clamp_interval(interval)
        kwargs.update(overrides)
        return cls(**kwargs)

    def replace(self, **changes: Any) -> HotReloadConfig:
        """Return a copy with *changes* applied (re-validated)."""
        return dataclasses.replace(self, **changes)


def clamp_interval(value: float) -> int:
    """Clamp a polling interval (ms) to the supported range.

    Infinities clamp to the nearest bound; NaN falls back to the default.
    """
    if isinstance(value, float) and math.isnan(value):
        return DEFAULT_POLLING_INTERVAL_MS
    return int(max(MIN_POLLING_INTERVAL_MS, min(MAX_POLLING_INTERVAL_MS, value)))


def _is_interval(value: Any) -> bool:
    # bool is an int subclass; NaN is not a usable interval.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _lookup(settings: Mapping[str, Any], key: str) -> Any:
    qualified = f"{SETTINGS_SECTION}.{key}"
    if qualified in settings:
        return settings[qualified]
    return settings.get(key)
