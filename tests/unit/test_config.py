"""Tests for config.py"""

from __future__ import annotations

import json

import pytest

from nbhotreload.config import (
    DEFAULT_POLLING_INTERVAL_MS,
    MAX_POLLING_INTERVAL_MS,
    MIN_POLLING_INTERVAL_MS,
    HotReloadConfig,
    clamp_interval,
)


class TestDefaults:
    def test_defaults(self):
        cfg = HotReloadConfig()
        assert cfg.enabled is True
        assert cfg.polling_interval_ms == 1500
        assert cfg.interval_seconds == 1.5
        assert cfg.suppression_window_seconds == 3.0
        assert cfg.default_language == "python"
        assert cfg.markup_language == "markdown"
        assert cfg.watched_suffix == ".ipynb"
        assert cfg.compare_output_content is False
        assert cfg.metrics is None


class TestClamping:
    @pytest.mark.parametrize(
        ("given", "expected"),
        [(0, 500), (499, 500), (500, 500), (1500, 1500), (10_000, 10_000), (60_000, 10_000), (-5, 500)],
    )
    def test_interval_clamped(self, given, expected):
        assert HotReloadConfig(polling_interval_ms=given).polling_interval_ms == expected

    def test_clamp_interval_bounds(self):
        assert clamp_interval(MIN_POLLING_INTERVAL_MS - 1) == MIN_POLLING_INTERVAL_MS
        assert clamp_interval(MAX_POLLING_INTERVAL_MS + 1) == MAX_POLLING_INTERVAL_MS


class TestValidation:
    def test_negative_suppression_window(self):
        with pytest.raises(ValueError, match="suppression_window_seconds"):
            HotReloadConfig(suppression_window_seconds=-1)

    def test_zero_suppression_window_allowed(self):
        assert HotReloadConfig(suppression_window_seconds=0).suppression_window_seconds == 0

    def test_non_positive_http_timeout(self):
        with pytest.raises(ValueError, match="http_timeout_seconds"):
            HotReloadConfig(http_timeout_seconds=0)

    def test_empty_default_language(self):
        with pytest.raises(ValueError, match="default_language"):
            HotReloadConfig(default_language="")

    def test_replace_revalidates(self):
        cfg = HotReloadConfig().replace(polling_interval_ms=50)
        assert cfg.polling_interval_ms == MIN_POLLING_INTERVAL_MS


class TestFromSettings:
    def test_empty_mapping_gives_defaults(self):
        cfg = HotReloadConfig.from_settings({})
        assert cfg.enabled is True
        assert cfg.polling_interval_ms == DEFAULT_POLLING_INTERVAL_MS

    def test_bare_keys(self):
        cfg = HotReloadConfig.from_settings({"enabled": False, "pollingInterval": 2500})
        assert cfg.enabled is False
        assert cfg.polling_interval_ms == 2500

    def test_qualified_keys_win(self):
        cfg = HotReloadConfig.from_settings({
            "pollingInterval": 2000,
            "notebookHotReload.pollingInterval": 3000,
        })
        assert cfg.polling_interval_ms == 3000

    def test_interval_clamped(self):
        assert HotReloadConfig.from_settings({"pollingInterval": 100}).polling_interval_ms == 500

    def test_mistyped_values_ignored(self):
        cfg = HotReloadConfig.from_settings({"enabled": "no", "pollingInterval": "fast"})
        assert cfg.enabled is True
        assert cfg.polling_interval_ms == DEFAULT_POLLING_INTERVAL_MS

    def test_bool_interval_ignored(self):
        assert HotReloadConfig.from_settings({"pollingInterval": True}).polling_interval_ms == 1500

    def test_unknown_keys_ignored(self):
        cfg = HotReloadConfig.from_settings({"editor.fontSize": 14})
        assert cfg == HotReloadConfig()

    def test_overrides(self):
        cfg = HotReloadConfig.from_settings({}, compare_output_content=True)
        assert cfg.compare_output_content is True

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (float("inf"), MAX_POLLING_INTERVAL_MS),
            (float("-inf"), MIN_POLLING_INTERVAL_MS),
            (float("nan"), DEFAULT_POLLING_INTERVAL_MS),
            (1234.9, 1234),
        ],
    )
    def test_non_finite_interval(self, value, expected):
        assert HotReloadConfig.from_settings({"pollingInterval": value}).polling_interval_ms == expected

    def test_non_finite_from_json_settings(self):
        settings = json.loads('{"notebookHotReload.pollingInterval": Infinity}')
        assert HotReloadConfig.from_settings(settings).polling_interval_ms == MAX_POLLING_INTERVAL_MS

    def test_nan_passed_directly_falls_back(self):
        assert HotReloadConfig(polling_interval_ms=float("nan")).polling_interval_ms == 1500
