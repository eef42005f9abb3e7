"""Tests for reload/orchestrator.py"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import FakeClock, FakeSource, code_cell, markdown_cell, notebook_bytes
from nbhotreload.config import HotReloadConfig
from nbhotreload.document import NotebookDocument
from nbhotreload.errors import EditApplyError
from nbhotreload.host import InMemoryHost
from nbhotreload.models import ReloadOutcome, ReplaceRange
from nbhotreload.observability import ReloadChannel
from nbhotreload.reload.orchestrator import ReloadOrchestrator

LOC = "/work/analysis.ipynb"

BASE = [markdown_cell("# Analysis"), code_cell("a = 1", 1), code_cell("b = 2", 2)]


def _setup(cells=BASE, config=None, clock=None):
    source = FakeSource()
    source.write(LOC, notebook_bytes(cells))
    doc = NotebookDocument.from_bytes(LOC, notebook_bytes(cells))
    host = InMemoryHost([doc])
    channel = ReloadChannel()
    kwargs = {"clock": clock} if clock is not None else {}
    orch = ReloadOrchestrator(host, source, config or HotReloadConfig(), channel, **kwargs)
    return orch, source, doc, host, channel


class TestReloadPass:
    async def test_unchanged_issues_no_edit(self):
        orch, _, doc, _, channel = _setup()
        result = await orch.reload(doc)
        assert result.outcome is ReloadOutcome.UNCHANGED
        assert result.ok
        assert doc.version == 0
        assert channel.lines == []

    async def test_middle_edit_applied(self):
        orch, source, doc, _, channel = _setup()
        source.write(LOC, notebook_bytes([BASE[0], code_cell("a = 10", 1), BASE[2]]))

        result = await orch.reload(doc)

        assert result.outcome is ReloadOutcome.APPLIED
        assert result.range == ReplaceRange(1, 2, 2)
        assert [c.source for c in doc.cells] == ["# Analysis", "a = 10", "b = 2"]
        assert channel.lines == ["analysis.ipynb: replaced cells [1..2) → 1 cells (ok)"]

    async def test_append_applied(self):
        orch, source, doc, _, channel = _setup()
        source.write(LOC, notebook_bytes([*BASE, code_cell("c = 3")]))

        result = await orch.reload(doc)

        assert result.range == ReplaceRange(3, 3, 4)
        assert doc.cell_count == 4
        assert channel.lines == ["analysis.ipynb: replaced cells [3..3) → 1 cells (ok)"]

    async def test_only_replacement_slice_sent_to_host(self):
        orch, source, doc, host, _ = _setup()
        new_cells = [BASE[0], code_cell("x"), code_cell("y"), BASE[2]]
        source.write(LOC, notebook_bytes(new_cells))
        host.apply_replace_range = AsyncMock(return_value=True)

        await orch.reload(doc)

        host.apply_replace_range.assert_awaited_once()
        _, rng, cells = host.apply_replace_range.await_args.args
        assert rng == ReplaceRange(1, 2, 3)
        assert [c.source for c in cells] == ["x", "y"]

    async def test_uses_configured_default_language(self):
        cfg = HotReloadConfig(default_language="julia")
        orch, source, doc, _, _ = _setup(config=cfg)
        raw = notebook_bytes([*BASE, code_cell("println(1)")], language=None)
        source.write(LOC, raw)
        await orch.reload(doc)
        assert doc.cell_at(3).language == "julia"


class TestFailures:
    async def test_read_failure(self):
        orch, source, doc, _, channel = _setup()
        source.files.pop(LOC)
        result = await orch.reload(doc)
        assert result.outcome is ReloadOutcome.READ_FAILED
        assert not result.ok
        assert channel.lines == ["Error: missing"]
        assert not orch.reloading

    async def test_parse_failure(self):
        orch, source, doc, _, channel = _setup()
        source.write(LOC, b"{ half written")
        result = await orch.reload(doc)
        assert result.outcome is ReloadOutcome.PARSE_FAILED
        assert doc.version == 0
        assert len(channel.lines) == 1
        assert channel.lines[0].startswith("Error: analysis.ipynb: Notebook is not valid JSON")
        assert not orch.reloading

    async def test_missing_cells_is_parse_failure(self):
        orch, source, doc, _, _ = _setup()
        source.write(LOC, b'{"metadata": {}}')
        result = await orch.reload(doc)
        assert result.outcome is ReloadOutcome.PARSE_FAILED

    async def test_host_rejects_edit(self):
        orch, source, doc, host, channel = _setup()
        source.write(LOC, notebook_bytes([BASE[0]]))
        host.apply_replace_range = AsyncMock(return_value=False)

        result = await orch.reload(doc)

        assert result.outcome is ReloadOutcome.EDIT_FAILED
        assert result.range == ReplaceRange(1, 3, 1)
        assert channel.lines == ["analysis.ipynb: replaced cells [1..3) → 0 cells (FAIL)"]
        assert not orch.is_suppressed(LOC)

    async def test_host_raises_edit_error(self):
        orch, source, doc, host, channel = _setup()
        source.write(LOC, notebook_bytes([BASE[0]]))
        host.apply_replace_range = AsyncMock(side_effect=EditApplyError("document is read-only"))

        result = await orch.reload(doc)

        assert result.outcome is ReloadOutcome.EDIT_FAILED
        assert channel.lines == ["Error: document is read-only"]

    async def test_unexpected_host_error_contained(self):
        orch, source, doc, host, channel = _setup()
        source.write(LOC, notebook_bytes([BASE[0]]))
        host.apply_replace_range = AsyncMock(side_effect=RuntimeError("editor crashed"))

        result = await orch.reload(doc)

        assert result.outcome is ReloadOutcome.ERROR
        assert channel.lines == ["Error: analysis.ipynb: editor crashed"]
        assert not orch.reloading

    async def test_cancellation_propagates_and_releases_flag(self):
        orch, source, doc, host, _ = _setup()
        source.write(LOC, notebook_bytes([BASE[0]]))
        host.apply_replace_range = AsyncMock(side_effect=asyncio.CancelledError)
        with pytest.raises(asyncio.CancelledError):
            await orch.reload(doc)
        assert not orch.reloading


class TestSingleFlight:
    async def test_concurrent_reload_skipped(self):
        orch, source, doc, host, _ = _setup()
        source.write(LOC, notebook_bytes([BASE[0]]))
        gate = asyncio.Event()

        async def slow_apply(notebook, rng, cells):
            await gate.wait()
            notebook.replace_cells(rng.start, rng.old_end, cells)
            return True

        host.apply_replace_range = slow_apply
        first = asyncio.create_task(orch.reload(doc))
        await asyncio.sleep(0)
        assert orch.reloading

        other = NotebookDocument("/work/other.ipynb")
        second = await orch.reload(other)
        assert second.outcome is ReloadOutcome.SKIPPED

        gate.set()
        assert (await first).outcome is ReloadOutcome.APPLIED
        assert not orch.reloading


class TestSuppression:
    async def test_suppressed_after_apply(self):
        clock = FakeClock()
        orch, source, doc, _, _ = _setup(clock=clock)
        source.write(LOC, notebook_bytes([BASE[0]]))

        await orch.reload(doc)

        assert orch.is_suppressed(LOC)
        clock.advance(2.9)
        assert orch.is_suppressed(LOC)
        clock.advance(0.2)
        assert not orch.is_suppressed(LOC)

    async def test_not_suppressed_when_unchanged(self):
        orch, _, doc, _, _ = _setup()
        await orch.reload(doc)
        assert not orch.is_suppressed(LOC)

    async def test_zero_window_disables_suppression(self):
        orch, source, doc, _, _ = _setup(config=HotReloadConfig(suppression_window_seconds=0))
        source.write(LOC, notebook_bytes([BASE[0]]))
        await orch.reload(doc)
        assert not orch.is_suppressed(LOC)

    def test_expired_windows_pruned_on_suppress(self):
        clock = FakeClock()
        orch, *_ = _setup(clock=clock)
        orch.suppress("/work/closed.ipynb")
        clock.advance(5)
        orch.suppress(LOC)
        assert set(orch._suppressed) == {LOC}

    def test_forget(self):
        orch, *_ = _setup()
        orch.suppress(LOC)
        orch.forget(LOC)
        orch.forget("/never/seen.ipynb")
        assert not orch.is_suppressed(LOC)

    def test_clear(self):
        orch, *_ = _setup()
        orch.suppress(LOC)
        orch.clear()
        assert not orch.is_suppressed(LOC)


class TestComparatorSelection:
    async def test_output_content_ignored_by_default(self):
        out1 = [{"output_type": "stream", "name": "stdout", "text": "1\n"}]
        out2 = [{"output_type": "stream", "name": "stdout", "text": "2\n"}]
        orch, source, doc, _, _ = _setup(cells=[code_cell("print(x)", 1, out1)])
        source.write(LOC, notebook_bytes([code_cell("print(x)", 1, out2)]))
        assert (await orch.reload(doc)).outcome is ReloadOutcome.UNCHANGED

    async def test_strict_mode_detects_output_content(self):
        out1 = [{"output_type": "stream", "name": "stdout", "text": "1\n"}]
        out2 = [{"output_type": "stream", "name": "stdout", "text": "2\n"}]
        cfg = HotReloadConfig(compare_output_content=True)
        orch, source, doc, _, _ = _setup(cells=[code_cell("print(x)", 1, out1)], config=cfg)
        source.write(LOC, notebook_bytes([code_cell("print(x)", 1, out2)]))
        result = await orch.reload(doc)
        assert result.outcome is ReloadOutcome.APPLIED
        assert doc.cell_at(0).outputs[0].items[0].data == "2\n"

    async def test_configure_switches_matcher(self):
        out1 = [{"output_type": "stream", "name": "stdout", "text": "1\n"}]
        out2 = [{"output_type": "stream", "name": "stdout", "text": "2\n"}]
        orch, source, doc, _, _ = _setup(cells=[code_cell("print(x)", 1, out1)])
        orch.configure(HotReloadConfig(compare_output_content=True))
        source.write(LOC, notebook_bytes([code_cell("print(x)", 1, out2)]))
        assert (await orch.reload(doc)).outcome is ReloadOutcome.APPLIED
