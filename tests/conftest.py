"""Shared test fixtures for the nbhotreload test suite."""

from __future__ import annotations

import json
from typing import Any

import pytest

from nbhotreload.config import HotReloadConfig
from nbhotreload.errors import NotebookReadError
from nbhotreload.host import InMemoryHost
from nbhotreload.observability import ReloadChannel


def code_cell(
    source: str | list[str],
    execution_count: int | None = None,
    outputs: list[dict] | None = None,
) -> dict[str, Any]:
    """Build an nbformat code cell dict."""
    return {
        "cell_type": "code",
        "source": source,
        "metadata": {},
        "execution_count": execution_count,
        "outputs": outputs or [],
    }


def markdown_cell(source: str | list[str]) -> dict[str, Any]:
    """Build an nbformat markdown cell dict."""
    return {"cell_type": "markdown", "source": source, "metadata": {}}


def stream_output(text: str | list[str], name: str = "stdout") -> dict[str, Any]:
    return {"output_type": "stream", "name": name, "text": text}


def notebook_bytes(cells: list[dict], language: str | None = "python") -> bytes:
    """Serialize *cells* as an nbformat 4 document."""
    metadata: dict[str, Any] = {}
    if language is not None:
        metadata["kernelspec"] = {"name": language, "language": language, "display_name": language}
    return json.dumps({
        "cells": cells,
        "metadata": metadata,
        "nbformat": 4,
        "nbformat_minor": 5,
    }).encode("utf-8")


class FakeSource:
    """In-memory NotebookSource: signals and bytes are set by the test."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.signals: dict[str, int] = {}
        self.stat_calls: list[str] = []
        self.read_calls: list[str] = []

    def write(self, location: str, raw: bytes) -> None:
        self.files[location] = raw
        self.signals[location] = self.signals.get(location, 0) + 1

    async def stat(self, location: str) -> int:
        self.stat_calls.append(location)
        if location not in self.signals:
            raise NotebookReadError("missing", context={"location": location, "operation": "stat"})
        return self.signals[location]

    async def read(self, location: str) -> bytes:
        self.read_calls.append(location)
        if location not in self.files:
            raise NotebookReadError("missing", context={"location": location, "operation": "read"})
        return self.files[location]

    async def aclose(self) -> None:
        pass


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def config() -> HotReloadConfig:
    """Default test configuration."""
    return HotReloadConfig()


@pytest.fixture
def channel() -> ReloadChannel:
    return ReloadChannel()


@pytest.fixture
def host() -> InMemoryHost:
    return InMemoryHost()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
