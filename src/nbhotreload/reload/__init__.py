"""Polling and reload orchestration.

Exports
-------
Poller
    Timer loop that detects external changes and triggers reloads.
ReloadOrchestrator
    Runs one single-flight reconciliation pass per changed document.
"""

from .orchestrator import ReloadOrchestrator
from .poller import Poller

__all__ = [
    "Poller",
    "ReloadOrchestrator",
]
