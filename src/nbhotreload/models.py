"""Data models for the nbhotreload package.

Every type here is a plain dataclass or enum.  Cells are recreated
wholesale on every reconciliation pass and carry no identity beyond their
position in a sequence; nothing in this module tracks "the same cell
moved".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

ERROR_MIME = "application/vnd.code.notebook.error"
"""MIME type carried by the single item of an ``ERROR`` output."""


class CellKind(str, Enum):
    """Kind of a notebook cell."""

    CODE = "code"
    """Executable source in the document's kernel language."""

    MARKUP = "markup"
    """Prose.  Every external ``cell_type`` other than ``"code"`` maps here."""


class OutputKind(str, Enum):
    """Kind of an execution result attached to a cell."""

    STREAM = "stream"
    RESULT = "execute_result"
    DISPLAY_DATA = "display_data"
    ERROR = "error"


class ReloadOutcome(str, Enum):
    """What a single reload cycle ended up doing."""

    APPLIED = "applied"
    """A replace-range edit was issued and the host accepted it."""

    UNCHANGED = "unchanged"
    """The parsed document matched the live cells; no edit was issued."""

    EDIT_FAILED = "edit_failed"
    """The host rejected the replace-range edit."""

    READ_FAILED = "read_failed"
    """The external representation could not be read."""

    PARSE_FAILED = "parse_failed"
    """The external representation was not a valid notebook."""

    SKIPPED = "skipped"
    """Another reload was in flight, so this one never started."""

    ERROR = "error"
    """The host collaborator raised something unexpected."""


# ---------------------------------------------------------------------------
# Cell records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutputItem:
    """A single rendered artifact inside an :class:`CellOutput`.

    Attributes
    ----------
    mime:
        MIME type tag, e.g. ``"text/plain"`` or ``"image/png"``.
    data:
        ``str`` for textual payloads, ``bytes`` for decoded binary
        payloads (``image/*``).
    """

    mime: str
    data: str | bytes

    @property
    def is_binary(self) -> bool:
        return isinstance(self.data, bytes)


@dataclass
class CellOutput:
    """One execution result owned by a :class:`CellData`."""

    kind: OutputKind
    items: list[OutputItem] = field(default_factory=list)


@dataclass
class CellData:
    """Canonical cell record produced by the parser.

    Attributes
    ----------
    kind:
        :attr:`CellKind.CODE` or :attr:`CellKind.MARKUP`.
    source:
        Verbatim source text (fragments already joined).
    language:
        Kernel language for code cells, the markup tag otherwise.
    execution_order:
        Non-negative execution counter, or ``None`` when never executed.
    outputs:
        Execution results, in order.  Never contains an empty output.
    """

    kind: CellKind
    source: str
    language: str
    execution_order: int | None = None
    outputs: list[CellOutput] = field(default_factory=list)

    # The live-cell accessor names, so a CellData can stand in for a live
    # cell on either side of the comparator.
    @property
    def text(self) -> str:
        return self.source

    @property
    def output_count(self) -> int:
        return len(self.outputs)


# ---------------------------------------------------------------------------
# Reconciliation types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReplaceRange:
    """Minimal contiguous edit between a live and a canonical sequence.

    Live cells ``[start, old_end)`` are replaced with canonical cells
    ``[start, new_end)``.

    Attributes
    ----------
    start:
        First differing index (shared by both sequences).
    old_end:
        Exclusive end of the replaced slice in the live sequence.
    new_end:
        Exclusive end of the replacement slice in the canonical sequence.
    """

    start: int
    old_end: int
    new_end: int

    @property
    def removed(self) -> int:
        """Number of live cells being replaced."""
        return self.old_end - self.start

    @property
    def inserted(self) -> int:
        """Number of canonical cells taking their place."""
        return self.new_end - self.start


@dataclass
class WatchedDocument:
    """Session-scoped bookkeeping for one open notebook.

    The live cell sequence itself belongs to the host; this record only
    remembers where the document lives and the last change signal seen.
    """

    location: str
    last_signal: object | None = None

    @property
    def primed(self) -> bool:
        """``True`` once a baseline change signal has been recorded."""
        return self.last_signal is not None


@dataclass
class ReloadResult:
    """Summary of one reload cycle for one document.

    Attributes
    ----------
    location:
        The document location that was reloaded.
    outcome:
        What happened, see :class:`ReloadOutcome`.
    range:
        The replace range that was issued, when one was computed.
    message:
        Diagnostic text for failure outcomes.
    """

    location: str
    outcome: ReloadOutcome
    range: ReplaceRange | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome in (ReloadOutcome.APPLIED, ReloadOutcome.UNCHANGED)
