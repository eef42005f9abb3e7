"""Host collaborator interfaces.

A hot-reload session never owns the live document.  It talks to a *host*
(an editor, a notebook server, a test double) through the protocols
below, and to a :class:`~nbhotreload.sources.NotebookSource` for the
change signal and raw bytes.

:class:`InMemoryHost` is the reference host: it keeps a set of open
:class:`~nbhotreload.document.NotebookDocument` objects and applies edits
to them directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from nbhotreload.document import NotebookDocument
from nbhotreload.models import CellData, ReplaceRange
from nbhotreload.observability import document_logger, get_logger

log = get_logger("nbhotreload.host")


@runtime_checkable
class LiveCell(Protocol):
    """Read-only view of one cell in the host's live document."""

    @property
    def kind(self) -> Any: ...

    @property
    def text(self) -> str: ...

    @property
    def execution_order(self) -> int | None: ...

    @property
    def output_count(self) -> int: ...


@runtime_checkable
class LiveNotebook(Protocol):
    """An open document as seen by the poller and the reconciler."""

    location: str

    @property
    def cell_count(self) -> int: ...

    def cell_at(self, index: int) -> LiveCell: ...


@runtime_checkable
class NotebookHost(Protocol):
    """What the session needs from the editor hosting the live documents."""

    def open_notebooks(self) -> Iterable[LiveNotebook]:
        """Return the documents currently open in the host."""
        ...

    async def apply_replace_range(
        self,
        notebook: LiveNotebook,
        replace: ReplaceRange,
        cells: Sequence[CellData],
    ) -> bool:
        """Atomically replace ``[replace.start, replace.old_end)`` with *cells*.

        Returns ``True`` when the edit was applied.
        """
        ...


class InMemoryHost:
    """Host that keeps its open notebooks in a plain dict.

    Edits are applied synchronously inside :meth:`apply_replace_range`, so
    nothing else on the event loop can observe a half-applied edit.
    """

    def __init__(self, documents: Iterable[NotebookDocument] = ()) -> None:
        self._documents: dict[str, NotebookDocument] = {}
        for document in documents:
            self.open(document)

    def open(self, document: NotebookDocument) -> NotebookDocument:
        self._documents[document.location] = document
        return document

    def close(self, location: str) -> NotebookDocument | None:
        return self._documents.pop(location, None)

    def get(self, location: str) -> NotebookDocument | None:
        return self._documents.get(location)

    def open_notebooks(self) -> list[NotebookDocument]:
        return list(self._documents.values())

    async def apply_replace_range(
        self,
        notebook: NotebookDocument,
        replace: ReplaceRange,
        cells: Sequence[CellData],
    ) -> bool:
        if self._documents.get(notebook.location) is not notebook:
            document_logger(log, notebook.location).warning(
                "edit rejected: document is not open",
            )
            return False
        try:
            notebook.replace_cells(replace.start, replace.old_end, cells)
        except ValueError as exc:
            document_logger(log, notebook.location, start=replace.start).warning(
                "edit rejected: %s", exc,
            )
            return False
        return True
