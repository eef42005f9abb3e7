"""In-memory live notebook model.

:class:`NotebookDocument` is the live cell sequence that a hot-reload
session keeps in step with the file on disk.  It satisfies the
:class:`~nbhotreload.host.LiveNotebook` protocol and applies
replace-range edits atomically: bounds are validated before anything is
touched, and the splice is a single slice assignment.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence

from nbhotreload.converter import parse_notebook
from nbhotreload.converter.notebook import DEFAULT_LANGUAGE
from nbhotreload.models import CellData


def display_name(location: str) -> str:
    """Return the last path segment of *location* (a path or URL)."""
    trimmed = location.replace("\\", "/").split("?", 1)[0].rstrip("/")
    return posixpath.basename(trimmed) or location


class NotebookDocument:
    """A notebook held in memory, addressed by position only.

    Parameters
    ----------
    location:
        Path or URL of the backing ``.ipynb`` file.
    cells:
        Initial live cells.
    """

    def __init__(self, location: str, cells: Iterable[CellData] = ()) -> None:
        self.location = location
        self._cells: list[CellData] = list(cells)
        self.version = 0

    @classmethod
    def from_bytes(
        cls,
        location: str,
        raw: bytes | str,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> NotebookDocument:
        """Build a document from serialized notebook content."""
        return cls(location, parse_notebook(raw, default_language))

    @property
    def name(self) -> str:
        """Base name of :attr:`location`, used in channel lines."""
        return display_name(self.location)

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> list[CellData]:
        """A copy of the live cells."""
        return list(self._cells)

    def cell_at(self, index: int) -> CellData:
        return self._cells[index]

    def replace_cells(self, start: int, end: int, cells: Sequence[CellData]) -> None:
        """Replace live cells ``[start, end)`` with *cells*.

        Raises
        ------
        ValueError
            If the range does not lie within the current cells.  The
            document is left untouched in that case.
        """
        if not 0 <= start <= end <= len(self._cells):
            raise ValueError(
                f"replace range [{start}, {end}) outside document of {len(self._cells)} cells"
            )
        self._cells[start:end] = list(cells)
        self.version += 1

    def __repr__(self) -> str:
        return f"NotebookDocument(location={self.location!r}, cells={len(self._cells)}, version={self.version})"
