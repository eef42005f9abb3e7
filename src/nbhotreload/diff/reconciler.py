"""Minimal replace-range computation between two cell sequences.

The host can only "replace the cells in ``[a, b)`` with these new cells",
so the smallest useful edit is a single contiguous slice.  The reconciler
trims the longest common prefix, then the longest common suffix that does
not overlap it, and reports whatever is left in the middle.  It is linear
in the sequence length and never reorders cells.

Both sequences are addressed purely by index.  The live side only needs
``len()`` and ``[]`` so a host accessor can be wrapped with
:class:`CellSequenceView`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from nbhotreload.models import ReplaceRange

from .comparator import CellMatcher, cells_match


def reconcile(
    live: Sequence[Any],
    canonical: Sequence[Any],
    matches: CellMatcher = cells_match,
) -> ReplaceRange | None:
    """Compute the minimal contiguous edit turning *live* into *canonical*.

    Parameters
    ----------
    live:
        The cells currently held by the host document.
    canonical:
        The cells freshly parsed from the external representation.
    matches:
        Equality relation, called as ``matches(live_cell, canonical_cell)``.

    Returns
    -------
    ReplaceRange | None
        ``None`` when the sequences are pairwise equal under *matches*
        (nothing to do).  Otherwise live cells ``[start, old_end)`` must be
        replaced with ``canonical[start:new_end]``.
    """
    old_len = len(live)
    new_len = len(canonical)

    start = 0
    limit = min(old_len, new_len)
    while start < limit and matches(live[start], canonical[start]):
        start += 1

    old_end = old_len
    new_end = new_len
    while old_end > start and new_end > start and matches(live[old_end - 1], canonical[new_end - 1]):
        old_end -= 1
        new_end -= 1

    if start == old_end and start == new_end:
        return None

    return ReplaceRange(start=start, old_end=old_end, new_end=new_end)


class CellSequenceView(Sequence):
    """Read-only ``Sequence`` over a host notebook's live cells.

    Wraps anything exposing ``cell_count`` and ``cell_at(index)`` so the
    reconciler can index it without copying.
    """

    __slots__ = ("_notebook",)

    def __init__(self, notebook: Any) -> None:
        self._notebook = notebook

    def __len__(self) -> int:
        return self._notebook.cell_count

    def __getitem__(self, index):  # type: ignore[override]
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(f"cell index {index} out of range")
        return self._notebook.cell_at(index)
