"""Equality between a live cell and a canonical cell record.

:func:`cells_match` is the comparator used by default.  Two cells match
when they have the same kind, byte-identical source text, the same
execution order (a missing order counts as ``0``), and the same *number*
of outputs.  Output content is not compared: re-running a cell that emits
the same number of outputs with different content is not detected unless
its source or execution order changed too.

:func:`cells_match_strict` additionally compares output fingerprints and
is selected with ``HotReloadConfig.compare_output_content``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .signature import outputs_signature

CellMatcher = Callable[[Any, Any], bool]
"""Signature shared by both comparators: ``(live_cell, canonical) -> bool``."""


def _order(cell: Any) -> int:
    return getattr(cell, "execution_order", None) or 0


def _output_count(cell: Any) -> int:
    return getattr(cell, "output_count", 0) or 0


def cells_match(live: Any, canonical: Any) -> bool:
    """Return ``True`` if *live* and *canonical* are equal for reconciliation.

    Parameters
    ----------
    live:
        A cell exposing ``kind``, ``text``, ``execution_order`` and
        ``output_count`` (see :class:`~nbhotreload.host.LiveCell`).
    canonical:
        A :class:`~nbhotreload.models.CellData` (or anything with the same
        accessors).
    """
    return (
        live.kind == canonical.kind
        and live.text == canonical.text
        and _order(live) == _order(canonical)
        and _output_count(live) == _output_count(canonical)
    )


def cells_match_strict(live: Any, canonical: Any) -> bool:
    """Like :func:`cells_match`, but output content must also be identical."""
    if not cells_match(live, canonical):
        return False
    return outputs_signature(getattr(live, "outputs", ())) == outputs_signature(
        getattr(canonical, "outputs", ())
    )


def select_matcher(compare_output_content: bool) -> CellMatcher:
    """Pick the comparator for a session."""
    return cells_match_strict if compare_output_content else cells_match
