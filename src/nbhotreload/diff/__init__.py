"""Change detection between live and canonical cell sequences.

Exports
-------
reconcile
    Computes the minimal contiguous replace range between two sequences.
cells_match
    Default comparator (kind, source, execution order, output count).
cells_match_strict
    Comparator that also compares output content fingerprints.
select_matcher
    Picks a comparator from a config flag.
CellSequenceView
    Indexable view over a host notebook's live cells.
"""

from .comparator import CellMatcher, cells_match, cells_match_strict, select_matcher
from .reconciler import CellSequenceView, reconcile
from .signature import output_signature, outputs_signature

__all__ = [
    "CellMatcher",
    "CellSequenceView",
    "cells_match",
    "cells_match_strict",
    "output_signature",
    "outputs_signature",
    "reconcile",
    "select_matcher",
]
