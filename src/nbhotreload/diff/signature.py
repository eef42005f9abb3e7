"""Output fingerprints for the strict cell comparator.

Computes an MD5 fingerprint for each :class:`CellOutput` so that two cells
can be compared on output *content* without holding both payloads side by
side.  Binary items are hashed over their raw bytes.
"""

from __future__ import annotations

from collections.abc import Iterable

from nbhotreload.models import CellOutput, OutputItem
from nbhotreload.utils.hashing import hash_dict, md5_hash


def _item_digest(item: OutputItem) -> dict[str, str]:
    payload = item.data
    return {
        "mime": item.mime,
        "encoding": "bytes" if isinstance(payload, bytes) else "text",
        "digest": md5_hash(payload),
    }


def output_signature(output: CellOutput) -> str:
    """Return a stable fingerprint of *output*'s kind and items."""
    kind = getattr(output.kind, "value", str(output.kind))
    return hash_dict({
        "kind": kind,
        "items": [_item_digest(item) for item in output.items],
    })


def outputs_signature(outputs: Iterable[CellOutput]) -> tuple[str, ...]:
    """Fingerprint every output of a cell, in order."""
    return tuple(output_signature(output) for output in outputs)
