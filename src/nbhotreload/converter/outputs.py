"""Conversion of nbformat output records into :class:`CellOutput` objects.

Each external output record becomes at most one :class:`CellOutput`.  A
record that yields no items (an unknown ``output_type``, a result with an
empty ``data`` mapping) is dropped entirely rather than kept as an empty
placeholder.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from nbhotreload.models import ERROR_MIME, CellOutput, OutputItem, OutputKind
from nbhotreload.observability import get_logger

log = get_logger("nbhotreload.converter")

_OUTPUT_KINDS: dict[str, OutputKind] = {
    "stream": OutputKind.STREAM,
    "execute_result": OutputKind.RESULT,
    "display_data": OutputKind.DISPLAY_DATA,
    "error": OutputKind.ERROR,
}

# image/* payloads are base64 and decoded to bytes, except these.  nbformat
# writes SVG as plain XML text, often split into line fragments; base64
# decoding would reject it or turn it into garbage bytes.  These mimes are
# joined like any text mime and stay text items.
_TEXTUAL_IMAGE_MIMES = frozenset({"image/svg+xml"})


def join_text(value: Any) -> str:
    """Join a multiline nbformat string.

    nbformat stores long strings either as one string or as a list of
    fragments that already end with their own newlines, so fragments are
    concatenated with no separator.  ``None`` becomes ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, list):
        return "".join(str(part) for part in value)
    if isinstance(value, str):
        return value
    return str(value)


def convert_output(record: dict[str, Any]) -> CellOutput | None:
    """Convert one nbformat output record.

    Parameters
    ----------
    record:
        A dict with an ``output_type`` of ``stream``, ``execute_result``,
        ``display_data`` or ``error``.

    Returns
    -------
    CellOutput | None
        ``None`` when the record produces no items.
    """
    output_type = record.get("output_type", "")
    kind = _OUTPUT_KINDS.get(output_type)
    if kind is None:
        return None

    if kind is OutputKind.STREAM:
        items = [OutputItem("text/plain", join_text(record.get("text")))]
    elif kind is OutputKind.ERROR:
        items = [_error_item(record)]
    else:
        items = _mime_bundle_items(record.get("data"))

    if not items:
        return None
    return CellOutput(kind=kind, items=items)


def _error_item(record: dict[str, Any]) -> OutputItem:
    """Synthesize ``"<ename>: <evalue>\\n<traceback>"`` as one error item."""
    name = record.get("ename") or ""
    value = record.get("evalue") or ""
    traceback = record.get("traceback") or []
    if not isinstance(traceback, list):
        traceback = [traceback]
    joined = "\n".join(str(line) for line in traceback)
    return OutputItem(ERROR_MIME, f"{name}: {value}\n{joined}")


def _mime_bundle_items(data: Any) -> list[OutputItem]:
    """Convert a MIME-bundle ``data`` mapping into output items, in order."""
    if not isinstance(data, dict):
        return []

    items: list[OutputItem] = []
    for mime, content in data.items():
        if mime.startswith("image/") and mime not in _TEXTUAL_IMAGE_MIMES:
            decoded = _decode_image(mime, join_text(content))
            if decoded is not None:
                items.append(OutputItem(mime, decoded))
        elif isinstance(content, (str, list)):
            items.append(OutputItem(mime, join_text(content)))
        else:
            # JSON-typed payloads such as application/json objects.
            items.append(OutputItem(mime, json.dumps(content, ensure_ascii=False)))
    return items


def _decode_image(mime: str, payload: str) -> bytes | None:
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError) as exc:
        log.warning(
            "dropping undecodable image payload",
            extra={"extra_fields": {"mime": mime, "error": str(exc)}},
        )
        return None
