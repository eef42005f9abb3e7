"""Parse a serialized notebook into the canonical cell sequence.

Input is the raw bytes of an nbformat 4.x ``.ipynb`` document.  The output
is an ordered ``list[CellData]`` carrying exactly what the reconciler and
the host edit need: kind, joined source, language tag, execution order,
and converted outputs.

Structural problems raise :class:`NotebookParseError`, including a
``cells`` entry that is not an object: cells are identified by position,
so dropping one would misalign every later cell.  A malformed output entry
only affects its own cell and is skipped.
"""

from __future__ import annotations

import json
import math
from typing import Any

from nbhotreload.errors import NotebookParseError
from nbhotreload.models import CellData, CellKind, CellOutput

from .outputs import convert_output, join_text

DEFAULT_LANGUAGE = "python"

MARKUP_LANGUAGE = "markdown"


def parse_notebook(
    raw: bytes | str,
    default_language: str = DEFAULT_LANGUAGE,
    *,
    markup_language: str = MARKUP_LANGUAGE,
) -> list[CellData]:
    """Parse raw notebook content into canonical cell records.

    Parameters
    ----------
    raw:
        The serialized document, as UTF-8 bytes or already-decoded text.
    default_language:
        Language for code cells when the notebook does not declare
        ``metadata.kernelspec.language``.
    markup_language:
        Language tag given to every markup cell.

    Returns
    -------
    list[CellData]
        One record per cell, in document order.

    Raises
    ------
    NotebookParseError
        If *raw* is not valid UTF-8 JSON, the top level is not an object,
        or ``cells`` is missing, not a list, or holds a non-object entry.
    """
    document = _load_json(raw)

    cells = document.get("cells")
    if not isinstance(cells, list):
        reason = "missing" if cells is None else "not a list"
        raise NotebookParseError(
            f"Notebook 'cells' entry is {reason}",
            context={"reason": f"cells_{reason.replace(' ', '_')}"},
        )

    for index, cell in enumerate(cells):
        if not isinstance(cell, dict):
            raise NotebookParseError(
                f"Notebook cell {index} is not an object",
                context={"reason": "cell_not_an_object", "index": index},
            )

    language = kernel_language(document, default_language)
    return [build_cell(cell, language, markup_language=markup_language) for cell in cells]


def kernel_language(document: dict[str, Any], default: str = DEFAULT_LANGUAGE) -> str:
    """Return ``metadata.kernelspec.language``, or *default*."""
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        return default
    kernelspec = metadata.get("kernelspec")
    if not isinstance(kernelspec, dict):
        return default
    language = kernelspec.get("language")
    if isinstance(language, str) and language:
        return language
    return default


def build_cell(
    cell: dict[str, Any],
    language: str,
    *,
    markup_language: str = MARKUP_LANGUAGE,
) -> CellData:
    """Convert one nbformat cell dict into a :class:`CellData`.

    ``cell_type == "code"`` maps to :attr:`CellKind.CODE` and receives
    *language*; anything else maps to :attr:`CellKind.MARKUP` and
    receives *markup_language*.
    """
    is_code = cell.get("cell_type") == "code"

    outputs: list[CellOutput] = []
    raw_outputs = cell.get("outputs")
    if isinstance(raw_outputs, list):
        for record in raw_outputs:
            if not isinstance(record, dict):
                continue
            converted = convert_output(record)
            if converted is not None:
                outputs.append(converted)

    return CellData(
        kind=CellKind.CODE if is_code else CellKind.MARKUP,
        source=join_text(cell.get("source")),
        language=language if is_code else markup_language,
        execution_order=_execution_order(cell.get("execution_count")),
        outputs=outputs,
    )


def _execution_order(value: Any) -> int | None:
    # bool is an int subclass; a stray true/false is not a counter.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _load_json(raw: bytes | str) -> dict[str, Any]:
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise NotebookParseError(
                "Notebook is not valid UTF-8",
                context={"reason": "invalid_utf8"},
                cause=exc,
            ) from exc
    else:
        text = raw

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise NotebookParseError(
            f"Notebook is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            context={"reason": "invalid_json", "line": exc.lineno, "column": exc.colno},
            cause=exc,
        ) from exc

    if not isinstance(document, dict):
        raise NotebookParseError(
            "Notebook top level is not a JSON object",
            context={"reason": "not_an_object"},
        )
    return document
