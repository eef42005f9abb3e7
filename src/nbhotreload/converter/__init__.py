"""Notebook conversion: raw ``.ipynb`` content to canonical cell records."""

from .notebook import build_cell, kernel_language, parse_notebook
from .outputs import convert_output, join_text

__all__ = [
    "build_cell",
    "convert_output",
    "join_text",
    "kernel_language",
    "parse_notebook",
]
