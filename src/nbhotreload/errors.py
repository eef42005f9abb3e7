"""Error hierarchy for nbhotreload.

Every error class inherits from :class:`HotReloadError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

None of these errors is fatal to a polling session: the reload
orchestrator catches them, logs them to the reload channel, and records
the cycle as failed.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    READ_ERROR = "READ_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    EDIT_FAILED = "EDIT_FAILED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class HotReloadError(Exception):
    """Base exception for all nbhotreload errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"

    def __reduce__(self):
        # Subclass constructors take different arguments than ``self.args``.
        return (_restore_error, (type(self), self.args, self.__dict__.copy()))


def _restore_error(cls: type, args: tuple, state: dict[str, Any]) -> HotReloadError:
    err = cls.__new__(cls)
    err.args = args
    err.__dict__.update(state)
    return err


# ---------------------------------------------------------------------------
# Cycle errors
# ---------------------------------------------------------------------------

class NotebookReadError(HotReloadError):
    """The change signal or the raw bytes could not be obtained.

    Transient: the next poll tick tries again.

    Context keys: ``location``, ``operation`` (``"stat"`` or ``"read"``),
    and ``status_code`` for HTTP sources.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.READ_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotebookParseError(HotReloadError):
    """The external representation is not a usable notebook.

    Raised for invalid JSON, invalid UTF-8, a non-object top level, and a
    missing or non-list ``cells`` entry.

    Context keys: ``reason``, plus ``line`` and ``column`` for JSON errors.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class EditApplyError(HotReloadError):
    """The host rejected a replace-range edit.

    Not retried until a further external change is observed.

    Context keys: ``location``, ``start``, ``old_end``, ``new_end``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.EDIT_FAILED,
            message=message,
            context=context,
            cause=cause,
        )
