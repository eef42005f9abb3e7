"""Tests for errors.py and the package's public exports."""

from __future__ import annotations

import pickle

import pytest

import nbhotreload
from nbhotreload import __all__ as PKG_ALL
from nbhotreload.errors import (
    EditApplyError,
    ErrorCode,
    HotReloadError,
    NotebookParseError,
    NotebookReadError,
)


class TestErrorCodes:
    @pytest.mark.parametrize(
        ("cls", "code"),
        [
            (NotebookReadError, ErrorCode.READ_ERROR),
            (NotebookParseError, ErrorCode.PARSE_ERROR),
            (EditApplyError, ErrorCode.EDIT_FAILED),
        ],
    )
    def test_subclass_code(self, cls, code):
        err = cls("boom", context={"location": "a.ipynb"})
        assert err.code == code
        assert err.message == "boom"
        assert err.context == {"location": "a.ipynb"}
        assert isinstance(err, HotReloadError)

    def test_every_code_has_a_subclass(self):
        codes = {cls("x").code for cls in (NotebookReadError, NotebookParseError, EditApplyError)}
        assert codes == set(ErrorCode)

    def test_codes_are_strings(self):
        assert ErrorCode.READ_ERROR == "READ_ERROR"


class TestBaseError:
    def test_cause_chained(self):
        cause = OSError("disk gone")
        err = NotebookReadError("read failed", cause=cause)
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_context_defaults_to_empty(self):
        assert NotebookParseError("x").context == {}

    def test_repr_includes_context(self):
        err = EditApplyError("rejected", context={"start": 1})
        text = repr(err)
        assert "EditApplyError" in text
        assert "'start': 1" in text

    def test_repr_without_context(self):
        assert "context" not in repr(NotebookParseError("x"))

    def test_str_is_message(self):
        assert str(NotebookReadError("nope")) == "nope"

    def test_catchable_as_exception(self):
        with pytest.raises(Exception):
            raise NotebookParseError("bad")

    @pytest.mark.parametrize(
        "err",
        [
            HotReloadError("X", "msg", {"a": 1}),
            NotebookReadError("gone", context={"location": "a.ipynb"}, cause=OSError("eio")),
            NotebookParseError("bad", context={"reason": "invalid_json"}),
            EditApplyError("rejected", context={"start": 0}),
        ],
    )
    def test_pickle_round_trip(self, err):
        clone = pickle.loads(pickle.dumps(err))
        assert type(clone) is type(err)
        assert clone.code == err.code
        assert clone.message == err.message
        assert clone.context == err.context
        assert str(clone) == str(err)


class TestPublicExports:
    def test_all_names_resolve(self):
        for name in PKG_ALL:
            assert hasattr(nbhotreload, name), name

    def test_no_duplicates(self):
        assert len(PKG_ALL) == len(set(PKG_ALL))
