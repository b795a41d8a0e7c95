"""Tests for relman.core.errors."""

from relman.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.VCS_ERROR) == 3
    assert int(ErrorCode.IO_ERROR) == 5


def test_str_is_human_readable() -> None:
    assert str(ErrorCode.VCS_ERROR) == "vcs error"

