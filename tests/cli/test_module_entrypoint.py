"""Tests for running splfl as a module (`python -m splfl`)."""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest


def test_module_help_exits_zero() -> None:
    with patch("sys.argv", ["splfl", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("splfl", run_name="__main__")
    assert exc_info.value.code == 0


def test_module_subcommand_help_exits_zero() -> None:
    with patch("sys.argv", ["splfl", "run", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("splfl", run_name="__main__")
    assert exc_info.value.code == 0
