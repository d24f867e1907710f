# tests/conftest.py
from __future__ import annotations

import sys

import pytest

from arbcalc.context import EvaluationParameters
from arbcalc.registry import default_table


@pytest.fixture(scope="session", autouse=True)
def workspace(tmp_path_factory):
    """Point ARBCALC_HOME at a throwaway directory so tests never touch ~/Documents."""
    root = tmp_path_factory.mktemp("arbcalc-home")
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("ARBCALC_HOME", str(root))
        yield root


@pytest.fixture(scope="session")
def table():
    """Discover the builtin functions once."""
    return default_table()


@pytest.fixture
def params():
    return EvaluationParameters(decimals=20)


@pytest.fixture
def default_str_limit():
    """Pin the interpreter's int/str digit limit at its stock 4300 for one test."""
    if not hasattr(sys, "set_int_max_str_digits"):
        pytest.skip("interpreter has no int/str digit limit")
    saved = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield
    sys.set_int_max_str_digits(saved)
