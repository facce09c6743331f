"""Pytest configuration for repository-relative imports."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from negbinom.core.policy import reset_default_policy  # noqa: E402

_POLICY_VARS = (
    "NEGBINOM_ON_DOMAIN_ERROR",
    "NEGBINOM_ON_OVERFLOW",
    "NEGBINOM_ON_UNDERFLOW",
    "NEGBINOM_ON_DENORM",
    "NEGBINOM_ON_EVALUATION_ERROR",
    "NEGBINOM_PRECISION",
    "NEGBINOM_MAX_ROOT_ITERATIONS",
)


@pytest.fixture(autouse=True)
def default_policy(monkeypatch):
    """Every test starts from the built-in defaults, whatever the shell exports."""
    for var in _POLICY_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_default_policy()
    yield
    reset_default_policy()
