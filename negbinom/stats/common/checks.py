"""
negbinom.stats.common.checks
============================

Parameter and argument validation shared by distribution queries.

Each check raises `DomainError` on failure and returns the value as a float
on success. Checks never consult the error policy themselves: the public
operation that called them decides, through its policy, whether the error
reaches the caller or becomes a sentinel value.
"""

from __future__ import annotations
import math
from typing import Tuple

from negbinom.core.errors import DomainError


def check_successes(function: str, r: float) -> float:
    """Number of successes must be finite and > 0."""
    r = float(r)
    if not (math.isfinite(r) and r > 0):
        raise DomainError(
            f"number of successes must be finite and > 0, got {r}",
            function=function,
            value=r,
        )
    return r


def check_success_fraction(function: str, p: float) -> float:
    """Success fraction must be in [0, 1]."""
    p = float(p)
    if not (0.0 <= p <= 1.0):
        raise DomainError(
            f"success fraction must be in [0, 1], got {p}",
            function=function,
            value=p,
        )
    return p


def check_failures(function: str, k: float) -> float:
    """Number of failures must be finite and >= 0."""
    k = float(k)
    if not (math.isfinite(k) and k >= 0):
        raise DomainError(
            f"number of failures must be finite and >= 0, got {k}",
            function=function,
            value=k,
        )
    return k


def check_probability(function: str, prob: float) -> float:
    """Probability must be in [0, 1]."""
    prob = float(prob)
    if not (0.0 <= prob <= 1.0):
        raise DomainError(
            f"probability must be in [0, 1], got {prob}",
            function=function,
            value=prob,
        )
    return prob


def check_dist(function: str, r: float, p: float) -> Tuple[float, float]:
    """Validate distribution parameters in order: successes, then success fraction."""
    return check_successes(function, r), check_success_fraction(function, p)
