"""
negbinom.stats.common.roots
===========================

Generic monotone root finding.

Every inversion in the package (quantiles in the failure count, confidence
bounds in the success fraction, trial counts in the number of successes)
solves ``f(x) = target`` for a function known to be monotone on an interval.
This module provides that single abstraction: a bracket search that grows
geometrically from an initial guess, followed by Brent refinement from
`scipy.optimize.brentq`.

The iteration budget covers both phases. When it runs out, or when no sign
change exists inside the limits, an `EvaluationError` is raised carrying the
best estimate found so far, so a non-raising policy can still return it.

Examples
--------
>>> from negbinom.stats.common.roots import solve_monotone
>>> res = solve_monotone(lambda x: x * x - 2.0, 1.0, increasing=True,
...                      lower=0.0, upper=float("inf"))
>>> round(res.root, 12)
1.414213562373
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Callable, Tuple

from scipy.optimize import brentq

from negbinom.core.errors import EvaluationError

logger = logging.getLogger(__name__)

_XTOL = 2.2250738585072014e-308  # smallest normal double; tolerance is relative
_DEFAULT_RTOL = 4.0 * 2.220446049250313e-16
_MAX_RATIO = 2.0  # widest positive bracket handed to brentq, as upper / lower


@dataclass(frozen=True)
class RootResult:
    """Outcome of a monotone inversion."""

    root: float
    iterations: int
    bracket: Tuple[float, float]


def solve_monotone(
    func: Callable[[float], float],
    guess: float,
    *,
    increasing: bool,
    lower: float,
    upper: float,
    factor: float = 2.0,
    rtol: float = _DEFAULT_RTOL,
    max_iter: int = 200,
) -> RootResult:
    """
    Find the root of a monotone function on ``[lower, upper]``.

    Args:
        func: Monotone function whose sign changes once on the interval
        guess: Starting point for the bracket search (used when a limit is infinite)
        increasing: Whether ``func`` increases with its argument
        lower, upper: Limits of the search; either may be infinite
        factor: Initial multiplicative step of the bracket search (> 1)
        rtol: Relative tolerance of the refined root
        max_iter: Budget of function evaluations across bracketing and refinement

    Returns:
        RootResult with the root, iterations used, and the final bracket

    Raises:
        EvaluationError: If no bracket is found or refinement does not converge

    Algorithm:
        1. Flip the sign of ``func`` if needed so it is increasing
        2. Bracket: use ``[lower, upper]`` when both are finite, otherwise
           step away from ``guess`` multiplying (or dividing) by ``factor``,
           doubling the factor every few steps, until the sign changes
        3. While a positive bracket spans more than a factor of two, bisect
           it at the geometric mean
        4. Refine inside the bracket with Brent's method
    """
    if factor <= 1.0:
        raise ValueError(f"factor must be > 1, got {factor}")
    sign = 1.0 if increasing else -1.0

    def g(x: float) -> float:
        return sign * func(x)

    if math.isfinite(lower) and math.isfinite(upper):
        a, b = lower, upper
        ga, gb = g(a), g(b)
        used = 2
    else:
        a, b, ga, gb, used = _bracket(g, guess, lower, upper, factor, max_iter)

    if ga == 0.0:
        return RootResult(a, used, (a, b))
    if gb == 0.0:
        return RootResult(b, used, (a, b))
    if ga > 0.0 or gb < 0.0:
        raise EvaluationError(
            f"no sign change on [{a!r}, {b!r}]",
            value=guess,
            fallback=a if ga > 0.0 else b,
        )

    if a > 0.0 and b > _MAX_RATIO * a:
        a, b, ga, gb, used = _narrow_geometric(g, a, b, ga, gb, used, guess, max_iter)
        if ga == 0.0:
            return RootResult(a, used, (a, b))

    remaining = max_iter - used
    if remaining < 1:
        raise EvaluationError(
            f"iteration budget of {max_iter} exhausted while bracketing",
            value=guess,
            fallback=0.5 * (a + b),
        )

    root, info = brentq(
        g, a, b, xtol=_XTOL, rtol=rtol, maxiter=remaining, full_output=True, disp=False
    )
    used += info.iterations
    logger.debug(
        "brentq on [%r, %r]: root=%r after %d iterations (converged=%s)",
        a,
        b,
        root,
        used,
        info.converged,
    )
    if not info.converged:
        raise EvaluationError(
            f"root refinement did not converge within {max_iter} iterations",
            value=guess,
            fallback=float(root),
        )
    return RootResult(float(root), used, (a, b))


def _bracket(
    g: Callable[[float], float],
    guess: float,
    lower: float,
    upper: float,
    factor: float,
    max_iter: int,
) -> Tuple[float, float, float, float, int]:
    """Grow a bracket geometrically around ``guess`` for increasing ``g``."""
    x = min(max(guess, lower), upper)
    if x <= 0.0:
        raise ValueError(f"geometric bracketing needs a positive guess, got {guess}")
    gx = g(x)
    used = 1
    if gx == 0.0:
        return x, x, gx, gx, used

    step = factor
    count = 0
    if gx < 0.0:
        # Root lies above x.
        a, ga = x, gx
        while True:
            b = min(a * step, upper)
            gb = g(b)
            used += 1
            if gb >= 0.0:
                break
            if b >= upper or math.isinf(b):
                raise EvaluationError(
                    f"no root below the upper limit {upper!r}", value=guess, fallback=b
                )
            if used >= max_iter:
                raise EvaluationError(
                    f"iteration budget of {max_iter} exhausted while bracketing",
                    value=guess,
                    fallback=b,
                )
            a, ga = b, gb
            count += 1
            if count % 4 == 0:
                step *= 2.0
    else:
        # Root lies below x.
        b, gb = x, gx
        while True:
            a = max(b / step, lower)
            ga = g(a)
            used += 1
            if ga <= 0.0:
                break
            if a <= lower:
                raise EvaluationError(
                    f"no root above the lower limit {lower!r}", value=guess, fallback=a
                )
            if used >= max_iter:
                raise EvaluationError(
                    f"iteration budget of {max_iter} exhausted while bracketing",
                    value=guess,
                    fallback=a,
                )
            b, gb = a, ga
            count += 1
            if count % 4 == 0:
                step *= 2.0

    logger.debug("bracketed root in [%r, %r] after %d evaluations", a, b, used)
    return a, b, ga, gb, used


def _narrow_geometric(
    g: Callable[[float], float],
    a: float,
    b: float,
    ga: float,
    gb: float,
    used: int,
    guess: float,
    max_iter: int,
) -> Tuple[float, float, float, float, int]:
    """
    Bisect a positive bracket at its geometric mean until ``b <= 2 a``.

    Each step halves ``log(b / a)``, so a bracket spanning hundreds of decades
    is down to a factor of two after a handful of evaluations.
    """
    while b > _MAX_RATIO * a:
        if used >= max_iter:
            raise EvaluationError(
                f"iteration budget of {max_iter} exhausted while bracketing",
                value=guess,
                fallback=math.sqrt(a) * math.sqrt(b),
            )
        m = math.sqrt(a) * math.sqrt(b)
        gm = g(m)
        used += 1
        if gm == 0.0:
            return m, m, gm, gm, used
        if gm < 0.0:
            a, ga = m, gm
        else:
            b, gb = m, gm
    logger.debug("narrowed bracket to [%r, %r] after %d evaluations", a, b, used)
    return a, b, ga, gb, used
