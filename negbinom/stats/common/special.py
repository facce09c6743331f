"""
negbinom.stats.common.special
=============================

Scalar special-function substrate.

Thin wrappers over `scipy.special` for the regularized incomplete beta
function, its complement and its derivative with respect to ``x``. The
distribution core is written against these names so the reduction of every
negative binomial quantity to ``I_x(a, b)`` stays visible in one place.

All functions take and return Python floats in double precision.

Examples
--------
>>> from negbinom.stats.common.special import ibeta, ibetac
>>> round(ibeta(2.0, 2.0, 0.5), 12)
0.5
>>> round(ibetac(2.0, 2.0, 0.5), 12)
0.5
"""

from __future__ import annotations
import math

from scipy.special import betainc, betaincc, betaln, powm1 as _powm1, xlog1py, xlogy

_LOG_MAX = math.log(1.7976931348623157e308)


def ibeta(a: float, b: float, x: float) -> float:
    """Regularized incomplete beta function ``I_x(a, b)``."""
    return float(betainc(a, b, x))


def ibetac(a: float, b: float, x: float) -> float:
    """Complement ``1 - I_x(a, b)``, computed without subtraction."""
    return float(betaincc(a, b, x))


def ibeta_derivative(a: float, b: float, x: float) -> float:
    """
    Partial derivative of ``I_x(a, b)`` with respect to ``x``.

    This is the beta density ``x^(a-1) (1-x)^(b-1) / B(a, b)``, evaluated in
    log space so large ``a`` and ``b`` do not overflow the intermediate
    powers or the beta function.

    Args:
        a, b: Shape parameters (both > 0)
        x: Evaluation point in [0, 1]

    Returns:
        The density value; ``0`` where it underflows.
    """
    if (x == 0.0 and a < 1.0) or (x == 1.0 and b < 1.0):
        return math.inf
    log_density = float(xlogy(a - 1.0, x) + xlog1py(b - 1.0, -x) - betaln(a, b))
    if log_density > _LOG_MAX:
        return math.inf
    return math.exp(log_density)


def powm1(x: float, y: float) -> float:
    """``x**y - 1`` accurate when the result is near zero."""
    return float(_powm1(x, y))
