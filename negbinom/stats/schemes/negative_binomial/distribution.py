"""
negbinom.stats.schemes.negative_binomial.distribution
=====================================================

The negative binomial distribution as an immutable value.

``NegativeBinomial(r, p)`` describes the number of failures ``k`` observed
before the ``r``-th success in a sequence of Bernoulli trials with success
fraction ``p``. ``r`` need not be an integer.

Every quantity reduces to the regularized incomplete beta function:

    pdf(k)            = p / (r + k) * d/dx I_x(r, k + 1) at x = p
    cdf(k)            = I_p(r, k + 1)
    cdf_complement(k) = 1 - I_p(r, k + 1)   (computed directly, not by subtraction)
    quantile(P)       = b - 1  where I_p(r, b) = P

The direct gamma-ratio form ``C(k + r - 1, k) p^r (1 - p)^k`` is never used:
it cancels catastrophically for large ``r`` and ``k``.

All public queries validate ``r`` and ``p`` again, then their argument, and
route any signalled error through the distribution's `Policy`.

Examples
--------
>>> from negbinom.stats.schemes.negative_binomial.distribution import NegativeBinomial
>>> dist = NegativeBinomial(2, 0.5)
>>> dist.pdf(1), dist.cdf(1), dist.cdf_complement(1)
(0.25, 0.5, 0.5)
>>> dist.quantile(1.0)
inf
>>> NegativeBinomial(8, 0.25).mean()
24.0
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from negbinom.core.errors import DomainError, EvaluationError, ResultOverflowError
from negbinom.core.policy import Policy, guarded, resolve_policy
from negbinom.stats.common.checks import (
    check_dist,
    check_failures,
    check_probability,
)
from negbinom.stats.common.roots import solve_monotone
from negbinom.stats.common.special import ibeta, ibeta_derivative, ibetac, powm1
from negbinom.stats.schemes.negative_binomial import estimation

_MAX_FLOAT = 1.7976931348623157e308


# --- Unguarded kernels on validated arguments ---


def _pdf(r: float, p: float, k: float) -> float:
    if p == 0.0:
        # No success can ever occur, so every finite failure count has mass 0.
        return 0.0
    return p / (r + k) * ibeta_derivative(r, k + 1.0, p)


def _quantile_guess(r: float, p: float) -> float:
    mean = r * (1.0 - p) / p
    return 1.0 + mean if math.isfinite(mean) else _MAX_FLOAT


def _invert_in_failures(func, r: float, p: float, increasing: bool, policy: Policy) -> float:
    """Solve ``func(b) = 0`` for ``b = k + 1 >= 1`` and return ``k``."""
    try:
        res = solve_monotone(
            func,
            _quantile_guess(r, p),
            increasing=increasing,
            lower=1.0,
            upper=math.inf,
            rtol=policy.root_tolerance,
            max_iter=policy.max_root_iterations,
        )
    except EvaluationError as exc:
        exc.fallback = max(exc.fallback - 1.0, 0.0)
        raise
    return max(res.root - 1.0, 0.0)


def _quantile(r: float, p: float, prob: float, policy: Policy) -> float:
    if prob == 1.0:
        raise ResultOverflowError(
            "probability 1 requires an infinite number of failures", value=prob
        )
    if prob == 0.0:
        return 0.0
    if prob <= p**r:
        # At or below cdf(0): no failures are needed.
        return 0.0
    if p == 0.0:
        raise ResultOverflowError(
            "success fraction 0 requires an infinite number of failures", value=prob
        )
    return _invert_in_failures(lambda b: ibeta(r, b, p) - prob, r, p, True, policy)


def _quantile_complement(r: float, p: float, q: float, policy: Policy) -> float:
    if q == 1.0:
        return 0.0
    if q == 0.0:
        raise ResultOverflowError(
            "complement probability 0 requires an infinite number of failures",
            value=q,
        )
    if p == 0.0:
        raise ResultOverflowError(
            "success fraction 0 requires an infinite number of failures", value=q
        )
    if -q <= powm1(p, r):
        # 1 - q is at or below cdf(0).
        return 0.0
    return _invert_in_failures(lambda b: ibetac(r, b, p) - q, r, p, False, policy)


def _finite(value: float, what: str) -> float:
    if math.isinf(value):
        raise ResultOverflowError(f"{what} is infinite", value=value)
    return value


@dataclass(frozen=True)
class NegativeBinomial:
    """
    Negative binomial distribution of failures before the r-th success.

    Attributes:
        r: Number of successes required (> 0, real)
        p: Success fraction of each trial (0 <= p <= 1)
        policy: Error and precision policy; None uses the process default

    Construction validates ``r`` then ``p``. Under a raising domain policy an
    invalid pair raises `DomainError` immediately; under a non-raising policy
    the value is still built and every query returns the policy's sentinel.
    """

    r: float
    p: float
    policy: Optional[Policy] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", float(self.r))
        object.__setattr__(self, "p", float(self.p))
        try:
            check_dist("NegativeBinomial", self.r, self.p)
        except DomainError as exc:
            resolve_policy(self.policy).handle(exc)

    # ---- accessors ----

    @property
    def successes(self) -> float:
        """Number of successes ``r``."""
        return self.r

    @property
    def success_fraction(self) -> float:
        """Success fraction ``p``."""
        return self.p

    def support(self) -> Tuple[float, float]:
        """Range of failure counts with nonzero mass."""
        return (0.0, math.inf)

    def range(self) -> Tuple[float, float]:
        """Range of failure counts the queries accept."""
        return (0.0, math.inf)

    def with_policy(self, policy: Optional[Policy]) -> "NegativeBinomial":
        """Same distribution under a different policy."""
        return NegativeBinomial(self.r, self.p, policy=policy)

    # ---- mass and cumulative probability ----

    @guarded("pdf")
    def pdf(self, k: float) -> float:
        """
        Probability mass at ``k`` failures.

        Computed as ``p / (r + k) * ibeta_derivative(r, k + 1, p)``. Returns 0
        when the true value underflows.
        """
        r, p = check_dist("pdf", self.r, self.p)
        k = check_failures("pdf", k)
        return _pdf(r, p, k)

    @guarded("cdf")
    def cdf(self, k: float) -> float:
        """Probability of at most ``k`` failures: ``I_p(r, k + 1)``."""
        r, p = check_dist("cdf", self.r, self.p)
        k = check_failures("cdf", k)
        return ibeta(r, k + 1.0, p)

    @guarded("cdf_complement")
    def cdf_complement(self, k: float) -> float:
        """
        Probability of more than ``k`` failures.

        Evaluated by its own incomplete beta call rather than ``1 - cdf(k)``,
        which loses every significant digit once ``cdf(k)`` is close to 1.
        """
        r, p = check_dist("cdf_complement", self.r, self.p)
        k = check_failures("cdf_complement", k)
        return ibetac(r, k + 1.0, p)

    # ---- quantiles ----

    @guarded("quantile")
    def quantile(self, probability: float) -> float:
        """
        Real number of failures ``k`` at which ``cdf(k) == probability``.

        Edge cases:
            - probability 0, or any probability at or below ``cdf(0)``: exactly 0
            - probability 1: overflow (``+inf`` under the default policy)
        """
        r, p = check_dist("quantile", self.r, self.p)
        prob = check_probability("quantile", probability)
        return _quantile(r, p, prob, resolve_policy(self.policy))

    @guarded("quantile_complement")
    def quantile_complement(self, probability: float) -> float:
        """
        Real number of failures ``k`` at which ``cdf_complement(k) == probability``.

        Agrees with ``quantile(1 - probability)`` but keeps full precision
        when ``probability`` is tiny.

        Edge cases:
            - probability 1, or any probability with ``1 - probability <= cdf(0)``: 0
            - probability 0: overflow (``+inf`` under the default policy)
        """
        r, p = check_dist("quantile_complement", self.r, self.p)
        q = check_probability("quantile_complement", probability)
        return _quantile_complement(r, p, q, resolve_policy(self.policy))

    @guarded("median")
    def median(self) -> float:
        r, p = check_dist("median", self.r, self.p)
        return _quantile(r, p, 0.5, resolve_policy(self.policy))

    # ---- descriptive statistics ----

    @guarded("mean")
    def mean(self) -> float:
        """``r (1 - p) / p``."""
        r, p = check_dist("mean", self.r, self.p)
        if p == 0.0:
            raise ResultOverflowError("mean is infinite when p is 0", value=p)
        return _finite(r * (1.0 - p) / p, "mean")

    @guarded("variance")
    def variance(self) -> float:
        """``r (1 - p) / p^2``."""
        r, p = check_dist("variance", self.r, self.p)
        if p == 0.0:
            raise ResultOverflowError("variance is infinite when p is 0", value=p)
        return _finite(r * (1.0 - p) / p / p, "variance")

    @guarded("standard_deviation")
    def standard_deviation(self) -> float:
        r, p = check_dist("standard_deviation", self.r, self.p)
        if p == 0.0:
            raise ResultOverflowError(
                "standard deviation is infinite when p is 0", value=p
            )
        return _finite(math.sqrt(r * (1.0 - p)) / p, "standard deviation")

    @guarded("mode")
    def mode(self) -> float:
        """Most likely failure count: ``floor((r - 1)(1 - p) / p)``, at least 0."""
        r, p = check_dist("mode", self.r, self.p)
        if p == 0.0:
            raise ResultOverflowError("mode is infinite when p is 0", value=p)
        if r <= 1.0:
            return 0.0
        return float(math.floor(_finite((r - 1.0) * (1.0 - p) / p, "mode")))

    @guarded("skewness")
    def skewness(self) -> float:
        """``(2 - p) / sqrt(r (1 - p))``."""
        r, p = check_dist("skewness", self.r, self.p)
        if p == 1.0:
            raise ResultOverflowError("skewness is infinite when p is 1", value=p)
        return (2.0 - p) / math.sqrt(r * (1.0 - p))

    @guarded("kurtosis_excess")
    def kurtosis_excess(self) -> float:
        """``6 / r + p^2 / (r (1 - p))``."""
        r, p = check_dist("kurtosis_excess", self.r, self.p)
        if p == 1.0:
            raise ResultOverflowError("kurtosis is infinite when p is 1", value=p)
        return 6.0 / r + p * p / (r * (1.0 - p))

    @guarded("kurtosis")
    def kurtosis(self) -> float:
        """``3 + kurtosis_excess``."""
        r, p = check_dist("kurtosis", self.r, self.p)
        if p == 1.0:
            raise ResultOverflowError("kurtosis is infinite when p is 1", value=p)
        return 3.0 + 6.0 / r + p * p / (r * (1.0 - p))

    @guarded("coefficient_of_variation")
    def coefficient_of_variation(self) -> float:
        """
        ``standard_deviation / mean``.

        The ratio simplifies to ``1 / sqrt(r (1 - p))``, which stays finite at
        ``p = 0`` where both moments are infinite.
        """
        r, p = check_dist("coefficient_of_variation", self.r, self.p)
        if p == 1.0:
            raise ResultOverflowError(
                "coefficient of variation is infinite when p is 1", value=p
            )
        return 1.0 / math.sqrt(r * (1.0 - p))

    # ---- hazard functions ----

    @guarded("hazard")
    def hazard(self, x: float) -> float:
        """Hazard ``pdf(x) / cdf_complement(x)``."""
        r, p = check_dist("hazard", self.r, self.p)
        k = check_failures("hazard", x)
        density = _pdf(r, p, k)
        survival = ibetac(r, k + 1.0, p)
        if density == 0.0:
            return 0.0
        if survival < density / _MAX_FLOAT:
            raise ResultOverflowError("hazard is infinite: survival is 0", value=k)
        return density / survival

    @guarded("chf")
    def chf(self, x: float) -> float:
        """Cumulative hazard ``-log(cdf_complement(x))``."""
        r, p = check_dist("chf", self.r, self.p)
        k = check_failures("chf", x)
        survival = ibetac(r, k + 1.0, p)
        if survival == 0.0:
            raise ResultOverflowError(
                "cumulative hazard is infinite: survival is 0", value=k
            )
        return -math.log(survival)

    # ---- estimation ----

    estimate_lower_bound_on_p = staticmethod(estimation.estimate_lower_bound_on_p)
    estimate_upper_bound_on_p = staticmethod(estimation.estimate_upper_bound_on_p)
    estimate_number_of_trials = staticmethod(estimation.estimate_number_of_trials)


# Short alias, reads like the distribution name.
negative_binomial = NegativeBinomial
