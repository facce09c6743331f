"""
negbinom.stats.schemes.negative_binomial.estimation
===================================================

Inverse estimation for the negative binomial model.

Given observed outcomes, these functions invert the cumulative distribution
with respect to a parameter instead of the failure count:

- ``estimate_lower_bound_on_p`` / ``estimate_upper_bound_on_p`` bound the
  success fraction consistent with ``successes`` in ``trials``.
- ``estimate_number_of_trials`` sizes an experiment so that at most
  ``failures`` failures are seen with a stated probability.

Confidence bounds are one-sided. For a two-sided interval at level
``1 - alpha`` pass ``alpha / 2`` to each bound.

Examples
--------
>>> from negbinom.stats.schemes.negative_binomial.estimation import (
...     estimate_lower_bound_on_p, estimate_upper_bound_on_p)
>>> lo = estimate_lower_bound_on_p(20, 5, 0.025)
>>> hi = estimate_upper_bound_on_p(20, 5, 0.025)
>>> lo < 5 / 20 < hi
True
>>> estimate_upper_bound_on_p(10, 10, 0.05)
1.0
"""

from __future__ import annotations
import logging
import math
from typing import Optional

from negbinom.core.errors import DomainError, EvaluationError, ResultOverflowError
from negbinom.core.policy import Policy, guarded, resolve_policy
from negbinom.stats.common.checks import (
    check_failures,
    check_probability,
    check_success_fraction,
    check_successes,
)
from negbinom.stats.common.roots import solve_monotone
from negbinom.stats.common.special import ibeta, ibetac

logger = logging.getLogger(__name__)


def _check_outcomes(function: str, trials: float, successes: float, probability: float):
    successes = check_successes(function, successes)
    failures = check_failures(function, float(trials) - successes)
    probability = check_probability(function, probability)
    return successes, failures, probability


def _solve_fraction(func, guess: float, increasing: bool, policy: Policy) -> float:
    res = solve_monotone(
        func,
        guess,
        increasing=increasing,
        lower=0.0,
        upper=1.0,
        rtol=policy.root_tolerance,
        max_iter=policy.max_root_iterations,
    )
    return min(max(res.root, 0.0), 1.0)


@guarded("estimate_lower_bound_on_p")
def estimate_lower_bound_on_p(
    trials: float,
    successes: float,
    probability: float,
    *,
    policy: Optional[Policy] = None,
) -> float:
    """
    Lower confidence bound on the success fraction.

    Args:
        trials: Total number of trials observed
        successes: Number of successes among them (> 0)
        probability: One-sided tail probability ``alpha`` in [0, 1]
        policy: Error policy; None uses the process default

    Returns:
        ``x`` in [0, 1] with ``I_x(successes, failures + 1) == probability``
    """
    function = "estimate_lower_bound_on_p"
    successes, failures, alpha = _check_outcomes(function, trials, successes, probability)
    if alpha == 0.0:
        return 0.0
    if alpha == 1.0:
        return 1.0
    active = resolve_policy(policy)
    estimate = _solve_fraction(
        lambda x: ibeta(successes, failures + 1.0, x) - alpha,
        successes / (successes + failures),
        True,
        active,
    )
    logger.debug(
        "lower bound on p for %r/%r at %r: %r", successes, trials, alpha, estimate
    )
    return estimate


@guarded("estimate_upper_bound_on_p")
def estimate_upper_bound_on_p(
    trials: float,
    successes: float,
    probability: float,
    *,
    policy: Optional[Policy] = None,
) -> float:
    """
    Upper confidence bound on the success fraction.

    Args:
        trials: Total number of trials observed
        successes: Number of successes among them (> 0)
        probability: One-sided tail probability ``alpha`` in [0, 1]
        policy: Error policy; None uses the process default

    Returns:
        1 when no failures were observed, otherwise ``x`` in [0, 1] with
        ``1 - I_x(successes, failures) == probability``

    Note:
        The bound uses ``failures`` where the lower bound uses
        ``failures + 1``. To check it against a fitted distribution, count one
        extra trial: ``upper(r + k + 1, r, alpha)`` recovers ``p`` when
        ``alpha == cdf_complement(k)`` for ``NegativeBinomial(r, p)``.
    """
    function = "estimate_upper_bound_on_p"
    successes, failures, alpha = _check_outcomes(function, trials, successes, probability)
    if failures == 0.0:
        return 1.0
    if alpha == 0.0:
        return 1.0
    if alpha == 1.0:
        return 0.0
    active = resolve_policy(policy)
    estimate = _solve_fraction(
        lambda x: ibetac(successes, failures, x) - alpha,
        successes / (successes + failures),
        False,
        active,
    )
    logger.debug(
        "upper bound on p for %r/%r at %r: %r", successes, trials, alpha, estimate
    )
    return estimate


@guarded("estimate_number_of_trials")
def estimate_number_of_trials(
    failures: float,
    p: float,
    probability: float,
    *,
    complement: bool = False,
    policy: Optional[Policy] = None,
) -> float:
    """
    Number of trials needed so that at most ``failures`` failures occur.

    Solves for the (real) number of successes ``r`` and returns
    ``r + failures``.

    Args:
        failures: Tolerated number of failures (>= 0)
        p: Success fraction of each trial, strictly between 0 and 1
        probability: ``P(at most failures)`` or, with ``complement=True``,
            ``P(more than failures)``
        complement: Interpret ``probability`` as the upper-tail probability
        policy: Error policy; None uses the process default

    Returns:
        Real number of trials ``>= failures``

    Edge cases:
        - ``P == 0`` (``Q == 1``): overflow, ``+inf`` under the default policy
        - ``P == 1`` (``Q == 0``): exactly ``failures``

    Examples:
        >>> estimate_number_of_trials(5, 0.5, 0.05, complement=True) > 5
        True
    """
    function = "estimate_number_of_trials"
    k = check_failures(function, failures)
    p = check_success_fraction(function, p)
    if p == 0.0 or p == 1.0:
        raise DomainError(
            f"success fraction must be strictly between 0 and 1, got {p}",
            function=function,
            value=p,
        )
    prob = check_probability(function, probability)
    if complement:
        infinite, trivial = prob == 1.0, prob == 0.0
    else:
        infinite, trivial = prob == 0.0, prob == 1.0
    if infinite:
        raise ResultOverflowError(
            f"probability {prob} requires infinitely many trials", value=prob
        )
    if trivial:
        return k

    active = resolve_policy(policy)
    if complement:
        func, increasing = (lambda a: ibetac(a, k + 1.0, p) - prob), True
    else:
        func, increasing = (lambda a: ibeta(a, k + 1.0, p) - prob), False
    try:
        res = solve_monotone(
            func,
            max(1.0, k * p / (1.0 - p)),
            increasing=increasing,
            lower=0.0,
            upper=math.inf,
            rtol=active.root_tolerance,
            max_iter=active.max_root_iterations,
        )
    except EvaluationError as exc:
        exc.fallback = exc.fallback + k
        raise
    logger.debug(
        "trials for %r failures at p=%r, %s=%r: %r",
        k,
        p,
        "Q" if complement else "P",
        prob,
        res.root + k,
    )
    return res.root + k
