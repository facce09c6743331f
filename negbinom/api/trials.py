"""
negbinom.api.trials
===================

Planning and analysing a run of Bernoulli trials.

This module answers the two questions the negative binomial estimators exist
for, without asking the caller to think in tail probabilities:

- Having seen ``successes`` in ``trials``, what range of success fractions is
  consistent with the data at a given confidence?
- How many trials can be run while seeing no more than ``failures``
  failures, at a given confidence?

Examples
--------
>>> from negbinom.api.trials import success_fraction_interval, trials_for_failures
>>> interval = success_fraction_interval(trials=20, successes=5)
>>> interval.sided, interval.confidence, interval.point_estimate
('two', 0.95, 0.25)
>>> success_fraction_interval(trials=20, successes=5, sided="upper").lower
0.0
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Literal, Optional

from negbinom.core.policy import Policy
from negbinom.stats.schemes.negative_binomial.estimation import (
    estimate_lower_bound_on_p,
    estimate_number_of_trials,
    estimate_upper_bound_on_p,
)

Sided = Literal["two", "lower", "upper"]
_SIDES = ("two", "lower", "upper")


def _check_confidence(confidence: float) -> float:
    if not (0.0 < confidence < 1.0):
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")
    return float(confidence)


@dataclass(frozen=True)
class SuccessFractionInterval:
    """
    Confidence interval on the success fraction of a run of trials.

    A one-sided interval is open on one side: ``sided="lower"`` reports only a
    lower bound (its upper end is 1), ``sided="upper"`` only an upper bound
    (its lower end is 0).
    """

    lower: float
    upper: float
    point_estimate: float
    confidence: float
    sided: str

    def contains(self, p: float) -> bool:
        return self.lower <= p <= self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower


def success_fraction_interval(
    trials: float,
    successes: float,
    confidence: float = 0.95,
    sided: Sided = "two",
    *,
    policy: Optional[Policy] = None,
) -> SuccessFractionInterval:
    """
    Bound the success fraction given observed outcomes.

    Parameters
    ----------
    trials : float
        Number of trials run
    successes : float
        Number of successes among them (> 0)
    confidence : float, default=0.95
        Coverage of the interval, strictly between 0 and 1
    sided : {"two", "lower", "upper"}, default="two"
        - "two": ``(1 - confidence) / 2`` in each tail
        - "lower": lower bound only, all of ``1 - confidence`` below it
        - "upper": upper bound only, all of ``1 - confidence`` above it
    policy : Policy, optional
        Error policy passed to the estimators

    Returns
    -------
    SuccessFractionInterval
        Bounds, the point estimate ``successes / trials`` and the settings used.
        Under a non-raising domain policy, invalid outcomes give NaN bounds and
        a NaN point estimate when ``trials <= 0``.

    Examples
    --------
    >>> iv = success_fraction_interval(40, 10, confidence=0.9, sided="lower")
    >>> iv.upper
    1.0
    """
    confidence = _check_confidence(confidence)
    if sided not in _SIDES:
        raise ValueError(f"sided must be one of {_SIDES}, got {sided!r}")
    alpha = 1.0 - confidence

    if sided == "two":
        lower = estimate_lower_bound_on_p(trials, successes, alpha / 2, policy=policy)
        upper = estimate_upper_bound_on_p(trials, successes, alpha / 2, policy=policy)
    elif sided == "lower":
        lower = estimate_lower_bound_on_p(trials, successes, alpha, policy=policy)
        upper = 1.0
    else:
        lower = 0.0
        upper = estimate_upper_bound_on_p(trials, successes, alpha, policy=policy)

    return SuccessFractionInterval(
        lower=lower,
        upper=upper,
        point_estimate=float(successes) / float(trials) if trials > 0 else math.nan,
        confidence=confidence,
        sided=sided,
    )


def trials_for_failures(
    failures: float,
    success_fraction: float,
    confidence: float = 0.95,
    *,
    policy: Optional[Policy] = None,
) -> int:
    """
    Most trials that can be run while keeping to ``failures`` failures at the given confidence.

    Parameters
    ----------
    failures : float
        Tolerated number of failures (>= 0)
    success_fraction : float
        Success fraction of each trial, strictly between 0 and 1
    confidence : float, default=0.95
        Required probability of staying within ``failures``
    policy : Policy, optional
        Error policy passed to the estimator

    Returns
    -------
    int
        Largest whole number of trials at or below the real-valued estimate;
        more confidence allows fewer trials

    Examples
    --------
    >>> trials_for_failures(0, 0.5, confidence=0.4)
    1
    """
    confidence = _check_confidence(confidence)
    estimate = estimate_number_of_trials(
        failures, success_fraction, 1.0 - confidence, complement=True, policy=policy
    )
    return int(math.floor(estimate))
