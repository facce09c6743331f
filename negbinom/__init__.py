"""
negbinom — the negative binomial distribution, computed through the incomplete beta function.

A negative binomial variable counts the failures ``k`` seen before the
``r``-th success in independent trials that succeed with probability ``p``.
negbinom treats the distribution as a small immutable value and reduces every
query (mass, cumulative probability, quantiles, moments, hazards) to the
regularized incomplete beta function, so the tails keep their precision where
the textbook product of binomial coefficients and powers collapses.

Inverting the same function with respect to ``p`` and ``r`` instead of ``k``
gives confidence bounds on the success fraction and the number of trials an
experiment needs. All inversions share one monotone root finder.

How errors are reported (raise, quiet NaN, or a fallback such as ``+inf``)
and the precision of results are governed by a `Policy`, which can be set per
distribution, per call, or process-wide through ``NEGBINOM_*`` environment
variables.

Example
-------
>>> import negbinom
>>> dist = negbinom.NegativeBinomial(8, 0.25)
>>> dist.mean(), dist.variance()
(24.0, 96.0)
>>> dist.quantile(1.0)
inf
"""

from negbinom.core.errors import (
    DenormalResultError,
    DomainError,
    EvaluationError,
    NegBinomError,
    ResultOverflowError,
    ResultUnderflowError,
)
from negbinom.core.names import ErrorAction, ErrorKind
from negbinom.core.policy import (
    Policy,
    get_default_policy,
    reset_default_policy,
    set_default_policy,
)
from negbinom.stats.schemes.negative_binomial import (
    NegativeBinomial,
    estimate_lower_bound_on_p,
    estimate_number_of_trials,
    estimate_upper_bound_on_p,
    negative_binomial,
)

__all__ = [
    "DenormalResultError",
    "DomainError",
    "ErrorAction",
    "ErrorKind",
    "EvaluationError",
    "NegBinomError",
    "NegativeBinomial",
    "Policy",
    "ResultOverflowError",
    "ResultUnderflowError",
    "estimate_lower_bound_on_p",
    "estimate_number_of_trials",
    "estimate_upper_bound_on_p",
    "get_default_policy",
    "negative_binomial",
    "reset_default_policy",
    "set_default_policy",
]
