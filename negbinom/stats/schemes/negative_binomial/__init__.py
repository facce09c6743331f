"""
Negative binomial distribution and inverse estimation.

**Module Organization:**

- `distribution`: the `NegativeBinomial` value and all its queries
- `estimation`: confidence bounds on ``p`` and the number of trials

Example Usage
-------------
>>> from negbinom.stats.schemes.negative_binomial import NegativeBinomial
>>> dist = NegativeBinomial(8, 0.25)
>>> dist.successes, dist.success_fraction
(8.0, 0.25)
>>> dist.mode()
21.0
>>> NegativeBinomial.estimate_upper_bound_on_p(8, 8, 0.05)
1.0
"""

from negbinom.stats.schemes.negative_binomial.distribution import (
    NegativeBinomial,
    negative_binomial,
)
from negbinom.stats.schemes.negative_binomial.estimation import (
    estimate_lower_bound_on_p,
    estimate_number_of_trials,
    estimate_upper_bound_on_p,
)

__all__ = [
    "NegativeBinomial",
    "negative_binomial",
    "estimate_lower_bound_on_p",
    "estimate_number_of_trials",
    "estimate_upper_bound_on_p",
]
