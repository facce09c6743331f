"""
Statistical computations for the negative binomial model.

The package separates generic numerical machinery from the model that uses it:

1. **Common** (negbinom.stats.common):
   Special-function wrappers, the shared monotone root finder and argument
   validation. Nothing here knows about the negative binomial distribution.

2. **Schemes** (negbinom.stats.schemes):
   The negative binomial distribution and its inverse estimators, composed
   from the common pieces.

Example:
--------
>>> # Generic method
>>> from negbinom.stats.common.special import ibeta
>>> round(ibeta(1.0, 1.0, 0.25), 12)
0.25

>>> # Scheme-specific application
>>> from negbinom.stats.schemes.negative_binomial import NegativeBinomial
>>> NegativeBinomial(2, 0.5).cdf(1)
0.5
"""
