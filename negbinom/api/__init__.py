"""
negbinom.api - User-Friendly Facade
===================================

Task-oriented entry points over the distribution and its estimators, phrased
in the terms of someone planning or analysing a run of trials rather than in
terms of incomplete beta inversions.

Examples
--------
>>> from negbinom.api.trials import success_fraction_interval, trials_for_failures
>>> interval = success_fraction_interval(trials=40, successes=10, confidence=0.95)
>>> interval.lower < interval.point_estimate < interval.upper
True
>>> trials_for_failures(failures=5, success_fraction=0.5, confidence=0.95)
6

Unified Interface
-----------------
- `success_fraction_interval()`: two- or one-sided bounds on ``p``
- `trials_for_failures()`: most trials that keep within a failure budget
"""
