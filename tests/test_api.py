import math

import pytest

from negbinom import (
    DomainError,
    Policy,
    estimate_lower_bound_on_p,
    estimate_number_of_trials,
    estimate_upper_bound_on_p,
)
from negbinom.api.trials import (
    SuccessFractionInterval,
    success_fraction_interval,
    trials_for_failures,
)


def test_two_sided_interval():
    interval = success_fraction_interval(40, 10, confidence=0.95)
    assert isinstance(interval, SuccessFractionInterval)
    assert interval.sided == "two"
    assert interval.point_estimate == 0.25
    assert interval.lower == estimate_lower_bound_on_p(40, 10, 0.025)
    assert interval.upper == estimate_upper_bound_on_p(40, 10, 0.025)
    assert interval.contains(0.25)
    assert interval.width == pytest.approx(interval.upper - interval.lower)


def test_one_sided_intervals():
    lower_only = success_fraction_interval(40, 10, confidence=0.95, sided="lower")
    upper_only = success_fraction_interval(40, 10, confidence=0.95, sided="upper")
    assert lower_only.upper == 1.0
    assert upper_only.lower == 0.0
    assert lower_only.lower == estimate_lower_bound_on_p(40, 10, 0.05)
    assert upper_only.upper == estimate_upper_bound_on_p(40, 10, 0.05)
    two = success_fraction_interval(40, 10, confidence=0.95)
    # One-sided bounds put all of alpha in one tail, so they sit closer in.
    assert lower_only.lower > two.lower
    assert upper_only.upper < two.upper


def test_higher_confidence_gives_wider_interval():
    narrow = success_fraction_interval(200, 50, confidence=0.8)
    wide = success_fraction_interval(200, 50, confidence=0.99)
    assert wide.width > narrow.width


def test_interval_is_frozen():
    interval = success_fraction_interval(40, 10)
    with pytest.raises(AttributeError):
        interval.lower = 0.0


@pytest.mark.parametrize("confidence", [0.0, 1.0, -0.5, 1.5])
def test_confidence_must_be_open_unit_interval(confidence):
    with pytest.raises(ValueError, match="confidence"):
        success_fraction_interval(40, 10, confidence=confidence)
    with pytest.raises(ValueError, match="confidence"):
        trials_for_failures(5, 0.5, confidence=confidence)


def test_sided_is_validated():
    with pytest.raises(ValueError, match="sided"):
        success_fraction_interval(40, 10, sided="both")


def test_interval_propagates_domain_errors():
    with pytest.raises(DomainError):
        success_fraction_interval(5, 6)


def test_interval_with_quiet_policy():
    interval = success_fraction_interval(5, 6, policy=Policy(on_domain_error="quiet_nan"))
    assert math.isnan(interval.lower)
    assert math.isnan(interval.upper)


@pytest.mark.parametrize("trials", [0, -3])
def test_interval_without_trials_under_quiet_policy(trials):
    quiet = Policy(on_domain_error="quiet_nan")
    for sided in ("two", "lower", "upper"):
        interval = success_fraction_interval(trials, 5, sided=sided, policy=quiet)
        assert math.isnan(interval.point_estimate)
    assert math.isnan(success_fraction_interval(trials, 5, policy=quiet).lower)


def test_interval_without_trials_raises_domain_error():
    with pytest.raises(DomainError):
        success_fraction_interval(0, 5)


def test_trials_for_failures():
    planned = trials_for_failures(5, 0.5, confidence=0.95)
    assert isinstance(planned, int)
    assert planned == 6
    assert trials_for_failures(5, 0.5, confidence=0.99) <= planned
    assert planned == math.floor(estimate_number_of_trials(5, 0.5, 0.05, complement=True))


def test_trials_for_zero_failures():
    # The first trial already fails with probability 0.5.
    assert trials_for_failures(0, 0.5, confidence=0.75) == 0
    assert trials_for_failures(0, 0.5, confidence=0.4) == 1


def test_trials_for_failures_rejects_degenerate_fraction():
    with pytest.raises(DomainError):
        trials_for_failures(5, 1.0)
