import math

import pytest

from negbinom import (
    DenormalResultError,
    DomainError,
    NegativeBinomial,
    Policy,
    ResultOverflowError,
    ResultUnderflowError,
    negative_binomial,
)

# (successes, failures, success fraction, cdf)
SPOT_VALUES = [
    (2, 1, 0.5, 0.5),
    (2, 0, 0.25, 0.0625),
    (8, 48, 0.25, 9.826582228110670e-1),
    (5, 2, 0.4, 9.625600000000020e-2),
    (100, 10, 0.9, 4.535522887695670e-1),
    (100, 1, 0.991, 7.693413044217000e-1),
    (100, 10, 0.991, 9.999999940939000e-1),
]
# Reference value carries about ten significant digits.
LOOSE_SPOT = (100, 100000, 0.001, 5.173047534260320e-1)


@pytest.fixture
def dist8():
    return NegativeBinomial(8, 0.25)


@pytest.mark.parametrize("r, k, p, P", SPOT_VALUES)
def test_cdf_spot_values(r, k, p, P):
    dist = NegativeBinomial(r, p)
    assert dist.cdf(k) == pytest.approx(P, rel=1e-11)
    assert dist.cdf_complement(k) == pytest.approx(1 - P, rel=1e-9, abs=1e-13)


def test_cdf_spot_value_large_failure_count():
    r, k, p, P = LOOSE_SPOT
    dist = NegativeBinomial(r, p)
    assert dist.cdf(k) == pytest.approx(P, rel=1e-8)
    assert dist.cdf_complement(k) == pytest.approx(1 - P, rel=1e-8)


@pytest.mark.parametrize("r, k, p, P", SPOT_VALUES[:6])
def test_pdf_sums_to_cdf(r, k, p, P):
    dist = NegativeBinomial(r, p)
    assert math.fsum(dist.pdf(i) for i in range(k + 1)) == pytest.approx(P, rel=1e-11)


@pytest.mark.parametrize(
    "r, p, expected",
    [
        (2, 0.5, 0.25),
        (4, 0.5, 0.0625),
        (20, 0.25, 9.094947017729270e-13),
        (20, 0.2, 1.0485760000000003e-14),
        (10, 0.1, 1e-10),
        (20, 0.1, 1e-20),
        (20, 0.9, 1.215766545905690e-1),
    ],
)
def test_pdf_at_zero_failures(r, p, expected):
    assert NegativeBinomial(r, p).pdf(0) == pytest.approx(expected, rel=1e-12)


def test_cdf_at_one_failure_tiny_value():
    assert NegativeBinomial(20, 0.25).cdf(1) == pytest.approx(1.455191522836700e-11, rel=1e-11)


@pytest.mark.parametrize(
    "k, expected",
    [
        (0, 1.525878906250000e-5),
        (1, 1.068115234375010e-4),
        (2, 4.158020019531300e-4),
        (3, 1.188278198242200e-3),
        (4, 2.781510353088410e-3),
        (5, 5.649328231811500e-3),
        (6, 1.030953228473680e-2),
        (7, 1.729983836412430e-2),
        (8, 2.712995628826370e-2),
        (16, 0.233795830683125),
        (48, 0.982658222811067),
        (64, 9.990295004935590e-1),
    ],
)
def test_cdf_of_eight_successes_quarter_fraction(dist8, k, expected):
    assert dist8.cdf(k) == pytest.approx(expected, rel=1e-11)


@pytest.mark.parametrize(
    "r, p, k, expected",
    [
        (5, 0.4, 26, 9.989686246611190e-1),
        (50, 0.9, 20, 9.999970854144170e-1),
        (500, 0.7, 200, 2.172846379930550e-1),
        (50, 0.7, 20, 4.550203671301790e-1),
    ],
)
def test_cdf_other_spot_values(r, p, k, expected):
    assert NegativeBinomial(r, p).cdf(k) == pytest.approx(expected, rel=1e-11)


def test_pdf_matches_gamma_closed_form(dist8):
    r, p = 8.0, 0.25
    for k in range(33):
        closed = math.exp(
            math.lgamma(r + k) - math.lgamma(r) - math.lgamma(k + 1)
            + r * math.log(p)
            + k * math.log1p(-p)
        )
        assert dist8.pdf(k) == pytest.approx(closed, rel=1e-11)


def test_pdf_sum_matches_cdf_at_twenty(dist8):
    total = math.fsum(dist8.pdf(k) for k in range(21))
    assert total == pytest.approx(dist8.cdf(20), rel=1e-12)
    assert dist8.cdf(20) == pytest.approx(0.40025683281803698, rel=1e-12)


def test_cdf_and_complement_sum_to_one(dist8):
    for k in (0, 1, 5, 24, 100):
        assert dist8.cdf(k) + dist8.cdf_complement(k) == pytest.approx(1.0, rel=1e-14)


def test_cdf_is_monotone(dist8):
    values = [dist8.cdf(k) for k in range(0, 200, 5)]
    assert values == sorted(values)
    assert all(0.0 <= v <= 1.0 for v in values)


def test_complement_keeps_precision_in_upper_tail(dist8):
    q = dist8.cdf_complement(400)
    assert 0.0 < q < 1e-30


def test_real_valued_failure_counts(dist8):
    assert dist8.cdf(2) < dist8.cdf(2.5) < dist8.cdf(3)


def test_moments(dist8):
    assert dist8.mean() == pytest.approx(24.0, rel=1e-15)
    assert dist8.variance() == pytest.approx(96.0, rel=1e-15)
    assert dist8.standard_deviation() == pytest.approx(9.797958971132712, rel=1e-14)
    assert dist8.skewness() == pytest.approx(0.71443450831176036, rel=1e-14)
    assert dist8.kurtosis_excess() == pytest.approx(0.76041666666666667, rel=1e-14)
    assert dist8.kurtosis() == pytest.approx(3.76041666666666667, rel=1e-14)
    assert dist8.mode() == 21.0


def test_coefficient_of_variation_is_sd_over_mean(dist8):
    assert dist8.coefficient_of_variation() == pytest.approx(
        dist8.standard_deviation() / dist8.mean(), rel=1e-14
    )


def test_mode_is_zero_for_one_success_or_fewer():
    assert NegativeBinomial(1, 0.3).mode() == 0.0
    assert NegativeBinomial(0.5, 0.3).mode() == 0.0


def test_support_and_range(dist8):
    assert dist8.support() == (0.0, math.inf)
    assert dist8.range() == (0.0, math.inf)


def test_accessors_and_alias():
    dist = negative_binomial(3, 0.4)
    assert isinstance(dist, NegativeBinomial)
    assert dist.successes == 3.0
    assert dist.success_fraction == 0.4
    assert dist == NegativeBinomial(3.0, 0.4)


def test_hazard_and_cumulative_hazard(dist8):
    x = 0.125
    assert dist8.hazard(x) == pytest.approx(dist8.pdf(x) / dist8.cdf_complement(x), rel=1e-14)
    assert dist8.chf(x) == pytest.approx(-math.log(dist8.cdf_complement(x)), rel=1e-14)


def test_hazard_overflows_when_survival_vanishes():
    dist = NegativeBinomial(1, 1.0)
    # All mass at zero: survival past zero is 0 while the density is 1.
    assert dist.hazard(0) == math.inf
    assert dist.chf(0) == math.inf
    strict = dist.with_policy(Policy(on_overflow="raise"))
    with pytest.raises(ResultOverflowError):
        strict.hazard(0)


def test_pdf_at_success_fraction_bounds():
    assert NegativeBinomial(8, 0.0).pdf(0) == 0.0
    assert NegativeBinomial(8, 0.0).pdf(5) == 0.0
    assert NegativeBinomial(8, 1.0).pdf(0) == pytest.approx(1.0, rel=1e-14)
    assert NegativeBinomial(8, 1.0).pdf(3) == 0.0


def test_cdf_at_success_fraction_bounds():
    assert NegativeBinomial(8, 1.0).cdf(0) == 1.0
    assert NegativeBinomial(8, 0.0).cdf(10) == 0.0


def test_boundary_moments_overflow():
    zero = NegativeBinomial(8, 0.0)
    assert zero.mean() == math.inf
    assert zero.variance() == math.inf
    assert zero.mode() == math.inf
    one = NegativeBinomial(8, 1.0)
    assert one.mean() == 0.0
    assert one.variance() == 0.0
    assert one.skewness() == math.inf
    assert one.kurtosis() == math.inf
    assert one.coefficient_of_variation() == math.inf
    with pytest.raises(ResultOverflowError):
        NegativeBinomial(8, 0.0, policy=Policy(on_overflow="raise")).mean()


@pytest.mark.parametrize("r, p", [(-1, 0.25), (0, 0.25), (math.inf, 0.25), (8, -0.25), (8, 1.25)])
def test_invalid_parameters_raise(r, p):
    with pytest.raises(DomainError):
        NegativeBinomial(r, p)


@pytest.mark.parametrize("k", [-1, math.inf, math.nan])
def test_invalid_failure_counts_raise(dist8, k):
    with pytest.raises(DomainError):
        dist8.pdf(k)
    with pytest.raises(DomainError):
        dist8.cdf(k)
    with pytest.raises(DomainError):
        dist8.cdf_complement(k)


def test_domain_error_names_the_operation(dist8):
    with pytest.raises(DomainError, match="^cdf: number of failures") as info:
        dist8.cdf(-1)
    assert info.value.function == "cdf"
    assert info.value.value == -1.0
    # Catchable as the builtin as well.
    with pytest.raises(ValueError):
        dist8.pdf(-1)


def test_invalid_parameters_under_quiet_policy():
    quiet = Policy(on_domain_error="quiet_nan")
    dist = NegativeBinomial(8, 1.25, policy=quiet)
    assert math.isnan(dist.pdf(1))
    assert math.isnan(dist.cdf(1))
    assert math.isnan(dist.mean())
    assert math.isnan(NegativeBinomial(8, 0.25, policy=quiet).pdf(-1))


def test_policy_kwarg_is_not_part_of_equality():
    assert NegativeBinomial(8, 0.25) == NegativeBinomial(8, 0.25, policy=Policy(precision="float32"))


def test_float32_precision_rounds_results():
    dist = NegativeBinomial(8, 0.25, policy=Policy(precision="float32"))
    value = dist.cdf(16)
    assert value == pytest.approx(0.233795830683125, rel=1e-7)
    assert value != NegativeBinomial(8, 0.25).cdf(16)


def test_float32_underflow_returns_zero_by_default():
    single = Policy(precision="float32")
    assert NegativeBinomial(20, 0.1, policy=single).pdf(0) == pytest.approx(1e-20, rel=1e-6)
    # 1e-50 is representable in double but not in single precision.
    assert NegativeBinomial(25, 0.01, policy=single).pdf(0) == 0.0
    with pytest.raises(ResultUnderflowError):
        NegativeBinomial(25, 0.01, policy=single.replace(on_underflow="raise")).pdf(0)


def test_float32_subnormal_result():
    single = Policy(precision="float32")
    # 1e-40 is subnormal in single precision.
    value = NegativeBinomial(20, 0.01, policy=single).pdf(0)
    assert value == pytest.approx(1e-40, rel=1e-3)
    with pytest.raises(DenormalResultError):
        NegativeBinomial(20, 0.01, policy=single.replace(on_denorm="raise")).pdf(0)
