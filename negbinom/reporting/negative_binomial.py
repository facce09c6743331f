"""
negbinom.reporting.negative_binomial
====================================

Tabular views of a negative binomial model as `polars.DataFrame` objects,
plus a quick matplotlib plot of the mass and cumulative probability.

The tables are what one would print to check a model by eye: the
distribution over a range of failure counts, quantiles at a set of
probabilities, two-sided confidence limits on the success fraction for a
list of significance levels, and the most trials that stay within a failure
budget.

Examples
--------
>>> from negbinom.stats.schemes.negative_binomial import NegativeBinomial
>>> from negbinom.reporting.negative_binomial import distribution_table
>>> table = distribution_table(NegativeBinomial(2, 0.5), range(4))
>>> table.columns
['k', 'pdf', 'cdf', 'cdf_complement', 'hazard', 'chf']
>>> table.height
4
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List

import matplotlib.pyplot as plt
import polars as pl

from negbinom.stats.schemes.negative_binomial.distribution import NegativeBinomial
from negbinom.stats.schemes.negative_binomial.estimation import (
    estimate_lower_bound_on_p,
    estimate_number_of_trials,
    estimate_upper_bound_on_p,
)

DEFAULT_ALPHAS = (0.5, 0.25, 0.1, 0.05, 0.01, 0.001, 0.0001, 0.00001)


def _with_confidence(df: pl.DataFrame) -> pl.DataFrame:
    return df.with_columns((1.0 - pl.col("alpha")).alias("confidence"))


def distribution_table(dist: NegativeBinomial, failures: Iterable[float]) -> pl.DataFrame:
    """
    One row per failure count with the mass, both tails and the hazards.

    Columns: k, pdf, cdf, cdf_complement, hazard, chf
    """
    ks: List[float] = [float(k) for k in failures]
    return pl.DataFrame(
        {
            "k": ks,
            "pdf": [dist.pdf(k) for k in ks],
            "cdf": [dist.cdf(k) for k in ks],
            "cdf_complement": [dist.cdf_complement(k) for k in ks],
            "hazard": [dist.hazard(k) for k in ks],
            "chf": [dist.chf(k) for k in ks],
        },
        schema={
            "k": pl.Float64,
            "pdf": pl.Float64,
            "cdf": pl.Float64,
            "cdf_complement": pl.Float64,
            "hazard": pl.Float64,
            "chf": pl.Float64,
        },
    )


def quantile_table(dist: NegativeBinomial, probabilities: Iterable[float]) -> pl.DataFrame:
    """
    Quantile and complement quantile for each probability.

    ``quantile_complement`` is evaluated at ``1 - probability``, so both columns
    estimate the same failure count; the complement keeps its precision when
    ``probability`` is close to 1.

    Columns: probability, quantile, quantile_complement
    """
    probs = [float(x) for x in probabilities]
    return pl.DataFrame(
        {
            "probability": probs,
            "quantile": [dist.quantile(x) for x in probs],
            "quantile_complement": [dist.quantile_complement(1.0 - x) for x in probs],
        },
        schema={
            "probability": pl.Float64,
            "quantile": pl.Float64,
            "quantile_complement": pl.Float64,
        },
    )


def confidence_limits_table(
    trials: float, successes: float, alphas: Iterable[float] = DEFAULT_ALPHAS
) -> pl.DataFrame:
    """
    Two-sided limits on the success fraction, ``alpha / 2`` in each tail.

    Columns: alpha, confidence, lower, upper
    """
    levels = [float(a) for a in alphas]
    df = pl.DataFrame(
        {
            "alpha": levels,
            "lower": [estimate_lower_bound_on_p(trials, successes, a / 2) for a in levels],
            "upper": [estimate_upper_bound_on_p(trials, successes, a / 2) for a in levels],
        },
        schema={"alpha": pl.Float64, "lower": pl.Float64, "upper": pl.Float64},
    )
    return _with_confidence(df).select("alpha", "confidence", "lower", "upper")


def sample_size_table(
    failures: float, p: float, alphas: Iterable[float] = DEFAULT_ALPHAS
) -> pl.DataFrame:
    """
    Most trials that keep more than ``failures`` failures at probability ``alpha``.

    ``trials`` is the real-valued estimate; ``max_trials`` rounds it down, so
    running that many trials keeps the risk at or below ``alpha``.

    Columns: alpha, confidence, trials, max_trials
    """
    levels = [float(a) for a in alphas]
    df = pl.DataFrame(
        {
            "alpha": levels,
            "trials": [
                estimate_number_of_trials(failures, p, a, complement=True) for a in levels
            ],
        },
        schema={"alpha": pl.Float64, "trials": pl.Float64},
    )
    return (
        _with_confidence(df)
        .with_columns(pl.col("trials").floor().cast(pl.Int64).alias("max_trials"))
        .select("alpha", "confidence", "trials", "max_trials")
    )


@dataclass
class NegativeBinomialReporter:
    """Per-distribution tables and plot."""

    dist: NegativeBinomial

    def distribution_table(self, failures: Iterable[float]) -> pl.DataFrame:
        return distribution_table(self.dist, failures)

    def quantile_table(self, probabilities: Iterable[float]) -> pl.DataFrame:
        return quantile_table(self.dist, probabilities)

    def plot(self, max_failures: int, show: bool = True) -> None:
        """
        Plot the mass (bars) and cumulative probability (line) for
        ``k = 0..max_failures``.
        """
        table = self.distribution_table(range(int(max_failures) + 1))
        ks = table["k"].to_list()

        fig, ax_pdf = plt.subplots(figsize=(6.5, 4.2))
        ax_pdf.bar(ks, table["pdf"].to_list(), alpha=0.6, label="pdf")
        ax_pdf.set_xlabel("Failures (k)")
        ax_pdf.set_ylabel("Probability mass")

        ax_cdf = ax_pdf.twinx()
        ax_cdf.plot(ks, table["cdf"].to_list(), marker="o", markersize=3, label="cdf")
        ax_cdf.set_ylim(0.0, 1.0)
        ax_cdf.set_ylabel("Cumulative probability")

        ax_pdf.set_title(
            f"Negative binomial (r={self.dist.successes:g}, p={self.dist.success_fraction:g})"
        )
        fig.legend(loc="upper right")
        fig.tight_layout()
        if show:
            plt.show()
