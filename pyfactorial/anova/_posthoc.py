"""
Post-hoc detail for significant effects.

Welch t-test:
    Used when a factor (or every factor of an interaction) has exactly two
    levels. Welch-Satterthwaite df, two-sided p, CI diff +/- t_crit * se.

Tukey HSD:
    Used when more than two levels are compared. Pooled MSE and error df
    from the ANOVA; se = sqrt(MSE / 2 * (1/n_i + 1/n_j)), q = |diff| / se,
    p and critical value from the studentized range distribution with
    k = number of groups.

Level and combination means carry CIs from the pooled error term:
mean +/- t(1 - alpha/2, df_error) * sqrt(MSE / n).
"""

import itertools
from typing import Iterable, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

from pyfactorial.anova._common import (
    CombinationMean,
    ConfidenceInterval,
    InteractionResult,
    LevelMean,
    OneWayResult,
    PairwiseComparison,
)
from pyfactorial.distributions import t_ppf, t_sf, tukey_ppf, tukey_sf


def combination_label(factors: Sequence[str], levels: Sequence[str]) -> str:
    """Render a joint level combination as "A=x, B=y"."""
    return ', '.join(f"{f}={level}" for f, level in zip(factors, levels))


# =====================================================================
# Pairwise tests
# =====================================================================


def welch_t_test(
    label1: str,
    values1: NDArray,
    label2: str,
    values2: NDArray,
    alpha: float = 0.05,
) -> PairwiseComparison | None:
    """
    Welch two-sample t-test of level1 against level2.

    Returns None when either group has fewer than 2 observations or the
    standard error is 0.
    """
    x = np.asarray(values1, dtype=np.float64)
    y = np.asarray(values2, dtype=np.float64)
    n1, n2 = len(x), len(y)
    if n1 < 2 or n2 < 2:
        return None

    v1 = float(np.var(x, ddof=1)) / n1
    v2 = float(np.var(y, ddof=1)) / n2
    se = float(np.sqrt(v1 + v2))
    if se == 0.0:
        return None

    # Welch-Satterthwaite, fractional
    df = (v1 + v2) ** 2 / (v1 ** 2 / (n1 - 1) + v2 ** 2 / (n2 - 1))
    diff = float(np.mean(x) - np.mean(y))
    t_stat = diff / se
    p_value = min(2.0 * t_sf(abs(t_stat), df), 1.0)

    margin = t_ppf(1.0 - alpha / 2.0, df) * se
    return PairwiseComparison(
        level1=label1,
        level2=label2,
        mean_difference=diff,
        confidence_interval=ConfidenceInterval(
            lower=diff - margin,
            upper=diff + margin,
            confidence_level=1.0 - alpha,
        ),
        p_value=p_value,
        is_significant=p_value < alpha,
        method='welch',
    )


def tukey_hsd(
    groups: Mapping[str, NDArray],
    mse: float,
    df_error: float,
    alpha: float = 0.05,
    pairs: Iterable[tuple[str, str]] | None = None,
) -> list[PairwiseComparison]:
    """
    Tukey's Honestly Significant Difference comparisons.

    Args:
        groups: label -> values, in display order
        mse: Pooled error mean square from the ANOVA
        df_error: Error degrees of freedom from the ANOVA
        alpha: Family-wise significance level
        pairs: Label pairs to compare. Default: all pairs in group order.
            The family size k is always len(groups).

    Returns:
        One PairwiseComparison per pair; empty if the error term is unusable
    """
    k = len(groups)
    if k < 2 or mse <= 0 or df_error <= 0:
        return []

    means = {label: float(np.mean(v)) for label, v in groups.items() if len(v)}
    sizes = {label: len(v) for label, v in groups.items()}
    if pairs is None:
        pairs = itertools.combinations(groups, 2)

    q_crit = tukey_ppf(1.0 - alpha, k, df_error)

    comparisons = []
    for g1, g2 in pairs:
        if g1 not in means or g2 not in means:
            continue
        diff = means[g1] - means[g2]
        se = float(np.sqrt(mse / 2.0 * (1.0 / sizes[g1] + 1.0 / sizes[g2])))
        q_stat = abs(diff) / se
        p_value = tukey_sf(q_stat, k, df_error)
        margin = q_crit * se

        comparisons.append(PairwiseComparison(
            level1=g1,
            level2=g2,
            mean_difference=diff,
            confidence_interval=ConfidenceInterval(
                lower=diff - margin,
                upper=diff + margin,
                confidence_level=1.0 - alpha,
            ),
            p_value=p_value,
            is_significant=p_value < alpha,
            method='tukey',
        ))
    return comparisons


# =====================================================================
# Means with pooled-error confidence intervals
# =====================================================================


def _mean_interval(
    values: NDArray,
    mse: float,
    df_error: float,
    alpha: float,
) -> tuple[float, ConfidenceInterval]:
    mean = float(np.mean(values))
    half_width = t_ppf(1.0 - alpha / 2.0, df_error) * float(np.sqrt(mse / len(values)))
    return mean, ConfidenceInterval(
        lower=mean - half_width,
        upper=mean + half_width,
        confidence_level=1.0 - alpha,
    )


def level_means(oneway: OneWayResult, alpha: float = 0.05) -> tuple[LevelMean, ...]:
    """Per-level means, in level order."""
    out = []
    for level, values in oneway.groups.items():
        mean, ci = _mean_interval(values, oneway.within_ms, oneway.within_df, alpha)
        out.append(LevelMean(
            level=level,
            mean=mean,
            confidence_interval=ci,
            sample_size=len(values),
        ))
    return tuple(out)


def combination_means(
    result: InteractionResult,
    factors: Sequence[str],
    alpha: float = 0.05,
) -> tuple[CombinationMean, ...]:
    """Per-cell means for observed level combinations, in cartesian order."""
    out = []
    for key, values in result.cells.items():
        mean, ci = _mean_interval(values, result.residual_ms, result.residual_df, alpha)
        out.append(CombinationMean(
            combination=dict(zip(factors, key)),
            label=combination_label(factors, key),
            mean=mean,
            confidence_interval=ci,
            sample_size=len(values),
        ))
    return tuple(out)


# =====================================================================
# Effect-level comparison families
# =====================================================================


def main_effect_comparisons(
    oneway: OneWayResult,
    alpha: float = 0.05,
) -> tuple[PairwiseComparison, ...]:
    """Welch for a two-level factor, Tukey HSD over all pairs otherwise."""
    levels = list(oneway.groups)
    if len(levels) == 2:
        first, second = levels
        comparison = welch_t_test(
            first, oneway.groups[first], second, oneway.groups[second], alpha,
        )
        return (comparison,) if comparison is not None else ()
    return tuple(tukey_hsd(oneway.groups, oneway.within_ms, oneway.within_df, alpha))


def interaction_comparisons(
    result: InteractionResult,
    factors: Sequence[str],
    alpha: float = 0.05,
) -> tuple[PairwiseComparison, ...]:
    """
    Compare level combinations that differ in exactly one factor.

    Tukey HSD (k = number of observed cells, cell-model MSE) when any
    participating factor has more than two levels, Welch t-tests otherwise.
    """
    labels = {key: combination_label(factors, key) for key in result.cells}
    pairs = [
        (a, b) for a, b in itertools.combinations(result.cells, 2)
        if sum(x != y for x, y in zip(a, b)) == 1
    ]

    if any(len(levels) > 2 for levels in result.factor_levels.values()):
        groups = {labels[key]: values for key, values in result.cells.items()}
        return tuple(tukey_hsd(
            groups,
            result.residual_ms,
            result.residual_df,
            alpha,
            pairs=[(labels[a], labels[b]) for a, b in pairs],
        ))

    comparisons = []
    for a, b in pairs:
        comparison = welch_t_test(
            labels[a], result.cells[a], labels[b], result.cells[b], alpha,
        )
        if comparison is not None:
            comparisons.append(comparison)
    return tuple(comparisons)
