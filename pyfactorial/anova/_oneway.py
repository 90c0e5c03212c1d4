"""
One-way ANOVA for a single factor and response variable.

    SS_between = sum_levels n_level * (mean_level - grand_mean)^2
    SS_within  = sum_points (value - mean_level)^2
    F = (SS_between / (k - 1)) / (SS_within / (N - k))

The routine is shared by the main-effect stage, the residual stage and the
interaction engine (which subtracts main-effect SS from the cell model).
"""

import math
from typing import Iterable, Sequence

import numpy as np

from pyfactorial.anova._common import (
    FormattedDataPoint,
    MainEffectStatAnalysis,
    OneWayResult,
    SignificanceInfo,
)
from pyfactorial.anova._effect_size import determine_effect_meaningfulness, eta_squared
from pyfactorial.core.exceptions import NumericalError
from pyfactorial.distributions import f_sf

MIN_MAIN_EFFECT_POINTS = 3


def observed_levels(points: Iterable[FormattedDataPoint], factor: str) -> list[str]:
    """Distinct levels of a factor in first-appearance order."""
    levels: list[str] = []
    seen: set[str] = set()
    for point in points:
        level = point.factors.get(factor)
        if level is not None and level not in seen:
            seen.add(level)
            levels.append(level)
    return levels


def oneway_anova(
    points: Sequence[FormattedDataPoint],
    factor: str,
    response_variable: str,
    levels: Sequence[str],
) -> OneWayResult | None:
    """
    Between/within-groups decomposition and F-test.

    Returns None when the data cannot support the test: fewer than
    len(levels) + 2 values, an empty level, non-positive degrees of
    freedom, or zero within-groups variance.
    """
    data = [p for p in points if response_variable in p.response_variables]
    k = len(levels)
    n = len(data)
    if n < k + 2:
        return None

    collected: dict[str, list[float]] = {level: [] for level in levels}
    for point in data:
        level = point.factors.get(factor)
        if level in collected:
            collected[level].append(point.response_variables[response_variable])

    if any(len(values) == 0 for values in collected.values()):
        return None

    y = np.array([p.response_variables[response_variable] for p in data], dtype=np.float64)
    grand_mean = float(np.mean(y))

    groups = {level: np.asarray(values, dtype=np.float64) for level, values in collected.items()}
    group_means = {level: float(np.mean(values)) for level, values in groups.items()}

    ss_between = float(sum(
        len(values) * (group_means[level] - grand_mean) ** 2
        for level, values in groups.items()
    ))
    ss_within = float(sum(
        np.sum((values - group_means[level]) ** 2)
        for level, values in groups.items()
    ))

    df_between = k - 1
    df_within = n - k
    if df_between <= 0 or df_within <= 0:
        return None

    ms_between = ss_between / df_between
    ms_within = ss_within / df_within
    if ms_within == 0:
        return None

    f_value = ms_between / ms_within
    if not math.isfinite(f_value):
        raise NumericalError(
            f"non-finite F statistic ({f_value!r})",
            effect=factor,
            response_variable=response_variable,
        )
    p_value = f_sf(f_value, df_between, df_within)

    return OneWayResult(
        significance=SignificanceInfo(
            sum_of_squares=ss_between,
            degrees_of_freedom=df_between,
            mean_square=ms_between,
            f_value=f_value,
            p_value=p_value,
        ),
        within_ss=ss_within,
        within_df=df_within,
        within_ms=ms_within,
        grand_mean=grand_mean,
        groups=groups,
        group_means=group_means,
    )


def main_effect_analysis(
    points: Sequence[FormattedDataPoint],
    factor: str,
    response_variable: str,
    *,
    alpha: float = 0.05,
) -> MainEffectStatAnalysis | None:
    """
    Main effect of one factor on one response variable.

    Effect size is eta-squared, SS_between / (SS_between + SS_within);
    for a one-way model this equals partial eta-squared.
    """
    data = [p for p in points if response_variable in p.response_variables]
    if len(data) < MIN_MAIN_EFFECT_POINTS:
        return None

    levels = observed_levels(data, factor)
    if len(levels) <= 1:
        return None

    result = oneway_anova(data, factor, response_variable, levels)
    if result is None:
        return None

    sig = result.significance
    return MainEffectStatAnalysis(
        factor_name=factor,
        response_variable=response_variable,
        has_significant_relationship=sig.p_value < alpha,
        significance_info=sig,
        effect_meaningfulness=determine_effect_meaningfulness(
            eta_squared(sig.sum_of_squares, result.within_ss)
        ),
        residual_degrees_of_freedom=result.within_df,
        adjusted_p_value=sig.p_value,
    )
