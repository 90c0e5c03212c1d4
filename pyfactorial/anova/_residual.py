"""
Residual (unexplained) variance per response variable.

    SS_residual = SS_total - sum over valid factors of SS_between
    df_residual = (N - 1) - sum over valid factors of df_between

Factors whose one-way ANOVA cannot be computed contribute nothing.
"""

from typing import Sequence

import numpy as np

from pyfactorial.anova._common import FormattedDataPoint, Residual
from pyfactorial.anova._oneway import MIN_MAIN_EFFECT_POINTS, observed_levels, oneway_anova


def residual_for(
    points: Sequence[FormattedDataPoint],
    factors: Sequence[str],
    response_variable: str,
) -> Residual | None:
    """Residual SS/df/MS, or None when df_residual <= 0 or data are too few."""
    data = [p for p in points if response_variable in p.response_variables]
    if len(data) < MIN_MAIN_EFFECT_POINTS:
        return None

    y = np.array([p.response_variables[response_variable] for p in data], dtype=np.float64)
    total_ss = float(np.sum((y - np.mean(y)) ** 2))

    model_ss = 0.0
    model_df = 0
    for factor in factors:
        levels = observed_levels(data, factor)
        if len(levels) <= 1:
            continue
        result = oneway_anova(data, factor, response_variable, levels)
        if result is None:
            continue
        model_ss += result.significance.sum_of_squares
        model_df += result.significance.degrees_of_freedom

    residual_df = (len(y) - 1) - model_df
    if residual_df <= 0:
        return None

    residual_ss = total_ss - model_ss
    return Residual(
        response_variable=response_variable,
        degrees_of_freedom=residual_df,
        sum_of_squares=residual_ss,
        mean_squares=residual_ss / residual_df,
    )
