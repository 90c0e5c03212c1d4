"""
N-way interaction effects (k = 2 or 3 factors).

The cell model groups points by their joint level combination:

    SS_cells        = sum_cells n_cell * (mean_cell - grand_mean)^2
    df_cells        = prod(levels per factor) - 1
    SS_interaction  = SS_cells - sum of main-effect SS
    df_interaction  = df_cells - sum of main-effect df
    SS_residual     = sum_points (value - mean_cell)^2
    df_residual     = (N - 1) - df_cells

Effect size is partial eta-squared, SS_int / (SS_int + SS_residual).
"""

import itertools
import math
from typing import Iterator, Sequence

import numpy as np

from pyfactorial.anova._common import (
    FormattedDataPoint,
    InteractionResult,
    InteractionStatAnalysis,
    SignificanceInfo,
)
from pyfactorial.anova._effect_size import determine_effect_meaningfulness, eta_squared
from pyfactorial.anova._oneway import observed_levels, oneway_anova
from pyfactorial.core.exceptions import NumericalError
from pyfactorial.distributions import f_sf

MIN_INTERACTION_POINTS = 5


def factor_combinations(factors: Sequence[str], k: int) -> Iterator[tuple[str, ...]]:
    """Lazily yield k-subsets of factors in declaration order."""
    return itertools.combinations(factors, k)


def level_combinations(
    factor_levels: Sequence[Sequence[str]],
) -> Iterator[tuple[str, ...]]:
    """Lazily yield the cartesian product of per-factor levels."""
    return itertools.product(*factor_levels)


def interaction_effect(
    points: Sequence[FormattedDataPoint],
    factors: Sequence[str],
    response_variable: str,
) -> InteractionResult | None:
    """
    Interaction SS, df and F-test for a combination of factors.

    Returns None when the data cannot support the test: fewer than
    MIN_INTERACTION_POINTS values, a participating factor whose one-way
    ANOVA cannot be computed, non-positive interaction SS or df, fewer
    joint groups than factors, non-positive residual df, or zero residual
    variance.
    """
    data = [
        p for p in points
        if response_variable in p.response_variables
        and all(f in p.factors for f in factors)
    ]
    n = len(data)
    if n < MIN_INTERACTION_POINTS:
        return None

    y = np.array([p.response_variables[response_variable] for p in data], dtype=np.float64)
    grand_mean = float(np.mean(y))

    factor_levels = {f: tuple(observed_levels(data, f)) for f in factors}

    main_ss = 0.0
    main_df = 0
    for factor in factors:
        levels = factor_levels[factor]
        if len(levels) <= 1:
            continue
        main = oneway_anova(data, factor, response_variable, levels)
        if main is None:
            return None
        main_ss += main.significance.sum_of_squares
        main_df += main.significance.degrees_of_freedom

    collected: dict[tuple[str, ...], list[float]] = {}
    for point in data:
        key = tuple(point.factors[f] for f in factors)
        collected.setdefault(key, []).append(point.response_variables[response_variable])

    if len(collected) < len(factors):
        return None

    # Cells in cartesian order of the observed levels, for stable output.
    cells = {
        key: np.asarray(collected[key], dtype=np.float64)
        for key in level_combinations([factor_levels[f] for f in factors])
        if key in collected
    }
    cell_means = {key: float(np.mean(values)) for key, values in cells.items()}

    combined_ss = float(sum(
        len(values) * (cell_means[key] - grand_mean) ** 2
        for key, values in cells.items()
    ))
    combined_df = int(np.prod([len(levels) for levels in factor_levels.values()])) - 1

    interaction_ss = combined_ss - main_ss
    interaction_df = combined_df - main_df
    if interaction_ss <= 0 or interaction_df <= 0:
        return None

    residual_ss = float(sum(
        np.sum((values - cell_means[key]) ** 2)
        for key, values in cells.items()
    ))
    residual_df = (n - 1) - combined_df
    if residual_df <= 0:
        return None

    interaction_ms = interaction_ss / interaction_df
    residual_ms = residual_ss / residual_df
    if residual_ms == 0:
        return None

    f_value = interaction_ms / residual_ms
    if not math.isfinite(f_value):
        raise NumericalError(
            f"non-finite F statistic ({f_value!r})",
            effect=" x ".join(factors),
            response_variable=response_variable,
        )
    p_value = f_sf(f_value, interaction_df, residual_df)

    return InteractionResult(
        significance=SignificanceInfo(
            sum_of_squares=interaction_ss,
            degrees_of_freedom=interaction_df,
            mean_square=interaction_ms,
            f_value=f_value,
            p_value=p_value,
        ),
        residual_ss=residual_ss,
        residual_df=residual_df,
        residual_ms=residual_ms,
        grand_mean=grand_mean,
        factor_levels=factor_levels,
        cells=cells,
    )


def interaction_analysis(
    points: Sequence[FormattedDataPoint],
    factors: Sequence[str],
    response_variable: str,
    *,
    alpha: float = 0.05,
) -> InteractionStatAnalysis | None:
    """Interaction of 2 or 3 factors on one response variable."""
    result = interaction_effect(points, factors, response_variable)
    if result is None:
        return None

    sig = result.significance
    return InteractionStatAnalysis(
        factors=tuple(factors),
        response_variable=response_variable,
        has_significant_relationship=sig.p_value < alpha,
        significance_info=sig,
        effect_meaningfulness=determine_effect_meaningfulness(
            eta_squared(sig.sum_of_squares, result.residual_ss)
        ),
        residual_degrees_of_freedom=result.residual_df,
        adjusted_p_value=sig.p_value,
        num_ways=len(factors),
    )
