"""
Common data types for the factorial analysis engine.

Contains the frozen payloads that the engine produces and the internal
intermediate results passed between its stages. Each payload is a pure
data container: no methods beyond trivial accessors, no computation.
"""

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray


# =====================================================================
# Reshaped input
# =====================================================================


@dataclass(frozen=True)
class FormattedDataPoint:
    """One trial reduced to valid factors and numeric responses."""
    factors: dict[str, str]
    response_variables: dict[str, float]


# =====================================================================
# Significance and effect size
# =====================================================================


@dataclass(frozen=True)
class SignificanceInfo:
    """F-test for one effect. mean_square = sum_of_squares / degrees_of_freedom."""
    sum_of_squares: float
    degrees_of_freedom: int
    mean_square: float
    f_value: float
    p_value: float


@dataclass(frozen=True)
class EffectMeaningfulness:
    """Effect size (eta^2 for main effects, partial eta^2 for interactions)."""
    eta_squared: float
    effect_meaningfulness: str     # 'low', 'medium', 'high'


# =====================================================================
# Post-hoc detail
# =====================================================================


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float
    confidence_level: float


@dataclass(frozen=True)
class LevelMean:
    """Mean response at one factor level."""
    level: str
    mean: float
    confidence_interval: ConfidenceInterval
    sample_size: int


@dataclass(frozen=True)
class CombinationMean:
    """Mean response at one joint combination of factor levels."""
    combination: dict[str, str]     # factor -> level
    label: str                      # "A=x, B=y"
    mean: float
    confidence_interval: ConfidenceInterval
    sample_size: int


@dataclass(frozen=True)
class PairwiseComparison:
    """
    One pairwise comparison. mean_difference = mean(level1) - mean(level2).
    """
    level1: str
    level2: str
    mean_difference: float
    confidence_interval: ConfidenceInterval
    p_value: float
    is_significant: bool
    method: str                     # 'welch' or 'tukey'


@dataclass(frozen=True)
class MainEffectEnhancedInfo:
    level_means: tuple[LevelMean, ...]
    pairwise_comparisons: tuple[PairwiseComparison, ...]
    natural_language_description: str


@dataclass(frozen=True)
class InteractionEnhancedInfo:
    combination_means: tuple[CombinationMean, ...]
    pairwise_comparisons: tuple[PairwiseComparison, ...]
    natural_language_description: str


# =====================================================================
# Effects
# =====================================================================


@dataclass(frozen=True)
class MainEffectStatAnalysis:
    """
    Main effect of one factor on one response variable.

    enhanced_info is populated only for significant effects.
    """
    factor_name: str
    response_variable: str
    has_significant_relationship: bool
    significance_info: SignificanceInfo
    effect_meaningfulness: EffectMeaningfulness
    residual_degrees_of_freedom: int
    adjusted_p_value: float
    enhanced_info: MainEffectEnhancedInfo | None = None
    num_ways: int = 1
    response_data_type: str = 'numerical'


@dataclass(frozen=True)
class InteractionStatAnalysis:
    """
    2- or 3-way interaction of factors on one response variable.

    enhanced_info is populated only for significant effects.
    """
    factors: tuple[str, ...]
    response_variable: str
    has_significant_relationship: bool
    significance_info: SignificanceInfo
    effect_meaningfulness: EffectMeaningfulness
    residual_degrees_of_freedom: int
    adjusted_p_value: float
    enhanced_info: InteractionEnhancedInfo | None = None
    num_ways: int = 2
    response_data_type: str = 'numerical'


@dataclass(frozen=True)
class Residual:
    """Variance in a response variable left after all main effects."""
    response_variable: str
    degrees_of_freedom: int
    sum_of_squares: float
    mean_squares: float


@dataclass(frozen=True)
class StatAnalysis:
    """
    Parameter payload for a full factorial analysis.

    Lists are ordered by response variable (config order), then factor or
    factor combination (declaration order).
    """
    main_effects: tuple[MainEffectStatAnalysis, ...]
    interactions: tuple[InteractionStatAnalysis, ...]
    residuals: tuple[Residual, ...]
    valid_factors: tuple[str, ...]
    valid_response_variables: tuple[str, ...]
    alpha: float
    p_adjust_method: str


# =====================================================================
# Internal stage results
# =====================================================================


@dataclass(frozen=True)
class OneWayResult:
    """Between/within decomposition for one factor and one response."""
    significance: SignificanceInfo
    within_ss: float
    within_df: int
    within_ms: float
    grand_mean: float
    groups: dict[str, NDArray[np.floating]]     # level -> values
    group_means: dict[str, float]


@dataclass(frozen=True)
class InteractionResult:
    """Cell-model decomposition for a combination of factors."""
    significance: SignificanceInfo
    residual_ss: float
    residual_df: int
    residual_ms: float
    grand_mean: float
    factor_levels: dict[str, tuple[str, ...]]
    cells: dict[tuple[str, ...], NDArray[np.floating]] = field(default_factory=dict)
