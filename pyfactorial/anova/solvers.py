"""
Factorial experiment analysis.

Public API:
    perform_statistical_analysis(config, results, ...) -> AnalysisSolution

Stages run in a fixed order on a frozen AnalysisDesign:

    main effects -> residuals -> interactions -> p-value adjustment
    -> post-hoc enhancement of significant effects

Insufficient data for an effect omits it silently. An unexpected failure
while computing one effect is logged, recorded in Result.warnings, and the
effect is skipped; the remaining effects are still reported.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, TypeVar

from pyfactorial.core.result import Result
from pyfactorial.core.validation import check_int_range, check_one_of, check_probability
from pyfactorial.anova._common import (
    InteractionEnhancedInfo,
    InteractionStatAnalysis,
    MainEffectEnhancedInfo,
    MainEffectStatAnalysis,
    Residual,
    StatAnalysis,
)
from pyfactorial.anova._interaction import (
    factor_combinations,
    interaction_analysis,
    interaction_effect,
)
from pyfactorial.anova._narrative import describe_interaction, describe_main_effect
from pyfactorial.anova._oneway import main_effect_analysis, observed_levels, oneway_anova
from pyfactorial.anova._p_adjust import P_ADJUST_METHODS, adjust_effects
from pyfactorial.anova._posthoc import (
    combination_means,
    interaction_comparisons,
    level_means,
    main_effect_comparisons,
)
from pyfactorial.anova._residual import residual_for
from pyfactorial.anova.design import AnalysisDesign
from pyfactorial.anova.solution import AnalysisSolution

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _guarded(
    label: str,
    warnings_list: list[str],
    compute: Callable[[], T | None],
) -> T | None:
    """Run one per-effect computation, converting failures into warnings."""
    try:
        return compute()
    except Exception as exc:
        message = f"{label}: skipped after {type(exc).__name__}: {exc}"
        logger.warning("%s", message)
        warnings_list.append(message)
        return None


# =====================================================================
# Significance stages
# =====================================================================


def compute_main_effects(
    design: AnalysisDesign,
    alpha: float,
    warnings_list: list[str],
) -> list[MainEffectStatAnalysis]:
    """Main effect of every valid factor on every valid response variable."""
    effects = []
    for response in design.valid_response_variables:
        data = design.data_for(response)
        for factor in design.valid_factors:
            effect = _guarded(
                f"main effect {factor} on {response}",
                warnings_list,
                lambda: main_effect_analysis(data, factor, response, alpha=alpha),
            )
            if effect is not None:
                effects.append(effect)
    return effects


def compute_residuals(
    design: AnalysisDesign,
    warnings_list: list[str],
) -> list[Residual]:
    """Residual variance per response variable after all main effects."""
    residuals = []
    for response in design.valid_response_variables:
        residual = _guarded(
            f"residual for {response}",
            warnings_list,
            lambda: residual_for(design.points, design.valid_factors, response),
        )
        if residual is not None:
            residuals.append(residual)
    return residuals


def compute_interactions(
    design: AnalysisDesign,
    alpha: float,
    max_order: int,
    warnings_list: list[str],
) -> list[InteractionStatAnalysis]:
    """2-way then 3-way interactions per response variable."""
    effects = []
    for response in design.valid_response_variables:
        data = design.data_for(response)
        for order in range(2, max_order + 1):
            if len(design.valid_factors) < order:
                break
            for factors in factor_combinations(design.valid_factors, order):
                effect = _guarded(
                    f"interaction {' x '.join(factors)} on {response}",
                    warnings_list,
                    lambda: interaction_analysis(data, factors, response, alpha=alpha),
                )
                if effect is not None:
                    effects.append(effect)
    return effects


def adjust_significance(
    main_effects: list[MainEffectStatAnalysis],
    interactions: list[InteractionStatAnalysis],
    method: str,
    alpha: float,
) -> tuple[list[MainEffectStatAnalysis], list[InteractionStatAnalysis]]:
    """
    Apply multiple-testing correction across every tested effect.

    has_significant_relationship is recomputed from the adjusted p-value.
    With method 'none' the effects are returned unchanged.
    """
    if method == 'none':
        return main_effects, interactions

    raw = [e.significance_info.p_value for e in main_effects]
    raw += [e.significance_info.p_value for e in interactions]
    adjusted = adjust_effects(raw, method)

    n_main = len(main_effects)
    main_out = [
        replace(e, adjusted_p_value=p, has_significant_relationship=p < alpha)
        for e, p in zip(main_effects, adjusted[:n_main])
    ]
    interaction_out = [
        replace(e, adjusted_p_value=p, has_significant_relationship=p < alpha)
        for e, p in zip(interactions, adjusted[n_main:])
    ]
    return main_out, interaction_out


# =====================================================================
# Enhancement stage
# =====================================================================


def enhance_main_effect(
    effect: MainEffectStatAnalysis,
    design: AnalysisDesign,
    alpha: float,
) -> MainEffectStatAnalysis:
    """Attach level means, pairwise comparisons and a description."""
    data = design.data_for(effect.response_variable)
    levels = observed_levels(data, effect.factor_name)
    oneway = oneway_anova(data, effect.factor_name, effect.response_variable, levels)
    if oneway is None:
        return effect

    means = level_means(oneway, alpha)
    comparisons = main_effect_comparisons(oneway, alpha)
    return replace(effect, enhanced_info=MainEffectEnhancedInfo(
        level_means=means,
        pairwise_comparisons=comparisons,
        natural_language_description=describe_main_effect(effect, means, comparisons),
    ))


def enhance_interaction(
    effect: InteractionStatAnalysis,
    design: AnalysisDesign,
    alpha: float,
) -> InteractionStatAnalysis:
    """Attach combination means, pairwise comparisons and a description."""
    data = design.data_for(effect.response_variable)
    result = interaction_effect(data, effect.factors, effect.response_variable)
    if result is None:
        return effect

    means = combination_means(result, effect.factors, alpha)
    comparisons = interaction_comparisons(result, effect.factors, alpha)
    return replace(effect, enhanced_info=InteractionEnhancedInfo(
        combination_means=means,
        pairwise_comparisons=comparisons,
        natural_language_description=describe_interaction(effect, means, comparisons),
    ))


def _enhance_all(
    effects: list[T],
    enhance: Callable[[T], T],
    label: Callable[[T], str],
    warnings_list: list[str],
) -> list[T]:
    out = []
    for effect in effects:
        if effect.has_significant_relationship:
            enhanced = _guarded(
                f"post-hoc for {label(effect)}",
                warnings_list,
                lambda: enhance(effect),
            )
            out.append(enhanced if enhanced is not None else effect)
        else:
            out.append(effect)
    return out


# =====================================================================
# Public entry point
# =====================================================================


def perform_statistical_analysis(
    config: Any,
    results: Any,
    *,
    alpha: float = 0.05,
    p_adjust: str = 'none',
    max_interaction_order: int = 3,
) -> AnalysisSolution:
    """
    Analyze a full-factorial experiment.

    Args:
        config: ExperimentConfig (or a mapping accepted by
            ExperimentConfig.from_dict)
        results: Sequence of ExperimentResult (or mappings accepted by
            ExperimentResult.from_dict)
        alpha: Significance level. Confidence intervals use 1 - alpha.
        p_adjust: Multiple-testing correction across all effects. One of
            'none' (default), 'bonferroni', 'holm', 'hochberg', 'BH',
            'fdr', 'BY'.
        max_interaction_order: Highest interaction order to test (1 to 3).
            1 disables interactions.

    Returns:
        AnalysisSolution with main effects, interactions and residuals.
        Significant effects carry post-hoc detail in enhanced_info.

    Raises:
        ValidationError: If config or results is missing or malformed, or
            an option is out of range

    Examples:
        >>> solution = perform_statistical_analysis(config, results)
        >>> print(solution.summary())
        >>> for effect in solution.significant_main_effects:
        ...     print(effect.enhanced_info.natural_language_description)
    """
    alpha = check_probability(alpha, "alpha")
    check_one_of(p_adjust, P_ADJUST_METHODS, "p_adjust")
    max_order = check_int_range(max_interaction_order, 1, 3, "max_interaction_order")

    design = AnalysisDesign.from_experiment(config, results)
    warnings_list: list[str] = []

    if not design.valid_factors:
        warnings_list.append("no factor has two or more observed levels")
    if not design.valid_response_variables:
        warnings_list.append("no numerical response variable holds numeric values")

    main_effects = compute_main_effects(design, alpha, warnings_list)
    residuals = compute_residuals(design, warnings_list)
    interactions = compute_interactions(design, alpha, max_order, warnings_list)

    main_effects, interactions = adjust_significance(
        main_effects, interactions, p_adjust, alpha,
    )

    main_effects = _enhance_all(
        main_effects,
        lambda e: enhance_main_effect(e, design, alpha),
        lambda e: f"{e.factor_name} on {e.response_variable}",
        warnings_list,
    )
    interactions = _enhance_all(
        interactions,
        lambda e: enhance_interaction(e, design, alpha),
        lambda e: f"{' x '.join(e.factors)} on {e.response_variable}",
        warnings_list,
    )

    params = StatAnalysis(
        main_effects=tuple(main_effects),
        interactions=tuple(interactions),
        residuals=tuple(residuals),
        valid_factors=design.valid_factors,
        valid_response_variables=design.valid_response_variables,
        alpha=alpha,
        p_adjust_method=p_adjust,
    )

    result = Result(
        params=params,
        info={
            'alpha': alpha,
            'p_adjust': p_adjust,
            'max_interaction_order': max_order,
            'unit_factor': design.unit_factor,
            'n_results': design.n_results,
            'n_points': design.n,
        },
        timing=None,
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )

    return AnalysisSolution(_result=result)
