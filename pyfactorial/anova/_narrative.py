"""
Plain-language descriptions of significant effects.

Templates are deterministic: the same effect and post-hoc detail always
produce the same text.
"""

from typing import Sequence

from pyfactorial.anova._common import (
    CombinationMean,
    InteractionStatAnalysis,
    LevelMean,
    MainEffectStatAnalysis,
    PairwiseComparison,
)

MAX_LISTED_PAIRS = 3

_COHEN_TERMS = {'low': 'small', 'medium': 'medium', 'high': 'large'}


def format_p_value(p_value: float) -> str:
    if p_value < 0.001:
        return "p < .001"
    return f"p = {p_value:.3f}"


def cohen_term(effect_meaningfulness: str) -> str:
    """Map 'low'/'medium'/'high' to Cohen's small/medium/large."""
    return _COHEN_TERMS.get(effect_meaningfulness, effect_meaningfulness)


def _test_statistic(effect: MainEffectStatAnalysis | InteractionStatAnalysis) -> str:
    sig = effect.significance_info
    text = (
        f"F({sig.degrees_of_freedom}, {effect.residual_degrees_of_freedom}) = "
        f"{sig.f_value:.2f}, {format_p_value(sig.p_value)}"
    )
    if effect.adjusted_p_value != sig.p_value:
        text += f", adjusted {format_p_value(effect.adjusted_p_value)}"
    return text


def _direction(
    response_variable: str,
    labelled_means: Sequence[tuple[str, float]],
) -> str:
    highest = max(labelled_means, key=lambda item: item[1])
    lowest = min(labelled_means, key=lambda item: item[1])
    return (
        f"The highest mean {response_variable} was at {highest[0]} "
        f"(M = {highest[1]:.2f}) and the lowest at {lowest[0]} "
        f"(M = {lowest[1]:.2f})."
    )


def _significant_pairs(comparisons: Sequence[PairwiseComparison]) -> str:
    significant = sorted(
        (c for c in comparisons if c.is_significant),
        key=lambda c: c.p_value,
    )
    if not significant:
        return "No individual pair differed significantly."

    listed = [
        f"{c.level1} vs {c.level2} (difference = {c.mean_difference:.2f}, "
        f"{format_p_value(c.p_value)})"
        for c in significant[:MAX_LISTED_PAIRS]
    ]
    text = "Significant differences: " + "; ".join(listed)
    remaining = len(significant) - MAX_LISTED_PAIRS
    if remaining > 0:
        text += f"; and {remaining} more"
    return text + "."


def _comparison_detail(comparisons: Sequence[PairwiseComparison]) -> str:
    if any(c.method == 'tukey' for c in comparisons):
        return (
            "Pairwise comparisons use Tukey's HSD to control the family-wise "
            "error rate. " + _significant_pairs(comparisons)
        )
    return _significant_pairs(comparisons)


def describe_main_effect(
    effect: MainEffectStatAnalysis,
    level_means: Sequence[LevelMean],
    comparisons: Sequence[PairwiseComparison],
) -> str:
    """
    Describe a significant main effect.

    Two-level factors get the mean difference with its confidence
    interval; factors with more levels get the Tukey HSD summary.
    """
    factor = effect.factor_name
    response = effect.response_variable
    size = effect.effect_meaningfulness
    sentences = [
        f"{factor} has a statistically significant effect on {response} "
        f"({_test_statistic(effect)}) with a {cohen_term(size.effect_meaningfulness)} "
        f"effect size (eta-squared = {size.eta_squared:.3f}).",
    ]
    if level_means:
        sentences.append(_direction(
            response, [(f"{factor} = {m.level}", m.mean) for m in level_means],
        ))

    if len(level_means) == 2 and len(comparisons) == 1:
        c = comparisons[0]
        ci = c.confidence_interval
        relation = "higher" if c.mean_difference > 0 else "lower"
        sentences.append(
            f"{response} at {c.level1} was {abs(c.mean_difference):.2f} {relation} "
            f"than at {c.level2} ({ci.confidence_level:.0%} CI "
            f"[{ci.lower:.2f}, {ci.upper:.2f}], {format_p_value(c.p_value)})."
        )
    elif comparisons:
        sentences.append(_comparison_detail(comparisons))
    return " ".join(sentences)


def describe_interaction(
    effect: InteractionStatAnalysis,
    combination_means: Sequence[CombinationMean],
    comparisons: Sequence[PairwiseComparison],
) -> str:
    """Describe a significant 2- or 3-way interaction."""
    factors = " x ".join(effect.factors)
    response = effect.response_variable
    size = effect.effect_meaningfulness
    sentences = [
        f"The {factors} interaction has a statistically significant effect on "
        f"{response} ({_test_statistic(effect)}) with a "
        f"{cohen_term(size.effect_meaningfulness)} effect size "
        f"(partial eta-squared = {size.eta_squared:.3f}).",
        f"The effect of each factor depends on the level of "
        f"{'the other' if effect.num_ways == 2 else 'the others'}.",
    ]
    if combination_means:
        sentences.append(_direction(
            response, [(m.label, m.mean) for m in combination_means],
        ))
    if comparisons:
        sentences.append(_comparison_detail(comparisons))
    return " ".join(sentences)
