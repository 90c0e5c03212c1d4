"""
Effect-size classification.

Cohen's conventional thresholds for (partial) eta-squared: 0.01 small,
0.06 medium, 0.14 large. Values below 0.06 are reported as 'low'.
"""

from pyfactorial.anova._common import EffectMeaningfulness

MEDIUM_THRESHOLD = 0.06
HIGH_THRESHOLD = 0.14


def determine_effect_meaningfulness(effect_size: float) -> EffectMeaningfulness:
    """
    Bucket an eta-squared (or partial eta-squared) value.

    >>> determine_effect_meaningfulness(0.10).effect_meaningfulness
    'medium'
    """
    if effect_size >= HIGH_THRESHOLD:
        bucket = 'high'
    elif effect_size >= MEDIUM_THRESHOLD:
        bucket = 'medium'
    else:
        bucket = 'low'
    return EffectMeaningfulness(eta_squared=effect_size, effect_meaningfulness=bucket)


def eta_squared(effect_ss: float, error_ss: float) -> float:
    """SS_effect / (SS_effect + SS_error), 0 when both are 0."""
    denominator = effect_ss + error_ss
    return effect_ss / denominator if denominator > 0 else 0.0
