"""
Family-wise and false-discovery-rate correction of effect p-values.

Matches R's p.adjust() for the supported methods. The family is every
effect tested in one analysis run (all main effects and interactions
across all response variables).

    bonferroni  p * m
    holm        step-down, cumulative max of p_(i) * (m - i + 1)
    hochberg    step-up, cumulative min of p_(i) * (m - i + 1)
    BH / fdr    step-up, cumulative min of p_(i) * m / i
    BY          BH scaled by sum_{j=1..m} 1/j
"""

from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyfactorial.core.exceptions import ValidationError

P_ADJUST_METHODS = ('none', 'bonferroni', 'holm', 'hochberg', 'BH', 'fdr', 'BY')


def p_adjust(p: ArrayLike, method: str = 'none') -> NDArray[np.floating]:
    """
    Adjust a family of p-values for multiple comparisons.

    Args:
        p: p-values, one per effect. NaN entries pass through unchanged
            and do not count toward the family size.
        method: One of P_ADJUST_METHODS

    Returns:
        Adjusted p-values in input order, clipped to [0, 1]

    Raises:
        ValidationError: If method is unknown
    """
    if method not in P_ADJUST_METHODS:
        raise ValidationError(
            f"p_adjust: must be one of {P_ADJUST_METHODS}, got {method!r}"
        )

    values = np.asarray(p, dtype=np.float64).ravel()
    adjusted = values.copy()
    finite = ~np.isnan(values)
    if method == 'none' or not np.any(finite):
        return adjusted

    pv = values[finite]
    m = len(pv)

    if method == 'bonferroni':
        out = pv * m
    elif method == 'holm':
        out = _step_down(pv, np.arange(m, 0, -1, dtype=np.float64))
    elif method == 'hochberg':
        out = _step_up(pv, np.arange(1, m + 1, dtype=np.float64))
    elif method in ('BH', 'fdr'):
        out = _step_up(pv, m / np.arange(m, 0, -1, dtype=np.float64))
    else:
        harmonic = float(np.sum(1.0 / np.arange(1, m + 1, dtype=np.float64)))
        out = _step_up(pv, harmonic * m / np.arange(m, 0, -1, dtype=np.float64))

    adjusted[finite] = np.clip(out, 0.0, 1.0)
    return adjusted


def _step_down(pv: NDArray, multipliers: NDArray) -> NDArray:
    """Ascending order; multipliers[i] applies to the i-th smallest p."""
    order = np.argsort(pv, kind='stable')
    scaled = np.maximum.accumulate(pv[order] * multipliers)
    out = np.empty_like(pv)
    out[order] = scaled
    return out


def _step_up(pv: NDArray, multipliers: NDArray) -> NDArray:
    """Descending order; multipliers[i] applies to the i-th largest p."""
    order = np.argsort(pv, kind='stable')[::-1]
    scaled = np.minimum.accumulate(pv[order] * multipliers)
    out = np.empty_like(pv)
    out[order] = scaled
    return out


def adjust_effects(p_values: Sequence[float], method: str) -> list[float]:
    """p_adjust() returning plain floats, for use on effect lists."""
    if not p_values:
        return []
    return [float(v) for v in p_adjust(list(p_values), method)]
