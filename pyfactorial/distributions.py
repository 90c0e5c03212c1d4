"""
Distribution functions used by the analysis engine.

Every public function evaluates scipy.stats first. If scipy raises or
returns a non-finite value, a documented approximation is substituted and
the substitution is logged. These functions never raise for numeric input.

Fallback values are approximations and should be read as conservative
estimates, not exact probabilities:

    f_sf        normal approximation (denominator df > 100), otherwise the
                Markov bound P(F >= f) <= E[F] / f
    t_cdf/t_sf  normal approximation with a variance correction
    t_ppf       Cornish-Fisher expansion around the normal quantile
    tukey_sf    df > 100: range distribution of k normals (df -> inf),
                otherwise a Bonferroni-adjusted t probability
    tukey_ppf   q(0.95, k, inf) table scaled by a df correction, or a
                Bonferroni t critical value at other confidence levels
"""

import logging
import math
from functools import lru_cache
from statistics import NormalDist
from typing import Callable

import numpy as np
from scipy import special as sp_special
from scipy import stats as sp_stats

logger = logging.getLogger(__name__)

_STANDARD_NORMAL = NormalDist()

# Upper 5% points of the studentized range with infinite error df, k = 2..10.
_Q95_INF = {
    2: 2.772, 3: 3.314, 4: 3.633, 5: 3.858, 6: 4.030,
    7: 4.170, 8: 4.286, 9: 4.387, 10: 4.474,
}


def _evaluate(
    name: str,
    primary: Callable[..., float],
    fallback: Callable[..., float],
    *args: float,
) -> float:
    """Run the scipy path, dropping to the approximation on failure."""
    try:
        value = float(primary(*args))
    except (ArithmeticError, ValueError, TypeError) as exc:
        logger.warning("%s%r failed (%s); using approximation", name, args, exc)
        return fallback(*args)
    if not math.isfinite(value):
        logger.warning("%s%r returned %r; using approximation", name, args, value)
        return fallback(*args)
    return value


def _clip_probability(p: float) -> float:
    if math.isnan(p):
        return 1.0
    return min(max(p, 0.0), 1.0)


# =====================================================================
# Normal
# =====================================================================


def normal_cdf(x: float) -> float:
    """Standard normal CDF."""
    return 0.5 * math.erfc(-x / math.sqrt(2.0))


def _normal_cdf_array(x: np.ndarray) -> np.ndarray:
    """normal_cdf over an array in one call."""
    return sp_special.ndtr(x)


# =====================================================================
# F distribution
# =====================================================================


def f_sf(f_value: float, df_num: float, df_denom: float) -> float:
    """
    Right-tail probability P(F >= f_value) of the F distribution.

    Args:
        f_value: Observed F statistic
        df_num: Numerator degrees of freedom
        df_denom: Denominator degrees of freedom

    Returns:
        p-value in [0, 1]
    """
    p = _evaluate(
        'f_sf',
        lambda f, d1, d2: sp_stats.f.sf(f, d1, d2),
        approximate_f_sf,
        f_value, df_num, df_denom,
    )
    return _clip_probability(p)


def approximate_f_sf(f_value: float, df_num: float, df_denom: float) -> float:
    """Scipy-free F right tail. Conservative for small denominator df."""
    try:
        if f_value <= 0:
            return 1.0
        if df_denom > 100:
            z = math.sqrt(f_value) - math.sqrt((2.0 * df_num - 1.0) / df_num)
            return _clip_probability(1.0 - normal_cdf(z))
        if df_denom > 2:
            expected = df_denom / (df_denom - 2.0)
            return _clip_probability(expected / f_value)
        return 1.0
    except (ArithmeticError, ValueError):
        return 1.0


# =====================================================================
# t distribution
# =====================================================================


def t_cdf(t_value: float, df: float) -> float:
    """Student t CDF P(T <= t_value)."""
    p = _evaluate(
        't_cdf',
        lambda t, d: sp_stats.t.cdf(t, d),
        _approximate_t_cdf,
        t_value, df,
    )
    return _clip_probability(p)


def t_sf(t_value: float, df: float) -> float:
    """Student t survival function P(T >= t_value)."""
    p = _evaluate(
        't_sf',
        lambda t, d: sp_stats.t.sf(t, d),
        lambda t, d: 1.0 - _approximate_t_cdf(t, d),
        t_value, df,
    )
    return _clip_probability(p)


def t_ppf(q: float, df: float) -> float:
    """Student t quantile (critical value) for lower-tail probability q."""
    return _evaluate(
        't_ppf',
        lambda p, d: sp_stats.t.ppf(p, d),
        _approximate_t_ppf,
        q, df,
    )


def _approximate_t_cdf(t_value: float, df: float) -> float:
    if df <= 0 or math.isnan(t_value):
        return 0.5
    z = t_value * (1.0 - 1.0 / (4.0 * df)) / math.sqrt(1.0 + t_value ** 2 / (2.0 * df))
    return normal_cdf(z)


def _approximate_t_ppf(q: float, df: float) -> float:
    if not 0.0 < q < 1.0 or df <= 0:
        return math.nan
    z = _STANDARD_NORMAL.inv_cdf(q)
    g1 = (z ** 3 + z) / 4.0
    g2 = (5.0 * z ** 5 + 16.0 * z ** 3 + 3.0 * z) / 96.0
    g3 = (3.0 * z ** 7 + 19.0 * z ** 5 + 17.0 * z ** 3 - 15.0 * z) / 384.0
    return z + g1 / df + g2 / df ** 2 + g3 / df ** 3


# =====================================================================
# Studentized range (Tukey HSD)
# =====================================================================


def tukey_sf(q_value: float, k: int, df: float) -> float:
    """
    Right-tail probability of the studentized range distribution.

    Args:
        q_value: Observed studentized range statistic
        k: Number of groups in the family of comparisons (>= 2)
        df: Error degrees of freedom

    Returns:
        Tukey-adjusted p-value in [0, 1]
    """
    if q_value <= 0:
        return 1.0
    p = _evaluate(
        'tukey_sf',
        lambda q, n, d: sp_stats.studentized_range.sf(q, n, d),
        approximate_tukey_sf,
        q_value, k, df,
    )
    return _clip_probability(p)


@lru_cache(maxsize=256)
def tukey_ppf(conf_level: float, k: int, df: float) -> float:
    """
    Critical value q such that P(Q <= q) = conf_level.

    Cached: every comparison in a family shares the same (k, df).
    """
    return _evaluate(
        'tukey_ppf',
        lambda c, n, d: sp_stats.studentized_range.ppf(c, n, d),
        approximate_tukey_ppf,
        conf_level, k, df,
    )


def approximate_tukey_sf(q_value: float, k: int, df: float) -> float:
    """Scipy-free studentized range right tail."""
    if df > 100:
        return _range_sf_infinite_df(q_value, k)
    n_pairs = k * (k - 1) / 2.0
    t_value = q_value / math.sqrt(2.0)
    return _clip_probability(n_pairs * 2.0 * t_sf(t_value, df))


def approximate_tukey_ppf(conf_level: float, k: int, df: float) -> float:
    """Scipy-free studentized range critical value."""
    if math.isclose(conf_level, 0.95) and df > 0:
        if k in _Q95_INF:
            q_inf = _Q95_INF[k]
        else:
            q_inf = _Q95_INF[10] + 0.07 * (k - 10)
        return q_inf * (1.0 + (1.0 + k / 4.0) / df + 2.0 / df ** 2)
    n_pairs = k * (k - 1) / 2.0
    alpha = 1.0 - conf_level
    return math.sqrt(2.0) * t_ppf(1.0 - alpha / (2.0 * n_pairs), df)


def _range_sf_infinite_df(q_value: float, k: int) -> float:
    """
    P(range of k standard normals > q), integrating over the minimum:

        P(R <= q) = k * integral phi(z) * [Phi(z + q) - Phi(z)]^(k-1) dz
    """
    z = np.linspace(-8.0, 8.0, 3201)
    dz = z[1] - z[0]
    phi = np.exp(-0.5 * z ** 2) / math.sqrt(2.0 * math.pi)
    cdf_low = _normal_cdf_array(z)
    cdf_high = _normal_cdf_array(z + q_value)
    inner = np.clip(cdf_high - cdf_low, 0.0, 1.0) ** (k - 1)
    p_within = float(k * np.sum(phi * inner) * dz)
    return _clip_probability(1.0 - p_within)
