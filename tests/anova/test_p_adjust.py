"""
Tests for multiple-testing correction.

Reference values from R:
    p.adjust(c(0.01, 0.04, 0.03, 0.005), method = ...)
"""

import numpy as np
import pytest

from pyfactorial.anova._p_adjust import P_ADJUST_METHODS, adjust_effects, p_adjust
from pyfactorial.core.exceptions import ValidationError

P = [0.01, 0.04, 0.03, 0.005]


class TestReferenceValues:

    def test_bonferroni(self):
        np.testing.assert_allclose(p_adjust(P, 'bonferroni'), [0.04, 0.16, 0.12, 0.02])

    def test_holm(self):
        np.testing.assert_allclose(p_adjust(P, 'holm'), [0.03, 0.06, 0.06, 0.02])

    def test_hochberg(self):
        np.testing.assert_allclose(p_adjust(P, 'hochberg'), [0.03, 0.04, 0.04, 0.02])

    def test_bh(self):
        np.testing.assert_allclose(p_adjust(P, 'BH'), [0.02, 0.04, 0.04, 0.02])

    def test_fdr_alias(self):
        np.testing.assert_allclose(p_adjust(P, 'fdr'), p_adjust(P, 'BH'))

    def test_by(self):
        c = 1 + 1 / 2 + 1 / 3 + 1 / 4
        np.testing.assert_allclose(p_adjust(P, 'BY'), np.array([0.02, 0.04, 0.04, 0.02]) * c)

    def test_none(self):
        np.testing.assert_allclose(p_adjust(P, 'none'), P)


class TestProperties:

    @pytest.mark.parametrize("method", P_ADJUST_METHODS)
    def test_never_below_raw(self, method):
        adjusted = p_adjust(P, method)
        assert np.all(adjusted >= np.array(P) - 1e-15)

    @pytest.mark.parametrize("method", P_ADJUST_METHODS)
    def test_clipped(self, method):
        assert np.all(p_adjust([0.4, 0.6, 0.9], method) <= 1.0)

    def test_nan_passthrough(self):
        out = p_adjust([0.01, np.nan, 0.02], 'bonferroni')
        assert np.isnan(out[1])
        np.testing.assert_allclose(out[[0, 2]], [0.02, 0.04])

    def test_empty(self):
        assert adjust_effects([], 'holm') == []
        assert len(p_adjust([], 'holm')) == 0

    def test_adjust_effects_returns_floats(self):
        out = adjust_effects([0.01, 0.02], 'bonferroni')
        assert out == pytest.approx([0.02, 0.04])
        assert all(type(v) is float for v in out)

    def test_unknown_method(self):
        with pytest.raises(ValidationError, match="p_adjust"):
            p_adjust(P, 'hommel')
