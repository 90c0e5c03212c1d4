"""
Tests for plain-language effect descriptions.
"""

from dataclasses import replace

import pytest

from pyfactorial.anova._common import (
    CombinationMean,
    ConfidenceInterval,
    EffectMeaningfulness,
    InteractionStatAnalysis,
    LevelMean,
    MainEffectStatAnalysis,
    PairwiseComparison,
    SignificanceInfo,
)
from pyfactorial.anova._narrative import (
    cohen_term,
    describe_interaction,
    describe_main_effect,
    format_p_value,
)

CI = ConfidenceInterval(lower=-12.27, upper=-7.73, confidence_level=0.95)


def _significance(p_value=0.0002):
    return SignificanceInfo(
        sum_of_squares=150.0, degrees_of_freedom=1, mean_square=150.0,
        f_value=150.0, p_value=p_value,
    )


@pytest.fixture
def main_effect():
    return MainEffectStatAnalysis(
        factor_name='condition',
        response_variable='score',
        has_significant_relationship=True,
        significance_info=_significance(),
        effect_meaningfulness=EffectMeaningfulness(0.974, 'high'),
        residual_degrees_of_freedom=4,
        adjusted_p_value=0.0002,
    )


def _mean(level, mean):
    return LevelMean(level=level, mean=mean, confidence_interval=CI, sample_size=3)


def _comparison(a, b, diff, p, method='tukey'):
    return PairwiseComparison(
        level1=a, level2=b, mean_difference=diff, confidence_interval=CI,
        p_value=p, is_significant=p < 0.05, method=method,
    )


class TestFormatting:

    @pytest.mark.parametrize("p, text", [
        (0.0002, "p < .001"), (0.001, "p = 0.001"), (0.0456, "p = 0.046"), (0.5, "p = 0.500"),
    ])
    def test_format_p_value(self, p, text):
        assert format_p_value(p) == text

    def test_cohen_terms(self):
        assert cohen_term('low') == 'small'
        assert cohen_term('medium') == 'medium'
        assert cohen_term('high') == 'large'


class TestDescribeMainEffect:

    def test_two_levels(self, main_effect):
        text = describe_main_effect(
            main_effect,
            [_mean('control', 11.0), _mean('treatment', 21.0)],
            [_comparison('control', 'treatment', -10.0, 0.0004, method='welch')],
        )
        assert "F(1, 4) = 150.00, p < .001" in text
        assert "large effect size" in text
        assert "highest mean score was at condition = treatment (M = 21.00)" in text
        assert "lowest at condition = control (M = 11.00)" in text
        assert "10.00 lower than at treatment" in text
        assert "95% CI [-12.27, -7.73]" in text
        assert "Tukey" not in text

    def test_many_levels_truncates_pairs(self, main_effect):
        means = [_mean(f'p{i}', float(i)) for i in range(1, 6)]
        comparisons = [
            _comparison('p1', 'p5', -4.0, 0.001),
            _comparison('p2', 'p5', -3.0, 0.004),
            _comparison('p1', 'p4', -3.0, 0.003),
            _comparison('p3', 'p5', -2.0, 0.02),
            _comparison('p2', 'p4', -2.0, 0.03),
            _comparison('p1', 'p2', -1.0, 0.40),
        ]
        text = describe_main_effect(main_effect, means, comparisons)
        assert "Tukey's HSD" in text
        # sorted by p, three listed
        assert text.index("p1 vs p5") < text.index("p1 vs p4") < text.index("p2 vs p5")
        assert "p3 vs p5" not in text
        assert "and 2 more" in text
        assert "p1 vs p2" not in text

    def test_no_significant_pairs(self, main_effect):
        means = [_mean('a', 1.0), _mean('b', 2.0), _mean('c', 3.0)]
        comparisons = [_comparison('a', 'c', -2.0, 0.08)]
        text = describe_main_effect(main_effect, means, comparisons)
        assert "No individual pair differed significantly." in text

    def test_adjusted_p_reported(self, main_effect):
        adjusted = replace(main_effect, adjusted_p_value=0.0123)
        text = describe_main_effect(adjusted, [], [])
        assert "adjusted p = 0.012" in text

    def test_deterministic(self, main_effect):
        args = (main_effect, [_mean('a', 1.0), _mean('b', 2.0)], [])
        assert describe_main_effect(*args) == describe_main_effect(*args)


class TestDescribeInteraction:

    def test_two_way(self):
        effect = InteractionStatAnalysis(
            factors=('A', 'B'),
            response_variable='score',
            has_significant_relationship=True,
            significance_info=replace(_significance(0.03), sum_of_squares=25.0),
            effect_meaningfulness=EffectMeaningfulness(0.10, 'medium'),
            residual_degrees_of_freedom=12,
            adjusted_p_value=0.03,
        )
        means = [
            CombinationMean({'A': 'a0', 'B': 'b0'}, 'A=a0, B=b0', 10.5, CI, 4),
            CombinationMean({'A': 'a1', 'B': 'b1'}, 'A=a1, B=b1', 15.5, CI, 4),
        ]
        comparisons = [_comparison('A=a0, B=b1', 'A=a1, B=b1', -5.0, 0.001, method='welch')]
        text = describe_interaction(effect, means, comparisons)
        assert text.startswith("The A x B interaction")
        assert "F(1, 12) = 150.00, p = 0.030" in text
        assert "medium effect size (partial eta-squared = 0.100)" in text
        assert "depends on the level of the other." in text
        assert "highest mean score was at A=a1, B=b1" in text
        assert "A=a0, B=b1 vs A=a1, B=b1" in text

    def test_three_way_wording(self):
        effect = InteractionStatAnalysis(
            factors=('A', 'B', 'C'),
            response_variable='score',
            has_significant_relationship=True,
            significance_info=_significance(),
            effect_meaningfulness=EffectMeaningfulness(0.2, 'high'),
            residual_degrees_of_freedom=8,
            adjusted_p_value=0.0002,
            num_ways=3,
        )
        text = describe_interaction(effect, [], [])
        assert "The A x B x C interaction" in text
        assert "the others." in text
