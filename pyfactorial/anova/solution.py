"""
User-facing analysis solution.

Wraps a Result[StatAnalysis] and provides accessors plus an R-style
summary of every tested effect.
"""

from dataclasses import dataclass
from typing import Any

from pyfactorial.core.result import Result
from pyfactorial.anova._common import (
    InteractionStatAnalysis,
    MainEffectStatAnalysis,
    Residual,
    StatAnalysis,
)


@dataclass
class AnalysisSolution:
    """
    Result of a factorial experiment analysis.

    Produced by perform_statistical_analysis().
    """
    _result: Result[StatAnalysis]

    @property
    def analysis(self) -> StatAnalysis:
        return self._result.params

    @property
    def main_effects(self) -> tuple[MainEffectStatAnalysis, ...]:
        return self._result.params.main_effects

    @property
    def interactions(self) -> tuple[InteractionStatAnalysis, ...]:
        return self._result.params.interactions

    @property
    def residuals(self) -> tuple[Residual, ...]:
        return self._result.params.residuals

    @property
    def valid_factors(self) -> tuple[str, ...]:
        return self._result.params.valid_factors

    @property
    def valid_response_variables(self) -> tuple[str, ...]:
        return self._result.params.valid_response_variables

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def significant_main_effects(self) -> tuple[MainEffectStatAnalysis, ...]:
        return tuple(e for e in self.main_effects if e.has_significant_relationship)

    @property
    def significant_interactions(self) -> tuple[InteractionStatAnalysis, ...]:
        return tuple(e for e in self.interactions if e.has_significant_relationship)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate an R-style table of effects per response variable."""
        p_label = 'Pr(>F)' if self.analysis.p_adjust_method == 'none' else 'adj. p'
        lines = [
            "Factorial Analysis of Variance",
            "=" * 78,
            f"Factors: {', '.join(self.valid_factors) or '(none)'}",
            f"Observations: {self.info.get('n_points', 0)}  "
            f"alpha = {self.alpha:g}  p adjustment: {self.analysis.p_adjust_method}",
        ]

        residuals = {r.response_variable: r for r in self.residuals}
        for response in self.valid_response_variables:
            lines.append("")
            lines.append(f"Response: {response}")
            lines.append(
                f"{'Source':<24} {'Df':>5} {'Sum Sq':>12} {'Mean Sq':>12} "
                f"{'F value':>9} {p_label:>11} {'eta^2':>7}"
            )
            lines.append("-" * 78)

            rows = [
                (e.factor_name, e) for e in self.main_effects
                if e.response_variable == response
            ]
            rows += [
                (':'.join(e.factors), e) for e in self.interactions
                if e.response_variable == response
            ]
            for term, effect in rows:
                sig = effect.significance_info
                lines.append(
                    f"{term:<24} {sig.degrees_of_freedom:>5} {sig.sum_of_squares:>12.4f} "
                    f"{sig.mean_square:>12.4f} {sig.f_value:>9.4f} "
                    f"{effect.adjusted_p_value:>11.4e} "
                    f"{effect.effect_meaningfulness.eta_squared:>7.4f} "
                    f"{_significance_stars(effect.adjusted_p_value)}"
                )

            residual = residuals.get(response)
            if residual is not None:
                lines.append(
                    f"{'Residuals':<24} {residual.degrees_of_freedom:>5} "
                    f"{residual.sum_of_squares:>12.4f} {residual.mean_squares:>12.4f}"
                )

        lines.append("-" * 78)
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")

        described = [
            e.enhanced_info.natural_language_description
            for e in self.significant_main_effects + self.significant_interactions
            if e.enhanced_info is not None
        ]
        if described:
            lines.append("")
            lines.append("Significant effects:")
            lines.extend(f"  - {text}" for text in described)

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            lines.extend(f"  {w}" for w in self.warnings)

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AnalysisSolution(factors={list(self.valid_factors)}, "
            f"responses={list(self.valid_response_variables)}, "
            f"main_effects={len(self.main_effects)}, "
            f"interactions={len(self.interactions)})"
        )


def _significance_stars(p: float) -> str:
    """Return significance stars for a p-value."""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""
