"""
Factorial experiment analysis (ANOVA with post-hoc detail).

Public API:
    perform_statistical_analysis(config, results, ...) -> AnalysisSolution
    AnalysisDesign.from_experiment(config, results)   # selection + reshaping
    p_adjust(p, method)                               # multiple-testing correction
"""

from pyfactorial.anova._common import (
    CombinationMean,
    ConfidenceInterval,
    EffectMeaningfulness,
    FormattedDataPoint,
    InteractionEnhancedInfo,
    InteractionStatAnalysis,
    LevelMean,
    MainEffectEnhancedInfo,
    MainEffectStatAnalysis,
    PairwiseComparison,
    Residual,
    SignificanceInfo,
    StatAnalysis,
)
from pyfactorial.anova._p_adjust import P_ADJUST_METHODS, p_adjust
from pyfactorial.anova.design import AnalysisDesign
from pyfactorial.anova.solution import AnalysisSolution
from pyfactorial.anova.solvers import perform_statistical_analysis

__all__ = [
    "perform_statistical_analysis",
    "p_adjust",
    "P_ADJUST_METHODS",
    "AnalysisDesign",
    "AnalysisSolution",
    "CombinationMean",
    "ConfidenceInterval",
    "EffectMeaningfulness",
    "FormattedDataPoint",
    "InteractionEnhancedInfo",
    "InteractionStatAnalysis",
    "LevelMean",
    "MainEffectEnhancedInfo",
    "MainEffectStatAnalysis",
    "PairwiseComparison",
    "Residual",
    "SignificanceInfo",
    "StatAnalysis",
]
