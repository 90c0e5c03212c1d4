"""
PyFactorial: statistical analysis of full-factorial experiments.

Runs main-effect and interaction ANOVA over every factor and numeric
response variable of an experiment, classifies effect sizes, and attaches
post-hoc comparisons and a plain-language description to each
significant effect.

Submodules:
    experiment: Experiment configuration and trial results
    anova: Analysis engine
    distributions: F, t and studentized range distribution functions
"""

__version__ = "0.1.0"

from pyfactorial import anova
from pyfactorial import experiment
from pyfactorial.anova import perform_statistical_analysis
from pyfactorial.experiment import ExperimentConfig, ExperimentResult

__all__ = [
    "__version__",
    "anova",
    "experiment",
    "perform_statistical_analysis",
    "ExperimentConfig",
    "ExperimentResult",
]
