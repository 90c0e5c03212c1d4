"""
Experiment input model.

Public API:
    ExperimentConfig     # factors, response variables, participating units
    ExperimentResult     # one trial record
    Factor, ResponseVariable
"""

from pyfactorial.experiment._common import (
    ExperimentConfig,
    ExperimentResult,
    Factor,
    ResponseVariable,
    VALID_DATA_TYPES,
)

__all__ = [
    "ExperimentConfig",
    "ExperimentResult",
    "Factor",
    "ResponseVariable",
    "VALID_DATA_TYPES",
]
