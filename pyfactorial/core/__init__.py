"""
Core infrastructure for PyFactorial.

Shared abstractions used by the experiment model and the analysis engine.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
"""

from pyfactorial.core.result import Result
from pyfactorial.core.exceptions import (
    PyFactorialError,
    ValidationError,
    NumericalError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyFactorialError",
    "ValidationError",
    "NumericalError",
]
