"""
Exception hierarchy for PyFactorial.

All exceptions inherit from PyFactorialError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyFactorialError(Exception):
    """Base exception for all PyFactorial errors."""
    pass


class ValidationError(PyFactorialError):
    """
    Input validation failed.

    Raised when the experiment configuration, the result list, or an
    analysis option fails validation. This is the only error the
    analysis entry point lets escape.
    """
    pass


class NumericalError(PyFactorialError):
    """
    Numerical computation failed.

    Raised inside the engine when a single effect cannot be computed.
    The orchestrator catches it, records a warning and skips the effect.

    Attributes:
        effect: Label of the effect being computed, if known
        response_variable: Response variable being analyzed, if known
    """

    def __init__(
        self,
        message: str,
        effect: str | None = None,
        response_variable: str | None = None,
    ):
        super().__init__(message)
        self.effect = effect
        self.response_variable = response_variable
