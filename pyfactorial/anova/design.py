"""
Analysis design object.

Selects the factors and response variables that can be analyzed and
reshapes raw experiment results into FormattedDataPoint records.
"""

from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Sequence

from pyfactorial.anova._common import FormattedDataPoint
from pyfactorial.core.exceptions import ValidationError
from pyfactorial.core.validation import check_not_none, check_sequence, is_numeric_value
from pyfactorial.experiment import ExperimentConfig, ExperimentResult


def select_factors(
    config: ExperimentConfig,
    results: Sequence[ExperimentResult],
) -> list[str]:
    """
    Factors with at least two levels actually observed in the results.

    The unit factor (model identity) comes first when more than one unit
    is configured, followed by configured factors in declaration order.
    Configured levels that were never observed do not count.
    """
    candidates: list[str] = []
    if len(config.units) > 1:
        candidates.append(config.unit_factor)
    for factor in config.factors:
        if len(factor.levels) > 1 and factor.name not in candidates:
            candidates.append(factor.name)

    selected = []
    for name in candidates:
        observed = set()
        for result in results:
            level = _factor_level(result, name, config.unit_factor)
            if level is not None:
                observed.add(level)
        if len(observed) > 1:
            selected.append(name)
    return selected


def select_response_variables(
    config: ExperimentConfig,
    results: Sequence[ExperimentResult],
) -> list[str]:
    """Numerical response variables with at least one numeric value in the results."""
    selected = []
    for variable in config.response_variables:
        if not variable.is_numerical:
            continue
        if any(is_numeric_value(r.response_variables.get(variable.name)) for r in results):
            selected.append(variable.name)
    return selected


def reshape_results(
    results: Sequence[ExperimentResult],
    valid_factors: Sequence[str],
    valid_response_variables: Sequence[str],
    unit_factor: str = 'model',
) -> list[FormattedDataPoint]:
    """
    Convert results into FormattedDataPoint records, preserving order.

    A result is dropped if it lacks a level for any valid factor or holds
    no numeric value for any valid response variable.
    """
    points = []
    for result in results:
        factors: dict[str, str] = {}
        for name in valid_factors:
            level = _factor_level(result, name, unit_factor)
            if level is not None:
                factors[name] = level

        responses: dict[str, float] = {}
        for name in valid_response_variables:
            value = result.response_variables.get(name)
            if is_numeric_value(value):
                responses[name] = float(value)

        if len(factors) == len(valid_factors) and responses:
            points.append(FormattedDataPoint(factors=factors, response_variables=responses))
    return points


def _factor_level(result: ExperimentResult, factor: str, unit_factor: str) -> str | None:
    if factor == unit_factor:
        return result.unit or None
    level = result.factors.get(factor)
    if level is None or level == '':
        return None
    return str(level)


@dataclass(frozen=True)
class AnalysisDesign:
    """
    Validated, reshaped data for one analysis run.

    Created via from_experiment(), not directly.
    """
    points: tuple[FormattedDataPoint, ...]
    valid_factors: tuple[str, ...]
    valid_response_variables: tuple[str, ...]
    unit_factor: str
    n_results: int

    @staticmethod
    def from_experiment(
        config: Any,
        results: Any,
    ) -> 'AnalysisDesign':
        """
        Create a design from an experiment configuration and its results.

        Args:
            config: ExperimentConfig, or a mapping accepted by
                ExperimentConfig.from_dict
            results: Sequence of ExperimentResult (or mappings accepted by
                ExperimentResult.from_dict)

        Returns:
            AnalysisDesign. When no factor or no response variable qualifies
            the design holds no points.

        Raises:
            ValidationError: If config or results is missing or malformed
        """
        check_not_none(config, "config")
        check_not_none(results, "results")

        if isinstance(config, Mapping):
            config = ExperimentConfig.from_dict(config)
        if not isinstance(config, ExperimentConfig):
            raise ValidationError(
                f"config: expected ExperimentConfig, got {type(config).__name__}"
            )

        records = []
        for i, item in enumerate(check_sequence(results, "results")):
            if isinstance(item, Mapping):
                item = ExperimentResult.from_dict(item)
            if not isinstance(item, ExperimentResult):
                raise ValidationError(
                    f"results[{i}]: expected ExperimentResult, got {type(item).__name__}"
                )
            records.append(item)

        valid_factors = select_factors(config, records)
        valid_responses = select_response_variables(config, records)

        points: list[FormattedDataPoint] = []
        if valid_factors and valid_responses:
            points = reshape_results(
                records, valid_factors, valid_responses, config.unit_factor,
            )

        return AnalysisDesign(
            points=tuple(points),
            valid_factors=tuple(valid_factors),
            valid_response_variables=tuple(valid_responses),
            unit_factor=config.unit_factor,
            n_results=len(records),
        )

    @property
    def n(self) -> int:
        return len(self.points)

    def data_for(self, response_variable: str) -> list[FormattedDataPoint]:
        """Points that hold a value for the given response variable."""
        return [p for p in self.points if response_variable in p.response_variables]
