"""
Input data model for a factorial experiment.

These frozen containers describe what the experiment-execution side hands
to the analysis engine: the configuration (factors, response variables,
participating units) and one ExperimentResult per trial. They carry no
computation beyond construction from plain mappings.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pyfactorial.core.exceptions import ValidationError
from pyfactorial.core.validation import check_sequence


VALID_DATA_TYPES = ('numerical', 'categorical')


@dataclass(frozen=True)
class Factor:
    """A categorical independent variable and its configured levels."""
    name: str
    levels: tuple[str, ...]


@dataclass(frozen=True)
class ResponseVariable:
    """A measured outcome of a trial."""
    name: str
    data_type: str = 'numerical'    # 'numerical' or 'categorical'

    @property
    def is_numerical(self) -> bool:
        return self.data_type == 'numerical'


@dataclass(frozen=True)
class ExperimentConfig:
    """
    Configuration of a full-factorial experiment.

    Attributes:
        name: Human-readable experiment name
        factors: Factors in declaration order
        response_variables: Response variables in declaration order
        units: Identities of the participating models/units
        unit_factor: Factor name under which unit identity is analyzed
    """
    name: str
    factors: tuple[Factor, ...]
    response_variables: tuple[ResponseVariable, ...]
    units: tuple[str, ...] = ()
    unit_factor: str = 'model'

    @property
    def factor_names(self) -> list[str]:
        return [f.name for f in self.factors]

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> 'ExperimentConfig':
        """
        Build a configuration from a plain mapping (e.g. decoded JSON).

        Expected keys: 'factors' (list of {'name', 'levels'}),
        'response_variables' (list of {'name', 'data_type'}), and optionally
        'name', 'units' (list of names or {'name': ...}) and 'unit_factor'.

        Raises:
            ValidationError: If required keys are missing or malformed
        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"config: expected a mapping, got {type(data).__name__}"
            )

        factor_items = check_sequence(_require(data, 'factors', 'config'), 'config.factors')
        response_items = check_sequence(
            _require(data, 'response_variables', 'config'), 'config.response_variables',
        )
        unit_items = check_sequence(data.get('units', ()), 'config.units')

        factors = []
        for i, item in enumerate(factor_items):
            name = _require(item, 'name', f"config.factors[{i}]")
            levels = check_sequence(
                _require(item, 'levels', f"config.factors[{i}]"),
                f"config.factors[{i}].levels",
            )
            factors.append(Factor(name=str(name), levels=tuple(str(v) for v in levels)))

        response_variables = []
        for i, item in enumerate(response_items):
            where = f"config.response_variables[{i}]"
            name = _require(item, 'name', where)
            data_type = item.get('data_type', 'numerical')
            if data_type not in VALID_DATA_TYPES:
                raise ValidationError(
                    f"{where}.data_type: must be one of {VALID_DATA_TYPES}, "
                    f"got {data_type!r}"
                )
            response_variables.append(ResponseVariable(name=str(name), data_type=data_type))

        units = []
        for unit in unit_items:
            if isinstance(unit, Mapping):
                unit = _require(unit, 'name', 'config.units')
            units.append(str(unit))

        return ExperimentConfig(
            name=str(data.get('name', '')),
            factors=tuple(factors),
            response_variables=tuple(response_variables),
            units=tuple(units),
            unit_factor=str(data.get('unit_factor', 'model')),
        )


@dataclass(frozen=True)
class ExperimentResult:
    """
    One trial of the experiment.

    Attributes:
        unit: Identity of the model/unit that produced the trial
        factors: Realized level for every factor
        response_variables: Response name -> value (non-numeric values are
            carried but ignored by the analysis)
    """
    unit: str
    factors: dict[str, str] = field(default_factory=dict)
    response_variables: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> 'ExperimentResult':
        """
        Build a trial record from a plain mapping.

        Expected keys: 'unit', 'factors', 'response_variables'.

        Raises:
            ValidationError: If the mapping is malformed
        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"result: expected a mapping, got {type(data).__name__}"
            )
        factors = data.get('factors', {})
        responses = data.get('response_variables', {})
        if not isinstance(factors, Mapping) or not isinstance(responses, Mapping):
            raise ValidationError(
                "result: 'factors' and 'response_variables' must be mappings"
            )
        return ExperimentResult(
            unit=str(_require(data, 'unit', 'result')),
            factors={str(k): str(v) for k, v in factors.items() if v is not None},
            response_variables=dict(responses),
        )


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{where}: expected a mapping, got {type(data).__name__}")
    if key not in data:
        raise ValidationError(f"{where}: missing required key {key!r}")
    return data[key]
