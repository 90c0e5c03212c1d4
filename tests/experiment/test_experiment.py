"""
Tests for the experiment input model.
"""

import dataclasses

import pytest

from pyfactorial.core.exceptions import ValidationError
from pyfactorial.experiment import (
    ExperimentConfig,
    ExperimentResult,
    Factor,
    ResponseVariable,
)


# ═══════════════════════════════════════════════════════════════════════
# ExperimentConfig
# ═══════════════════════════════════════════════════════════════════════


class TestExperimentConfig:

    def test_from_dict(self):
        config = ExperimentConfig.from_dict({
            'name': 'tone study',
            'factors': [
                {'name': 'tone', 'levels': ['formal', 'casual']},
                {'name': 'length', 'levels': [100, 200]},
            ],
            'response_variables': [
                {'name': 'score'},
                {'name': 'label', 'data_type': 'categorical'},
            ],
            'units': ['model-a', {'name': 'model-b'}],
        })
        assert config.name == 'tone study'
        assert config.factor_names == ['tone', 'length']
        assert config.factors[1].levels == ('100', '200')
        assert config.response_variables[0].is_numerical
        assert not config.response_variables[1].is_numerical
        assert config.units == ('model-a', 'model-b')
        assert config.unit_factor == 'model'

    def test_custom_unit_factor(self):
        config = ExperimentConfig.from_dict({
            'factors': [], 'response_variables': [], 'unit_factor': 'agent',
        })
        assert config.unit_factor == 'agent'

    def test_missing_factors(self):
        with pytest.raises(ValidationError, match="factors"):
            ExperimentConfig.from_dict({'response_variables': []})

    def test_missing_factor_levels(self):
        with pytest.raises(ValidationError, match="levels"):
            ExperimentConfig.from_dict({
                'factors': [{'name': 'tone'}], 'response_variables': [],
            })

    def test_factor_entry_not_mapping(self):
        with pytest.raises(ValidationError, match="factors"):
            ExperimentConfig.from_dict({'factors': ['tone'], 'response_variables': []})

    def test_unknown_data_type(self):
        with pytest.raises(ValidationError, match="data_type"):
            ExperimentConfig.from_dict({
                'factors': [],
                'response_variables': [{'name': 'score', 'data_type': 'ordinal'}],
            })

    @pytest.mark.parametrize("config, field", [
        ({'factors': None, 'response_variables': []}, "config.factors"),
        ({'factors': [{'name': 'tone', 'levels': 3}], 'response_variables': []},
         r"config.factors\[0\].levels"),
        ({'factors': [], 'response_variables': [], 'units': None}, "config.units"),
        ({'factors': [], 'response_variables': 'score'}, "config.response_variables"),
    ])
    def test_malformed_collections(self, config, field):
        with pytest.raises(ValidationError, match=field):
            ExperimentConfig.from_dict(config)

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            ExperimentConfig.from_dict(['factors'])

    def test_frozen(self):
        config = ExperimentConfig(
            name='x',
            factors=(Factor('tone', ('formal', 'casual')),),
            response_variables=(ResponseVariable('score'),),
        )
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.name = 'y'


# ═══════════════════════════════════════════════════════════════════════
# ExperimentResult
# ═══════════════════════════════════════════════════════════════════════


class TestExperimentResult:

    def test_from_dict(self):
        result = ExperimentResult.from_dict({
            'unit': 'model-a',
            'factors': {'tone': 'formal', 'length': 100, 'missing': None},
            'response_variables': {'score': 4.5, 'label': 'ok'},
        })
        assert result.unit == 'model-a'
        assert result.factors == {'tone': 'formal', 'length': '100'}
        assert result.response_variables == {'score': 4.5, 'label': 'ok'}

    def test_missing_unit(self):
        with pytest.raises(ValidationError, match="unit"):
            ExperimentResult.from_dict({'factors': {}, 'response_variables': {}})

    def test_factors_not_mapping(self):
        with pytest.raises(ValidationError):
            ExperimentResult.from_dict({
                'unit': 'a', 'factors': ['tone'], 'response_variables': {},
            })
