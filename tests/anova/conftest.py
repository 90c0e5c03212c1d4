"""
Shared fixtures for analysis engine tests.

Experiments are built from plain values so each scenario's expected sums
of squares can be worked out by hand.
"""

import itertools

import pytest

from pyfactorial.anova._common import FormattedDataPoint
from pyfactorial.experiment import (
    ExperimentConfig,
    ExperimentResult,
    Factor,
    ResponseVariable,
)


def make_config(factors, responses=('score',), units=('gpt',), name='experiment'):
    """factors: mapping name -> levels; responses: names or (name, data_type)."""
    response_variables = []
    for r in responses:
        if isinstance(r, tuple):
            response_variables.append(ResponseVariable(name=r[0], data_type=r[1]))
        else:
            response_variables.append(ResponseVariable(name=r))
    return ExperimentConfig(
        name=name,
        factors=tuple(Factor(name=n, levels=tuple(levels)) for n, levels in factors.items()),
        response_variables=tuple(response_variables),
        units=tuple(units),
    )


def make_result(levels, responses, unit='gpt'):
    return ExperimentResult(unit=unit, factors=dict(levels), response_variables=dict(responses))


def make_points(factor, values_by_level, response='score'):
    """FormattedDataPoints for a single factor, levels in mapping order."""
    return [
        FormattedDataPoint(factors={factor: level}, response_variables={response: float(v)})
        for level, values in values_by_level.items()
        for v in values
    ]


# =====================================================================
# Scenario 1: two-level factor, clear difference
# =====================================================================


@pytest.fixture
def two_level_experiment():
    """control [10, 12, 11] vs treatment [20, 22, 21]."""
    config = make_config({'condition': ['control', 'treatment']})
    results = [
        make_result({'condition': 'control'}, {'score': v}) for v in (10, 12, 11)
    ] + [
        make_result({'condition': 'treatment'}, {'score': v}) for v in (20, 22, 21)
    ]
    return config, results


# =====================================================================
# Scenario 3: three two-level factors, two replicates per cell
# =====================================================================


@pytest.fixture
def three_factor_experiment():
    """
    score = 10 + 5 * [A=a1 and B=b1] + [C=c1] +/- 0.3

    A and B interact strongly; C has a small additive effect.
    """
    config = make_config({
        'A': ['a0', 'a1'],
        'B': ['b0', 'b1'],
        'C': ['c0', 'c1'],
    })
    results = []
    for a, b, c in itertools.product((0, 1), repeat=3):
        mean = 10.0 + 5.0 * a * b + c
        for noise in (0.3, -0.3):
            results.append(make_result(
                {'A': f'a{a}', 'B': f'b{b}', 'C': f'c{c}'},
                {'score': mean + noise},
            ))
    return config, results


# =====================================================================
# Scenario 5: four-level factor with one outlying level
# =====================================================================


FOUR_LEVEL_VALUES = {
    'p1': [10.0, 11.0, 12.0, 11.0],
    'p2': [11.0, 12.0, 10.0, 11.0],
    'p3': [12.0, 10.0, 11.0, 11.0],
    'p4': [20.0, 21.0, 19.0, 20.0],
}


@pytest.fixture
def four_level_experiment():
    config = make_config({'prompt': list(FOUR_LEVEL_VALUES)})
    results = [
        make_result({'prompt': level}, {'score': v})
        for level, values in FOUR_LEVEL_VALUES.items()
        for v in values
    ]
    return config, results


@pytest.fixture
def four_level_points():
    return make_points('prompt', FOUR_LEVEL_VALUES)


# =====================================================================
# Multi-unit experiment
# =====================================================================


@pytest.fixture
def two_unit_experiment():
    """Two models answering the same 2-level factor; model-b scores higher."""
    config = make_config(
        {'tone': ['formal', 'casual']},
        responses=('score', ('label', 'categorical')),
        units=('model-a', 'model-b'),
    )
    values = {
        ('model-a', 'formal'): [5.0, 6.0, 5.5],
        ('model-a', 'casual'): [6.0, 6.5, 5.5],
        ('model-b', 'formal'): [9.0, 9.5, 8.5],
        ('model-b', 'casual'): [9.5, 10.0, 9.0],
    }
    results = [
        make_result({'tone': tone}, {'score': v, 'label': 'ok'}, unit=unit)
        for (unit, tone), vs in values.items()
        for v in vs
    ]
    return config, results


# =====================================================================
# Builders for ad-hoc experiments
# =====================================================================


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def result_factory():
    return make_result


@pytest.fixture
def points_factory():
    return make_points
