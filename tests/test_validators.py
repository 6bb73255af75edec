"""
tests/test_validators.py — Tests for the query and body validation helpers.
"""

import pytest

from errors import InvalidInputError
from utils.validators import parse_int, parse_non_negative_float, parse_positive_float, require


@pytest.mark.parametrize('value', ['inf', '-inf', 'nan', float('inf'), '0', '-1', 'two', None])
def test_positive_float_rejects(value):
    with pytest.raises(InvalidInputError) as exc:
        parse_positive_float(value, 'farm_size_ha')
    assert exc.value.field == 'farm_size_ha'


def test_positive_float_accepts():
    assert parse_positive_float('2.5', 'farm_size_ha') == 2.5
    assert parse_positive_float(1, 'farm_size_ha') == 1.0


@pytest.mark.parametrize('value', ['inf', 'nan', '-0.5'])
def test_non_negative_float_rejects(value):
    with pytest.raises(InvalidInputError) as exc:
        parse_non_negative_float(value, 'actual_yield_kg_per_ha')
    assert exc.value.field == 'actual_yield_kg_per_ha'


def test_non_negative_float_accepts_zero_and_default():
    assert parse_non_negative_float('0', 'actual_yield_kg_per_ha') == 0.0
    assert parse_non_negative_float('', 'actual_yield_kg_per_ha', default=3.0) == 3.0


def test_parse_int_bounds():
    assert parse_int(None, 'top_n', default=5, minimum=1, maximum=10) == 5
    with pytest.raises(InvalidInputError) as exc:
        parse_int('11', 'top_n', minimum=1, maximum=10)
    assert 'between 1 and 10' in exc.value.message


def test_require_names_first_missing():
    with pytest.raises(InvalidInputError) as exc:
        require({'district_name': 'Gasabo', 'farm_size_ha': ''}, 'district_name', 'farm_size_ha')
    assert exc.value.field == 'farm_size_ha'
