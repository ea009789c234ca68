# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest

from lockstep_tools.errors import RequirementError
from lockstep_tools.requirement import (
    Requirement,
    pessimistic_upper_bound,
    validate_spec_version,
)


@pytest.mark.parametrize(
    'requirement, version, result',
    [
        ('~> 1.0', '1.2', True),
        ('~> 1.0', '2.0', False),
        ('~> 1.2.3', '1.2.9', True),
        ('~> 1.2.3', '1.3', False),
        ('~> 1', '1.9', True),
        ('= 1.2', '1.2.0', True),
        ('1.2', '1.3', False),
        ('!= 1.2', '1.3', True),
        ('>= 1.0, < 2', '1.5', True),
        ('>= 1.0, < 2', '2.0', False),
        (None, '0.0.1', True),
    ],
)
def test_satisfied_by(requirement, version, result):
    assert Requirement(requirement).satisfied_by(version) is result


@pytest.mark.parametrize(
    'version, bound',
    [
        ('1.2.3', '1.3'),
        ('1.2', '2'),
        ('1', '2'),
    ],
)
def test_pessimistic_upper_bound(version, bound):
    assert str(pessimistic_upper_bound(version)) == bound


def test_requirement_keeps_declared_text():
    assert str(Requirement('~>1.0')) == '~> 1.0'
    assert str(Requirement(['>= 1.0', '< 2'])) == '>= 1.0, < 2'
    assert str(Requirement('1.2')) == '= 1.2'


def test_default_requirement():
    assert Requirement().is_default
    assert Requirement('') == Requirement.default()
    assert not Requirement('>= 1').is_default


def test_requirement_equality():
    assert Requirement('~> 1.0') == '~> 1.0'
    assert Requirement('~> 1.0') != Requirement('~> 1.1')
    assert len({Requirement('>= 1'), Requirement('>=1')}) == 1


@pytest.mark.parametrize('requirement', ['~> ', '=> 1.0', 'latest', '>= 1.0 beta', '>= 1.0-beta'])
def test_invalid_requirement(requirement):
    with pytest.raises(RequirementError):
        Requirement(requirement)


def test_validate_spec_version():
    assert validate_spec_version('1.0.0.beta1') == '1.0.0.beta1'

    with pytest.raises(RequirementError, match='should not contain'):
        validate_spec_version('1.0.0-beta')

    with pytest.raises(RequirementError, match='Malformed version'):
        validate_spec_version('one')
