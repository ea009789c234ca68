# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest

from lockstep_manager.dependencies import expand_dependencies
from lockstep_manager.version_solver import VersionSolver
from lockstep_tools.dependency import Dependency
from lockstep_tools.errors import SolverError
from lockstep_tools.index import Index
from lockstep_tools.sources import PathSource, RegistrySource
from lockstep_tools.spec_set import SpecSet


@pytest.fixture()
def registry():
    return RegistrySource(remotes=['https://registry.example.com/'])


@pytest.fixture()
def index(make_spec, registry):
    return Index().use(
        [
            make_spec('A', '1.0', {'B': '~> 2.0'}, source=registry),
            make_spec('A', '1.2', {'B': '~> 2.0'}, source=registry),
            make_spec('A', '2.0', {'B': '~> 3.0'}, source=registry),
            make_spec('B', '2.0', source=registry),
            make_spec('B', '2.1', source=registry),
            make_spec('B', '3.0', source=registry),
            make_spec('N', '1.15', source=registry),
            make_spec('N', '1.15', platform='java', source=registry),
        ]
    )


def solve(index, dependencies, platforms=('ruby',), **kwargs):
    solver = VersionSolver(index, **kwargs)
    result = solver.solve(expand_dependencies(dependencies, list(platforms)))
    return sorted(spec.full_name for spec in result)


def test_highest_versions(index):
    assert solve(index, [Dependency('A', '~> 1.0')]) == ['A-1.2', 'B-2.1']


def test_transitive_constraints(index):
    assert solve(index, [Dependency('A'), Dependency('B', '< 3')]) == ['A-1.2', 'B-2.1']


def test_locked_versions_are_preferred(index, make_spec, registry):
    base = SpecSet([make_spec('A', '1.0', source=registry), make_spec('B', '2.0', source=registry)])

    assert solve(index, [Dependency('A', '~> 1.0')], base=base) == ['A-1.0', 'B-2.0']


def test_locked_versions_are_not_binding(index, make_spec, registry):
    base = SpecSet([make_spec('A', '1.0', source=registry)])

    assert solve(index, [Dependency('A', '>= 1.1')], base=base) == ['A-2.0', 'B-3.0']


def test_source_requirements(index, make_spec):
    vendor = PathSource(path='vendor')
    vendored = Index().use([make_spec('A', '0.9', source=vendor)])
    index.use(vendored)

    result = solve(
        index,
        [Dependency('A', source=vendor)],
        source_requirements={'A': vendored},
    )

    assert result == ['A-0.9']


def test_platform_variants(index):
    result = solve(index, [Dependency('N')], platforms=('ruby', 'java'))

    assert result == ['N-1.15', 'N-1.15-java']


def test_unsatisfiable(index):
    with pytest.raises(SolverError, match='Could not find compatible versions'):
        solve(index, [Dependency('A', '~> 1.0'), Dependency('B', '>= 3')])


def test_unknown_package(index):
    with pytest.raises(SolverError, match='missing'):
        solve(index, [Dependency('missing')])


def test_max_rounds(index, monkeypatch):
    monkeypatch.setenv('LOCKSTEP_RESOLVER_MAX_ROUNDS', '1')

    with pytest.raises(SolverError, match='LOCKSTEP_RESOLVER_MAX_ROUNDS'):
        solve(index, [Dependency('A', '~> 1.0')])
