# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest

from lockstep_manager.dependencies import expand_dependencies
from lockstep_tools.dependency import Dependency, DepProxy
from lockstep_tools.errors import SpecNotFoundError
from lockstep_tools.index import Index
from lockstep_tools.sources import PathSource, RegistrySource
from lockstep_tools.spec_set import SpecSet


@pytest.fixture()
def registry():
    return RegistrySource(remotes=['https://registry.example.com/'])


@pytest.fixture()
def spec_set(make_spec, registry):
    return SpecSet(
        [
            make_spec('C', '3.0', source=registry),
            make_spec('A', '1.2', {'B': '~> 2.0'}, source=registry),
            make_spec('B', '2.1', source=registry),
            make_spec('B', '2.1', platform='java', source=registry),
        ]
    )


def test_lookup_prefers_platform_variants(spec_set):
    assert [s.full_name for s in spec_set['B']] == ['B-2.1-java', 'B-2.1']
    assert spec_set['missing'] == []
    assert sorted(spec_set.names()) == ['A', 'B', 'C']


def test_for_dependencies_follows_transitive_dependencies(spec_set):
    reachable = spec_set.for_dependencies([DepProxy(Dependency('A'), 'ruby')])

    assert [s.full_name for s in reachable] == ['A-1.2', 'B-2.1']


def test_for_dependencies_uses_platform_of_dependency(spec_set):
    reachable = spec_set.for_dependencies([DepProxy(Dependency('A'), 'java')])

    assert sorted(s.full_name for s in reachable) == ['A-1.2', 'B-2.1-java']


def test_for_dependencies_skip(spec_set):
    reachable = spec_set.for_dependencies(
        [DepProxy(Dependency('A'), 'ruby'), DepProxy(Dependency('C'), 'ruby')], skip=['A']
    )

    assert reachable.names() == ['C']


def test_for_dependencies_check_and_missing(spec_set):
    dependencies = [DepProxy(Dependency('A'), 'ruby'), DepProxy(Dependency('D'), 'ruby')]
    assert spec_set.for_dependencies(dependencies, check=True) is False

    missing = []
    spec_set.for_dependencies(dependencies, missing=missing)
    assert missing == [Dependency('D')]


def test_valid_for(spec_set):
    dependencies = expand_dependencies(
        [Dependency('A', '~> 1.0'), Dependency('C')], ['ruby', 'java']
    )

    assert spec_set.valid_for(dependencies)


def test_valid_for_rejects_unsatisfied_requirement(spec_set):
    dependencies = expand_dependencies(
        [Dependency('A', '~> 1.3'), Dependency('C')], ['ruby', 'java']
    )

    assert not spec_set.valid_for(dependencies)


def test_valid_for_rejects_orphans(spec_set):
    dependencies = expand_dependencies([Dependency('A')], ['ruby', 'java'])

    assert not spec_set.valid_for(dependencies)


def test_valid_for_rejects_other_source(spec_set, tmp_path):
    other = PathSource(path=str(tmp_path))
    dependencies = expand_dependencies(
        [Dependency('A', source=other), Dependency('C')], ['ruby']
    )

    assert not spec_set.valid_for(dependencies)


def test_select(spec_set):
    assert spec_set.select(['C']).names() == ['C']
    assert len(spec_set) == 1


def test_materialize(make_spec, tmp_path, write_spec):
    write_spec(tmp_path / 'vendor', 'A', '1.2')
    source = PathSource(path=str(tmp_path / 'vendor'))
    locked = SpecSet([make_spec('A', '1.2', source=source), make_spec('Z', '0.1', source=source)])

    materialized = locked.materialize([Dependency('A')])
    assert [s.full_name for s in materialized] == ['A-1.2']
    assert materialized.to_list()[0] is source.specs().search('A')[0]

    with pytest.raises(SpecNotFoundError):
        locked.materialize([Dependency('Z')])

    missing = []
    locked.materialize([Dependency('Z'), Dependency('Y')], missing)
    assert [str(d) for d in missing] == ['Z (= 0.1)', 'Y (>= 0)']


def test_index_search(make_spec, registry):
    index = Index.build(
        lambda i: i.use(
            [
                make_spec('A', '1.10', source=registry),
                make_spec('A', '1.2', source=registry),
                make_spec('A', '1.2', platform='java', source=registry),
                make_spec('B', '1.0', source=registry),
            ]
        )
    )

    assert len(index) == 4
    assert 'A' in index
    assert index.names() == ['A', 'B']
    found = index.search(Dependency('A', '>= 1.2'))
    assert [s.full_name for s in found] == ['A-1.2', 'A-1.2-java', 'A-1.10']
    assert index.search(make_spec('A', '1.10')) == [make_spec('A', '1.10', source=registry)]


def test_index_add_replaces_same_version(make_spec, registry):
    index = Index()
    index.add(make_spec('A', '1.0', source=registry))
    index.add(make_spec('A', '1.0', {'B': None}, source=registry))

    assert len(index) == 1
    assert index.search('A')[0].dependencies == [Dependency('B')]
