# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest

from lockstep_tools.errors import SourceError
from lockstep_tools.sources import PathSource
from lockstep_tools.sources.path import SourcePathError


def test_load_spec_files(tmp_path, write_spec):
    write_spec(tmp_path / 'vendor', 'A', '1.2', {'B': '~> 2.0'})
    write_spec(tmp_path / 'vendor' / 'nested', 'B', '2.1')
    write_spec(tmp_path / 'vendor' / 'too' / 'deep', 'C', '1.0')

    source = PathSource(path='vendor')
    source.set_root(tmp_path)

    assert source.specs().names() == ['A', 'B']
    assert source.search('A')[0].dependencies[0].name == 'B'


def test_custom_glob(tmp_path, write_spec):
    write_spec(tmp_path / 'vendor' / 'too' / 'deep', 'C', '1.0')

    source = PathSource(path=str(tmp_path / 'vendor'), glob='**/*.spec.yml')

    assert source.specs().names() == ['C']
    assert source.to_lock() == (
        f'PATH\n  remote: {tmp_path / "vendor"}\n  glob: **/*.spec.yml\n  specs:\n'
    )


def test_missing_directory(tmp_path):
    source = PathSource(path=str(tmp_path / 'missing'))

    with pytest.raises(SourcePathError, match='does not exist'):
        source.specs()


def test_invalid_spec_file(tmp_path):
    (tmp_path / 'broken.spec.yml').write_text('name: A\nversion: [1, 2]\n')

    with pytest.raises(SourceError, match='Invalid spec file'):
        PathSource(path=str(tmp_path)).specs()


def test_fallback_spec(tmp_path):
    source = PathSource(path=str(tmp_path))
    source.set_fallback('local_gem', '0.1.0')

    specs = source.search('local_gem')
    assert [s.full_name for s in specs] == ['local_gem-0.1.0']
    assert source.name == 'local_gem'


def test_identity():
    assert PathSource(path='vendor/') == PathSource(path='vendor')
    assert PathSource(path='vendor') != PathSource(path='other')
    assert len({PathSource(path='vendor'), PathSource(path='./vendor')}) == 1
    assert PathSource(path='vendor/lib').name == 'lib'
    assert str(PathSource(path='vendor')) == 'source at vendor'
