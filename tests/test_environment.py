# SPDX-FileCopyrightText: 2023-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import os

import pytest

from lockstep_tools.environment import LockstepSettings
from lockstep_tools.file_cache import FileCache
from lockstep_tools.platforms import local_platform


@pytest.mark.parametrize(
    'value, groups',
    [
        ('test', ['test']),
        ('test:development', ['test', 'development']),
        (' test  development ', ['test', 'development']),
        ('', []),
    ],
)
def test_without_groups(monkeypatch, value, groups):
    monkeypatch.setenv('LOCKSTEP_WITHOUT', value)

    assert LockstepSettings().without_groups == groups


def test_without_groups_alias(monkeypatch):
    monkeypatch.setenv('LOCKSTEP_WITHOUT_GROUPS', 'ci')

    assert LockstepSettings().without_groups == ['ci']


def test_local_platform(monkeypatch):
    assert local_platform() == 'ruby'

    monkeypatch.setenv('LOCKSTEP_PLATFORM', 'java')
    assert local_platform() == 'java'


def test_cache_path_from_environment(tmp_path):
    cache = FileCache()

    assert cache.path() == str(tmp_path / 'cache')
    assert not os.path.isdir(cache.subdir('git'))
    assert cache.subdir('git') == str(tmp_path / 'cache' / 'git')


def test_clear_cache(tmp_path):
    cache = FileCache(str(tmp_path / 'other'))
    (tmp_path / 'other' / 'file').parent.mkdir(parents=True, exist_ok=True)
    (tmp_path / 'other' / 'file').write_text('x')

    cache.clear()

    assert not (tmp_path / 'other').exists()
