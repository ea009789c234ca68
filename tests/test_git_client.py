# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import subprocess

import pytest

from lockstep_tools.errors import GitError
from lockstep_tools.git_client import GitClient


@pytest.mark.parametrize(
    'output, version',
    [
        (b'git version 2.39.2\n', '2.39.2'),
        (b'git version 2.34.1.windows.1\n', '2.34.1'),
    ],
)
def test_git_version(monkeypatch, output, version):
    monkeypatch.setattr(subprocess, 'check_output', lambda *args, **kwargs: output)

    assert str(GitClient().version()) == version


def test_old_git_version(monkeypatch):
    monkeypatch.setattr(subprocess, 'check_output', lambda *args, **kwargs: b'git version 1.9.5')

    with pytest.raises(GitError, match='older than minimally required 2.0.0'):
        GitClient().check_version()


def test_unknown_git_version(monkeypatch):
    monkeypatch.setattr(subprocess, 'check_output', lambda *args, **kwargs: b'not git')

    with pytest.raises(GitError, match='Cannot recognize git version'):
        GitClient().version()


def test_missing_git(monkeypatch):
    def check_output(*args, **kwargs):
        raise FileNotFoundError('git')

    monkeypatch.setattr(subprocess, 'check_output', check_output)

    with pytest.raises(GitError, match='command was not found'):
        GitClient().version()
