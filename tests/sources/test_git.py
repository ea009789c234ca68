# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import pytest

from lockstep_tools.errors import FetchingError
from lockstep_tools.git_client import GitClient
from lockstep_tools.sources import GitSource, Source

COMMIT_ID = '38041fa9e7f8a79b8ff8cd247c73cf92b7e3c23a'
URI = 'https://github.com/example/foo.git'


@pytest.fixture()
def fake_git(monkeypatch, write_spec):
    calls = []

    def get_commit_id_by_ref(self, repo, bare_path, ref=None):
        calls.append(('rev-parse', ref))
        return COMMIT_ID

    def prepare_ref(self, repo, bare_path, checkout_path, ref=None, with_submodules=False):
        calls.append(('checkout', ref))
        write_spec(checkout_path, 'foo', '1.0.0', {'bar': '>= 1'})
        return ref

    monkeypatch.setattr(GitClient, 'get_commit_id_by_ref', get_commit_id_by_ref)
    monkeypatch.setattr(GitClient, 'prepare_ref', prepare_ref)

    return calls


def test_checkout(fake_git):
    source = GitSource(uri=URI, branch='main')
    source.remote()

    assert source.specs().names() == ['foo']
    assert source.revision == COMMIT_ID
    assert fake_git == [('rev-parse', 'main'), ('checkout', COMMIT_ID)]


def test_existing_checkout_is_reused(fake_git):
    source = GitSource(uri=URI)
    source.remote()
    source.specs()

    locked = GitSource(uri=URI, revision=COMMIT_ID)
    assert locked.specs().names() == ['foo']
    assert fake_git == [('rev-parse', None), ('checkout', COMMIT_ID)]


def test_local_mode_without_checkout():
    source = GitSource(uri=URI, revision=COMMIT_ID)

    with pytest.raises(FetchingError, match='not yet checked out'):
        source.specs()


def test_unlock_forgets_revision():
    source = GitSource(uri=URI, revision=COMMIT_ID)
    source.unlock()

    assert source.revision is None
    assert source.unlockable


def test_lock_header():
    source = GitSource(uri=URI, tag='v1.0', submodules=True, revision=COMMIT_ID)

    assert source.to_lock() == (
        'GIT\n'
        f'  remote: {URI}\n'
        f'  revision: {COMMIT_ID}\n'
        '  tag: v1.0\n'
        '  submodules: true\n'
        '  specs:\n'
    )


def test_identity():
    assert GitSource(uri=URI, branch='main') == GitSource(
        uri=URI, branch='main', revision=COMMIT_ID
    )
    assert GitSource(uri=URI, branch='main') != GitSource(uri=URI, branch='dev')
    assert GitSource(uri=URI).name == 'foo'
    assert str(GitSource(uri=URI)) == f'{URI} (at HEAD)'
    assert str(GitSource(uri=URI, tag='v1.0')) == f'{URI} (at v1.0)'


def test_invalid_revision():
    with pytest.raises(ValueError):
        GitSource(uri=URI, revision='main')


def test_source_from_dict():
    source = Source.from_dict({'type': 'git', 'uri': URI, 'ref': 'abc'})

    assert isinstance(source, GitSource)
    assert source.requested_ref == 'abc'
