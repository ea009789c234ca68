# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
import re
import subprocess  # noqa: S404
import time
import typing as t
from functools import wraps

from packaging.version import InvalidVersion, Version

from .errors import GitError
from .messages import warn

GIT_MIN_SUPPORTED = Version('2.0.0')

# seconds between two fetches of the same bare repository
FETCH_INTERVAL = 60


class GitCommandError(Exception):
    """A git command exited with a non-zero code, handled inside GitClient"""


class GitClient:
    """
    Runs git on bare cache repositories.

    A source keeps one bare repository per URI, refs are resolved against it and commits are
    checked out into separate work trees.
    """

    def __init__(self) -> None:
        self._git_checked = False
        self._repo_updated = False

    def _git_cmd(func: t.Callable[..., t.Any]) -> t.Callable:  # type: ignore
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            if not self._git_checked:
                self.check_version()
                self._git_checked = True

            try:
                return func(self, *args, **kwargs)
            except GitCommandError as e:
                raise GitError(str(e))

        return wrapper

    def _bare_repo(func: t.Callable[..., t.Any]) -> t.Callable:  # type: ignore
        @wraps(func)
        def wrapper(self, repo, bare_path, *args, **kwargs):
            if not self._repo_updated:
                self.update_bare_repo(repo, bare_path)
                self._repo_updated = True

            return func(self, repo, bare_path, *args, **kwargs)

        return wrapper

    def update_bare_repo(self, repo: str, bare_path: str) -> None:
        os.makedirs(bare_path, exist_ok=True)

        if not os.listdir(bare_path):
            self.run(['init', '--bare'], cwd=bare_path)
            self.run(['remote', 'add', 'origin', '--tags', '--mirror=fetch', repo], cwd=bare_path)

        if self.run(['config', '--get', 'remote.origin.url'], cwd=bare_path).strip() != repo:
            self.run(['remote', 'set-url', 'origin', repo], cwd=bare_path)

        fetch_head = os.path.join(bare_path, 'FETCH_HEAD')
        if (
            not os.path.isfile(fetch_head)
            or time.time() - os.stat(fetch_head).st_mtime > FETCH_INTERVAL
        ):
            self.run(['fetch', 'origin'], cwd=bare_path)

    @_git_cmd
    @_bare_repo
    def prepare_ref(
        self,
        repo: str,
        bare_path: str,
        checkout_path: str,
        ref: t.Optional[str] = None,
        with_submodules: bool = False,
    ) -> str:
        """
        Check out `ref` (the remote HEAD when None) into `checkout_path`.

        :returns: commit id of the checkout
        """
        commit_id = self.get_commit_id_by_ref(repo, bare_path, ref)
        os.makedirs(checkout_path, exist_ok=True)

        tree = ['--work-tree', checkout_path, '--git-dir', bare_path]
        self.run(tree + ['checkout', '--force', commit_id])
        self.run(tree + ['clean', '--force'])

        if with_submodules:
            self.run(
                ['--work-tree=.', '-C', checkout_path, '--git-dir', bare_path]
                + ['submodule', 'update', '--init', '--recursive']
            )

        return commit_id

    @_git_cmd
    @_bare_repo
    def get_commit_id_by_ref(self, repo: str, bare_path: str, ref: t.Optional[str]) -> str:
        if not ref:
            ref = self.run(['ls-remote', '--exit-code', 'origin', 'HEAD'], cwd=bare_path)[:40]

        try:
            return self.run(['rev-parse', '--verify', f'{ref}^{{commit}}'], cwd=bare_path).strip()
        except GitCommandError:
            raise GitError(f'Git reference "{ref}" doesn\'t exist in the repository "{repo}"')

    def run(self, args: t.List[str], cwd: t.Optional[str] = None) -> str:
        p = subprocess.Popen(  # noqa: S603
            ['git'] + list(args),
            cwd=cwd or os.getcwd(),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        stdout, stderr = p.communicate()

        if p.returncode != 0:
            raise GitCommandError(
                "'git {}' failed with exit code {}\n{}\n{}".format(
                    ' '.join(args), p.returncode, stderr.decode('utf-8'), stdout.decode('utf-8')
                )
            )

        if stderr:
            warn(stderr.decode('utf-8'))

        return stdout.decode('utf-8')

    def check_version(self) -> None:
        version = self.version()
        if version < GIT_MIN_SUPPORTED:
            raise GitError(
                f'Your git version {version} is older than minimally required {GIT_MIN_SUPPORTED}.'
            )

    def version(self) -> Version:
        try:
            output = subprocess.check_output(  # noqa: S603
                ['git', '--version'],
                stderr=subprocess.STDOUT,
            ).decode('utf-8')
        except OSError:
            raise GitError('"git" command was not found')

        match = re.match(r'^git version (\d+\.\d+\.\d+)', output)
        if not match:
            raise GitError('Cannot recognize git version')

        try:
            return Version(match.group(1))
        except InvalidVersion:
            raise GitError('Cannot recognize git version')
