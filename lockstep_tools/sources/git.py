# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import os
import typing as t
from pathlib import Path

from pydantic import Field, PrivateAttr

from lockstep_tools.constants import COMMIT_ID_RE, DEFAULT_SPEC_GLOB
from lockstep_tools.errors import FetchingError
from lockstep_tools.git_client import GitClient
from lockstep_tools.index import Index
from lockstep_tools.messages import debug, notice

from .base import BaseSource
from .spec_files import load_spec_files


class GitSource(BaseSource):
    type: t.Literal['git'] = 'git'  # type: ignore
    uri: str
    ref: t.Optional[str] = None
    branch: t.Optional[str] = None
    tag: t.Optional[str] = None
    submodules: bool = False
    glob: t.Optional[str] = None
    revision: t.Optional[str] = Field(None, pattern=f'^{COMMIT_ID_RE}$')

    _client: GitClient = PrivateAttr(default_factory=GitClient)

    def __str__(self) -> str:
        return f'{self.uri} (at {self.requested_ref or "HEAD"})'

    @property
    def name(self) -> str:
        name = os.path.basename(self.uri.rstrip('/'))
        if name.endswith('.git'):
            name = name[: -len('.git')]
        return name

    @property
    def hash_key(self) -> str:
        return f'{self.uri}#{self.requested_ref or ""}'

    @property
    def requested_ref(self) -> t.Optional[str]:
        return self.ref or self.branch or self.tag

    @property
    def unlockable(self) -> bool:
        return True

    def unlock(self) -> None:
        if self.revision:
            debug(f'Unlocking {self}, forgetting revision {self.revision}')
        self.revision = None
        self._index = None

    def _bare_path(self) -> str:
        return os.path.join(self.cache_path(), 'bare')

    def _checkout_path(self, revision: str) -> Path:
        return Path(self.cache_path()) / 'checkouts' / revision

    def _checkout(self) -> Path:
        bare_path = self._bare_path()
        revision = self._client.get_commit_id_by_ref(
            self.uri, bare_path, self.revision or self.requested_ref
        )
        checkout_path = self._checkout_path(revision)
        if not checkout_path.is_dir():
            notice(f'Checking out {self.uri} at {revision[:7]}')
            self._client.prepare_ref(
                self.uri,
                bare_path,
                str(checkout_path),
                ref=revision,
                with_submodules=self.submodules,
            )

        self.revision = revision
        return checkout_path

    def _load_specs(self) -> Index:
        if self.revision and self._checkout_path(self.revision).is_dir():
            checkout_path = self._checkout_path(self.revision)
        elif self.is_remote:
            checkout_path = self._checkout()
        else:
            raise FetchingError(
                f'The git source {self} is not yet checked out. '
                'Run "lockstep lock" without "--local" to fetch it.'
            )

        return load_spec_files(checkout_path, self.globs, self)

    def locked_revision(self) -> str:
        if not self.revision:
            self.specs()

        return self.revision  # type: ignore

    def to_lock(self) -> str:
        out = 'GIT\n'
        out += f'  remote: {self.uri}\n'
        out += f'  revision: {self.locked_revision()}\n'
        for option in ('ref', 'branch', 'tag'):
            value = getattr(self, option)
            if value:
                out += f'  {option}: {value}\n'
        if self.submodules:
            out += '  submodules: true\n'
        if self.glob and self.glob != DEFAULT_SPEC_GLOB:
            out += f'  glob: {self.glob}\n'
        out += '  specs:\n'
        return out
