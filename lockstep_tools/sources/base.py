# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import hashlib
import os
import typing as t
from abc import abstractmethod
from pathlib import Path

from pydantic import PrivateAttr

from lockstep_tools.constants import DEFAULT_SPEC_GLOB
from lockstep_tools.file_cache import FileCache
from lockstep_tools.index import Index
from lockstep_tools.utils import BaseModel

if t.TYPE_CHECKING:
    from lockstep_tools.specification import Specification


class BaseSource(BaseModel):
    """
    A place specs are provided by.

    Sources are compared by their type and location only, two sources read from different
    files (the manifest and the lock file) describing the same location are equal.
    """

    type: str = 'base'

    _remote: bool = PrivateAttr(False)
    _index: t.Optional[Index] = PrivateAttr(None)
    _root: t.Optional[Path] = PrivateAttr(None)

    def _hash_values(self) -> t.Tuple[str, str]:
        return self.type, self.hash_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseSource):
            return NotImplemented

        return self._hash_values() == other._hash_values()

    def __hash__(self) -> int:
        return hash(self._hash_values())

    def __str__(self) -> str:
        return self.type

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.hash_key})'

    @property
    def name(self) -> str:
        return self.type

    @property
    def hash_key(self) -> str:
        """Hash key is used for comparison sources initialised with different settings"""
        return self.type

    @property
    def is_default_provider(self) -> bool:
        """True for sources serving any package by name, they are listed last in lock files"""
        return False

    @property
    def unlockable(self) -> bool:
        return False

    @property
    def is_remote(self) -> bool:
        return self._remote

    @property
    def root(self) -> Path:
        """Directory relative locations of this source are resolved against"""
        return self._root or Path(os.getcwd())

    def set_root(self, root: t.Union[str, Path, None]) -> None:
        self._root = Path(root) if root is not None else None

    def cache_path(self) -> str:
        digest = hashlib.sha256(self.hash_key.encode('utf-8')).hexdigest()
        return FileCache().subdir(f'{self.type}_{digest[:16]}')

    def remote(self) -> None:
        """Allow this source to fetch from the network, drops the specs read so far"""
        self._remote = True
        self._index = None

    def unlock(self) -> None:
        """Forget the locked state, only meaningful for unlockable sources"""

    def specs(self) -> Index:
        if self._index is None:
            self._index = self._load_specs()

        return self._index

    def search(self, name: str) -> t.List['Specification']:
        return self.specs().search(name)

    @property
    def globs(self) -> t.List[str]:
        glob = getattr(self, 'glob', None) or DEFAULT_SPEC_GLOB
        return [pattern.strip() for pattern in glob.split(',') if pattern.strip()]

    @abstractmethod
    def _load_specs(self) -> Index:
        """Index of the specs this source provides"""

    @abstractmethod
    def to_lock(self) -> str:
        """Header of this source in the lock file"""
