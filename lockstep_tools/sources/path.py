# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import os
import typing as t
from pathlib import Path

from pydantic import PrivateAttr

from lockstep_tools.constants import DEFAULT_SPEC_GLOB
from lockstep_tools.errors import SourceError
from lockstep_tools.index import Index
from lockstep_tools.specification import Specification

from .base import BaseSource
from .spec_files import load_spec_files


class SourcePathError(SourceError):
    pass


class PathSource(BaseSource):
    type: t.Literal['path'] = 'path'  # type: ignore
    path: str
    glob: t.Optional[str] = None

    # name and version pinned in the lock file, used when the directory has no spec files
    _fallback_name: t.Optional[str] = PrivateAttr(None)
    _fallback_version: t.Optional[str] = PrivateAttr(None)

    def __str__(self) -> str:
        return f'source at {self.path}'

    @property
    def name(self) -> str:
        return self._fallback_name or os.path.basename(os.path.normpath(self.path))

    @property
    def hash_key(self) -> str:
        return os.path.normpath(self.path)

    def set_fallback(self, name: str, version: str) -> None:
        self._fallback_name = name
        self._fallback_version = version

    @property
    def expanded_path(self) -> Path:
        path = Path(os.path.expanduser(self.path))
        if path.is_absolute():
            return path.resolve()

        return (self.root / path).resolve()

    def _load_specs(self) -> Index:
        path = self.expanded_path
        if not path.is_dir():
            raise SourcePathError(f'The path "{path}" does not exist.')

        index = load_spec_files(path, self.globs, self)
        if not len(index) and self._fallback_name and self._fallback_version:
            index.add(Specification(self._fallback_name, self._fallback_version, source=self))

        return index

    def to_lock(self) -> str:
        out = 'PATH\n'
        out += f'  remote: {self.path}\n'
        if self.glob and self.glob != DEFAULT_SPEC_GLOB:
            out += f'  glob: {self.glob}\n'
        out += '  specs:\n'
        return out
