# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import os
import typing as t
from pathlib import Path

from lockstep_tools.messages import notice

from .parser import LockfileParser


class LockManager:
    def __init__(self, path: t.Union[str, Path]) -> None:
        self._path = str(path)

    @property
    def path(self) -> str:
        return self._path

    def exists(self) -> bool:
        return os.path.isfile(self._path)

    def read(self) -> str:
        if not self.exists():
            return ''

        with open(self._path, encoding='utf-8') as f:
            return f.read()

    def dump(self, content: str) -> bool:
        """
        Writes updated lockfile to disk. Won't write if lockfile is already up to date.

        :param content: rendered lock file
        :return: True if lockfile was updated, False otherwise
        """
        # create it when string is different
        if not self.exists() or content != self.read():
            with open(self._path, mode='w', encoding='utf-8') as fw:
                fw.write(content)
                notice('Updating lock file at {}'.format(self._path))
                return True

        return False

    def load(self) -> LockfileParser:
        """Parsed lock file, empty if there is none. Relative paths resolve against its directory"""
        return LockfileParser(self.read(), root=os.path.dirname(os.path.abspath(self._path)))
