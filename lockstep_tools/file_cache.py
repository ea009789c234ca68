# SPDX-FileCopyrightText: 2019-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Classes to work with file cache"""

import errno
import os
import shutil
import sys
import typing as t

from lockstep_tools import LockstepSettings
from lockstep_tools.errors import FatalError


def system_cache_path() -> str:
    """Path of system cache directory"""
    if sys.platform.startswith('win'):
        cache_directory = os.getenv('LOCALAPPDATA') or os.path.expanduser(
            os.path.join('~', 'AppData', 'Local')
        )
        return os.path.join(cache_directory, 'Lockstep', 'Cache')

    if sys.platform == 'darwin':
        cache_directory = os.path.expanduser('~/Library/Caches')
    else:
        cache_directory = os.getenv('XDG_CACHE_HOME') or os.path.expanduser('~/.cache')

    return os.path.join(cache_directory, 'Lockstep')


class FileCache:
    """Common functions to work with the cache of registry indexes and git repositories"""

    def __init__(self, path: t.Optional[str] = None) -> None:
        self._path: t.Optional[str] = path

    def path(self) -> str:
        """Path of cache directory. Make directory if it doesn't exist"""
        if not self._path:
            self._path = LockstepSettings().CACHE_PATH

        if not self._path:
            self._path = system_cache_path()

        try:
            os.makedirs(self._path)
        except OSError as e:
            if e.errno != errno.EEXIST:
                raise FatalError(f'Failed to create cache directory: {self._path}')

        return self._path

    def subdir(self, *parts: str) -> str:
        return os.path.join(self.path(), *parts)

    def clear(self) -> None:
        """Clear cache directory"""
        shutil.rmtree(self.path())
