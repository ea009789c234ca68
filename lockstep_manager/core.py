# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Core module of lockstep"""

import os
import typing as t
from pathlib import Path

from lockstep_tools import debug
from lockstep_tools.constants import LOCKFILE_FILENAME, MANIFEST_FILENAME
from lockstep_tools.dependency import Dependency
from lockstep_tools.errors import FatalError
from lockstep_tools.lock import LockManager
from lockstep_tools.messages import hint, notice, warn
from lockstep_tools.spec_set import SpecSet

from .definition import Definition, Unlock


class ProjectManager:
    def __init__(
        self,
        path: t.Union[str, Path],
        lock_path: t.Optional[str] = None,
        manifest_path: t.Optional[str] = None,
    ) -> None:
        # Working directory
        self.path = Path(path).resolve()

        if not manifest_path:
            self.manifest_path = self.path / MANIFEST_FILENAME if self.path.is_dir() else self.path
        elif os.path.isabs(manifest_path):
            self.manifest_path = Path(manifest_path)
        else:
            self.manifest_path = self.path / manifest_path

        # Lock path
        if not lock_path:
            self.lock_path = self.manifest_path.parent / LOCKFILE_FILENAME
        elif os.path.isabs(lock_path):
            self.lock_path = Path(lock_path)
        else:
            self.lock_path = self.path / lock_path

    def definition(self, unlock: t.Optional[Unlock] = None, use_lock: bool = True) -> Definition:
        return Definition.build(
            self.manifest_path,
            self.lock_path if use_lock else None,
            unlock,
        )

    def lock(
        self,
        update: t.Optional[t.List[str]] = None,
        update_sources: t.Optional[t.List[str]] = None,
        update_all: bool = False,
        local: bool = False,
    ) -> bool:
        """
        Resolve the dependencies and write the lock file.

        :param update: names of packages to resolve again
        :param update_sources: names of sources to resolve again
        :param update_all: ignore the lock file and resolve everything again
        :param local: do not fetch from the network, use cached package indexes only
        :return: True if the lock file was changed
        """
        unlock: Unlock = {'gems': list(update or []), 'sources': list(update_sources or [])}
        definition = self.definition(unlock, use_lock=not update_all)

        if definition.no_sources:
            hint(
                f'No sources are declared in {self.manifest_path}, '
                'only the locked specs can be used'
            )

        self._warn_unknown_names(definition, unlock)

        if local:
            debug('Resolving with locally available specs only')
            definition.resolve()
        else:
            definition.resolve_remotely()

        changed = LockManager(self.lock_path).dump(definition.to_lock())
        if not changed:
            notice(f'Lock file {self.lock_path} is up to date')

        return changed

    def check(self) -> t.List[Dependency]:
        """Dependencies of the requested groups without a locally available spec"""
        if not self.lock_path.is_file():
            raise FatalError(
                f'Lock file {self.lock_path} not found, run "lockstep lock" to create it'
            )

        return self.definition().missing_specs

    def show(self, groups: t.Optional[t.List[str]] = None) -> SpecSet:
        """Resolved specs of the requested groups, or of the given groups"""
        definition = self.definition()
        if groups:
            return definition.specs_for(groups)

        return definition.requested_specs

    def _warn_unknown_names(self, definition: Definition, unlock: Unlock) -> None:
        known_packages = {spec.name for spec in definition.locked_specs} | {
            dependency.name for dependency in definition.dependencies
        }
        for name in unlock['gems']:
            if name not in known_packages:
                warn(f'Package "{name}" is neither locked nor a dependency of the project')

        known_sources = {source.name for source in definition.sources}
        for name in unlock['sources']:
            if name not in known_sources:
                warn(f'Source "{name}" is not a source of the project')
