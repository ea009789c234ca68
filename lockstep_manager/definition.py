# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""
Reconciliation of the manifest with the lock file.

How does it work?

* Load dependencies and sources from the manifest and the lock file
* Invalidate stale locked specs

  * All specs from a stale source are stale
  * All specs that are reachable only through a stale dependency are stale

* If all dependencies are satisfied by the locked specs, they are used as they are,
  otherwise the version solver runs with the locked specs as preferred versions.
"""

import typing as t
from pathlib import Path

from lockstep_tools import LockstepSettings, debug
from lockstep_tools.dependency import Dependency, DepProxy
from lockstep_tools.errors import ManifestNotFoundError, ResolutionStateError, SourceMismatchError
from lockstep_tools.index import Index
from lockstep_tools.lock import LockfileParser, LockManager, render_lock
from lockstep_tools.manager import ManifestManager
from lockstep_tools.platforms import local_platform
from lockstep_tools.sources import BaseSource
from lockstep_tools.spec_set import SpecSet

from .dependencies import dependency_groups, expand_dependencies, requested_dependencies
from .version_solver import VersionSolver

Unlock = t.Dict[str, t.List[str]]


class Definition:
    """
    Dependencies and sources of a project, converged with its lock file.

    :param dependencies: dependencies declared in the manifest
    :param sources: sources declared in the manifest
    :param unlock: names of packages (``gems``) and sources (``sources``) that have to be resolved
        again even if the locked versions still satisfy the manifest
    :param lockfile: parsed lock file, None if there is none
    """

    def __init__(
        self,
        dependencies: t.List[Dependency],
        sources: t.List[BaseSource],
        unlock: t.Optional[Unlock] = None,
        lockfile: t.Optional[LockfileParser] = None,
    ) -> None:
        self.dependencies = list(dependencies)
        self.sources = list(sources)

        unlock = dict(unlock or {})
        self.unlock: Unlock = {
            'gems': list(unlock.get('gems') or []),
            'sources': list(unlock.get('sources') or []),
        }

        if lockfile is None:
            lockfile = LockfileParser()

        self.platforms: t.List[str] = list(lockfile.platforms)
        self.locked_dependencies: t.List[Dependency] = list(lockfile.dependencies)
        self.locked_sources: t.List[BaseSource] = list(lockfile.sources)
        self.locked_specs = SpecSet(lockfile.specs)
        self.last_resolve = SpecSet(lockfile.specs)

        current_platform = local_platform()
        if current_platform not in self.platforms:
            self.platforms.append(current_platform)

        self._resolve: t.Optional[SpecSet] = None
        self._index: t.Optional[Index] = None
        self._specs: t.Optional[SpecSet] = None
        self._requested_specs: t.Optional[SpecSet] = None
        self._expanded_dependencies: t.Optional[t.List[DepProxy]] = None

        self._converge()

    @classmethod
    def build(
        cls,
        manifest_path: t.Union[str, Path],
        lockfile_path: t.Union[str, Path, None] = None,
        unlock: t.Optional[Unlock] = None,
    ) -> 'Definition':
        """
        Definition of the project described by the manifest and the lock file.

        :raises ManifestNotFoundError: if the manifest is not a file
        """
        manifest_path = Path(manifest_path).expanduser().resolve()
        if not manifest_path.is_file():
            raise ManifestNotFoundError(f'{manifest_path} not found')

        manifest_manager = ManifestManager(manifest_path)
        dependencies, sources = manifest_manager.load().to_definition_input(manifest_manager.root)

        lockfile = LockManager(lockfile_path).load() if lockfile_path else None

        return cls(dependencies, sources, unlock=unlock, lockfile=lockfile)

    def resolve_remotely(self) -> SpecSet:
        """Resolve with sources allowed to fetch from the network"""
        if self._specs is not None:
            raise ResolutionStateError('Specs already loaded')

        for source in self.sources:
            source.remote()

        return self.specs

    @property
    def specs(self) -> SpecSet:
        if self._specs is None:
            self._specs = self.resolve().materialize(self.requested_dependencies)

        return self._specs

    @property
    def missing_specs(self) -> t.List[Dependency]:
        missing: t.List[Dependency] = []
        self.resolve().materialize(self.requested_dependencies, missing)
        return missing

    @property
    def requested_specs(self) -> SpecSet:
        if self._requested_specs is None:
            groups = [g for g in self.groups if g not in LockstepSettings().without_groups]
            self._requested_specs = self.specs_for(groups)

        return self._requested_specs

    @property
    def current_dependencies(self) -> t.List[Dependency]:
        return [dependency for dependency in self.dependencies if dependency.should_include]

    def specs_for(self, groups: t.Iterable[str]) -> SpecSet:
        dependencies = requested_dependencies(self.dependencies, groups)
        return t.cast(
            SpecSet,
            self.specs.for_dependencies(expand_dependencies(dependencies, self.platforms)),
        )

    def resolve(self) -> SpecSet:
        """Locked specs if they still satisfy the dependencies, otherwise a new resolution"""
        if self._resolve is None:
            if self.last_resolve.valid_for(self.expanded_dependencies):
                debug('Locked specs satisfy all dependencies, skipping the version solver')
                self._resolve = self.last_resolve
            else:
                source_requirements: t.Dict[str, Index] = {}
                for dependency in self.dependencies:
                    if dependency.source is not None:
                        source_requirements[dependency.name] = dependency.source.specs()

                debug('Locked specs do not satisfy all dependencies, running the version solver')
                solver = VersionSolver(self.index, source_requirements, self.last_resolve)
                self._resolve = solver.solve(self.expanded_dependencies)

        return self._resolve

    @property
    def index(self) -> Index:
        if self._index is None:

            def add_sources(index: Index) -> None:
                for source in self.sources:
                    index.use(source.specs())

            self._index = Index.build(add_sources)

        return self._index

    @property
    def no_sources(self) -> bool:
        return not self.sources

    @property
    def groups(self) -> t.List[str]:
        return dependency_groups(self.dependencies)

    @property
    def requested_dependencies(self) -> t.List[Dependency]:
        groups = [g for g in self.groups if g not in LockstepSettings().without_groups]
        return requested_dependencies(self.dependencies, groups)

    @property
    def expanded_dependencies(self) -> t.List[DepProxy]:
        if self._expanded_dependencies is None:
            self._expanded_dependencies = expand_dependencies(self.dependencies, self.platforms)

        return self._expanded_dependencies

    def to_lock(self) -> str:
        return render_lock(self.resolve(), self.sources, self.platforms, self.dependencies)

    def _converge(self) -> None:
        self._converge_sources()
        self._converge_dependencies()
        self._converge_locked_specs()

    def _converge_sources(self) -> None:
        # locked instances keep their locked state, e.g. the revision of git sources
        sources = [source for source in self.locked_sources if source in self.sources]
        for source in self.sources:
            if source not in sources:
                sources.append(source)

        self.sources = sources

        for source in self.sources:
            if source.unlockable and source.name in self.unlock['sources']:
                debug(f'Unlocking source {source}')
                source.unlock()

    def _find_source(self, source: t.Optional[BaseSource]) -> t.Optional[BaseSource]:
        if source is None:
            return None

        return next((s for s in self.sources if s == source), None)

    def _converge_dependencies(self) -> None:
        for dependency in self.dependencies + self.locked_dependencies:
            if dependency.source is None:
                continue

            source = self._find_source(dependency.source)
            if source is None:
                raise SourceMismatchError(
                    f'Dependency "{dependency.name}" is bound to {dependency.source}, '
                    'which is not a source of the project'
                )

            dependency.source = source

    def _converge_locked_specs(self) -> None:
        dependencies = [
            dependency
            for dependency in self.dependencies
            if self._in_locked_dependencies(dependency) or self._satisfies_locked_spec(dependency)
        ]

        converged = []
        for spec in self.last_resolve:
            spec.source = self._find_source(spec.source)

            if spec.source is None or spec.name in self.unlock['sources']:
                debug(f'Dropping locked {spec.full_name}, its source has changed')
                continue

            converged.append(spec)

        resolve = SpecSet(converged)
        reachable = t.cast(
            SpecSet,
            resolve.for_dependencies(
                expand_dependencies(dependencies, self.platforms), skip=self.unlock['gems']
            ),
        )
        self.last_resolve = resolve.select(reachable.names())

    def _in_locked_dependencies(self, dependency: Dependency) -> bool:
        return any(
            dependency == locked and dependency.source == locked.source
            for locked in self.locked_dependencies
        )

    def _satisfies_locked_spec(self, dependency: Dependency) -> bool:
        return any(spec.satisfies(dependency) for spec in self.last_resolve)
