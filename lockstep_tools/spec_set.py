# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Ordered collection of resolved specs"""

import typing as t
from collections import deque

from lockstep_tools.dependency import Dependency, DepProxy
from lockstep_tools.errors import SpecNotFoundError
from lockstep_tools.platforms import local_platform, platform_sort_key
from lockstep_tools.specification import Specification

AnyDependency = t.Union[Dependency, DepProxy]


class SpecSet:
    """
    Set of specs ordered by name.

    Lookup by name returns all platform variants of a package,
    platform specific variants first and the generic one last.
    """

    def __init__(self, specs: t.Iterable[Specification]) -> None:
        self._specs: t.List[Specification] = sorted(specs, key=lambda s: s.name)
        self._lookup: t.Optional[t.Dict[str, t.List[Specification]]] = None

    def __iter__(self) -> t.Iterator[Specification]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __getitem__(self, name: str) -> t.List[Specification]:
        return self.lookup.get(name, [])

    def __contains__(self, spec: object) -> bool:
        return spec in self._specs

    def __repr__(self) -> str:
        return 'SpecSet([{}])'.format(', '.join(spec.full_name for spec in self._specs))

    @property
    def lookup(self) -> t.Dict[str, t.List[Specification]]:
        if self._lookup is None:
            lookup: t.Dict[str, t.List[Specification]] = {}
            by_platform = sorted(self._specs, key=lambda s: platform_sort_key(s.platform))
            for spec in reversed(by_platform):
                lookup.setdefault(spec.name, []).append(spec)

            self._lookup = lookup

        return self._lookup

    def names(self) -> t.List[str]:
        return list(self.lookup.keys())

    def to_list(self) -> t.List[Specification]:
        return list(self._specs)

    def for_dependencies(
        self,
        dependencies: t.Iterable[AnyDependency],
        skip: t.Iterable[str] = (),
        check: bool = False,
        match_current_platform: bool = False,
        missing: t.Optional[t.List[Dependency]] = None,
    ) -> t.Union['SpecSet', bool]:
        """
        Subset of specs transitively required by the given dependencies.

        :param dependencies: dependencies to start the walk from
        :param skip: names that are never followed, they and their dependencies are left out
        :param check: return False as soon as a dependency has no spec, True if all have one
        :param match_current_platform: match specs against the local platform
            instead of the platform of the dependency
        :param missing: if given, dependencies without a spec are appended to it
        """
        skipped = set(skip)
        current_platform = local_platform() if match_current_platform else None

        handled: t.Set[AnyDependency] = set()
        queue = deque(dependencies)
        specs: t.List[Specification] = []

        while queue:
            dep = queue.popleft()
            if dep in handled or dep.name in skipped:
                continue

            handled.add(dep)

            platform = current_platform or getattr(dep, 'platform', None) or local_platform()
            spec = next((s for s in self[dep.name] if s.match_platform(platform)), None)

            if spec is None:
                if check:
                    return False

                if missing is not None:
                    missing.append(dep.dependency if isinstance(dep, DepProxy) else dep)

                continue

            if spec not in specs:
                specs.append(spec)

            for child in spec.dependencies:
                if match_current_platform:
                    queue.append(child)
                else:
                    queue.append(DepProxy(child, platform))

        if check:
            return True

        return SpecSet(specs)

    def valid_for(self, dependencies: t.Iterable[DepProxy]) -> bool:
        """
        True if every dependency, transitively, is satisfied by a spec of this set
        and no spec of the set is left unreachable.
        """
        reached: t.Set[Specification] = set()
        handled: t.Set[DepProxy] = set()
        queue = deque(dependencies)

        while queue:
            dep = queue.popleft()
            if dep in handled:
                continue

            handled.add(dep)

            spec = self._satisfying_variant(dep)
            if spec is None:
                return False

            reached.add(spec)
            queue.extend(DepProxy(child, dep.platform) for child in spec.dependencies)

        return len(reached) == len(self._specs)

    def _satisfying_variant(self, dep: DepProxy) -> t.Optional[Specification]:
        for spec in self[dep.name]:
            if not spec.match_platform(dep.platform) or not spec.satisfies(dep):
                continue

            if dep.source is not None and spec.source != dep.source:
                continue

            return spec

        return None

    def materialize(
        self,
        dependencies: t.Iterable[AnyDependency],
        missing: t.Optional[t.List[Dependency]] = None,
    ) -> 'SpecSet':
        """
        Concrete specs of the sources required by the given dependencies on the local platform.

        :param missing: if given, specs the sources do not provide and requested dependencies
            without a spec are appended to it, otherwise a missing spec is an error
        :raises SpecNotFoundError: if a spec cannot be found and `missing` is not given
        """
        unmet: t.List[Dependency] = []
        reachable = self.for_dependencies(
            dependencies, match_current_platform=True, missing=unmet
        )

        materialized = []
        for spec in t.cast(SpecSet, reachable):
            concrete = spec.materialize()
            if concrete is not None:
                materialized.append(concrete)
                continue

            if missing is None:
                raise SpecNotFoundError(f'Could not find {spec.full_name} in any of the sources')

            missing.append(Dependency(spec.name, f'= {spec.version}', source=spec.source))

        if missing is not None:
            missing.extend(unmet)

        return SpecSet(materialized)

    def select(self, names: t.Iterable[str]) -> 'SpecSet':
        """Keep only the specs with the given names, in place"""
        keep = set(names)
        self._specs = [spec for spec in self._specs if spec.name in keep]
        self._lookup = None
        return self
