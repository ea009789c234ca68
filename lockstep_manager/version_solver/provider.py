# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""resolvelib provider over the specs of an index"""

import typing as t

from resolvelib import AbstractProvider, BaseReporter

from lockstep_tools.dependency import DepProxy
from lockstep_tools.index import Index
from lockstep_tools.messages import debug
from lockstep_tools.platforms import platform_sort_key
from lockstep_tools.spec_set import SpecSet
from lockstep_tools.specification import Specification

if t.TYPE_CHECKING:
    from lockstep_tools.sources import BaseSource


class Candidate:
    """
    One version of a package from one source, for a set of platforms.

    Holds the spec variant used for each of the platforms.
    """

    def __init__(
        self,
        name: str,
        version: str,
        source: t.Optional['BaseSource'],
        variants: t.Mapping[str, Specification],
    ) -> None:
        self.name = name
        self.version = version
        self.source = source
        self.variants: t.Dict[str, Specification] = dict(variants)

    @property
    def platforms(self) -> t.FrozenSet[str]:
        return frozenset(self.variants)

    @property
    def key(self) -> t.Tuple[str, str, t.Optional['BaseSource']]:
        return self.name, self.version, self.source

    @property
    def parsed_version(self):
        return next(iter(self.variants.values())).parsed_version

    def specs(self) -> t.List[Specification]:
        specs: t.List[Specification] = []
        for spec in self.variants.values():
            if spec not in specs:
                specs.append(spec)

        return specs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented

        return self.key == other.key and self.platforms == other.platforms

    def __hash__(self) -> int:
        return hash((self.key, self.platforms))

    def __repr__(self) -> str:
        return 'Candidate({} ({}) for {})'.format(
            self.name, self.version, ', '.join(sorted(self.platforms))
        )


class SpecProvider(AbstractProvider):
    """
    Provides candidates from the index.

    Root dependencies bound to a source only see the specs of that source.
    Versions found in the `base` resolution are offered first, then the others from the highest.
    """

    def __init__(
        self,
        index: Index,
        source_requirements: t.Dict[str, Index],
        base: t.Optional[SpecSet] = None,
    ) -> None:
        self.index = index
        self.source_requirements = source_requirements
        self.base = base or SpecSet([])

    def identify(self, requirement_or_candidate: t.Union[DepProxy, Candidate]) -> str:
        return requirement_or_candidate.name

    def get_preference(
        self,
        identifier: str,
        resolutions: t.Mapping[str, Candidate],
        candidates: t.Mapping[str, t.Iterator[Candidate]],
        information: t.Mapping[str, t.Iterator[t.Any]],
        backtrack_causes: t.Sequence[t.Any],
    ) -> t.Any:
        is_root = any(info.parent is None for info in information[identifier])
        is_backtrack_cause = any(
            cause.requirement.name == identifier
            or (cause.parent is not None and cause.parent.name == identifier)
            for cause in backtrack_causes
        )
        candidate_count = sum(1 for _ in candidates[identifier])

        return not is_root, not is_backtrack_cause, candidate_count, identifier

    def _specs_for(self, identifier: str) -> t.List[Specification]:
        if identifier in self.source_requirements:
            return self.source_requirements[identifier].search(identifier)

        return self.index.search(identifier)

    def find_matches(
        self,
        identifier: str,
        requirements: t.Mapping[str, t.Iterator[DepProxy]],
        incompatibilities: t.Mapping[str, t.Iterator[Candidate]],
    ) -> t.List[Candidate]:
        wanted = list(requirements[identifier])
        banned = set(incompatibilities[identifier])
        platforms = sorted({dep.platform for dep in wanted}, key=platform_sort_key)

        grouped: t.Dict[t.Tuple[str, t.Any], t.List[Specification]] = {}
        for spec in self._specs_for(identifier):
            grouped.setdefault((spec.version, spec.source), []).append(spec)

        matches: t.List[Candidate] = []
        for (version, source), specs in grouped.items():
            variants = {}
            for platform in platforms:
                # platform specific variants before the generic one
                matching = sorted(
                    (s for s in specs if s.match_platform(platform)),
                    key=lambda s: platform_sort_key(s.platform),
                    reverse=True,
                )
                if matching:
                    variants[platform] = matching[0]

            if len(variants) != len(platforms):
                continue

            candidate = Candidate(identifier, version, source, variants)
            if candidate in banned:
                continue

            if all(self.is_satisfied_by(dep, candidate) for dep in wanted):
                matches.append(candidate)

        locked_versions = {spec.version for spec in self.base[identifier]}
        return sorted(
            matches,
            key=lambda c: (c.version in locked_versions, c.parsed_version),
            reverse=True,
        )

    def is_satisfied_by(self, requirement: DepProxy, candidate: Candidate) -> bool:
        if requirement.name != candidate.name or requirement.platform not in candidate.platforms:
            return False

        if requirement.source is not None and requirement.source != candidate.source:
            return False

        return requirement.requirement.satisfied_by(candidate.parsed_version)

    def get_dependencies(self, candidate: Candidate) -> t.List[DepProxy]:
        dependencies: t.List[DepProxy] = []
        for platform, spec in sorted(candidate.variants.items()):
            for dependency in spec.dependencies:
                proxy = DepProxy(dependency, platform)
                if proxy not in dependencies:
                    dependencies.append(proxy)

        return dependencies


class SpecReporter(BaseReporter):
    def pinning(self, candidate: Candidate) -> None:
        debug(f'Pinning {candidate.name} ({candidate.version}) from {candidate.source}')

    def rejecting_candidate(self, criterion: t.Any, candidate: Candidate) -> None:
        debug(f'Rejecting {candidate.name} ({candidate.version})')
