# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Resolved packages"""

import typing as t

from packaging.version import Version

from lockstep_tools.dependency import Dependency
from lockstep_tools.platforms import GENERIC_PLATFORM, is_generic, match_platform
from lockstep_tools.requirement import parse_version

if t.TYPE_CHECKING:
    from lockstep_tools.sources import BaseSource


class Specification:
    """
    A concrete package: name, version and platform provided by a source.

    Specs read from a lock file are lazy, they are matched against the specs their source
    actually provides by `materialize`.
    """

    def __init__(
        self,
        name: str,
        version: str,
        platform: t.Optional[str] = None,
        source: t.Optional['BaseSource'] = None,
        dependencies: t.Optional[t.Iterable[Dependency]] = None,
    ) -> None:
        self.name = name
        self.version = version
        self.platform = platform or GENERIC_PLATFORM
        self.source = source
        self.dependencies: t.List[Dependency] = list(dependencies or [])

    @property
    def parsed_version(self) -> Version:
        return parse_version(self.version)

    @property
    def full_name(self) -> str:
        if is_generic(self.platform):
            return f'{self.name}-{self.version}'

        return f'{self.name}-{self.version}-{self.platform}'

    def satisfies(self, dependency: t.Union[Dependency, t.Any]) -> bool:
        return self.name == dependency.name and dependency.requirement.satisfied_by(
            self.parsed_version
        )

    def match_platform(self, platform: str) -> bool:
        return match_platform(self.platform, platform)

    def materialize(self) -> t.Optional['Specification']:
        """Spec of the source with the same name, version and platform"""
        if self.source is None:
            return None

        for spec in self.source.specs().search(self.name):
            if spec.version == self.version and spec.platform == self.platform:
                return spec

        return None

    def to_lock(self) -> str:
        if is_generic(self.platform):
            out = f'    {self.name} ({self.version})\n'
        else:
            out = f'    {self.name} ({self.version}-{self.platform})\n'

        for dependency in sorted(self.dependencies, key=lambda d: d.name):
            out += f'      {dependency.name}'
            if not dependency.requirement.is_default:
                out += f' ({dependency.requirement})'
            out += '\n'

        return out

    def _identity(self) -> t.Tuple[t.Any, ...]:
        return self.name, self.version, self.platform, self.source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Specification):
            return NotImplemented

        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __str__(self) -> str:
        return f'{self.name} ({self.version})'

    def __repr__(self) -> str:
        return f'Specification <{self.full_name} from {self.source!r}>'
