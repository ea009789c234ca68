# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Dependencies declared in manifests, lock files and specs"""

import os
import typing as t

from lockstep_tools.constants import DEFAULT_GROUP
from lockstep_tools.errors import ManifestError
from lockstep_tools.platforms import PLATFORM_MAP, local_platform
from lockstep_tools.requirement import Requirement

if t.TYPE_CHECKING:
    from lockstep_tools.sources import BaseSource

EnvCondition = t.Union[None, str, t.Dict[str, str]]


class Dependency:
    """
    A named version constraint.

    Dependencies declared in the manifest may carry groups, platform tags, an environment
    condition and a source they have to be fetched from.
    """

    def __init__(
        self,
        name: str,
        requirement: t.Union[None, str, t.Iterable[str], Requirement] = None,
        groups: t.Optional[t.Iterable[str]] = None,
        platforms: t.Optional[t.Iterable[str]] = None,
        env: EnvCondition = None,
        source: t.Optional['BaseSource'] = None,
    ) -> None:
        self.name = name
        self.requirement = (
            requirement if isinstance(requirement, Requirement) else Requirement(requirement)
        )
        self.groups: t.List[str] = list(groups) if groups else [DEFAULT_GROUP]
        self.platforms: t.List[str] = list(platforms) if platforms else []
        self.env = env
        self.source = source

        unknown_platforms = [p for p in self.platforms if p not in PLATFORM_MAP]
        if unknown_platforms:
            raise ManifestError(
                'Dependency "{}" uses unknown platforms: {}. Supported platforms are: {}'.format(
                    name, ', '.join(unknown_platforms), ', '.join(sorted(PLATFORM_MAP))
                )
            )

    def gem_platforms(self, valid_platforms: t.Iterable[str]) -> t.List[str]:
        """Platforms from `valid_platforms` this dependency has to be resolved for"""
        valid_platforms = list(valid_platforms)
        if not self.platforms:
            return valid_platforms

        platforms: t.List[str] = []
        for tag in self.platforms:
            platform = PLATFORM_MAP[tag]
            if platform in valid_platforms and platform not in platforms:
                platforms.append(platform)

        return platforms

    @property
    def current_env(self) -> bool:
        if not self.env:
            return True

        if isinstance(self.env, dict):
            return all(os.getenv(key) == value for key, value in self.env.items())

        return bool(os.getenv(self.env))

    @property
    def current_platform(self) -> bool:
        if not self.platforms:
            return True

        platform = local_platform()
        return any(PLATFORM_MAP[tag] == platform for tag in self.platforms)

    @property
    def should_include(self) -> bool:
        return self.current_env and self.current_platform

    def to_lock(self) -> str:
        out = f'  {self.name}'
        if not self.requirement.is_default:
            out += f' ({self.requirement})'

        if self.source:
            out += '!'

        return out + '\n'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented

        return self.name == other.name and self.requirement == other.requirement

    def __hash__(self) -> int:
        return hash((self.name, self.requirement))

    def __str__(self) -> str:
        return f'{self.name} ({self.requirement})'

    def __repr__(self) -> str:
        return f'Dependency("{self.name}", "{self.requirement}")'


class DepProxy:
    """A dependency requested for one particular platform"""

    def __init__(self, dependency: Dependency, platform: str) -> None:
        self.dependency = dependency
        self.platform = platform

    @property
    def name(self) -> str:
        return self.dependency.name

    @property
    def requirement(self) -> Requirement:
        return self.dependency.requirement

    @property
    def source(self) -> t.Optional['BaseSource']:
        return self.dependency.source

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DepProxy):
            return NotImplemented

        return self.dependency == other.dependency and self.platform == other.platform

    def __hash__(self) -> int:
        return hash((self.dependency, self.platform))

    def __str__(self) -> str:
        return str(self.dependency)

    def __repr__(self) -> str:
        return f'DepProxy({self.dependency!r}, "{self.platform}")'
