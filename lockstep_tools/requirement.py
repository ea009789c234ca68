# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Version constraints of dependencies"""

import re
import typing as t
from functools import lru_cache

from packaging.version import InvalidVersion, Version

from lockstep_tools.errors import RequirementError

CLAUSE_RE = re.compile(r'^\s*(=|!=|>=|<=|>|<|~>)?\s*([0-9][0-9a-zA-Z._+]*)\s*$')

DEFAULT_OPERATOR = '='


@lru_cache(maxsize=None)
def parse_version(version: str) -> Version:
    try:
        return Version(version)
    except InvalidVersion:
        raise RequirementError(f'Malformed version number string "{version}"')


def validate_spec_version(version: str) -> str:
    # "-" separates the version from the platform in the lock file
    if '-' in version:
        raise RequirementError(
            f'Version "{version}" should not contain "-", use "." for prerelease parts'
        )

    parse_version(version)
    return version


def pessimistic_upper_bound(version: str) -> Version:
    """Upper bound of `~> version`: 1.2.3 -> 1.3, 1.2 -> 2, 1 -> 2"""
    release = list(parse_version(version).release)
    if len(release) > 1:
        release.pop()
    release[-1] += 1

    return Version('.'.join(str(segment) for segment in release))


class Requirement:
    """
    A version constraint made of one or more "<operator> <version>" clauses.

    The original version text is kept, so the requirement renders exactly as it was declared.
    """

    DEFAULT = '>= 0'

    def __init__(self, requirement: t.Union[None, str, t.Iterable[str]] = None) -> None:
        if requirement is None:
            texts = [self.DEFAULT]
        elif isinstance(requirement, str):
            texts = [requirement]
        else:
            texts = list(requirement)

        clauses: t.List[t.Tuple[str, str]] = []
        for text in texts:
            for part in str(text).split(','):
                if part.strip():
                    clauses.append(self.parse_clause(part))

        if not clauses:
            clauses = [self.parse_clause(self.DEFAULT)]

        self._clauses = tuple(clauses)

    @staticmethod
    def parse_clause(text: str) -> t.Tuple[str, str]:
        match = CLAUSE_RE.match(text)
        if not match:
            raise RequirementError(f'Illformed requirement "{text.strip()}"')

        operator, version = match.group(1) or DEFAULT_OPERATOR, match.group(2)
        # fail early on versions that cannot be compared
        parse_version(version)

        return operator, version

    @classmethod
    def default(cls) -> 'Requirement':
        return cls()

    @property
    def clauses(self) -> t.Tuple[t.Tuple[str, str], ...]:
        return self._clauses

    @property
    def is_default(self) -> bool:
        return self._clauses == (('>=', '0'),)

    def satisfied_by(self, version: t.Union[str, Version]) -> bool:
        if not isinstance(version, Version):
            version = parse_version(str(version))

        return all(self._clause_allows(operator, text, version) for operator, text in self._clauses)

    @staticmethod
    def _clause_allows(operator: str, text: str, version: Version) -> bool:
        target = parse_version(text)

        if operator == '=':
            return version == target
        elif operator == '!=':
            return version != target
        elif operator == '>':
            return version > target
        elif operator == '<':
            return version < target
        elif operator == '>=':
            return version >= target
        elif operator == '<=':
            return version <= target

        # ~>
        return target <= version < pessimistic_upper_bound(text)

    def __str__(self) -> str:
        return ', '.join(f'{operator} {version}' for operator, version in self._clauses)

    def __repr__(self) -> str:
        return f'Requirement("{self}")'

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = Requirement(other)
        elif not isinstance(other, Requirement):
            return NotImplemented

        return self._clauses == other._clauses

    def __hash__(self) -> int:
        return hash(self._clauses)
