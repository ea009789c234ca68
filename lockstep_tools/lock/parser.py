# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Reader of the line based lock file format"""

import re
import typing as t
from pathlib import Path

from pydantic import ValidationError

from lockstep_tools.dependency import Dependency
from lockstep_tools.errors import LockError, ProcessingError
from lockstep_tools.messages import debug
from lockstep_tools.sources import BaseSource, GitSource, PathSource, RegistrySource
from lockstep_tools.specification import Specification
from lockstep_tools.utils import polish_validation_error

GIT = 'GIT'
GEM = 'GEM'
PATH = 'PATH'
PLATFORMS = 'PLATFORMS'
DEPENDENCIES = 'DEPENDENCIES'

SOURCE_SECTIONS: t.Dict[str, t.Type[BaseSource]] = {
    GIT: GitSource,
    GEM: RegistrySource,
    PATH: PathSource,
}

SECTION_RE = re.compile(r'^[A-Z][A-Z ]*$')
OPTION_RE = re.compile(r'^  ([a-z]+): (.*)$')
SPECS_RE = re.compile(r'^  specs:$')
SPEC_RE = re.compile(r'^ {4}(?! )(\S+)(?: \(([^-]*)(?:-(.*))?\))?$')
SPEC_DEPENDENCY_RE = re.compile(r'^ {6}(?! )(\S+)(?: \((.*)\))?$')
PLATFORM_RE = re.compile(r'^  (?! )(\S+)$')
DEPENDENCY_RE = re.compile(r'^  (?! )(\S+?)(?: \((.*)\))?(!)?$')


class LockfileParser:
    """
    Parsed content of a lock file.

    The lock file is made of source blocks (GIT, GEM, PATH) each listing the specs it provided,
    followed by the PLATFORMS and DEPENDENCIES blocks. Empty text means no lock file.
    """

    def __init__(self, text: str = '', root: t.Union[str, Path, None] = None) -> None:
        self.sources: t.List[BaseSource] = []
        self.specs: t.List[Specification] = []
        self.dependencies: t.List[Dependency] = []
        self.platforms: t.List[str] = []

        self._root = root
        self._section: t.Optional[str] = None
        self._options: t.Dict[str, t.Any] = {}
        self._source: t.Optional[BaseSource] = None
        self._spec: t.Optional[Specification] = None
        self._pinned: t.List[Dependency] = []

        for lineno, line in enumerate(text.splitlines(), start=1):
            try:
                self._parse_line(line.rstrip())
            except ProcessingError as e:
                raise LockError(f'Cannot parse the lock file, line {lineno}: {e}')

        self._close_section()
        self._bind_pinned_dependencies()

    def _parse_line(self, line: str) -> None:
        if not line:
            self._close_section()
            return

        if SECTION_RE.match(line):
            self._close_section()
            self._section = line
            return

        if self._section in SOURCE_SECTIONS:
            self._parse_source_line(line)
        elif self._section == PLATFORMS:
            self._parse_platform(line)
        elif self._section == DEPENDENCIES:
            self._parse_dependency(line)
        elif self._section is None:
            raise LockError(f'unexpected line "{line}" outside of a section')
        else:
            debug(f'Ignoring line "{line}" of unknown lock file section {self._section}')

    def _close_section(self) -> None:
        if self._section in SOURCE_SECTIONS and self._source is None:
            raise LockError(f'{self._section} block without "specs:"')

        self._section = None
        self._source = None
        self._spec = None
        self._options = {}

    def _parse_source_line(self, line: str) -> None:
        if self._source is None:
            if SPECS_RE.match(line):
                self._source = self._build_source()
                return

            match = OPTION_RE.match(line)
            if not match:
                raise LockError(f'malformed source option "{line}"')

            key, value = match.groups()
            if key == 'remote':
                self._options.setdefault('remote', []).append(value)
            else:
                self._options[key] = value

            return

        spec_match = SPEC_RE.match(line)
        if spec_match:
            name, version, platform = spec_match.groups()
            if not version:
                raise LockError(f'spec "{name}" has no version')

            self._spec = Specification(name, version, platform=platform, source=self._source)
            self.specs.append(self._spec)
            return

        dependency_match = SPEC_DEPENDENCY_RE.match(line)
        if dependency_match and self._spec is not None:
            name, requirement = dependency_match.groups()
            self._spec.dependencies.append(Dependency(name, requirement))
            return

        raise LockError(f'malformed spec line "{line}"')

    def _build_source(self) -> BaseSource:
        options = dict(self._options)
        remotes = options.pop('remote', [])
        if not remotes:
            raise LockError(f'{self._section} block without "remote:"')

        if self._section == GEM:
            d: t.Dict[str, t.Any] = {'remotes': remotes}
        elif self._section == PATH:
            d = {'path': remotes[0]}
        else:
            d = {'uri': remotes[0]}
            if 'submodules' in options:
                options['submodules'] = options['submodules'] == 'true'

        d.update(options)

        try:
            source = SOURCE_SECTIONS[self._section].fromdict(d)  # type: ignore
        except ValidationError as e:
            raise LockError(polish_validation_error(e))

        source.set_root(self._root)

        # blocks describing the same source share one instance
        for known in self.sources:
            if known == source:
                return known

        self.sources.append(source)
        return source

    def _parse_platform(self, line: str) -> None:
        match = PLATFORM_RE.match(line)
        if not match:
            raise LockError(f'malformed platform "{line}"')

        if match.group(1) not in self.platforms:
            self.platforms.append(match.group(1))

    def _parse_dependency(self, line: str) -> None:
        match = DEPENDENCY_RE.match(line)
        if not match:
            raise LockError(f'malformed dependency "{line}"')

        name, requirement, pinned = match.groups()
        dependency = Dependency(name, requirement)
        self.dependencies.append(dependency)
        if pinned:
            self._pinned.append(dependency)

    def _bind_pinned_dependencies(self) -> None:
        for dependency in self._pinned:
            spec = next((s for s in self.specs if s.name == dependency.name), None)
            # not resolved for any of the locked platforms
            if spec is None:
                debug(f'Pinned dependency "{dependency.name}" has no locked spec, left unbound')
                continue

            dependency.source = spec.source

            clauses = dependency.requirement.clauses
            if isinstance(spec.source, PathSource) and len(clauses) == 1 and clauses[0][0] == '=':
                spec.source.set_fallback(dependency.name, clauses[0][1])
