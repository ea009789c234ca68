# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Spec descriptions provided by registries and spec files of path and git sources"""

import typing as t
from pathlib import Path

from pydantic import ValidationError, field_validator
from ruamel.yaml import YAML, YAMLError

from lockstep_tools.dependency import Dependency
from lockstep_tools.errors import RequirementError, SourceError
from lockstep_tools.index import Index
from lockstep_tools.messages import debug
from lockstep_tools.requirement import validate_spec_version
from lockstep_tools.specification import Specification
from lockstep_tools.utils import BaseModel, polish_validation_error

if t.TYPE_CHECKING:
    from lockstep_tools.sources.base import BaseSource


class SpecModel(BaseModel):
    name: str
    version: str
    platform: t.Optional[str] = None
    # dependency name -> requirement, None or empty for any version
    dependencies: t.Dict[str, t.Optional[str]] = {}

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: str) -> str:
        try:
            return validate_spec_version(v)
        except RequirementError as e:
            raise ValueError(str(e))

    def to_specification(self, source: 'BaseSource') -> Specification:
        try:
            dependencies = [
                Dependency(name, requirement or None)
                for name, requirement in self.dependencies.items()
            ]
        except RequirementError as e:
            raise SourceError(f'Invalid dependency of "{self.name}" in {source}: {e}')

        return Specification(
            self.name,
            self.version,
            platform=self.platform,
            source=source,
            dependencies=dependencies,
        )


class RegistryIndexModel(BaseModel):
    specs: t.List[SpecModel] = []


def build_index(models: t.Iterable[SpecModel], source: 'BaseSource') -> Index:
    index = Index()
    for model in models:
        index.add(model.to_specification(source))

    return index


def load_spec_file(path: Path) -> SpecModel:
    try:
        content = YAML(typ='safe').load(path.read_text(encoding='utf-8'))
    except YAMLError:
        raise SourceError(
            f'Cannot parse the spec file. Please check that\n\t{path}\nis a valid YAML file'
        )

    if not isinstance(content, dict):
        raise SourceError(f'Spec file {path} should be a dictionary')

    try:
        return SpecModel.fromdict(content)
    except ValidationError as e:
        raise SourceError(f'Invalid spec file {path}:\n{polish_validation_error(e)}')


def load_spec_files(root: Path, globs: t.Iterable[str], source: 'BaseSource') -> Index:
    """Index of all the spec files under `root` matching any of `globs`"""
    paths: t.List[Path] = []
    for pattern in globs:
        for path in sorted(root.glob(pattern)):
            if path.is_file() and path not in paths:
                paths.append(path)

    debug(f'Found {len(paths)} spec files in {root}')
    return build_index((load_spec_file(path) for path in paths), source)
