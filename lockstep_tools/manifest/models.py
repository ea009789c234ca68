# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import typing as t
from pathlib import Path

from pydantic import Discriminator, Tag, ValidationError, field_validator, model_validator

from lockstep_tools.dependency import Dependency
from lockstep_tools.errors import ProcessingError
from lockstep_tools.platforms import PLATFORM_MAP
from lockstep_tools.requirement import Requirement
from lockstep_tools.sources import AnySource, BaseSource, Source
from lockstep_tools.utils import Annotated, BaseModel, polish_validation_error

STR_MARKER = '__str__'
DICT_MARKER = '__dict__'
NONE_MARKER = '__none__'

SOURCE_KINDS = ('registry', 'git', 'path')


def str_dict_discriminator(v: t.Any) -> t.Optional[str]:
    if v is None:
        return NONE_MARKER

    if isinstance(v, str):
        return STR_MARKER

    if isinstance(v, dict):
        return DICT_MARKER

    return None


def _validate_platform_tags(v: t.Optional[t.List[str]]) -> t.Optional[t.List[str]]:
    if not v:
        return v

    unknown = [tag for tag in v if tag not in PLATFORM_MAP]
    if unknown:
        raise ValueError(
            'Unknown platforms: {}. Supported platforms are: {}'.format(
                ', '.join(unknown), ', '.join(sorted(PLATFORM_MAP))
            )
        )

    return v


class SourceItem(BaseModel):
    """One named source of the manifest, exactly one of `registry`, `git` and `path` is set"""

    ALLOW_EXTRA_FIELDS: t.ClassVar[bool] = False
    FIELD_NAME: t.ClassVar[str] = 'sources'

    registry: t.Optional[t.Union[str, t.List[str]]] = None
    git: t.Optional[str] = None
    ref: t.Optional[str] = None
    branch: t.Optional[str] = None
    tag: t.Optional[str] = None
    submodules: t.Optional[bool] = None
    path: t.Optional[str] = None
    glob: t.Optional[str] = None

    @model_validator(mode='after')
    def validate_kind(self) -> 'SourceItem':
        kinds = [kind for kind in SOURCE_KINDS if getattr(self, kind) is not None]
        if len(kinds) != 1:
            raise ValueError('Exactly one of "registry", "git" or "path" must be set')

        if not self.git and any(
            getattr(self, option) is not None for option in ('ref', 'branch', 'tag', 'submodules')
        ):
            raise ValueError('"ref", "branch", "tag" and "submodules" are only valid for git')

        if self.registry is not None and self.glob is not None:
            raise ValueError('"glob" is not valid for registry sources')

        if self.git and len([o for o in (self.ref, self.branch, self.tag) if o]) > 1:
            raise ValueError('Only one of "ref", "branch" or "tag" may be set')

        return self

    def to_source(self, root: t.Optional[Path] = None) -> AnySource:
        if self.registry is not None:
            remotes = [self.registry] if isinstance(self.registry, str) else self.registry
            d: t.Dict[str, t.Any] = {'type': 'registry', 'remotes': remotes}
        elif self.git is not None:
            d = {
                'type': 'git',
                'uri': self.git,
                'ref': self.ref,
                'branch': self.branch,
                'tag': self.tag,
                'submodules': self.submodules,
                'glob': self.glob,
            }
        else:
            d = {'type': 'path', 'path': self.path, 'glob': self.glob}

        source = Source.from_dict({k: v for k, v in d.items() if v is not None})
        source.set_root(root)
        return source


class DependencyItem(BaseModel):
    ALLOW_EXTRA_FIELDS: t.ClassVar[bool] = False
    FIELD_NAME: t.ClassVar[str] = 'dependencies'

    version: t.Optional[str] = None
    groups: t.Optional[t.List[str]] = None
    platforms: t.Optional[t.List[str]] = None
    env: t.Optional[t.Union[str, t.Dict[str, str]]] = None
    source: t.Optional[str] = None

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: t.Optional[str]) -> t.Optional[str]:
        if v is not None:
            try:
                Requirement(v)
            except ProcessingError as e:
                raise ValueError(str(e))

        return v

    @field_validator('platforms')
    @classmethod
    def validate_platforms(cls, v: t.Optional[t.List[str]]) -> t.Optional[t.List[str]]:
        return _validate_platform_tags(v)


class Manifest(BaseModel):
    ALLOW_EXTRA_FIELDS: t.ClassVar[bool] = False
    FIELD_NAME: t.ClassVar[str] = 'manifest'

    sources: t.Dict[str, SourceItem] = {}
    # platform tags of dependencies not declaring their own
    platforms: t.List[str] = []
    dependencies: t.Dict[
        str,
        Annotated[
            t.Union[
                Annotated[None, Tag(NONE_MARKER)],
                Annotated[str, Tag(STR_MARKER)],
                Annotated[DependencyItem, Tag(DICT_MARKER)],
            ],
            Discriminator(
                str_dict_discriminator,
                custom_error_type='invalid_union_member',
                custom_error_message='Supported types for "dependency" field: "str,dict"',
            ),
        ],
    ] = {}

    @field_validator('platforms')
    @classmethod
    def validate_platforms(cls, v: t.List[str]) -> t.List[str]:
        return _validate_platform_tags(v) or []

    @model_validator(mode='after')
    def validate_source_names(self) -> 'Manifest':
        for name, item in self.dependencies.items():
            if isinstance(item, DependencyItem) and item.source and item.source not in self.sources:
                raise ValueError(
                    f'Invalid field "dependencies:{name}:source": '
                    f'unknown source "{item.source}", '
                    f'known sources: {", ".join(sorted(self.sources)) or "none"}'
                )

        return self

    def dependency_items(self) -> t.Iterator[t.Tuple[str, DependencyItem]]:
        for name, item in self.dependencies.items():
            if isinstance(item, DependencyItem):
                yield name, item
            else:
                yield name, DependencyItem(version=item)

    def to_definition_input(
        self, root: t.Optional[Path] = None
    ) -> t.Tuple[t.List[Dependency], t.List[BaseSource]]:
        """
        Dependencies and sources of the manifest.

        Each named source becomes one source object, names describing the same location share it.
        """
        sources: t.List[BaseSource] = []
        named: t.Dict[str, BaseSource] = {}
        for name, item in self.sources.items():
            source = item.to_source(root)
            known = next((s for s in sources if s == source), None)
            if known is None:
                sources.append(source)
                known = source

            named[name] = known

        dependencies = []
        for name, item in self.dependency_items():
            dependencies.append(
                Dependency(
                    name,
                    item.version,
                    groups=item.groups,
                    platforms=item.platforms or self.platforms,
                    env=item.env,
                    source=named[item.source] if item.source else None,
                )
            )

        return dependencies, sources

    @classmethod
    def validate_manifest(cls, obj: t.Any) -> t.Tuple[t.List[str], t.Optional['Manifest']]:
        if not isinstance(obj, dict):
            return ['Invalid manifest format. Manifest should be a dictionary'], None

        try:
            return [], cls.fromdict(obj)
        except ValidationError as e:
            return polish_validation_error(e).splitlines(), None
