# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Searchable collection of the specs provided by sources"""

import typing as t

from lockstep_tools.dependency import Dependency, DepProxy
from lockstep_tools.platforms import platform_sort_key
from lockstep_tools.specification import Specification

Query = t.Union[str, Dependency, DepProxy, Specification]


class Index:
    """
    Specs keyed by name.

    A spec added with the same name, version and platform as an existing one replaces it.
    """

    def __init__(self) -> None:
        self._specs: t.Dict[str, t.Dict[t.Tuple[str, str], Specification]] = {}

    @classmethod
    def build(cls, callback: t.Callable[['Index'], None]) -> 'Index':
        index = cls()
        callback(index)
        return index

    def add(self, spec: Specification) -> None:
        self._specs.setdefault(spec.name, {})[(spec.version, spec.platform)] = spec

    def use(self, other: t.Union['Index', t.Iterable[Specification]]) -> 'Index':
        for spec in other:
            self.add(spec)

        return self

    def search(self, query: Query) -> t.List[Specification]:
        if isinstance(query, str):
            return list(self._specs.get(query, {}).values())

        if isinstance(query, Specification):
            found = self._specs.get(query.name, {}).get((query.version, query.platform))
            return [found] if found else []

        results = [
            spec
            for spec in self._specs.get(query.name, {}).values()
            if query.requirement.satisfied_by(spec.parsed_version)
        ]
        return sorted(results, key=lambda s: (s.parsed_version, platform_sort_key(s.platform)))

    def names(self) -> t.List[str]:
        return sorted(self._specs)

    def __iter__(self) -> t.Iterator[Specification]:
        for name in sorted(self._specs):
            yield from self._specs[name].values()

    def __len__(self) -> int:
        return sum(len(specs) for specs in self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __repr__(self) -> str:
        return f'Index <{len(self)} specs>'
