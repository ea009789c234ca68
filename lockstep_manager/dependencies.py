# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import typing as t

from lockstep_tools.dependency import Dependency, DepProxy


def expand_dependencies(
    dependencies: t.Iterable[Dependency], platforms: t.Iterable[str]
) -> t.List[DepProxy]:
    """
    One DepProxy per dependency and platform it has to be resolved for.

    Keeps the order of the dependencies, and for each dependency the order of `platforms`.
    """
    platforms = list(platforms)
    return [
        DepProxy(dependency, platform)
        for dependency in dependencies
        for platform in dependency.gem_platforms(platforms)
    ]


def dependency_groups(dependencies: t.Iterable[Dependency]) -> t.List[str]:
    groups: t.List[str] = []
    for dependency in dependencies:
        for group in dependency.groups:
            if group not in groups:
                groups.append(group)

    return groups


def requested_dependencies(
    dependencies: t.Iterable[Dependency],
    groups: t.Iterable[str],
    without: t.Iterable[str] = (),
) -> t.List[Dependency]:
    """Dependencies of the environment in `groups` except the `without` ones"""
    wanted = set(groups) - set(without)
    return [
        dependency
        for dependency in dependencies
        if dependency.should_include and wanted.intersection(dependency.groups)
    ]
