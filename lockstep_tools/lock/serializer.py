# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Writer of the line based lock file format"""

import typing as t

from lockstep_tools.dependency import Dependency
from lockstep_tools.platforms import platform_sort_key
from lockstep_tools.sources import BaseSource
from lockstep_tools.specification import Specification


def render_lock(
    resolution: t.Iterable[Specification],
    sources: t.Iterable[BaseSource],
    platforms: t.Iterable[str],
    dependencies: t.Iterable[Dependency],
) -> str:
    """
    Render the lock file text.

    The output only depends on the given values, never on the order they are passed in,
    so rendering the same resolution twice gives the same bytes.
    """
    resolution = list(resolution)
    out = ''

    for source in sorted(sources, key=lambda s: (s.is_default_provider, str(s))):
        out += source.to_lock()

        source_specs = [spec for spec in resolution if spec.source == source]
        for spec in sorted(source_specs, key=lambda s: (s.name, platform_sort_key(s.platform))):
            out += spec.to_lock()

        out += '\n'

    out += 'PLATFORMS\n'
    for platform in sorted(set(platforms)):
        out += f'  {platform}\n'

    out += '\n'
    out += 'DEPENDENCIES\n'
    for dependency in sorted(dependencies, key=lambda d: d.name):
        out += dependency.to_lock()

    return out
