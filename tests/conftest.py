# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import textwrap
import typing as t
from pathlib import Path

import pytest

from lockstep_tools import HINT_LEVEL, get_logger
from lockstep_tools.dependency import Dependency
from lockstep_tools.specification import Specification


@pytest.fixture(autouse=True)
def reset_logger():
    yield

    logger = get_logger()
    logger.setLevel(HINT_LEVEL)
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture(autouse=True)
def monkeypatch_environment(monkeypatch, tmp_path):
    monkeypatch.setenv('LOCKSTEP_CACHE_PATH', str(tmp_path / 'cache'))
    for name in ('LOCKSTEP_PLATFORM', 'LOCKSTEP_WITHOUT', 'LOCKSTEP_WITHOUT_GROUPS'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def write_spec():
    """Writes a spec file read by path and git sources"""

    def writer(
        directory: t.Union[str, Path],
        name: str,
        version: str,
        dependencies: t.Optional[t.Dict[str, str]] = None,
        platform: t.Optional[str] = None,
    ) -> Path:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        content = f'name: {name}\nversion: "{version}"\n'
        if platform:
            content += f'platform: {platform}\n'
        if dependencies:
            content += 'dependencies:\n'
            for dep_name, requirement in dependencies.items():
                content += f'  {dep_name}: "{requirement}"\n'

        suffix = f'-{platform}' if platform else ''
        path = directory / f'{name.lower()}-{version}{suffix}.spec.yml'
        path.write_text(content, encoding='utf-8')
        return path

    return writer


@pytest.fixture()
def project(tmp_path, write_spec):
    """
    Project with a path source "vendor" providing A 1.2 (depending on B) and B 2.1
    """
    project_dir = tmp_path / 'project'
    vendor = project_dir / 'vendor'
    write_spec(vendor, 'A', '1.2', {'B': '~> 2.0'})
    write_spec(vendor, 'B', '2.1')

    (project_dir / 'lockstep.yml').write_text(
        textwrap.dedent(
            """
            sources:
              vendor:
                path: vendor
            dependencies:
              A:
                version: "~> 1.0"
                source: vendor
            """
        ),
        encoding='utf-8',
    )

    return project_dir


@pytest.fixture()
def make_spec():
    def maker(
        name: str,
        version: str,
        dependencies: t.Optional[t.Dict[str, t.Optional[str]]] = None,
        platform: t.Optional[str] = None,
        source: t.Any = None,
    ) -> Specification:
        return Specification(
            name,
            version,
            platform=platform,
            source=source,
            dependencies=[Dependency(n, r) for n, r in (dependencies or {}).items()],
        )

    return maker
