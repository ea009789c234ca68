# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import click

from lockstep_tools.errors import SpecNotFoundError
from lockstep_tools.messages import notice

from .constants import get_project_dir_option
from .utils import add_options
from .validations import validate_names


def init_lock():
    PROJECT_DIR_OPTION = get_project_dir_option()

    @click.command()
    @add_options(PROJECT_DIR_OPTION)
    @click.option(
        '--local',
        is_flag=True,
        default=False,
        help='Use cached package indexes only, do not fetch from the network.',
    )
    def lock(manager, local):
        """
        Resolve the dependencies of the project and write the lock file.

        Locked versions are kept as long as they still satisfy the manifest.
        """
        manager.lock(local=local)

    return lock


def init_update():
    PROJECT_DIR_OPTION = get_project_dir_option()

    @click.command()
    @add_options(PROJECT_DIR_OPTION)
    @click.option(
        '--source',
        'sources',
        multiple=True,
        callback=validate_names,
        help='Name of a source to fetch again, can be repeated.',
    )
    @click.option(
        '--local',
        is_flag=True,
        default=False,
        help='Use cached package indexes only, do not fetch from the network.',
    )
    @click.argument('names', nargs=-1, callback=validate_names)
    def update(manager, sources, local, names):
        """
        Resolve the given packages again, ignoring their locked versions.

        Without NAMES and without --source all packages are resolved again.

        An example command:

        lockstep update rack --source my_fork
        """
        if not names and not sources:
            manager.lock(update_all=True, local=local)
        else:
            manager.lock(update=list(names), update_sources=list(sources), local=local)

    return update


def init_check():
    PROJECT_DIR_OPTION = get_project_dir_option()

    @click.command()
    @add_options(PROJECT_DIR_OPTION)
    def check(manager):
        """
        Check that the lock file satisfies all dependencies with locally available specs.
        """
        missing = manager.check()
        if missing:
            for dependency in missing:
                print(f'  * {dependency}')

            raise SpecNotFoundError(
                f'{len(missing)} dependencies are not available locally, '
                'run "lockstep lock" to fetch them'
            )

        notice('The lock file satisfies all dependencies')

    return check


def init_show():
    PROJECT_DIR_OPTION = get_project_dir_option()

    @click.command()
    @add_options(PROJECT_DIR_OPTION)
    @click.option(
        '--group',
        'groups',
        multiple=True,
        help='Show only the packages of this group, can be repeated.',
    )
    def show(manager, groups):
        """
        Print the resolved packages of the project.
        """
        specs = manager.show(list(groups))
        for spec in sorted(specs, key=lambda s: (s.name, s.platform)):
            print(f'  * {spec.full_name}')

    return show
