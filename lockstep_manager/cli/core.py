# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import sys
import typing as t

import click

from lockstep_tools import error, setup_logging
from lockstep_tools.__version__ import __version__ as lockstep_version
from lockstep_tools.errors import FatalError, WarningAsExceptionError

from .project import init_check, init_lock, init_show, init_update

DEFAULT_SETTINGS: t.Dict[str, t.Any] = {
    'help_option_names': ['-h', '--help'],
    'show_default': True,
}


def initialize_cli():
    """
    Initialize the CLI.
    """

    @click.group(context_settings=DEFAULT_SETTINGS)
    @click.option(
        '--warnings-as-errors',
        '-W',
        is_flag=True,
        default=False,
        help='Treat warnings as errors.',
    )
    def cli(warnings_as_errors):
        setup_logging(warnings_as_errors)

    @cli.command()
    def version():
        """
        Print the version of lockstep.
        """
        print(lockstep_version)

    cli.add_command(init_lock())
    cli.add_command(init_update())
    cli.add_command(init_check())
    cli.add_command(init_show())

    return cli


def safe_cli():
    """
    CLI entry point with error handling.
    """
    try:
        cli = initialize_cli()
        cli()
    except WarningAsExceptionError as e:
        error(str(e))
        sys.exit(1)
    except FatalError as e:
        error(str(e))
        sys.exit(e.exit_code)
