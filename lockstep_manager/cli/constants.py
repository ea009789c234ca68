# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import os
import typing as t

import click
from click.decorators import FC

from lockstep_manager.cli.validations import combined_callback, validate_existing_dir
from lockstep_manager.core import ProjectManager


def get_project_dir_option() -> t.List[FC]:
    return [
        click.option(
            '--project-dir',
            'manager',
            default=os.getcwd(),
            callback=combined_callback(
                validate_existing_dir,
                lambda ctx, param, value: ProjectManager(value),  # noqa: ARG005
            ),
            help='Directory of the project with the lockstep.yml manifest.',
        ),
    ]
