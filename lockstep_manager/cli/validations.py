# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import re
from pathlib import Path

import click

NAME_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')


def validate_existing_dir(ctx, param, value):  # noqa: ARG001
    if value is not None:
        if not value or not Path(value).is_dir():
            raise click.BadParameter(f'"{value}" directory does not exist.')
    return value


def validate_names(ctx, param, value):  # noqa: ARG001
    for name in value or ():
        if not NAME_RE.match(name):
            raise click.BadParameter(
                f'"{name}" should start with a letter or a number '
                'and consist of letters, numbers, ".", "-" or "_".'
            )
    return value


def combined_callback(*callbacks):
    def wrapper(ctx, param, value):
        for cb in callbacks:
            value = cb(ctx, param, value)
        return value

    return wrapper
