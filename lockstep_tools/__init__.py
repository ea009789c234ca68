# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import logging as lib_logging

LOGGING_NAMESPACE = __package__
HINT_LEVEL = 15


def get_logger() -> lib_logging.Logger:
    """
    Get logger for lockstep.

    Use this instead of `logging.getLogger(__package__)` to get the universal logger for both
    lockstep_manager and lockstep_tools
    """
    return lib_logging.getLogger(LOGGING_NAMESPACE)


from lockstep_tools.environment import LockstepSettings  # noqa: E402
from lockstep_tools.logging import setup_logging  # noqa: E402
from lockstep_tools.messages import (  # noqa: E402
    debug,
    error,
    hint,
    notice,
    warn,
)

__all__ = [
    'LockstepSettings',
    'debug',
    'error',
    'get_logger',
    'hint',
    'notice',
    'setup_logging',
    'warn',
]
