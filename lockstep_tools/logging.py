# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import logging
import sys
import typing as t

from colorama import Fore

from lockstep_tools import HINT_LEVEL, get_logger
from lockstep_tools.environment import LockstepSettings
from lockstep_tools.errors import WarningAsExceptionError


class LevelRangeFilter(logging.Filter):
    """Passes records with `low <= level < high`"""

    def __init__(self, low: int = logging.NOTSET, high: t.Optional[int] = None) -> None:
        super().__init__()
        self.low = low
        self.high = high

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno < self.low:
            return False

        return self.high is None or record.levelno < self.high


class WarningsAsErrorsFilter(logging.Filter):
    """Raise on warnings, for the -W flag"""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.WARNING:
            raise WarningAsExceptionError(record.getMessage())

        return True


class LockstepFormatter(logging.Formatter):
    """
    "LEVEL: message", colored when both streams are terminals.

    Levels: debug (10), hint (15, shown by default), notice (20), warning (30), error (40).
    """

    PREFIX = {
        logging.DEBUG: 'DEBUG',
        HINT_LEVEL: 'HINT',
        logging.INFO: 'NOTICE',
        logging.WARNING: 'WARNING',
        logging.ERROR: 'ERROR',
        logging.CRITICAL: 'FATAL',
    }

    COLOR = {
        logging.DEBUG: Fore.LIGHTBLACK_EX,
        HINT_LEVEL: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED,
    }

    def __init__(self, colored: bool = True) -> None:
        super().__init__(fmt='%(message)s')
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        line = '{}: {}'.format(
            self.PREFIX.get(record.levelno, record.levelname), super().format(record)
        )
        if self.colored and sys.stdout.isatty() and sys.stderr.isatty():
            return f'{self.COLOR.get(record.levelno, "")}{line}{Fore.RESET}'

        return line


def setup_logging(warnings_as_errors: bool = False) -> None:
    """Messages below warnings go to stdout, the rest to stderr"""
    logger = get_logger()
    settings = LockstepSettings()

    if settings.DEBUG_MODE:
        logger.setLevel(logging.DEBUG)
    elif settings.NO_HINTS:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(HINT_LEVEL)

    logger.handlers.clear()

    for stream, level_filter in (
        (sys.stdout, LevelRangeFilter(high=logging.WARNING)),
        (sys.stderr, LevelRangeFilter(low=logging.WARNING)),
    ):
        handler = logging.StreamHandler(stream)
        handler.addFilter(level_filter)
        handler.setFormatter(LockstepFormatter(colored=not settings.NO_COLORS))
        logger.addHandler(handler)

    if warnings_as_errors:
        logger.handlers[-1].addFilter(WarningsAsErrorsFilter())

    logger.propagate = False
