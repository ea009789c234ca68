# SPDX-FileCopyrightText: 2023-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""
This module contains the settings of lockstep that are read from environment variables.
"""

import re
import typing as t

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GROUPS_SEPARATOR_RE = re.compile(r'[:\s]+')


class LockstepSettings(BaseSettings):
    """
    Lockstep settings.

    .. warning::

        For environment variable aliases, the first alias is the recommended one.
        Any other listed aliases are also supported.
    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix='LOCKSTEP_',
    )

    # LOGGING

    # by default log-level is hint(15)
    DEBUG_MODE: bool = Field(False, description='Enable debug mode.')  # log-level: debug(10)

    NO_HINTS: bool = Field(
        False, description='Disable hints in the output.'
    )  # log-level: notice/info(20)

    NO_COLORS: bool = Field(False, description='Disable colored output.')  # with colorama or not

    # GENERAL

    CACHE_PATH: t.Optional[str] = Field(
        None,
        description="""
            | Cache directory for lockstep.
            | **Default:** Depends on OS
        """,
    )

    PLATFORM: t.Optional[str] = Field(
        None,
        description="""
            | Platform of the current environment.
            | **Default:** the generic platform
        """,
    )

    WITHOUT: t.Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            'LOCKSTEP_WITHOUT',
            'LOCKSTEP_WITHOUT_GROUPS',
        ),
        description="""
            | Groups of dependencies that are not installed.
            | To set multiple groups, use colons or spaces to separate them:
            | `<group1>:<group2>:...`

            Aliases:

            - ``LOCKSTEP_WITHOUT``
            - ``LOCKSTEP_WITHOUT_GROUPS``
        """,
    )

    # NETWORK

    API_TIMEOUT: t.Optional[float] = Field(
        default=None,
        description="""
            | Timeout for requests to the package registries in seconds.
            | If not set, the default timeout of the HTTP client will be used.
        """,
    )

    # version solver
    RESOLVER_MAX_ROUNDS: int = Field(
        2000,
        description='Maximum number of rounds the version solver may take.',
    )

    @property
    def without_groups(self) -> t.List[str]:
        if not self.WITHOUT:
            return []

        return [group for group in GROUPS_SEPARATOR_RE.split(self.WITHOUT.strip()) if group]
