# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
"""Platform tokens used by specs, dependencies and lock files"""

import typing as t

from lockstep_tools.environment import LockstepSettings

GENERIC_PLATFORM = 'ruby'
JAVA_PLATFORM = 'java'
MSWIN_PLATFORM = 'x86-mswin32'
MINGW_PLATFORM = 'x86-mingw32'

# dependency platform tags -> platform tokens
PLATFORM_MAP: t.Dict[str, str] = {
    'ruby': GENERIC_PLATFORM,
    'ruby_18': GENERIC_PLATFORM,
    'ruby_19': GENERIC_PLATFORM,
    'mri': GENERIC_PLATFORM,
    'mri_18': GENERIC_PLATFORM,
    'mri_19': GENERIC_PLATFORM,
    'jruby': JAVA_PLATFORM,
    'mswin': MSWIN_PLATFORM,
    'mingw': MINGW_PLATFORM,
    'mingw_18': MINGW_PLATFORM,
    'mingw_19': MINGW_PLATFORM,
}


def is_generic(platform: t.Optional[str]) -> bool:
    return not platform or platform == GENERIC_PLATFORM


def local_platform() -> str:
    """Platform of the running environment, generic unless overridden"""
    return LockstepSettings().PLATFORM or GENERIC_PLATFORM


def match_platform(spec_platform: t.Optional[str], platform: str) -> bool:
    """True if a spec built for `spec_platform` can be used on `platform`"""
    return is_generic(spec_platform) or spec_platform == platform


def platform_sort_key(platform: t.Optional[str]) -> str:
    """Sort key placing the generic platform before all the others"""
    return '\0' if is_generic(platform) else str(platform)
