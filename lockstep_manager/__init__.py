# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import logging
import sys

from lockstep_tools.environment import LockstepSettings

logger = logging.getLogger(__package__)
if LockstepSettings().DEBUG_MODE:
    logger.setLevel(logging.DEBUG)
    logger.addHandler(logging.StreamHandler(sys.stdout))
