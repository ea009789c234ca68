# SPDX-FileCopyrightText: 2024-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
from .version_solver import VersionSolver

__all__ = ['VersionSolver']
