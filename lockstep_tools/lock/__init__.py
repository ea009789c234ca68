# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
from .manager import LockManager
from .parser import LockfileParser
from .serializer import render_lock

__all__ = ['LockManager', 'LockfileParser', 'render_lock']
