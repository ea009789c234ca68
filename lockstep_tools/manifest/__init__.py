# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
from .models import DependencyItem, Manifest, SourceItem

__all__ = ['DependencyItem', 'Manifest', 'SourceItem']
