# SPDX-FileCopyrightText: 2018-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import re

COMMIT_ID_RE = r'[0-9a-f]{40}'
COMPILED_COMMIT_ID_RE = re.compile(COMMIT_ID_RE)

MANIFEST_FILENAME = 'lockstep.yml'
LOCKFILE_FILENAME = 'lockstep.lock'

DEFAULT_GROUP = 'default'

# Registry related constants
DEFAULT_REGISTRY_URL = 'https://rubygems.org/'
REGISTRY_INDEX_FILENAME = 'specs.json'

# Spec files read from path and git sources, comma separated globs
DEFAULT_SPEC_GLOB = '*.spec.yml,*/*.spec.yml'
