# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import hashlib
import json
import os
import typing as t

from pydantic import Field, ValidationError

from lockstep_tools.constants import DEFAULT_REGISTRY_URL, REGISTRY_INDEX_FILENAME
from lockstep_tools.errors import FetchingError
from lockstep_tools.http import get_json, join_url
from lockstep_tools.index import Index
from lockstep_tools.messages import debug, hint
from lockstep_tools.utils import polish_validation_error

from .base import BaseSource
from .spec_files import RegistryIndexModel, build_index


class RegistrySource(BaseSource):
    type: t.Literal['registry'] = 'registry'  # type: ignore
    remotes: t.List[str] = Field(default_factory=lambda: [DEFAULT_REGISTRY_URL], min_length=1)

    def __str__(self) -> str:
        return 'registry at {}'.format(', '.join(self.remotes))

    @property
    def name(self) -> str:
        return 'registry'

    @property
    def hash_key(self) -> str:
        return ','.join(self.remotes)

    @property
    def is_default_provider(self) -> bool:
        return True

    def _index_cache_file(self, remote: str) -> str:
        digest = hashlib.sha256(remote.encode('utf-8')).hexdigest()
        return os.path.join(self.cache_path(), digest[:16], REGISTRY_INDEX_FILENAME)

    def _fetch_remote_index(self, remote: str) -> RegistryIndexModel:
        url = join_url(remote, REGISTRY_INDEX_FILENAME)
        data = get_json(url)

        try:
            model = RegistryIndexModel.fromdict(data if isinstance(data, dict) else {'specs': data})
        except ValidationError as e:
            raise FetchingError(f'Invalid package index at {url}:\n{polish_validation_error(e)}')

        cache_file = self._index_cache_file(remote)
        os.makedirs(os.path.dirname(cache_file), exist_ok=True)
        with open(cache_file, 'w', encoding='utf-8') as f:
            json.dump(model.model_dump(), f)

        return model

    def _cached_index(self, remote: str) -> t.Optional[RegistryIndexModel]:
        cache_file = self._index_cache_file(remote)
        if not os.path.isfile(cache_file):
            return None

        try:
            with open(cache_file, encoding='utf-8') as f:
                return RegistryIndexModel.fromdict(json.load(f))
        except (ValueError, ValidationError):
            debug(f'Ignoring corrupted index cache {cache_file}')
            return None

    def _load_specs(self) -> Index:
        index = Index()
        # later remotes take precedence
        for remote in self.remotes:
            if self.is_remote:
                model: t.Optional[RegistryIndexModel] = self._fetch_remote_index(remote)
            else:
                model = self._cached_index(remote)
                if model is None:
                    hint(
                        f'No cached package index for {remote}, '
                        'run without "--local" to fetch it'
                    )
                    continue

            index.use(build_index(model.specs, self))

        return index

    def to_lock(self) -> str:
        out = 'GEM\n'
        for remote in self.remotes:
            out += f'  remote: {remote}\n'
        out += '  specs:\n'
        return out
