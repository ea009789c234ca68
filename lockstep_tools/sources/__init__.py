# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import typing as t

from pydantic import Field

from lockstep_tools.utils import BaseModel

from .base import BaseSource
from .git import GitSource
from .path import PathSource
from .registry import RegistrySource

AnySource = t.Union[GitSource, PathSource, RegistrySource]


class Source(BaseModel):
    source: AnySource = Field(discriminator='type')

    @classmethod
    def from_dict(cls, d: t.Dict[str, t.Any]) -> AnySource:
        return cls.model_validate({'source': d}).source


__all__ = [
    'AnySource',
    'Source',
    'BaseSource',
    'GitSource',
    'PathSource',
    'RegistrySource',
]
