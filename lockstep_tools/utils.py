# SPDX-FileCopyrightText: 2023-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import sys
import typing as t

from pydantic import ConfigDict, ValidationError, model_validator
from pydantic import BaseModel as _BaseModel
from pydantic_core import ErrorDetails

from . import debug

if sys.version_info < (3, 9):
    from typing_extensions import Annotated
else:
    from typing import Annotated  # noqa

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self  # noqa


class BaseModel(_BaseModel):
    """
    Base of the manifest, spec file and source models.

    Unknown keys are dropped with a debug message, or rejected when ALLOW_EXTRA_FIELDS is False.
    FIELD_NAME names the model in that error.
    """

    FIELD_NAME: t.ClassVar[str] = ''
    ALLOW_EXTRA_FIELDS: t.ClassVar[bool] = True

    model_config = ConfigDict(
        str_min_length=1,
        validate_assignment=True,
    )

    @classmethod
    def fromdict(cls, d: t.Dict[str, t.Any]) -> Self:
        return cls.model_validate({k: v for k, v in d.items() if v is not None})

    @model_validator(mode='before')
    def check_unknown_fields(cls, v):
        if not isinstance(v, dict):
            return v

        unknown_fields = sorted(set(v) - set(cls.model_fields))
        if not unknown_fields:
            return v

        if cls.ALLOW_EXTRA_FIELDS:
            debug(f'Dropping unknown keys of {cls.__name__}: {", ".join(unknown_fields)}')
            return {k: value for k, value in v.items() if k not in unknown_fields}

        raise ValueError(
            f'Unknown fields "{",".join(unknown_fields)}" '
            f'under "{cls.FIELD_NAME or cls.__name__.lower()}" field'
        )


def validation_error_to_str(error: ErrorDetails) -> str:
    """One line for a pydantic error: the dotted location of the field and the message"""
    msg = error['msg']
    prefix = 'Value error, '
    if msg.startswith(prefix):
        msg = msg[len(prefix) :]

    fields: t.List[str] = []
    for part in error['loc']:
        if isinstance(part, int):
            fields.append(f'[{part}]')
        # skip discriminator tags and validator names
        elif not part.startswith(('function-', '__')) and 'lambda' not in part:
            fields.append(part)

    if not fields:
        return msg

    return f'Invalid field "{":".join(fields)}": {msg}'


def polish_validation_error(err: ValidationError) -> str:
    messages: t.List[str] = []
    for error in err.errors(include_url=False):
        message = validation_error_to_str(error)
        if message not in messages:
            messages.append(message)

    return '\n'.join(messages)
