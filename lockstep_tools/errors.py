# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0


import typing as t


class FatalError(RuntimeError):
    """Generic unrecoverable runtime error"""

    exit_code = 2

    def __init__(self, *args: t.Any, **kwargs: t.Any) -> None:
        super().__init__(*args)
        exit_code = kwargs.pop('exit_code', None)
        if exit_code:
            self.exit_code = exit_code


class InternalError(RuntimeError):
    """Internal Error, should report to us"""

    def __init__(self, extra_msg: t.Optional[str] = None):
        err = (
            'This is an internal error. Please report it '
            'with your operating system, lockstep version, '
            'the manifest, the lock file and the traceback log. Thanks for reporting! '
        )

        if extra_msg:
            err = extra_msg + '\n' + err

        super().__init__(err)


class SourceMismatchError(InternalError):
    """A dependency is bound to a source that is not known after convergence"""


class ResolutionStateError(InternalError):
    """Resolution was requested on a definition that already materialized its specs"""


class SolverError(FatalError):
    pass


class ProcessingError(FatalError):
    pass


class FetchingError(ProcessingError):
    pass


class SourceError(ProcessingError):
    pass


class ManifestError(ProcessingError):
    pass


class ManifestNotFoundError(ManifestError):
    pass


class RequirementError(ProcessingError):
    pass


class LockError(ProcessingError):
    pass


class GitError(ProcessingError):
    pass


class SpecNotFoundError(ProcessingError):
    exit_code = 7


class RunningEnvironmentError(FatalError):
    pass


class WarningAsExceptionError(FatalError):
    pass
