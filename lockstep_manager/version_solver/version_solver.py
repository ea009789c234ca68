# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0

import typing as t

from resolvelib import ResolutionImpossible, ResolutionTooDeep, Resolver

from lockstep_tools import LockstepSettings, debug, notice
from lockstep_tools.dependency import DepProxy
from lockstep_tools.errors import SolverError
from lockstep_tools.index import Index
from lockstep_tools.spec_set import SpecSet
from lockstep_tools.specification import Specification

from .provider import SpecProvider, SpecReporter


class VersionSolver:
    """
    The version solver that finds a set of package versions
    satisfies the expanded dependencies.
    """

    def __init__(
        self,
        index: Index,
        source_requirements: t.Optional[t.Dict[str, Index]] = None,
        base: t.Optional[SpecSet] = None,
    ) -> None:
        self.index = index
        self.source_requirements = source_requirements or {}
        self.base = base or SpecSet([])

    def solve(self, dependencies: t.Iterable[DepProxy]) -> SpecSet:
        """
        Solve the version requirements and return the result.

        :raises SolverError: If no set of versions satisfies the dependencies.
        """
        dependencies = list(dependencies)
        provider = SpecProvider(self.index, self.source_requirements, self.base)
        resolver = Resolver(provider, SpecReporter())

        notice('Solving dependencies...')
        debug(f'Solving {len(dependencies)} dependencies, {len(self.base)} specs locked')

        try:
            result = resolver.resolve(
                dependencies, max_rounds=LockstepSettings().RESOLVER_MAX_ROUNDS
            )
        except ResolutionImpossible as e:
            raise SolverError(
                'Could not find compatible versions for:\n{}'.format(
                    '\n'.join(self._describe_cause(cause) for cause in e.causes)
                )
            )
        except ResolutionTooDeep as e:
            raise SolverError(
                f'Version solving gave up after {e.round_count} rounds. '
                'Set LOCKSTEP_RESOLVER_MAX_ROUNDS to allow more rounds.'
            )

        specs: t.List[Specification] = []
        for candidate in result.mapping.values():
            for spec in candidate.specs():
                if spec not in specs:
                    specs.append(spec)

        return SpecSet(specs)

    @staticmethod
    def _describe_cause(cause: t.Any) -> str:
        requirement = cause.requirement
        required_by = (
            'the manifest'
            if cause.parent is None
            else f'{cause.parent.name} ({cause.parent.version})'
        )
        return (
            f'  {requirement.name} ({requirement.requirement}) on {requirement.platform}, '
            f'required by {required_by}'
        )
