# SPDX-FileCopyrightText: 2022-2025 Espressif Systems (Shanghai) CO LTD
# SPDX-License-Identifier: Apache-2.0
import typing as t
from pathlib import Path

from ruamel.yaml import YAML, CommentedMap, YAMLError

from .constants import MANIFEST_FILENAME
from .errors import ManifestError, ManifestNotFoundError
from .messages import error

if t.TYPE_CHECKING:
    from .manifest.models import Manifest


class ManifestManager:
    """
    Parser for manifest files in the project.
    """

    def __init__(self, path: t.Union[str, Path]) -> None:
        source_path = Path(path)
        self.path: Path = source_path / MANIFEST_FILENAME if source_path.is_dir() else source_path

        self._manifest: 'Manifest' = None  # type: ignore

        # validation attrs
        self._validation_errors: t.List[str] = None  # type: ignore

        self._yaml = YAML()

    @property
    def root(self) -> Path:
        """Directory relative paths of the manifest resolve against"""
        return self.path.resolve().parent

    def validate(self) -> 'ManifestManager':
        from .manifest.models import Manifest

        if self._manifest or self._validation_errors is not None:
            return self

        if not self.path.is_file():
            raise ManifestNotFoundError(f'{self.path} not found')

        try:
            manifest_dict = self._yaml.load(self.path.read_text(encoding='utf-8')) or CommentedMap()
        except YAMLError:
            self._validation_errors = [
                'Cannot parse the manifest file. Please check that\n'
                '\t{}\n'
                'is a valid YAML file\n'.format(self.path)
            ]
            return self

        self._validation_errors, self._manifest = Manifest.validate_manifest(manifest_dict)
        return self

    @property
    def manifest(self) -> 'Manifest':
        if self._manifest is None:
            self.validate()

        return self._manifest

    @property
    def is_valid(self) -> bool:
        if self._validation_errors is None:
            self.validate()

        return self._validation_errors == []

    @property
    def validation_errors(self) -> t.List[str]:
        if self._validation_errors is None:
            self.validate()

        return self._validation_errors

    def load(self) -> 'Manifest':
        """
        This is the main method to load the manifest file.

        :raises ManifestNotFoundError: if the manifest file does not exist
        :raises ManifestError: if the manifest is not valid
        """
        if self.is_valid:
            return self.manifest

        for message in self.validation_errors:
            error(message)

        raise ManifestError(f'Manifest {self.path} is not valid')
