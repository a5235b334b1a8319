import functools
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .. import constants
from ..exceptions import InvalidDependencyError

logger = logging.getLogger(__name__)


@functools.total_ordering
class VersionlessDependency(BaseModel):
    """
        A coordinate without its version. Groups every version of the same
        logical dependency under one key.
    """
    model_config = ConfigDict(frozen=True)

    group: str
    name: str

    def __lt__(self, other: "VersionlessDependency") -> bool:
        if not isinstance(other, VersionlessDependency):
            return NotImplemented
        return (self.group, self.name) < (other.group, other.name)

    def __str__(self) -> str:
        return f"{self.group}:{self.name}"


class ExternalDependency(BaseModel):
    """
        A resolved dependency: its full coordinate plus the backing file it
        points to. Two dependencies with the same coordinate but different
        backing files are distinct.
    """
    model_config = ConfigDict(frozen=True)

    group: str
    name: str
    version: str
    classifier: Optional[str] = None
    dep_file: Path

    @field_validator("dep_file", mode="after")
    @classmethod
    def normalize_dep_file(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @field_validator("classifier", mode="after")
    @classmethod
    def normalize_classifier(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def check_coordinate_and_file(self) -> "ExternalDependency":
        """Check the coordinate is complete and the backing file is readable"""
        if not self.name or not self.version:
            raise InvalidDependencyError(
                f"Dependency '{self.group}:{self.name}:{self.version}' must have a name and a version."
            )
        if not self.dep_file.is_file():
            raise InvalidDependencyError(f"Backing file for '{self}' does not exist: {self.dep_file}")
        if not os.access(self.dep_file, os.R_OK):
            raise InvalidDependencyError(f"Backing file for '{self}' is not readable: {self.dep_file}")
        return self

    @classmethod
    def from_coordinate(cls, coordinate: str, dep_file: Path) -> "ExternalDependency":
        """Create a dependency from a 'group:name:version[:classifier]' string"""
        parts = coordinate.split(":")
        if len(parts) not in (3, 4):
            raise InvalidDependencyError(
                f"Coordinate must look like 'group:name:version[:classifier]', got '{coordinate}'."
            )
        group, name, version = parts[:3]
        classifier = parts[3] if len(parts) == 4 else None
        return cls(group=group, name=name, version=version, classifier=classifier, dep_file=dep_file)

    @classmethod
    def local(cls, dep_file: Path) -> "ExternalDependency":
        """
        Synthesize a dependency for a flat file resolved outside the coordinate system.

        The base file name serves as both group and name and the version is
        fixed, so the same file always yields the same dependency.
        """
        base_name = Path(dep_file).stem
        logger.debug(f"Synthesizing local dependency '{base_name}' for {dep_file}")
        return cls(
            group=base_name,
            name=base_name,
            version=constants.LOCAL_DEP_VERSION,
            dep_file=dep_file,
        )

    @property
    def versionless(self) -> VersionlessDependency:
        return VersionlessDependency(group=self.group, name=self.name)

    @property
    def extension(self) -> str:
        return self.dep_file.suffix.lstrip(".")

    @property
    def is_jar(self) -> bool:
        return self.extension == constants.ArchiveType.JAR.value

    @property
    def is_aar(self) -> bool:
        return self.extension == constants.ArchiveType.AAR.value

    def __str__(self) -> str:
        coordinate = f"{self.group}:{self.name}:{self.version}"
        if self.classifier:
            coordinate = f"{coordinate}:{self.classifier}"
        return coordinate
