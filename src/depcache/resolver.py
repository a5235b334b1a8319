"""
A resolver whose resolution is known up front.

Real resolution belongs to the build system driving the cache. This module
supplies the objects it is expected to hand over, for manifests, the CLI
and tests.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel

from .config import Config
from .exceptions import InvalidDependencyError
from .protocols import ResolvedArtifactProtocol

logger = logging.getLogger(__name__)


class ResolvedArtifact(BaseModel):
    """
        Class represents one artifact as reported by a resolver.
    """
    display_id: str
    group: str
    name: str
    version: str
    classifier: Optional[str] = None
    file: Path

    @classmethod
    def from_coordinate(cls, coordinate: str, file: Path, display_id: Optional[str] = None) -> "ResolvedArtifact":
        """Create an artifact from a 'group:name:version[:classifier]' string"""
        parts = coordinate.split(":")
        if len(parts) not in (3, 4):
            raise InvalidDependencyError(
                f"Coordinate must look like 'group:name:version[:classifier]', got '{coordinate}'."
            )
        return cls(
            display_id=display_id or coordinate,
            group=parts[0],
            name=parts[1],
            version=parts[2],
            classifier=parts[3] if len(parts) == 4 else None,
            file=file,
        )


class StaticResolver:
    """
    Resolver over a fixed list of artifacts and flat files.

    Source archives are expected to already sit next to the artifacts, so
    fetching sources does nothing.
    """

    def __init__(self, artifacts: Iterable[ResolvedArtifactProtocol], local_files: Iterable[Path] = ()):
        self._artifacts = list(artifacts)
        self._local_files = [Path(f) for f in local_files]

    @classmethod
    def from_config(cls, config: Config) -> "StaticResolver":
        artifacts = [
            ResolvedArtifact.from_coordinate(a.coordinate, a.file, display_id=a.display_id)
            for a in config.artifacts
        ]
        return cls(artifacts, config.local_files)

    def resolved_artifacts(self) -> List[ResolvedArtifactProtocol]:
        return list(self._artifacts)

    def files(self) -> List[Path]:
        files: List[Path] = []
        for f in [*(Path(a.file) for a in self._artifacts), *self._local_files]:
            if f not in files:
                files.append(f)
        return files

    def fetch_sources(self, artifacts: Iterable[ResolvedArtifactProtocol]) -> None:
        logger.debug(f"Static resolution, {len(list(artifacts))} artifacts need no source download")
