"""
depcache Protocol Definitions

The dependency cache never talks to a concrete build system. Whatever
resolves the dependency graph hands it objects satisfying these protocols.

Protocols are the foundation layer with zero dependencies on other depcache modules.
"""

from pathlib import Path
from typing import Protocol, Iterable, List, Optional, runtime_checkable


# ============================================================================
# Resolver Protocols
# ============================================================================

@runtime_checkable
class ResolvedArtifactProtocol(Protocol):
    """
    Protocol for one artifact produced by a dependency resolver.

    ``display_id`` is the resolver's own label for the artifact. For flat
    file dependencies it is a path-like string rather than a coordinate.
    """

    display_id: str
    group: str
    name: str
    version: str
    classifier: Optional[str]
    file: Path


@runtime_checkable
class ResolverProtocol(Protocol):
    """
    Protocol for a dependency resolver feeding the cache.
    """

    def resolved_artifacts(self) -> List[ResolvedArtifactProtocol]:
        """
        Artifacts resolved against a repository.

        Returns:
            Resolved artifacts in a stable order
        """
        ...

    def files(self) -> List[Path]:
        """
        Every backing file of the resolution, including flat files that
        have no resolved artifact.
        """
        ...

    def fetch_sources(self, artifacts: Iterable[ResolvedArtifactProtocol]) -> None:
        """
        Best-effort download of source archives for the given artifacts.

        Args:
            artifacts: Artifacts to fetch sources for
        """
        ...
