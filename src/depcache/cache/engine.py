import logging
import os
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Any

from .. import constants
from ..archive import ArchiveInspector
from ..dependency import (
    ExternalDependency,
    VersionlessDependency,
    cache_name,
    source_cache_name,
    sources_jar_name,
)
from ..exceptions import (
    CacheStateError,
    CopyError,
    DCIOError,
    DependencyNotFoundError,
    ExtractionError,
)
from ..io import DiskFileSystem, FileSystem
from ..protocols import ResolvedArtifactProtocol, ResolverProtocol
from .models import CacheOptions, CacheResult, CacheWarning
from .processors import ProcessorTable

logger = logging.getLogger(__name__)

SourceFetcher = Callable[[List[ResolvedArtifactProtocol]], Any]


class DependencyCache:
    """
    Materializes resolved third-party artifacts into a cache directory.

    One instance serves one build invocation: it is built exactly once, then
    answers lookups for the dependencies that pass ingested. Files are named
    by coordinate (see ``depcache.dependency.naming``), copied only when the
    name is not cached yet, and anything in the cache directory the pass did
    not touch is evicted afterwards.
    """

    def __init__(
        self,
        project_dir: Path,
        options: Optional[CacheOptions] = None,
        fs: Optional[FileSystem] = None,
        inspector: Optional[ArchiveInspector] = None,
    ):
        """
        Initialize a dependency cache

        Args:
            project_dir: Root of the project; lookups return paths relative to it
            options: How to build the cache
            fs: File system instance
            inspector: Archive inspector, defaults to one over ``fs``
        """
        self.fs = fs or DiskFileSystem()
        self.project_dir = Path(project_dir).absolute()
        self.options = options or CacheOptions()
        self.cache_dir = self.project_dir / self.options.cache_dir
        self.inspector = inspector or ArchiveInspector(self.fs)

        self._external_deps: Dict[ExternalDependency, str] = {}
        self._lint_jars: Dict[ExternalDependency, str] = {}
        # last ingested dependency per coordinate, not a version comparison
        self._greatest: Dict[VersionlessDependency, ExternalDependency] = {}
        self._processors = ProcessorTable(self.inspector)
        self._built = False
        self._ready = False

        self._ensure_cache_dir()

    def _ensure_cache_dir(self):
        """Ensure cache directory exists"""
        if not self.fs.exists(self.cache_dir):
            self.fs.mkdir(self.cache_dir, parents=True, exist_ok=True)
            logger.debug(f"Created cache directory: {self.cache_dir}")

    @property
    def name(self) -> str:
        return self.options.name

    # --------------------
    #
    # Build
    #
    # --------------------

    def build_from(self, resolver: ResolverProtocol) -> CacheResult:
        """Build the cache from everything a resolver resolved"""
        return self.build(
            resolver.resolved_artifacts(),
            resolver.files(),
            source_fetcher=resolver.fetch_sources,
        )

    def build(
        self,
        artifacts: Iterable[ResolvedArtifactProtocol],
        local_files: Iterable[Path] = (),
        source_fetcher: Optional[SourceFetcher] = None,
    ) -> CacheResult:
        """
        Run the single build pass of this cache.

        Args:
            artifacts: Artifacts resolved against a repository
            local_files: Backing files of the resolution; those not covered by
                an artifact become local dependencies
            source_fetcher: Called with the repository artifacts before copying
                when source fetching is enabled. Local files are left out, they
                have no repository to fetch sources from

        Returns:
            CacheResult: What the pass cached, extracted and evicted

        Raises:
            CacheStateError: The cache was already built
            CopyError: An artifact could not be copied; nothing is evicted
        """
        if self._built:
            raise CacheStateError(f"Dependency cache '{self.name}' has already been built.")
        self._built = True

        artifacts = list(artifacts)
        result = CacheResult(name=self.name, cache_dir=self.cache_dir)
        logger.info(f"[{self.name}] Building dependency cache in '{self.cache_dir}'...")

        dependencies = self._ingest(artifacts, local_files)
        logger.info(f"[{self.name}] Ingested {len(dependencies)} dependencies")

        if self.options.fetch_sources and source_fetcher is not None:
            try:
                source_fetcher(artifacts)
            except Exception as e:
                logger.warning(f"[{self.name}] Fetching source archives failed: {e}")
                result.warnings.append(CacheWarning(dependency="*", stage="fetch_sources", message=str(e)))

        if self.options.build_file is not None:
            self._copy_build_file()

        live: Set[str] = set()
        for dep in dependencies:
            self._add(dep, live, result)

        if self.options.cleanup:
            result.evicted = self._sweep(live, result)

        self._ready = True
        logger.info(
            f"[{self.name}] Cache built: {len(result.dependencies)} dependencies, "
            f"{len(result.copied)} copied, {len(result.evicted)} evicted, "
            f"{len(result.warnings)} warnings"
        )
        return result

    def _ingest(
        self,
        artifacts: List[ResolvedArtifactProtocol],
        local_files: Iterable[Path],
    ) -> List[ExternalDependency]:
        """Union resolved artifacts and local files into one ordered set of dependencies"""
        ingested: Dict[ExternalDependency, None] = {}
        captured: Set[Path] = set()
        flat_files: List[Path] = []

        for artifact in artifacts:
            if constants.NON_COORDINATE_MARKER in artifact.display_id:
                logger.debug(f"'{artifact.display_id}' is not a coordinate, treating it as a local file")
                flat_files.append(Path(artifact.file))
                continue
            dep = ExternalDependency(
                group=artifact.group,
                name=artifact.name,
                version=artifact.version,
                classifier=artifact.classifier,
                dep_file=artifact.file,
            )
            ingested[dep] = None
            captured.add(dep.dep_file)

        for local_file in [*local_files, *flat_files]:
            local_file = Path(local_file).expanduser().absolute()
            if local_file in captured:
                continue
            dep = ExternalDependency.local(local_file)
            ingested[dep] = None
            captured.add(local_file)

        return list(ingested)

    def _add(self, dep: ExternalDependency, live: Set[str], result: CacheResult):
        """Cache one dependency and whatever it carries"""
        self._greatest[dep.versionless] = dep

        cached = self.cache_dir / cache_name(dep, self.options.use_full_dep_name)
        if not self.fs.exists(cached):
            self._copy(dep, cached)
            result.copied.append(cached.name)

        path = self._relative(cached)
        self._external_deps[dep] = path
        live.add(cached.name)
        result.dependencies.append(path)

        if self.options.extract_lint_jars and cached.suffix == f".{constants.ArchiveType.AAR.value}":
            try:
                lint_jar = self.inspector.extract_packaged_lint_jar(cached)
            except ExtractionError as e:
                logger.warning(f"[{self.name}] Could not extract lint jar of {dep}: {e}")
                result.warnings.append(CacheWarning(dependency=str(dep), stage="lint", message=str(e)))
            else:
                if lint_jar is not None:
                    lint_path = self._relative(lint_jar)
                    self._lint_jars[dep] = lint_path
                    live.add(lint_jar.name)
                    result.lint_jars.append(lint_path)

        if self.options.fetch_sources:
            self._add_sources(dep, live, result)

    def _copy(self, dep: ExternalDependency, cached: Path):
        logger.debug(f"Copying {dep.dep_file} to {cached}")
        try:
            self.fs.copy(dep.dep_file, cached)
        except (OSError, DCIOError) as e:
            self._discard(cached)
            logger.error(f"[{self.name}] Failed to copy {dep} from '{dep.dep_file}': {e}")
            raise CopyError(dep, e) from e

    def _add_sources(self, dep: ExternalDependency, live: Set[str], result: CacheResult):
        """Cache the source archive published next to a dependency, if there is one"""
        try:
            sources_jar = self._find_sources_jar(dep)
            if sources_jar is None:
                logger.debug(f"No source archive for {dep}")
                return

            cached = self.cache_dir / source_cache_name(dep, self.options.use_full_dep_name)
            if not self.fs.exists(cached):
                try:
                    self.fs.copy(sources_jar, cached)
                except (OSError, DCIOError):
                    self._discard(cached)
                    raise
            live.add(cached.name)
            result.sources.append(self._relative(cached))
        except (OSError, DCIOError) as e:
            logger.warning(f"[{self.name}] Could not cache source archive of {dep}: {e}")
            result.warnings.append(CacheWarning(dependency=str(dep), stage="sources", message=str(e)))

    def _find_sources_jar(self, dep: ExternalDependency) -> Optional[Path]:
        """
        Look for a source archive of a dependency.

        A dependency inside the project keeps its sources right next to it.
        Anything else is assumed to live in a package cache where the source
        archive sits somewhere under the backing file's grandparent.
        """
        name = sources_jar_name(dep)
        if name == dep.dep_file.name:
            return None

        if dep.dep_file.is_relative_to(self.project_dir):
            candidate = dep.dep_file.parent / name
            return candidate if self.fs.is_file(candidate) else None

        search_root = dep.dep_file.parent.parent
        if not self.fs.is_dir(search_root):
            return None
        matches = sorted(p for p in self.fs.rglob(search_root, name) if self.fs.is_file(p))
        return matches[0] if matches else None

    def _copy_build_file(self):
        target = self.cache_dir / constants.BUILD_FILE_NAME
        logger.debug(f"Copying build file {self.options.build_file} to {target}")
        try:
            self.fs.copy(self.options.build_file, target)
        except (OSError, DCIOError) as e:
            raise CopyError(self.options.build_file, e) from e

    # --------------------
    #
    # Eviction
    #
    # --------------------

    def _sweep(self, live: Set[str], result: CacheResult) -> List[str]:
        """Delete every cached archive this pass did not mark live"""
        evicted = []
        for path in sorted(self.fs.listdir(self.cache_dir)):
            if path.name in live or path.suffix not in constants.CACHEABLE_SUFFIXES:
                continue
            if not self.fs.is_file(path):
                continue
            try:
                self.fs.remove(path)
            except (OSError, DCIOError) as e:
                logger.warning(f"[{self.name}] Failed to evict {path}: {e}")
                result.warnings.append(CacheWarning(dependency=path.name, stage="sweep", message=str(e)))
                continue
            evicted.append(path.name)
            logger.debug(f"Evicted stale cache entry {path.name}")

            # an orphaned sidecar would be trusted if the name is cached again
            sidecar = path.with_name(f"{path.stem}{constants.PROCESSORS_SUFFIX}")
            if self.fs.exists(sidecar):
                self._discard(sidecar)

        if evicted:
            logger.info(f"[{self.name}] Evicted {len(evicted)} stale cache entries")
        return evicted

    def _discard(self, path: Path):
        try:
            if self.fs.exists(path):
                self.fs.remove(path)
        except (OSError, DCIOError) as e:
            logger.warning(f"Failed to remove {path}: {e}")

    # --------------------
    #
    # Lookups
    #
    # --------------------

    def _check_ready(self):
        if not self._ready:
            raise CacheStateError(f"Dependency cache '{self.name}' has not been built successfully.")

    def _relative(self, path: Path) -> str:
        return Path(os.path.relpath(path, self.project_dir)).as_posix()

    def path_for(self, dep: ExternalDependency) -> str:
        """
        Path of the cached copy of a dependency, relative to the project directory.

        Raises:
            DependencyNotFoundError: The dependency was not ingested by this cache
        """
        self._check_ready()
        try:
            return self._external_deps[dep]
        except KeyError:
            raise DependencyNotFoundError(f"Dependency {dep} is not in cache '{self.name}'.") from None

    def lint_jar_for(self, dep: ExternalDependency) -> Optional[str]:
        """Path of the lint jar extracted from a dependency, relative to the project directory"""
        self._check_ready()
        return self._lint_jars.get(dep)

    def annotation_processors_for(self, dep: ExternalDependency) -> FrozenSet[str]:
        """
        Annotation processor classes declared by a dependency's coordinate.

        The answer comes from the dependency last ingested for the same
        coordinate, whatever version ``dep`` itself has. Safe to call from
        several threads at once.

        Raises:
            DependencyNotFoundError: No dependency with this coordinate was ingested
            ExtractionError: The cached jar could not be read
        """
        self._check_ready()
        authoritative = self._greatest.get(dep.versionless)
        if authoritative is None:
            raise DependencyNotFoundError(f"No dependency {dep.versionless} in cache '{self.name}'.")
        if not authoritative.is_jar:
            return frozenset()
        jar = self.project_dir / self._external_deps[authoritative]
        return self._processors.get(authoritative, jar)

    def dependencies(self) -> List[ExternalDependency]:
        """Dependencies ingested by this cache, in ingestion order"""
        self._check_ready()
        return list(self._external_deps)

    def stats(self) -> Dict[str, Any]:
        """
        Get statistics about the files in the cache directory

        Returns:
            Dict[str, Any]: Counts per kind of cached file and total size
        """
        counts = {"jars": 0, "aars": 0, "lint_jars": 0, "sources": 0, "processors": 0, "other": 0}
        total_size = 0
        if self.fs.exists(self.cache_dir):
            for path in self.fs.listdir(self.cache_dir):
                if not self.fs.is_file(path):
                    continue
                total_size += self.fs.stat(path).st_size
                name = path.name
                if name.endswith(constants.LINT_JAR_SUFFIX):
                    counts["lint_jars"] += 1
                elif name.endswith(constants.SOURCES_JAR_SUFFIX):
                    counts["sources"] += 1
                elif name.endswith(constants.PROCESSORS_SUFFIX):
                    counts["processors"] += 1
                elif path.suffix == f".{constants.ArchiveType.JAR.value}":
                    counts["jars"] += 1
                elif path.suffix == f".{constants.ArchiveType.AAR.value}":
                    counts["aars"] += 1
                else:
                    counts["other"] += 1

        return {
            "name": self.name,
            "cache_dir": str(self.cache_dir),
            "dependencies": len(self._external_deps),
            "lint_jars_extracted": len(self._lint_jars),
            "processors_memoized": len(self._processors),
            "files": counts,
            "total_size": total_size,
        }
