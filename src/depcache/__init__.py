"""
depcache (Dependency Cache)

Materializes the artifacts a dependency resolver produced into a stable
on-disk cache that a file-based build system can reference.

Main modules:
- dependency: Dependency identities and deterministic cache naming
- archive: Single-entry extraction from jar/aar archives
- cache: The dependency cache engine and annotation-processor memo
- io: File system abstraction
- config: Manifest loading and validation
- resolver: A resolver over a fixed resolution
- protocols: What a resolver must provide
- utils: Logging setup

Quick start example:
```python
from depcache import Config, DependencyCache, StaticResolver

config = Config("deps.yml")
cache = DependencyCache(config.project_dir, config.options)
cache.build_from(StaticResolver.from_config(config))
path = cache.path_for(cache.dependencies()[0])
```
"""

__version__ = "0.3.0"

from .protocols import ResolvedArtifactProtocol, ResolverProtocol
from .dependency import VersionlessDependency, ExternalDependency, cache_name, source_cache_name
from .archive import ArchiveInspector
from .cache import CacheOptions, CacheResult, CacheWarning, DependencyCache
from .config import Config, ConfigModel
from .resolver import ResolvedArtifact, StaticResolver
from .io import FileSystem, DiskFileSystem
from .exceptions import (
    DepCacheError,
    ConfigurationError,
    DefinitionError,
    CacheError,
    DependencyNotFoundError,
    ExtractionError,
    CopyError,
)

__all__ = [
    # Version
    '__version__',
    # Protocols
    'ResolvedArtifactProtocol',
    'ResolverProtocol',
    # Dependency
    'VersionlessDependency',
    'ExternalDependency',
    'cache_name',
    'source_cache_name',
    # Archive
    'ArchiveInspector',
    # Cache
    'CacheOptions',
    'CacheResult',
    'CacheWarning',
    'DependencyCache',
    # Config
    'Config',
    'ConfigModel',
    # Resolver
    'ResolvedArtifact',
    'StaticResolver',
    # IO
    'FileSystem',
    'DiskFileSystem',
    # Exceptions
    'DepCacheError',
    'ConfigurationError',
    'DefinitionError',
    'CacheError',
    'DependencyNotFoundError',
    'ExtractionError',
    'CopyError',
]
