"""
depcache Dependency Module

- VersionlessDependency: (group, name) key shared by every version of a dependency
- ExternalDependency: full coordinate plus backing file
- cache_name / source_cache_name / sources_jar_name: deterministic cache naming
"""

from .identity import VersionlessDependency, ExternalDependency
from .naming import cache_name, source_cache_name, sources_jar_name

__all__ = [
    'VersionlessDependency',
    'ExternalDependency',
    'cache_name',
    'source_cache_name',
    'sources_jar_name',
]
