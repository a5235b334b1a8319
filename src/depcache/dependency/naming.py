"""
Deterministic file names for dependencies inside the cache directory.

Names are derived from the coordinate only, never from file contents. With
``use_full_name=False`` two coordinates that share ``name-version`` but
differ in group map to the same name, and the second one is never copied.
"""

import re

from .. import constants
from .identity import ExternalDependency

_ARCHIVE_SUFFIX = re.compile(r"\.(jar|aar)$")


def _stem(dep: ExternalDependency, use_full_name: bool) -> str:
    parts = [dep.group, dep.name, dep.version] if use_full_name else [dep.name, dep.version]
    if dep.classifier:
        parts.append(dep.classifier)
    return "-".join(parts)


def cache_name(dep: ExternalDependency, use_full_name: bool = False) -> str:
    """
    Name of the cached copy of a dependency.

    Args:
        dep: The dependency to name
        use_full_name: Prefix the group to the name

    Returns:
        str: ``[group-]name-version[-classifier].ext``
    """
    return f"{_stem(dep, use_full_name)}.{dep.extension}"


def source_cache_name(dep: ExternalDependency, use_full_name: bool = False) -> str:
    """Name of the cached source archive of a dependency"""
    return f"{_stem(dep, use_full_name)}{constants.SOURCES_JAR_SUFFIX}"


def sources_jar_name(dep: ExternalDependency) -> str:
    """Name a source archive published next to the backing file would have"""
    return _ARCHIVE_SUFFIX.sub(constants.SOURCES_JAR_SUFFIX, dep.dep_file.name, count=1)
