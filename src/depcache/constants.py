from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "engine": "depcache.cache.engine",
    "eng": "depcache.cache.engine",
    "proc": "depcache.cache.processors",
    "processors": "depcache.cache.processors",
    "inspect": "depcache.archive.inspector",
    "zip": "depcache.archive.inspector",
    "naming": "depcache.dependency.naming",
    "dep": "depcache.dependency",
    "io": "depcache.io",
    "fs": "depcache.io.fs",
    "conf": "depcache.config",
    "rsv": "depcache.resolver",
    "cache": "depcache.cache",
    "cc": "depcache.cache",
}

# Top-level modules within depcache for auto-prefixing
KNOWN_TOP_MODULES = {
    "archive",
    "cache",
    "dependency",
    "io",
    "utils",
    "config",
    "resolver",
    "exceptions",
}

LOG_LEVELS_ENV = "DEPCACHE_LOG_LEVELS"


# --- Cache Layout ---
DEFAULT_CACHE_PATH = ".depcache/cache"
DEFAULT_CACHE_NAME = "external"
BUILD_FILE_NAME = "BUCK"

# Synthetic version given to flat files resolved outside the coordinate system
LOCAL_DEP_VERSION = "1.0.0"

# Display identifiers containing this are paths, not coordinates
NON_COORDINATE_MARKER = " "


class ArchiveType(str, Enum):
    """Archive extensions the cache knows how to handle"""
    JAR = "jar"
    AAR = "aar"


CACHEABLE_SUFFIXES = (f".{ArchiveType.JAR.value}", f".{ArchiveType.AAR.value}")

# --- Derived File Names ---
SOURCES_JAR_SUFFIX = "-sources.jar"
LINT_JAR_SUFFIX = "-lint.jar"
PROCESSORS_SUFFIX = ".processors"

# --- Archive Entries ---
PACKAGED_LINT_JAR_ENTRY = "lint.jar"
PROCESSOR_SERVICE_ENTRY = "META-INF/services/javax.annotation.processing.Processor"
SERVICE_COMMENT_PREFIX = "#"
