class DepCacheError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and parsing the manifest file ---
class ConfigurationError(DepCacheError):
    """Base class for errors encountered while finding, reading, or parsing manifest files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the manifest file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML manifest file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the manifest fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors related to the logical validity of a dependency ---
class DefinitionError(DepCacheError):
    """Base class for errors in the definition of a dependency."""

    pass


class InvalidDependencyError(DefinitionError):
    """Raised when a dependency has a malformed coordinate or an unreadable backing file."""

    pass


# --- 3. Errors that occur while building or querying the cache ---
class CacheError(DepCacheError):
    """Base class for errors raised by the dependency cache."""

    pass


class DependencyNotFoundError(CacheError, KeyError):
    """Raised when a dependency is looked up that was never ingested in this pass."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class ExtractionError(CacheError):
    """Raised when an archive can not be opened or one of its entries can not be read."""

    def __init__(self, archive, reason):
        self.archive = archive
        self.reason = reason
        super().__init__(f"Failed to extract from '{archive}': {reason}")


class CopyError(CacheError):
    """Raised when a resolved artifact can not be copied into the cache."""

    def __init__(self, dependency, reason):
        self.dependency = dependency
        self.reason = reason
        super().__init__(f"Failed to copy '{dependency}' into the cache: {reason}")


class CacheStateError(CacheError):
    """Raised when a cache is built twice or queried before it was built."""

    pass


# --- 4. Errors related to IO operations ---
class DCIOError(DepCacheError):
    """Base class for IO-related errors."""

    pass


class DCPathExistsError(DCIOError):
    """Raised when a file or directory already exists."""

    pass


class DCPathNotFoundError(DCIOError):
    """Raised when a file or directory is not found."""

    pass


class DCNotAFileError(DCIOError):
    """Raised when a file is expected, but a directory is found."""

    pass


class DCNotADirectoryError(DCIOError):
    """Raised when a directory is expected, but a file is found."""

    pass
