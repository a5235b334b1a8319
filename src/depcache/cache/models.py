from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .. import constants
from ..exceptions import ConfigValidationError


class CacheOptions(BaseModel):
    """
        Class Config-Validation Model describing how a dependency cache is built
    """
    name: str = constants.DEFAULT_CACHE_NAME
    cache_dir: Path = Path(constants.DEFAULT_CACHE_PATH)
    use_full_dep_name: bool = False
    fetch_sources: bool = False
    extract_lint_jars: bool = False
    cleanup: bool = True
    # copied into the cache directory as its build file on every build
    build_file: Optional[Path] = None

    @model_validator(mode='after')
    def check_name(self) -> 'CacheOptions':
        """Cache name is used in log lines and must be a single word"""
        if not self.name or any(c.isspace() for c in self.name):
            raise ConfigValidationError(f"Cache name must be a non-empty word, got '{self.name}'.")
        return self


class CacheWarning(BaseModel):
    """
        Class represents a per-artifact failure that did not abort the build.
    """
    dependency: str
    stage: Literal["lint", "sources", "fetch_sources", "sweep"]
    message: str

    def __str__(self) -> str:
        return f"[{self.stage}] {self.dependency}: {self.message}"


class CacheResult(BaseModel):
    """
        Class represents the outcome of one cache build pass.
    """
    name: str
    cache_dir: Path
    dependencies: List[str] = Field(default_factory=list)
    copied: List[str] = Field(default_factory=list)
    lint_jars: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    evicted: List[str] = Field(default_factory=list)
    warnings: List[CacheWarning] = Field(default_factory=list)
