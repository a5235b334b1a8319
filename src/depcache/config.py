import yaml
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .cache.models import CacheOptions
from .io.fs import FileSystem, DiskFileSystem
from .exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
    DCPathNotFoundError,
)


logger = logging.getLogger(__name__)


class ArtifactModel(BaseModel):
    """
        Class Config-Validation Model describe one entry of `artifacts`
    """
    coordinate: str
    file: Path
    # resolver label; flat files are labelled with a path containing spaces
    display_id: Optional[str] = Field(None, alias='id')
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def check_coordinate(self) -> 'ArtifactModel':
        """Check coordinate looks like group:name:version[:classifier]"""
        parts = self.coordinate.split(":")
        if len(parts) not in (3, 4) or not all(parts[1:3]):
            raise ConfigValidationError(
                f"Artifact coordinate must look like 'group:name:version[:classifier]', got '{self.coordinate}'."
            )
        return self


class ConfigModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of the manifest
    """
    project_dir: Path = Path(".")
    options: CacheOptions = Field(default_factory=CacheOptions)
    artifacts: List[ArtifactModel] = Field(default_factory=list)
    local_files: List[Path] = Field(default_factory=list)
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def check_unique_artifacts(self) -> 'ConfigModel':
        """The same coordinate may only be listed once per backing file"""
        seen = set()
        for artifact in self.artifacts:
            key = (artifact.coordinate, artifact.file)
            if key in seen:
                raise ConfigValidationError(f"Artifact '{artifact.coordinate}' is listed twice for '{artifact.file}'.")
            seen.add(key)
        return self


class Config:
    """
    Loads and validates a dependency manifest (YAML) using Pydantic models.

    Relative paths in the manifest are resolved against the manifest's own
    directory, except `options.cache_dir` which is relative to `project_dir`.
    """
    def __init__(self, config_path: str, fs: Optional[FileSystem] = None):
        self.path = Path(config_path)
        self.fs = fs or DiskFileSystem()
        logger.info(f"Loading manifest from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.info("Validating manifest structure with Pydantic...")
        try:
            self.model = ConfigModel.model_validate(raw_data)
            logger.debug(f"Manifest model validated successfully: \n{self.model.model_dump_json(indent=2)}")
        except ValidationError as e:
            raise ConfigValidationError(f"Manifest validation failed:\n{e}")

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = self.fs.read_text(self.path)
            config_data = yaml.safe_load(content)
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Manifest file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except (FileNotFoundError, DCPathNotFoundError):
            raise ConfigFileMissingError(f"Manifest file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    def _resolve(self, path: Path) -> Path:
        path = path.expanduser()
        return path if path.is_absolute() else self.path.parent / path

    @property
    def project_dir(self) -> Path:
        return self._resolve(self.model.project_dir)

    @property
    def options(self) -> CacheOptions:
        options = self.model.options
        if options.build_file is not None:
            options = options.model_copy(update={"build_file": self._resolve(options.build_file)})
        return options

    @property
    def artifacts(self) -> List[ArtifactModel]:
        return [a.model_copy(update={"file": self._resolve(a.file)}) for a in self.model.artifacts]

    @property
    def local_files(self) -> List[Path]:
        return [self._resolve(f) for f in self.model.local_files]
