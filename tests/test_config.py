import copy
from pathlib import Path

import pytest
import yaml

from depcache.config import Config
from depcache.exceptions import (
    ConfigFileMissingError,
    ConfigParsingError,
    ConfigValidationError,
    ConfigurationError,
)
from depcache.io import MemoryFileSystem

BASE_CONFIG = {
    'project_dir': 'project',
    'options': {
        'name': 'thirdparty',
        'extract_lint_jars': True,
        'build_file': 'BUCK.template',
    },
    'artifacts': [
        {'coordinate': 'com.example:foo:1.2.0', 'file': 'repo/foo-1.2.0.aar'},
        {'coordinate': 'com.example:flat:0', 'file': 'libs/flat.jar', 'id': 'libs/flat file.jar'},
    ],
    'local_files': ['libs/mylib.jar'],
}


@pytest.fixture
def create_config_file(tmp_path: Path):
    """A pytest fixture to create a temporary deps.yml file."""
    def _create_file(config_data: dict) -> Path:
        config_file = tmp_path / "deps.yml"
        with open(config_file, 'w') as f:
            yaml.dump(config_data, f)
        return config_file
    return _create_file


class TestConfigLoading:
    """Tests for basic loading and validation success/failure."""

    def test_load_valid_config_successfully(self, create_config_file, tmp_path):
        """Should load a well-formed manifest and resolve its paths."""
        config = Config(str(create_config_file(BASE_CONFIG)))

        assert config.project_dir == tmp_path / "project"
        assert config.options.name == 'thirdparty'
        assert config.options.extract_lint_jars is True
        assert config.options.cleanup is True
        assert config.options.build_file == tmp_path / "BUCK.template"
        assert [a.file for a in config.artifacts] == [tmp_path / "repo/foo-1.2.0.aar", tmp_path / "libs/flat.jar"]
        assert config.artifacts[1].display_id == 'libs/flat file.jar'
        assert config.local_files == [tmp_path / "libs/mylib.jar"]

    def test_defaults(self, create_config_file, tmp_path):
        """An empty manifest describes an empty cache under the manifest directory."""
        config = Config(str(create_config_file({'artifacts': []})))
        assert config.project_dir == tmp_path
        assert config.options.name == 'external'
        assert config.options.cache_dir == Path('.depcache/cache')
        assert config.options.build_file is None
        assert config.artifacts == []

    def test_absolute_paths_are_kept(self, create_config_file, tmp_path):
        data = copy.deepcopy(BASE_CONFIG)
        data['project_dir'] = str(tmp_path / "elsewhere")
        config = Config(str(create_config_file(data)))
        assert config.project_dir == tmp_path / "elsewhere"

    def test_file_not_found_raises_error(self, tmp_path):
        """Should raise ConfigFileMissingError for a non-existent file."""
        with pytest.raises(ConfigFileMissingError, match="Manifest file not found"):
            Config(str(tmp_path / "non_existent_file.yml"))

    def test_invalid_yaml_raises_error(self, tmp_path):
        """Should raise ConfigParsingError for malformed YAML."""
        config_file = tmp_path / "invalid.yml"
        config_file.write_text("key: value: another")  # Invalid YAML

        with pytest.raises(ConfigParsingError, match="Error parsing YAML file"):
            Config(str(config_file))

    def test_non_mapping_document_raises_error(self, tmp_path):
        config_file = tmp_path / "list.yml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigParsingError, match="containing a dictionary"):
            Config(str(config_file))

    def test_in_memory_file_system(self, tmp_path):
        fs = MemoryFileSystem()
        manifest = Path(f"/{tmp_path.name}/deps.yml")
        fs.write_text(manifest, yaml.dump(BASE_CONFIG))

        config = Config(str(manifest), fs)
        assert config.project_dir == manifest.parent / "project"
        assert len(config.artifacts) == 2


class TestConfigValidationLogic:
    """Tests for structural validation of the manifest."""

    @pytest.mark.parametrize("coordinate", ["com.example:foo", "com.example::1.0", "a:b:c:d:e"])
    def test_bad_coordinate_raises_error(self, create_config_file, coordinate):
        data = copy.deepcopy(BASE_CONFIG)
        data['artifacts'][0]['coordinate'] = coordinate
        with pytest.raises(ConfigValidationError, match="group:name:version"):
            Config(str(create_config_file(data)))

    def test_unknown_key_raises_error(self, create_config_file):
        data = copy.deepcopy(BASE_CONFIG)
        data['resolver'] = 'maven'
        with pytest.raises(ConfigValidationError, match="Manifest validation failed"):
            Config(str(create_config_file(data)))

    def test_duplicate_artifact_raises_error(self, create_config_file):
        data = copy.deepcopy(BASE_CONFIG)
        data['artifacts'].append(dict(data['artifacts'][0]))
        with pytest.raises(ConfigValidationError, match="listed twice"):
            Config(str(create_config_file(data)))

    def test_same_coordinate_other_file_is_allowed(self, create_config_file):
        data = copy.deepcopy(BASE_CONFIG)
        data['artifacts'].append({'coordinate': 'com.example:foo:1.2.0', 'file': 'override/foo-1.2.0.aar'})
        assert len(Config(str(create_config_file(data))).artifacts) == 3

    @pytest.mark.parametrize("name", ["", "third party"])
    def test_bad_cache_name_raises_error(self, create_config_file, name):
        data = copy.deepcopy(BASE_CONFIG)
        data['options']['name'] = name
        with pytest.raises(ConfigurationError, match="Cache name"):
            Config(str(create_config_file(data)))
