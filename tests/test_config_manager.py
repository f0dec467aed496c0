"""Tests for configuration manager functionality."""

from pathlib import Path

import pytest

from i18nexus_tools.config.manager import ConfigManager
from i18nexus_tools.config.schema import I18nexusConfig
from i18nexus_tools.utils.core.exceptions import ConfigurationError, ErrorCategory
from tests.utils.test_helpers import create_temp_config_file


class TestConfigManager:
    """Test cases for ConfigManager functionality."""

    def test_load_config_success(self, tmp_path: Path) -> None:
        """Test loading a JSON configuration file."""
        config_data: dict[str, object] = {
            "languages": ["en", "ko", "ja"],
            "defaultLanguage": "ko",
            "sourcePattern": "app/**/*.{ts,tsx}",
        }

        with create_temp_config_file(config_data, tmp_path) as config_file:
            config = ConfigManager.load_config(config_file)

        assert isinstance(config, I18nexusConfig)
        assert config.languages == ["en", "ko", "ja"]
        assert config.source_pattern == "app/**/*.{ts,tsx}"

    def test_load_yaml_config(self, tmp_path: Path) -> None:
        """Test that hand-written YAML is accepted as well."""
        config_file = tmp_path / "i18nexus.config.yml"
        _ = config_file.write_text("languages: [en, ko]\nlocalesDir: ./lang\n", encoding="utf-8")

        config = ConfigManager.load_config(config_file)

        assert config.locales_dir == "./lang"

    def test_load_config_file_not_found(self, tmp_path: Path) -> None:
        """Test that a missing file gives the default configuration."""
        config = ConfigManager.load_config(tmp_path / "missing.json")

        assert config == I18nexusConfig()

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty file is treated as an empty mapping."""
        config_file = tmp_path / "i18nexus.config.json"
        _ = config_file.write_text("", encoding="utf-8")

        assert ConfigManager.load_config(config_file) == I18nexusConfig()

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        """Test loading a file with invalid syntax."""
        config_file = tmp_path / "i18nexus.config.json"
        _ = config_file.write_text('{"languages": [', encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid syntax") as exc_info:
            _ = ConfigManager.load_config(config_file)

        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert not exc_info.value.recoverable

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        config_file = tmp_path / "i18nexus.config.json"
        _ = config_file.write_text('["en", "ko"]', encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            _ = ConfigManager.load_config(config_file)

    def test_validation_error(self, tmp_path: Path) -> None:
        """Test that schema violations are reported as configuration errors."""
        with create_temp_config_file({"languages": ["en"], "defaultLanguage": "ko"}, tmp_path) as config_file:
            with pytest.raises(ConfigurationError, match="Invalid configuration"):
                _ = ConfigManager.load_config(config_file)
