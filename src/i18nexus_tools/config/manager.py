"""Configuration manager for i18nexus-tools.

This module loads the project configuration file (``i18nexus.config.json``)
and validates it with the Pydantic schema. The file is read with PyYAML's
``safe_load`` so both the JSON files written by the JavaScript tooling and
hand-written YAML files are accepted.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.core.exceptions import ConfigurationError
from .schema import I18nexusConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("i18nexus.config.json")


class ConfigManager:
    """Loader for the project configuration file."""

    @staticmethod
    def load_config(config_path: Path | None = None) -> I18nexusConfig:
        """
        Load and validate configuration from a JSON or YAML file.

        A missing file is not an error: the default configuration is returned.

        Args:
            config_path: Path to the configuration file
                (default: ``i18nexus.config.json`` in the working directory)

        Returns:
            I18nexusConfig: Validated configuration object

        Raises:
            ConfigurationError: If the file cannot be read, is not a mapping,
                or fails validation
        """
        path = config_path if config_path is not None else DEFAULT_CONFIG_FILE

        if not path.exists():
            logger.info(f"{path} not found, using default configuration")
            return I18nexusConfig()

        try:
            with path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid syntax in {path}: {e}", context=path) from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}", context=path) from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ConfigurationError(
                f"Configuration file must contain a mapping, got {type(raw_config_data).__name__}",
                context=path,
            )

        try:
            config = I18nexusConfig.model_validate(config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}", context=path) from e

        logger.debug(f"Loaded configuration from {path}")
        return config
