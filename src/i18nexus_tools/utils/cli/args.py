"""
Shared command-line helpers for the i18nexus-tools CLIs.

This module provides logging setup, the arguments every tool accepts
(``--pattern``, ``--config``, ``--verbose``) and path and list validation.
"""

import argparse
import logging
from pathlib import Path

from ... import __version__
from ...config.manager import DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable debug logging (per-node wrap decisions, diffs)
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def split_list(value: str | None) -> list[str] | None:
    """Split a comma-separated option (``"en,ko, ja"``); None when not given."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    The file itself may be missing (defaults are used), but the path must
    not name a directory.

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if config_file.exists() and config_file.is_dir():
        raise PathValidationError(f"Config file path exists but is not a file: {config_file}")

    return config_file


def validate_folder_path(path_str: str, folder_name: str) -> Path:
    """
    Validate and resolve a folder path.

    Raises:
        PathValidationError: If the path exists and is not a directory
    """
    try:
        path = Path(path_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid {folder_name} path: {e}") from e

    if path.exists() and not path.is_dir():
        raise PathValidationError(f"{folder_name.capitalize()} path exists but is not a directory: {path}")

    return path


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every tool."""
    _ = parser.add_argument(
        "-p",
        "--pattern",
        type=str,
        default=None,
        help="Source file glob pattern (default: sourcePattern from the config, src/**/*.{js,jsx,ts,tsx})",
        metavar="GLOB",
    )
    _ = parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_FILE),
        help="Path to the configuration file (default: %(default)s)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def resolve_languages(
    languages: list[str] | None,
    default_language: str | None,
    configured_languages: list[str],
    configured_default: str,
) -> tuple[list[str], str]:
    """
    Combine ``--languages`` / ``--default-language`` with the configuration.

    When the chosen default language is not among the chosen languages, the
    first language becomes the default.
    """
    chosen = languages if languages else list(configured_languages)
    default = default_language if default_language is not None else configured_default
    if default not in chosen:
        logger.warning(
            f"Default language '{default}' is not in {chosen}; using '{chosen[0]}'"
        )
        default = chosen[0]
    return chosen, default
