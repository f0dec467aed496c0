"""
Command-line interface for the legacy key cleaner (``i18n-clean-legacy``).

What it does:
  1. Extracts all t() calls from the source code
  2. Removes locale keys that are no longer used
  3. Removes keys with invalid values ("", "N/A", "_N/A", non-strings)
  4. Reports keys used in source but missing from a locale file
  5. Copies each file to <file>.bak before modifying it (unless --no-backup)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

from pydantic import ValidationError

from ..codemod.cleaner import LegacyCleaner
from ..config.manager import ConfigManager
from ..utils.cli.args import (
    PathValidationError,
    add_common_arguments,
    resolve_languages,
    setup_logging,
    split_list,
    validate_config_file_path,
    validate_folder_path,
)
from ..utils.core.exceptions import I18nexusToolsError

logger = logging.getLogger(__name__)


class CleanLegacyArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    pattern: str | None
    locales_dir: Path | None
    languages: list[str] | None
    dry_run: bool
    backup: bool
    config: Path
    verbose: bool


def parse_arguments(argv: list[str] | None = None) -> CleanLegacyArgs:
    """
    Parse command-line arguments.

    Raises:
        SystemExit: If argument parsing fails, a path is invalid or --help is requested
    """
    parser = argparse.ArgumentParser(
        prog="i18n-clean-legacy",
        description="Clean up unused and invalid translation keys from locale files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                               # Uses i18nexus.config.json
  %(prog)s --dry-run                     # Preview what would be removed
  %(prog)s -p "app/**/*.tsx" -l en,ko,ja
  %(prog)s --no-backup
        """,
    )
    add_common_arguments(parser)
    _ = parser.add_argument(
        "-d",
        "--locales-dir",
        type=str,
        default=None,
        help="Locales directory (default: localesDir from the config, ./locales)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "-l",
        "--languages",
        type=str,
        default=None,
        help="Comma-separated language codes (default: languages from the config, en,ko)",
        metavar="LANGS",
    )
    _ = parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without modifying files",
    )
    _ = parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Skip creating .bak files",
    )

    parsed = parser.parse_args(argv)

    try:
        config = validate_config_file_path(str(getattr(parsed, "config")))
        locales_dir_str: str | None = getattr(parsed, "locales_dir")
        locales_dir = validate_folder_path(locales_dir_str, "locales directory") if locales_dir_str else None
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return CleanLegacyArgs(
        pattern=getattr(parsed, "pattern"),
        locales_dir=locales_dir,
        languages=split_list(getattr(parsed, "languages")),
        dry_run=bool(getattr(parsed, "dry_run")),
        backup=not bool(getattr(parsed, "no_backup")),
        config=config,
        verbose=bool(getattr(parsed, "verbose")),
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the cleaner.

    Returns:
        Exit code (0 for success, 1 for errors)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = ConfigManager.load_config(args.config)
        languages, default_language = resolve_languages(
            args.languages, None, config.languages, config.default_language
        )
        settings = config.cleaner_settings(
            source_pattern=args.pattern,
            locales_dir=str(args.locales_dir) if args.locales_dir is not None else None,
            languages=languages,
            default_language=default_language,
            dry_run=args.dry_run,
            backup=args.backup,
        )
        report = LegacyCleaner(settings).clean()
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    except I18nexusToolsError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1

    for result in report.languages:
        logger.info(
            f"{result.language}: removed {result.removed} "
            + f"({len(result.unused)} unused, {len(result.invalid)} invalid), "
            + f"{len(result.missing)} missing"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
