"""
Command-line interface for the translation wrapper (``i18n-wrapper``).

Usage Examples:
    Wrap the default source pattern:
        i18n-wrapper

    Preview changes for the app directory:
        i18n-wrapper -p "app/**/*.tsx" --dry-run --verbose

    Restrict the constant naming heuristic:
        i18n-wrapper -c "_ITEMS,_MENU,UI_"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

from pydantic import ValidationError

from ..codemod.wrapper import TranslationWrapper
from ..config.manager import ConfigManager
from ..utils.cli.args import (
    PathValidationError,
    add_common_arguments,
    setup_logging,
    split_list,
    validate_config_file_path,
)
from ..utils.core.exceptions import I18nexusToolsError

logger = logging.getLogger(__name__)


class WrapperArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    pattern: str | None
    constant_patterns: list[str] | None
    dry_run: bool
    config: Path
    verbose: bool


def parse_arguments(argv: list[str] | None = None) -> WrapperArgs:
    """
    Parse command-line arguments.

    Raises:
        SystemExit: If argument parsing fails, a path is invalid or --help is requested
    """
    parser = argparse.ArgumentParser(
        prog="i18n-wrapper",
        description="Wrap hardcoded user-facing strings in translation calls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                             # Wrap src/**/*.{js,jsx,ts,tsx}
  %(prog)s -p "app/**/*.tsx"           # Custom source pattern
  %(prog)s --dry-run --verbose         # Show diffs without writing
  %(prog)s -c "_ITEMS,_MENU,UI_"       # Custom constant naming patterns
        """,
    )
    add_common_arguments(parser)
    _ = parser.add_argument(
        "-c",
        "--constant-patterns",
        type=str,
        default=None,
        help="Comma-separated constant naming patterns: '_X' suffix, 'X_' prefix, otherwise substring",
        metavar="PATTERNS",
    )
    _ = parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Preview changes without modifying files",
    )

    parsed = parser.parse_args(argv)

    try:
        config = validate_config_file_path(str(getattr(parsed, "config")))
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return WrapperArgs(
        pattern=getattr(parsed, "pattern"),
        constant_patterns=split_list(getattr(parsed, "constant_patterns")),
        dry_run=bool(getattr(parsed, "dry_run")),
        config=config,
        verbose=bool(getattr(parsed, "verbose")),
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the wrapper.

    Returns:
        Exit code (0 for success, also when some files were skipped; 1 for errors)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = ConfigManager.load_config(args.config)
        settings = config.wrapper_settings(
            source_pattern=args.pattern,
            constant_patterns=args.constant_patterns,
            dry_run=args.dry_run,
        )
        report = TranslationWrapper(settings).process_files()
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    except I18nexusToolsError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1

    verb = "Would modify" if settings.dry_run else "Modified"
    logger.info(f"{verb} {len(report.modified)} of {report.files_processed} files")
    for path in report.skipped:
        logger.warning(f"Skipped (parse error): {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
