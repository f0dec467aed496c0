"""
Command-line interface for the translation key extractor (``i18n-extractor``).

Usage Examples:
    Extract into ./locales/{en,ko}.json:
        i18n-extractor

    Extract three languages with English as the reference language:
        i18n-extractor -l en,ko,ja --default-language en

    Write a spreadsheet instead of JSON files:
        i18n-extractor -f csv -o ./sheets
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

from pydantic import ValidationError

from ..codemod.extractor import TranslationExtractor
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


class ExtractorArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    pattern: str | None
    output_dir: Path | None
    output_format: str | None
    languages: list[str] | None
    default_language: str | None
    dry_run: bool
    force: bool
    config: Path
    verbose: bool


def parse_arguments(argv: list[str] | None = None) -> ExtractorArgs:
    """
    Parse command-line arguments.

    Raises:
        SystemExit: If argument parsing fails, a path is invalid or --help is requested
    """
    parser = argparse.ArgumentParser(
        prog="i18n-extractor",
        description="Extract translation keys from t() calls into locale files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Update ./locales/<lang>.json
  %(prog)s -l en,ko,ja --default-language ko
  %(prog)s -f csv -o ./sheets               # Spreadsheet output
  %(prog)s --force                          # Rebuild locale files from scratch
        """,
    )
    add_common_arguments(parser)
    _ = parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=None,
        help="Locale output directory (default: localesDir from the config, ./locales)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=["json", "csv"],
        default=None,
        help="Output format (default: json)",
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
        "--default-language",
        type=str,
        default=None,
        help="Reference language receiving the source text (default: defaultLanguage from the config, ko)",
        metavar="LANG",
    )
    _ = parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing files",
    )
    _ = parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild locale files, discarding existing translations",
    )

    parsed = parser.parse_args(argv)

    try:
        config = validate_config_file_path(str(getattr(parsed, "config")))
        output_dir_str: str | None = getattr(parsed, "output_dir")
        output_dir = validate_folder_path(output_dir_str, "output directory") if output_dir_str else None
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return ExtractorArgs(
        pattern=getattr(parsed, "pattern"),
        output_dir=output_dir,
        output_format=getattr(parsed, "output_format"),
        languages=split_list(getattr(parsed, "languages")),
        default_language=getattr(parsed, "default_language"),
        dry_run=bool(getattr(parsed, "dry_run")),
        force=bool(getattr(parsed, "force")),
        config=config,
        verbose=bool(getattr(parsed, "verbose")),
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the extractor.

    Returns:
        Exit code (0 for success, 1 for errors)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = ConfigManager.load_config(args.config)
        languages, default_language = resolve_languages(
            args.languages, args.default_language, config.languages, config.default_language
        )
        settings = config.extractor_settings(
            source_pattern=args.pattern,
            locales_dir=str(args.output_dir) if args.output_dir is not None else None,
            output_format=args.output_format,
            languages=languages,
            default_language=default_language,
            dry_run=args.dry_run,
            force=args.force,
        )
        report = TranslationExtractor(settings).extract()
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 1
    except I18nexusToolsError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1

    logger.info(
        f"Extracted {len(report.keys)} keys from {report.files_analyzed} files "
        + f"({report.added_keys} new entries)"
    )
    for path in report.skipped:
        logger.warning(f"Skipped (parse error): {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
