"""
Legacy locale cleanup.

Uses the extractor's key set to prune locale files: keys no longer used in
source and keys holding placeholder values are removed, keys used in source
but absent from a file are reported.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from ..analysis.heuristics import TextPredicate
from ..config.schema import CleanerSettings, ExtractorSettings
from ..utils.core.exceptions import LocaleFileError, OutputPathError
from .extractor import TranslationExtractor
from .locale_writer import dump_locale, read_locale_file, write_text_atomic

logger = logging.getLogger(__name__)

INVALID_VALUES = frozenset({"", "N/A", "_N/A"})


def is_invalid_value(value: object) -> bool:
    """Placeholder values left by spreadsheet round trips, and non-strings."""
    return not isinstance(value, str) or value in INVALID_VALUES


@dataclass
class LanguageCleanResult:
    """Cleanup outcome for one locale file."""

    language: str
    path: Path
    unused: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    kept: int = 0
    backup: Path | None = None
    written: bool = False

    @property
    def removed(self) -> int:
        return len(self.unused) + len(self.invalid)


@dataclass
class CleanReport:
    used_keys: int = 0
    languages: list[LanguageCleanResult] = field(default_factory=list)

    @property
    def removed(self) -> int:
        return sum(result.removed for result in self.languages)


def clean_translations(
    translations: dict[str, object], used_keys: set[str]
) -> tuple[dict[str, object], list[str], list[str]]:
    """
    Split a locale map into kept entries, unused keys and invalid keys.

    A key that is both unused and invalid is reported as unused.
    """
    cleaned: dict[str, object] = {}
    unused: list[str] = []
    invalid: list[str] = []
    for key, value in translations.items():
        if key not in used_keys:
            unused.append(key)
        elif is_invalid_value(value):
            invalid.append(key)
        else:
            cleaned[key] = value
    return cleaned, unused, invalid


class LegacyCleaner:
    """Removes unused and invalid keys from existing locale files."""

    def __init__(
        self,
        settings: CleanerSettings | None = None,
        is_target_text: TextPredicate | None = None,
        root: Path | None = None,
    ) -> None:
        self.settings: CleanerSettings = settings if settings is not None else CleanerSettings()
        self.is_target_text = is_target_text
        self.root = root
        locales_dir = Path(self.settings.locales_dir)
        self.locales_dir: Path = locales_dir if root is None or locales_dir.is_absolute() else root / locales_dir

    def used_keys(self) -> set[str]:
        extractor_settings = ExtractorSettings.model_validate(self.settings.model_dump(exclude={"backup"}))
        extractor = TranslationExtractor(extractor_settings, self.is_target_text, self.root)
        return {extracted.key for extracted in extractor.extract_keys_only()}

    def clean(self) -> CleanReport:
        """
        Clean every configured language file.

        Raises:
            NoSourceFilesError: If the source pattern matches no file
            OutputPathError: If a cleaned file or its backup cannot be written
        """
        used = self.used_keys()
        logger.info(f"Found {len(used)} translation keys in use")

        report = CleanReport(used_keys=len(used))
        for language in self.settings.languages:
            result = self.clean_language(language, used)
            if result is not None:
                report.languages.append(result)

        logger.info(f"Removed {report.removed} keys in total")
        return report

    def clean_language(self, language: str, used: set[str]) -> LanguageCleanResult | None:
        path = self.locales_dir / f"{language}.json"
        if not path.exists():
            logger.warning(f"Locale file not found: {path}")
            return None
        try:
            translations = read_locale_file(path)
        except LocaleFileError as e:
            logger.error(f"Skipping {language}: {e}")
            return None

        cleaned, unused, invalid = clean_translations(translations, used)
        result = LanguageCleanResult(
            language=language,
            path=path,
            unused=unused,
            invalid=invalid,
            missing=sorted(used - translations.keys()),
            kept=len(cleaned),
        )

        logger.info(
            f"{path}: {len(unused)} unused, {len(invalid)} invalid, "
            + f"{len(result.missing)} missing, {result.kept} kept"
        )
        for key in unused:
            logger.debug(f"  unused: {key}")
        for key in invalid:
            logger.debug(f"  invalid value: {key}")
        for key in result.missing:
            logger.debug(f"  missing: {key}")

        if not result.removed:
            return result
        if self.settings.dry_run:
            logger.info(f"Dry run - {path} would be rewritten")
            return result

        try:
            if self.settings.backup:
                result.backup = path.with_name(path.name + ".bak")
                _ = shutil.copy2(path, result.backup)
                logger.info(f"Backup created: {result.backup}")
            write_text_atomic(path, dump_locale(cleaned))
        except OSError as e:
            raise OutputPathError(f"Cannot write {path}: {e}", path) from e

        result.written = True
        return result
