"""
Locale file output.

Writes one flat ``<lang>.json`` file per language, an ``index.ts`` module
re-exporting them, or a single CSV sheet. JSON files are merged
non-destructively unless ``force`` is set.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import tempfile
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.schema import ExtractorSettings
from ..utils.core.exceptions import LocaleFileError, OutputPathError

if TYPE_CHECKING:
    from .extractor import ExtractedKey

logger = logging.getLogger(__name__)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ko": "Korean",
    "ja": "Japanese",
    "zh": "Chinese",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "vi": "Vietnamese",
    "th": "Thai",
    "id": "Indonesian",
}

_JS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one output file."""

    path: Path
    language: str | None
    total: int
    added: int
    written: bool


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.split("-")[0].split("_")[0].lower(), code)


def read_locale_file(path: Path) -> dict[str, object]:
    """
    Read an existing locale file.

    Raises:
        LocaleFileError: If the file is unreadable, not JSON, or not an object
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data: object = json.load(f)  # pyright: ignore[reportAny]
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise LocaleFileError(f"Failed to parse existing {path}: {e}", file_path=path) from e
    if not isinstance(data, dict):
        raise LocaleFileError(f"Locale file {path} is not a JSON object", file_path=path)
    return data  # pyright: ignore[reportUnknownVariableType]


def write_text_atomic(path: Path, content: str) -> None:
    """Write through a temporary file in the same directory, then replace."""
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as temp_file:
        _ = temp_file.write(content)
        temp_path = Path(temp_file.name)
    try:
        _ = temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def dump_locale(translations: Mapping[str, object]) -> str:
    return json.dumps(translations, indent=2, ensure_ascii=False) + "\n"


def merge_translations(
    existing: Mapping[str, object],
    keys: Iterable[ExtractedKey],
    is_default_language: bool,
    force: bool = False,
) -> tuple[dict[str, object], int]:
    """
    Merge extracted keys into a locale map.

    Existing entries are never changed or removed unless ``force`` is set, in
    which case the result holds exactly the extracted keys. New entries get the
    default value (or the key) for the default language and ``""`` otherwise.

    Returns:
        The merged map and the number of keys added
    """
    merged: dict[str, object] = {} if force else dict(existing)
    added = 0
    for extracted in keys:
        if extracted.key in merged:
            continue
        merged[extracted.key] = (extracted.default_value or extracted.key) if is_default_language else ""
        added += 1
    return merged, added


class LocaleWriter:
    """Writes extraction results below ``settings.locales_dir``."""

    def __init__(self, settings: ExtractorSettings, root: Path | None = None) -> None:
        self.settings = settings
        locales_dir = Path(settings.locales_dir)
        self.output_dir: Path = locales_dir if root is None or locales_dir.is_absolute() else root / locales_dir

    def _ensure_output_dir(self) -> None:
        if self.settings.dry_run:
            return
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputPathError(f"Cannot create output directory {self.output_dir}: {e}", self.output_dir) from e

    def _write(self, path: Path, content: str) -> bool:
        if self.settings.dry_run:
            logger.info(f"Dry run - {path} would be written")
            logger.debug(content[:500])
            return False
        try:
            write_text_atomic(path, content)
        except OSError as e:
            raise OutputPathError(f"Cannot write {path}: {e}", path) from e
        logger.info(f"Written {path}")
        return True

    def locale_path(self, language: str) -> Path:
        return self.output_dir / f"{language}.json"

    def write_locales(self, keys: Sequence[ExtractedKey]) -> list[WriteResult]:
        """Merge the keys into every ``<lang>.json`` file."""
        self._ensure_output_dir()
        results: list[WriteResult] = []

        for language in self.settings.languages:
            path = self.locale_path(language)
            existing: dict[str, object] = {}
            if not self.settings.force and path.exists():
                try:
                    existing = read_locale_file(path)
                except LocaleFileError as e:
                    logger.warning(f"{e}; treating it as empty")

            merged, added = merge_translations(
                existing,
                keys,
                is_default_language=language == self.settings.default_language,
                force=self.settings.force,
            )
            if self.settings.force:
                logger.info(f"Force mode: rebuilding {path} with {len(merged)} keys")
            elif added:
                logger.info(f"Added {added} new keys to {path}")
            else:
                logger.info(f"No new keys to add to {path}")

            written = self._write(path, dump_locale(merged))
            results.append(WriteResult(path, language, len(merged), added, written))

        return results

    def render_index(self) -> str:
        """``index.ts`` importing every language file and exporting ``translations``."""
        imports: list[str] = []
        entries: list[str] = []
        for language in self.settings.languages:
            identifier = language if _JS_IDENTIFIER_RE.match(language) else re.sub(r"\W", "_", language)
            imports.append(f'import {identifier} from "./{language}.json";')
            key = language if identifier == language else json.dumps(language)
            entries.append(f"  {key}: {identifier},")
        return "\n".join(imports) + "\n\nexport const translations = {\n" + "\n".join(entries) + "\n};\n"

    def write_index(self) -> Path:
        path = self.output_dir / "index.ts"
        _ = self._write(path, self.render_index())
        return path

    def render_csv(self, keys: Sequence[ExtractedKey]) -> str:
        """Sheet with a ``Key`` column and one column per language."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Key", *(language_name(language) for language in self.settings.languages)])
        for extracted in keys:
            writer.writerow(
                [
                    extracted.key,
                    *(
                        (extracted.default_value or extracted.key)
                        if language == self.settings.default_language
                        else ""
                        for language in self.settings.languages
                    ),
                ]
            )
        return buffer.getvalue()

    def write_csv(self, keys: Sequence[ExtractedKey]) -> WriteResult:
        self._ensure_output_dir()
        path = self.output_dir / Path(self.settings.output_file).with_suffix(".csv").name
        written = self._write(path, self.render_csv(keys))
        return WriteResult(path, None, len(keys), len(keys), written)
