"""
Translation key extractor.

Finds every translation call (``t(...)`` or ``anything.t(...)``) and resolves
its first argument to the literal strings it denotes: string literals,
``const`` string bindings, properties of object constants and, through
array-callback parameters, properties of each element of a constant array.
Imported constants are followed one level through relative imports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from ..analysis.context import AnalysisContext, AnalysisSession
from ..analysis.heuristics import TextPredicate, make_text_predicate
from ..config.schema import ExtractorSettings
from ..parsing.nodes import (
    call_arguments,
    is_translation_call,
    iter_descendants,
    member_parts,
    property_key_name,
    string_value,
    unwrap_expression,
)
from ..parsing.source import parse_file
from ..utils.core.exceptions import SourceParseError
from .files import find_source_files
from .locale_writer import LocaleWriter, WriteResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedKey:
    """A translation key and where it was first seen."""

    key: str
    default_value: str | None = None
    file_path: Path | None = None
    line: int | None = None
    column: int | None = None

    @property
    def location(self) -> str:
        if self.file_path is None:
            return "<unknown>"
        return f"{self.file_path}:{self.line}" if self.line is not None else str(self.file_path)


@dataclass
class ExtractionReport:
    """Summary of an extractor run."""

    files_analyzed: int = 0
    keys: list[ExtractedKey] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    written: list[WriteResult] = field(default_factory=list)

    @property
    def added_keys(self) -> int:
        return sum(result.added for result in self.written)


def default_value_of(call: Node) -> str | None:
    """``defaultValue`` string of the options object passed as second argument."""
    arguments = call_arguments(call)
    if len(arguments) < 2:
        return None
    options = unwrap_expression(arguments[1])
    if options is None or options.type != "object":
        return None
    for pair in options.named_children:
        if pair.type == "pair" and property_key_name(pair.child_by_field_name("key")) == "defaultValue":
            return string_value(unwrap_expression(pair.child_by_field_name("value")))
    return None


class TranslationExtractor:
    """
    Collects translation keys from source files and writes locale files.

    The extracted-key map lives on the instance for one run; the first
    occurrence of a key wins.
    """

    def __init__(
        self,
        settings: ExtractorSettings | None = None,
        is_target_text: TextPredicate | None = None,
        root: Path | None = None,
    ) -> None:
        self.settings: ExtractorSettings = settings if settings is not None else ExtractorSettings()
        self.is_target_text: TextPredicate = (
            is_target_text if is_target_text is not None else make_text_predicate(self.settings.target_text_pattern)
        )
        self.root: Path | None = root
        self.session = AnalysisSession(self.is_target_text)
        self._keys: dict[str, ExtractedKey] = {}

    def get_extracted_keys(self) -> list[ExtractedKey]:
        """Keys collected so far, in discovery order (sorted when ``sort_keys`` is set)."""
        keys = list(self._keys.values())
        if self.settings.sort_keys:
            keys.sort(key=lambda k: k.key)
        return keys

    def extract_keys_only(self) -> list[ExtractedKey]:
        """
        Analyze the source files without writing anything.

        Raises:
            NoSourceFilesError: If the pattern matches no file
        """
        self._analyze_files()
        return self.get_extracted_keys()

    def extract(self) -> ExtractionReport:
        """
        Analyze the source files and write the locale output.

        Raises:
            NoSourceFilesError: If the pattern matches no file
            OutputPathError: If the output directory cannot be created
        """
        logger.info(f"Starting translation key extraction: {self.settings.source_pattern}")
        report = self._analyze_files()
        report.keys = self.get_extracted_keys()
        logger.info(f"Found {len(report.keys)} unique translation keys")

        writer = LocaleWriter(self.settings, self.root)
        if self.settings.output_format == "csv":
            report.written.append(writer.write_csv(report.keys))
        else:
            report.written.extend(writer.write_locales(report.keys))
            if self.settings.generate_index:
                writer.write_index()
        return report

    def _analyze_files(self) -> ExtractionReport:
        files = find_source_files(self.settings.source_pattern, self.root)
        logger.info(f"Found {len(files)} files to analyze")

        report = ExtractionReport()
        for path in files:
            logger.debug(f"Analyzing {path}")
            try:
                parsed = parse_file(path)
                self.extract_from(self.session.context_for(parsed))
            except SourceParseError as e:
                logger.error(f"Skipping {path}: {e}")
                report.skipped.append(path)
                continue
            report.files_analyzed += 1
        return report

    def extract_from(self, context: AnalysisContext) -> None:
        """
        Record the keys of every translation call in one analyzed file.

        Nothing is recorded when the file fails partway through.

        Raises:
            SourceParseError: If a string in the file holds an invalid escape
        """
        fn = self.settings.translation_function
        found: list[ExtractedKey] = []
        for node in iter_descendants(context.parsed.root):
            if is_translation_call(node, fn):
                found.extend(self._key_at(key, node, context) for key in self.resolve_keys(node, context) if key)
        for extracted in found:
            self._add_key(extracted)

    def resolve_keys(self, call: Node, context: AnalysisContext) -> list[str]:
        """Literal strings the first argument of a translation call denotes."""
        arguments = call_arguments(call)
        if not arguments:
            return []
        argument = unwrap_expression(arguments[0])
        if argument is None:
            return []

        match argument.type:
            case "string" | "template_string":
                value = string_value(argument)
                return [value] if value is not None else []
            case "member_expression":
                parts = member_parts(argument)
                if parts is None:
                    return []
                obj = unwrap_expression(parts[0])
                if obj is None:
                    return []
                return context.member_values(obj, parts[1])
            case "identifier":
                value = context.string_of(argument)
                return [value] if value is not None else []
            case _:
                return []

    @staticmethod
    def _key_at(key: str, call: Node, context: AnalysisContext) -> ExtractedKey:
        row, column = call.start_point
        return ExtractedKey(
            key=key,
            default_value=default_value_of(call),
            file_path=context.parsed.path,
            line=row + 1,
            column=column,
        )

    def _add_key(self, extracted: ExtractedKey) -> None:
        key = extracted.key
        existing = self._keys.get(key)
        if existing is None:
            self._keys[key] = extracted
            return

        if (
            existing.default_value is not None
            and extracted.default_value is not None
            and existing.default_value != extracted.default_value
        ):
            logger.warning(
                f'Conflicting defaultValue for key "{key}": '
                + f'"{existing.default_value}" at {existing.location}, '
                + f'"{extracted.default_value}" at {extracted.location}; keeping the first'
            )
        else:
            logger.debug(f'Duplicate key "{key}" at {extracted.location} (first seen at {existing.location})')
