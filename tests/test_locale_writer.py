"""Tests for locale file output and merging."""

import json
from pathlib import Path

import pytest

from i18nexus_tools.codemod.extractor import ExtractedKey
from i18nexus_tools.codemod.locale_writer import (
    LocaleWriter,
    dump_locale,
    language_name,
    merge_translations,
    read_locale_file,
    write_text_atomic,
)
from i18nexus_tools.config.schema import ExtractorSettings
from i18nexus_tools.utils.core.exceptions import LocaleFileError
from tests.utils.test_helpers import read_json

KEYS = [ExtractedKey("안녕"), ExtractedKey("greeting", default_value="반가워요")]


class TestMergeTranslations:
    """Test cases for non-destructive merging."""

    def test_existing_entries_are_preserved(self) -> None:
        """Test that translated and stale keys survive a merge."""
        existing = {"안녕": "Hello", "stale": "Old"}

        merged, added = merge_translations(existing, KEYS, is_default_language=False)

        assert merged == {"안녕": "Hello", "stale": "Old", "greeting": ""}
        assert added == 1

    def test_default_language_gets_source_text(self) -> None:
        """Test that new default-language entries hold the default value or the key."""
        merged, added = merge_translations({}, KEYS, is_default_language=True)

        assert merged == {"안녕": "안녕", "greeting": "반가워요"}
        assert added == 2

    def test_force_rebuilds(self) -> None:
        """Test that force discards existing entries."""
        merged, _ = merge_translations({"안녕": "Hello", "stale": "Old"}, KEYS, is_default_language=False, force=True)

        assert merged == {"안녕": "", "greeting": ""}


class TestLocaleFiles:
    """Test cases for reading and writing locale files."""

    def test_dump_locale_format(self) -> None:
        """Test two-space indentation, raw Unicode and a trailing newline."""
        assert dump_locale({"안녕": "Hello"}) == '{\n  "안녕": "Hello"\n}\n'

    def test_read_rejects_non_objects(self, tmp_path: Path) -> None:
        """Test that arrays and invalid JSON raise LocaleFileError."""
        array_file = tmp_path / "en.json"
        _ = array_file.write_text("[]", encoding="utf-8")
        broken_file = tmp_path / "ko.json"
        _ = broken_file.write_text("{", encoding="utf-8")

        with pytest.raises(LocaleFileError, match="not a JSON object"):
            _ = read_locale_file(array_file)
        with pytest.raises(LocaleFileError, match="Failed to parse"):
            _ = read_locale_file(broken_file)

    def test_write_text_atomic_leaves_no_temp_files(self, tmp_path: Path) -> None:
        """Test that only the target file remains."""
        target = tmp_path / "en.json"

        write_text_atomic(target, "{}\n")

        assert target.read_text(encoding="utf-8") == "{}\n"
        assert [p.name for p in tmp_path.iterdir()] == ["en.json"]

    def test_language_name(self) -> None:
        """Test display names for CSV headers."""
        assert language_name("ko") == "Korean"
        assert language_name("zh-TW") == "Chinese"
        assert language_name("xx") == "xx"


class TestLocaleWriter:
    """Test cases for the locale writer."""

    def test_merge_into_existing_file(self, tmp_path: Path) -> None:
        """Test that existing translations are kept on re-extraction."""
        settings = ExtractorSettings(locales_dir=str(tmp_path))
        _ = (tmp_path / "en.json").write_text(json.dumps({"안녕": "Hello"}), encoding="utf-8")

        results = LocaleWriter(settings).write_locales(KEYS)

        assert read_json(tmp_path / "en.json") == {"안녕": "Hello", "greeting": ""}
        assert [(r.language, r.added) for r in results] == [("en", 1), ("ko", 2)]

    def test_unreadable_file_is_treated_as_empty(self, tmp_path: Path) -> None:
        """Test that a corrupt locale file is replaced with a fresh one."""
        settings = ExtractorSettings(locales_dir=str(tmp_path), languages=["ko"], default_language="ko")
        _ = (tmp_path / "ko.json").write_text("not json", encoding="utf-8")

        _ = LocaleWriter(settings).write_locales(KEYS)

        assert read_json(tmp_path / "ko.json") == {"안녕": "안녕", "greeting": "반가워요"}

    def test_relative_locales_dir_uses_root(self, tmp_path: Path) -> None:
        """Test that a relative locales directory is resolved against the root."""
        writer = LocaleWriter(ExtractorSettings(locales_dir="public/locales"), tmp_path)

        assert writer.locale_path("en") == tmp_path / "public" / "locales" / "en.json"

    def test_render_index(self) -> None:
        """Test the index module, including a language code that is not an identifier."""
        settings = ExtractorSettings(languages=["en", "zh-TW"], default_language="en")

        index = LocaleWriter(settings).render_index()

        assert index == (
            'import en from "./en.json";\n'
            'import zh_TW from "./zh-TW.json";\n'
            "\n"
            "export const translations = {\n"
            "  en: en,\n"
            '  "zh-TW": zh_TW,\n'
            "};\n"
        )
