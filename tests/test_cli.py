"""Tests for the command-line entry points and shared argument helpers."""

import json
from pathlib import Path

import pytest

from i18nexus_tools.cli import clean_legacy, extractor, wrapper
from i18nexus_tools.codemod import wrapper as wrapper_engine
from i18nexus_tools.utils.cli.args import (
    PathValidationError,
    resolve_languages,
    split_list,
    validate_config_file_path,
    validate_folder_path,
)
from tests.utils.test_helpers import read_json, write_source

PAGE = "export default function Page() {\n  return <h1>안녕하세요</h1>;\n}\n"


class TestArgumentHelpers:
    """Test cases for shared CLI helpers."""

    def test_split_list(self) -> None:
        """Test comma-separated values."""
        assert split_list("en, ko,,ja ") == ["en", "ko", "ja"]
        assert split_list(None) is None

    def test_validate_config_file_path(self, tmp_path: Path) -> None:
        """Test that a missing file is allowed but a directory is not."""
        assert validate_config_file_path(str(tmp_path / "missing.json")) == (tmp_path / "missing.json").resolve()

        with pytest.raises(PathValidationError, match="not a file"):
            _ = validate_config_file_path(str(tmp_path))

    def test_validate_folder_path(self, tmp_path: Path) -> None:
        """Test that an existing file is not accepted as a folder."""
        a_file = tmp_path / "file.txt"
        _ = a_file.write_text("x", encoding="utf-8")

        assert validate_folder_path(str(tmp_path / "new"), "output directory") == (tmp_path / "new").resolve()
        with pytest.raises(PathValidationError, match="Output directory path exists but is not a directory"):
            _ = validate_folder_path(str(a_file), "output directory")

    def test_resolve_languages(self) -> None:
        """Test combining CLI languages with the configuration."""
        assert resolve_languages(None, None, ["en", "ko"], "ko") == (["en", "ko"], "ko")
        assert resolve_languages(["ja", "ko"], None, ["en", "ko"], "ko") == (["ja", "ko"], "ko")
        assert resolve_languages(["en", "ja"], None, ["en", "ko"], "ko") == (["en", "ja"], "en")


class TestWrapperCli:
    """Test cases for i18n-wrapper."""

    def test_wraps_project(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a run with the default configuration."""
        monkeypatch.chdir(project_dir)
        page = write_source(project_dir, "src/Page.tsx", PAGE)

        assert wrapper.main([]) == 0
        assert '{t("안녕하세요")}' in page.read_text(encoding="utf-8")

    def test_dry_run(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that --dry-run leaves files untouched."""
        monkeypatch.chdir(project_dir)
        page = write_source(project_dir, "src/Page.tsx", PAGE)

        assert wrapper.main(["--dry-run", "-p", "src/**/*.tsx"]) == 0
        assert page.read_text(encoding="utf-8") == PAGE

    def test_no_files_exit_code(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an empty match exits with 1."""
        monkeypatch.chdir(project_dir)

        assert wrapper.main(["-p", "nothing/**/*.tsx"]) == 1

    def test_invalid_config_exit_code(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an invalid configuration file exits with 1."""
        monkeypatch.chdir(project_dir)
        _ = (project_dir / "i18nexus.config.json").write_text('{"languages": "en"}', encoding="utf-8")
        _ = write_source(project_dir, "src/Page.tsx", PAGE)

        assert wrapper.main([]) == 1

    def test_write_failure_exit_code(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unwritable source file exits with 1 instead of a traceback."""
        monkeypatch.chdir(project_dir)
        _ = write_source(project_dir, "src/Page.tsx", PAGE)

        def fail_write(path: Path, content: str) -> None:
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(wrapper_engine, "write_text_atomic", fail_write)

        assert wrapper.main([]) == 1

    def test_config_directory_rejected(self, project_dir: Path) -> None:
        """Test that a directory passed as --config exits during parsing."""
        with pytest.raises(SystemExit) as exc_info:
            _ = wrapper.parse_arguments(["--config", str(project_dir)])

        assert exc_info.value.code == 1

    def test_parse_arguments(self) -> None:
        """Test the argument container."""
        args = wrapper.parse_arguments(["-c", "_ITEMS,UI_", "-d", "-v"])

        assert args.constant_patterns == ["_ITEMS", "UI_"]
        assert args.dry_run
        assert args.verbose
        assert args.pattern is None


class TestExtractorCli:
    """Test cases for i18n-extractor."""

    def test_extracts_with_config(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that configured languages and locales directory are used."""
        monkeypatch.chdir(project_dir)
        _ = (project_dir / "i18nexus.config.json").write_text(
            json.dumps({"languages": ["en", "ko", "ja"], "defaultLanguage": "ko", "localesDir": "./lang"}),
            encoding="utf-8",
        )
        _ = write_source(project_dir, "src/Page.tsx", 't("안녕");\n')

        assert extractor.main([]) == 0
        assert read_json(project_dir / "lang" / "ko.json") == {"안녕": "안녕"}
        assert read_json(project_dir / "lang" / "ja.json") == {"안녕": ""}

    def test_cli_overrides(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test --languages, --default-language and --output-dir."""
        monkeypatch.chdir(project_dir)
        _ = write_source(project_dir, "src/Page.tsx", 't("hello", { defaultValue: "Hello" });\n')

        assert extractor.main(["-l", "en,fr", "--default-language", "en", "-o", "out"]) == 0
        assert read_json(project_dir / "out" / "en.json") == {"hello": "Hello"}
        assert read_json(project_dir / "out" / "fr.json") == {"hello": ""}

    def test_no_files_exit_code(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an empty match exits with 1."""
        monkeypatch.chdir(project_dir)

        assert extractor.main([]) == 1


class TestCleanLegacyCli:
    """Test cases for i18n-clean-legacy."""

    def test_cleans_locales(self, project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a cleanup run without backups."""
        monkeypatch.chdir(project_dir)
        _ = write_source(project_dir, "src/Page.tsx", 't("안녕");\n')
        ko = write_source(project_dir, "locales/ko.json", json.dumps({"안녕": "안녕", "old": "옛날"}))

        assert clean_legacy.main(["-l", "ko", "--no-backup"]) == 0
        assert read_json(ko) == {"안녕": "안녕"}
        assert not ko.with_name("ko.json.bak").exists()
