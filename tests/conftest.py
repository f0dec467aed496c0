"""
Global test configuration fixtures for i18nexus-tools tests.

Sample projects are written below ``tmp_path``; the settings fixtures point
the source pattern and the locales directory at that project.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from i18nexus_tools.config.schema import CleanerSettings, ExtractorSettings, WrapperSettings


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty sample project with a ``src`` directory."""
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def source_pattern(project_dir: Path) -> str:
    return str(project_dir / "src" / "**" / "*.{js,jsx,ts,tsx}")


@pytest.fixture
def wrapper_settings(source_pattern: str) -> Callable[..., WrapperSettings]:
    """Factory for wrapper settings bound to the sample project."""

    def make(**overrides: object) -> WrapperSettings:
        return WrapperSettings.model_validate({"source_pattern": source_pattern, **overrides})

    return make


@pytest.fixture
def extractor_settings(project_dir: Path, source_pattern: str) -> Callable[..., ExtractorSettings]:
    """Factory for extractor settings writing to ``<project>/locales``."""

    def make(**overrides: object) -> ExtractorSettings:
        data: dict[str, object] = {
            "source_pattern": source_pattern,
            "locales_dir": str(project_dir / "locales"),
        }
        data.update(overrides)
        return ExtractorSettings.model_validate(data)

    return make


@pytest.fixture
def cleaner_settings(project_dir: Path, source_pattern: str) -> Callable[..., CleanerSettings]:
    """Factory for cleaner settings reading ``<project>/locales``."""

    def make(**overrides: object) -> CleanerSettings:
        data: dict[str, object] = {
            "source_pattern": source_pattern,
            "locales_dir": str(project_dir / "locales"),
        }
        data.update(overrides)
        return CleanerSettings.model_validate(data)

    return make
