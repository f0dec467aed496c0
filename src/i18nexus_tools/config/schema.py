"""Configuration schema for i18nexus-tools using Pydantic models."""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_SOURCE_PATTERN = "src/**/*.{js,jsx,ts,tsx}"
DEFAULT_TARGET_TEXT_PATTERN = r"[가-힣]"

LanguageCode = Annotated[str, Field(pattern=r"^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$")]


class _CamelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _validate_pattern(value: str) -> str:
    try:
        _ = re.compile(value)
    except re.error as e:
        raise ValueError(f"Invalid target text pattern {value!r}: {e}") from e
    return value


class CodemodSettings(_CamelModel):
    """Settings shared by the wrapper, the extractor and the cleaner."""

    source_pattern: str = Field(
        default=DEFAULT_SOURCE_PATTERN,
        description="Glob pattern (with brace expansion) selecting source files",
        min_length=1,
    )
    translation_function: str = Field(
        default="t",
        description="Name of the translation function",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
    )
    target_text_pattern: str = Field(
        default=DEFAULT_TARGET_TEXT_PATTERN,
        description="Regular expression detecting user-facing target-language text",
    )
    dry_run: bool = Field(
        default=False,
        description="Report what would change without writing any file",
    )

    @field_validator("target_text_pattern")
    @classmethod
    def validate_target_text_pattern(cls, v: str) -> str:
        """Ensure the target text pattern compiles."""
        return _validate_pattern(v)


class WrapperSettings(CodemodSettings):
    """Settings for the translation wrapper."""

    translation_import_source: str = Field(
        default="i18nexus",
        description="Module specifier the translation hook is imported from",
        min_length=1,
    )
    hook_name: str = Field(
        default="useTranslation",
        description="Name of the client translation hook",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
    )
    server_translation_function: str = Field(
        default="getServerTranslation",
        description="Accessor that marks a function as a server component",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*$",
    )
    constant_patterns: list[str] = Field(
        default_factory=list,
        description=(
            "Naming patterns recognised as constants: '_X' suffix, 'X_' prefix, "
            "anything else is a substring. Empty uses the built-in heuristic."
        ),
    )

    @field_validator("constant_patterns")
    @classmethod
    def validate_constant_patterns(cls, v: list[str]) -> list[str]:
        """Strip whitespace and drop empty patterns."""
        return [pattern.strip() for pattern in v if pattern.strip()]


class LocaleSettings(CodemodSettings):
    """Settings shared by tools that read or write locale files."""

    languages: list[LanguageCode] = Field(
        default_factory=lambda: ["en", "ko"],
        description="Language codes, one locale file each",
        min_length=1,
    )
    default_language: LanguageCode = Field(
        default="ko",
        description="Reference language whose values are the extracted source text",
    )
    locales_dir: str = Field(
        default="./locales",
        description="Directory holding the <lang>.json locale files",
        min_length=1,
    )

    @model_validator(mode="after")
    def validate_default_language(self) -> "LocaleSettings":
        """The default language must be one of the configured languages."""
        if self.default_language not in self.languages:
            raise ValueError(
                f"Default language '{self.default_language}' is not listed in languages {self.languages}"
            )
        return self


class ExtractorSettings(LocaleSettings):
    """Settings for the translation key extractor."""

    output_format: Literal["json", "csv"] = Field(
        default="json",
        description="Output format",
    )
    output_file: str = Field(
        default="extracted-translations.json",
        description="File name used for CSV output (extension replaced by .csv)",
    )
    sort_keys: bool = Field(default=True)
    force: bool = Field(
        default=False,
        description="Rebuild locale files from scratch, discarding manual edits",
    )
    generate_index: bool = Field(
        default=True,
        description="Emit index.ts re-exporting every language file",
    )


class CleanerSettings(LocaleSettings):
    """Settings for the legacy key cleaner."""

    backup: bool = Field(
        default=True,
        description="Copy every locale file to <file>.bak before modifying it",
    )


class I18nexusConfig(_CamelModel):
    """Project configuration as stored in i18nexus.config.json."""

    languages: list[LanguageCode] = Field(
        default_factory=lambda: ["en", "ko"],
        min_length=1,
    )
    default_language: LanguageCode = Field(default="ko")
    locales_dir: str = Field(default="./locales", min_length=1)
    source_pattern: str = Field(default=DEFAULT_SOURCE_PATTERN, min_length=1)
    translation_import_source: str = Field(default="i18nexus", min_length=1)
    constant_patterns: list[str] = Field(default_factory=list)
    translation_function: str = Field(default="t")
    hook_name: str = Field(default="useTranslation")
    server_translation_function: str = Field(default="getServerTranslation")
    target_text_pattern: str = Field(default=DEFAULT_TARGET_TEXT_PATTERN)

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: list[str]) -> list[str]:
        """Reject duplicate language codes."""
        if len(set(v)) != len(v):
            raise ValueError(f"Duplicate language codes in {v}")
        return v

    @field_validator("target_text_pattern")
    @classmethod
    def validate_target_text_pattern(cls, v: str) -> str:
        """Ensure the target text pattern compiles."""
        return _validate_pattern(v)

    @model_validator(mode="after")
    def validate_default_language(self) -> "I18nexusConfig":
        """The default language must be one of the configured languages."""
        if self.default_language not in self.languages:
            raise ValueError(
                f"Default language '{self.default_language}' is not listed in languages {self.languages}"
            )
        return self

    def _shared(self) -> dict[str, object]:
        return {
            "source_pattern": self.source_pattern,
            "translation_function": self.translation_function,
            "target_text_pattern": self.target_text_pattern,
        }

    def _locale(self) -> dict[str, object]:
        return {
            **self._shared(),
            "languages": list(self.languages),
            "default_language": self.default_language,
            "locales_dir": self.locales_dir,
        }

    def wrapper_settings(self, **overrides: object) -> WrapperSettings:
        """Build wrapper settings from this config, applying CLI overrides."""
        data: dict[str, object] = {
            **self._shared(),
            "translation_import_source": self.translation_import_source,
            "hook_name": self.hook_name,
            "server_translation_function": self.server_translation_function,
            "constant_patterns": list(self.constant_patterns),
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return WrapperSettings.model_validate(data)

    def extractor_settings(self, **overrides: object) -> ExtractorSettings:
        """Build extractor settings from this config, applying CLI overrides."""
        data = self._locale()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ExtractorSettings.model_validate(data)

    def cleaner_settings(self, **overrides: object) -> CleanerSettings:
        """Build cleaner settings from this config, applying CLI overrides."""
        data = self._locale()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CleanerSettings.model_validate(data)
