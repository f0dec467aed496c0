"""
End-to-end tests running the wrapper, the extractor and the cleaner on one
sample project in sequence.
"""

from collections.abc import Callable
from pathlib import Path

from i18nexus_tools.codemod.cleaner import LegacyCleaner
from i18nexus_tools.codemod.extractor import TranslationExtractor
from i18nexus_tools.codemod.wrapper import TranslationWrapper
from i18nexus_tools.config.schema import CleanerSettings, ExtractorSettings, WrapperSettings
from tests.utils.test_helpers import read_json, write_source

NAV_PAGE = """const NAV = [{ path: "/h", label: "홈" }];

export default function Nav() {
  return <nav>{NAV.map((item) => <a href={item.path}>{item.label}</a>)}</nav>;
}
"""

ENGLISH_LIST = """const data = ["a", "b"];

export function Letters() {
  return <div>{data.map((item) => <p>{item}</p>)}</div>;
}
"""

COUNTER = """export function Counter({ count }) {
  return <span>{`총 ${count}개`}</span>;
}
"""

SERVER_PAGE = """export default async function Page() {
  const { t } = await getServerTranslation();
  const title = "서버 제목";
  return <h1>{title}</h1>;
}
"""


class TestWrapThenExtract:
    """Test cases for the wrapper followed by the extractor."""

    def test_constant_array_scenario(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test that element labels are wrapped and extracted per element."""
        page = write_source(project_dir, "src/Nav.tsx", NAV_PAGE)

        _ = TranslationWrapper(wrapper_settings()).process_files()
        wrapped = page.read_text(encoding="utf-8")
        _ = TranslationExtractor(extractor_settings()).extract()

        assert "<a href={item.path}>{t(item.label)}</a>" in wrapped
        assert read_json(project_dir / "locales" / "ko.json") == {"홈": "홈"}
        assert read_json(project_dir / "locales" / "en.json") == {"홈": ""}

    def test_english_array_scenario(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test that a bare element of an English array is neither wrapped nor extracted."""
        page = write_source(project_dir, "src/Letters.tsx", ENGLISH_LIST)

        report = TranslationWrapper(wrapper_settings()).process_files()
        keys = TranslationExtractor(extractor_settings()).extract_keys_only()

        assert report.modified == []
        assert page.read_text(encoding="utf-8") == ENGLISH_LIST
        assert keys == []

    def test_template_scenario(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test interpolation of a raw template; the message becomes the key."""
        page = write_source(project_dir, "src/Counter.tsx", COUNTER)

        _ = TranslationWrapper(wrapper_settings()).process_files()
        keys = TranslationExtractor(extractor_settings()).extract_keys_only()

        assert '{t("총 {{count}}개", { count })}' in page.read_text(encoding="utf-8")
        assert [k.key for k in keys] == ["총 {{count}}개"]

    def test_server_component_scenario(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test that server components are wrapped without a hook or import."""
        page = write_source(project_dir, "src/app/page.tsx", SERVER_PAGE)

        report = TranslationWrapper(wrapper_settings()).process_files()
        wrapped = page.read_text(encoding="utf-8")
        keys = TranslationExtractor(extractor_settings()).extract_keys_only()

        assert 'const title = t("서버 제목");' in wrapped
        assert "useTranslation" not in wrapped
        assert report.modified[0].server_components == ["Page"]
        assert [k.key for k in keys] == ["서버 제목"]

    def test_imported_constants_across_files(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test wrapping and extraction through a relative import."""
        _ = write_source(
            project_dir,
            "src/constants/menu.ts",
            'export const MENU_LIST = [{ id: 1, title: "대시보드" }, { id: 2, title: "설정" }];\n',
        )
        page = write_source(
            project_dir,
            "src/Sidebar.tsx",
            'import { MENU_LIST } from "./constants/menu";\n\n'
            "export function Sidebar() {\n"
            "  return <ul>{MENU_LIST.map((m) => <li key={m.id}>{m.title}</li>)}</ul>;\n"
            "}\n",
        )

        _ = TranslationWrapper(wrapper_settings()).process_files()
        keys = TranslationExtractor(extractor_settings()).extract_keys_only()

        assert "{t(m.title)}" in page.read_text(encoding="utf-8")
        assert sorted(k.key for k in keys) == sorted(["대시보드", "설정"])


class TestLocaleLifecycle:
    """Test cases for repeated extraction and cleanup."""

    def test_merge_preserves_translations(
        self, project_dir: Path, extractor_settings: Callable[..., ExtractorSettings]
    ) -> None:
        """Test that manual translations survive re-extraction and force rebuilds them."""
        source = write_source(project_dir, "src/Page.tsx", 't("안녕");\n')
        _ = TranslationExtractor(extractor_settings()).extract()

        en = project_dir / "locales" / "en.json"
        _ = en.write_text('{\n  "안녕": "Hello"\n}\n', encoding="utf-8")
        _ = source.write_text('t("안녕"); t("새 문장");\n', encoding="utf-8")

        _ = TranslationExtractor(extractor_settings()).extract()
        assert read_json(en) == {"안녕": "Hello", "새 문장": ""}

        _ = TranslationExtractor(extractor_settings(force=True)).extract()
        assert read_json(en) == {"새 문장": "", "안녕": ""}

    def test_extract_then_clean(
        self,
        project_dir: Path,
        extractor_settings: Callable[..., ExtractorSettings],
        cleaner_settings: Callable[..., CleanerSettings],
    ) -> None:
        """Test that keys removed from source are cleaned from every locale."""
        source = write_source(project_dir, "src/Page.tsx", 't("유지"); t("삭제");\n')
        _ = TranslationExtractor(extractor_settings()).extract()

        _ = source.write_text('t("유지");\n', encoding="utf-8")
        report = LegacyCleaner(cleaner_settings()).clean()

        assert read_json(project_dir / "locales" / "ko.json") == {"유지": "유지"}
        # untranslated "" values of used keys are invalid as well
        assert read_json(project_dir / "locales" / "en.json") == {}
        assert report.removed == 3

    def test_ignored_text_is_not_extracted(
        self,
        project_dir: Path,
        wrapper_settings: Callable[..., WrapperSettings],
        extractor_settings: Callable[..., ExtractorSettings],
    ) -> None:
        """Test that ignored text stays hardcoded end to end."""
        page = write_source(
            project_dir,
            "src/Footer.tsx",
            "export function Footer() {\n"
            "  // i18n-ignore\n"
            '  const brand = "회사명";\n'
            "\n"
            "\n"
            '  return <footer title={brand}>저작권</footer>;\n'
            "}\n",
        )

        _ = TranslationWrapper(wrapper_settings()).process_files()
        keys = TranslationExtractor(extractor_settings()).extract_keys_only()

        wrapped = page.read_text(encoding="utf-8")
        assert 'const brand = "회사명";' in wrapped
        assert '{t("저작권")}' in wrapped
        assert [k.key for k in keys] == ["저작권"]
