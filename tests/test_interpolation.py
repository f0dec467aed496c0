"""Tests for template literal to interpolation-call conversion."""

from i18nexus_tools.codemod.interpolation import Interpolation, build_interpolation, template_chunks
from i18nexus_tools.parsing.source import SourceEditor
from tests.utils.test_helpers import find_nodes, parse_snippet


def _interpolate(code: str) -> Interpolation:
    parsed = parse_snippet(code)
    template = find_nodes(parsed.root, "template_string")[0]
    return build_interpolation(template, SourceEditor(parsed.source))


class TestTemplateChunks:
    """Test cases for static template chunks."""

    def test_chunks_are_cooked(self) -> None:
        """Test that escapes in static chunks are decoded."""
        parsed = parse_snippet("const s = `첫째\\n${a}둘째`;")
        template = find_nodes(parsed.root, "template_string")[0]

        assert template_chunks(template, parsed.source) == ["첫째\n", "둘째"]


class TestBuildInterpolation:
    """Test cases for placeholder naming and call rendering."""

    def test_identifier_uses_shorthand(self) -> None:
        """Test identifiers become shorthand properties."""
        interpolation = _interpolate("const s = `총 ${count}개`;")

        assert interpolation.message == "총 {{count}}개"
        assert interpolation.render_call("t") == 't("총 {{count}}개", { count })'

    def test_member_and_complex_expressions(self) -> None:
        """Test dotted names and positional names for other expressions."""
        interpolation = _interpolate("const s = `${user.name}님 ${a + b}점`;")

        assert interpolation.message == "{{user_name}}님 {{expr1}}점"
        assert interpolation.properties == {"user_name": "user.name", "expr1": "a + b"}
        assert interpolation.render_call("t") == 't("{{user_name}}님 {{expr1}}점", { user_name: user.name, expr1: a + b })'

    def test_conflicting_names_fall_back_to_position(self) -> None:
        """Test that a clashing placeholder name gets a positional name."""
        interpolation = _interpolate("const s = `${a_b} ${a.b}`;")

        assert interpolation.message == "{{a_b}} {{expr1}}"
        assert interpolation.properties == {"a_b": "a_b", "expr1": "a.b"}

    def test_repeated_expression_reuses_name(self) -> None:
        """Test that the same identifier twice keeps one property."""
        interpolation = _interpolate("const s = `${n}/${n}`;")

        assert interpolation.message == "{{n}}/{{n}}"
        assert interpolation.properties == {"n": "n"}

    def test_message_without_properties(self) -> None:
        """Test rendering a plain message."""
        assert Interpolation("안녕").render_call("translate") == 'translate("안녕")'
