"""
Text and naming heuristics.

These predicates decide whether a string looks like user-facing
target-language text, whether a property name suggests rendered content, and
whether an identifier is named like a constant.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from ..config.schema import DEFAULT_TARGET_TEXT_PATTERN

TextPredicate = Callable[[str], bool]

RENDERABLE_KEYWORDS = (
    "label",
    "title",
    "text",
    "name",
    "placeholder",
    "description",
    "content",
    "message",
    "tooltip",
    "hint",
    "caption",
    "subtitle",
    "heading",
)

_SCREAMING_CASE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")
_CONSTANT_PASCAL_RE = re.compile(
    r"^[A-Z][a-z]+(?:[A-Z][a-z]+)*(Items|Config|Data|List|Menu|Options|Settings)$"
)


def make_text_predicate(pattern: str = DEFAULT_TARGET_TEXT_PATTERN) -> TextPredicate:
    """Build a predicate matching strings that contain ``pattern``."""
    compiled = re.compile(pattern)

    def is_target_text(value: str) -> bool:
        return compiled.search(value) is not None

    return is_target_text


contains_hangul: TextPredicate = make_text_predicate(DEFAULT_TARGET_TEXT_PATTERN)


def is_renderable_property_name(name: str) -> bool:
    """Property names that usually hold displayed text (``label``, ``subTitle``...)."""
    lowered = name.lower()
    return any(keyword in lowered for keyword in RENDERABLE_KEYWORDS)


class ConstantNamingHeuristic:
    """
    Decides whether an identifier is named like a module constant.

    With no user patterns, ``SCREAMING_CASE`` names and PascalCase names ending
    in ``Items``, ``Config``, ``Data``, ``List``, ``Menu``, ``Options`` or
    ``Settings`` qualify. User patterns replace those rules: ``_ITEMS`` is a
    suffix, ``UI_`` a prefix, anything else a substring.
    """

    def __init__(self, patterns: Sequence[str] = ()) -> None:
        self.patterns: tuple[str, ...] = tuple(p for p in patterns if p)

    def looks_like_constant(self, name: str) -> bool:
        if self.patterns:
            return any(self._matches(pattern, name) for pattern in self.patterns)
        return bool(_SCREAMING_CASE_RE.match(name) or _CONSTANT_PASCAL_RE.match(name))

    @staticmethod
    def _matches(pattern: str, name: str) -> bool:
        if pattern.startswith("_"):
            return name.endswith(pattern)
        if pattern.endswith("_"):
            return name.startswith(pattern)
        return pattern in name

    def authorizes(self, object_name: str, property_name: str) -> bool:
        """Speculative wrap of ``object_name.property_name``."""
        return self.looks_like_constant(object_name) and is_renderable_property_name(property_name)
