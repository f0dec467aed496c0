"""
Template literal to interpolation-call conversion.

```
`총 ${count}개`            ->  t("총 {{count}}개", { count })
`${user.name}님 ${a + b}`  ->  t("{{user_name}}님 {{expr1}}", { user_name: user.name, expr1: a + b })
```
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from tree_sitter import Node

from ..parsing.nodes import node_text
from ..parsing.source import SourceEditor, decode_js_escapes, js_string_literal

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def substitutions(template: Node) -> list[Node]:
    return [child for child in template.named_children if child.type == "template_substitution"]


def substitution_expression(substitution: Node) -> Node | None:
    named = [child for child in substitution.named_children if child.type != "comment"]
    return named[0] if named else None


def template_chunks(template: Node, source: bytes) -> list[str]:
    """Cooked static chunks of a template literal, one more than its substitutions."""
    chunks: list[str] = []
    cursor = template.start_byte + 1
    for substitution in substitutions(template):
        chunks.append(decode_js_escapes(source[cursor : substitution.start_byte].decode("utf-8")))
        cursor = substitution.end_byte
    chunks.append(decode_js_escapes(source[cursor : template.end_byte - 1].decode("utf-8")))
    return chunks


def placeholder_name(expression: Node, index: int) -> str:
    """``name`` for identifiers, ``user_name`` for ``user.name``, ``expr<index>`` otherwise."""
    match expression.type:
        case "identifier":
            return node_text(expression)
        case "member_expression":
            candidate = node_text(expression).replace(".", "_")
            if _IDENTIFIER_RE.match(candidate):
                return candidate
            return f"expr{index}"
        case _:
            return f"expr{index}"


@dataclass
class Interpolation:
    message: str
    properties: dict[str, str] = field(default_factory=dict)

    def render_call(self, function_name: str) -> str:
        message = js_string_literal(self.message)
        if not self.properties:
            return f"{function_name}({message})"
        entries = ", ".join(
            name if name == expression else f"{name}: {expression}"
            for name, expression in self.properties.items()
        )
        return f"{function_name}({message}, {{ {entries} }})"


def build_interpolation(template: Node, editor: SourceEditor) -> Interpolation:
    """
    Build the interpolation message and variables of a template literal.

    Substitution expressions are rendered through ``editor`` so that edits
    already made inside them are kept.
    """
    chunks = template_chunks(template, editor.source)
    interpolation = Interpolation(message=chunks[0])

    for index, substitution in enumerate(substitutions(template)):
        expression = substitution_expression(substitution)
        if expression is None:
            interpolation.message += chunks[index + 1]
            continue

        text = editor.text_of(expression)
        name = placeholder_name(expression, index)
        existing = interpolation.properties.get(name)
        if existing is not None and existing != text:
            name = f"expr{index}"

        interpolation.properties[name] = text
        interpolation.message += "{{" + name + "}}" + chunks[index + 1]

    return interpolation
