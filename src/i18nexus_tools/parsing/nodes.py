"""
Helpers over tree-sitter syntax nodes.

The analysis passes dispatch on ``node.type`` with ``match`` statements; the
node-type groups they share and the small structural queries (names of
functions, identifiers bound by a pattern, decoded string values) live here.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from tree_sitter import Node

from .source import decode_js_escapes

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

# Expression wrappers that do not change the value of the wrapped expression.
TRANSPARENT_TYPES = frozenset(
    {
        "parenthesized_expression",
        "as_expression",
        "satisfies_expression",
        "non_null_expression",
        "type_assertion",
    }
)

DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

PARAMETER_WRAPPER_TYPES = frozenset({"required_parameter", "optional_parameter"})

ARRAY_CALLBACK_METHODS = frozenset(
    {"map", "filter", "forEach", "find", "some", "every", "reduce", "flatMap"}
)

_COMPONENT_NAME_RE = re.compile(r"^(?:[A-Z]|use[A-Z])")


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def line_of(node: Node) -> int:
    """1-based line number of the node start."""
    return node.start_point[0] + 1


def is_component_name(name: str) -> bool:
    """Component (``Foo``) or hook (``useFoo``) naming convention."""
    return bool(_COMPONENT_NAME_RE.match(name))


def ancestors(node: Node) -> Iterator[Node]:
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def iter_descendants(node: Node, stop_at_functions: bool = False) -> Iterator[Node]:
    """Pre-order walk below ``node``, optionally not entering nested functions."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        if stop_at_functions and current.type in FUNCTION_TYPES:
            continue
        stack.extend(reversed(current.children))


def unwrap_expression(node: Node | None) -> Node | None:
    """Look through parentheses and TypeScript-only wrappers (``as const``, ``!``)."""
    while node is not None and node.type in TRANSPARENT_TYPES:
        named = [child for child in node.named_children if child.type != "comment"]
        if not named:
            return None
        node = named[-1] if node.type == "type_assertion" else named[0]
    return node


def string_value(node: Node | None) -> str | None:
    """Value of a string literal, or of a template literal without substitutions."""
    if node is None:
        return None
    match node.type:
        case "string":
            return decode_js_escapes(node_text(node)[1:-1])
        case "template_string":
            if any(child.type == "template_substitution" for child in node.children):
                return None
            return decode_js_escapes(node_text(node)[1:-1])
        case _:
            return None


def property_key_name(key: Node | None) -> str | None:
    """Static name of an object key (``label``, ``"label"``), ``None`` if computed."""
    if key is None:
        return None
    match key.type:
        case "property_identifier" | "identifier" | "shorthand_property_identifier":
            return node_text(key)
        case "string":
            return string_value(key)
        case "number":
            return node_text(key)
        case _:
            return None


def member_parts(node: Node) -> tuple[Node, str] | None:
    """``(object, property_name)`` of a non-computed member expression."""
    if node.type != "member_expression":
        return None
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None or prop is None or prop.type not in ("property_identifier", "private_property_identifier"):
        return None
    return obj, node_text(prop)


def call_arguments(call: Node) -> list[Node]:
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return [child for child in args.named_children if child.type != "comment"]


def callee_name(call: Node) -> str | None:
    """Name of the called function: ``f`` for ``f()`` and ``obj.f()``."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        return node_text(callee)
    parts = member_parts(callee)
    if parts is not None:
        return parts[1]
    return None


def is_translation_call(node: Node, function_name: str) -> bool:
    """A call to ``t(...)`` or ``anything.t(...)``."""
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    if callee.type == "identifier":
        return node_text(callee) == function_name
    parts = member_parts(callee)
    return parts is not None and parts[1] == function_name


def is_call_to(node: Node, name: str) -> bool:
    """A call whose callee is the bare identifier ``name``."""
    if node.type != "call_expression":
        return False
    callee = node.child_by_field_name("function")
    return callee is not None and callee.type == "identifier" and node_text(callee) == name


def declaration_kind(declaration: Node) -> str:
    """``const``, ``let`` or ``var`` for a variable declaration node."""
    if declaration.type == "variable_declaration":
        return "var"
    kind = declaration.child_by_field_name("kind")
    if kind is None and declaration.child_count:
        kind = declaration.child(0)
    return node_text(kind) if kind is not None else ""


def declarators(declaration: Node) -> list[Node]:
    return [child for child in declaration.named_children if child.type == "variable_declarator"]


def top_level_statements(block: Node) -> Iterator[Node]:
    """Direct statements of a block, looking through ``export`` wrappers."""
    for child in block.named_children:
        if child.type == "export_statement":
            declaration = child.child_by_field_name("declaration")
            if declaration is not None:
                yield declaration
                continue
        yield child


def parameter_pattern(param: Node) -> Node | None:
    """The binding pattern of one formal parameter."""
    match param.type:
        case "required_parameter" | "optional_parameter":
            pattern = param.child_by_field_name("pattern")
            return parameter_pattern(pattern) if pattern is not None else None
        case "assignment_pattern":
            return parameter_pattern(param.child_by_field_name("left") or param)
        case "rest_pattern":
            named = param.named_children
            return named[0] if named else None
        case "comment" | "decorator" | "accessibility_modifier" | "override_modifier":
            return None
        case "this":
            return None
        case _:
            return param


def function_parameters(function: Node) -> list[Node]:
    """Binding patterns of a function's parameters, in order."""
    single = function.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = function.child_by_field_name("parameters")
    if params is None:
        return []
    patterns: list[Node] = []
    for param in params.named_children:
        pattern = parameter_pattern(param)
        if pattern is not None:
            patterns.append(pattern)
    return patterns


def pattern_identifiers(pattern: Node) -> list[Node]:
    """Identifier nodes bound by a binding pattern."""
    match pattern.type:
        case "identifier" | "shorthand_property_identifier_pattern":
            return [pattern]
        case "object_pattern" | "array_pattern":
            found: list[Node] = []
            for child in pattern.named_children:
                found.extend(pattern_identifiers(child))
            return found
        case "pair_pattern":
            value = pattern.child_by_field_name("value")
            return pattern_identifiers(value) if value is not None else []
        case "object_assignment_pattern" | "assignment_pattern":
            left = pattern.child_by_field_name("left")
            return pattern_identifiers(left) if left is not None else []
        case "rest_pattern":
            found = []
            for child in pattern.named_children:
                found.extend(pattern_identifiers(child))
            return found
        case "required_parameter" | "optional_parameter":
            inner = parameter_pattern(pattern)
            return pattern_identifiers(inner) if inner is not None else []
        case _:
            return []


def function_name(function: Node) -> str | None:
    """
    Name a function is known by: its own name, or the identifier of the
    declarator it initialises (``const Page = () => ...``).
    """
    name = function.child_by_field_name("name")
    if name is not None and function.type != "arrow_function":
        return node_text(name)
    parent = function.parent
    while parent is not None and parent.type in TRANSPARENT_TYPES:
        parent = parent.parent
    if parent is not None and parent.type == "variable_declarator":
        declared = parent.child_by_field_name("name")
        if declared is not None and declared.type == "identifier":
            return node_text(declared)
    return None


def enclosing_function(node: Node) -> Node | None:
    for ancestor in ancestors(node):
        if ancestor.type in FUNCTION_TYPES:
            return ancestor
    return None


def is_comment_only_jsx_expression(node: Node) -> bool:
    """``{/* ... */}`` inside JSX children."""
    if node.type != "jsx_expression":
        return False
    named = node.named_children
    return bool(named) and all(child.type == "comment" for child in named)
