"""
Constant analyzer.

Inspects ``const`` declarations whose initializer is an object literal or an
array of object literals and records, one level deep, which properties hold
user-facing text and what literal strings they hold. Imported modules are
analyzed once per run through ``ExternalConstantCache``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from tree_sitter import Node

from ..parsing.nodes import (
    declaration_kind,
    declarators,
    node_text,
    property_key_name,
    string_value,
    top_level_statements,
    unwrap_expression,
)
from ..parsing.source import parse_file
from ..utils.core.exceptions import ExternalResolutionError, SourceParseError
from .dynamic import declarator_reason
from .heuristics import TextPredicate, contains_hangul, is_renderable_property_name

logger = logging.getLogger(__name__)

ShapeKind = Literal["object", "array"]


@dataclass(frozen=True)
class ConstantShape:
    """
    Shape of one constant.

    Attributes:
        name: Declared identifier
        kind: ``object`` for an object literal, ``array`` for an array of object literals
        renderable_props: Properties with a renderable name holding target-language text
        values: String-valued properties of each inspected object, in element order
    """

    name: str
    kind: ShapeKind
    renderable_props: frozenset[str]
    values: tuple[dict[str, str], ...] = field(default=(), compare=False)

    def values_of(self, prop: str) -> list[str]:
        return [element[prop] for element in self.values if prop in element]


class ConstantAnalyzer:
    """Builds ``ConstantShape``s and string constants from declarators."""

    def __init__(self, is_target_text: TextPredicate = contains_hangul) -> None:
        self.is_target_text = is_target_text

    @staticmethod
    def _is_plain_const(declarator: Node) -> bool:
        declaration = declarator.parent
        if declaration is None:
            return False
        name = declarator.child_by_field_name("name")
        if name is None or name.type != "identifier":
            return False
        return declarator_reason(declarator, declaration_kind(declaration)) is None

    def shape_of(self, declarator: Node) -> ConstantShape | None:
        """Shape of an eligible ``const`` declarator, None if not eligible."""
        if not self._is_plain_const(declarator):
            return None
        name = node_text(declarator.child_by_field_name("name"))
        return self.shape_of_value(name, declarator.child_by_field_name("value"))

    def shape_of_value(self, name: str, value: Node | None) -> ConstantShape | None:
        init = unwrap_expression(value)
        if init is None:
            return None

        match init.type:
            case "object":
                objects = [init]
                kind: ShapeKind = "object"
            case "array":
                objects = [
                    element
                    for element in (unwrap_expression(child) for child in init.named_children)
                    if element is not None and element.type == "object"
                ]
                if not objects:
                    return None
                kind = "array"
            case _:
                return None

        renderable: set[str] = set()
        values: list[dict[str, str]] = []
        for obj in objects:
            element_values = self._string_properties(obj)
            values.append(element_values)
            for prop, text in element_values.items():
                if is_renderable_property_name(prop) and self.is_target_text(text):
                    renderable.add(prop)

        return ConstantShape(name=name, kind=kind, renderable_props=frozenset(renderable), values=tuple(values))

    @staticmethod
    def _string_properties(obj: Node) -> dict[str, str]:
        properties: dict[str, str] = {}
        for child in obj.named_children:
            if child.type != "pair":
                continue
            key = property_key_name(child.child_by_field_name("key"))
            if key is None:
                continue
            text = string_value(unwrap_expression(child.child_by_field_name("value")))
            if text is not None:
                properties[key] = text
        return properties

    def string_constant(self, declarator: Node) -> str | None:
        """Value of ``const name = "literal"``."""
        if not self._is_plain_const(declarator):
            return None
        return string_value(unwrap_expression(declarator.child_by_field_name("value")))


@dataclass
class ModuleConstants:
    """Top-level constants of one module, looked up by exported name."""

    path: Path
    shapes: dict[str, ConstantShape] = field(default_factory=dict)
    strings: dict[str, str] = field(default_factory=dict)
    exports: dict[str, str] = field(default_factory=dict)

    def _local_name(self, exported_name: str) -> str:
        return self.exports.get(exported_name, exported_name)

    def shape(self, exported_name: str) -> ConstantShape | None:
        return self.shapes.get(self._local_name(exported_name))

    def string(self, exported_name: str) -> str | None:
        return self.strings.get(self._local_name(exported_name))


def collect_module_constants(root: Node, path: Path, analyzer: ConstantAnalyzer) -> ModuleConstants:
    """Analyze the top-level declarations and export clauses of a module."""
    module = ModuleConstants(path=path)

    for statement in root.named_children:
        if statement.type == "export_statement":
            _collect_export(statement, module, analyzer)

    for statement in top_level_statements(root):
        if statement.type != "lexical_declaration":
            continue
        for declarator in declarators(statement):
            name = node_text(declarator.child_by_field_name("name"))
            shape = analyzer.shape_of(declarator)
            if shape is not None:
                module.shapes[name] = shape
                continue
            text = analyzer.string_constant(declarator)
            if text is not None:
                module.strings[name] = text

    return module


def _collect_export(statement: Node, module: ModuleConstants, analyzer: ConstantAnalyzer) -> None:
    declaration = statement.child_by_field_name("declaration")
    if declaration is not None:
        if declaration.type == "lexical_declaration":
            for declarator in declarators(declaration):
                name = declarator.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    module.exports[node_text(name)] = node_text(name)
        return

    value = unwrap_expression(statement.child_by_field_name("value"))
    if value is not None:
        # export default NAV / export default { ... }
        if value.type == "identifier":
            module.exports["default"] = node_text(value)
        else:
            shape = analyzer.shape_of_value("default", value)
            if shape is not None:
                module.shapes["default"] = shape
            text = string_value(value)
            if text is not None:
                module.strings["default"] = text
        return

    for clause in statement.named_children:
        if clause.type != "export_clause":
            continue
        for specifier in clause.named_children:
            if specifier.type != "export_specifier":
                continue
            local = node_text(specifier.child_by_field_name("name"))
            alias = specifier.child_by_field_name("alias")
            module.exports[node_text(alias) if alias is not None else local] = local


class ExternalConstantCache:
    """
    Per-run memo of analyzed imported modules.

    A module that cannot be read or parsed is cached as None and logged
    once; later lookups of its names stay unresolved.
    """

    def __init__(self, analyzer: ConstantAnalyzer) -> None:
        self.analyzer = analyzer
        self._modules: dict[Path, ModuleConstants | None] = {}

    def __contains__(self, path: Path) -> bool:
        return path in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def load(self, path: Path) -> ModuleConstants | None:
        if path in self._modules:
            return self._modules[path]

        module: ModuleConstants | None
        try:
            parsed = parse_file(path)
            module = collect_module_constants(parsed.root, path, self.analyzer)
        except SourceParseError as e:
            error = ExternalResolutionError(f"Failed to analyze imported module: {e}", file_path=path)
            logger.warning(str(error))
            module = None
        else:
            logger.debug(
                f"Analyzed {path}: {len(module.shapes)} constant shapes, {len(module.strings)} string constants"
            )

        self._modules[path] = module
        return module
