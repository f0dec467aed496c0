"""
Binding and scope resolution.

Given an identifier name and a use-site node, ``ScopeResolver`` walks the
enclosing lexical scopes outward and returns the declaration that binds the
name, together with its structural position (parameter index, destructuring,
enclosing call of a callback). ``BindingOrigin`` is the classification of such
a binding used when deciding whether a use-site may be wrapped or extracted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tree_sitter import Node

from ..parsing.nodes import (
    ARRAY_CALLBACK_METHODS,
    DECLARATION_TYPES,
    FUNCTION_TYPES,
    declaration_kind,
    declarators,
    function_name,
    function_parameters,
    is_component_name,
    member_parts,
    node_text,
    pattern_identifiers,
    top_level_statements,
    unwrap_expression,
)

if TYPE_CHECKING:
    from .constants import ConstantShape


class BindingKind(Enum):
    PARAMETER = "parameter"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"
    CATCH = "catch"
    LOOP = "loop"


@dataclass(frozen=True)
class Binding:
    """Declaration site of a name."""

    name: str
    kind: BindingKind
    identifier: Node
    scope: Node
    declarator: Node | None = None
    declaration_kind: str | None = None
    via_pattern: bool = False
    function: Node | None = None
    param_index: int | None = None
    import_source: str | None = None
    imported_name: str | None = None

    @property
    def callback_call(self) -> Node | None:
        """The call expression this binding's function is an argument of, if any."""
        if self.function is None:
            return None
        parent = self.function.parent
        if parent is None or parent.type != "arguments":
            return None
        call = parent.parent
        return call if call is not None and call.type == "call_expression" else None


@dataclass(frozen=True)
class ArrayCallbackSource:
    """Receiver of ``items.map(callback)`` traced back to an identifier."""

    array: Node
    method: str


def array_callback_source(binding: Binding) -> ArrayCallbackSource | None:
    """
    For a parameter of a callback passed to an array iteration method, the
    receiver identifier of the outermost call in the chain
    (``NAV.filter(...).map(item => ...)`` gives ``NAV``).
    """
    if binding.kind is not BindingKind.PARAMETER:
        return None
    call = binding.callback_call
    if call is None:
        return None
    callee = call.child_by_field_name("function")
    parts = member_parts(callee) if callee is not None else None
    if parts is None or parts[1] not in ARRAY_CALLBACK_METHODS:
        return None
    method = parts[1]
    receiver = unwrap_expression(parts[0])
    while receiver is not None and receiver.type == "call_expression":
        inner = receiver.child_by_field_name("function")
        inner_parts = member_parts(inner) if inner is not None else None
        if inner_parts is None or inner_parts[1] not in ARRAY_CALLBACK_METHODS:
            return None
        receiver = unwrap_expression(inner_parts[0])
    if receiver is None or receiver.type != "identifier":
        return None
    return ArrayCallbackSource(array=receiver, method=method)


# Binding origins


@dataclass(frozen=True)
class Constant:
    """A non-dynamic ``const`` (local or imported); ``shape`` is None when not analyzable."""

    shape: ConstantShape | None = None

    @property
    def renderable_props(self) -> frozenset[str]:
        return self.shape.renderable_props if self.shape is not None else frozenset()


@dataclass(frozen=True)
class DynamicHookResult:
    pass


@dataclass(frozen=True)
class DynamicFetchResult:
    pass


@dataclass(frozen=True)
class DynamicLocal:
    """``let``/``var``, destructured, loop or catch bindings."""

    pass


@dataclass(frozen=True)
class FunctionParameter:
    pass


@dataclass(frozen=True)
class ComponentProp:
    pass


@dataclass(frozen=True)
class ArrayCallbackParameter:
    source_array: str
    source_node: Node
    method: str


@dataclass(frozen=True)
class Unresolved:
    pass


BindingOrigin = (
    Constant
    | DynamicHookResult
    | DynamicFetchResult
    | DynamicLocal
    | FunctionParameter
    | ComponentProp
    | ArrayCallbackParameter
    | Unresolved
)

EXCLUDED_ORIGINS = (DynamicHookResult, DynamicFetchResult, DynamicLocal, FunctionParameter, ComponentProp)


def is_component_prop(binding: Binding) -> bool:
    """First parameter (or a name destructured from it) of a component or hook."""
    if binding.kind is not BindingKind.PARAMETER or binding.param_index != 0 or binding.function is None:
        return False
    name = function_name(binding.function)
    return name is not None and is_component_name(name)


class ScopeResolver:
    """Resolves names to their declarations by walking lexical scopes."""

    def resolve(self, name: str, at: Node) -> Binding | None:
        """
        Find the binding of ``name`` visible at ``at``.

        Args:
            name: Identifier name
            at: Use-site node; scopes are searched from this node outward

        Returns:
            The binding, or None for globals and undeclared names
        """
        node: Node | None = at
        while node is not None:
            binding = self._lookup_in(name, node)
            if binding is not None:
                return binding
            node = node.parent
        return None

    def has_binding(self, name: str, at: Node) -> bool:
        return self.resolve(name, at) is not None

    def _lookup_in(self, name: str, scope: Node) -> Binding | None:
        match scope.type:
            case "program" | "statement_block" | "class_body" | "switch_body":
                return self._lookup_block(name, scope)
            case t if t in FUNCTION_TYPES:
                return self._lookup_function(name, scope)
            case "for_statement":
                initializer = scope.child_by_field_name("initializer")
                if initializer is not None and initializer.type in DECLARATION_TYPES:
                    return self._lookup_declaration(name, initializer, scope)
                return None
            case "for_in_statement":
                return self._lookup_loop_head(name, scope)
            case "catch_clause":
                param = scope.child_by_field_name("parameter")
                if param is not None:
                    for identifier in pattern_identifiers(param):
                        if node_text(identifier) == name:
                            return Binding(name, BindingKind.CATCH, identifier, scope)
                return None
            case _:
                return None

    def _lookup_function(self, name: str, function: Node) -> Binding | None:
        for index, pattern in enumerate(function_parameters(function)):
            for identifier in pattern_identifiers(pattern):
                if node_text(identifier) == name:
                    return Binding(
                        name,
                        BindingKind.PARAMETER,
                        identifier,
                        function,
                        via_pattern=pattern.type != "identifier",
                        function=function,
                        param_index=index,
                    )

        if function.type in ("function_expression", "function", "generator_function"):
            own_name = function.child_by_field_name("name")
            if own_name is not None and node_text(own_name) == name:
                return Binding(name, BindingKind.FUNCTION, own_name, function)

        body = function.child_by_field_name("body")
        if body is not None and body.type == "statement_block":
            return self._lookup_hoisted_var(name, body)
        return None

    def _lookup_hoisted_var(self, name: str, body: Node) -> Binding | None:
        """``var`` declarations nested in blocks are visible in the whole function."""
        stack = list(body.named_children)
        while stack:
            current = stack.pop()
            if current.type in FUNCTION_TYPES or current.type == "class_declaration":
                continue
            if current.type == "variable_declaration":
                binding = self._lookup_declaration(name, current, body)
                if binding is not None:
                    return binding
            stack.extend(current.named_children)
        return None

    def _lookup_block(self, name: str, block: Node) -> Binding | None:
        for statement in top_level_statements(block):
            match statement.type:
                case "lexical_declaration" | "variable_declaration":
                    binding = self._lookup_declaration(name, statement, block)
                    if binding is not None:
                        return binding
                case "function_declaration" | "generator_function_declaration":
                    declared = statement.child_by_field_name("name")
                    if declared is not None and node_text(declared) == name:
                        return Binding(name, BindingKind.FUNCTION, declared, block)
                case "class_declaration" | "abstract_class_declaration":
                    declared = statement.child_by_field_name("name")
                    if declared is not None and node_text(declared) == name:
                        return Binding(name, BindingKind.CLASS, declared, block)
                case "import_statement":
                    binding = self._lookup_import(name, statement, block)
                    if binding is not None:
                        return binding
                case _:
                    continue
        return None

    def _lookup_declaration(self, name: str, declaration: Node, scope: Node) -> Binding | None:
        kind = declaration_kind(declaration)
        for declarator in declarators(declaration):
            pattern = declarator.child_by_field_name("name")
            if pattern is None:
                continue
            for identifier in pattern_identifiers(pattern):
                if node_text(identifier) == name:
                    return Binding(
                        name,
                        BindingKind.VARIABLE,
                        identifier,
                        scope,
                        declarator=declarator,
                        declaration_kind=kind,
                        via_pattern=pattern.type != "identifier",
                    )
        return None

    def _lookup_loop_head(self, name: str, loop: Node) -> Binding | None:
        left = loop.child_by_field_name("left")
        if left is None:
            return None
        for identifier in pattern_identifiers(left):
            if node_text(identifier) == name:
                return Binding(name, BindingKind.LOOP, identifier, loop)
        return None

    def _lookup_import(self, name: str, statement: Node, scope: Node) -> Binding | None:
        source_node = statement.child_by_field_name("source")
        source = node_text(source_node)[1:-1] if source_node is not None else None
        for clause in statement.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                match part.type:
                    case "identifier":
                        if node_text(part) == name:
                            return Binding(
                                name, BindingKind.IMPORT, part, scope,
                                import_source=source, imported_name="default",
                            )
                    case "namespace_import":
                        for identifier in part.named_children:
                            if identifier.type == "identifier" and node_text(identifier) == name:
                                return Binding(
                                    name, BindingKind.IMPORT, identifier, scope,
                                    import_source=source, imported_name="*",
                                )
                    case "named_imports":
                        for specifier in part.named_children:
                            if specifier.type != "import_specifier":
                                continue
                            imported = specifier.child_by_field_name("name")
                            alias = specifier.child_by_field_name("alias")
                            local = alias if alias is not None else imported
                            if local is not None and node_text(local) == name:
                                return Binding(
                                    name, BindingKind.IMPORT, local, scope,
                                    import_source=source, imported_name=node_text(imported),
                                )
                    case _:
                        continue
        return None
