"""
Per-run analysis session and per-file analysis context.

``AnalysisSession`` owns everything that lives for a whole batch run (the
text predicate, the naming heuristic, the external-module cache).
``AnalysisContext`` is built for one parsed file, answers origin and value
queries for identifiers in that file, and is discarded afterwards.

Wrapping a member access ``obj.prop`` is a two-tier decision:
``resolve_precise`` answers from bindings and constant shapes and returns
None when it has no evidence; only then does ``resolve_heuristic`` apply the
naming heuristic.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tree_sitter import Node

from ..parsing.nodes import declarators, node_text, top_level_statements
from ..parsing.source import ParsedSource
from .bindings import (
    EXCLUDED_ORIGINS,
    ArrayCallbackParameter,
    Binding,
    BindingKind,
    BindingOrigin,
    ComponentProp,
    Constant,
    DynamicFetchResult,
    DynamicHookResult,
    DynamicLocal,
    FunctionParameter,
    ScopeResolver,
    Unresolved,
    array_callback_source,
    is_component_prop,
)
from .constants import ConstantAnalyzer, ConstantShape, ExternalConstantCache
from .dynamic import declarator_reason
from .heuristics import ConstantNamingHeuristic, TextPredicate, contains_hangul, is_renderable_property_name
from .imports import ImportedName, parse_imports

logger = logging.getLogger(__name__)


class AnalysisSession:
    """State shared by every file of one run."""

    def __init__(
        self,
        is_target_text: TextPredicate = contains_hangul,
        constant_patterns: Sequence[str] = (),
    ) -> None:
        self.is_target_text: TextPredicate = is_target_text
        self.heuristic = ConstantNamingHeuristic(constant_patterns)
        self.analyzer = ConstantAnalyzer(is_target_text)
        self.resolver = ScopeResolver()
        self.external_cache = ExternalConstantCache(self.analyzer)

    def context_for(self, parsed: ParsedSource) -> AnalysisContext:
        return AnalysisContext(self, parsed)


class AnalysisContext:
    """Analysis of a single source file."""

    def __init__(self, session: AnalysisSession, parsed: ParsedSource) -> None:
        self.session = session
        self.parsed = parsed
        self._shapes: dict[int, ConstantShape | None] = {}

        self.local_constants: dict[str, ConstantShape] = {}
        for statement in top_level_statements(parsed.root):
            if statement.type != "lexical_declaration":
                continue
            for declarator in declarators(statement):
                shape = self._shape_of(declarator)
                if shape is not None:
                    self.local_constants[shape.name] = shape

        self.imported_constants: dict[str, ImportedName] = parse_imports(parsed.root, parsed.path)

    def _shape_of(self, declarator: Node) -> ConstantShape | None:
        if declarator.id not in self._shapes:
            self._shapes[declarator.id] = self.session.analyzer.shape_of(declarator)
        return self._shapes[declarator.id]

    def binding_of(self, identifier: Node) -> Binding | None:
        return self.session.resolver.resolve(node_text(identifier), identifier)

    def origin_of(self, identifier: Node) -> BindingOrigin:
        """Classify the binding an identifier refers to at its use-site."""
        binding = self.binding_of(identifier)
        if binding is None:
            return Unresolved()

        match binding.kind:
            case BindingKind.PARAMETER:
                source = array_callback_source(binding)
                if source is not None:
                    return ArrayCallbackParameter(node_text(source.array), source.array, source.method)
                if is_component_prop(binding):
                    return ComponentProp()
                return FunctionParameter()
            case BindingKind.VARIABLE:
                if binding.declarator is None:
                    return DynamicLocal()
                reason = declarator_reason(binding.declarator, binding.declaration_kind or "")
                if reason is not None:
                    if reason.is_hook:
                        return DynamicHookResult()
                    if reason.is_fetch:
                        return DynamicFetchResult()
                    return DynamicLocal()
                return Constant(self._shape_of(binding.declarator))
            case BindingKind.CATCH | BindingKind.LOOP:
                return DynamicLocal()
            case BindingKind.IMPORT:
                imported = self.imported_constants.get(binding.name)
                if imported is None:
                    return Unresolved()
                module = self.session.external_cache.load(imported.path)
                if module is None:
                    return Unresolved()
                return Constant(module.shape(imported.exported_name))
            case _:
                return Unresolved()

    # Wrapping decision

    def resolve_precise(self, obj: Node, prop: str) -> bool | None:
        """
        Decide ``obj.prop`` from bindings and constant shapes.

        Returns:
            True or False when the origin of ``obj`` settles it, None when
            there is no evidence either way
        """
        if obj.type != "identifier":
            return False

        origin = self.origin_of(obj)
        match origin:
            case ArrayCallbackParameter(source_node=source_node):
                return self.resolve_precise(source_node, prop)
            case Constant(shape=shape) if shape is not None and shape.renderable_props:
                return prop in shape.renderable_props
            case Constant() | Unresolved():
                return None
            case _:
                return False

    def resolve_heuristic(self, obj: Node, prop: str) -> bool:
        """Naming heuristic for accesses the precise tier could not decide."""
        if obj.type != "identifier":
            return False
        origin = self.origin_of(obj)
        if isinstance(origin, EXCLUDED_ORIGINS):
            return False
        name = origin.source_array if isinstance(origin, ArrayCallbackParameter) else node_text(obj)
        return self.session.heuristic.authorizes(name, prop)

    def should_wrap_member(self, obj: Node, prop: str) -> bool:
        if not is_renderable_property_name(prop):
            logger.debug(f"Not wrapping {node_text(obj)}.{prop}: property is not renderable")
            return False
        decision = self.resolve_precise(obj, prop)
        if decision is None:
            decision = self.resolve_heuristic(obj, prop)
            logger.debug(f"Heuristic decision for {node_text(obj)}.{prop}: {decision}")
        else:
            logger.debug(f"Precise decision for {node_text(obj)}.{prop}: {decision}")
        return decision

    # Value resolution

    def member_values(self, obj: Node, prop: str) -> list[str]:
        """
        Literal strings ``obj.prop`` can denote: one value for an object
        constant, one per element when ``obj`` iterates a constant array.
        """
        if obj.type != "identifier":
            return []
        origin = self.origin_of(obj)
        match origin:
            case Constant(shape=shape) if shape is not None and shape.kind == "object":
                return shape.values_of(prop)
            case ArrayCallbackParameter(source_node=source_node):
                source = self.origin_of(source_node)
                if isinstance(source, Constant) and source.shape is not None and source.shape.kind == "array":
                    return source.shape.values_of(prop)
                return []
            case _:
                return []

    def string_of(self, identifier: Node) -> str | None:
        """Value of an identifier bound to a ``const`` string literal."""
        binding = self.binding_of(identifier)
        if binding is None:
            return None
        match binding.kind:
            case BindingKind.VARIABLE if binding.declarator is not None:
                return self.session.analyzer.string_constant(binding.declarator)
            case BindingKind.IMPORT:
                imported = self.imported_constants.get(binding.name)
                if imported is None:
                    return None
                module = self.session.external_cache.load(imported.path)
                return module.string(imported.exported_name) if module is not None else None
            case _:
                return None
