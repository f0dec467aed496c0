"""
Dynamic-origin classification of variable declarations.

A declaration is dynamic when its syntax shows that the value is produced at
runtime (hook results, network responses, awaited values, destructured
tuples, reassignable bindings). Dynamic values are never analyzed as
constants, never wrapped and never extracted.
"""

from __future__ import annotations

from enum import Enum

from tree_sitter import Node

from ..parsing.nodes import declaration_kind, declarators, member_parts, node_text, unwrap_expression

FETCH_CALLEES = frozenset({"fetch", "axios"})
FETCH_RECEIVERS = frozenset({"fetch", "axios", "api"})
PROMISE_METHODS = frozenset({"then", "catch", "finally"})


class DynamicReason(Enum):
    """Why a declaration was excluded from constant analysis."""

    NOT_CONST = "not_const"
    HOOK_CALL = "hook_call"
    FETCH_CALL = "fetch_call"
    AWAIT = "await"
    PROMISE_CHAIN = "promise_chain"
    DESTRUCTURING = "destructuring"

    @property
    def is_hook(self) -> bool:
        return self is DynamicReason.HOOK_CALL

    @property
    def is_fetch(self) -> bool:
        return self in (DynamicReason.FETCH_CALL, DynamicReason.AWAIT, DynamicReason.PROMISE_CHAIN)


def _is_hook_callee(callee: Node) -> bool:
    if callee.type == "identifier":
        return node_text(callee).startswith("use")
    parts = member_parts(callee)
    if parts is not None:
        # React.useState(...)
        name = parts[1]
        return len(name) > 3 and name.startswith("use") and name[3].isupper()
    return False


def initializer_reason(value: Node | None) -> DynamicReason | None:
    """Dynamic reason implied by an initializer expression alone."""
    init = unwrap_expression(value)
    if init is None:
        return None

    match init.type:
        case "await_expression":
            return DynamicReason.AWAIT
        case "call_expression":
            callee = unwrap_expression(init.child_by_field_name("function"))
            if callee is None:
                return None
            if _is_hook_callee(callee):
                return DynamicReason.HOOK_CALL
            if callee.type == "identifier" and node_text(callee) in FETCH_CALLEES:
                return DynamicReason.FETCH_CALL
            parts = member_parts(callee)
            if parts is not None:
                receiver, method = parts
                receiver = unwrap_expression(receiver)
                if receiver is not None and receiver.type == "identifier" and node_text(receiver) in FETCH_RECEIVERS:
                    return DynamicReason.FETCH_CALL
                if method in PROMISE_METHODS:
                    return DynamicReason.PROMISE_CHAIN
            return None
        case _:
            return None


def declarator_reason(declarator: Node, kind: str) -> DynamicReason | None:
    """Dynamic reason for a single declarator of a ``kind`` declaration."""
    if kind != "const":
        return DynamicReason.NOT_CONST
    reason = initializer_reason(declarator.child_by_field_name("value"))
    if reason is not None:
        return reason
    name = declarator.child_by_field_name("name")
    if name is not None and name.type in ("array_pattern", "object_pattern"):
        return DynamicReason.DESTRUCTURING
    return None


def dynamic_reason(declaration: Node) -> DynamicReason | None:
    """
    First rule excluding a ``lexical_declaration`` / ``variable_declaration``.

    Rules are checked in order: non-``const`` kind, hook call, fetch/axios/api
    call, ``await``, promise chain, destructuring pattern.
    """
    kind = declaration_kind(declaration)
    if kind != "const":
        return DynamicReason.NOT_CONST
    for declarator in declarators(declaration):
        reason = declarator_reason(declarator, kind)
        if reason is not None:
            return reason
    return None


def is_dynamic_declaration(declaration: Node) -> bool:
    return dynamic_reason(declaration) is not None
