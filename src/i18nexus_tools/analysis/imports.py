"""
Relative-import mapping and module path resolution.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from tree_sitter import Node

from ..parsing.nodes import node_text, string_value

logger = logging.getLogger(__name__)

RESOLVE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


class ImportedName(NamedTuple):
    """A local name bound by a relative import."""

    path: Path
    exported_name: str


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith("./") or specifier.startswith("../")


def resolve_import_path(specifier: str, importer: Path) -> Path | None:
    """
    Resolve a relative module specifier against the importing file.

    Tries the exact path, then each of ``.ts``, ``.tsx``, ``.js``, ``.jsx``
    appended, then ``index.*`` inside a directory.

    Returns:
        Absolute path of the first existing file, or None
    """
    base = (importer.parent / specifier).resolve()
    if base.is_file():
        return base
    for extension in RESOLVE_EXTENSIONS:
        candidate = base.with_name(base.name + extension)
        if candidate.is_file():
            return candidate
    if base.is_dir():
        for extension in RESOLVE_EXTENSIONS:
            candidate = base / f"index{extension}"
            if candidate.is_file():
                return candidate
    return None


def parse_imports(root: Node, importer: Path) -> dict[str, ImportedName]:
    """
    Map local names bound by relative imports to the resolved file and the
    name exported there. Unresolvable specifiers are logged and skipped.
    """
    imported: dict[str, ImportedName] = {}
    for statement in root.named_children:
        if statement.type != "import_statement":
            continue
        specifier = string_value(statement.child_by_field_name("source"))
        if specifier is None or not is_relative_specifier(specifier):
            continue

        names = list(_import_bindings(statement))
        if not names:
            continue

        path = resolve_import_path(specifier, importer)
        if path is None:
            logger.warning(f"Could not resolve import '{specifier}' from {importer}")
            continue

        for local, exported in names:
            imported[local] = ImportedName(path, exported)
    return imported


def _import_bindings(statement: Node) -> list[tuple[str, str]]:
    bindings: list[tuple[str, str]] = []
    for clause in statement.named_children:
        if clause.type != "import_clause":
            continue
        for part in clause.named_children:
            match part.type:
                case "identifier":
                    bindings.append((node_text(part), "default"))
                case "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        name = specifier.child_by_field_name("name")
                        alias = specifier.child_by_field_name("alias")
                        local = alias if alias is not None else name
                        bindings.append((node_text(local), _specifier_name(name)))
                case _:
                    # namespace imports are not resolved
                    continue
    return bindings


def _specifier_name(node: Node | None) -> str:
    # import { "quoted name" as x } from "./m"
    if node is not None and node.type == "string":
        return string_value(node) or ""
    return node_text(node)
