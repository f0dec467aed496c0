"""
Translation wrapper.

Rewrites React component source so that hardcoded user-facing text goes
through the translation function:

- string literals: ``"안녕"`` -> ``t("안녕")`` (``{t("안녕")}`` in JSX attributes)
- JSX text: ``<p>안녕</p>`` -> ``<p>{t("안녕")}</p>``
- template literals: ``\\`총 ${count}개\\``` -> ``t("총 {{count}}개", { count })``
- constant member access: ``{item.label}`` -> ``{t(item.label)}``

Every modified client component gets ``const { t } = useTranslation();`` and
the file gets the hook import. Components calling the server accessor
(``getServerTranslation``) are left without a hook.

Usage Examples:
    Wrap a project:
        >>> wrapper = TranslationWrapper(WrapperSettings(source_pattern="app/**/*.tsx"))
        >>> report = wrapper.process_files()

    Transform a single source text:
        >>> outcome = TranslationWrapper().transform_source(code, Path("Page.tsx"))
        >>> outcome.code
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from ..analysis.bindings import BindingKind
from ..analysis.context import AnalysisContext, AnalysisSession
from ..analysis.heuristics import TextPredicate, make_text_predicate
from ..config.schema import WrapperSettings
from ..parsing.nodes import (
    FUNCTION_TYPES,
    function_name,
    is_call_to,
    is_component_name,
    is_translation_call,
    iter_descendants,
    member_parts,
    node_text,
    string_value,
    unwrap_expression,
)
from ..parsing.source import ParsedSource, SourceEditor, js_string_literal, parse_source
from ..utils.core.exceptions import OutputPathError, SourceParseError
from .files import find_source_files
from .ignore import has_ignore_directive
from .interpolation import build_interpolation, template_chunks
from .locale_writer import write_text_atomic

logger = logging.getLogger(__name__)

# Subtrees that never hold rendered text.
SKIPPED_SUBTREES = frozenset(
    {
        "type_annotation",
        "type_arguments",
        "type_parameters",
        "type_alias_declaration",
        "interface_declaration",
        "enum_declaration",
        "literal_type",
        "import_statement",
        "jsx_closing_element",
    }
)


@dataclass
class WrapOutcome:
    """Result of transforming one source file."""

    path: Path
    original: str
    code: str
    wrapped: int = 0
    hooks_added: list[str] = field(default_factory=list)
    server_components: list[str] = field(default_factory=list)
    import_added: bool = False

    @property
    def changed(self) -> bool:
        return self.code != self.original

    def diff(self) -> str:
        return "".join(
            difflib.unified_diff(
                self.original.splitlines(keepends=True),
                self.code.splitlines(keepends=True),
                fromfile=str(self.path),
                tofile=str(self.path),
            )
        )


@dataclass
class WrapReport:
    """Summary of a wrapper run."""

    files_processed: int = 0
    modified: list[WrapOutcome] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def modified_files(self) -> list[Path]:
        return [outcome.path for outcome in self.modified]


class _FileTransform:
    """Wrapping pass over one parsed file."""

    def __init__(self, settings: WrapperSettings, context: AnalysisContext, parsed: ParsedSource) -> None:
        self.settings = settings
        self.context = context
        self.parsed = parsed
        self.editor = SourceEditor(parsed.source)
        self.fn = settings.translation_function
        self.is_target_text = context.session.is_target_text
        self.wrapped = 0

    def run(self) -> WrapOutcome:
        outcome = WrapOutcome(path=self.parsed.path, original=self.parsed.text, code=self.parsed.text)

        modified: list[tuple[Node, str]] = []
        for component in self.find_components(self.parsed.root):
            name = function_name(component) or "<anonymous>"
            before = self.wrapped
            body = component.child_by_field_name("body")
            if body is not None:
                self.visit(body)
            if self.wrapped > before:
                logger.debug(f"{self.parsed.path}: wrapped {self.wrapped - before} nodes in {name}")
                modified.append((component, name))

        if not modified:
            return outcome

        for component, name in modified:
            if self.is_server_component(component):
                logger.debug(f"{self.parsed.path}: {name} is a server component, no hook injected")
                outcome.server_components.append(name)
                continue
            if self.inject_hook(component):
                outcome.hooks_added.append(name)

        if outcome.hooks_added:
            outcome.import_added = self.ensure_import()

        outcome.wrapped = self.wrapped
        outcome.code = self.editor.render()
        return outcome

    # Component discovery

    @staticmethod
    def is_component(function: Node) -> bool:
        if function.type == "method_definition":
            return False
        name = function_name(function)
        return name is not None and is_component_name(name)

    def find_components(self, root: Node) -> list[Node]:
        """Outermost component functions; nested components are handled with their parent."""
        components: list[Node] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in FUNCTION_TYPES and self.is_component(node):
                components.append(node)
                continue
            stack.extend(reversed(node.children))
        return components

    # Wrapping

    def visit(self, node: Node) -> None:
        """Post-order walk: inner rewrites happen before their containers are rebuilt."""
        if node.type in SKIPPED_SUBTREES or is_translation_call(node, self.fn):
            return
        if node.type == "call_expression":
            arguments = node.child_by_field_name("arguments")
            if arguments is not None and arguments.type == "template_string":
                # tagged template: only the tag is visited
                tag = node.child_by_field_name("function")
                if tag is not None:
                    self.visit(tag)
                return

        for child in node.children:
            self.visit(child)

        match node.type:
            case "string":
                self.wrap_string(node)
            case "template_string":
                self.wrap_template(node)
            case "jsx_text":
                self.wrap_jsx_text(node)
            case "jsx_expression":
                self.wrap_member_expression(node)
            case _:
                pass

    def ignored(self, node: Node) -> bool:
        if has_ignore_directive(node, self.parsed):
            logger.debug(f"{self.parsed.path}:{node.start_point[0] + 1}: skipped by i18n-ignore")
            return True
        return self.shadowed(node)

    def shadowed(self, node: Node) -> bool:
        """
        True when the translation function name is rebound locally at ``node``
        (``items.map((t) => ...)``), so a wrapping call would not reach it.

        Imports and variables initialized from a call (``useTranslation()``,
        ``await getServerTranslation()``, ``useI18n().t``) count as the
        translation function itself.
        """
        binding = self.context.session.resolver.resolve(self.fn, node)
        if binding is None or binding.kind is BindingKind.IMPORT:
            return False
        if binding.kind is BindingKind.VARIABLE and binding.declarator is not None:
            value = unwrap_expression(binding.declarator.child_by_field_name("value"))
            if value is not None and value.type == "await_expression":
                value = unwrap_expression(value.named_children[0] if value.named_children else None)
            if value is not None and value.type == "member_expression":
                value = unwrap_expression(value.child_by_field_name("object"))
            if value is not None and value.type == "call_expression":
                return False
        logger.warning(
            f"{self.parsed.path}:{node.start_point[0] + 1}: '{self.fn}' is a local "
            + f"{binding.kind.value} here, text left unwrapped"
        )
        return True

    def wrap_string(self, node: Node) -> None:
        value = string_value(node)
        if value is None or not value.strip() or not self.is_target_text(value):
            return

        parent = node.parent
        if parent is None:
            return
        if parent.type in ("import_statement", "export_statement"):
            return

        is_key = parent.type == "pair" and parent.child_by_field_name("key") == node
        if self.ignored(node):
            return

        if parent.type == "jsx_attribute":
            # attribute strings are not JavaScript escaped
            raw = node_text(node)[1:-1]
            self.editor.replace(node, f"{{{self.fn}({js_string_literal(raw)})}}")
        elif is_key:
            self.editor.replace(node, f"[{self.fn}({node_text(node)})]")
        else:
            self.editor.replace(node, f"{self.fn}({node_text(node)})")
        self.wrapped += 1

    def wrap_template(self, node: Node) -> None:
        chunks = template_chunks(node, self.parsed.source)
        if not any(self.is_target_text(chunk) for chunk in chunks):
            return
        if self.ignored(node):
            return

        if len(chunks) == 1:
            self.editor.replace(node, f"{self.fn}({js_string_literal(chunks[0])})")
        else:
            interpolation = build_interpolation(node, self.editor)
            self.editor.replace(node, interpolation.render_call(self.fn))
        self.wrapped += 1

    def wrap_jsx_text(self, node: Node) -> None:
        raw = node_text(node)
        text = raw.strip()
        if not text or not self.is_target_text(text):
            return
        if self.ignored(node):
            return

        leading = raw[: len(raw) - len(raw.lstrip())]
        trailing = raw[len(raw.rstrip()) :]
        self.editor.replace(node, f"{leading}{{{self.fn}({js_string_literal(text)})}}{trailing}")
        self.wrapped += 1

    def wrap_member_expression(self, container: Node) -> None:
        expressions = [child for child in container.named_children if child.type != "comment"]
        if len(expressions) != 1:
            return
        expression = expressions[0]
        parts = member_parts(expression)
        if parts is None:
            return
        obj, prop = parts
        obj = unwrap_expression(obj)
        if obj is None or obj.type != "identifier":
            return
        if not self.context.should_wrap_member(obj, prop):
            return
        if self.ignored(container):
            return

        self.editor.replace(expression, f"{self.fn}({self.editor.text_of(expression)})")
        self.wrapped += 1

    # Hook injection

    def is_server_component(self, function: Node) -> bool:
        accessor = self.settings.server_translation_function
        return any(is_call_to(node, accessor) for node in iter_descendants(function))

    def inject_hook(self, function: Node) -> bool:
        body = function.child_by_field_name("body")
        if body is None:
            return False

        if self.context.session.resolver.has_binding(self.fn, body):
            logger.debug(f"{self.parsed.path}: '{self.fn}' already bound in {function_name(function)}")
            return False
        if any(is_call_to(node, self.settings.hook_name) for node in iter_descendants(body)):
            return False

        declaration = f"const {{ {self.fn} }} = {self.settings.hook_name}();"
        indent = self._line_indent(function.start_point[0])

        if body.type == "statement_block":
            first = body.named_children[0] if body.named_children else None
            if first is None:
                self.editor.insert(body.start_byte + 1, f"\n{indent}  {declaration}\n{indent}")
            elif first.start_point[0] == body.start_point[0]:
                self.editor.insert(body.start_byte + 1, f" {declaration}")
            else:
                self.editor.insert(body.start_byte + 1, f"\n{self._line_indent(first.start_point[0])}{declaration}")
        else:
            expression = self.editor.text_of(body)
            self.editor.replace(
                body,
                f"{{\n{indent}  {declaration}\n{indent}  return {expression};\n{indent}}}",
            )
        return True

    def _line_indent(self, row: int) -> str:
        line = self.parsed.lines[row]
        return line[: len(line) - len(line.lstrip())]

    def ensure_import(self) -> bool:
        """Add the hook import, extending an existing import from the same module when possible."""
        hook = self.settings.hook_name
        module = self.settings.translation_import_source
        root = self.parsed.root

        imports = [child for child in root.named_children if child.type == "import_statement"]
        for statement in imports:
            for specifier in iter_descendants(statement):
                if specifier.type != "import_specifier":
                    continue
                alias = specifier.child_by_field_name("alias")
                local = alias if alias is not None else specifier.child_by_field_name("name")
                if node_text(local) == hook:
                    return False

        for statement in imports:
            if string_value(statement.child_by_field_name("source")) != module:
                continue
            clause = next((c for c in statement.named_children if c.type == "import_clause"), None)
            if clause is None:
                continue
            named = next((c for c in clause.named_children if c.type == "named_imports"), None)
            if named is not None:
                specifiers = [c for c in named.named_children if c.type == "import_specifier"]
                if specifiers:
                    self.editor.insert(specifiers[-1].end_byte, f", {hook}")
                else:
                    self.editor.insert(named.start_byte + 1, f" {hook} ")
                return True
            default = next((c for c in clause.named_children if c.type == "identifier"), None)
            if default is not None and len(clause.named_children) == 1:
                self.editor.insert(default.end_byte, f", {{ {hook} }}")
                return True

        line = f"import {{ {hook} }} from {js_string_literal(module)};"
        anchor = self._directive_end(root)
        if anchor is None:
            self.editor.insert(0, f"{line}\n")
        else:
            self.editor.insert(anchor, f"\n{line}")
        return True

    @staticmethod
    def _directive_end(root: Node) -> int | None:
        """End of the leading ``"use client"`` style directives (or hashbang)."""
        end: int | None = None
        for child in root.named_children:
            if child.type == "hash_bang_line":
                end = child.end_byte
                continue
            if child.type == "comment":
                continue
            if child.type == "expression_statement":
                named = child.named_children
                if len(named) == 1 and named[0].type == "string":
                    end = child.end_byte
                    continue
            break
        return end


class TranslationWrapper:
    """Wraps hardcoded user-facing text in translation calls."""

    def __init__(
        self,
        settings: WrapperSettings | None = None,
        is_target_text: TextPredicate | None = None,
        root: Path | None = None,
    ) -> None:
        self.settings: WrapperSettings = settings if settings is not None else WrapperSettings()
        self.is_target_text: TextPredicate = (
            is_target_text if is_target_text is not None else make_text_predicate(self.settings.target_text_pattern)
        )
        self.root: Path | None = root

    def new_session(self) -> AnalysisSession:
        return AnalysisSession(self.is_target_text, self.settings.constant_patterns)

    def transform_source(self, source: str, path: Path, session: AnalysisSession | None = None) -> WrapOutcome:
        """
        Transform one source text.

        Raises:
            SourceParseError: If the source cannot be parsed or holds an invalid escape
        """
        parsed = parse_source(source, path)
        context = (session if session is not None else self.new_session()).context_for(parsed)
        return _FileTransform(self.settings, context, parsed).run()

    def process_files(self) -> WrapReport:
        """
        Wrap every file matching the source pattern.

        Files that cannot be read or parsed are logged and skipped.

        Raises:
            NoSourceFilesError: If the pattern matches no file
            OutputPathError: If a modified file cannot be written
        """
        files = find_source_files(self.settings.source_pattern, self.root)
        logger.info(f"Found {len(files)} files to process")

        session = self.new_session()
        report = WrapReport()

        for path in files:
            try:
                source = path.read_text(encoding="utf-8")
                outcome = self.transform_source(source, path, session)
            except SourceParseError as e:
                logger.error(f"Skipping {path}: {e}")
                report.skipped.append(path)
                continue
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Skipping {path}: cannot read file: {e}")
                report.skipped.append(path)
                continue

            report.files_processed += 1
            if not outcome.changed:
                continue

            report.modified.append(outcome)
            if self.settings.dry_run:
                logger.info(f"{path} - would be modified ({outcome.wrapped} wrapped)")
                logger.debug(outcome.diff())
                continue

            try:
                write_text_atomic(path, outcome.code)
            except OSError as e:
                raise OutputPathError(f"Cannot write {path}: {e}", path) from e
            logger.info(f"{path} - modified ({outcome.wrapped} wrapped)")

        logger.info(
            f"Processed {report.files_processed} files: "
            + f"{len(report.modified)} modified, {len(report.skipped)} skipped"
        )
        return report
