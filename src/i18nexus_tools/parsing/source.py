"""
Source parser and printer adapter.

Source files are parsed with tree-sitter (JavaScript grammar for ``.js``/``.jsx``,
TypeScript and TSX grammars for ``.ts``/``.tsx``). The tree is never mutated:
modifications are recorded as byte-range replacements on a ``SourceEditor`` and
rendered back onto the original text, which keeps formatting and comments intact.

Usage Examples:
    Parse a file and wrap a node:
        >>> parsed = parse_file(Path("src/App.tsx"))
        >>> editor = SourceEditor(parsed.source)
        >>> editor.replace(node, f"t({editor.text_of(node)})")
        >>> new_code = editor.render()
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from functools import cache
from pathlib import Path

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..utils.core.exceptions import SourceParseError

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")


@cache
def _languages() -> dict[str, Language]:
    """Lazy-load the grammars, shared by every parser."""
    js_lang = Language(ts_javascript.language())
    return {
        ".ts": Language(ts_typescript.language_typescript()),
        ".tsx": Language(ts_typescript.language_tsx()),
        ".js": js_lang,
        ".jsx": js_lang,
        ".mjs": js_lang,
        ".cjs": js_lang,
    }


def get_parser(suffix: str) -> Parser:
    """
    Get a parser for a file extension.

    Unknown extensions are parsed as TSX, the most permissive grammar.
    """
    languages = _languages()
    return Parser(languages.get(suffix.lower(), languages[".tsx"]))


@dataclass
class ParsedSource:
    """A parsed source file."""

    path: Path
    source: bytes
    tree: Tree
    lines: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.lines = self.source.decode("utf-8", errors="replace").split("\n")

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def text(self) -> str:
        return self.source.decode("utf-8")


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def parse_source(code: str | bytes, path: Path) -> ParsedSource:
    """
    Parse source text.

    Args:
        code: Source text
        path: File path, used for grammar selection and error context

    Returns:
        The parsed source

    Raises:
        SourceParseError: If the tree contains syntax errors
    """
    source = code.encode("utf-8") if isinstance(code, str) else code
    tree = get_parser(path.suffix).parse(source)

    if tree.root_node.has_error:
        error = _first_error(tree.root_node)
        line = error.start_point[0] + 1 if error is not None else None
        raise SourceParseError(f"Syntax error in {path} at line {line}", file_path=path, line=line)

    return ParsedSource(path=path, source=source, tree=tree)


def parse_file(path: Path) -> ParsedSource:
    """
    Read and parse a source file.

    Raises:
        SourceParseError: If the file cannot be read or contains syntax errors
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        raise SourceParseError(f"Cannot read {path}: {e}", file_path=path) from e
    return parse_source(source, path)


@dataclass(frozen=True)
class Edit:
    """A pending replacement of ``source[start:end]``."""

    start: int
    end: int
    text: str
    order: int


class SourceEditor:
    """
    Collects non-overlapping text replacements and renders the result.

    A replacement that covers earlier replacements absorbs them, so callers
    working bottom-up build the outer text with ``text_of`` (which already
    includes the inner edits) and then replace the outer range. Insertions
    sitting exactly on the boundary of a replaced range are kept.
    """

    def __init__(self, source: bytes) -> None:
        self.source: bytes = source
        self._edits: list[Edit] = []
        self._counter: int = 0

    @property
    def changed(self) -> bool:
        return bool(self._edits)

    @staticmethod
    def _inside(edit: Edit, start: int, end: int) -> bool:
        if edit.start == edit.end:
            return start < edit.start < end
        return start <= edit.start and edit.end <= end

    def replace_range(self, start: int, end: int, text: str) -> None:
        kept: list[Edit] = []
        for edit in self._edits:
            if start < end and self._inside(edit, start, end):
                continue
            if edit.start < end and start < edit.end:
                raise ValueError(
                    f"Edit [{start}, {end}) overlaps an existing edit [{edit.start}, {edit.end})"
                )
            kept.append(edit)
        self._counter += 1
        kept.append(Edit(start, end, text, self._counter))
        self._edits = kept

    def replace(self, node: Node, text: str) -> None:
        self.replace_range(node.start_byte, node.end_byte, text)

    def insert(self, position: int, text: str) -> None:
        self.replace_range(position, position, text)

    def _apply(self, start: int, end: int, edits: list[Edit]) -> str:
        parts: list[bytes] = []
        cursor = start
        for edit in sorted(edits, key=lambda e: (e.start, e.order)):
            parts.append(self.source[cursor : edit.start])
            parts.append(edit.text.encode("utf-8"))
            cursor = edit.end
        parts.append(self.source[cursor:end])
        return b"".join(parts).decode("utf-8")

    def text_range(self, start: int, end: int) -> str:
        """Text of ``source[start:end]`` with the edits inside that range applied."""
        return self._apply(start, end, [e for e in self._edits if self._inside(e, start, end)])

    def text_of(self, node: Node) -> str:
        return self.text_range(node.start_byte, node.end_byte)

    def render(self) -> str:
        return self._apply(0, len(self.source), self._edits)


# JavaScript string helpers

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


_SURROGATE_RE = re.compile("[\ud800-\udfff]")
MAX_CODE_POINT = 0x10FFFF


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        code_point = int(seq[2:-1], 16)
        if code_point > MAX_CODE_POINT:
            raise SourceParseError(f"Undefined Unicode code point escape \\{seq}")
        return chr(code_point)
    if seq.startswith("u") and len(seq) == 5:
        return chr(int(seq[1:], 16))
    if seq.startswith("x") and len(seq) == 3:
        return chr(int(seq[1:], 16))
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if seq[0] in "01234567":
        return chr(int(seq, 8))
    if seq in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        # line continuation
        return ""
    return seq


def decode_js_escapes(raw: str) -> str:
    """
    Decode the escape sequences of a JavaScript string or template chunk.

    ``\\uD83D\\uDE00`` style surrogate pairs are joined into one character.

    Raises:
        SourceParseError: For code points above U+10FFFF and unpaired surrogates
    """
    if "\\" not in raw:
        return raw
    decoded = _ESCAPE_RE.sub(_unescape, raw)
    if _SURROGATE_RE.search(decoded) is None:
        return decoded
    try:
        return decoded.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError as e:
        raise SourceParseError(f"Unpaired surrogate escape in {raw!r}") from e


def js_string_literal(value: str) -> str:
    """Render ``value`` as a double-quoted JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)
