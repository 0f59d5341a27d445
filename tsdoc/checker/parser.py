"""Tree-sitter parsing of TypeScript declaration and source files."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

TS_LANGUAGE = Language(tsts.language_typescript())
TSX_LANGUAGE = Language(tsts.language_tsx())

_parsers: dict[str, Parser] = {}

_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")
_RE_WHITESPACE = re.compile(r"\s+")
_RE_BRACKET_SPACE = re.compile(r"([(\[<]) | ([)\]>])")


def _get_parser(path: Path) -> Parser:
    key = "tsx" if path.suffix == ".tsx" else "typescript"
    parser = _parsers.get(key)
    if parser is None:
        parser = Parser(TSX_LANGUAGE if key == "tsx" else TS_LANGUAGE)
        _parsers[key] = parser
    return parser


def is_declaration_path(path: Path) -> bool:
    """Return True for .d.ts / .d.mts / .d.cts files."""
    return path.name.endswith(_DECLARATION_SUFFIXES)


@dataclass(eq=False)
class SourceFile:
    """A parsed file of the declaration universe."""

    path: Path
    source: bytes
    tree: Tree
    is_declaration_file: bool

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def file_name(self) -> str:
        return str(self.path)

    @property
    def is_module(self) -> bool:
        """External module files have a top-level import or export."""
        for child in self.root.named_children:
            if child.type in ("import_statement", "export_statement"):
                return True
            if child.type == "import_alias" and child.children and child.children[0].type == "export":
                return True
        return False

    def line_of(self, node: Node) -> int:
        """1-based line of the node's first token."""
        return node.start_point[0] + 1

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def parse_source_file(path: str | Path) -> SourceFile:
    """Read and parse a file. Raises OSError if it cannot be read."""
    path = Path(path)
    source = path.read_bytes()
    tree = _get_parser(path).parse(source)
    return SourceFile(
        path=path,
        source=source,
        tree=tree,
        is_declaration_file=is_declaration_path(path),
    )


def parse_source_text(text: str, file_name: str = "input.d.ts") -> SourceFile:
    """Parse in-memory text as if it were read from ``file_name``."""
    path = Path(file_name)
    source = text.encode("utf-8")
    return SourceFile(
        path=path,
        source=source,
        tree=_get_parser(path).parse(source),
        is_declaration_file=is_declaration_path(path),
    )


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def iter_comments(node: Node) -> Iterator[Node]:
    """Yield comment nodes nested anywhere under ``node``."""
    for child in node.children:
        if child.type == "comment":
            yield child
        else:
            yield from iter_comments(child)


def type_text(node: Optional[Node]) -> str:
    """Render a type node as compact single-line text, comments removed."""
    if node is None:
        return ""
    raw = node.text or b""
    start = node.start_byte
    pieces = []
    cursor = 0
    for comment in iter_comments(node):
        pieces.append(raw[cursor : comment.start_byte - start])
        cursor = comment.end_byte - start
    pieces.append(raw[cursor:])
    text = b" ".join(pieces).decode("utf-8", errors="replace")
    return normalize_whitespace(text)


def normalize_whitespace(text: str) -> str:
    text = _RE_WHITESPACE.sub(" ", text).strip()
    return _RE_BRACKET_SPACE.sub(lambda m: m.group(1) or m.group(2), text)


def name_of(node: Node) -> Optional[str]:
    """Return the declared name of a node with a ``name`` field, unquoted."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    return unquote(node_text(name_node))


def unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


def has_token(node: Node, token: str) -> bool:
    """True when an anonymous ``token`` (``static``, ``readonly``, ``?``...) is a direct child."""
    name_node = node.child_by_field_name("name")
    for child in node.children:
        if name_node is not None and token in ("static", "readonly", "declare", "abstract") \
                and child.start_byte >= name_node.start_byte:
            break
        if not child.is_named and child.type == token:
            return True
        if child.type == "accessibility_modifier" and node_text(child) == token:
            return True
    return False
