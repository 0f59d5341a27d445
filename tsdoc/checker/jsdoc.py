"""JSDoc comment extraction and parsing."""

import re
from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from .parser import node_text

_RE_TAG_START = re.compile(r"^@([A-Za-z][\w-]*)\s?(.*)$")
_RE_LINE_PREFIX = re.compile(r"^\s*\* ?")
_RE_PARAM = re.compile(
    r"^(?:\{[^}]*\}\s*)?"            # optional {type}
    r"(?:\[(?P<opt>[^\]=]+)(?:=[^\]]*)?\]|(?P<name>[\w$.]+))"
    r"(?:\s*-\s*|\s+|$)"
    r"(?P<text>.*)$",
    re.DOTALL,
)

# Wrapper nodes whose leading comment documents the declaration they contain.
_WRAPPERS = frozenset({
    "export_statement",
    "ambient_declaration",
    "lexical_declaration",
    "variable_declaration",
    "expression_statement",
})


@dataclass(frozen=True)
class DocTag:
    """A ``@name text`` annotation."""

    name: str
    text: str = ""

    def render(self) -> str:
        return f"@{self.name} {self.text}".rstrip()


@dataclass(frozen=True)
class DocComment:
    """Parsed ``/** ... */`` comment."""

    body: str = ""
    tags: tuple[DocTag, ...] = ()

    def tags_named(self, *names: str) -> list[DocTag]:
        return [tag for tag in self.tags if tag.name in names]

    def param_doc(self, param_name: str) -> Optional[str]:
        """Return the description of ``@param param_name``."""
        for tag in self.tags_named("param", "arg", "argument"):
            parsed = parse_param_tag(tag.text)
            if parsed and parsed[0] == param_name:
                return parsed[1] or None
        return None

    def returns_doc(self) -> Optional[str]:
        for tag in self.tags_named("returns", "return"):
            return tag.text or None
        return None

    @property
    def is_empty(self) -> bool:
        return not self.body and not self.tags


def parse_param_tag(text: str) -> Optional[tuple[str, str]]:
    """Split ``@param`` text into (name, description)."""
    match = _RE_PARAM.match(text.strip())
    if not match:
        return None
    name = (match.group("opt") or match.group("name") or "").strip()
    if not name:
        return None
    return name, match.group("text").strip()


def parse_jsdoc(raw: str) -> Optional[DocComment]:
    """Parse a raw comment. Returns None unless it is a ``/** */`` block.

    Body text is the prose before the first tag. Tag text keeps line breaks
    and indentation (after the leading `` * ``) so code samples in
    ``@example`` survive verbatim.
    """
    if not raw.startswith("/**") or raw.startswith("/***") or not raw.endswith("*/"):
        return None
    inner = raw[3:-2]
    lines = [_RE_LINE_PREFIX.sub("", line, count=1) for line in inner.split("\n")]
    if lines and not lines[0].strip():
        lines = lines[1:]
    if lines:
        lines[0] = lines[0].lstrip()

    body_lines: list[str] = []
    tags: list[tuple[str, list[str]]] = []
    in_fence = False
    for line in lines:
        stripped = line.strip()
        match = None if in_fence else _RE_TAG_START.match(stripped)
        if match:
            tags.append((match.group(1), [match.group(2)]))
        elif tags:
            tags[-1][1].append(line.rstrip())
        else:
            body_lines.append(line.rstrip())
        if stripped.startswith("```"):
            in_fence = not in_fence

    return DocComment(
        body="\n".join(body_lines).strip(),
        tags=tuple(DocTag(name, _join_tag_lines(text_lines)) for name, text_lines in tags),
    )


def _join_tag_lines(lines: list[str]) -> str:
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    text = "\n".join(lines)
    return text.strip("\n").rstrip()


def doc_anchor(node: Node) -> Node:
    """Climb through wrapper statements to the node a leading comment sits on."""
    current = node
    if current.type == "variable_declarator" and current.parent is not None:
        current = current.parent
    while current.parent is not None and current.parent.type in _WRAPPERS:
        current = current.parent
    return current


def find_doc_comment(node: Node) -> Optional[DocComment]:
    """Return the JSDoc block immediately preceding a declaration node."""
    anchor = doc_anchor(node)
    sibling = anchor.prev_sibling
    while sibling is not None and not sibling.is_named and sibling.type in (";", ","):
        sibling = sibling.prev_sibling
    if sibling is None or sibling.type != "comment":
        return None
    return parse_jsdoc(node_text(sibling))


def first_line(text: Optional[str]) -> str:
    if not text:
        return ""
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
