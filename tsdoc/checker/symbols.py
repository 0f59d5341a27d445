"""Symbols and declarations produced by the binder."""

from dataclasses import dataclass, field
from enum import Flag
from functools import cached_property
from typing import Optional

from tree_sitter import Node

from .jsdoc import DocComment, find_doc_comment
from .parser import SourceFile


class SymbolFlags(Flag):
    NONE = 0
    VARIABLE = 1
    PROPERTY = 2
    ENUM_MEMBER = 4
    FUNCTION = 8
    CLASS = 16
    INTERFACE = 32
    ENUM = 64
    MODULE = 128
    TYPE_ALIAS = 256
    METHOD = 512
    ALIAS = 1024
    OPTIONAL = 2048
    TYPE_PARAMETER = 4096

    VALUE = VARIABLE | PROPERTY | ENUM_MEMBER | FUNCTION | CLASS | ENUM | MODULE | METHOD
    TYPE = CLASS | INTERFACE | ENUM | TYPE_ALIAS | TYPE_PARAMETER
    NAMESPACE = MODULE | ENUM


def node_key(node: Node, source_file: SourceFile) -> tuple:
    """Stable identity for a node (tree-sitter hands out fresh Node objects)."""
    return (source_file.file_name, node.start_byte, node.end_byte, node.type)


@dataclass(eq=False)
class Declaration:
    """One syntactic declaration of a symbol."""

    node: Node
    source_file: SourceFile

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def line(self) -> int:
        return self.source_file.line_of(self.node)

    @property
    def key(self) -> tuple:
        return node_key(self.node, self.source_file)

    @cached_property
    def doc(self) -> Optional[DocComment]:
        if self.node.type == "program":
            return None
        return find_doc_comment(self.node)


@dataclass(eq=False)
class AliasTarget:
    """Where an import/export alias points.

    kind is one of:
        "named"     - member ``name`` of module ``module``
        "namespace" - the module itself (``import * as x``, ``export * as x``)
        "default"   - the default export of ``module``
        "require"   - ``import x = require("m")``
        "local"     - a name in ``container``'s scope (``export { a }``)
        "entity"    - a dotted entity path (``import a = B.C``)
        "module"    - a bound module symbol (``export as namespace X``)
    """

    kind: str
    source_file: SourceFile
    module: Optional[str] = None
    name: Optional[str] = None
    path: list[str] = field(default_factory=list)
    container: Optional["Symbol"] = None
    node: Optional[Node] = None
    symbol: Optional["Symbol"] = None


class Symbol:
    """A named entity; several declarations may merge into one symbol."""

    def __init__(self, name: str, flags: SymbolFlags = SymbolFlags.NONE, parent: Optional["Symbol"] = None):
        self.name = name
        self.flags = flags
        self.parent = parent
        self.declarations: list[Declaration] = []
        # Instance side: interface/class members, object type literal members
        self.members: dict[str, Symbol] = {}
        # Namespace/module exports, class statics, enum members
        self.exports: dict[str, Symbol] = {}
        # Every name declared in a module or namespace body
        self.locals: dict[str, Symbol] = {}
        self.constructors: list[Declaration] = []
        self.export_stars: list[tuple[str, SourceFile]] = []
        self.export_equals: Optional[tuple[Node, SourceFile]] = None
        self.alias: Optional[AliasTarget] = None
        self.module_name: Optional[str] = None

    def __repr__(self) -> str:
        return f"Symbol({self.name!r}, {self.flags})"

    def add_declaration(self, flags: SymbolFlags, declaration: Optional[Declaration]) -> None:
        self.flags |= flags
        if declaration is not None:
            self.declarations.append(declaration)

    def has(self, flags: SymbolFlags) -> bool:
        return bool(self.flags & flags)

    @property
    def value_declaration(self) -> Optional[Declaration]:
        """First declaration with a value meaning (var, function, class...)."""
        for decl in self.declarations:
            if decl.type in _VALUE_DECLARATION_TYPES:
                return decl
        return None

    @property
    def primary_declaration(self) -> Optional[Declaration]:
        """The value declaration, else the first declaration."""
        value = self.value_declaration
        if value is not None:
            return value
        return self.declarations[0] if self.declarations else None

    @property
    def is_optional(self) -> bool:
        return self.has(SymbolFlags.OPTIONAL)


_VALUE_DECLARATION_TYPES = frozenset({
    "variable_declarator",
    "function_declaration",
    "function_signature",
    "generator_function_declaration",
    "class_declaration",
    "abstract_class_declaration",
    "enum_declaration",
    "property_signature",
    "public_field_definition",
    "method_signature",
    "method_definition",
    "abstract_method_signature",
    "property_identifier",
    "enum_assignment",
})
