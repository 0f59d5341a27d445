"""Symbol path resolution.

Root search walks the syntax tree of each declaration file in universe
order. Each subtree either yields an entity or nothing; the first subtree
with a result wins, so no search state is shared between calls. When a
file's declarations don't match, its module-level exports are tried before
moving on to the next file.
"""

import logging
from enum import Enum
from typing import Optional

from tree_sitter import Node

from ..checker import Checker, Declaration, SourceFile, Symbol, SymbolFlags
from ..checker.parser import name_of, node_text, unquote
from ..checker.types import ObjectType
from ..errors import MemberMissingError, NotFoundError
from ..models import EntityKind, ResolvedEntity, ResolveResult
from ..universe import DeclarationUniverse
from .base import Query

logger = logging.getLogger(__name__)


class NodeShape(str, Enum):
    """Declaration shapes the root search distinguishes."""

    INTERFACE = "interface"
    CLASS = "class"
    TYPE_ALIAS = "type-alias"
    VARIABLE = "variable"
    MODULE = "module"
    NAMED_EXPORT = "named-export"
    OTHER = "other"


_SHAPES = {
    "interface_declaration": NodeShape.INTERFACE,
    "class_declaration": NodeShape.CLASS,
    "abstract_class_declaration": NodeShape.CLASS,
    "type_alias_declaration": NodeShape.TYPE_ALIAS,
    "lexical_declaration": NodeShape.VARIABLE,
    "variable_declaration": NodeShape.VARIABLE,
    "module": NodeShape.MODULE,
    "internal_module": NodeShape.MODULE,
    "export_specifier": NodeShape.NAMED_EXPORT,
}

# Only these nodes can contain further top-level-ish declarations.
_CONTAINERS = frozenset({
    "program",
    "statement_block",
    "export_statement",
    "export_clause",
    "ambient_declaration",
    "expression_statement",
    "module",
    "internal_module",
})

_KINDS = {
    "interface_declaration": EntityKind.INTERFACE,
    "class_declaration": EntityKind.CLASS,
    "abstract_class_declaration": EntityKind.CLASS,
    "type_alias_declaration": EntityKind.TYPE_ALIAS,
    "function_declaration": EntityKind.FUNCTION,
    "function_signature": EntityKind.FUNCTION,
    "generator_function_declaration": EntityKind.FUNCTION,
    "method_signature": EntityKind.METHOD,
    "method_definition": EntityKind.METHOD,
    "abstract_method_signature": EntityKind.METHOD,
    "property_signature": EntityKind.PROPERTY,
    "public_field_definition": EntityKind.PROPERTY,
    "enum_assignment": EntityKind.PROPERTY,
    "property_identifier": EntityKind.PROPERTY,
    "variable_declarator": EntityKind.VARIABLE,
    "enum_declaration": EntityKind.ENUM,
    "module": EntityKind.MODULE,
    "internal_module": EntityKind.MODULE,
    "program": EntityKind.MODULE,
}


_TYPE_SHAPES = frozenset({NodeShape.INTERFACE, NodeShape.CLASS, NodeShape.TYPE_ALIAS})


def classify(node: Node) -> NodeShape:
    return _SHAPES.get(node.type, NodeShape.OTHER)


def parse_symbol_path(text: str) -> list[str]:
    """Split ``Array.map`` into segments.

    Raises:
        ValueError: For empty input or empty segments (``a..b``).
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Symbol path is empty")
    segments = text.split(".")
    if any(not segment.strip() for segment in segments):
        raise ValueError(f"Invalid symbol path: '{text}'")
    return [segment.strip() for segment in segments]


def entity_kind(symbol: Symbol, declaration: Optional[Declaration], is_static: bool = False) -> EntityKind:
    """Map a declaration's syntax shape to an entity kind."""
    if declaration is None:
        return EntityKind.SYMBOL
    kind = _KINDS.get(declaration.type, EntityKind.SYMBOL)
    if kind == EntityKind.METHOD:
        if symbol.has(SymbolFlags.PROPERTY) and not symbol.has(SymbolFlags.METHOD):
            return EntityKind.PROPERTY  # get/set accessor
        if is_static:
            return EntityKind.FUNCTION
    return kind


def display_declaration(symbol: Symbol) -> Optional[Declaration]:
    """Declaration an entity is reported through, however it was reached.

    Interface, class and type-alias declarations rank before value
    declarations, the same order root search meets them in.
    """
    for declaration in symbol.declarations:
        if classify(declaration.node) in _TYPE_SHAPES:
            return declaration
    return symbol.primary_declaration


def make_entity(
    checker: Checker, symbol: Symbol, declaration: Optional[Declaration] = None, is_static: bool = False
) -> ResolvedEntity:
    """Wrap a symbol, following aliases. Dangling aliases stay unresolved."""
    target = checker.resolve_alias(symbol)
    if target is None:
        return ResolvedEntity(symbol=symbol, declaration=declaration or symbol.primary_declaration,
                              kind=EntityKind.UNRESOLVED_MEMBER, is_static=is_static)
    declaration = display_declaration(target)
    return ResolvedEntity(symbol=target, declaration=declaration,
                          kind=entity_kind(target, declaration, is_static), is_static=is_static)


# ----------------------------------------------------------------------
# Root search
# ----------------------------------------------------------------------


def find_in_tree(node: Node, name: str, source_file: SourceFile, checker: Checker) -> Optional[ResolvedEntity]:
    """Depth-first search for a declaration named ``name``; first match wins."""
    match = _match_node(node, classify(node), name, source_file, checker)
    if match is not None:
        return match
    if node.type not in _CONTAINERS:
        return None
    for child in node.named_children:
        found = find_in_tree(child, name, source_file, checker)
        if found is not None:
            return found
    return None


def _match_node(
    node: Node, shape: NodeShape, name: str, source_file: SourceFile, checker: Checker
) -> Optional[ResolvedEntity]:
    if shape in (NodeShape.INTERFACE, NodeShape.CLASS, NodeShape.TYPE_ALIAS):
        if name_of(node) == name:
            return _entity_at(node, source_file, checker)
    elif shape == NodeShape.VARIABLE:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier" and node_text(name_node) == name:
                return _entity_at(declarator, source_file, checker)
    elif shape == NodeShape.MODULE:
        name_node = node.child_by_field_name("name")
        if name_node is not None and unquote(node_text(name_node)) == name:
            return _entity_at(node, source_file, checker)
    elif shape == NodeShape.NAMED_EXPORT:
        alias_node = node.child_by_field_name("alias") or node.child_by_field_name("name")
        if alias_node is not None and unquote(node_text(alias_node)) == name:
            return _entity_at(node, source_file, checker)
    return None


def _entity_at(node: Node, source_file: SourceFile, checker: Checker) -> Optional[ResolvedEntity]:
    symbol = checker.get_symbol_at_declaration(node, source_file)
    if symbol is None:
        return None
    return make_entity(checker, symbol, Declaration(node, source_file))


def find_in_exports(name: str, source_file: SourceFile, checker: Checker) -> Optional[ResolvedEntity]:
    """Match ``name`` against a file's module-level exports.

    Script files export into the global scope; a global counts as an export
    of the file when one of its declarations lives there.
    """
    module = checker.get_module_symbol(source_file)
    if module is not None:
        symbol = checker.get_exports_map(module).get(name)
    else:
        symbol = checker.globals.exports.get(name)
        if symbol is not None and not any(d.source_file is source_file for d in symbol.declarations):
            symbol = None
    if symbol is None:
        return None
    return make_entity(checker, symbol)


def find_root(universe: DeclarationUniverse, name: str, checker: Checker) -> Optional[ResolvedEntity]:
    """Search the universe's declaration files, in order, for ``name``."""
    for path in universe.declaration_files:
        source_file = checker.get_source_file(path)
        if source_file is None:
            continue
        entity = find_in_tree(source_file.root, name, source_file, checker)
        if entity is None:
            entity = find_in_exports(name, source_file, checker)
        if entity is not None:
            logger.debug("Root %s found in %s", name, path)
            return entity
    return None


# ----------------------------------------------------------------------
# Descent
# ----------------------------------------------------------------------


def _is_value_side(checker: Checker, symbol: Symbol) -> bool:
    """True when members of ``symbol``'s type are statics of a class/constructor."""
    if symbol.has(SymbolFlags.CLASS):
        return True
    type_ = checker.get_type_of_symbol(symbol)
    return isinstance(type_, ObjectType) and bool(type_.construct_signatures) \
        and symbol.has(SymbolFlags.VARIABLE)


def descend_entity(
    entity: ResolvedEntity, segments: list[str], checker: Checker, path: str, root_name: Optional[str] = None
) -> ResolvedEntity:
    """Narrow ``entity`` through ``segments``.

    ``root_name`` names the root in errors when the symbol name is not what
    the user typed (a package entry module).

    Raises:
        MemberMissingError: When a segment is not a property of the current type.
    """
    current = entity
    owner = root_name or entity.name
    for segment in segments:
        if current.kind == EntityKind.UNRESOLVED_MEMBER:
            raise MemberMissingError(path, owner, segment)
        type_ = checker.get_type_of_symbol(current.symbol)
        prop = checker.get_property_of_type(type_, segment)
        is_static = prop is not None and _is_value_side(checker, current.symbol)
        if prop is None and current.symbol.has(SymbolFlags.INTERFACE | SymbolFlags.CLASS):
            # Array.map: instance members of a type that also has a value side
            instance = checker.get_declared_type_of_symbol(current.symbol)
            if instance is not type_:
                prop = checker.get_property_of_type(instance, segment)
        if prop is None:
            raise MemberMissingError(path, owner, segment)
        current = make_entity(checker, prop, is_static=is_static)
        owner = segment
    return current


def descend(
    entity: ResolvedEntity, segments: list[str], checker: Checker, root_name: Optional[str] = None
) -> ResolveResult:
    """Narrow ``entity`` through ``segments`` and wrap the outcome."""
    path = ".".join([root_name or entity.name, *segments])
    try:
        return ResolveResult(query=path, entity=descend_entity(entity, segments, checker, path, root_name))
    except NotFoundError as e:
        logger.debug("%s", e)
        return ResolveResult(query=path, error=e)


def resolve(universe: DeclarationUniverse, segments: list[str], checker: Checker) -> ResolveResult:
    """Find the root declaration, then descend through the remaining segments."""
    path = ".".join(segments)
    try:
        entity = find_root(universe, segments[0], checker)
        if entity is None:
            raise NotFoundError(path)
        entity = descend_entity(entity, segments[1:], checker, path)
    except NotFoundError as e:
        logger.debug("%s", e)
        return ResolveResult(query=path, error=e)
    return ResolveResult(query=path, entity=entity)


class ResolveQuery(Query[ResolveResult]):
    """Resolve a dotted symbol path against a universe."""

    def __init__(self, checker: Checker, universe: DeclarationUniverse):
        super().__init__(checker)
        self.universe = universe

    def execute(self, symbol: str) -> ResolveResult:
        """Execute symbol resolution.

        Args:
            symbol: Dotted symbol path, e.g. ``Array.isArray``.

        Returns:
            ResolveResult with the entity, or the reason resolution failed.
        """
        return resolve(self.universe, parse_symbol_path(symbol), self.checker)
