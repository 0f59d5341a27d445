"""Binder: turns parsed files into merged symbol tables.

One Binder instance is fed every file of a declaration universe. It builds:

- the global scope (script files, ``declare global`` blocks)
- one symbol per ambient module (``declare module "fs" { ... }``), merged
  across files
- one symbol per external module file
- a node -> symbol map so declarations can be looked up by syntax node
"""

import logging
from typing import Iterable, Optional

from tree_sitter import Node

from .parser import SourceFile, has_token, name_of, node_text, unquote
from .symbols import AliasTarget, Declaration, Symbol, SymbolFlags, node_key

logger = logging.getLogger(__name__)

_CLASS_TYPES = ("class_declaration", "abstract_class_declaration", "class")
_FUNCTION_TYPES = ("function_declaration", "function_signature", "generator_function_declaration")
_VARIABLE_STATEMENTS = ("lexical_declaration", "variable_declaration")
_METHOD_TYPES = ("method_signature", "method_definition", "abstract_method_signature")
_PROPERTY_TYPES = ("property_signature", "public_field_definition")


def member_name(node: Node) -> Optional[str]:
    """Name of a class/interface member; computed names keep their brackets."""
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    text = node_text(name_node)
    if name_node.type == "string":
        return unquote(text)
    return text


class Binder:
    """Builds symbol tables for a set of parsed files."""

    def __init__(self):
        self.globals = Symbol("globalThis", SymbolFlags.MODULE)
        self.ambient_modules: dict[str, Symbol] = {}
        self.file_modules: dict[str, Symbol] = {}
        self.node_symbols: dict[tuple, Symbol] = {}

    # ------------------------------------------------------------------
    # Files and blocks
    # ------------------------------------------------------------------

    def bind_file(self, source_file: SourceFile) -> Optional[Symbol]:
        """Bind one file. Returns its module symbol, or None for script files."""
        root = source_file.root
        if source_file.is_module:
            module = Symbol(f'"{source_file.path.stem}"', SymbolFlags.MODULE)
            module.module_name = source_file.file_name
            module.add_declaration(SymbolFlags.MODULE, Declaration(root, source_file))
            self.file_modules[str(source_file.path.resolve())] = module
            self._register(root, source_file, module)
            self._bind_block(root.named_children, module, source_file, ambient=source_file.is_declaration_file)
            return module

        self._bind_block(root.named_children, self.globals, source_file, ambient=source_file.is_declaration_file)
        return None

    def _bind_block(self, statements: Iterable[Node], container: Symbol, source_file: SourceFile, ambient: bool) -> None:
        statements = list(statements)
        export_context = container is self.globals or (ambient and not _has_export_declarations(statements))
        for statement in statements:
            self._bind_statement(statement, container, source_file, ambient, exported=export_context)

    def _bind_statement(self, node: Node, container: Symbol, source_file: SourceFile, ambient: bool, exported: bool) -> None:
        kind = node.type
        if kind == "export_statement":
            self._bind_export(node, container, source_file, ambient)
        elif kind == "ambient_declaration":
            self._bind_ambient(node, container, source_file, exported)
        elif kind == "interface_declaration":
            symbol = self._declare(container, name_of(node), SymbolFlags.INTERFACE, node, source_file, exported)
            if symbol is not None:
                self.bind_members(node.child_by_field_name("body"), symbol, source_file)
        elif kind in _CLASS_TYPES:
            symbol = self._declare(container, name_of(node) or "default", SymbolFlags.CLASS, node, source_file, exported)
            if symbol is not None:
                self.bind_members(node.child_by_field_name("body"), symbol, source_file, is_class=True)
        elif kind == "type_alias_declaration":
            self._declare(container, name_of(node), SymbolFlags.TYPE_ALIAS, node, source_file, exported)
        elif kind in _FUNCTION_TYPES:
            self._declare(container, name_of(node) or "default", SymbolFlags.FUNCTION, node, source_file, exported)
        elif kind in _VARIABLE_STATEMENTS:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    self._declare(container, node_text(name_node), SymbolFlags.VARIABLE, declarator, source_file, exported)
        elif kind == "enum_declaration":
            symbol = self._declare(container, name_of(node), SymbolFlags.ENUM, node, source_file, exported)
            if symbol is not None:
                self._bind_enum_members(node.child_by_field_name("body"), symbol, source_file)
        elif kind == "module":
            self._bind_module(node, container, source_file, exported)
        elif kind == "internal_module":
            self._bind_namespace(node, container, source_file, ambient, exported)
        elif kind == "expression_statement":
            for child in node.named_children:
                if child.type == "internal_module":
                    self._bind_namespace(child, container, source_file, ambient, exported)
        elif kind == "import_statement":
            self._bind_import(node, container, source_file)
        elif kind == "import_alias":
            self._bind_import_alias(node, container, source_file, exported)

    def _bind_ambient(self, node: Node, container: Symbol, source_file: SourceFile, exported: bool) -> None:
        children = node.children
        if any(child.type == "global" for child in children):
            for child in node.named_children:
                if child.type == "statement_block":
                    self._register(child, source_file, self.globals)
                    self._bind_block(child.named_children, self.globals, source_file, ambient=True)
            return
        for child in node.named_children:
            self._bind_statement(child, container, source_file, ambient=True, exported=exported)

    # ------------------------------------------------------------------
    # Modules and namespaces
    # ------------------------------------------------------------------

    def _bind_module(self, node: Node, container: Symbol, source_file: SourceFile, exported: bool) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        if name_node.type != "string":
            self._bind_namespace(node, container, source_file, True, exported)
            return

        name = unquote(node_text(name_node))
        module = self.ambient_modules.get(name)
        if module is None:
            module = Symbol(f'"{name}"', SymbolFlags.MODULE)
            module.module_name = name
            self.ambient_modules[name] = module
        module.add_declaration(SymbolFlags.MODULE, Declaration(node, source_file))
        self._register(node, source_file, module)
        body = node.child_by_field_name("body")
        if body is not None:
            self._register(body, source_file, module)
            self._bind_block(body.named_children, module, source_file, ambient=True)

    def _bind_namespace(self, node: Node, container: Symbol, source_file: SourceFile, ambient: bool, exported: bool) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        parts = node_text(name_node).split(".")
        outer = self._declare(container, parts[0], SymbolFlags.MODULE, node, source_file, exported)
        if outer is None:
            return
        inner = outer
        for part in parts[1:]:
            inner = self._declare(inner, part.strip(), SymbolFlags.MODULE, node, source_file, True, register=False)
        body = node.child_by_field_name("body")
        if body is not None:
            self._register(body, source_file, inner)
            self._bind_block(body.named_children, inner, source_file, ambient=ambient or source_file.is_declaration_file)

    # ------------------------------------------------------------------
    # Imports and exports
    # ------------------------------------------------------------------

    def _bind_export(self, node: Node, container: Symbol, source_file: SourceFile, ambient: bool) -> None:
        tokens = [child.type for child in node.children if not child.is_named]
        declaration = node.child_by_field_name("declaration")
        source = node.child_by_field_name("source")
        module = unquote(node_text(source)) if source is not None else None

        if declaration is not None:
            before = set(container.exports)
            self._bind_statement(declaration, container, source_file, ambient, exported=True)
            if "default" in tokens:
                added = [name for name in container.exports if name not in before]
                if added and added[0] != "default":
                    container.exports["default"] = container.exports[added[0]]
            return

        if "=" in tokens:
            value = next((c for c in node.named_children if c.type != "comment"), None)
            if value is not None:
                container.export_equals = (value, source_file)
            return

        if "as" in tokens and "namespace" in tokens:
            name_node = next((c for c in node.named_children if c.type == "identifier"), None)
            if name_node is not None:
                alias = self._declare(self.globals, node_text(name_node), SymbolFlags.ALIAS, node, source_file, True)
                if alias is not None:
                    alias.alias = AliasTarget("module", source_file, symbol=container)
            return

        if "default" in tokens:
            value = node.child_by_field_name("value")
            if value is not None:
                alias = self._declare(container, "default", SymbolFlags.ALIAS, node, source_file, True)
                if alias is not None:
                    alias.alias = AliasTarget("entity", source_file, path=node_text(value).split("."),
                                              container=container, node=node)
            return

        for child in node.named_children:
            if child.type == "export_clause":
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    local = unquote(node_text(spec.child_by_field_name("name")))
                    alias_node = spec.child_by_field_name("alias")
                    exported_name = unquote(node_text(alias_node)) if alias_node is not None else local
                    symbol = self._declare(container, exported_name, SymbolFlags.ALIAS, spec, source_file, True,
                                           add_local=False)
                    if symbol is None:
                        continue
                    if module is not None:
                        symbol.alias = AliasTarget("named", source_file, module=module, name=local, node=spec)
                    else:
                        symbol.alias = AliasTarget("local", source_file, name=local, container=container, node=spec)
            elif child.type == "namespace_export" and module is not None:
                name_node = next((c for c in child.named_children if c.type in ("identifier", "string")), None)
                if name_node is not None:
                    symbol = self._declare(container, unquote(node_text(name_node)), SymbolFlags.ALIAS, child,
                                           source_file, True, add_local=False)
                    if symbol is not None:
                        symbol.alias = AliasTarget("namespace", source_file, module=module, node=child)

        if "*" in tokens and module is not None and not any(c.type == "namespace_export" for c in node.named_children):
            container.export_stars.append((module, source_file))

    def _bind_import(self, node: Node, container: Symbol, source_file: SourceFile) -> None:
        source = node.child_by_field_name("source")
        for child in node.named_children:
            if child.type == "import_require_clause":
                name_node = next((c for c in child.named_children if c.type == "identifier"), None)
                req_source = child.child_by_field_name("source")
                if name_node is not None and req_source is not None:
                    alias = self._declare(container, node_text(name_node), SymbolFlags.ALIAS, child, source_file, False)
                    if alias is not None:
                        alias.alias = AliasTarget("require", source_file, module=unquote(node_text(req_source)), node=child)
            elif child.type == "import_clause" and source is not None:
                module = unquote(node_text(source))
                self._bind_import_clause(child, module, container, source_file)

    def _bind_import_clause(self, clause: Node, module: str, container: Symbol, source_file: SourceFile) -> None:
        for child in clause.named_children:
            if child.type == "identifier":
                alias = self._declare(container, node_text(child), SymbolFlags.ALIAS, child, source_file, False)
                if alias is not None:
                    alias.alias = AliasTarget("default", source_file, module=module, node=child)
            elif child.type == "namespace_import":
                name_node = next((c for c in child.named_children if c.type == "identifier"), None)
                if name_node is not None:
                    alias = self._declare(container, node_text(name_node), SymbolFlags.ALIAS, child, source_file, False)
                    if alias is not None:
                        alias.alias = AliasTarget("namespace", source_file, module=module, node=child)
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    imported = unquote(node_text(spec.child_by_field_name("name")))
                    alias_node = spec.child_by_field_name("alias")
                    local = node_text(alias_node) if alias_node is not None else imported
                    alias = self._declare(container, local, SymbolFlags.ALIAS, spec, source_file, False)
                    if alias is not None:
                        alias.alias = AliasTarget("named", source_file, module=module, name=imported, node=spec)

    def _bind_import_alias(self, node: Node, container: Symbol, source_file: SourceFile, exported: bool) -> None:
        names = [c for c in node.named_children if c.type in ("identifier", "nested_identifier")]
        if len(names) < 2:
            return
        explicit_export = bool(node.children) and node.children[0].type == "export"
        alias = self._declare(container, node_text(names[0]), SymbolFlags.ALIAS, node, source_file,
                              exported or explicit_export)
        if alias is not None:
            alias.alias = AliasTarget("entity", source_file, path=node_text(names[1]).split("."),
                                      container=container, node=node)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def bind_members(self, body: Optional[Node], owner: Symbol, source_file: SourceFile, is_class: bool = False) -> None:
        """Bind interface/class/object-type members into ``owner``.

        Class statics go to ``owner.exports``, everything else to
        ``owner.members``. Constructors are collected separately.
        """
        if body is None:
            return
        for child in body.named_children:
            kind = child.type
            if kind not in _METHOD_TYPES and kind not in _PROPERTY_TYPES:
                continue
            name = member_name(child)
            if name is None:
                continue
            if kind in _METHOD_TYPES and name == "constructor" and is_class:
                owner.constructors.append(Declaration(child, source_file))
                self._register(child, source_file, owner)
                continue

            if kind in _METHOD_TYPES and not (has_token(child, "get") or has_token(child, "set")):
                flags = SymbolFlags.METHOD
            else:
                flags = SymbolFlags.PROPERTY
            if has_token(child, "?"):
                flags |= SymbolFlags.OPTIONAL

            table = owner.exports if is_class and has_token(child, "static") else owner.members
            symbol = table.get(name)
            if symbol is None:
                symbol = Symbol(name, parent=owner)
                table[name] = symbol
            symbol.add_declaration(flags, Declaration(child, source_file))
            self._register(child, source_file, symbol)

    def _bind_enum_members(self, body: Optional[Node], owner: Symbol, source_file: SourceFile) -> None:
        if body is None:
            return
        for child in body.named_children:
            if child.type == "enum_assignment":
                name = member_name(child)
            elif child.type in ("property_identifier", "string", "number"):
                name = unquote(node_text(child))
            else:
                continue
            if not name:
                continue
            symbol = owner.exports.get(name)
            if symbol is None:
                symbol = Symbol(name, parent=owner)
                owner.exports[name] = symbol
            symbol.add_declaration(SymbolFlags.ENUM_MEMBER, Declaration(child, source_file))
            self._register(child, source_file, symbol)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _declare(
        self,
        container: Symbol,
        name: Optional[str],
        flags: SymbolFlags,
        node: Node,
        source_file: SourceFile,
        exported: bool,
        register: bool = True,
        add_local: bool = True,
    ) -> Optional[Symbol]:
        if not name:
            return None
        symbol = container.locals.get(name) if add_local else container.exports.get(name)
        if symbol is None and exported:
            symbol = container.exports.get(name)
        if symbol is None or (symbol.has(SymbolFlags.ALIAS) != bool(flags & SymbolFlags.ALIAS)):
            symbol = Symbol(name, parent=container)
        symbol.add_declaration(flags, Declaration(node, source_file))
        if add_local:
            container.locals[name] = symbol
        if exported:
            container.exports[name] = symbol
        if register:
            self._register(node, source_file, symbol)
        return symbol

    def _register(self, node: Node, source_file: SourceFile, symbol: Symbol) -> None:
        self.node_symbols.setdefault(node_key(node, source_file), symbol)

    def symbol_at(self, node: Node, source_file: SourceFile) -> Optional[Symbol]:
        return self.node_symbols.get(node_key(node, source_file))


def _has_export_declarations(statements: list[Node]) -> bool:
    """True when a block has ``export {...}``, ``export * from`` or ``export =``."""
    for statement in statements:
        if statement.type != "export_statement":
            continue
        if statement.child_by_field_name("declaration") is not None:
            continue
        return True
    return False
