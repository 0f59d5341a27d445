"""Semantic query interface over a bound declaration universe.

The Checker answers the questions the resolver and extractors ask:
the type of a symbol, the properties and signatures of a type, the exports
of a module, and how types and signatures render as text. Types are
computed lazily and memoized for the lifetime of one Checker.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Node

from .binder import Binder
from .jsdoc import DocComment, DocTag, find_doc_comment
from .parser import SourceFile, name_of, node_text, type_text, unquote
from .symbols import Declaration, Symbol, SymbolFlags, node_key
from .types import (
    ANY,
    IntersectionType,
    ObjectType,
    ParameterInfo,
    PrimitiveType,
    Signature,
    SignatureKind,
    Type,
    TypeParameterInfo,
    TypeParameterType,
    UnionType,
)

logger = logging.getLogger(__name__)

_APPARENT_TYPES = {
    "string": "String",
    "number": "Number",
    "boolean": "Boolean",
    "bigint": "BigInt",
    "symbol": "Symbol",
    "object": "Object",
    "Function": "Function",
}

_FUNCTION_LIKE = frozenset({
    "function_declaration",
    "function_signature",
    "generator_function_declaration",
    "method_signature",
    "method_definition",
    "abstract_method_signature",
})

_ANY_MEANING = SymbolFlags.VALUE | SymbolFlags.TYPE | SymbolFlags.NAMESPACE | SymbolFlags.ALIAS
_TYPE_MEANING = SymbolFlags.TYPE | SymbolFlags.NAMESPACE | SymbolFlags.ALIAS
_VALUE_MEANING = SymbolFlags.VALUE | SymbolFlags.ALIAS

_MODULE_SUFFIXES = (".d.ts", ".ts", ".tsx", ".d.mts", ".mts", ".d.cts", ".cts")


class Checker:
    """Type checker facade over a Binder's symbol tables."""

    def __init__(self, binder: Binder, source_files: list[SourceFile], package_modules: Optional[dict[str, Symbol]] = None):
        self.binder = binder
        self.source_files = source_files
        self._files_by_path = {str(sf.path.resolve()): sf for sf in source_files}
        self._package_modules = package_modules or {}
        self._symbol_types: dict[int, Type] = {}
        self._declared_types: dict[int, Type] = {}
        self._literal_types: dict[tuple, ObjectType] = {}
        self._in_progress: set = set()

    @property
    def globals(self) -> Symbol:
        return self.binder.globals

    # ------------------------------------------------------------------
    # Symbol lookup
    # ------------------------------------------------------------------

    def get_source_file(self, path: str | Path) -> Optional[SourceFile]:
        return self._files_by_path.get(str(Path(path).resolve()))

    def get_symbol_at_declaration(self, node: Node, source_file: SourceFile) -> Optional[Symbol]:
        return self.binder.symbol_at(node, source_file)

    def get_module_symbol(self, source_file: SourceFile) -> Optional[Symbol]:
        """Module symbol of an external module file (None for script files)."""
        return self.binder.file_modules.get(str(source_file.path.resolve()))

    def get_ambient_module(self, name: str) -> Optional[Symbol]:
        module = self.binder.ambient_modules.get(name)
        if module is None and name.startswith("node:"):
            module = self.binder.ambient_modules.get(name[len("node:"):])
        return module

    def resolve_module(self, specifier: Optional[str], from_file: SourceFile) -> Optional[Symbol]:
        """Resolve an import specifier to a module symbol."""
        if not specifier:
            return None
        if specifier.startswith("."):
            base = from_file.path.parent / specifier
            for candidate in _module_candidates(base):
                module = self.binder.file_modules.get(str(candidate.resolve()))
                if module is not None:
                    return module
            return None
        if specifier in self._package_modules:
            return self._package_modules[specifier]
        return self.get_ambient_module(specifier)

    def lookup_name(self, name: str, node: Node, source_file: SourceFile, meaning: SymbolFlags = _ANY_MEANING) -> Optional[Symbol]:
        """Find ``name`` in the scopes enclosing ``node``, then in globals."""
        current: Optional[Node] = node
        while current is not None:
            if current.type in ("statement_block", "program"):
                container = self.binder.symbol_at(current, source_file)
                if container is not None:
                    found = container.locals.get(name) or container.exports.get(name)
                    if found is not None and found.has(meaning):
                        return found
            current = current.parent
        found = self.globals.exports.get(name)
        if found is not None and found.has(meaning):
            return found
        return None

    def resolve_entity_name(
        self, names: list[str], node: Node, source_file: SourceFile, meaning: SymbolFlags = _ANY_MEANING
    ) -> Optional[Symbol]:
        """Resolve a dotted entity name (``NodeJS.Process``) from ``node``'s scope."""
        if not names:
            return None
        first_meaning = meaning if len(names) == 1 else SymbolFlags.NAMESPACE | SymbolFlags.ALIAS | SymbolFlags.CLASS
        symbol = self.lookup_name(names[0].strip(), node, source_file, first_meaning)
        for part in names[1:]:
            if symbol is None:
                return None
            symbol = self.get_exports_map(symbol).get(part.strip())
        return symbol

    # ------------------------------------------------------------------
    # Aliases and exports
    # ------------------------------------------------------------------

    def resolve_alias(self, symbol: Optional[Symbol]) -> Optional[Symbol]:
        """Follow import/export aliases to the target symbol (None if dangling)."""
        seen: set[int] = set()
        current = symbol
        while current is not None and current.has(SymbolFlags.ALIAS) and current.alias is not None:
            if id(current) in seen:
                return None
            seen.add(id(current))
            current = self._resolve_alias_target(current)
        return current

    def _resolve_alias_target(self, alias: Symbol) -> Optional[Symbol]:
        target = alias.alias
        kind = target.kind
        if kind == "module":
            return target.symbol
        if kind == "local":
            return self.lookup_name(target.name, target.node, target.source_file)
        if kind == "entity":
            return self.resolve_entity_name(target.path, target.node, target.source_file)

        module = self.resolve_module(target.module, target.source_file)
        if module is None:
            return None
        if kind in ("namespace", "require"):
            return self._export_equals_target(module) or module
        if kind == "default":
            exports = self.get_exports_map(module)
            if "default" in exports:
                return exports["default"]
            return self._export_equals_target(module)
        return self.get_exports_map(module).get(target.name)

    def _export_equals_target(self, module: Symbol) -> Optional[Symbol]:
        if module.export_equals is None:
            return None
        node, source_file = module.export_equals
        if node.type not in ("identifier", "member_expression", "nested_identifier"):
            return None
        target = self.resolve_entity_name(node_text(node).split("."), node, source_file)
        return self.resolve_alias(target)

    def get_exports_map(self, symbol: Symbol) -> dict[str, Symbol]:
        """Exports of a module, namespace, enum or class, in declaration order.

        ``export *`` targets follow the module's own exports; ``export =``
        replaces them with the target's exports.
        """
        resolved = self.resolve_alias(symbol)
        if resolved is None:
            return {}
        symbol = resolved
        key = ("exports", id(symbol))
        if key in self._in_progress:
            return dict(symbol.exports)
        self._in_progress.add(key)
        try:
            target = self._export_equals_target(symbol)
            if target is not None and target is not symbol:
                return self.get_exports_map(target)

            result = dict(symbol.exports)
            for specifier, source_file in symbol.export_stars:
                star_module = self.resolve_module(specifier, source_file)
                if star_module is None or star_module is symbol:
                    continue
                for name, member in self.get_exports_map(star_module).items():
                    if name != "default" and name not in result:
                        result[name] = member
            return result
        finally:
            self._in_progress.discard(key)

    def get_exports_of_module(self, symbol: Symbol) -> list[tuple[str, Symbol]]:
        return list(self.get_exports_map(symbol).items())

    # ------------------------------------------------------------------
    # Types of symbols
    # ------------------------------------------------------------------

    def get_type_of_symbol(self, symbol: Symbol) -> Type:
        """Value-side type of a symbol.

        Interface-only and type-alias-only symbols have no value side; their
        declared type is returned instead so members can still be listed.
        """
        resolved = self.resolve_alias(symbol)
        if resolved is None:
            return ANY
        key = id(resolved)
        cached = self._symbol_types.get(key)
        if cached is not None:
            return cached
        guard = ("type", key)
        if guard in self._in_progress:
            return ANY
        self._in_progress.add(guard)
        try:
            result = self._compute_type_of_symbol(resolved)
        finally:
            self._in_progress.discard(guard)
        self._symbol_types[key] = result
        return result

    def _compute_type_of_symbol(self, symbol: Symbol) -> Type:
        if symbol.has(SymbolFlags.CLASS):
            return self._constructor_type(symbol)
        if symbol.has(SymbolFlags.FUNCTION | SymbolFlags.METHOD):
            return self._function_type(symbol)
        if symbol.has(SymbolFlags.VARIABLE | SymbolFlags.PROPERTY):
            return self._variable_type(symbol)
        if symbol.has(SymbolFlags.ENUM):
            return ObjectType(f"typeof {symbol.name}", symbol=symbol, properties=dict(symbol.exports))
        if symbol.has(SymbolFlags.MODULE):
            return self._module_type(symbol)
        if symbol.has(SymbolFlags.ENUM_MEMBER):
            owner = symbol.parent.name if symbol.parent is not None else ""
            return PrimitiveType(f"{owner}.{symbol.name}", apparent="Number")
        if symbol.has(SymbolFlags.INTERFACE | SymbolFlags.TYPE_ALIAS):
            return self.get_declared_type_of_symbol(symbol)
        return ANY

    def _function_type(self, symbol: Symbol) -> ObjectType:
        declarations = [d for d in symbol.declarations if d.type in _FUNCTION_LIKE]
        if len(declarations) > 1:
            # An implementation with a body is hidden behind its overloads.
            declarations = [d for d in declarations if d.node.child_by_field_name("body") is None] or declarations
        signatures = [self.get_signature_from_declaration(d) for d in declarations]
        properties = self.get_exports_map(symbol) if symbol.has(SymbolFlags.MODULE) else {}
        return ObjectType(self._signatures_text(signatures), symbol=symbol, properties=properties,
                          call_signatures=signatures)

    def _variable_type(self, symbol: Symbol) -> Type:
        decl = symbol.value_declaration or symbol.primary_declaration
        if decl is None:
            return ANY
        node = decl.node
        if node.type in _FUNCTION_LIKE:
            # get/set accessor
            return_node = node.child_by_field_name("return_type")
            return self.get_type_from_annotation(return_node, decl.source_file) if return_node is not None else ANY
        annotation = node.child_by_field_name("type")
        if annotation is not None:
            return self.get_type_from_annotation(annotation, decl.source_file)
        value = node.child_by_field_name("value")
        if value is not None:
            return self._type_of_expression(value, decl)
        return ANY

    def _module_type(self, symbol: Symbol) -> Type:
        target = self._export_equals_target(symbol)
        if target is not None and target is not symbol:
            return self.get_type_of_symbol(target)
        if symbol.module_name is not None:
            text = f'typeof import("{symbol.module_name}")'
        else:
            text = f"typeof {symbol.name}"
        return ObjectType(text, symbol=symbol, properties=self.get_exports_map(symbol))

    def _constructor_type(self, symbol: Symbol) -> ObjectType:
        instance = self.get_declared_type_of_symbol(symbol)
        class_type_parameters = self._type_parameters_of_symbol(symbol)
        constructors = symbol.constructors
        if len(constructors) > 1:
            constructors = [d for d in constructors if d.node.child_by_field_name("body") is None] or constructors
        signatures = [
            self._signature_from_node(d.node, d.source_file, SignatureKind.CONSTRUCT, return_text=instance.text,
                                      extra_type_parameters=class_type_parameters)
            for d in constructors
        ]
        properties = dict(symbol.exports)
        base = self._base_class(symbol)
        if base is not None:
            base_ctor = self.get_type_of_symbol(base)
            if isinstance(base_ctor, ObjectType):
                if not signatures:
                    signatures = [
                        dataclasses.replace(sig, return_type=instance.text, type_parameters=class_type_parameters)
                        for sig in base_ctor.construct_signatures
                    ]
                for name, prop in base_ctor.properties.items():
                    properties.setdefault(name, prop)
        if not signatures:
            signatures = [Signature(SignatureKind.CONSTRUCT, type_parameters=class_type_parameters,
                                    return_type=instance.text)]
        return ObjectType(f"typeof {symbol.name}", symbol=symbol, properties=properties,
                          construct_signatures=signatures)

    def _type_of_expression(self, value: Node, decl: Declaration) -> Type:
        source_file = decl.source_file
        kind = value.type
        if kind in ("arrow_function", "function_expression", "function", "generator_function"):
            signature = self._signature_from_node(value, source_file, SignatureKind.CALL, owner=decl)
            return ObjectType(self._signatures_text([signature]), call_signatures=[signature])

        parent = decl.node.parent
        is_const = parent is not None and parent.type == "lexical_declaration" and parent.children \
            and parent.children[0].type == "const"
        literal = node_text(value)
        if kind in ("string", "template_string"):
            return PrimitiveType(literal if is_const and kind == "string" else "string", apparent="String")
        if kind == "number":
            return PrimitiveType(literal if is_const else "number", apparent="Number")
        if kind in ("true", "false"):
            return PrimitiveType(literal if is_const else "boolean", apparent="Boolean")
        if kind in ("null", "undefined"):
            return PrimitiveType(kind)
        if kind == "array":
            return PrimitiveType("any[]", apparent="Array")
        if kind == "as_expression":
            types = [c for c in value.named_children if c.type != "comment"]
            if len(types) >= 2:
                return self.resolve_type_node(types[-1], source_file)
        if kind == "new_expression":
            ctor = value.child_by_field_name("constructor")
            if ctor is not None:
                target = self.resolve_alias(self.resolve_entity_name(node_text(ctor).split("."), value, source_file))
                if target is not None and target.has(SymbolFlags.CLASS):
                    return self.get_declared_type_of_symbol(target)
        if kind in ("identifier", "member_expression"):
            target = self.resolve_entity_name(literal.split("."), value, source_file, _VALUE_MEANING)
            if target is not None:
                return self.get_type_of_symbol(target)
        if kind == "object":
            return self._object_literal_type(value, source_file)
        return ANY

    def _object_literal_type(self, node: Node, source_file: SourceFile) -> ObjectType:
        owner = Symbol("__object")
        for child in node.named_children:
            if child.type == "pair":
                key = child.child_by_field_name("key")
                name = unquote(node_text(key)) if key is not None else None
                flags = SymbolFlags.PROPERTY
            elif child.type == "shorthand_property_identifier":
                name = node_text(child)
                flags = SymbolFlags.PROPERTY
            elif child.type == "method_definition":
                name = name_of(child)
                flags = SymbolFlags.METHOD
            else:
                continue
            if not name:
                continue
            member = owner.members.setdefault(name, Symbol(name, parent=owner))
            member.add_declaration(flags, Declaration(child, source_file))
        parts = [f"{name}: {self.type_to_string(self.get_type_of_symbol(member))}"
                 for name, member in owner.members.items()]
        text = "{ " + "; ".join(parts) + "; }" if parts else "{}"
        return ObjectType(text, symbol=owner, properties=owner.members)

    # ------------------------------------------------------------------
    # Declared types
    # ------------------------------------------------------------------

    def get_declared_type_of_symbol(self, symbol: Symbol) -> Type:
        """Type-side meaning: interface/class instance type, aliased type."""
        resolved = self.resolve_alias(symbol) or symbol
        key = id(resolved)
        cached = self._declared_types.get(key)
        if cached is not None:
            return cached
        guard = ("declared", key)
        if guard in self._in_progress:
            return PrimitiveType(resolved.name)
        self._in_progress.add(guard)
        try:
            if resolved.has(SymbolFlags.INTERFACE | SymbolFlags.CLASS):
                result = self._interface_type(resolved)
            elif resolved.has(SymbolFlags.TYPE_ALIAS):
                result = self._alias_type(resolved)
            elif resolved.has(SymbolFlags.ENUM):
                result = PrimitiveType(resolved.name, apparent="Number")
            else:
                result = PrimitiveType(resolved.name)
        finally:
            self._in_progress.discard(guard)
        self._declared_types[key] = result
        return result

    def _interface_type(self, symbol: Symbol) -> ObjectType:
        names = [tp.name for tp in self._type_parameters_of_symbol(symbol)]
        text = symbol.name + (f"<{', '.join(names)}>" if names else "")
        result = ObjectType(text, symbol=symbol, properties=dict(symbol.members))
        # Registered early so self-referencing members resolve to this object.
        self._declared_types[id(symbol)] = result

        for decl in symbol.declarations:
            if decl.type != "interface_declaration":
                continue
            body = decl.node.child_by_field_name("body")
            if body is None:
                continue
            for child in body.named_children:
                if child.type == "call_signature":
                    result.call_signatures.append(
                        self._signature_from_node(child, decl.source_file, SignatureKind.CALL))
                elif child.type == "construct_signature":
                    result.construct_signatures.append(
                        self._signature_from_node(child, decl.source_file, SignatureKind.CONSTRUCT))

        for base in self._base_types(symbol):
            for name, prop in self._properties(base).items():
                result.properties.setdefault(name, prop)
            if isinstance(base, ObjectType):
                if not result.call_signatures:
                    result.call_signatures.extend(base.call_signatures)
                if not result.construct_signatures:
                    result.construct_signatures.extend(base.construct_signatures)
        return result

    def _alias_type(self, symbol: Symbol) -> Type:
        for decl in symbol.declarations:
            if decl.type == "type_alias_declaration":
                value = decl.node.child_by_field_name("value")
                if value is not None:
                    return self.resolve_type_node(value, decl.source_file)
        return PrimitiveType(symbol.name)

    def _base_types(self, symbol: Symbol) -> list[Type]:
        bases: list[Type] = []
        for decl in symbol.declarations:
            if decl.type == "interface_declaration":
                for clause in decl.node.named_children:
                    if clause.type != "extends_type_clause":
                        continue
                    for type_node in clause.named_children:
                        if type_node.type != "comment":
                            bases.append(self.resolve_type_node(type_node, decl.source_file))
        base_class = self._base_class(symbol)
        if base_class is not None:
            bases.append(self.get_declared_type_of_symbol(base_class))
        return bases

    def _base_class(self, symbol: Symbol) -> Optional[Symbol]:
        for decl in symbol.declarations:
            if decl.type not in ("class_declaration", "abstract_class_declaration"):
                continue
            for heritage in decl.node.named_children:
                if heritage.type != "class_heritage":
                    continue
                for clause in heritage.named_children:
                    if clause.type != "extends_clause":
                        continue
                    value = clause.child_by_field_name("value")
                    if value is None:
                        continue
                    base = self.resolve_alias(self.resolve_entity_name(
                        node_text(value).split("."), decl.node, decl.source_file, _VALUE_MEANING))
                    if base is not None and base is not symbol and base.has(SymbolFlags.CLASS):
                        return base
        return None

    # ------------------------------------------------------------------
    # Type nodes
    # ------------------------------------------------------------------

    def get_type_from_annotation(self, annotation: Node, source_file: SourceFile) -> Type:
        if annotation.type == "type_annotation":
            inner = _first_named(annotation)
            return self.resolve_type_node(inner, source_file) if inner is not None else ANY
        return self.resolve_type_node(annotation, source_file)

    def resolve_type_node(self, node: Node, source_file: SourceFile) -> Type:
        """Resolve a type syntax node. The result's text is the written text."""
        kind = node.type
        text = type_text(node)
        if kind == "parenthesized_type":
            inner = _first_named(node)
            return self.resolve_type_node(inner, source_file) if inner is not None else ANY
        if kind == "predefined_type":
            return PrimitiveType(text, apparent=_APPARENT_TYPES.get(text))
        if kind == "literal_type":
            inner = _first_named(node)
            apparent = {"string": "String", "number": "Number", "true": "Boolean", "false": "Boolean"}.get(
                inner.type if inner is not None else "")
            return PrimitiveType(text, apparent=apparent)
        if kind == "template_literal_type":
            return PrimitiveType(text, apparent="String")
        if kind in ("array_type", "tuple_type"):
            return PrimitiveType(text, apparent="Array")
        if kind == "readonly_type":
            inner = _first_named(node)
            resolved = self.resolve_type_node(inner, source_file) if inner is not None else ANY
            return dataclasses.replace(resolved, text=text)
        if kind in ("type_identifier", "nested_type_identifier", "generic_type", "identifier"):
            return self._type_reference(node, text, source_file)
        if kind == "object_type":
            return self._object_type_literal(node, source_file)
        if kind == "function_type":
            signature = self._signature_from_node(node, source_file, SignatureKind.CALL)
            return ObjectType(text, call_signatures=[signature])
        if kind == "constructor_type":
            signature = self._signature_from_node(node, source_file, SignatureKind.CONSTRUCT)
            return ObjectType(text, construct_signatures=[signature])
        if kind in ("union_type", "intersection_type"):
            members = [self.resolve_type_node(c, source_file) for c in _flatten(node, kind)]
            if kind == "union_type":
                return UnionType(text, types=members)
            return IntersectionType(text, types=members)
        if kind == "type_query":
            target = _first_named(node)
            if target is not None:
                symbol = self.resolve_entity_name(node_text(target).split("."), node, source_file, _VALUE_MEANING)
                if symbol is not None:
                    return dataclasses.replace(self.get_type_of_symbol(symbol), text=text)
            return PrimitiveType(text)
        return PrimitiveType(text)

    def _type_reference(self, node: Node, text: str, source_file: SourceFile) -> Type:
        name_node = node.child_by_field_name("name") if node.type == "generic_type" else node
        if name_node is None:
            return PrimitiveType(text)
        name = node_text(name_node)
        if "." not in name:
            parameter = _type_parameter_in_scope(name, node)
            if parameter is not None:
                return TypeParameterType(text, constraint=self._constraint_type(parameter, source_file))
        if name in ("Array", "ReadonlyArray") and node.type == "generic_type":
            apparent = name
        else:
            apparent = None
        symbol = self.resolve_entity_name(name.split("."), node, source_file, _TYPE_MEANING)
        if symbol is None:
            return PrimitiveType(text, apparent=apparent)
        declared = self.get_declared_type_of_symbol(symbol)
        if declared.text == text:
            return declared
        return dataclasses.replace(declared, text=text)

    def _constraint_type(self, parameter: Node, source_file: SourceFile) -> Optional[Type]:
        constraint = parameter.child_by_field_name("constraint")
        inner = _first_named(constraint) if constraint is not None else None
        if inner is None:
            return None
        guard = ("constraint",) + node_key(parameter, source_file)
        if guard in self._in_progress:
            return None
        self._in_progress.add(guard)
        try:
            return self.resolve_type_node(inner, source_file)
        finally:
            self._in_progress.discard(guard)

    def _object_type_literal(self, node: Node, source_file: SourceFile) -> ObjectType:
        key = node_key(node, source_file)
        cached = self._literal_types.get(key)
        if cached is not None:
            return cached
        owner = Symbol("__type")
        self.binder.bind_members(node, owner, source_file)
        result = ObjectType(type_text(node), symbol=owner, properties=owner.members)
        for child in node.named_children:
            if child.type == "call_signature":
                result.call_signatures.append(self._signature_from_node(child, source_file, SignatureKind.CALL))
            elif child.type == "construct_signature":
                result.construct_signatures.append(
                    self._signature_from_node(child, source_file, SignatureKind.CONSTRUCT))
        self._literal_types[key] = result
        return result

    # ------------------------------------------------------------------
    # Properties and signatures
    # ------------------------------------------------------------------

    def get_properties_of_type(self, type_: Type) -> list[Symbol]:
        return list(self._properties(type_).values())

    def get_property_of_type(self, type_: Type, name: str) -> Optional[Symbol]:
        return self._properties(type_).get(name)

    def _properties(self, type_: Type, depth: int = 0) -> dict[str, Symbol]:
        if depth > 8:
            return {}
        if isinstance(type_, ObjectType):
            return type_.properties
        if isinstance(type_, PrimitiveType) and type_.apparent:
            apparent = self.globals.exports.get(type_.apparent)
            if apparent is None:
                return {}
            return self._properties(self.get_declared_type_of_symbol(apparent), depth + 1)
        if isinstance(type_, TypeParameterType) and type_.constraint is not None:
            return self._properties(type_.constraint, depth + 1)
        if isinstance(type_, IntersectionType):
            merged: dict[str, Symbol] = {}
            for member in type_.types:
                for name, prop in self._properties(member, depth + 1).items():
                    merged.setdefault(name, prop)
            return merged
        if isinstance(type_, UnionType) and type_.types:
            maps = [self._properties(member, depth + 1) for member in type_.types]
            return {name: prop for name, prop in maps[0].items() if all(name in m for m in maps[1:])}
        return {}

    def get_signatures_of_type(self, type_: Type, kind: SignatureKind) -> list[Signature]:
        if isinstance(type_, ObjectType):
            return list(type_.construct_signatures if kind == SignatureKind.CONSTRUCT else type_.call_signatures)
        if isinstance(type_, IntersectionType):
            signatures: list[Signature] = []
            for member in type_.types:
                signatures.extend(self.get_signatures_of_type(member, kind))
            return signatures
        if isinstance(type_, TypeParameterType) and type_.constraint is not None:
            return self.get_signatures_of_type(type_.constraint, kind)
        return []

    def get_signature_from_declaration(self, decl: Declaration) -> Signature:
        return self._signature_from_node(decl.node, decl.source_file, SignatureKind.CALL)

    def _signature_from_node(
        self,
        node: Node,
        source_file: SourceFile,
        kind: SignatureKind,
        owner: Optional[Declaration] = None,
        return_text: Optional[str] = None,
        extra_type_parameters: Optional[list[TypeParameterInfo]] = None,
    ) -> Signature:
        type_parameters = list(extra_type_parameters or []) + _type_parameters(node)
        parameters = _parameters(node)

        if kind == SignatureKind.CONSTRUCT or node.type == "constructor_type":
            return_node = node.child_by_field_name("type") or node.child_by_field_name("return_type")
        else:
            return_node = node.child_by_field_name("return_type")
        return_type, predicate = _return_info(return_node)
        if return_type is None:
            if return_text is not None:
                return_type = return_text
            elif node.type in ("method_definition", "function_declaration", "arrow_function", "function_expression"):
                return_type = _inferred_return(node)
            else:
                return_type = "any"

        declaration = Declaration(node, source_file)
        doc = find_doc_comment(node) if node.type not in ("function_type", "constructor_type") else None
        if (doc is None or doc.is_empty) and owner is not None:
            doc = owner.doc
        return Signature(
            kind=kind,
            declaration=declaration,
            type_parameters=type_parameters,
            parameters=parameters,
            return_type=return_type,
            predicate=predicate,
            doc=doc,
        )

    def _type_parameters_of_symbol(self, symbol: Symbol) -> list[TypeParameterInfo]:
        for decl in symbol.declarations:
            params = _type_parameters(decl.node)
            if params:
                return params
        return []

    # ------------------------------------------------------------------
    # Rendering and documentation
    # ------------------------------------------------------------------

    def type_to_string(self, type_: Type) -> str:
        return type_.text

    def signature_to_string(self, signature: Signature) -> str:
        type_params = ""
        if signature.type_parameters:
            type_params = "<" + ", ".join(tp.render() for tp in signature.type_parameters) + ">"
        params = ", ".join(p.render() for p in signature.parameters)
        return f"{type_params}({params}): {signature.return_text}"

    def _signatures_text(self, signatures: list[Signature]) -> str:
        if len(signatures) == 1:
            sig = signatures[0]
            type_params = ""
            if sig.type_parameters:
                type_params = "<" + ", ".join(tp.render() for tp in sig.type_parameters) + ">"
            params = ", ".join(p.render() for p in sig.parameters)
            return f"{type_params}({params}) => {sig.return_text}"
        if not signatures:
            return "{}"
        return "{ " + " ".join(f"{self.signature_to_string(sig)};" for sig in signatures) + " }"

    def get_documentation_comment(self, symbol: Symbol) -> str:
        bodies: list[str] = []
        for doc in self._docs(symbol):
            if doc.body and doc.body not in bodies:
                bodies.append(doc.body)
        return "\n".join(bodies)

    def get_jsdoc_tags(self, symbol: Symbol) -> list[DocTag]:
        tags: list[DocTag] = []
        for doc in self._docs(symbol):
            for tag in doc.tags:
                if tag not in tags:
                    tags.append(tag)
        return tags

    def _docs(self, symbol: Symbol) -> list[DocComment]:
        docs = []
        for decl in symbol.declarations:
            if decl.doc is not None:
                docs.append(decl.doc)
        return docs


# ----------------------------------------------------------------------
# Syntax helpers
# ----------------------------------------------------------------------


def _first_named(node: Node) -> Optional[Node]:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _flatten(node: Node, kind: str) -> list[Node]:
    members: list[Node] = []
    for child in node.named_children:
        if child.type == "comment":
            continue
        if child.type == kind:
            members.extend(_flatten(child, kind))
        else:
            members.append(child)
    return members


def _module_candidates(base: Path) -> list[Path]:
    name = base.name
    for js_suffix, ts_suffix in ((".js", ".ts"), (".mjs", ".mts"), (".cjs", ".cts")):
        if name.endswith(js_suffix):
            stem = base.with_name(name[: -len(js_suffix)])
            return [stem.with_name(stem.name + ".d" + ts_suffix), stem.with_name(stem.name + ts_suffix)]
    candidates = [base] if name.endswith(_MODULE_SUFFIXES) else []
    candidates.extend(base.with_name(name + suffix) for suffix in _MODULE_SUFFIXES)
    candidates.extend(base / f"index{suffix}" for suffix in (".d.ts", ".ts", ".tsx"))
    return candidates


def _type_parameter_in_scope(name: str, node: Node) -> Optional[Node]:
    current = node.parent
    while current is not None:
        params = current.child_by_field_name("type_parameters")
        if params is not None:
            for param in params.named_children:
                if param.type == "type_parameter" and name_of(param) == name:
                    return param
        current = current.parent
    return None


def _type_parameters(node: Node) -> list[TypeParameterInfo]:
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return []
    result = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        constraint = param.child_by_field_name("constraint")
        default = param.child_by_field_name("value")
        constraint_type = _first_named(constraint) if constraint is not None else None
        default_type = _first_named(default) if default is not None else None
        result.append(TypeParameterInfo(
            name=name_of(param) or "",
            constraint=type_text(constraint_type) if constraint_type is not None else None,
            default=type_text(default_type) if default_type is not None else None,
        ))
    return result


def _parameters(node: Node) -> list[ParameterInfo]:
    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        single = node.child_by_field_name("parameter")
        if single is not None:
            return [ParameterInfo(name=node_text(single))]
        return []

    result = []
    for param in params_node.named_children:
        if param.type not in ("required_parameter", "optional_parameter"):
            continue
        pattern = param.child_by_field_name("pattern")
        if pattern is not None and node_text(pattern) == "this":
            continue  # this-parameter types the receiver, it is not an argument
        rest = pattern is not None and pattern.type == "rest_pattern"
        if pattern is None:
            name = "arg"
        elif rest:
            name = node_text(_first_named(pattern) or pattern).lstrip(".")
        else:
            name = type_text(pattern)

        annotation = param.child_by_field_name("type")
        value = param.child_by_field_name("value")
        default_text = type_text(value) if value is not None else None
        if annotation is not None:
            inner = _first_named(annotation)
            param_type = type_text(inner) if inner is not None else "any"
        else:
            param_type = _literal_type_name(value) if value is not None else "any"
        result.append(ParameterInfo(
            name=name,
            type_text=param_type,
            optional=param.type == "optional_parameter" or value is not None,
            rest=rest,
            default_text=default_text,
        ))
    return result


def _literal_type_name(value: Node) -> str:
    return {
        "string": "string",
        "template_string": "string",
        "number": "number",
        "true": "boolean",
        "false": "boolean",
        "array": "any[]",
    }.get(value.type, "any")


def _return_info(return_node: Optional[Node]) -> tuple[Optional[str], Optional[str]]:
    """Return (return type text, type predicate text) of a signature."""
    if return_node is None:
        return None, None
    kind = return_node.type
    if kind == "type_annotation":
        inner = _first_named(return_node)
        return (type_text(inner) if inner is not None else None), None
    if kind == "type_predicate_annotation":
        inner = _first_named(return_node)
        return "boolean", type_text(inner) if inner is not None else None
    if kind == "asserts_annotation":
        inner = _first_named(return_node)
        return "void", type_text(inner) if inner is not None else None
    if kind == "type_predicate":
        return "boolean", type_text(return_node)
    if kind == "asserts":
        return "void", type_text(return_node)
    return type_text(return_node), None


def _inferred_return(node: Node) -> str:
    body = node.child_by_field_name("body")
    if body is None:
        return "any"
    if body.type != "statement_block":
        return _literal_type_name(body)
    if _contains_return_value(body):
        return "any"
    return "void"


def _contains_return_value(node: Node) -> bool:
    for child in node.named_children:
        if child.type in ("function_declaration", "function_expression", "arrow_function", "class_declaration"):
            continue
        if child.type == "return_statement" and child.named_child_count > 0:
            return True
        if _contains_return_value(child):
            return True
    return False
