"""Description extraction for a resolved entity."""

from typing import Optional

from ..checker import Checker, Signature, SignatureKind, Symbol, SymbolFlags, first_line
from ..checker.parser import has_token, type_text
from ..models import (
    MEMBER_LIMIT,
    EntityKind,
    MemberInfo,
    ParameterEntry,
    ResolvedEntity,
    SignatureInfo,
    SymbolDescription,
    TypeParameterEntry,
)
from .base import Query
from .resolve import display_declaration, entity_kind

# Tags rendered elsewhere and therefore not listed under "other".
_CONSUMED_TAGS = frozenset({
    "param", "arg", "argument",
    "returns", "return",
    "template",
    "deprecated", "since", "throws", "exception", "example", "see",
})


def describe(entity: ResolvedEntity, checker: Checker) -> SymbolDescription:
    """Build the description of ``entity``. Pure: repeated calls are equal."""
    description = SymbolDescription(
        name=entity.name,
        kind=entity.kind.value,
        file=entity.file,
        line=entity.line,
        is_static=entity.is_static,
    )
    if entity.kind == EntityKind.UNRESOLVED_MEMBER:
        return description

    symbol = entity.symbol
    type_ = checker.get_type_of_symbol(symbol)
    construct = checker.get_signatures_of_type(type_, SignatureKind.CONSTRUCT)
    call = checker.get_signatures_of_type(type_, SignatureKind.CALL)
    description.construct_signatures = [signature_info(sig, checker) for sig in construct]
    description.call_signatures = [signature_info(sig, checker) for sig in call]

    if not construct and not call:
        description.type_text = _flat_type_text(entity, checker)

    description.documentation = checker.get_documentation_comment(symbol)
    _apply_tags(description, checker, symbol)

    members = _members(entity, checker)
    description.members = members[:MEMBER_LIMIT]
    description.more_members = max(0, len(members) - MEMBER_LIMIT)
    return description


def signature_info(signature: Signature, checker: Checker) -> SignatureInfo:
    doc = signature.doc
    is_call = signature.kind == SignatureKind.CALL
    return SignatureInfo(
        kind=signature.kind.value,
        text=checker.signature_to_string(signature),
        parameters=[
            ParameterEntry(
                name=param.name,
                type=param.type_text,
                optional=param.optional,
                rest=param.rest,
                default=param.default_text,
                doc=doc.param_doc(param.name) if doc is not None else None,
            )
            for param in signature.parameters
        ],
        type_parameters=[
            TypeParameterEntry(name=tp.name, constraint=tp.constraint, default=tp.default)
            for tp in signature.type_parameters
        ],
        return_type=signature.return_type if is_call else None,
        predicate=signature.predicate if is_call else None,
        returns_doc=doc.returns_doc() if is_call and doc is not None else None,
    )


def _flat_type_text(entity: ResolvedEntity, checker: Checker) -> Optional[str]:
    if entity.kind == EntityKind.INTERFACE:
        return None
    if entity.kind == EntityKind.TYPE_ALIAS and entity.declaration is not None:
        value = entity.declaration.node.child_by_field_name("value")
        if value is not None:
            return type_text(value)
    return checker.type_to_string(checker.get_type_of_symbol(entity.symbol))


def _apply_tags(description: SymbolDescription, checker: Checker, symbol: Symbol) -> None:
    for tag in checker.get_jsdoc_tags(symbol):
        if tag.name == "deprecated":
            description.deprecated = True
            if tag.text and description.deprecated_note is None:
                description.deprecated_note = tag.text
        elif tag.name == "since":
            if description.since is None:
                description.since = tag.text
        elif tag.name in ("throws", "exception"):
            description.throws.append(tag.text)
        elif tag.name == "example":
            description.examples.append(tag.text)
        elif tag.name == "see":
            description.see.append(tag.text)
        elif tag.name not in _CONSUMED_TAGS:
            description.other_tags.append(tag.render())


# ----------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------


def _members(entity: ResolvedEntity, checker: Checker) -> list[MemberInfo]:
    symbol = entity.symbol
    if entity.kind == EntityKind.INTERFACE:
        return [member_info(member, checker) for member in symbol.members.values()]
    if entity.kind == EntityKind.CLASS:
        instance = checker.get_properties_of_type(checker.get_declared_type_of_symbol(symbol))
        statics = checker.get_properties_of_type(checker.get_type_of_symbol(symbol))
        return [member_info(member, checker) for member in instance] + \
            [member_info(member, checker, static=True) for member in statics]
    properties = checker.get_properties_of_type(checker.get_type_of_symbol(symbol))
    return [member_info(member, checker) for member in properties]


def member_info(member: Symbol, checker: Checker, static: bool = False) -> MemberInfo:
    """One-line summary of a property or method."""
    declaration = member.primary_declaration
    node = declaration.node if declaration is not None else None
    return MemberInfo(
        name=member.name,
        type=_member_type_text(member, checker),
        kind=entity_kind(member, display_declaration(member)).value,
        optional=member.is_optional or (node is not None and has_token(node, "?")),
        readonly=node is not None and has_token(node, "readonly"),
        static=static or (node is not None and has_token(node, "static")),
        doc=first_line(checker.get_documentation_comment(member)) or None,
    )


def _member_type_text(member: Symbol, checker: Checker) -> str:
    declaration = member.primary_declaration
    if member.has(SymbolFlags.METHOD | SymbolFlags.FUNCTION):
        signatures = checker.get_signatures_of_type(checker.get_type_of_symbol(member), SignatureKind.CALL)
        if signatures:
            text = checker.signature_to_string(signatures[0])
            if len(signatures) > 1:
                text += f" (+{len(signatures) - 1} overloads)"
            return text
    if declaration is not None:
        annotation = declaration.node.child_by_field_name("type")
        if annotation is not None and annotation.type == "type_annotation":
            inner = next((c for c in annotation.named_children if c.type != "comment"), None)
            if inner is not None:
                return type_text(inner)
    return checker.type_to_string(checker.get_type_of_symbol(member))


class DescribeQuery(Query[SymbolDescription]):
    """Describe a resolved entity."""

    def execute(self, entity: ResolvedEntity) -> SymbolDescription:
        return describe(entity, self.checker)
