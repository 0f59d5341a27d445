"""Type and signature model used by the checker."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .jsdoc import DocComment
from .symbols import Declaration, Symbol


class SignatureKind(str, Enum):
    CALL = "call"
    CONSTRUCT = "construct"


@dataclass(eq=False)
class Type:
    """Base type; ``text`` is the display form."""

    text: str


@dataclass(eq=False)
class PrimitiveType(Type):
    """Keyword, literal or otherwise opaque type.

    ``apparent`` names the global interface used for property lookup
    (``string`` -> ``String``, ``T[]`` -> ``Array``).
    """

    apparent: Optional[str] = None


@dataclass(eq=False)
class TypeParameterType(Type):
    constraint: Optional[Type] = None


@dataclass(eq=False)
class ObjectType(Type):
    """Interface, class, object literal, function or module type."""

    symbol: Optional[Symbol] = None
    properties: dict[str, Symbol] = field(default_factory=dict)
    call_signatures: list["Signature"] = field(default_factory=list)
    construct_signatures: list["Signature"] = field(default_factory=list)


@dataclass(eq=False)
class UnionType(Type):
    types: list[Type] = field(default_factory=list)


@dataclass(eq=False)
class IntersectionType(Type):
    types: list[Type] = field(default_factory=list)


ANY = PrimitiveType("any")


@dataclass(frozen=True)
class TypeParameterInfo:
    name: str
    constraint: Optional[str] = None
    default: Optional[str] = None

    def render(self) -> str:
        text = self.name
        if self.constraint:
            text += f" extends {self.constraint}"
        if self.default:
            text += f" = {self.default}"
        return text


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    type_text: str = "any"
    optional: bool = False
    rest: bool = False
    default_text: Optional[str] = None

    def render(self) -> str:
        prefix = "..." if self.rest else ""
        marker = "?" if self.optional and not self.rest and self.default_text is None else ""
        text = f"{prefix}{self.name}{marker}: {self.type_text}"
        if self.default_text is not None:
            text += f" = {self.default_text}"
        return text


@dataclass(eq=False)
class Signature:
    """A call or construct signature."""

    kind: SignatureKind
    declaration: Optional[Declaration] = None
    type_parameters: list[TypeParameterInfo] = field(default_factory=list)
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: str = "any"
    predicate: Optional[str] = None
    doc: Optional[DocComment] = None

    @property
    def return_text(self) -> str:
        return self.predicate or self.return_type
