"""Query result types."""

from dataclasses import dataclass, field
from typing import Optional

from ..errors import NotFoundError
from .entity import ResolvedEntity

MEMBER_LIMIT = 20
EXPORT_LIMIT = 50


@dataclass
class TypeParameterEntry:
    name: str
    constraint: Optional[str] = None
    default: Optional[str] = None


@dataclass
class ParameterEntry:
    name: str
    type: str
    optional: bool = False
    rest: bool = False
    default: Optional[str] = None  # default value expression text
    doc: Optional[str] = None      # the signature's @param text


@dataclass
class SignatureInfo:
    """One call or construct signature."""

    kind: str                      # "call" or "construct"
    text: str                      # rendered "<T>(a: T): R"
    parameters: list[ParameterEntry] = field(default_factory=list)
    type_parameters: list[TypeParameterEntry] = field(default_factory=list)
    return_type: Optional[str] = None  # call signatures only
    predicate: Optional[str] = None    # "value is any[]"
    returns_doc: Optional[str] = None  # the signature's own @returns text


@dataclass
class MemberInfo:
    name: str
    type: str
    kind: str
    optional: bool = False
    readonly: bool = False
    static: bool = False
    doc: Optional[str] = None  # first line of the member's doc comment


@dataclass
class SymbolDescription:
    """Documentation facts about one resolved symbol."""

    name: str
    kind: str
    file: Optional[str]
    line: Optional[int]
    construct_signatures: list[SignatureInfo] = field(default_factory=list)
    call_signatures: list[SignatureInfo] = field(default_factory=list)
    type_text: Optional[str] = None  # only when there are no signatures
    documentation: str = ""
    deprecated: bool = False
    deprecated_note: Optional[str] = None
    since: Optional[str] = None
    throws: list[str] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    see: list[str] = field(default_factory=list)
    other_tags: list[str] = field(default_factory=list)  # rendered "@name text"
    members: list[MemberInfo] = field(default_factory=list)
    more_members: int = 0
    is_static: bool = False

    @property
    def location_str(self) -> str:
        if self.file and self.line is not None:
            return f"{self.file}:{self.line}"
        return self.file or "<unknown>"


@dataclass
class ExportEntry:
    name: str
    kind: str
    excerpt: Optional[str] = None


@dataclass
class ExportListing:
    """Exports of a package or module root."""

    name: str
    file: Optional[str]
    line: Optional[int]
    entries: list[ExportEntry] = field(default_factory=list)
    more_exports: int = 0

    @property
    def location_str(self) -> str:
        if self.file and self.line is not None:
            return f"{self.file}:{self.line}"
        return self.file or "<unknown>"


@dataclass
class ResolveResult:
    """Result of path resolution: an entity, or the reason there is none."""

    query: str
    entity: Optional[ResolvedEntity] = None
    error: Optional[NotFoundError] = None

    @property
    def found(self) -> bool:
        return self.entity is not None

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass
class LookupResult:
    """Outcome of one lookup: a description, a listing, or not found."""

    query: str
    description: Optional[SymbolDescription] = None
    listing: Optional[ExportListing] = None
    reason: Optional[str] = None  # why nothing was found, when known

    @property
    def found(self) -> bool:
        return self.description is not None or self.listing is not None
