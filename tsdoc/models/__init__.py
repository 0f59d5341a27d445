"""Data models for tsdoc."""

from .entity import EntityKind, ResolvedEntity
from .results import (
    EXPORT_LIMIT,
    MEMBER_LIMIT,
    ExportEntry,
    ExportListing,
    LookupResult,
    MemberInfo,
    ParameterEntry,
    ResolveResult,
    SignatureInfo,
    SymbolDescription,
    TypeParameterEntry,
)

__all__ = [
    "EntityKind",
    "ResolvedEntity",
    "EXPORT_LIMIT",
    "MEMBER_LIMIT",
    "ExportEntry",
    "ExportListing",
    "LookupResult",
    "MemberInfo",
    "ParameterEntry",
    "ResolveResult",
    "SignatureInfo",
    "SymbolDescription",
    "TypeParameterEntry",
]
