"""Parsing, binding and semantic queries over TypeScript declarations."""

from .checker import Checker
from .jsdoc import DocComment, DocTag, first_line
from .parser import SourceFile, parse_source_file, parse_source_text
from .program import build_program
from .symbols import Declaration, Symbol, SymbolFlags
from .types import ObjectType, Signature, SignatureKind, Type

__all__ = [
    "Checker",
    "DocComment",
    "DocTag",
    "first_line",
    "SourceFile",
    "parse_source_file",
    "parse_source_text",
    "build_program",
    "Declaration",
    "Symbol",
    "SymbolFlags",
    "ObjectType",
    "Signature",
    "SignatureKind",
    "Type",
]
