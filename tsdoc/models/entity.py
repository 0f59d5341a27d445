"""Resolved entity model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..checker import Declaration, Symbol


class EntityKind(str, Enum):
    INTERFACE = "interface"
    CLASS = "class"
    TYPE_ALIAS = "type-alias"
    FUNCTION = "function"
    METHOD = "method"
    PROPERTY = "property"
    VARIABLE = "variable"
    ENUM = "enum"
    MODULE = "module"
    UNRESOLVED_MEMBER = "unresolved-member"
    SYMBOL = "symbol"  # declaration shape with no dedicated kind


@dataclass
class ResolvedEntity:
    """A symbol found by the resolver, with the declaration it was found through."""

    symbol: Symbol
    declaration: Optional[Declaration]
    kind: EntityKind
    is_static: bool = False  # reached through a class or constructor value

    @property
    def name(self) -> str:
        return self.symbol.name

    @property
    def file(self) -> Optional[str]:
        if self.declaration is None:
            return None
        return self.declaration.source_file.file_name

    @property
    def line(self) -> Optional[int]:
        if self.declaration is None:
            return None
        return self.declaration.line

    @property
    def location_str(self) -> str:
        """Return file:line string."""
        if self.file and self.line is not None:
            return f"{self.file}:{self.line}"
        return self.file or "<unknown>"
