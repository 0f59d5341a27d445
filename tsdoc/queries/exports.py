"""Export listing for package and module roots."""

from typing import Optional

from ..checker import Checker, Symbol, first_line
from ..models import EXPORT_LIMIT, EntityKind, ExportEntry, ExportListing
from .base import Query
from .resolve import display_declaration, entity_kind

EXCERPT_LENGTH = 60


def excerpt(text: Optional[str], limit: int = EXCERPT_LENGTH) -> Optional[str]:
    """First line of ``text``, cut to ``limit`` characters with ``...``."""
    line = first_line(text)
    if not line:
        return None
    if len(line) > limit:
        return line[:limit] + "..."
    return line


def list_exports(module: Symbol, checker: Checker, package_name: str) -> ExportListing:
    """List a module's exports in declaration order, capped at EXPORT_LIMIT.

    Args:
        module: Module symbol (file module, ambient module or namespace).
        checker: Checker of the universe the module belongs to.
        package_name: Name shown for the listing.

    Returns:
        ExportListing with at most EXPORT_LIMIT entries and the count of
        the rest.
    """
    declaration = module.primary_declaration
    exports = checker.get_exports_of_module(module)
    entries = []
    for name, symbol in exports[:EXPORT_LIMIT]:
        target = checker.resolve_alias(symbol)
        if target is None:
            entries.append(ExportEntry(name=name, kind=EntityKind.UNRESOLVED_MEMBER.value))
            continue
        entries.append(ExportEntry(
            name=name,
            kind=entity_kind(target, display_declaration(target)).value,
            excerpt=excerpt(checker.get_documentation_comment(target)),
        ))
    return ExportListing(
        name=package_name,
        file=declaration.source_file.file_name if declaration is not None else None,
        line=declaration.line if declaration is not None else None,
        entries=entries,
        more_exports=max(0, len(exports) - EXPORT_LIMIT),
    )


class ExportsQuery(Query[ExportListing]):
    """List the exports of a module symbol."""

    def execute(self, module: Symbol, name: str) -> ExportListing:
        return list_exports(module, self.checker, name)
