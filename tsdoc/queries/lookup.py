"""End-to-end lookup of a dotted symbol path."""

import logging
from pathlib import Path
from typing import Optional

from ..checker import Checker, Declaration, Symbol, build_program
from ..config import TsdocConfig
from ..errors import MemberMissingError, NotFoundError
from ..models import EntityKind, LookupResult, ResolvedEntity
from ..universe import (
    DeclarationUniverse,
    find_local_declaration_candidate,
    load_universe,
    resolve_package_declaration_files,
)
from .describe import DescribeQuery
from .exports import ExportsQuery
from .resolve import ResolveQuery, descend, parse_symbol_path

logger = logging.getLogger(__name__)


class LookupQuery:
    """Resolve a symbol path from scratch and describe what it names.

    Every execution loads its own universe and builds its own checker;
    nothing is shared between calls.
    """

    def __init__(self, config: TsdocConfig):
        self.config = config

    def execute(self, symbol: str) -> LookupResult:
        """Execute a lookup.

        Args:
            symbol: Dotted symbol path (``Array.map``, ``express.Request``).

        Returns:
            LookupResult holding a description or listing, or the reason
            nothing was found.

        Raises:
            ValueError: If the path is empty or has empty segments.
        """
        segments = parse_symbol_path(symbol)
        root = segments[0]

        package_files = resolve_package_declaration_files(root, self.config)
        local_module: Optional[Path] = None
        if not package_files:
            local_module = find_local_declaration_candidate(root, self.config)

        universe = load_universe(
            self.config,
            package_name=root if package_files else None,
            package_files=package_files,
            local_module=local_module,
        )
        checker = build_program(universe)
        return lookup_in_program(symbol, segments, universe, checker)


def lookup_in_program(
    query: str, segments: list[str], universe: DeclarationUniverse, checker: Checker
) -> LookupResult:
    """Run the package, universe and local-file steps in order.

    When every step fails, the reported reason is the first missing member
    (the most specific failure), else the last reason seen.
    """
    errors: list[NotFoundError] = []
    for step in (_lookup_package, _lookup_universe, _lookup_local):
        result = step(query, segments, universe, checker, errors)
        if result is not None:
            return result
    error = next((e for e in errors if isinstance(e, MemberMissingError)), errors[-1] if errors else None)
    return LookupResult(query=query, reason=str(error) if error is not None else None)


def _lookup_package(
    query: str, segments: list[str], universe: DeclarationUniverse, checker: Checker, errors: list[NotFoundError]
) -> Optional[LookupResult]:
    if universe.package_entry is None or universe.package_name is None:
        return None
    source_file = checker.get_source_file(universe.package_entry)
    module = checker.get_module_symbol(source_file) if source_file is not None else None
    if module is None:
        module = checker.get_ambient_module(universe.package_name)
    if module is None:
        logger.debug("Package %s has no module symbol", universe.package_name)
        return None
    return _from_module(query, segments, module, universe.package_name, checker, errors)


def _lookup_universe(
    query: str, segments: list[str], universe: DeclarationUniverse, checker: Checker, errors: list[NotFoundError]
) -> Optional[LookupResult]:
    result = ResolveQuery(checker, universe).execute(".".join(segments))
    if not result.found:
        if result.error is not None:
            errors.append(result.error)
        return None
    entity = result.entity
    if entity.kind == EntityKind.MODULE and len(segments) == 1:
        return LookupResult(query=query, listing=ExportsQuery(checker).execute(entity.symbol, segments[0]))
    return LookupResult(query=query, description=DescribeQuery(checker).execute(entity))


def _lookup_local(
    query: str, segments: list[str], universe: DeclarationUniverse, checker: Checker, errors: list[NotFoundError]
) -> Optional[LookupResult]:
    if not universe.local_files:
        return None
    source_file = checker.get_source_file(universe.local_files[0])
    if source_file is None:
        return None
    module = checker.get_module_symbol(source_file)
    if module is None:
        logger.debug("%s has no exports", source_file.file_name)
        return None
    return _from_module(query, segments, module, segments[0], checker, errors)


def _from_module(
    query: str, segments: list[str], module: Symbol, name: str, checker: Checker, errors: list[NotFoundError]
) -> Optional[LookupResult]:
    if len(segments) == 1:
        return LookupResult(query=query, listing=ExportsQuery(checker).execute(module, name))
    declaration: Optional[Declaration] = module.primary_declaration
    root = ResolvedEntity(symbol=module, declaration=declaration, kind=EntityKind.MODULE)
    result = descend(root, segments[1:], checker, root_name=name)
    if not result.found:
        if result.error is not None:
            errors.append(result.error)
        return None
    return LookupResult(query=query, description=DescribeQuery(checker).execute(result.entity))
