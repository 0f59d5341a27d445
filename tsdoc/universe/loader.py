"""Declaration universe loading.

A universe is the ordered list of files analyzed together: the standard
library first (lib.*.d.ts, then @types/node), then one package's declaration
files, then at most one local source file. Order is a tie-break for root
search and is preserved exactly.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ..checker.parser import is_declaration_path
from ..config import TsdocConfig
from ..errors import UniverseLoadFailure
from .packages import find_package_dirs, resolve_package_declaration_files

logger = logging.getLogger(__name__)

NPM_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class DeclarationUniverse:
    """Immutable set of files for one invocation."""

    stdlib_files: tuple[Path, ...] = ()
    package_name: Optional[str] = None
    package_files: tuple[Path, ...] = ()
    local_files: tuple[Path, ...] = ()

    @property
    def package_entry(self) -> Optional[Path]:
        return self.package_files[0] if self.package_files else None

    @property
    def files(self) -> tuple[Path, ...]:
        return self.stdlib_files + self.package_files + self.local_files

    @property
    def declaration_files(self) -> tuple[Path, ...]:
        """Files searched for a root name; local sources are not among them."""
        return tuple(p for p in self.stdlib_files + self.package_files if is_declaration_path(p))


def load_universe(
    config: TsdocConfig,
    package_name: Optional[str] = None,
    package_files: Optional[list[Path]] = None,
    local_module: Optional[Path] = None,
) -> DeclarationUniverse:
    """Assemble the universe for one lookup.

    Args:
        config: Discovery settings.
        package_name: Package whose declarations to add.
        package_files: Already-resolved declaration files of the package;
            resolved from ``package_name`` when omitted.
        local_module: Local source file to add last.

    Returns:
        DeclarationUniverse (standard library possibly empty, never raises
        for discovery problems).
    """
    stdlib = list_standard_library_declaration_files(config)
    if package_name and package_files is None:
        package_files = resolve_package_declaration_files(package_name, config)
    universe = DeclarationUniverse(
        stdlib_files=tuple(stdlib),
        package_name=package_name if package_files else None,
        package_files=tuple(package_files or ()),
        local_files=(local_module,) if local_module is not None else (),
    )
    logger.debug(
        "Universe: %d stdlib, %d package, %d local files",
        len(universe.stdlib_files), len(universe.package_files), len(universe.local_files),
    )
    return universe


def list_standard_library_declaration_files(config: TsdocConfig) -> list[Path]:
    """Sorted lib.*.d.ts files of the TypeScript toolchain, then @types/node.

    Discovery failure is logged and yields an empty list.
    """
    try:
        lib_dir = find_typescript_lib_dir(config)
    except UniverseLoadFailure as e:
        logger.warning("%s", e)
        return []

    files = lib_files(lib_dir)
    if config.include_node_types:
        files.extend(_node_type_files(config))
    return files


def lib_files(lib_dir: Path) -> list[Path]:
    """Every lib.*.d.ts in ``lib_dir``, lib.d.ts included, sorted by name."""
    return sorted(
        (p for p in lib_dir.glob("*.d.ts") if p.name.startswith("lib.")),
        key=lambda p: p.name,
    )


def find_typescript_lib_dir(config: TsdocConfig) -> Path:
    """Locate the directory holding lib.*.d.ts.

    Raises:
        UniverseLoadFailure: If no candidate directory has lib files.
    """
    for candidate in _lib_dir_candidates(config):
        if candidate.is_dir() and lib_files(candidate):
            logger.debug("Using TypeScript lib directory %s", candidate)
            return candidate
    raise UniverseLoadFailure("Failed to find TypeScript lib files")


def _lib_dir_candidates(config: TsdocConfig) -> Iterator[Path]:
    if config.typescript_lib:
        yield Path(config.typescript_lib)
    for package_dir in find_package_dirs("typescript", config):
        yield package_dir / "lib"
    if config.npm_global:
        # Only asked once everything local has failed
        global_root = _npm_global_root()
        if global_root is not None:
            yield global_root / "typescript" / "lib"


def _node_type_files(config: TsdocConfig) -> list[Path]:
    for package_dir in find_package_dirs("@types/node", config):
        files = sorted(package_dir.glob("*.d.ts"), key=lambda p: p.name)
        if files:
            return files
    return []


def _npm_global_root() -> Optional[Path]:
    npm = shutil.which("npm")
    if npm is None:
        return None
    try:
        completed = subprocess.run(
            [npm, "root", "-g"],
            capture_output=True,
            text=True,
            timeout=NPM_TIMEOUT_SECONDS,
            check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("npm root -g failed: %s", e)
        return None
    output = completed.stdout.strip()
    return Path(output) if output else None
