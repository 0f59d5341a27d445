"""Package type-declaration discovery.

Resolution is an ordered list of strategies. Each strategy returns the
package's declaration entry point or None; the first hit wins. Nothing in
this module raises: unreadable manifests and missing directories degrade to
"no declarations" with a debug log.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Optional

import msgspec

from ..config import TsdocConfig
from ..checker.parser import is_declaration_path

logger = logging.getLogger(__name__)

MAX_PACKAGE_FILES = 200

_RE_RELATIVE_SPECIFIER = re.compile(
    r"""(?:from\s+|import\s*\(\s*|require\s*\(\s*|import\s+)["'](\.{1,2}/[^"']+)["']"""
)
_RE_REFERENCE_PATH = re.compile(r"""///\s*<reference\s+path\s*=\s*["']([^"']+)["']""")


class PackageManifest(msgspec.Struct):
    """The fields of package.json that matter for type discovery."""

    name: Optional[str] = None
    types: Optional[str] = None
    typings: Optional[str] = None


_manifest_decoder = msgspec.json.Decoder(PackageManifest)


def read_manifest(package_dir: Path) -> Optional[PackageManifest]:
    """Decode ``package_dir/package.json``; None when missing or invalid."""
    manifest_path = package_dir / "package.json"
    try:
        with open(manifest_path, "rb") as f:
            return _manifest_decoder.decode(f.read())
    except OSError:
        return None
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        logger.debug("Ignoring unreadable manifest %s: %s", manifest_path, e)
        return None


def types_package_name(name: str) -> str:
    """Community type package for ``name`` (``@scope/pkg`` -> ``@types/scope__pkg``)."""
    if name.startswith("@") and "/" in name:
        scope, _, package = name[1:].partition("/")
        return f"@types/{scope}__{package}"
    return f"@types/{name}"


def find_package_dirs(name: str, config: TsdocConfig) -> list[Path]:
    """Installed copies of ``name`` under node_modules, nearest first."""
    dirs = []
    for root in config.search_roots():
        candidate = root / "node_modules" / name
        if candidate.is_dir():
            dirs.append(candidate)
    return dirs


def _declared_entry(package_dir: Path) -> Optional[Path]:
    manifest = read_manifest(package_dir)
    if manifest is None:
        return None
    declared = manifest.types or manifest.typings
    if not declared:
        return None
    entry = package_dir / declared
    if entry.is_dir():
        entry = entry / "index.d.ts"
    elif not entry.name.endswith((".ts", ".mts", ".cts")):
        entry = entry.with_name(entry.name + ".d.ts")
    return entry if entry.is_file() else None


def _index_entry(package_dir: Path) -> Optional[Path]:
    entry = package_dir / "index.d.ts"
    return entry if entry.is_file() else None


def manifest_types_strategy(name: str, config: TsdocConfig) -> Optional[Path]:
    """The package's own ``types``/``typings`` field."""
    for package_dir in find_package_dirs(name, config):
        entry = _declared_entry(package_dir)
        if entry is not None:
            return entry
    return None


def index_declaration_strategy(name: str, config: TsdocConfig) -> Optional[Path]:
    """A conventional ``index.d.ts`` beside the manifest."""
    for package_dir in find_package_dirs(name, config):
        entry = _index_entry(package_dir)
        if entry is not None:
            return entry
    return None


def types_package_strategy(name: str, config: TsdocConfig) -> Optional[Path]:
    """The ``@types/<name>`` package."""
    for package_dir in find_package_dirs(types_package_name(name), config):
        entry = _declared_entry(package_dir) or _index_entry(package_dir)
        if entry is not None:
            return entry
    return None


Strategy = Callable[[str, TsdocConfig], Optional[Path]]

STRATEGIES: tuple[Strategy, ...] = (
    manifest_types_strategy,
    index_declaration_strategy,
    types_package_strategy,
)


def find_package_entry(name: str, config: TsdocConfig) -> Optional[Path]:
    """Run the strategies in order and return the first entry point found."""
    if not name or name.startswith("."):
        return None
    for strategy in STRATEGIES:
        entry = strategy(name, config)
        if entry is not None:
            logger.debug("Package %s: %s found %s", name, strategy.__name__, entry)
            return entry
    logger.debug("Package %s: no type declarations found", name)
    return None


def resolve_package_declaration_files(name: str, config: TsdocConfig) -> list[Path]:
    """Entry point of ``name`` plus the relative declaration files it pulls in.

    Returns:
        Ordered list, entry first; empty when the package has no
        discoverable type declarations.
    """
    entry = find_package_entry(name, config)
    if entry is None:
        return []
    return collect_declaration_closure(entry)


def collect_declaration_closure(entry: Path, limit: int = MAX_PACKAGE_FILES) -> list[Path]:
    """Follow relative imports and reference paths from ``entry``.

    Only files inside the entry's package directory are followed. Files are
    returned in discovery order.
    """
    package_dir = _package_root(entry)
    files = [entry]
    seen = {entry.resolve()}
    queue = [entry]
    while queue and len(files) < limit:
        current = queue.pop(0)
        try:
            text = current.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Cannot read %s: %s", current, e)
            continue
        specifiers = _RE_REFERENCE_PATH.findall(text) + _RE_RELATIVE_SPECIFIER.findall(text)
        for specifier in specifiers:
            target = _resolve_relative(current.parent / specifier)
            if target is None:
                continue
            resolved = target.resolve()
            if resolved in seen or not _is_within(resolved, package_dir):
                continue
            seen.add(resolved)
            files.append(target)
            queue.append(target)
            if len(files) >= limit:
                break
    return files


def _resolve_relative(base: Path) -> Optional[Path]:
    name = base.name
    candidates = []
    if is_declaration_path(base):
        candidates.append(base)
    for js_suffix, dts_suffix in ((".js", ".d.ts"), (".mjs", ".d.mts"), (".cjs", ".d.cts")):
        if name.endswith(js_suffix):
            candidates.append(base.with_name(name[: -len(js_suffix)] + dts_suffix))
    candidates.append(base.with_name(name + ".d.ts"))
    candidates.append(base / "index.d.ts")
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _package_root(entry: Path) -> Path:
    for parent in entry.resolve().parents:
        if (parent / "package.json").is_file():
            return parent
    return entry.resolve().parent


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.relative_to(directory)
    except ValueError:
        return False
    return True
