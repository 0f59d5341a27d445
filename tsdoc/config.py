"""Configuration loading for tsdoc.

Config file format (``tsdoc.json`` or ``.tsdoc.json`` in the working
directory, or any path given with ``--config`` / ``TSDOC_CONFIG``):

    {
        "typescript_lib": "/usr/lib/node_modules/typescript/lib",
        "search_paths": ["/path/to/project"],
        "include_node_types": true,
        "local_dirs": [".", "src"],
        "npm_global": true
    }

Every field is optional.
"""

import os
from pathlib import Path
from typing import Optional

import msgspec

from .errors import ConfigError

CONFIG_ENV = "TSDOC_CONFIG"
TYPESCRIPT_LIB_ENV = "TSDOC_TYPESCRIPT_LIB"
CONFIG_FILENAMES = ("tsdoc.json", ".tsdoc.json")


class TsdocConfig(msgspec.Struct, omit_defaults=True, forbid_unknown_fields=True):
    """Settings controlling where declarations are discovered."""

    typescript_lib: Optional[str] = None  # directory holding lib.*.d.ts
    search_paths: list[str] = []          # extra roots searched for node_modules
    include_node_types: bool = True       # add @types/node to the standard library
    local_dirs: list[str] = msgspec.field(default_factory=lambda: [".", "src"])
    npm_global: bool = True               # ask `npm root -g` as a last resort
    cwd: Optional[str] = None             # working directory override (tests, editors)

    @property
    def working_dir(self) -> Path:
        return Path(self.cwd) if self.cwd else Path.cwd()

    def search_roots(self) -> list[Path]:
        """Return directories whose node_modules are searched, nearest first."""
        start = self.working_dir.resolve()
        roots = [start, *start.parents]
        for extra in self.search_paths:
            path = Path(extra)
            if path not in roots:
                roots.append(path)
        return roots


_decoder = msgspec.json.Decoder(TsdocConfig)


def load_config(path: Optional[str | Path] = None, cwd: Optional[str | Path] = None) -> TsdocConfig:
    """Load configuration from disk.

    Args:
        path: Explicit config file. Falls back to ``$TSDOC_CONFIG``, then to
            ``tsdoc.json``/``.tsdoc.json`` in the working directory.
        cwd: Working directory to resolve relative lookups against.

    Returns:
        Parsed TsdocConfig (defaults when no file exists).

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    base = Path(cwd) if cwd else Path.cwd()
    config_file = _find_config_file(path, base)

    if config_file is None:
        config = TsdocConfig()
    else:
        try:
            with open(config_file, "rb") as f:
                config = _decoder.decode(f.read())
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_file}: {e}") from e
        except msgspec.DecodeError as e:
            raise ConfigError(f"Invalid config file {config_file}: {e}") from e

    overrides = {}
    lib_override = os.environ.get(TYPESCRIPT_LIB_ENV)
    if lib_override:
        overrides["typescript_lib"] = lib_override
    if cwd is not None:
        overrides["cwd"] = str(cwd)
    if overrides:
        config = msgspec.structs.replace(config, **overrides)
    return config


def _find_config_file(path: Optional[str | Path], base: Path) -> Optional[Path]:
    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit

    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        explicit = Path(env_path)
        if not explicit.exists():
            raise ConfigError(f"Config file not found: {explicit} (from ${CONFIG_ENV})")
        return explicit

    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None
