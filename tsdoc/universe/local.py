"""Local project source discovery."""

from pathlib import Path
from typing import Optional

from ..config import TsdocConfig

LOCAL_SUFFIXES = (".d.ts", ".ts", ".tsx", ".mts")
LOCAL_INDEX_FILES = ("index.d.ts", "index.ts")


def find_local_declaration_candidate(module_name: str, config: TsdocConfig) -> Optional[Path]:
    """Find ``<module_name>.ts`` (or a sibling variant) in the local directories.

    Args:
        module_name: Root segment of the symbol path.
        config: Supplies the working directory and ``local_dirs``.

    Returns:
        The first existing candidate, or None.
    """
    if not module_name or "/" in module_name or module_name.startswith("."):
        return None
    base = config.working_dir
    for local_dir in config.local_dirs:
        directory = base / local_dir
        if not directory.is_dir():
            continue
        for suffix in LOCAL_SUFFIXES:
            candidate = directory / f"{module_name}{suffix}"
            if candidate.is_file():
                return candidate
        for index_name in LOCAL_INDEX_FILES:
            candidate = directory / module_name / index_name
            if candidate.is_file():
                return candidate
    return None
