"""Program building: parse and bind a declaration universe."""

import logging
from typing import TYPE_CHECKING

from .binder import Binder
from .checker import Checker
from .parser import SourceFile, parse_source_file
from .symbols import Symbol

if TYPE_CHECKING:
    from ..universe import DeclarationUniverse

logger = logging.getLogger(__name__)


def build_program(universe: "DeclarationUniverse") -> Checker:
    """Parse every file of the universe once and bind them into one program.

    Unreadable files are skipped with a warning.
    """
    binder = Binder()
    source_files: list[SourceFile] = []
    for path in universe.files:
        try:
            source_file = parse_source_file(path)
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            continue
        binder.bind_file(source_file)
        source_files.append(source_file)

    package_modules: dict[str, Symbol] = {}
    entry = universe.package_entry
    if universe.package_name and entry is not None:
        module = binder.file_modules.get(str(entry.resolve()))
        if module is not None:
            package_modules[universe.package_name] = module

    logger.debug("Bound %d files, %d ambient modules", len(source_files), len(binder.ambient_modules))
    return Checker(binder, source_files, package_modules)
