"""Declaration universe discovery."""

from .loader import (
    DeclarationUniverse,
    find_typescript_lib_dir,
    list_standard_library_declaration_files,
    load_universe,
)
from .local import find_local_declaration_candidate
from .packages import find_package_entry, resolve_package_declaration_files

__all__ = [
    "DeclarationUniverse",
    "find_typescript_lib_dir",
    "list_standard_library_declaration_files",
    "load_universe",
    "find_local_declaration_candidate",
    "find_package_entry",
    "resolve_package_declaration_files",
]
