"""Error taxonomy for tsdoc."""

from typing import Optional


class TsdocError(Exception):
    """Base class for tsdoc errors."""


class ConfigError(TsdocError):
    """Raised when a configuration file cannot be read or decoded."""


class UniverseLoadFailure(TsdocError):
    """Raised when standard-library declarations cannot be discovered.

    Never escapes the loader: it is logged and degraded to an empty list.
    """


class NotFoundError(TsdocError):
    """No declaration, export or member chain matches the requested path."""

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        super().__init__(reason or f"Symbol '{path}' not found")


class MemberMissingError(NotFoundError):
    """An intermediate entity's type lacks the next path segment."""

    def __init__(self, path: str, owner: str, segment: str):
        self.owner = owner
        self.segment = segment
        super().__init__(path, f"'{owner}' has no member '{segment}'")
