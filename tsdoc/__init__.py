"""tsdoc - documentation lookup for TypeScript symbols."""

__version__ = "0.1.0"
