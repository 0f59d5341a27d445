"""Query classes for tsdoc."""

from .base import Query
from .describe import DescribeQuery, describe
from .exports import ExportsQuery, list_exports
from .lookup import LookupQuery, lookup_in_program
from .resolve import NodeShape, ResolveQuery, descend, parse_symbol_path, resolve

__all__ = [
    "Query",
    "DescribeQuery",
    "describe",
    "ExportsQuery",
    "list_exports",
    "LookupQuery",
    "lookup_in_program",
    "NodeShape",
    "ResolveQuery",
    "descend",
    "parse_symbol_path",
    "resolve",
]
