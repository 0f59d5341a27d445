"""Output formatting module."""

from .json_formatter import print_json, lookup_to_dict, description_to_dict, listing_to_dict
from .console import (
    print_description,
    print_listing,
    print_not_found,
    print_error,
)

__all__ = [
    "print_json",
    "lookup_to_dict",
    "description_to_dict",
    "listing_to_dict",
    "print_description",
    "print_listing",
    "print_not_found",
    "print_error",
]
