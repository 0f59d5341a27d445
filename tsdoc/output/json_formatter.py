"""JSON output formatter."""

import json
from dataclasses import asdict
from typing import Any

from ..models import ExportListing, LookupResult, SymbolDescription


def print_json(data: Any):
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def description_to_dict(description: SymbolDescription) -> dict:
    return asdict(description)


def listing_to_dict(listing: ExportListing) -> dict:
    return asdict(listing)


def lookup_to_dict(result: LookupResult) -> dict:
    """Convert a lookup result to a JSON-serializable dict."""
    if result.description is not None:
        return {"query": result.query, "description": description_to_dict(result.description)}
    if result.listing is not None:
        return {"query": result.query, "listing": listing_to_dict(result.listing)}
    return {"query": result.query, "error": f"Symbol '{result.query}' not found", "reason": result.reason}
