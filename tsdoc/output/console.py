"""Console output formatters using Rich."""

from rich.console import Console
from rich.markup import escape

from ..models import ExportListing, SignatureInfo, SymbolDescription

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


def _heading(name: str):
    console.print()
    console.print(f"[bold]{escape(name)}[/bold]")
    console.print("=" * len(name))
    console.print()


def _print_signature(sig: SignatureInfo, prefix: str = ""):
    console.print(f"  {prefix}{escape(sig.text)}")
    for param in sig.parameters:
        if param.doc:
            console.print(f"    [dim]@param[/dim] {escape(param.name)} - {escape(param.doc)}")
    if sig.returns_doc:
        console.print(f"    [dim]@returns[/dim] {escape(sig.returns_doc)}")


def print_description(description: SymbolDescription):
    """Print a symbol description."""
    _heading(description.name)
    kind = description.kind + (" (static)" if description.is_static else "")
    console.print(f"Kind: {kind}")
    console.print(f"Location: {escape(description.location_str)}")

    if description.construct_signatures:
        console.print("\n[bold]Constructor Signatures:[/bold]")
        for sig in description.construct_signatures:
            _print_signature(sig, prefix="new ")

    if description.call_signatures:
        console.print("\n[bold]Call Signatures:[/bold]")
        for sig in description.call_signatures:
            _print_signature(sig)

    if description.type_text:
        console.print(f"\nType: {escape(description.type_text)}")

    if description.deprecated:
        note = f": {description.deprecated_note}" if description.deprecated_note else ""
        console.print(f"\n[red]DEPRECATED{escape(note)}[/red]")

    if description.documentation:
        console.print("\n[bold]Description:[/bold]")
        console.print(escape(description.documentation))

    if description.since:
        console.print(f"\nSince: {escape(description.since)}")

    if description.throws:
        console.print("\n[bold]Throws:[/bold]")
        for text in description.throws:
            console.print(f"  {escape(text)}")

    if description.examples:
        console.print("\n[bold]Examples:[/bold]")
        for text in description.examples:
            console.print(escape(text))

    if description.see:
        console.print("\n[bold]See also:[/bold]")
        for text in description.see:
            console.print(f"  {escape(text)}")

    if description.other_tags:
        console.print("\n[bold]Tags:[/bold]")
        for text in description.other_tags:
            console.print(f"  {escape(text)}")

    if description.members:
        console.print("\n[bold]Members:[/bold]")
        for member in description.members:
            modifiers = "".join(m + " " for m, on in (("static", member.static), ("readonly", member.readonly)) if on)
            optional = "?" if member.optional else ""
            console.print(f"  {modifiers}{escape(member.name)}{optional}: {escape(member.type)}")
            if member.doc:
                console.print(f"    [dim]{escape(member.doc)}[/dim]")
        if description.more_members:
            console.print(f"  ... and {description.more_members} more")


def print_listing(listing: ExportListing):
    """Print a package/module export listing."""
    _heading(listing.name)
    console.print(f"Location: {escape(listing.location_str)}")
    console.print("\n[bold]Exports:[/bold]")
    if not listing.entries:
        console.print("  [dim]No exports found[/dim]")
    for entry in listing.entries:
        line = f"  {escape(entry.name)} ({entry.kind})"
        if entry.excerpt:
            line += f" - {escape(entry.excerpt)}"
        console.print(line)
    if listing.more_exports:
        console.print(f"  ... and {listing.more_exports} more")


def print_not_found(symbol: str):
    """Report a failed lookup on stderr."""
    err_console.print(escape(f"Symbol '{symbol}' not found"))


def print_error(message: str):
    err_console.print(escape(f"Error: {message}"))
