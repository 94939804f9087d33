"""
Command-line interface for pdfbuildx.
"""

import os
import sys

import click
from pypdf import PdfReader
from rich.console import Console
from rich.table import Table

from pdfbuildx import __version__
from pdfbuildx.conformance import DEFAULT_CONFORMANCE, PdfConformance
from pdfbuildx.content import IccProfile, IccProfileType
from pdfbuildx.document import PdfDocument
from pdfbuildx.exceptions import PdfBuildXError
from pdfbuildx.metadata import parse_pdf_date
from pdfbuildx.utils import configure_logging, get_logger

console = Console()
LOGGER = get_logger("pdfbuildx.cli")


def _as_text(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def format_file_size(size_bytes):
    for unit in ("B", "KB", "MB"):
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}" if unit != "B" else f"{size_bytes} B"
        size_bytes /= 1024
    return f"{size_bytes:.1f} GB"


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    pdfbuildx - Build layered, print-ready PDF documents.
    """
    configure_logging(verbose)


@cli.command(name="new")
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--title', '-t', default='Untitled', help='Document title', type=str)
@click.option('--width', default=210.0, help='Page width in millimetres', type=float)
@click.option('--height', default=297.0, help='Page height in millimetres', type=float)
@click.option('--pages', '-n', default=1, help='Number of pages', type=click.IntRange(min=1))
@click.option('--layer', '-l', default='Layer 1', help='Name of the initial layer of each page', type=str)
@click.option(
    '--conformance', '-c',
    default=DEFAULT_CONFORMANCE.name,
    help='Conformance level',
    type=click.Choice([member.name for member in PdfConformance], case_sensitive=False)
)
@click.option(
    '--icc-profile',
    help='ICC profile embedded as the output intent',
    type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    '--icc-type',
    default=IccProfileType.CMYK.value,
    help='Colour space of the ICC profile',
    type=click.Choice([member.value for member in IccProfileType])
)
@click.option('--font', '-f', help='TrueType/OpenType font to embed', type=click.Path(exists=True, dir_okay=False))
@click.option('--text', help='Text written at the top of every page (requires --font)', type=str)
@click.option('--font-size', default=12.0, help='Font size in points', type=float)
@click.option('--check/--no-check', default=False, help='Validate the conformance level before saving')
def new(output, title, width, height, pages, layer, conformance, icc_profile, icc_type, font, text, font_size, check):
    """
    Create a new PDF document.

    Examples:

        pdfbuildx new out.pdf --title "Invoice"

        pdfbuildx new out.pdf -n 3 --font DejaVuSans.ttf --text "Hello"

        pdfbuildx new out.pdf -c CUSTOM --icc-profile FOGRA39.icc
    """
    try:
        if text and not font:
            console.print("[bold red]✗ Error:[/bold red] --text requires --font")
            sys.exit(1)

        document, page, first_layer = PdfDocument.new(title, width, height, layer)
        document.with_conformance(PdfConformance.from_name(conformance))

        if icc_profile:
            with open(icc_profile, 'rb') as handle:
                document.with_icc_profile(IccProfile.from_stream(handle, IccProfileType(icc_type)))

        font_index = None
        if font:
            with open(font, 'rb') as handle:
                font_index = document.add_font(handle)

        layers = [first_layer]
        for _ in range(pages - 1):
            _, next_layer = document.add_page(width, height, layer)
            layers.append(next_layer)

        if font_index is not None and text:
            for page_layer in layers:
                marker = document.add_marker(page_layer, 20, height - 20)
                document.add_text(text, font_index, font_size, marker)

        if check:
            document.check_for_errors()

        document_id = document.document_id
        output_path = document.save_to_path(output)

        table = Table(title="Document Created", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("File", os.path.basename(output_path))
        table.add_row("Title", title)
        table.add_row("Pages", str(pages))
        table.add_row("Page size", f"{width:g} x {height:g} mm")
        table.add_row("Conformance", PdfConformance.from_name(conformance).value)
        table.add_row("Document ID", document_id)
        table.add_row("Size", format_file_size(output_path.stat().st_size))
        console.print(table)
        console.print(f"\n[bold green]✓ Successfully created {output_path}[/bold green]\n")

    except PdfBuildXError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {str(e)}")
        sys.exit(1)
    except OSError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {str(e)}")
        sys.exit(1)


@cli.command(name="inspect")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
def inspect(input_pdf):
    """
    Show the structure of a PDF: pages, identifiers and catalog entries.

    Examples:

        pdfbuildx inspect out.pdf
    """
    try:
        reader = PdfReader(input_pdf)
    except Exception as e:
        LOGGER.debug("Failed to read %s", input_pdf, exc_info=True)
        console.print(f"[bold red]✗ Error:[/bold red] Unable to read PDF: {str(e)}")
        sys.exit(1)

    trailer = reader.trailer
    catalog = reader.trailer["/Root"]
    info = reader.metadata
    identifiers = trailer.get("/ID") or []

    table = Table(title="PDF Information", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("File", os.path.basename(input_pdf))
    table.add_row("Version", reader.pdf_header.removeprefix("%PDF-"))
    table.add_row("Pages", str(len(reader.pages)))
    if info is not None:
        table.add_row("Title", _as_text(info.get("/Title")))
        created = parse_pdf_date(_as_text(info.get("/CreationDate")))
        table.add_row("Created", created.isoformat() if created else "-")
        if "/GTS_PDFXVersion" in info:
            table.add_row("PDF/X", _as_text(info["/GTS_PDFXVersion"]))
    if len(identifiers) == 2:
        table.add_row("Document ID", _as_text(identifiers[0]))
        table.add_row("Instance ID", _as_text(identifiers[1]))
    table.add_row("Output intents", str(len(catalog.get("/OutputIntents", []))))
    groups = catalog["/OCProperties"]["/OCGs"] if "/OCProperties" in catalog else []
    table.add_row("Layers", str(len(groups)))
    table.add_row("Catalog keys", ", ".join(sorted(str(key) for key in catalog.keys())))
    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
