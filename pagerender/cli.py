"""
Command-line interface for pagerender.

Provides commands for:
- Rendering text lines and images into a PDF
- Inspecting rotated bounding boxes
- System information

Usage:
    pagerender render out.pdf --text "Hello" --image figure.jpg --rotate 30
    pagerender bbox 40 20 30 90 -- -45
    pagerender info
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pagerender import __version__
from pagerender.config import APP_NAME, DEFAULT_FONT_SIZE, DEFAULT_PAGE_SIZE, DocumentConfig, page_size
from pagerender.document import Document
from pagerender.elements import Image, Text
from pagerender.errors import PageRenderError
from pagerender.fonts import Builtin, Font
from pagerender.geometry import angle_range, bounding_box
from pagerender.models import Alignment, LineStyle, Rotation, Size
from pagerender.style import Style

app = typer.Typer(
    name=APP_NAME,
    help="pagerender: paginated PDF rendering with rotated image placement",
    add_completion=False,
)
console = Console()

DEFAULT_ANGLES = [0.0, 30.0, 45.0, 90.0, 135.0, 180.0]


def version_callback(value: bool):
    if value:
        console.print(f"pagerender v{__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose",
        help="Enable debug logging",
    ),
):
    """pagerender: render text and images into PDF pages."""
    setup_logging(verbose)


@app.command()
def render(
    output_file: Path = typer.Argument(..., help="Output PDF path"),
    texts: Optional[List[str]] = typer.Option(
        None, "--text", "-t",
        help="Line of text to print (repeatable)",
    ),
    images: Optional[List[Path]] = typer.Option(
        None, "--image", "-i",
        help="Image file to place below the text (repeatable)",
    ),
    rotate: float = typer.Option(
        0.0, "--rotate", "-r",
        help="Clockwise image rotation in degrees (-180..180)",
    ),
    scale: float = typer.Option(
        1.0, "--scale", "-s",
        help="Image scale factor",
    ),
    dpi: Optional[float] = typer.Option(
        None, "--dpi",
        help="Image resolution (default 300)",
    ),
    align: str = typer.Option(
        "left", "--align", "-a",
        help="Image alignment (left, center, right)",
    ),
    frame: bool = typer.Option(
        False, "--frame",
        help="Draw a frame along the page margins",
    ),
    paper: str = typer.Option(
        DEFAULT_PAGE_SIZE, "--page-size", "-p",
        help="Paper size (A3, A4, A5, LETTER, LEGAL)",
    ),
    margins: float = typer.Option(
        10.0, "--margins", "-m",
        help="Page margins in millimeters",
    ),
    title: Optional[str] = typer.Option(
        None, "--title",
        help="Document title",
    ),
    font_size: int = typer.Option(
        DEFAULT_FONT_SIZE, "--font-size",
        help="Font size in points",
    ),
    font_file: Optional[Path] = typer.Option(
        None, "--font", "-f",
        help="TrueType/OpenType font to embed (default: built-in Helvetica)",
    ),
):
    """Render text lines and images into a PDF file."""
    if not texts and not images:
        console.print("[red]Error:[/] Nothing to render. Use --text and/or --image.")
        raise typer.Exit(1)

    try:
        alignment = Alignment(align.lower())
    except ValueError:
        console.print(f"[red]Error:[/] Unknown alignment: {align}")
        raise typer.Exit(1)

    try:
        config = DocumentConfig(
            title=title or output_file.stem,
            page_size=page_size(paper),
            margins=margins,
            font_size=font_size,
        )
        font = Font.from_file(font_file) if font_file else Font.from_builtin(Builtin.HELVETICA)
        style = Style(font, font_size=config.font_size, line_spacing=config.line_spacing)
        doc = Document(style, config)
        if frame:
            doc.set_frame(LineStyle())

        for text in texts or []:
            doc.push(Text(text))
        for image_path in images or []:
            image = (
                Image.from_path(image_path)
                .with_scale(scale)
                .with_clockwise_rotation(rotate)
                .with_alignment(alignment)
            )
            if dpi:
                image.set_dpi(dpi)
            doc.push(image)

        renderer = doc.render_pages()
        path = renderer.write_file(output_file)
    except (PageRenderError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Saved {renderer.page_count} page(s) to:[/] {path}")


@app.command()
def bbox(
    width: float = typer.Argument(..., help="Width in millimeters"),
    height: float = typer.Argument(..., help="Height in millimeters"),
    angles: Optional[List[float]] = typer.Argument(
        None,
        help="Clockwise angles in degrees; put '--' before negative angles",
    ),
):
    """Show bounding boxes and pivot offsets of a rotated rectangle."""
    size = Size(width, height)
    table = Table(title=f"Rotated {width:g} x {height:g} mm")
    table.add_column("Angle", style="cyan", justify="right")
    table.add_column("Range", style="dim")
    table.add_column("Offset", style="green")
    table.add_column("Bounding box", style="green")

    for angle in angles or DEFAULT_ANGLES:
        try:
            rotation = Rotation(angle)
        except ValueError as e:
            console.print(f"[red]Error:[/] {e}")
            raise typer.Exit(1)
        offset, bb_size = bounding_box(size, rotation)
        range_name = angle_range(rotation).name if rotation.degrees else "0"
        table.add_row(
            f"{angle:g}",
            range_name,
            f"({offset.x:.2f}, {offset.y:.2f})",
            f"{bb_size.width:.2f} x {bb_size.height:.2f}",
        )

    console.print(table)


@app.command()
def info():
    """Show version and library information."""
    console.print(f"[bold]pagerender v{__version__}[/]\n")

    table = Table(title="Libraries")
    table.add_column("Library", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Notes")

    try:
        import fitz
        table.add_row("PyMuPDF", f"✓ {fitz.VersionBind}", "PDF backend and font metrics")
    except ImportError:
        table.add_row("PyMuPDF", "✗ Not installed", "pip install PyMuPDF")

    try:
        import PIL
        table.add_row("Pillow", f"✓ {PIL.__version__}", "Image decoding")
    except ImportError:
        table.add_row("Pillow", "✗ Not installed", "pip install Pillow")

    console.print(table)
    console.print(f"\nBuilt-in fonts: {', '.join(b.value for b in Builtin)}")


if __name__ == "__main__":
    app()
