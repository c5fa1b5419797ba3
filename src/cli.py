"""Unified CLI for chunkmap region inspection."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.anvil_region.chunk_processor import extract_surface
from src.anvil_region.data_structures import Region
from src.anvil_region.dimensions import Dimension
from src.anvil_region.errors import DecodeError
from src.anvil_region.world_handler import load_region, parse_region_filename

app = typer.Typer(help="chunkmap CLI", no_args_is_help=True, rich_markup_mode="rich")
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Inspect Minecraft Anvil region files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(region_file: Path) -> Region:
    try:
        return load_region(region_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Failed to parse region:[/red] {e}")
        raise typer.Exit(code=1)


def _region_label(region_file: Path) -> str:
    """File name plus region coordinates when the name follows r.<x>.<z>.mca."""
    try:
        region_x, region_z = parse_region_filename(region_file)
    except ValueError:
        return region_file.name
    return f"{region_file.name} (region {region_x}, {region_z})"


# ---------------------------------------------------------------------------
# region commands
# ---------------------------------------------------------------------------

@app.command("info")
def info_command(
    region_file: Path = typer.Argument(..., help="Path to a .mca region file"),
) -> None:
    """List the fully generated chunks of a region file."""
    region = _load(region_file)

    table = Table(title=f"{_region_label(region_file)}: {len(region)} chunks")
    table.add_column("Chunk X", justify="right")
    table.add_column("Chunk Z", justify="right")
    table.add_column("Data version", justify="right")
    table.add_column("Last update", justify="right")
    table.add_column("Inhabited time", justify="right")

    for chunk in region:
        table.add_row(
            str(chunk.position.x),
            str(chunk.position.z),
            str(chunk.data_version),
            f"{chunk.last_update:,}",
            f"{chunk.inhabited_time:,}",
        )

    console.print(table)


@app.command("surface")
def surface_command(
    region_file: Path = typer.Argument(..., help="Path to a .mca region file"),
    dimension: str = typer.Option("overworld", "--dimension", "-d", help="overworld, nether or end"),
    x: Optional[int] = typer.Option(None, "--x", help="Only this chunk X (chunk coordinates)"),
    z: Optional[int] = typer.Option(None, "--z", help="Only this chunk Z (chunk coordinates)"),
) -> None:
    """Extract and summarize chunk surfaces.

    Examples:
        chunkmap surface world/region/r.0.0.mca
        chunkmap surface world/DIM-1/region/r.0.0.mca --dimension nether --x 3 --z 7
    """
    try:
        dim = Dimension.from_name(dimension)
    except ValueError as e:
        raise typer.BadParameter(str(e))

    region = _load(region_file)
    chunks = [
        chunk for chunk in region
        if (x is None or chunk.position.x == x) and (z is None or chunk.position.z == z)
    ]

    table = Table(title=f"{_region_label(region_file)}, {dim.value}: {len(chunks)} chunks")
    table.add_column("Chunk", justify="right")
    table.add_column("Y range", justify="right")
    table.add_column("Blocks", justify="right")
    table.add_column("Submerged", justify="right")
    table.add_column("Snowy", justify="right")
    table.add_column("Biomes")

    failed = 0
    for chunk in chunks:
        label = f"{chunk.position.x}, {chunk.position.z}"
        try:
            surface = extract_surface(chunk, dim)
        except DecodeError as e:
            failed += 1
            table.add_row(label, "[red]error[/red]", "", "", "", f"[red]{e}[/red]")
            continue

        summary = surface.get_summary()
        table.add_row(
            label,
            f"{summary['min_y']}..{summary['max_y']}",
            str(summary['unique_blocks']),
            str(summary['submerged']),
            str(summary['snowy']),
            ", ".join(sorted(set(surface.biomes))),
        )

    console.print(table)
    if failed:
        console.print(f"[yellow]{failed} chunk(s) failed to decode[/yellow]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
