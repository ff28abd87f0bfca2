import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

"""CLI entrypoint for converting Tiled exports into .prmap maps."""
from ..converter.map_converter import MapConverter
from ..converter.output import assemble_output
from ..shared.config import ConverterConfig
from ..shared.errors import ConversionError
from ..shared.utils import (
    count_blocked_cells,
    load_catalog,
    load_tiled_map,
    output_path_for,
    read_load_file,
    visualize_prmap,
    write_prmap,
)
from .render import render


console = Console()


@click.group()
def main():
    """PRMap converter: Tiled map exports to render-ready .prmap maps"""
    pass


@main.command()
@click.option("--catalog", "-c", type=click.Path(), help="Sprite sheet / sprite set catalog JSON")
@click.option("--map", "-m", "map_file", type=click.Path(), help="Tiled JSON map export")
@click.option("--load-file", "-l", type=click.Path(), default="load.txt",
              help="File listing the catalog and map paths, used when --catalog/--map are not given")
@click.option("--output", "-o", type=click.Path(), help="Output path (default: next to the map, .prmap)")
@click.option("--config", "config_file", default="converter.json", help="Config file name under config/")
@click.option("--collision-format", type=click.Choice(["names", "int"]),
              help="Write collision masks as flag names or integers")
@click.option("--visualize", is_flag=True, help="Print a text view of the converted map")
@click.option("--verbose", "-v", is_flag=True, help="Show per-layer conversion logging")
def convert(catalog, map_file, load_file, output, config_file, collision_format, visualize, verbose):
    """Convert a Tiled map into a .prmap map."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = ConverterConfig.load(config_file)
    except (ValidationError, json.JSONDecodeError) as e:
        console.print(f"[red]Error: Invalid config/{config_file}: {e}[/red]")
        sys.exit(1)
    if collision_format:
        config = config.model_copy(update={"collision_format": collision_format})

    # Determine inputs: explicit options first, then the load file
    if catalog and map_file:
        catalog_path, map_path = Path(catalog), Path(map_file)
    elif catalog or map_file:
        console.print("[red]Error: --catalog and --map must be given together[/red]")
        sys.exit(1)
    else:
        load_path = Path(load_file)
        if not load_path.exists():
            console.print(f"[red]Error: Load file {load_path} not found. Pass --catalog and --map instead.[/red]")
            sys.exit(1)
        try:
            catalog_path, map_path = read_load_file(load_path)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            sys.exit(1)

    for path in (catalog_path, map_path):
        if not path.exists():
            console.print(f"[red]Error: Input file {path} not found[/red]")
            sys.exit(1)

    try:
        mapping = load_catalog(catalog_path)
        tiled_map = load_tiled_map(map_path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error: Could not read inputs: {e}[/red]")
        sys.exit(1)

    console.print(
        f"[green]Converting {map_path} with {len(mapping.sheets)} sheets and {len(mapping.sets)} sprite sets...[/green]"
    )

    converter = MapConverter(mapping, config)
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("Converting layers...", total=None)
            converted = converter.convert(tiled_map)
            progress.update(task, completed=True)
    except ConversionError as e:
        console.print(f"[red]Conversion failed: {e}[/red]")
        sys.exit(1)

    document = assemble_output(converted, config.collision_format)
    output_path = Path(output) if output else output_path_for(map_path, config.output_extension)
    write_prmap(document, output_path, indent=config.indent)

    if visualize:
        console.print(visualize_prmap(document), markup=False, highlight=False)

    table = Table(title="Converted Layers")
    table.add_column("Layer", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Cells", style="green")
    table.add_column("Autotiled", style="yellow")
    for layer in converted.layers:
        filled = len([t for t in layer.tiles if t is not None])
        table.add_row(layer.name, layer.kind.value, f"{filled}/{len(layer.tiles)}", str(layer.substituted))
    console.print(table)

    console.print(f"\n[green]Conversion Complete![/green]")
    console.print(f"Map size: {converted.width}x{converted.height} ({converted.tile_width}x{converted.tile_height}px tiles)")
    console.print(f"NPCs: {len(converted.npcs) if converted.npcs is not None else 'no NPC layer'}")
    if converted.collisions is not None:
        console.print(f"Blocking cells: {count_blocked_cells(converted.collisions)}")
    else:
        console.print("Blocking cells: no collision layer")
    console.print(f"Conversion time: {converted.conversion_time:.3f}s")
    console.print(f"Map saved to: {output_path}")


main.add_command(render)


if __name__ == "__main__":
    main()
