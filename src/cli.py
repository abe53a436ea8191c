#!/usr/bin/env python3
"""
CLI for the wildfire hotspot map.

This CLI wraps the command functions that the web app also uses, so that
summaries printed here match what the map shows.
"""

import click
from typing import Optional, Tuple
import json

from src.commands.fetch_fires import fetch_fires_for_region, fetch_fires_for_bbox
from src.commands.explore import get_dataset_summary, get_visible_fires
from src.commands.regions import get_preset_names, get_region_bbox, list_map_regions
from src.config import FIRES_GEOJSON, REGIONS_GEOJSON
from src.analysis.buckets import BRIGHTNESS_NOTCHES
from src.filters.seasons import SEASON_NAMES

fires_option = click.option(
    "--fires",
    "fires_path",
    default=FIRES_GEOJSON,
    show_default=True,
    help="Fire point GeoJSON file",
)
regions_option = click.option(
    "--regions",
    "regions_path",
    default=REGIONS_GEOJSON,
    show_default=True,
    help="Region (state) boundary GeoJSON file",
)


@click.group()
@click.version_option(version="0.1.0", prog_name="firemap")
def cli():
    """
    Wildfire Hotspot Map CLI.

    Build, inspect and serve an interactive map of satellite fire hotspots
    filtered by season, brightness and state.
    """
    pass


@cli.command()
@click.option(
    "--region",
    "-r",
    help="Preset name (e.g., california, ca, pacific-northwest)",
)
@click.option(
    "--bbox",
    "-b",
    help="Custom bounding box: west,south,east,north (e.g., -124.5,32.5,-114,42)",
)
@click.option(
    "--days",
    "-d",
    default=2,
    type=int,
    help="Days to look back (1-10, default: 2)",
)
@click.option(
    "--output",
    "-o",
    default=FIRES_GEOJSON,
    show_default=True,
    help="GeoJSON file to write",
)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def fetch(
    region: Optional[str],
    bbox: Optional[str],
    days: int,
    output: str,
    output_json: bool,
):
    """
    Fetch FIRMS detections and write the map's fire dataset.

    Examples:

      # Whole continental US
      firemap fetch --region conus

      # Custom bounding box around Phoenix
      firemap fetch --bbox -113,32.5,-111,34.5 --days 5
    """
    if not region and not bbox:
        click.echo("Error: Must specify either --region or --bbox", err=True)
        click.echo("Use 'firemap presets' to see available regions", err=True)
        raise click.Abort()

    if region and bbox:
        click.echo("Error: Cannot specify both --region and --bbox", err=True)
        raise click.Abort()

    if region:
        result = fetch_fires_for_region(region=region, days_back=days, output_path=output)
    else:
        try:
            bbox_parts = [float(x.strip()) for x in bbox.split(",")]
            if len(bbox_parts) != 4:
                raise ValueError("Bounding box must have 4 values")
            bbox_tuple = tuple(bbox_parts)
        except (ValueError, AttributeError) as e:
            click.echo(f"Error: Invalid bounding box format: {e}", err=True)
            click.echo(
                "Expected: west,south,east,north (e.g., -124.5,32.5,-114,42)", err=True
            )
            raise click.Abort()

        result = fetch_fires_for_bbox(bbox=bbox_tuple, days_back=days, output_path=output)

    if output_json:
        click.echo(json.dumps(result, indent=2))
    else:
        if result["success"]:
            click.echo(f"✓ {result['message']}")
        else:
            click.echo(f"✗ {result['message']}", err=True)
            raise click.Abort()


@cli.command()
@fires_option
@regions_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def summary(fires_path: str, regions_path: str, output_json: bool):
    """
    Show summary of the fire dataset.

    Counts per brightness notch and per season, and fires outside every state.
    """
    result = get_dataset_summary(fires_path, regions_path)

    if output_json:
        click.echo(json.dumps(result, indent=2))
    else:
        if result["success"]:
            click.echo("Fire Data Summary")
            click.echo("─" * 40)
            click.echo(f"Total fires: {result['total_fires']:,}")
            click.echo(f"Regions: {result['total_regions']:,}")
            click.echo(f"Outside every region: {result['unknown_region']:,}")

            if result["date_range"]:
                click.echo(
                    f"Date range: {result['date_range'][0]} to {result['date_range'][1]}"
                )

            click.echo("\nFires per brightness threshold:")
            for notch, count in result["per_notch"].items():
                click.echo(f"  >= {notch}: {count:,}")

            click.echo("\nFires per season:")
            for season, count in result["per_season"].items():
                click.echo(f"  {season:8} {count:,}")
        else:
            click.echo(f"✗ {result['message']}", err=True)


@cli.command()
@click.option(
    "--season",
    "-s",
    "seasons",
    multiple=True,
    type=click.Choice(SEASON_NAMES),
    help="Season to include (repeatable, default: all)",
)
@click.option(
    "--brightness",
    "-b",
    default=BRIGHTNESS_NOTCHES[0],
    type=float,
    help="Minimum brightness, snapped to the nearest notch",
)
@click.option(
    "--state",
    "states",
    multiple=True,
    help="State name to restrict to (repeatable, default: no restriction)",
)
@fires_option
@regions_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def visible(
    seasons: Tuple[str, ...],
    brightness: float,
    states: Tuple[str, ...],
    fires_path: str,
    regions_path: str,
    output_json: bool,
):
    """
    Show the fires the map would display for a filter combination.

    Examples:

      # Summer and fall fires brighter than 400 in California
      firemap visible -s Summer -s Fall -b 400 --state California
    """
    result = get_visible_fires(
        seasons=seasons or SEASON_NAMES,
        brightness=brightness,
        regions=states,
        fires_path=fires_path,
        regions_path=regions_path,
    )

    if output_json:
        click.echo(json.dumps(result, indent=2))
    else:
        if result["success"]:
            click.echo(f"✓ {result['message']}")
            click.echo(f"  Brightness >= {result['brightness_threshold']}")
            click.echo(f"  {result['time_frame']}")
            click.echo(f"  {result['regions_label']}")
            click.echo("\nAverage brightness by month:")
            for month, avg in result["monthly_average"].items():
                click.echo(f"  {month:10} {avg if avg is not None else '—'}")
        else:
            click.echo(f"✗ {result['message']}", err=True)
            raise click.Abort()


@cli.command()
@regions_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def regions(regions_path: str, output_json: bool):
    """
    List the states in the boundary dataset.

    These names can be used with 'firemap visible --state'.
    """
    result = list_map_regions(regions_path)

    if output_json:
        click.echo(json.dumps(result, indent=2))
    else:
        if result["success"]:
            click.echo("Available States")
            click.echo("=" * 50)
            names = [r["name"] for r in result["regions"]]
            for i in range(0, len(names), 3):
                row = names[i : i + 3]
                click.echo("  " + "  ".join(f"{n:20}" for n in row))
        else:
            click.echo(f"✗ {result['message']}", err=True)


@cli.command()
def presets():
    """
    List the bounding box presets accepted by 'firemap fetch --region'.
    """
    click.echo("Fetch Presets")
    click.echo("=" * 50)
    for name in get_preset_names():
        click.echo(f"  {name:20} {get_region_bbox(name)}")


@cli.command()
@fires_option
@regions_option
@click.option("--port", default=7860, type=int, help="Port to listen on")
@click.option("--share", is_flag=True, help="Create a public Gradio link")
def serve(fires_path: str, regions_path: str, port: int, share: bool):
    """
    Launch the interactive map in the browser.
    """
    from web.gradio_app import create_gradio_app

    app = create_gradio_app(fires_path, regions_path)
    app.launch(server_name="0.0.0.0", server_port=port, share=share)


if __name__ == "__main__":
    cli()
