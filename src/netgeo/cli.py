import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import geopandas as gpd
import typer
import yaml

from .config.settings import Config, ConfigurationError
from .config_loader import load_writer_settings
from .datastore import supported_extensions
from .domain.enums import IdMapperType, PredefinedModeType
from .domain.network import Mode
from .featurecontext.network import link_feature_context, link_segment_feature_context, node_feature_context
from .idmapping import NetworkIdMapper
from .naming import OutputPathNamer
from .schema import compile_schema
from .types import GeoIoError

app = typer.Typer(help="netgeo: export transport network models to GIS feature files")


def setup_logging(verbose: bool, command: Optional[str] = None, enable_file_logging: bool = False):
    """
    Configure logging with optional timestamped file output.

    Args:
        verbose: Enable debug-level logging if True
        command: Command name for log file naming
        enable_file_logging: Create timestamped log files when True
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]

    if enable_file_logging and command:
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = logs_dir / f"netgeo_{command}_{timestamp}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        print(f"Logging to: {log_file}")

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True
    )


@app.command("drivers")
def drivers():
    """List the supported output file extensions and whether their driver is available."""
    typer.echo("Supported output formats")
    typer.echo("=" * 50)
    for extension, driver, available in supported_extensions():
        typer.echo(f"{extension:<10} {driver:<16} {'available' if available else 'NOT AVAILABLE'}")


@app.command("schema")
def schema(
    crs: Annotated[Optional[str], typer.Option("--crs", help="Destination CRS, e.g. EPSG:4326")] = "EPSG:4326",
    modes: Annotated[Optional[list[PredefinedModeType]], typer.Option("--mode", "-m", help="Predefined mode supported by the layer (repeatable)")] = None,
    layer: Annotated[str, typer.Option("--layer", help="Layer id used in the schema names")] = "0",
    id_mapping: Annotated[IdMapperType, typer.Option("--id-mapping", help="Persisted id: id, xml or external")] = IdMapperType.XML,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable detailed logging output")] = False,
    log_to_file: Annotated[bool, typer.Option("--log-to-file", help="Create timestamped log files")] = False,
):
    """
    Print the compiled schemas of the network entity types.

    Examples:
        netgeo schema --crs EPSG:3857 --mode car --mode bus
    """
    setup_logging(verbose, "schema", log_to_file)
    id_mapper = NetworkIdMapper.create(id_mapping)
    layer_modes = [
        Mode(id=index, xml_id=mode_type.value, external_id=mode_type.value, name=mode_type.value,
             predefined_type=mode_type)
        for index, mode_type in enumerate(modes or [])
    ]
    namer = OutputPathNamer()
    prefix = namer.layer_prefix(layer)
    contexts = [
        ("planit_nodes", node_feature_context(id_mapper)),
        ("planit_links", link_feature_context(id_mapper)),
        ("planit_linksegments", link_segment_feature_context(id_mapper, layer_modes)),
    ]
    try:
        for base_name, context in contexts:
            compiled = compile_schema(context, namer.schema_name(base_name, prefix), crs)
            typer.echo(f"{compiled.name}: {compiled.field_spec}")
    except (GeoIoError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1) from e


@app.command("config")
def config(
    config_path: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to YAML writer configuration file")] = None,
    env_file: Annotated[Optional[Path], typer.Option("--env-file", help="Explicit .env file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable detailed logging output")] = False,
    log_to_file: Annotated[bool, typer.Option("--log-to-file", help="Create timestamped log files")] = False,
):
    """Show the resolved writer settings (environment and optional YAML file)."""
    setup_logging(verbose, "config", log_to_file)
    try:
        settings = load_writer_settings(config_path, Config(env_file=env_file))
    except (ConfigurationError, FileNotFoundError) as e:
        typer.echo(f"ERROR loading configuration: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False))


@app.command("inspect")
def inspect(
    path: Annotated[Path, typer.Argument(help="Exported file to inspect")],
    layer: Annotated[Optional[str], typer.Option("--layer", help="Layer name for multi-layer files (GeoPackage)")] = None,
):
    """Print row count, columns and CRS of an exported file."""
    if not path.exists():
        typer.echo(f"ERROR: File not found: {path}", err=True)
        raise typer.Exit(1)

    gdf = gpd.read_file(path, layer=layer) if layer else gpd.read_file(path)
    typer.echo(f"File: {path}")
    typer.echo(f"Rows: {len(gdf)}")
    typer.echo(f"Columns: {', '.join(str(column) for column in gdf.columns)}")
    typer.echo(f"CRS: {gdf.crs.to_string() if gdf.crs is not None else 'none'}")
    if len(gdf):
        typer.echo(f"Geometry types: {', '.join(sorted(set(gdf.geom_type.dropna())))}")


@app.command("version")
def version():
    """Display version information."""
    from . import __version__
    typer.echo(f"netgeo version: {__version__}")


if __name__ == "__main__":
    app()
