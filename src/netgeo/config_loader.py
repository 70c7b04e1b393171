"""
Writer settings loading for netgeo exports.

Combines the environment defaults of ``Config`` with an optional YAML file into an
``IntermodalWriterSettings``. The YAML file has an ``output`` section with the shared values
and one section per writer:

    output:
      output_directory: ./out
      file_extension: .gpkg
      destination_crs: EPSG:3857
      id_mapping: xml
    network:
      persist_link_segments: false
    zoning:
      od_zones_file_name: zones
    service_network: {}
    routed_services: {}
"""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .config.settings import (
    Config,
    ConfigurationError,
    IntermodalWriterSettings,
    NetworkWriterSettings,
    RoutedServicesWriterSettings,
    ServiceNetworkWriterSettings,
    ZoningWriterSettings,
)

SECTIONS = {
    "network": NetworkWriterSettings,
    "zoning": ZoningWriterSettings,
    "service_network": ServiceNetworkWriterSettings,
    "routed_services": RoutedServicesWriterSettings,
}


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    try:
        with open(config_path, encoding='utf-8') as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    if not isinstance(content, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")

    unknown = set(content) - set(SECTIONS) - {"output"}
    if unknown:
        raise ConfigurationError(
            f"Unknown section(s) in {config_path}: {sorted(unknown)}. Available: {['output', *SECTIONS]}")
    return content


def load_writer_settings(
    config_path: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
) -> IntermodalWriterSettings:
    """
    Load writer settings from the environment and an optional YAML file.

    Args:
        config_path: YAML configuration file, environment defaults only when None
        config: Environment configuration, created when not provided

    Returns:
        IntermodalWriterSettings with shared values pushed down to every writer

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ConfigurationError: If the file or any of its values is invalid
    """
    config = config or Config()
    content = _read_yaml(Path(config_path)) if config_path is not None else {}

    common = config.writer_defaults()
    common.update(content.get("output") or {})

    try:
        sections = {
            name: settings_type(**{**common, **(content.get(name) or {})})
            for name, settings_type in SECTIONS.items()
        }
        settings = IntermodalWriterSettings(**common, **sections)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid writer settings: {e}") from e

    return settings.synchronized()
