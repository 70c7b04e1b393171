"""
Configuration management for netgeo exports.

Writer settings are pydantic models, one per writer, sharing the output location, file
extension, destination CRS and id mapping of ``GeoIoWriterSettings``. Defaults for the shared
values come from the environment, loaded by ``Config``.

Usage:
    from netgeo.config.settings import Config, NetworkWriterSettings
    config = Config()
    settings = NetworkWriterSettings(**config.writer_defaults())

Environment Variables:
    NETGEO_OUTPUT_DIR: Directory the output files are written to
    NETGEO_FILE_EXTENSION: Output file extension, selects the driver (.shp, .gpkg, .geojson)
    NETGEO_DESTINATION_CRS: CRS the geometries are persisted in (e.g. EPSG:4326)
    NETGEO_ID_MAPPING: Persisted id of entities (id, xml, external)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from ..crs import to_crs
from ..domain.enums import IdMapperType

logger = logging.getLogger(__name__)

DEFAULT_FILE_EXTENSION = ".shp"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or incomplete."""
    pass


def _normalize_extension(value: str) -> str:
    value = (value or "").strip().lower()
    if not value:
        raise ValueError("File extension cannot be empty")
    return value if value.startswith(".") else f".{value}"


class GeoIoWriterSettings(BaseModel):
    """Settings shared by all geometry writers."""
    output_directory: Path = Field(default=Path("."), description="Directory output files are written to")
    file_extension: str = Field(default=DEFAULT_FILE_EXTENSION, description="Output file extension, selects driver")
    destination_crs: Optional[str] = Field(None, description="Destination CRS, None keeps the source CRS")
    id_mapping: IdMapperType = Field(default=IdMapperType.XML, description="Identifier persisted as mapped id")

    class Config:
        """Pydantic configuration."""
        validate_assignment = True
        extra = "forbid"

    @field_validator("file_extension")
    @classmethod
    def _validate_extension(cls, value: str) -> str:
        return _normalize_extension(value)

    @field_validator("destination_crs")
    @classmethod
    def _validate_crs(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        to_crs(value)
        return value.strip()

    def common_values(self) -> dict[str, Any]:
        return {
            "output_directory": self.output_directory,
            "file_extension": self.file_extension,
            "destination_crs": self.destination_crs,
            "id_mapping": self.id_mapping,
        }

    def log_settings(self, prefix: str = "") -> None:
        """Log all settings at info level."""
        for name, value in self.model_dump().items():
            if isinstance(value, dict):
                continue
            logger.info(f"{prefix}{name}: {value.value if isinstance(value, IdMapperType) else value}")


class NetworkWriterSettings(GeoIoWriterSettings):
    """Settings of the physical network writer."""
    persist_nodes: bool = Field(default=True, description="Persist nodes")
    persist_links: bool = Field(default=True, description="Persist links")
    persist_link_segments: bool = Field(default=True, description="Persist link segments")
    nodes_file_name: str = Field(default="planit_nodes", description="Base file name of nodes")
    links_file_name: str = Field(default="planit_links", description="Base file name of links")
    link_segments_file_name: str = Field(default="planit_linksegments", description="Base file name of link segments")


class ZoningWriterSettings(GeoIoWriterSettings):
    """Settings of the zoning writer."""
    persist_od_zones: bool = Field(default=True, description="Persist origin-destination zones")
    persist_transfer_zones: bool = Field(default=True, description="Persist transfer zones")
    persist_od_connectoids: bool = Field(default=True, description="Persist OD connectoids")
    persist_transfer_connectoids: bool = Field(default=True, description="Persist transfer connectoids")
    persist_virtual_network: bool = Field(default=True, description="Persist connectoid edges and segments")
    od_zones_file_name: str = Field(default="planit_zones_od", description="Base file name of OD zones")
    transfer_zones_file_name: str = Field(default="planit_zones_transfer", description="Base file name of transfer zones")
    od_connectoids_file_name: str = Field(default="planit_connectoids_od", description="Base file name of OD connectoids")
    transfer_connectoids_file_name: str = Field(
        default="planit_connectoids_transfer", description="Base file name of transfer connectoids")
    connectoid_edges_file_name: str = Field(
        default="planit_connectoid_edges", description="Base file name of connectoid edges")
    connectoid_segments_file_name: str = Field(
        default="planit_connectoid_segments", description="Base file name of connectoid segments")


class ServiceNetworkWriterSettings(GeoIoWriterSettings):
    """Settings of the service network writer."""
    persist_service_nodes: bool = Field(default=True, description="Persist service nodes")
    persist_service_legs: bool = Field(default=True, description="Persist service legs")
    persist_service_leg_segments: bool = Field(default=True, description="Persist service leg segments")
    service_nodes_file_name: str = Field(default="planit_service_nodes", description="Base file name of service nodes")
    service_legs_file_name: str = Field(default="planit_service_legs", description="Base file name of service legs")
    service_leg_segments_file_name: str = Field(
        default="planit_service_legsegments", description="Base file name of service leg segments")


class RoutedServicesWriterSettings(GeoIoWriterSettings):
    """Settings of the routed services writer."""
    persist_services: bool = Field(default=True, description="Persist routed services per mode")
    services_file_name: str = Field(default="planit_service", description="Base file name of routed services")


class IntermodalWriterSettings(GeoIoWriterSettings):
    """
    Settings of the intermodal writer.

    The shared values (output directory, extension, CRS, id mapping) of this object take
    precedence over those of the nested writer settings.
    """
    network: NetworkWriterSettings = Field(default_factory=NetworkWriterSettings)
    zoning: ZoningWriterSettings = Field(default_factory=ZoningWriterSettings)
    service_network: ServiceNetworkWriterSettings = Field(default_factory=ServiceNetworkWriterSettings)
    routed_services: RoutedServicesWriterSettings = Field(default_factory=RoutedServicesWriterSettings)

    def synchronized(self) -> "IntermodalWriterSettings":
        """Copy with the shared values pushed down into every nested settings object."""
        common = self.common_values()
        return self.model_copy(update={
            "network": self.network.model_copy(update=common),
            "zoning": self.zoning.model_copy(update=common),
            "service_network": self.service_network.model_copy(update=common),
            "routed_services": self.routed_services.model_copy(update=common),
        })

    def log_settings(self, prefix: str = "") -> None:
        super().log_settings(prefix)
        for name in ("network", "zoning", "service_network", "routed_services"):
            getattr(self, name).log_settings(f"{prefix}{name}.")


@dataclass
class OutputConfig:
    """Output configuration resolved from the environment."""
    output_dir: str = "."
    file_extension: str = DEFAULT_FILE_EXTENSION
    destination_crs: Optional[str] = None
    id_mapping: str = IdMapperType.XML.value

    def __post_init__(self):
        """Validate output configuration."""
        if not self.output_dir:
            raise ValueError("Output directory cannot be empty")
        self.file_extension = _normalize_extension(self.file_extension)
        if self.id_mapping.lower() not in [t.value for t in IdMapperType]:
            raise ValueError(
                f"Id mapping must be one of: {', '.join(t.value for t in IdMapperType)}, got {self.id_mapping}")
        self.id_mapping = self.id_mapping.lower()
        if self.destination_crs:
            to_crs(self.destination_crs)


class Config:
    """
    Environment based configuration for netgeo exports.

    Environment variables loaded (in order of preference):
    1. Explicit environment file passed to constructor
    2. .env.{ENVIRONMENT} (where ENVIRONMENT=development|production|staging)
    3. .env file in project root
    4. System environment variables

    Example:
        config = Config(environment="development")
        config = Config(env_file=Path("/exports/production.env"))
    """

    def __init__(self,
                 environment: Optional[str] = None,
                 env_file: Optional[Path] = None,
                 project_root: Optional[Path] = None):
        self.environment = environment or os.getenv("ENVIRONMENT", "development")
        self.project_root = project_root or self._find_project_root()

        self._load_environment_variables(env_file)
        self._load_output_config()

    def _find_project_root(self) -> Path:
        """Closest directory containing pyproject.toml, .git or .env, else the working directory."""
        for parent in [Path.cwd(), *Path.cwd().parents]:
            if any((parent / marker).exists() for marker in ['pyproject.toml', '.git', '.env']):
                return parent
        return Path.cwd()

    def _load_environment_variables(self, env_file: Optional[Path]) -> None:
        """Load environment variables from appropriate source."""
        loaded_files = []

        if env_file:
            if not Path(env_file).exists():
                raise ConfigurationError(f"Specified env file not found: {env_file}")
            load_dotenv(env_file)
            loaded_files.append(str(env_file))
            logger.info(f"Loaded configuration from {env_file}")
        else:
            env_specific_file = self.project_root / f".env.{self.environment}"
            if env_specific_file.exists():
                load_dotenv(env_specific_file)
                loaded_files.append(str(env_specific_file))
                logger.info(f"Loaded environment-specific config: {env_specific_file}")

            generic_env_file = self.project_root / ".env"
            if generic_env_file.exists():
                load_dotenv(generic_env_file)
                loaded_files.append(str(generic_env_file))
                logger.info(f"Loaded generic config: {generic_env_file}")

        if not loaded_files:
            logger.debug("No .env files found, using system environment variables only")

        self._loaded_env_files = loaded_files
        logger.debug(f"Project root: {self.project_root}")
        logger.debug(f"Environment: {self.environment}")

    def _load_output_config(self) -> None:
        """Load output configuration with sensible defaults."""
        try:
            self.output = OutputConfig(
                output_dir=os.getenv("NETGEO_OUTPUT_DIR", "."),
                file_extension=os.getenv("NETGEO_FILE_EXTENSION", DEFAULT_FILE_EXTENSION),
                destination_crs=os.getenv("NETGEO_DESTINATION_CRS") or None,
                id_mapping=os.getenv("NETGEO_ID_MAPPING", IdMapperType.XML.value),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid output configuration: {e}") from e

    @property
    def loaded_env_files(self) -> list[str]:
        return list(self._loaded_env_files)

    def writer_defaults(self) -> dict[str, Any]:
        """
        Shared writer settings resolved from the environment.

        Returns:
            Dictionary of keyword arguments accepted by every writer settings model
        """
        return {
            "output_directory": Path(self.output.output_dir),
            "file_extension": self.output.file_extension,
            "destination_crs": self.output.destination_crs,
            "id_mapping": IdMapperType(self.output.id_mapping),
        }

    def __repr__(self) -> str:
        return (
            f"Config(environment={self.environment}, "
            f"output_dir={self.output.output_dir}, "
            f"extension={self.output.file_extension})"
        )
