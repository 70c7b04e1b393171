"""
Zoning writer.

OD and transfer zones may be points or polygons, so each zone type is partitioned by geometry
and written to one output per shape, ``<base name>_<geometry>``. Connectoids and the virtual
network have a fixed shape and go to a single output each.
"""

import logging
from typing import Any, Optional

from ..config.settings import ZoningWriterSettings
from ..datastore import DataStoreRegistry
from ..domain.zoning import OdZone, TransferZone, Zone, Zoning
from ..featurecontext.zoning import (
    connectoid_edge_feature_context,
    connectoid_segment_feature_context,
    directed_connectoid_feature_context,
    undirected_connectoid_feature_context,
    zone_feature_context,
)
from ..idmapping import NetworkIdMapper, VirtualNetworkIdMapper, ZoningIdMapper
from ..partition import partition_by_geometry
from .base import GeometryIoWriter

logger = logging.getLogger(__name__)


def _describe_zone(zone: Zone) -> str:
    return f"{type(zone).__name__} {zone.xml_id or zone.id}"


class GeometryZoningWriter(GeometryIoWriter):
    """Writer of zoning (zones, connectoids, virtual network) to GIS feature files."""

    def __init__(
        self,
        settings: Optional[ZoningWriterSettings] = None,
        registry: Optional[DataStoreRegistry] = None,
        network_id_mapper: Optional[NetworkIdMapper] = None,
        id_mapper: Optional[ZoningIdMapper] = None,
        virtual_network_id_mapper: Optional[VirtualNetworkIdMapper] = None,
    ):
        super().__init__(settings or ZoningWriterSettings(), registry)
        id_mapping = self.settings.id_mapping
        self.network_id_mapper = network_id_mapper or NetworkIdMapper.create(id_mapping)
        self.id_mapper = id_mapper or ZoningIdMapper.create(id_mapping)
        self.virtual_network_id_mapper = virtual_network_id_mapper or VirtualNetworkIdMapper.create(id_mapping)
        self.skipped_zones: list[Zone] = []

    def write(self, zoning: Zoning, source_crs: Any = None) -> dict[str, int]:
        """
        Persist the zoning.

        Args:
            zoning: Zoning to persist
            source_crs: CRS of the zoning geometries, i.e. that of its network

        Returns:
            Rows written per schema name
        """
        if zoning is None:
            raise ValueError("Zoning to persist cannot be None")

        self.written = {}
        self.skipped_zones = []
        self.settings.log_settings("Zoning writer ")
        self._prepare_crs(source_crs)
        with self._registry_scope() as registry:
            self._write_zones(registry, zoning)
            self._write_connectoids(registry, zoning)
            self._write_virtual_network(registry, zoning)
        return self.written

    def _write_zone_type(self, registry: DataStoreRegistry, zone_type: type, zones: list, base_name: str) -> None:
        buckets, skipped = partition_by_geometry(zones, lambda zone: zone.geometry, _describe_zone)
        self.skipped_zones.extend(skipped)
        for bucket in buckets:
            context = zone_feature_context(zone_type, self.id_mapper, bucket.geometry_type)
            self._write_entities(registry, context, bucket.members, base_name, geometry_type=bucket.geometry_type)
        if skipped:
            logger.warning(f"{len(skipped)} {zone_type.__name__}(s) without geometry not persisted")

    def _write_zones(self, registry: DataStoreRegistry, zoning: Zoning) -> None:
        settings = self.settings
        if settings.persist_od_zones and zoning.od_zones:
            self._write_zone_type(registry, OdZone, zoning.od_zones, settings.od_zones_file_name)
        if settings.persist_transfer_zones and zoning.transfer_zones:
            self._write_zone_type(registry, TransferZone, zoning.transfer_zones, settings.transfer_zones_file_name)

    def _write_connectoids(self, registry: DataStoreRegistry, zoning: Zoning) -> None:
        settings = self.settings
        if settings.persist_od_connectoids and zoning.od_connectoids:
            context = undirected_connectoid_feature_context(self.id_mapper, self.network_id_mapper)
            self._write_entities(registry, context, zoning.od_connectoids, settings.od_connectoids_file_name)
        if settings.persist_transfer_connectoids and zoning.transfer_connectoids:
            context = directed_connectoid_feature_context(self.id_mapper, self.network_id_mapper)
            self._write_entities(registry, context, zoning.transfer_connectoids,
                                 settings.transfer_connectoids_file_name)

    def _write_virtual_network(self, registry: DataStoreRegistry, zoning: Zoning) -> None:
        settings = self.settings
        if not settings.persist_virtual_network:
            return
        virtual_network = zoning.virtual_network
        if virtual_network is None or virtual_network.is_empty():
            logger.info("Virtual network is empty, not persisted")
            return

        mappers = (self.virtual_network_id_mapper, self.id_mapper, self.network_id_mapper)
        if virtual_network.connectoid_edges:
            self._write_entities(registry, connectoid_edge_feature_context(*mappers),
                                 virtual_network.connectoid_edges, settings.connectoid_edges_file_name)
        if virtual_network.connectoid_segments:
            self._write_entities(registry, connectoid_segment_feature_context(*mappers),
                                 virtual_network.connectoid_segments, settings.connectoid_segments_file_name)
