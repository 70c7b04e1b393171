"""
Service network writer.

Persists, per service network layer, service nodes, service legs and service leg segments.
Service nodes and leg segments reference the parent physical network, so the network id
mapper of the parent writer is reused when available.
"""

import logging
from typing import Optional

from ..config.settings import ServiceNetworkWriterSettings
from ..datastore import DataStoreRegistry
from ..domain.services import ServiceNetwork, ServiceNetworkLayer
from ..featurecontext.service import (
    service_leg_feature_context,
    service_leg_segment_feature_context,
    service_node_feature_context,
)
from ..idmapping import NetworkIdMapper, ServiceNetworkIdMapper
from .base import GeometryIoWriter, layer_log_prefix

logger = logging.getLogger(__name__)


class GeometryServiceNetworkWriter(GeometryIoWriter):
    """Writer of a service network to GIS feature files."""

    def __init__(
        self,
        settings: Optional[ServiceNetworkWriterSettings] = None,
        registry: Optional[DataStoreRegistry] = None,
        network_id_mapper: Optional[NetworkIdMapper] = None,
        id_mapper: Optional[ServiceNetworkIdMapper] = None,
    ):
        super().__init__(settings or ServiceNetworkWriterSettings(), registry)
        self.network_id_mapper = network_id_mapper or NetworkIdMapper.create(self.settings.id_mapping)
        self.id_mapper = id_mapper or ServiceNetworkIdMapper.create(self.settings.id_mapping)

    def write(self, service_network: ServiceNetwork) -> dict[str, int]:
        """
        Persist all layers of the service network.

        Raises:
            ValueError: If the service network or its parent network is missing
        """
        if service_network is None:
            raise ValueError("Service network to persist cannot be None")
        if service_network.parent_network is None:
            raise ValueError("Service network has no parent network, unable to persist")

        self.written = {}
        self.settings.log_settings("Service network writer ")
        self._prepare_crs(service_network.parent_network.crs)
        with self._registry_scope() as registry:
            for layer in service_network.layers:
                self._write_layer(registry, layer)
        return self.written

    def _write_layer(self, registry: DataStoreRegistry, layer: ServiceNetworkLayer) -> None:
        settings = self.settings
        prefix = self.namer.layer_prefix(layer.id)
        log_prefix = layer_log_prefix(layer)
        logger.info(f"{log_prefix} Persisting service network layer: {len(layer.service_nodes)} service node(s), "
                    f"{len(layer.legs)} leg(s), {len(layer.leg_segments)} leg segment(s)")

        if settings.persist_service_nodes:
            context = service_node_feature_context(self.id_mapper, self.network_id_mapper)
            self._write_entities(registry, context, layer.service_nodes,
                                 settings.service_nodes_file_name, prefix, log_prefix=log_prefix)
        if settings.persist_service_legs:
            self._write_entities(registry, service_leg_feature_context(self.id_mapper), layer.legs,
                                 settings.service_legs_file_name, prefix, log_prefix=log_prefix)
        if settings.persist_service_leg_segments:
            context = service_leg_segment_feature_context(self.id_mapper, self.network_id_mapper)
            self._write_entities(registry, context, layer.leg_segments,
                                 settings.service_leg_segments_file_name, prefix, log_prefix=log_prefix)
