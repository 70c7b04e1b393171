"""
Physical network writer.

Persists, per network layer, nodes, links and link segments into
``layer_<id>_<base name>`` outputs. Link segments carry mode specific columns for the modes
supported by the layer.
"""

import logging
from typing import Optional

from ..config.settings import NetworkWriterSettings
from ..datastore import DataStoreRegistry
from ..domain.network import MacroscopicNetwork, NetworkLayer
from ..featurecontext.network import (
    link_feature_context,
    link_segment_feature_context,
    node_feature_context,
)
from ..idmapping import NetworkIdMapper
from .base import GeometryIoWriter, layer_log_prefix

logger = logging.getLogger(__name__)


class GeometryNetworkWriter(GeometryIoWriter):
    """Writer of a macroscopic network to GIS feature files."""

    def __init__(
        self,
        settings: Optional[NetworkWriterSettings] = None,
        registry: Optional[DataStoreRegistry] = None,
        id_mapper: Optional[NetworkIdMapper] = None,
    ):
        super().__init__(settings or NetworkWriterSettings(), registry)
        self.id_mapper = id_mapper or NetworkIdMapper.create(self.settings.id_mapping)

    def write(self, network: MacroscopicNetwork) -> dict[str, int]:
        """
        Persist all layers of the network.

        Returns:
            Rows written per schema name
        """
        if network is None:
            raise ValueError("Network to persist cannot be None")

        self.written = {}
        self.settings.log_settings("Network writer ")
        self._prepare_crs(network.crs)
        with self._registry_scope() as registry:
            for layer in network.layers:
                self._write_layer(registry, layer)
        return self.written

    def _write_layer(self, registry: DataStoreRegistry, layer: NetworkLayer) -> None:
        settings = self.settings
        prefix = self.namer.layer_prefix(layer.id)
        log_prefix = layer_log_prefix(layer)
        logger.info(f"{log_prefix} Persisting network layer: {len(layer.nodes)} node(s), {len(layer.links)} link(s), "
                    f"{len(layer.link_segments)} link segment(s)")

        if settings.persist_nodes:
            self._write_entities(registry, node_feature_context(self.id_mapper), layer.nodes,
                                 settings.nodes_file_name, prefix, log_prefix=log_prefix)
        if settings.persist_links:
            self._write_entities(registry, link_feature_context(self.id_mapper), layer.links,
                                 settings.links_file_name, prefix, log_prefix=log_prefix)
        if settings.persist_link_segments:
            context = link_segment_feature_context(self.id_mapper, layer.supported_modes)
            self._write_entities(registry, context, layer.link_segments,
                                 settings.link_segments_file_name, prefix, log_prefix=log_prefix)
