"""
Routed services writer.

Services are persisted per layer and per mode, ``layer_<id>_mode_<mode id>_<base name>``, one
MultiLineString per service covering the paths of its trips.
"""

import logging
from typing import Optional

from ..config.settings import RoutedServicesWriterSettings
from ..datastore import DataStoreRegistry
from ..domain.network import Mode
from ..domain.services import RoutedServices, RoutedServicesLayer
from ..featurecontext.service import routed_service_feature_context
from ..idmapping import NetworkIdMapper, RoutedServicesIdMapper
from .base import GeometryIoWriter, layer_log_prefix

logger = logging.getLogger(__name__)


class GeometryRoutedServicesWriter(GeometryIoWriter):
    """Writer of routed services to GIS feature files."""

    def __init__(
        self,
        settings: Optional[RoutedServicesWriterSettings] = None,
        registry: Optional[DataStoreRegistry] = None,
        network_id_mapper: Optional[NetworkIdMapper] = None,
        id_mapper: Optional[RoutedServicesIdMapper] = None,
    ):
        super().__init__(settings or RoutedServicesWriterSettings(), registry)
        self.network_id_mapper = network_id_mapper or NetworkIdMapper.create(self.settings.id_mapping)
        self.id_mapper = id_mapper or RoutedServicesIdMapper.create(self.settings.id_mapping)

    def write(self, routed_services: RoutedServices) -> dict[str, int]:
        """
        Persist routed services of all layers.

        Raises:
            ValueError: If the routed services are missing or lack a parent service network
        """
        if routed_services is None:
            raise ValueError("Routed services to persist cannot be None")
        service_network = routed_services.parent_network
        if service_network is None or service_network.parent_network is None:
            raise ValueError("Routed services require a parent service network on a physical network")

        self.written = {}
        self.settings.log_settings("Routed services writer ")
        self._prepare_crs(service_network.parent_network.crs)
        with self._registry_scope() as registry:
            for layer in routed_services.layers:
                self._write_layer(registry, layer)
        return self.written

    def _mode_output_id(self, mode: Mode) -> str:
        """Mapped mode id used in output names, the internal id when the mode lacks the mapped one."""
        mapped_id = self.network_id_mapper.mode(mode)
        if mapped_id is None or not str(mapped_id).strip():
            logger.warning(f"Mode {mode.name or mode.id} has no {self.network_id_mapper.id_mapper_type.value} id, "
                           f"using internal id {mode.id} in routed services output name")
            return str(mode.id)
        return str(mapped_id)

    def _write_layer(self, registry: DataStoreRegistry, layer: RoutedServicesLayer) -> None:
        if not self.settings.persist_services:
            return
        prefix = self.namer.layer_prefix(layer.id)
        log_prefix = layer_log_prefix(layer)
        context = routed_service_feature_context(self.id_mapper)
        for mode in layer.modes_with_services():
            sub_key = self.namer.mode_sub_key(self._mode_output_id(mode))
            services = layer.services_by_mode[mode]
            logger.info(f"{log_prefix} Persisting {len(services)} routed service(s) for mode {mode.xml_id or mode.id}")
            self._write_entities(registry, context, services, self.settings.services_file_name,
                                 prefix, sub_key, log_prefix=log_prefix)
