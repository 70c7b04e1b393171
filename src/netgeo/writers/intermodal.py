"""
Intermodal writer.

Runs the network, zoning and (optionally) service network and routed services writers in
that order on one shared datastore registry. Child writers reuse the id mappers of the
network writer so cross references between outputs line up.
"""

import logging
from typing import Optional

from ..config.settings import IntermodalWriterSettings
from ..datastore import DataStoreRegistry
from ..domain.network import MacroscopicNetwork
from ..domain.services import RoutedServices, ServiceNetwork
from ..domain.zoning import Zoning
from .network import GeometryNetworkWriter
from .routed_services import GeometryRoutedServicesWriter
from .service_network import GeometryServiceNetworkWriter
from .zoning import GeometryZoningWriter

logger = logging.getLogger(__name__)


class GeometryIntermodalWriter:
    """Writer of a complete intermodal model (network, zoning, services)."""

    def __init__(self, settings: Optional[IntermodalWriterSettings] = None):
        self.settings = (settings or IntermodalWriterSettings()).synchronized()

    def write(self, network: MacroscopicNetwork, zoning: Zoning) -> dict[str, int]:
        """Persist network and zoning, returns rows written per schema name."""
        return self._write(network, zoning)

    def write_with_services(
        self,
        network: MacroscopicNetwork,
        zoning: Zoning,
        service_network: ServiceNetwork,
        routed_services: RoutedServices,
    ) -> dict[str, int]:
        """Persist network, zoning, service network and routed services."""
        if service_network is None or routed_services is None:
            raise ValueError("Service network and routed services are required")
        if service_network.parent_network is not network:
            raise ValueError("Service network is not built on the network being persisted")
        if routed_services.parent_network is not service_network:
            raise ValueError("Routed services are not built on the service network being persisted")
        return self._write(network, zoning, service_network, routed_services)

    def _write(
        self,
        network: MacroscopicNetwork,
        zoning: Zoning,
        service_network: Optional[ServiceNetwork] = None,
        routed_services: Optional[RoutedServices] = None,
    ) -> dict[str, int]:
        if network is None or zoning is None:
            raise ValueError("Network and zoning are required")

        written: dict[str, int] = {}
        registry = DataStoreRegistry()
        try:
            network_writer = GeometryNetworkWriter(self.settings.network, registry)
            written.update(network_writer.write(network))

            zoning_writer = GeometryZoningWriter(
                self.settings.zoning, registry, network_id_mapper=network_writer.id_mapper)
            written.update(zoning_writer.write(zoning, network.crs))

            if service_network is not None:
                service_network_writer = GeometryServiceNetworkWriter(
                    self.settings.service_network, registry, network_id_mapper=network_writer.id_mapper)
                written.update(service_network_writer.write(service_network))

                routed_services_writer = GeometryRoutedServicesWriter(
                    self.settings.routed_services, registry, network_id_mapper=network_writer.id_mapper)
                written.update(routed_services_writer.write(routed_services))
        finally:
            registry.reset()

        logger.info(f"Intermodal export completed: {len(written)} feature class(es), {sum(written.values())} feature(s)")
        return written
