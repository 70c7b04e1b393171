"""
Feature contexts of service network entities and routed services.
"""

from ..domain.enums import GeometryType
from ..domain.services import RoutedService, ServiceLeg, ServiceLegSegment, ServiceNode
from ..idmapping import NetworkIdMapper, RoutedServicesIdMapper, ServiceNetworkIdMapper
from ..types import FEATURE_DELIMITER, FeatureContextError
from .base import (
    DOUBLE,
    INTEGER,
    LONG,
    STRING,
    EntityFeatureContext,
    attribute,
    geometry_attribute,
)


def service_node_feature_context(
    service_mapper: ServiceNetworkIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[ServiceNode]:
    if service_mapper is None or network_mapper is None:
        raise FeatureContextError("Missing id mapper for service node feature context")

    def parent_node(service_node: ServiceNode):
        return network_mapper.node(service_node.parent_node) if service_node.parent_node is not None else None

    return EntityFeatureContext(ServiceNode, [
        attribute("mapped_id", STRING, service_mapper.service_node),
        attribute("id", LONG, lambda service_node: service_node.id),
        attribute("xml_id", STRING, lambda service_node: service_node.xml_id),
        attribute("ext_id", STRING, lambda service_node: service_node.external_id),
        attribute("parent", STRING, parent_node),
        geometry_attribute(GeometryType.POINT, lambda service_node: service_node.position),
    ])


def service_leg_feature_context(service_mapper: ServiceNetworkIdMapper) -> EntityFeatureContext[ServiceLeg]:
    if service_mapper is None:
        raise FeatureContextError("Missing id mapper for service leg feature context")
    return EntityFeatureContext(ServiceLeg, [
        attribute("mapped_id", STRING, service_mapper.service_leg),
        attribute("id", LONG, lambda leg: leg.id),
        attribute("xml_id", STRING, lambda leg: leg.xml_id),
        attribute("ext_id", STRING, lambda leg: leg.external_id),
        attribute("name", STRING, lambda leg: leg.name),
        attribute("length_km", DOUBLE, lambda leg: leg.length_km),
        attribute("snode_a", STRING, lambda leg: service_mapper.service_node(leg.service_node_a)),
        attribute("snode_b", STRING, lambda leg: service_mapper.service_node(leg.service_node_b)),
        geometry_attribute(GeometryType.LINESTRING, lambda leg: leg.create_or_get_geometry()),
    ])


def service_leg_segment_feature_context(
    service_mapper: ServiceNetworkIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[ServiceLegSegment]:
    if service_mapper is None or network_mapper is None:
        raise FeatureContextError("Missing id mapper for service leg segment feature context")

    def physical_segments(leg_segment: ServiceLegSegment) -> str:
        return FEATURE_DELIMITER.join(
            network_mapper.link_segment(link_segment) for link_segment in leg_segment.physical_link_segments)

    return EntityFeatureContext(ServiceLegSegment, [
        attribute("mapped_id", STRING, service_mapper.service_leg_segment),
        attribute("id", LONG, lambda leg_segment: leg_segment.id),
        attribute("xml_id", STRING, lambda leg_segment: leg_segment.xml_id),
        attribute("ext_id", STRING, lambda leg_segment: leg_segment.external_id),
        attribute("parent_id", STRING, lambda leg_segment: service_mapper.service_leg(leg_segment.parent_leg)),
        attribute("phys_segs", STRING, physical_segments),
        attribute("snode_up", STRING,
                  lambda leg_segment: service_mapper.service_node(leg_segment.upstream_service_node)),
        attribute("snode_down", STRING,
                  lambda leg_segment: service_mapper.service_node(leg_segment.downstream_service_node)),
        geometry_attribute(GeometryType.LINESTRING, lambda leg_segment: leg_segment.create_or_get_geometry()),
    ])


def routed_service_feature_context(
    routed_services_mapper: RoutedServicesIdMapper,
) -> EntityFeatureContext[RoutedService]:
    if routed_services_mapper is None:
        raise FeatureContextError("Missing id mapper for routed service feature context")
    return EntityFeatureContext(RoutedService, [
        attribute("mapped_id", STRING, routed_services_mapper.routed_service),
        attribute("id", LONG, lambda service: service.id),
        attribute("xml_id", STRING, lambda service: service.xml_id),
        attribute("ext_id", STRING, lambda service: service.external_id),
        attribute("name", STRING, lambda service: service.name),
        attribute("name_descr", STRING, lambda service: service.name_description),
        attribute("serv_descr", STRING, lambda service: service.service_description),
        attribute("trips_schd", INTEGER, lambda service: len(service.schedule_based_trips)),
        attribute("trips_freq", INTEGER, lambda service: len(service.frequency_based_trips)),
        geometry_attribute(GeometryType.MULTILINESTRING, lambda service: service.extract_geometry()),
    ])
