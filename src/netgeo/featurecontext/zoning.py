"""
Feature contexts of zoning entities: zones, connectoids, connectoid edges and segments.

Zones are not bound to one geometry shape, their context is created per geometry bucket.
Connectoids reference zones, modes and physical network entities and therefore need the
network id mapper next to the zoning one.
"""

from typing import Union

from ..domain.enums import GeometryType
from ..domain.network import Node
from ..domain.zoning import (
    Connectoid,
    ConnectoidEdge,
    ConnectoidSegment,
    DirectedConnectoid,
    UndirectedConnectoid,
    Zone,
)
from ..idmapping import NetworkIdMapper, VirtualNetworkIdMapper, ZoningIdMapper
from ..types import FEATURE_DELIMITER, FEATURE_KEY_VALUE_DELIMITER, FeatureContextError
from .base import (
    BOOLEAN,
    DOUBLE,
    LONG,
    STRING,
    EntityFeatureContext,
    attribute,
    geometry_attribute,
)

ALL_MODES = "ALL"
PHYS_NODE_DOWNSTREAM = "PHYS_NODE_DOWNSTREAM"
PHYS_NODE_UPSTREAM = "PHYS_NODE_UPSTREAM"


def _check_mappers(*mappers) -> None:
    if any(mapper is None for mapper in mappers):
        raise FeatureContextError("Missing id mapper for zoning feature context")


def zone_feature_context(
    zone_type: type,
    id_mapper: ZoningIdMapper,
    geometry_type: GeometryType,
) -> EntityFeatureContext[Zone]:
    """Context of OD or transfer zones persisted with the given geometry shape."""
    _check_mappers(id_mapper)
    if not issubclass(zone_type, Zone):
        raise FeatureContextError(f"{zone_type.__name__} is not a zone type")
    return EntityFeatureContext(zone_type, [
        attribute("mapped_id", STRING, id_mapper.zone),
        attribute("id", LONG, lambda zone: zone.id),
        attribute("xml_id", STRING, lambda zone: zone.xml_id),
        attribute("ext_id", STRING, lambda zone: zone.external_id),
        attribute("name", STRING, lambda zone: zone.name),
        geometry_attribute(geometry_type, lambda zone: zone.geometry),
    ])


def _zones_value(connectoid: Connectoid, zoning_mapper: ZoningIdMapper) -> str:
    return FEATURE_DELIMITER.join(zoning_mapper.zone(access.zone) for access in connectoid.access_zones)


def _modes_value(connectoid: Connectoid, zoning_mapper: ZoningIdMapper, network_mapper: NetworkIdMapper) -> str:
    entries = []
    for access in connectoid.access_zones:
        zone_id = zoning_mapper.zone(access.zone)
        if access.allowed_modes is None:
            entries.append(f"{zone_id}{FEATURE_KEY_VALUE_DELIMITER}{ALL_MODES}")
            continue
        entries.extend(
            f"{zone_id}{FEATURE_KEY_VALUE_DELIMITER}{network_mapper.mode(mode)}" for mode in access.allowed_modes)
    return FEATURE_DELIMITER.join(entries)


def _lengths_value(connectoid: Connectoid, zoning_mapper: ZoningIdMapper) -> str:
    return FEATURE_DELIMITER.join(
        f"{zoning_mapper.zone(access.zone)}{FEATURE_KEY_VALUE_DELIMITER}{access.length_km:.1f}"
        for access in connectoid.access_zones if access.length_km is not None)


def _connectoid_attributes(zoning_mapper: ZoningIdMapper, network_mapper: NetworkIdMapper) -> list:
    return [
        attribute("mapped_id", STRING, zoning_mapper.connectoid),
        attribute("id", LONG, lambda connectoid: connectoid.id),
        attribute("xml_id", STRING, lambda connectoid: connectoid.xml_id),
        attribute("ext_id", STRING, lambda connectoid: connectoid.external_id),
        attribute("name", STRING, lambda connectoid: connectoid.name),
        attribute("phys_node", STRING, lambda connectoid: network_mapper.node(connectoid.access_node)),
        attribute("zones", STRING, lambda connectoid: _zones_value(connectoid, zoning_mapper)),
        attribute("modes", STRING, lambda connectoid: _modes_value(connectoid, zoning_mapper, network_mapper)),
        attribute("lengths_km", STRING, lambda connectoid: _lengths_value(connectoid, zoning_mapper)),
    ]


def _connectoid_position(connectoid: Connectoid):
    return connectoid.access_node.position


def undirected_connectoid_feature_context(
    zoning_mapper: ZoningIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[UndirectedConnectoid]:
    _check_mappers(zoning_mapper, network_mapper)
    attributes = _connectoid_attributes(zoning_mapper, network_mapper)
    attributes.append(geometry_attribute(GeometryType.POINT, _connectoid_position))
    return EntityFeatureContext(UndirectedConnectoid, attributes)


def directed_connectoid_feature_context(
    zoning_mapper: ZoningIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[DirectedConnectoid]:
    _check_mappers(zoning_mapper, network_mapper)

    def physical_segment(connectoid: DirectedConnectoid):
        if connectoid.access_link_segment is None:
            return None
        return network_mapper.link_segment(connectoid.access_link_segment)

    attributes = _connectoid_attributes(zoning_mapper, network_mapper) + [
        attribute("phys_segm", STRING, physical_segment),
        attribute("segm2node", STRING, lambda connectoid:
                  PHYS_NODE_DOWNSTREAM if connectoid.node_access_downstream else PHYS_NODE_UPSTREAM),
        geometry_attribute(GeometryType.POINT, _connectoid_position),
    ]
    return EntityFeatureContext(DirectedConnectoid, attributes)


def _vertex_mapper(zoning_mapper: ZoningIdMapper, network_mapper: NetworkIdMapper):
    def map_vertex(vertex: Union[Zone, Node]):
        if isinstance(vertex, Zone):
            return zoning_mapper.zone(vertex)
        return network_mapper.node(vertex)
    return map_vertex


def connectoid_edge_feature_context(
    virtual_mapper: VirtualNetworkIdMapper,
    zoning_mapper: ZoningIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[ConnectoidEdge]:
    _check_mappers(virtual_mapper, zoning_mapper, network_mapper)
    return EntityFeatureContext(ConnectoidEdge, [
        attribute("mapped_id", STRING, virtual_mapper.connectoid_edge),
        attribute("id", LONG, lambda edge: edge.id),
        attribute("edge_id", LONG, lambda edge: edge.id),
        attribute("xml_id", STRING, lambda edge: edge.xml_id),
        attribute("ext_id", STRING, lambda edge: edge.external_id),
        attribute("name", STRING, lambda edge: edge.name),
        attribute("length_km", DOUBLE, lambda edge: edge.length_km),
        attribute("node_a", STRING, lambda edge: zoning_mapper.zone(edge.zone)),
        attribute("node_b", STRING, lambda edge: network_mapper.node(edge.access_node)),
        geometry_attribute(GeometryType.LINESTRING, lambda edge: edge.create_or_get_geometry()),
    ])


def connectoid_segment_feature_context(
    virtual_mapper: VirtualNetworkIdMapper,
    zoning_mapper: ZoningIdMapper,
    network_mapper: NetworkIdMapper,
) -> EntityFeatureContext[ConnectoidSegment]:
    _check_mappers(virtual_mapper, zoning_mapper, network_mapper)
    map_vertex = _vertex_mapper(zoning_mapper, network_mapper)
    return EntityFeatureContext(ConnectoidSegment, [
        attribute("mapped_id", STRING, virtual_mapper.connectoid_segment),
        attribute("id", LONG, lambda segment: segment.id),
        attribute("segment_id", LONG, lambda segment: segment.id),
        attribute("xml_id", STRING, lambda segment: segment.xml_id),
        attribute("ext_id", STRING, lambda segment: segment.external_id),
        attribute("parent_id", STRING, lambda segment: virtual_mapper.connectoid_edge(segment.parent_edge)),
        attribute("cap_pcuh", DOUBLE, lambda segment: segment.capacity_pcu_h),
        attribute("geom_opp", BOOLEAN, lambda segment: not segment.is_parent_geometry_in_segment_direction()),
        attribute("vertx_up", STRING, lambda segment: map_vertex(segment.upstream_vertex)),
        attribute("vertx_down", STRING, lambda segment: map_vertex(segment.downstream_vertex)),
        geometry_attribute(GeometryType.LINESTRING, lambda segment: segment.parent_edge.create_or_get_geometry()),
    ])
