"""
Feature contexts of physical network entities: nodes, links and link segments.
"""

from typing import Optional

from ..domain.enums import GeometryType
from ..domain.network import Link, LinkSegment, Mode, Node
from ..idmapping import NetworkIdMapper
from ..types import FeatureContextError
from .base import (
    BOOLEAN,
    DOUBLE,
    INTEGER,
    LONG,
    STRING,
    EntityFeatureContext,
    attribute,
    geometry_attribute,
)
from .modes import (
    BANNED_SUFFIX,
    CRITICAL_SPEED_SUFFIX,
    SPEED_SUFFIX,
    mode_attribute_name,
    mode_short_name,
)


def _require(id_mapper, name: str):
    if id_mapper is None:
        raise FeatureContextError(f"Missing {name} id mapper")
    return id_mapper


def node_feature_context(id_mapper: NetworkIdMapper) -> EntityFeatureContext[Node]:
    node_id = _require(id_mapper, "network").node
    return EntityFeatureContext(Node, [
        attribute("mapped_id", STRING, node_id),
        attribute("id", LONG, lambda node: node.id),
        attribute("node_id", LONG, lambda node: node.node_id),
        attribute("xml_id", STRING, lambda node: node.xml_id),
        attribute("ext_id", STRING, lambda node: node.external_id),
        attribute("name", STRING, lambda node: node.name),
        geometry_attribute(GeometryType.POINT, lambda node: node.position),
    ])


def link_feature_context(id_mapper: NetworkIdMapper) -> EntityFeatureContext[Link]:
    mapper = _require(id_mapper, "network")
    return EntityFeatureContext(Link, [
        attribute("mapped_id", STRING, mapper.link),
        attribute("id", LONG, lambda link: link.id),
        attribute("link_id", LONG, lambda link: link.link_id),
        attribute("xml_id", STRING, lambda link: link.xml_id),
        attribute("ext_id", STRING, lambda link: link.external_id),
        attribute("name", STRING, lambda link: link.name),
        attribute("length_km", DOUBLE, lambda link: link.length_km),
        attribute("node_a", STRING, lambda link: mapper.node(link.node_a)),
        attribute("node_b", STRING, lambda link: mapper.node(link.node_b)),
        geometry_attribute(GeometryType.LINESTRING, lambda link: link.create_or_get_geometry()),
    ])


def _mode_attributes(mode: Mode, short_name: str) -> list:
    return [
        attribute(mode_attribute_name(short_name, BANNED_SUFFIX), BOOLEAN,
                  lambda segment: not segment.is_mode_allowed(mode)),
        attribute(mode_attribute_name(short_name, SPEED_SUFFIX), DOUBLE,
                  lambda segment: segment.modelled_speed_limit_kmh(mode)),
        attribute(mode_attribute_name(short_name, CRITICAL_SPEED_SUFFIX), DOUBLE,
                  lambda segment: segment.link_segment_type.critical_speed_kmh(mode)),
    ]


def link_segment_feature_context(
    id_mapper: NetworkIdMapper,
    supported_modes: Optional[list[Mode]] = None,
) -> EntityFeatureContext[LinkSegment]:
    """
    Link segment context, with a banned/speed/critical speed column triple per supported mode.

    Mode columns are ordered by mode id so repeated exports produce identical schemas.
    """
    mapper = _require(id_mapper, "network")
    attributes = [
        attribute("mapped_id", STRING, mapper.link_segment),
        attribute("id", LONG, lambda segment: segment.id),
        attribute("segment_id", LONG, lambda segment: segment.link_segment_id),
        attribute("xml_id", STRING, lambda segment: segment.xml_id),
        attribute("ext_id", STRING, lambda segment: segment.external_id),
        attribute("parent_id", STRING, lambda segment: mapper.link(segment.parent_link)),
        attribute("lanes", INTEGER, lambda segment: segment.lanes),
        attribute("cap_pcuh", DOUBLE, lambda segment: segment.capacity_or_default_pcu_h()),
        attribute("speed_kmh", DOUBLE, lambda segment: segment.physical_speed_limit_kmh),
        attribute("geom_opp", BOOLEAN, lambda segment: not segment.is_parent_geometry_in_segment_direction()),
        attribute("node_up", STRING, lambda segment: mapper.node(segment.upstream_node)),
        attribute("node_down", STRING, lambda segment: mapper.node(segment.downstream_node)),
        attribute("type_id", STRING, lambda segment: mapper.link_segment_type(segment.link_segment_type)),
        attribute("type_name", STRING, lambda segment: segment.link_segment_type.name),
        attribute("dens_pcukm", DOUBLE, lambda segment: segment.link_segment_type.max_density_pcu_km_lane),
    ]
    for mode in sorted(supported_modes or [], key=lambda m: m.id):
        attributes.extend(_mode_attributes(mode, mode_short_name(mode, mapper.mode(mode))))
    attributes.append(geometry_attribute(GeometryType.LINESTRING, lambda segment: segment.create_or_get_geometry()))
    return EntityFeatureContext(LinkSegment, attributes)
