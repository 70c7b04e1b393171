"""
Feature contexts per exported entity type.

Each builder is a pure function of the active id mappers (and, for link segments, the modes
of the layer) returning an ``EntityFeatureContext`` for one write pass.
"""

from .base import (
    GEOMETRY_ATTRIBUTE_KEY,
    AttributeDescriptor,
    EntityFeatureContext,
    attribute,
    geometry_attribute,
)
from .modes import mode_short_name
from .network import link_feature_context, link_segment_feature_context, node_feature_context
from .service import (
    routed_service_feature_context,
    service_leg_feature_context,
    service_leg_segment_feature_context,
    service_node_feature_context,
)
from .zoning import (
    connectoid_edge_feature_context,
    connectoid_segment_feature_context,
    directed_connectoid_feature_context,
    undirected_connectoid_feature_context,
    zone_feature_context,
)

__all__ = [
    "GEOMETRY_ATTRIBUTE_KEY", "AttributeDescriptor", "EntityFeatureContext", "attribute", "geometry_attribute",
    "mode_short_name",
    "node_feature_context", "link_feature_context", "link_segment_feature_context",
    "zone_feature_context", "undirected_connectoid_feature_context", "directed_connectoid_feature_context",
    "connectoid_edge_feature_context", "connectoid_segment_feature_context",
    "service_node_feature_context", "service_leg_feature_context", "service_leg_segment_feature_context",
    "routed_service_feature_context",
]
