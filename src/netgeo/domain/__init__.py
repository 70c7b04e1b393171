"""
Domain Models and Types

Plain data containers for the transport network entities that can be exported, together with
the enumerations shared across the package.

Models:
- network: Mode, Node, Link, LinkSegmentType, LinkSegment, NetworkLayer, MacroscopicNetwork
- zoning: OdZone, TransferZone, connectoids, ConnectoidEdge, ConnectoidSegment, Zoning
- services: service network entities, RoutedService and their layered containers

Enums:
- GeometryType: persistable geometry shapes
- PredefinedModeType: predefined transport modes
- IdMapperType: persisted id strategy (id, xml, external)
"""

from .enums import GeometryType, IdMapperType, PredefinedModeType
from .network import (
    Link,
    LinkSegment,
    LinkSegmentType,
    MacroscopicNetwork,
    Mode,
    ModeAccessProperties,
    NetworkLayer,
    Node,
)
from .services import (
    RoutedService,
    RoutedServices,
    RoutedServicesLayer,
    RoutedTrip,
    ServiceLeg,
    ServiceLegSegment,
    ServiceNetwork,
    ServiceNetworkLayer,
    ServiceNode,
)
from .zoning import (
    Connectoid,
    ConnectoidEdge,
    ConnectoidSegment,
    ConnectoidZoneAccess,
    DirectedConnectoid,
    OdZone,
    TransferZone,
    UndirectedConnectoid,
    VirtualNetwork,
    Zone,
    Zoning,
)

__all__ = [
    "GeometryType", "IdMapperType", "PredefinedModeType",
    "Mode", "Node", "Link", "LinkSegmentType", "ModeAccessProperties", "LinkSegment",
    "NetworkLayer", "MacroscopicNetwork",
    "Zone", "OdZone", "TransferZone", "Connectoid", "ConnectoidZoneAccess", "UndirectedConnectoid",
    "DirectedConnectoid", "ConnectoidEdge", "ConnectoidSegment", "VirtualNetwork", "Zoning",
    "ServiceNode", "ServiceLeg", "ServiceLegSegment", "ServiceNetworkLayer", "ServiceNetwork",
    "RoutedTrip", "RoutedService", "RoutedServicesLayer", "RoutedServices",
]
