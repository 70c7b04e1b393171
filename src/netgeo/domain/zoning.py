"""
Zoning domain model.

Zones (origin-destination and transfer), the connectoids that attach them to the physical
network and the virtual network of connectoid edges and segments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from .network import LinkSegment, Mode, Node


@dataclass(eq=False)
class Zone:
    """Zone, its geometry can be a point or polygon depending on the source."""
    id: int
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    geometry: Optional[BaseGeometry] = None


@dataclass(eq=False)
class OdZone(Zone):
    """Origin-destination zone."""
    pass


@dataclass(eq=False)
class TransferZone(Zone):
    """Transfer zone, e.g. a stop or platform."""
    pass


@dataclass
class ConnectoidZoneAccess:
    """Access properties of one zone on a connectoid."""
    zone: Zone
    allowed_modes: Optional[list[Mode]] = None  # None means all modes
    length_km: Optional[float] = None


@dataclass(eq=False)
class Connectoid:
    """Connection between one or more zones and the physical network."""
    id: int
    access_node: Node
    access_zones: list[ConnectoidZoneAccess] = field(default_factory=list)
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None


@dataclass(eq=False)
class UndirectedConnectoid(Connectoid):
    """Connectoid accessible from all directions of its access node, used by OD zones."""
    pass


@dataclass(eq=False)
class DirectedConnectoid(Connectoid):
    """Connectoid tied to a link segment, used by transfer zones."""
    access_link_segment: Optional[LinkSegment] = None
    node_access_downstream: bool = True


@dataclass(eq=False)
class ConnectoidEdge:
    """Virtual edge between a zone centroid and a connectoid access node."""
    id: int
    zone: Zone
    access_node: Node
    length_km: Optional[float] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    geometry: Optional[LineString] = None

    def create_or_get_geometry(self) -> LineString:
        """Edge geometry, or a straight line from the zone centroid to the access node."""
        if self.geometry is not None:
            return self.geometry
        if self.zone.geometry is None or self.access_node.position is None:
            raise ValueError(f"Connectoid edge {self.id} has no geometry and cannot derive one")
        return LineString([self.zone.geometry.centroid, self.access_node.position])


@dataclass(eq=False)
class ConnectoidSegment:
    """Directed use of a connectoid edge."""
    id: int
    parent_edge: ConnectoidEdge
    direction_ab: bool = True
    capacity_pcu_h: Optional[float] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def upstream_vertex(self) -> Zone | Node:
        return self.parent_edge.zone if self.direction_ab else self.parent_edge.access_node

    @property
    def downstream_vertex(self) -> Zone | Node:
        return self.parent_edge.access_node if self.direction_ab else self.parent_edge.zone

    def is_parent_geometry_in_segment_direction(self) -> bool:
        return self.direction_ab


@dataclass(eq=False)
class VirtualNetwork:
    """Connectoid edges and segments integrating zoning with the physical network."""
    connectoid_edges: list[ConnectoidEdge] = field(default_factory=list)
    connectoid_segments: list[ConnectoidSegment] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.connectoid_edges and not self.connectoid_segments


@dataclass(eq=False)
class Zoning:
    """Zones, connectoids and virtual network of one network."""
    od_zones: list[OdZone] = field(default_factory=list)
    transfer_zones: list[TransferZone] = field(default_factory=list)
    od_connectoids: list[UndirectedConnectoid] = field(default_factory=list)
    transfer_connectoids: list[DirectedConnectoid] = field(default_factory=list)
    virtual_network: VirtualNetwork = field(default_factory=VirtualNetwork)
