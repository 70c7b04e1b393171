"""
Service network and routed services domain model.

A service network overlays a physical network layer: service nodes refer to physical nodes,
service legs connect service nodes and service leg segments follow a sequence of physical
link segments. Routed services (lines) run trips over service leg segments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shapely.geometry import LineString, MultiLineString, Point
from shapely.ops import linemerge

from .network import LinkSegment, MacroscopicNetwork, Mode, NetworkLayer, Node


@dataclass(eq=False)
class ServiceNode:
    """Node of the service network, located at its parent physical node."""
    id: int
    parent_node: Optional[Node] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def position(self) -> Optional[Point]:
        return self.parent_node.position if self.parent_node is not None else None


@dataclass(eq=False)
class ServiceLeg:
    """Undirected connection between two service nodes."""
    id: int
    service_node_a: ServiceNode
    service_node_b: ServiceNode
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    geometry: Optional[LineString] = None
    length_km: Optional[float] = None

    def create_or_get_geometry(self) -> LineString:
        """Leg geometry, or a straight line between its service node positions."""
        if self.geometry is not None:
            return self.geometry
        if self.service_node_a.position is None or self.service_node_b.position is None:
            raise ValueError(f"Service leg {self.id} has no geometry and its nodes lack a position")
        return LineString([self.service_node_a.position, self.service_node_b.position])


@dataclass(eq=False)
class ServiceLegSegment:
    """Directed use of a service leg, following zero or more physical link segments."""
    id: int
    parent_leg: ServiceLeg
    direction_ab: bool = True
    physical_link_segments: list[LinkSegment] = field(default_factory=list)
    xml_id: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def upstream_service_node(self) -> ServiceNode:
        return self.parent_leg.service_node_a if self.direction_ab else self.parent_leg.service_node_b

    @property
    def downstream_service_node(self) -> ServiceNode:
        return self.parent_leg.service_node_b if self.direction_ab else self.parent_leg.service_node_a

    def create_or_get_geometry(self) -> LineString:
        """Concatenated physical link segment geometries, the parent leg geometry when there are none."""
        if not self.physical_link_segments:
            geometry = self.parent_leg.create_or_get_geometry()
            return geometry if self.direction_ab else LineString(list(geometry.coords)[::-1])

        coordinates = []
        for link_segment in self.physical_link_segments:
            segment_coordinates = list(link_segment.create_or_get_geometry().coords)
            if not link_segment.is_parent_geometry_in_segment_direction():
                segment_coordinates.reverse()
            # shared vertex between consecutive segments
            if coordinates and coordinates[-1] == segment_coordinates[0]:
                segment_coordinates = segment_coordinates[1:]
            coordinates.extend(segment_coordinates)
        return LineString(coordinates)


@dataclass(eq=False)
class ServiceNetworkLayer:
    """Service layer on top of exactly one physical network layer."""
    id: int
    parent_layer: NetworkLayer
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    service_nodes: list[ServiceNode] = field(default_factory=list)
    legs: list[ServiceLeg] = field(default_factory=list)
    leg_segments: list[ServiceLegSegment] = field(default_factory=list)


@dataclass(eq=False)
class ServiceNetwork:
    """Layered service network with its parent physical network."""
    parent_network: MacroscopicNetwork
    layers: list[ServiceNetworkLayer] = field(default_factory=list)


@dataclass(eq=False)
class RoutedTrip:
    """Trip of a routed service, either schedule based or frequency based."""
    id: int
    leg_segments: list[ServiceLegSegment] = field(default_factory=list)
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    frequency_per_hour: Optional[float] = None
    departure_times: list[str] = field(default_factory=list)

    @property
    def is_frequency_based(self) -> bool:
        return self.frequency_per_hour is not None


@dataclass(eq=False)
class RoutedService:
    """Service (line) of a single mode, e.g. a numbered bus line."""
    id: int
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    name_description: Optional[str] = None
    service_description: Optional[str] = None
    trips: list[RoutedTrip] = field(default_factory=list)

    @property
    def schedule_based_trips(self) -> list[RoutedTrip]:
        return [trip for trip in self.trips if not trip.is_frequency_based]

    @property
    def frequency_based_trips(self) -> list[RoutedTrip]:
        return [trip for trip in self.trips if trip.is_frequency_based]

    def extract_geometry(self) -> Optional[MultiLineString]:
        """Union of the paths of all trips, one line per distinct service leg segment sequence."""
        lines = []
        seen = set()
        for trip in self.trips:
            key = tuple(leg_segment.id for leg_segment in trip.leg_segments)
            if not key or key in seen:
                continue
            seen.add(key)
            merged = linemerge([leg_segment.create_or_get_geometry() for leg_segment in trip.leg_segments])
            lines.extend(merged.geoms if isinstance(merged, MultiLineString) else [merged])
        if not lines:
            return None
        return MultiLineString(lines)


@dataclass(eq=False)
class RoutedServicesLayer:
    """Routed services on top of one service network layer, grouped by mode."""
    id: int
    parent_layer: ServiceNetworkLayer
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    services_by_mode: dict[Mode, list[RoutedService]] = field(default_factory=dict)

    def modes_with_services(self) -> list[Mode]:
        """Modes that have at least one service, ordered by mode id."""
        return sorted((mode for mode, services in self.services_by_mode.items() if services), key=lambda m: m.id)


@dataclass(eq=False)
class RoutedServices:
    """Layered routed services with their parent service network."""
    parent_network: Optional[ServiceNetwork]
    layers: list[RoutedServicesLayer] = field(default_factory=list)
