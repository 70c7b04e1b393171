"""
Physical network domain model.

Plain containers for the macroscopic network entities that can be exported. The model only
holds data and values trivially derived from it (default geometries, modelled speeds); how a
network is built or validated is out of scope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from shapely.geometry import LineString, Point

from .enums import PredefinedModeType


@dataclass(eq=False)
class Mode:
    """Transport mode."""
    id: int
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    predefined_type: PredefinedModeType = PredefinedModeType.CUSTOM
    max_speed_kmh: float = 130.0

    @property
    def is_custom(self) -> bool:
        return self.predefined_type == PredefinedModeType.CUSTOM


@dataclass(eq=False)
class Node:
    """Vertex of the physical network."""
    id: int
    position: Optional[Point] = None
    node_id: Optional[int] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if self.node_id is None:
            self.node_id = self.id


@dataclass(eq=False)
class Link:
    """Undirected edge between two nodes, optionally with its own geometry."""
    id: int
    node_a: Node
    node_b: Node
    length_km: Optional[float] = None
    geometry: Optional[LineString] = None
    link_id: Optional[int] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self):
        if self.link_id is None:
            self.link_id = self.id

    def create_or_get_geometry(self, direction_ab: bool = True) -> LineString:
        """Link geometry, or a straight line between the node positions when absent."""
        if self.geometry is not None:
            return self.geometry
        if self.node_a.position is None or self.node_b.position is None:
            raise ValueError(f"Link {self.id} has no geometry and its nodes lack a position")
        if direction_ab:
            return LineString([self.node_a.position, self.node_b.position])
        return LineString([self.node_b.position, self.node_a.position])

    def is_geometry_in_ab_direction(self) -> bool:
        """Whether the link geometry starts at node A (closest end point)."""
        if self.geometry is None or self.node_a.position is None:
            return True
        start = Point(self.geometry.coords[0])
        end = Point(self.geometry.coords[-1])
        return start.distance(self.node_a.position) <= end.distance(self.node_a.position)


@dataclass
class ModeAccessProperties:
    """Mode specific properties of a link segment type."""
    max_speed_kmh: Optional[float] = None
    critical_speed_kmh: Optional[float] = None


@dataclass(eq=False)
class LinkSegmentType:
    """Shared characteristics of link segments, including which modes may use them."""
    id: int
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    name: Optional[str] = None
    max_density_pcu_km_lane: float = 180.0
    capacity_pcu_h_lane: float = 1800.0
    mode_properties: dict[Mode, ModeAccessProperties] = field(default_factory=dict)

    def is_mode_allowed(self, mode: Mode) -> bool:
        return mode in self.mode_properties

    def max_speed_kmh(self, mode: Mode) -> Optional[float]:
        properties = self.mode_properties.get(mode)
        if properties is None:
            return None
        return properties.max_speed_kmh if properties.max_speed_kmh is not None else mode.max_speed_kmh

    def critical_speed_kmh(self, mode: Mode) -> Optional[float]:
        properties = self.mode_properties.get(mode)
        if properties is None:
            return None
        return properties.critical_speed_kmh


@dataclass(eq=False)
class LinkSegment:
    """Directed use of a link."""
    id: int
    parent_link: Link
    direction_ab: bool
    link_segment_type: LinkSegmentType
    lanes: int = 1
    physical_speed_limit_kmh: float = 130.0
    capacity_pcu_h: Optional[float] = None
    link_segment_id: Optional[int] = None
    xml_id: Optional[str] = None
    external_id: Optional[str] = None

    def __post_init__(self):
        if self.link_segment_id is None:
            self.link_segment_id = self.id

    @property
    def upstream_node(self) -> Node:
        return self.parent_link.node_a if self.direction_ab else self.parent_link.node_b

    @property
    def downstream_node(self) -> Node:
        return self.parent_link.node_b if self.direction_ab else self.parent_link.node_a

    def capacity_or_default_pcu_h(self) -> float:
        """Capacity across all lanes, the type's per lane capacity when not explicitly set"""
        if self.capacity_pcu_h is not None:
            return self.capacity_pcu_h
        return self.link_segment_type.capacity_pcu_h_lane * self.lanes

    def is_mode_allowed(self, mode: Mode) -> bool:
        return self.link_segment_type.is_mode_allowed(mode)

    def modelled_speed_limit_kmh(self, mode: Mode) -> Optional[float]:
        """Minimum of sign posted limit, mode's type specific limit and mode's own maximum."""
        type_speed = self.link_segment_type.max_speed_kmh(mode)
        if type_speed is None:
            return None
        return min(self.physical_speed_limit_kmh, type_speed, mode.max_speed_kmh)

    def is_parent_geometry_in_segment_direction(self) -> bool:
        return self.parent_link.is_geometry_in_ab_direction() == self.direction_ab

    def create_or_get_geometry(self) -> LineString:
        """Parent link geometry, see is_parent_geometry_in_segment_direction for its orientation."""
        return self.parent_link.create_or_get_geometry()


@dataclass(eq=False)
class NetworkLayer:
    """Physical network layer holding nodes, links and link segments."""
    id: int
    xml_id: Optional[str] = None
    external_id: Optional[str] = None
    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    link_segments: list[LinkSegment] = field(default_factory=list)

    @property
    def supported_modes(self) -> list[Mode]:
        """Modes allowed on at least one link segment type of this layer, ordered by id."""
        modes = {}
        for link_segment in self.link_segments:
            for mode in link_segment.link_segment_type.mode_properties:
                modes[mode.id] = mode
        return [modes[mode_id] for mode_id in sorted(modes)]


@dataclass(eq=False)
class MacroscopicNetwork:
    """Layered physical network with the coordinate reference system of its geometries."""
    layers: list[NetworkLayer] = field(default_factory=list)
    crs: Optional[str] = None
