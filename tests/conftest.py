"""
Pytest fixtures building small in-memory models for the writer tests.
"""

import pytest
from shapely.geometry import Point, Polygon

from netgeo.domain import (
    ConnectoidEdge,
    ConnectoidSegment,
    ConnectoidZoneAccess,
    DirectedConnectoid,
    Link,
    LinkSegment,
    LinkSegmentType,
    MacroscopicNetwork,
    Mode,
    ModeAccessProperties,
    NetworkLayer,
    Node,
    OdZone,
    PredefinedModeType,
    RoutedService,
    RoutedServices,
    RoutedServicesLayer,
    RoutedTrip,
    ServiceLeg,
    ServiceLegSegment,
    ServiceNetwork,
    ServiceNetworkLayer,
    ServiceNode,
    TransferZone,
    UndirectedConnectoid,
    VirtualNetwork,
    Zoning,
)


@pytest.fixture
def car() -> Mode:
    return Mode(id=0, xml_id="car", name="car", predefined_type=PredefinedModeType.CAR, max_speed_kmh=130.0)


@pytest.fixture
def bus() -> Mode:
    return Mode(id=1, xml_id="bus", name="bus", predefined_type=PredefinedModeType.BUS, max_speed_kmh=100.0)


@pytest.fixture
def network(car, bus) -> MacroscopicNetwork:
    """Single layer network: n1 -- n2, one link with a segment in each direction."""
    n1 = Node(id=0, xml_id="n1", external_id="ext_n1", name="first", position=Point(4.35, 50.85))
    n2 = Node(id=1, xml_id="n2", external_id="ext_n2", name="second", position=Point(4.36, 50.86))
    link = Link(id=0, xml_id="l1", node_a=n1, node_b=n2, length_km=1.3, name="main road")
    segment_type = LinkSegmentType(
        id=0, xml_id="t1", name="primary",
        mode_properties={car: ModeAccessProperties(max_speed_kmh=80.0, critical_speed_kmh=60.0),
                         bus: ModeAccessProperties()})
    ab = LinkSegment(id=0, xml_id="s1", parent_link=link, direction_ab=True, link_segment_type=segment_type,
                     lanes=2, physical_speed_limit_kmh=90.0)
    ba = LinkSegment(id=1, xml_id="s2", parent_link=link, direction_ab=False, link_segment_type=segment_type,
                     lanes=1, physical_speed_limit_kmh=50.0)
    layer = NetworkLayer(id=0, xml_id="road", nodes=[n1, n2], links=[link], link_segments=[ab, ba])
    return MacroscopicNetwork(layers=[layer], crs="EPSG:4326")


@pytest.fixture
def mixed_zones() -> list[OdZone]:
    """Two polygon zones and one point zone, interleaved."""
    return [
        OdZone(id=0, xml_id="z1", geometry=Polygon([(4.35, 50.85), (4.36, 50.85), (4.36, 50.86)])),
        OdZone(id=1, xml_id="z2", geometry=Point(4.355, 50.855)),
        OdZone(id=2, xml_id="z3", geometry=Polygon([(4.36, 50.86), (4.37, 50.86), (4.37, 50.87)])),
    ]


@pytest.fixture
def zoning(network, mixed_zones, bus) -> Zoning:
    layer = network.layers[0]
    n1, n2 = layer.nodes
    stop = TransferZone(id=3, xml_id="stop1", name="central", geometry=Point(4.36, 50.86))
    od_connectoid = UndirectedConnectoid(
        id=0, xml_id="c1", access_node=n1,
        access_zones=[ConnectoidZoneAccess(mixed_zones[0], length_km=0.25),
                      ConnectoidZoneAccess(mixed_zones[1], allowed_modes=[bus])])
    transfer_connectoid = DirectedConnectoid(
        id=1, xml_id="c2", access_node=n2, access_link_segment=layer.link_segments[0],
        access_zones=[ConnectoidZoneAccess(stop)])
    edge = ConnectoidEdge(id=0, xml_id="e1", zone=mixed_zones[0], access_node=n1, length_km=0.25)
    virtual_network = VirtualNetwork(
        connectoid_edges=[edge],
        connectoid_segments=[ConnectoidSegment(id=0, xml_id="cs1", parent_edge=edge, direction_ab=True),
                             ConnectoidSegment(id=1, xml_id="cs2", parent_edge=edge, direction_ab=False)])
    return Zoning(od_zones=mixed_zones, transfer_zones=[stop], od_connectoids=[od_connectoid],
                  transfer_connectoids=[transfer_connectoid], virtual_network=virtual_network)


@pytest.fixture
def service_network(network) -> ServiceNetwork:
    layer = network.layers[0]
    n1, n2 = layer.nodes
    sn1 = ServiceNode(id=0, xml_id="sn1", parent_node=n1)
    sn2 = ServiceNode(id=1, xml_id="sn2", parent_node=n2)
    leg = ServiceLeg(id=0, xml_id="leg1", service_node_a=sn1, service_node_b=sn2, length_km=1.3)
    leg_segment = ServiceLegSegment(id=0, xml_id="ls1", parent_leg=leg, direction_ab=True,
                                    physical_link_segments=[layer.link_segments[0]])
    service_layer = ServiceNetworkLayer(id=0, xml_id="services", parent_layer=layer, service_nodes=[sn1, sn2],
                                        legs=[leg], leg_segments=[leg_segment])
    return ServiceNetwork(parent_network=network, layers=[service_layer])


@pytest.fixture
def routed_services(service_network, bus) -> RoutedServices:
    service_layer = service_network.layers[0]
    leg_segment = service_layer.leg_segments[0]
    line = RoutedService(
        id=0, xml_id="line1", name="1", name_description="Central line",
        trips=[RoutedTrip(id=0, xml_id="t1", leg_segments=[leg_segment], departure_times=["08:00:00"]),
               RoutedTrip(id=1, xml_id="t2", leg_segments=[leg_segment], frequency_per_hour=4.0)])
    layer = RoutedServicesLayer(id=0, xml_id="routed", parent_layer=service_layer, services_by_mode={bus: [line]})
    return RoutedServices(parent_network=service_network, layers=[layer])

