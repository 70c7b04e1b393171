"""Tests for feature context construction and the per entity type builders."""

import pytest
from shapely.geometry import Point

from netgeo.domain import GeometryType, IdMapperType, Link, Mode, Node, OdZone, PredefinedModeType
from netgeo.featurecontext import (
    GEOMETRY_ATTRIBUTE_KEY,
    EntityFeatureContext,
    attribute,
    directed_connectoid_feature_context,
    geometry_attribute,
    link_feature_context,
    link_segment_feature_context,
    mode_short_name,
    node_feature_context,
    routed_service_feature_context,
    undirected_connectoid_feature_context,
    zone_feature_context,
)
from netgeo.featurecontext.base import LONG, STRING
from netgeo.idmapping import NetworkIdMapper, RoutedServicesIdMapper, ZoningIdMapper
from netgeo.types import FeatureContextError, ModeShortNameError


@pytest.fixture
def network_mapper() -> NetworkIdMapper:
    return NetworkIdMapper.create(IdMapperType.XML)


@pytest.fixture
def zoning_mapper() -> ZoningIdMapper:
    return ZoningIdMapper.create(IdMapperType.XML)


class TestEntityFeatureContext:
    """Invariants checked when constructing a context."""

    def test_valid_context(self) -> None:
        context = EntityFeatureContext(Node, [
            attribute("id", LONG, lambda node: node.id),
            geometry_attribute(GeometryType.POINT, lambda node: node.position),
        ])
        assert context.entity_type is Node
        assert context.attribute_names == ["id", GEOMETRY_ATTRIBUTE_KEY]
        assert context.geometry_type == GeometryType.POINT
        assert context.geometry_attribute_name == "*geom"
        assert len(context) == 2

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(FeatureContextError, match="Duplicate"):
            EntityFeatureContext(Node, [
                attribute("id", LONG, lambda node: node.id),
                attribute("id", STRING, lambda node: node.xml_id),
                geometry_attribute(GeometryType.POINT, lambda node: node.position),
            ])

    def test_missing_geometry_rejected(self) -> None:
        with pytest.raises(FeatureContextError, match="exactly one"):
            EntityFeatureContext(Node, [attribute("id", LONG, lambda node: node.id)])

    def test_geometry_not_last_rejected(self) -> None:
        with pytest.raises(FeatureContextError, match="last"):
            EntityFeatureContext(Node, [
                geometry_attribute(GeometryType.POINT, lambda node: node.position),
                attribute("id", LONG, lambda node: node.id),
            ])

    def test_unknown_scalar_type_rejected(self) -> None:
        with pytest.raises(FeatureContextError, match="unsupported type"):
            EntityFeatureContext(Node, [
                attribute("id", "Decimal", lambda node: node.id),
                geometry_attribute(GeometryType.POINT, lambda node: node.position),
            ])

    def test_with_geometry_type_keeps_attributes(self) -> None:
        context = zone_feature_context(OdZone, ZoningIdMapper.create(IdMapperType.ID), GeometryType.POINT)
        polygon_context = context.with_geometry_type(GeometryType.POLYGON)
        assert polygon_context.attribute_names == context.attribute_names
        assert polygon_context.geometry_type == GeometryType.POLYGON


class TestNetworkContexts:
    """Attribute lists of nodes, links and link segments."""

    def test_node_attributes(self, network_mapper) -> None:
        context = node_feature_context(network_mapper)
        assert context.attribute_names == ["mapped_id", "id", "node_id", "xml_id", "ext_id", "name", "*geom"]
        node = Node(id=3, xml_id="n3", position=Point(1, 2))
        assert context.find("mapped_id").extract(node) == "n3"
        assert context.geometry_attribute.extract(node) == Point(1, 2)

    def test_link_references_mapped_nodes(self, network_mapper) -> None:
        n1 = Node(id=0, xml_id="n1", position=Point(0, 0))
        n2 = Node(id=1, xml_id="n2", position=Point(1, 0))
        link = Link(id=0, xml_id="l1", node_a=n1, node_b=n2)
        context = link_feature_context(network_mapper)
        assert context.find("node_a").extract(link) == "n1"
        assert context.find("node_b").extract(link) == "n2"
        assert list(context.geometry_attribute.extract(link).coords) == [(0, 0), (1, 0)]

    def test_link_segment_mode_columns(self, network, network_mapper, car, bus) -> None:
        layer = network.layers[0]
        context = link_segment_feature_context(network_mapper, [bus, car])
        names = context.attribute_names
        assert names[-7:] == ["car_ban", "car_spd", "car_spdc", "bus_ban", "bus_spd", "bus_spdc", "*geom"]

        segment = layer.link_segments[0]
        assert context.find("car_ban").extract(segment) is False
        assert context.find("car_spd").extract(segment) == 80.0
        assert context.find("car_spdc").extract(segment) == 60.0
        assert context.find("bus_spd").extract(segment) == 90.0
        assert context.find("node_up").extract(segment) == "n1"
        assert context.find("node_down").extract(layer.link_segments[1]) == "n1"
        assert context.find("geom_opp").extract(layer.link_segments[1]) is True

    def test_link_segment_banned_mode(self, network, network_mapper) -> None:
        tram = Mode(id=5, xml_id="tram", predefined_type=PredefinedModeType.TRAM)
        context = link_segment_feature_context(network_mapper, [tram])
        segment = network.layers[0].link_segments[0]
        assert context.find("tram_ban").extract(segment) is True
        assert context.find("tram_spd").extract(segment) is None

    def test_missing_mapper(self) -> None:
        with pytest.raises(FeatureContextError):
            node_feature_context(None)


class TestModeShortName:
    """Short names of mode specific columns."""

    @pytest.mark.parametrize(
        "mode_type, expected",
        [
            (PredefinedModeType.CAR, "car"),
            (PredefinedModeType.HEAVY_GOODS_VEHICLE, "hgv"),
            (PredefinedModeType.BICYCLE, "cycle"),
            (PredefinedModeType.CAR_SHARE, "crsh"),
            (PredefinedModeType.CAR_HIGH_OCCUPANCY, "crhov"),
            (PredefinedModeType.PEDESTRIAN, "pdstr"),
            (PredefinedModeType.MOTOR_BIKE, "mtrbk"),
            (PredefinedModeType.SUBWAY, "sbway"),
            (PredefinedModeType.LIGHTRAIL, "lrail"),
        ],
    )
    def test_predefined(self, mode_type, expected) -> None:
        assert mode_short_name(Mode(id=0, predefined_type=mode_type), "0") == expected
        assert len(expected) <= 5

    def test_custom_short_name(self) -> None:
        assert mode_short_name(Mode(id=7, name="taxi"), "7") == "taxi"

    def test_custom_falls_back_to_id(self) -> None:
        assert mode_short_name(Mode(id=7, name="rickshaw"), "1234") == "m1234"

    def test_custom_without_fit_fails(self) -> None:
        with pytest.raises(ModeShortNameError):
            mode_short_name(Mode(id=7, name="rickshaw"), "12345")


class TestZoningContexts:
    """Connectoid attribute values."""

    def test_undirected_connectoid_values(self, zoning, zoning_mapper, network_mapper) -> None:
        context = undirected_connectoid_feature_context(zoning_mapper, network_mapper)
        connectoid = zoning.od_connectoids[0]
        assert context.find("phys_node").extract(connectoid) == "n1"
        assert context.find("zones").extract(connectoid) == "z1,z2"
        assert context.find("modes").extract(connectoid) == "z1:ALL,z2:bus"

    def test_lengths_formatted_with_one_decimal(self, zoning, zoning_mapper, network_mapper) -> None:
        context = undirected_connectoid_feature_context(zoning_mapper, network_mapper)
        zoning.od_connectoids[0].access_zones[0].length_km = 1.26
        assert context.find("lengths_km").extract(zoning.od_connectoids[0]) == "z1:1.3"

    def test_directed_connectoid_extra_attributes(self, zoning, zoning_mapper, network_mapper) -> None:
        context = directed_connectoid_feature_context(zoning_mapper, network_mapper)
        assert context.attribute_names[-3:] == ["phys_segm", "segm2node", "*geom"]
        connectoid = zoning.transfer_connectoids[0]
        assert context.find("phys_segm").extract(connectoid) == "s1"
        assert context.find("segm2node").extract(connectoid) == "PHYS_NODE_DOWNSTREAM"


class TestServiceContexts:
    def test_routed_service_trip_counts(self, routed_services) -> None:
        context = routed_service_feature_context(RoutedServicesIdMapper.create(IdMapperType.XML))
        service = next(iter(routed_services.layers[0].services_by_mode.values()))[0]
        assert context.find("trips_schd").extract(service) == 1
        assert context.find("trips_freq").extract(service) == 1
        assert context.geometry_type == GeometryType.MULTILINESTRING
