"""Tests for the zoning writer."""

import geopandas as gpd
import pytest
from shapely.geometry import Point

from netgeo.config.settings import ZoningWriterSettings
from netgeo.domain import OdZone, VirtualNetwork, Zoning
from netgeo.writers import GeometryZoningWriter


@pytest.fixture
def settings(tmp_path) -> ZoningWriterSettings:
    return ZoningWriterSettings(output_directory=tmp_path)


class TestZoneOutputs:
    """Zones are written per geometry shape."""

    def test_mixed_od_zones_split_by_geometry(self, zoning, settings, tmp_path) -> None:
        written = GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        assert written["planit_zones_od_point"] == 1
        assert written["planit_zones_od_polygon"] == 2

        points = gpd.read_file(tmp_path / "planit_zones_od_point.shp")
        polygons = gpd.read_file(tmp_path / "planit_zones_od_polygon.shp")
        assert list(points["mapped_id"]) == ["z2"]
        assert list(polygons["mapped_id"]) == ["z1", "z3"]
        assert set(polygons.geom_type) == {"Polygon"}

    def test_transfer_zones(self, zoning, settings, tmp_path) -> None:
        written = GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        assert written["planit_zones_transfer_point"] == 1
        assert not (tmp_path / "planit_zones_transfer_polygon.shp").exists()

    def test_zone_without_geometry_skipped(self, settings, tmp_path, caplog) -> None:
        zoning = Zoning(od_zones=[OdZone(id=0, xml_id="z1", geometry=Point(0, 0)), OdZone(id=1, xml_id="ghost")])
        writer = GeometryZoningWriter(settings)
        written = writer.write(zoning, "EPSG:4326")
        assert written == {"planit_zones_od_point": 1}
        assert [zone.xml_id for zone in writer.skipped_zones] == ["ghost"]
        assert "IGNORE: OdZone ghost without geometry, not persisted" in caplog.text

    def test_persist_flag(self, zoning, tmp_path) -> None:
        settings = ZoningWriterSettings(output_directory=tmp_path, persist_od_zones=False)
        written = GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        assert not any(name.startswith("planit_zones_od") for name in written)


class TestConnectoidOutputs:
    def test_od_connectoid_attributes(self, zoning, settings, tmp_path) -> None:
        GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        connectoids = gpd.read_file(tmp_path / "planit_connectoids_od.shp")
        row = connectoids.iloc[0]
        assert row["mapped_id"] == "c1"
        assert row["phys_node"] == "n1"
        assert row["zones"] == "z1,z2"
        assert row["modes"] == "z1:ALL,z2:bus"
        assert row["lengths_km"] == "z1:0.2"

    def test_transfer_connectoid_attributes(self, zoning, settings, tmp_path) -> None:
        GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        connectoids = gpd.read_file(tmp_path / "planit_connectoids_transfer.shp")
        row = connectoids.iloc[0]
        assert row["mapped_id"] == "c2"
        assert row["phys_segm"] == "s1"
        assert row["zones"] == "stop1"


class TestVirtualNetworkOutputs:
    def test_edges_and_segments(self, zoning, settings, tmp_path) -> None:
        written = GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        assert written["planit_connectoid_edges"] == 1
        assert written["planit_connectoid_segments"] == 2

        edges = gpd.read_file(tmp_path / "planit_connectoid_edges.shp")
        assert edges.loc[0, "node_a"] == "z1"
        assert edges.loc[0, "node_b"] == "n1"

        segments = gpd.read_file(tmp_path / "planit_connectoid_segments.shp")
        assert list(segments["vertx_up"]) == ["z1", "n1"]
        assert list(segments["vertx_down"]) == ["n1", "z1"]

    def test_empty_virtual_network_not_persisted(self, zoning, settings, tmp_path) -> None:
        zoning.virtual_network = VirtualNetwork()
        written = GeometryZoningWriter(settings).write(zoning, "EPSG:4326")
        assert "planit_connectoid_edges" not in written
        assert not (tmp_path / "planit_connectoid_edges.shp").exists()

    def test_none_zoning_rejected(self, settings) -> None:
        with pytest.raises(ValueError):
            GeometryZoningWriter(settings).write(None)
