"""Tests for output naming."""

import random
import string
from pathlib import Path

import pytest

from netgeo.domain import GeometryType
from netgeo.naming import OutputPathNamer


@pytest.fixture
def namer() -> OutputPathNamer:
    return OutputPathNamer()


class TestSchemaName:
    """Composition order of the name components."""

    def test_base_name_only(self, namer) -> None:
        assert namer.schema_name("planit_zones_od") == "planit_zones_od"

    def test_layer_prefix(self, namer) -> None:
        assert namer.schema_name("planit_nodes", namer.layer_prefix(0)) == "layer_0_planit_nodes"

    def test_layer_and_mode(self, namer) -> None:
        name = namer.schema_name("planit_service", namer.layer_prefix(2), namer.mode_sub_key("bus"))
        assert name == "layer_2_mode_bus_planit_service"

    def test_geometry_suffix(self, namer) -> None:
        assert namer.schema_name("planit_zones_od", geometry_type=GeometryType.POLYGON) == "planit_zones_od_polygon"
        assert namer.schema_name("planit_zones_od", geometry_type=GeometryType.POINT) == "planit_zones_od_point"

    def test_custom_separator(self) -> None:
        namer = OutputPathNamer("-")
        assert namer.schema_name("nodes", namer.layer_prefix(1)) == "layer-1-nodes"

    @pytest.mark.parametrize("base_name", ["", "   ", None])
    def test_blank_base_name(self, namer, base_name) -> None:
        with pytest.raises(ValueError):
            namer.schema_name(base_name)

    def test_blank_component(self, namer) -> None:
        with pytest.raises(ValueError):
            namer.schema_name("nodes", layer_prefix="")
        with pytest.raises(ValueError):
            namer.mode_sub_key(" ")

    @pytest.mark.parametrize("mode_id", [None, ""])
    def test_missing_mode_id(self, namer, mode_id) -> None:
        with pytest.raises(ValueError, match="mode id"):
            namer.mode_sub_key(mode_id)

    def test_integer_ids(self, namer) -> None:
        assert namer.layer_prefix(0) == "layer_0"
        assert namer.mode_sub_key(3) == "mode_3"


class TestResolve:
    def test_path_uses_schema_name(self, namer, tmp_path) -> None:
        target = namer.resolve(tmp_path, ".shp", "planit_links", namer.layer_prefix(0))
        assert target.schema_name == "layer_0_planit_links"
        assert target.path == tmp_path / "layer_0_planit_links.shp"

    def test_extension_without_dot(self, namer, tmp_path) -> None:
        assert namer.resolve(tmp_path, "gpkg", "nodes").path.suffix == ".gpkg"

    def test_creation_and_writer_names_match(self, namer) -> None:
        """Names resolved for store creation and for the row writer are identical."""
        rng = random.Random(7)
        alphabet = string.ascii_lowercase + string.digits + "_"

        def token() -> str:
            return "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 12)))

        for _ in range(200):
            layer = namer.layer_prefix(token()) if rng.random() < 0.7 else None
            sub_key = namer.mode_sub_key(token()) if rng.random() < 0.5 else None
            geometry_type = rng.choice([None, *GeometryType])
            base_name = token()

            creation = namer.resolve(Path("out"), ".shp", base_name, layer, sub_key, geometry_type)
            writer = OutputPathNamer().resolve(Path("out"), ".shp", base_name, layer, sub_key, geometry_type)
            assert creation == writer
            assert creation.path.stem == creation.schema_name
            assert creation.schema_name == namer.schema_name(base_name, layer, sub_key, geometry_type)
