"""Tests for the command line interface."""

import logging
import os

import pytest
import yaml
from typer.testing import CliRunner

from netgeo import __version__
from netgeo.cli import app
from netgeo.config.settings import NetworkWriterSettings
from netgeo.writers import GeometryNetworkWriter

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """Commands reconfigure the root logger onto the runner output stream."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def isolated_env(monkeypatch, tmp_path) -> dict:
    env = {key: value for key, value in os.environ.items()
           if not key.startswith("NETGEO_") and key != "ENVIRONMENT"}
    monkeypatch.setattr(os, "environ", env)
    monkeypatch.chdir(tmp_path)
    return env


class TestCommands:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_drivers(self) -> None:
        result = runner.invoke(app, ["drivers"])
        assert result.exit_code == 0
        assert ".shp" in result.stdout
        assert "ESRI Shapefile" in result.stdout

    def test_schema(self) -> None:
        result = runner.invoke(app, ["schema", "--mode", "car", "--mode", "bus"])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        node_line = next(line for line in lines if line.startswith("layer_0_planit_nodes:"))
        assert node_line.endswith("*geom:Point:srid=4326")
        segment_line = next(line for line in lines if line.startswith("layer_0_planit_linksegments:"))
        assert "car_ban:Boolean" in segment_line
        assert "bus_spdc:Double" in segment_line

    def test_schema_invalid_crs(self) -> None:
        result = runner.invoke(app, ["schema", "--crs", "EPSG:not-a-code"])
        assert result.exit_code == 1

    def test_config(self, isolated_env, tmp_path) -> None:
        config_file = tmp_path / "export.yaml"
        config_file.write_text("output:\n  file_extension: gpkg\nnetwork:\n  persist_links: false\n")
        result = runner.invoke(app, ["config", "--config", str(config_file)])
        assert result.exit_code == 0
        dumped = yaml.safe_load(result.stdout[result.stdout.index("output_directory"):])
        assert dumped["file_extension"] == ".gpkg"
        assert dumped["network"]["persist_links"] is False

    def test_config_missing_file(self, isolated_env, tmp_path) -> None:
        result = runner.invoke(app, ["config", "--config", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1

    def test_inspect(self, network, tmp_path) -> None:
        GeometryNetworkWriter(NetworkWriterSettings(output_directory=tmp_path)).write(network)
        result = runner.invoke(app, ["inspect", str(tmp_path / "layer_0_planit_nodes.shp")])
        assert result.exit_code == 0
        assert "Rows: 2" in result.stdout
        assert "mapped_id" in result.stdout
        assert "Geometry types: Point" in result.stdout

    def test_inspect_missing_file(self, tmp_path) -> None:
        result = runner.invoke(app, ["inspect", str(tmp_path / "absent.shp")])
        assert result.exit_code == 1

    def test_log_to_file(self, isolated_env, tmp_path) -> None:
        result = runner.invoke(app, ["schema", "--log-to-file"])
        assert result.exit_code == 0
        log_files = list((tmp_path / "logs").glob("netgeo_schema_*.log"))
        assert len(log_files) == 1
