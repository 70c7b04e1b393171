"""
Datastore management.

A datastore is one file backed output (shapefile, GeoPackage, GeoJSON) written through fiona.
Stores are cached in a ``DataStoreRegistry`` keyed by ``DataStoreKey``: the first ``open`` for a
key creates the store, later calls return the same store, and ``reset`` disposes all of them.
The registry is owned by the top-level export call and reset in its ``finally`` block.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import fiona
from fiona.errors import FionaError
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

from .crs import to_crs
from .featurecontext.base import BOOLEAN, DOUBLE, GEOMETRY_ATTRIBUTE_KEY, INTEGER, LONG, STRING
from .types import CompiledSchema, DataStoreError, DataStoreKey, SchemaNotFoundError

logger = logging.getLogger(__name__)

SHAPEFILE_DRIVER = "ESRI Shapefile"
GEOPACKAGE_DRIVER = "GPKG"
GEOJSON_DRIVER = "GeoJSON"

# file extension -> fiona driver
_DRIVERS: dict[str, str] = {
    ".shp": SHAPEFILE_DRIVER,
    ".gpkg": GEOPACKAGE_DRIVER,
    ".geojson": GEOJSON_DRIVER,
    ".json": GEOJSON_DRIVER,
}

# drivers holding exactly one layer per file, named after the file
_SINGLE_LAYER_DRIVERS = {SHAPEFILE_DRIVER, GEOJSON_DRIVER}

# schema type tag -> fiona property type
_PROPERTY_TYPES = {
    STRING: "str",
    LONG: "int",
    INTEGER: "int32",
    DOUBLE: "float",
    BOOLEAN: "bool",
}

# shapefiles have no boolean fields
_SHAPEFILE_PROPERTY_TYPES = {**_PROPERTY_TYPES, BOOLEAN: "int32"}


def _normalize_extension(extension: str) -> str:
    extension = (extension or "").strip().lower()
    if not extension:
        raise DataStoreError("No file extension to select an output driver for")
    return extension if extension.startswith(".") else f".{extension}"


def register_driver(extension: str, driver: str, single_layer: bool = True) -> None:
    """Register (or replace) the fiona driver used for a file extension."""
    extension = _normalize_extension(extension)
    _DRIVERS[extension] = driver
    if single_layer:
        _SINGLE_LAYER_DRIVERS.add(driver)
    else:
        _SINGLE_LAYER_DRIVERS.discard(driver)
    logger.debug(f"Registered driver {driver} for {extension} files")


def is_driver_available(driver: str) -> bool:
    """Whether fiona can write with the driver."""
    return "w" in fiona.supported_drivers.get(driver, "")


def supported_extensions() -> list[tuple[str, str, bool]]:
    """Registered (extension, driver, available) triples, ordered by extension."""
    return [(extension, driver, is_driver_available(driver)) for extension, driver in sorted(_DRIVERS.items())]


def driver_for(extension: str) -> str:
    """
    Fiona driver for a file extension.

    Raises:
        DataStoreError: If the extension is unknown or fiona cannot write with its driver
    """
    extension = _normalize_extension(extension)
    driver = _DRIVERS.get(extension)
    if driver is None:
        raise DataStoreError(
            f"No output driver registered for extension {extension}, supported: {', '.join(sorted(_DRIVERS))}")
    if not is_driver_available(driver):
        raise DataStoreError(f"Output driver {driver} for {extension} files is not available for writing")
    return driver


class FeatureWriter:
    """Row writer for one schema, appends features to an open fiona collection."""

    def __init__(self, collection, property_names: list[str], convert_booleans: bool):
        self._collection = collection
        self._property_names = property_names
        self._convert_booleans = convert_booleans
        self.count = 0

    def write(self, properties: dict[str, Any], geometry: Optional[BaseGeometry]) -> None:
        values = {}
        for name in self._property_names:
            value = properties.get(name)
            if self._convert_booleans and isinstance(value, bool):
                value = int(value)
            values[name] = value
        self._collection.write({
            "geometry": mapping(geometry) if geometry is not None else None,
            "properties": values,
        })
        self.count += 1


class FionaDataStore:
    """
    File backed datastore for one output path.

    Schemas are registered from a ``CompiledSchema``. Registering a schema the store already
    knows drops and recreates it, so re-running an export overwrites previous output.
    """

    def __init__(self, path: Union[str, Path], driver: str):
        self.path = Path(path)
        self.driver = driver
        self._schemas: dict[str, dict] = {}
        self._crs_wkt: dict[str, Optional[str]] = {}
        self.disposed = False
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def single_layer(self) -> bool:
        return self.driver in _SINGLE_LAYER_DRIVERS

    def _check_open(self) -> None:
        if self.disposed:
            raise DataStoreError(f"Datastore {self.path} has been disposed")

    def _fiona_schema(self, compiled: CompiledSchema) -> dict:
        property_types = _SHAPEFILE_PROPERTY_TYPES if self.driver == SHAPEFILE_DRIVER else _PROPERTY_TYPES
        properties = {}
        for name, declared_type in compiled.fields():
            if name == GEOMETRY_ATTRIBUTE_KEY:
                continue
            fiona_type = property_types.get(declared_type)
            if fiona_type is None:
                raise DataStoreError(f"Unsupported attribute type {declared_type} of {name} in schema {compiled.name}")
            properties[name] = fiona_type
        return {"geometry": compiled.geometry_type.value, "properties": properties}

    def _open_kwargs(self, schema_name: str) -> dict:
        kwargs = {"driver": self.driver, "schema": self._schemas[schema_name]}
        if not self.single_layer:
            kwargs["layer"] = schema_name
        crs_wkt = self._crs_wkt.get(schema_name)
        if crs_wkt:
            kwargs["crs_wkt"] = crs_wkt
        return kwargs

    def _drop(self, schema_name: str) -> None:
        if not self.path.exists():
            return
        if self.single_layer:
            fiona.remove(str(self.path), driver=self.driver)
        elif schema_name in fiona.listlayers(str(self.path)):
            fiona.remove(str(self.path), driver=self.driver, layer=schema_name)

    def register_schema(self, compiled: CompiledSchema, crs: Any = None) -> None:
        """
        Create the feature type of a compiled schema, dropping and recreating it when present.

        Args:
            compiled: Compiled schema, its name becomes the layer name
            crs: Destination CRS, attached only when the schema carries a srid

        Raises:
            DataStoreError: If the store is disposed, the name does not match a single layer
                store or the underlying driver fails
        """
        self._check_open()
        if self.single_layer and compiled.name != self.path.stem:
            raise DataStoreError(
                f"Schema name {compiled.name} does not match single layer datastore {self.path.name}")

        if compiled.name in self._schemas:
            logger.info(f"Schema {compiled.name} already present in {self.path.name}, dropping and recreating it")

        schema = self._fiona_schema(compiled)
        crs_wkt = None
        if crs is not None and compiled.has_srid:
            crs_wkt = to_crs(crs).to_wkt()

        self._schemas[compiled.name] = schema
        self._crs_wkt[compiled.name] = crs_wkt
        try:
            self._drop(compiled.name)
            with fiona.open(str(self.path), "w", **self._open_kwargs(compiled.name)):
                pass
        except (FionaError, OSError) as e:
            del self._schemas[compiled.name]
            del self._crs_wkt[compiled.name]
            raise DataStoreError(f"Unable to create schema {compiled.name} in {self.path}: {e}") from e
        logger.debug(f"Registered schema {compiled.name} in {self.path}")

    def schema_names(self) -> list[str]:
        return list(self._schemas)

    @contextmanager
    def feature_writer(self, schema_name: str) -> Iterator[FeatureWriter]:
        """
        Open a row writer for a registered schema, replacing features written before.

        Raises:
            SchemaNotFoundError: If the schema has not been registered on this store
        """
        self._check_open()
        if schema_name not in self._schemas:
            raise SchemaNotFoundError(schema_name, self.schema_names())

        self._drop(schema_name)
        with fiona.open(str(self.path), "w", **self._open_kwargs(schema_name)) as collection:
            yield FeatureWriter(
                collection,
                list(self._schemas[schema_name]["properties"]),
                convert_booleans=self.driver == SHAPEFILE_DRIVER)

    def dispose(self) -> None:
        """Release the store, it cannot be used afterwards."""
        if self.disposed:
            return
        self._schemas.clear()
        self._crs_wkt.clear()
        self.disposed = True
        logger.debug(f"Disposed datastore {self.path}")

    def __repr__(self) -> str:
        return f"FionaDataStore({self.path}, {self.driver}, disposed={self.disposed})"


class DataStoreRegistry:
    """
    Cache of open datastores, at most one per key.

    Usable as context manager, ``reset`` is called on exit.

    Example:
        with DataStoreRegistry() as registry:
            store = registry.open(DataStoreKey(Node), target.path)
    """

    def __init__(self):
        self._stores: dict[DataStoreKey, FionaDataStore] = {}
        self._claimed: dict[tuple[Path, str], DataStoreKey] = {}

    def open(self, key: DataStoreKey, path: Union[str, Path]) -> FionaDataStore:
        """
        Datastore for key, created at path (driver chosen by extension) when not yet present.

        Raises:
            DataStoreError: If no datastore can be created for the path
        """
        existing = self._stores.get(key)
        if existing is not None:
            logger.info(f"Datastore for {key} already exists at {existing.path}, reusing it instead of {path}")
            return existing

        path = Path(path)
        store = FionaDataStore(path, driver_for(path.suffix))
        self._stores[key] = store
        logger.debug(f"Created datastore for {key} at {path} ({store.driver})")
        return store

    def get(self, key: DataStoreKey) -> Optional[FionaDataStore]:
        return self._stores.get(key)

    def claim(self, key: DataStoreKey, path: Union[str, Path], schema_name: str) -> None:
        """
        Reserve a schema of an output file for one write until the next reset.

        Raises:
            DataStoreError: If the schema was already written since the last reset, writing it
                again would replace the earlier rows
        """
        target = (Path(path), schema_name)
        previous = self._claimed.get(target)
        if previous is not None:
            raise DataStoreError(
                f"Schema {schema_name} in {target[0]} already written for {previous}, refusing to overwrite it for {key}")
        self._claimed[target] = key

    def reset(self) -> None:
        """
        Dispose every datastore and clear the registry.

        Raises:
            DataStoreError: If any store failed to dispose, after all others were disposed
        """
        failures = []
        for key, store in self._stores.items():
            try:
                store.dispose()
            except (DataStoreError, OSError) as e:
                failures.append(f"{key}: {e}")
        count = len(self._stores)
        self._stores.clear()
        self._claimed.clear()
        logger.debug(f"Reset datastore registry, disposed {count} datastore(s)")
        if failures:
            raise DataStoreError(f"Failed to dispose datastore(s): {'; '.join(failures)}")

    def __contains__(self, key: DataStoreKey) -> bool:
        return key in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def __enter__(self) -> "DataStoreRegistry":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.reset()
