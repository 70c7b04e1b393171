"""
Base of the geometry writers.

Holds what all writers share: settings, output naming, CRS preparation, the datastore
registry and the write of one entity collection (compile schema, resolve output, open store,
write rows).
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

from ..config.settings import GeoIoWriterSettings
from ..crs import GeometryTransform, create_transformer
from ..datastore import DataStoreRegistry
from ..domain.enums import GeometryType
from ..featurecontext.base import EntityFeatureContext
from ..naming import OutputPathNamer
from ..schema import compile_schema
from ..types import DataStoreKey
from ..writer import EntityWriter

logger = logging.getLogger(__name__)


def layer_log_prefix(layer: Any) -> str:
    """Log prefix of a layered entity container, e.g. ``[layer: road]``."""
    return f"[layer: {layer.xml_id or layer.id}]"


class GeometryIoWriter:
    """
    Shared behaviour of the network, zoning and service writers.

    A writer either owns its registry (created and reset within ``write``) or uses one passed in
    by a parent writer, in which case the parent is responsible for resetting it.
    """

    def __init__(self, settings: GeoIoWriterSettings, registry: Optional[DataStoreRegistry] = None):
        self.settings = settings
        self.namer = OutputPathNamer()
        self._external_registry = registry
        self.destination_crs: Any = None
        self.transform: Optional[GeometryTransform] = None
        self.written: dict[str, int] = {}

    @contextmanager
    def _registry_scope(self) -> Iterator[DataStoreRegistry]:
        if self._external_registry is not None:
            yield self._external_registry
            return
        registry = DataStoreRegistry()
        try:
            yield registry
        finally:
            registry.reset()

    def _prepare_crs(self, source_crs: Any) -> None:
        """Resolve destination CRS (source CRS when not configured) and the transform towards it."""
        self.destination_crs = self.settings.destination_crs or source_crs
        if self.destination_crs is None:
            logger.warning("No source or destination CRS available, geometries persisted without CRS")
        self.transform = create_transformer(source_crs, self.destination_crs)
        if self.transform is not None:
            logger.info(f"Transforming geometries from {source_crs} to {self.destination_crs}")

    def _scope(self, layer_prefix: Optional[str], sub_key: Optional[str]) -> Optional[str]:
        parts = [part for part in (layer_prefix, sub_key) if part]
        return self.namer.separator.join(parts) if parts else None

    def _write_entities(
        self,
        registry: DataStoreRegistry,
        context: EntityFeatureContext,
        entities: Iterable[Any],
        base_name: str,
        layer_prefix: Optional[str] = None,
        sub_key: Optional[str] = None,
        geometry_type: Optional[GeometryType] = None,
        log_prefix: str = "",
    ) -> int:
        """
        Persist one entity collection (or geometry bucket).

        The output target is resolved once and used for both the datastore and the schema name.
        Writing a schema twice within one registry scope raises ``DataStoreError``.
        ``geometry_type`` is only given for entity types persisted per geometry shape, it adds
        the geometry suffix and the geometry part of the datastore key.
        """
        target = self.namer.resolve(
            self.settings.output_directory, self.settings.file_extension,
            base_name, layer_prefix, sub_key, geometry_type)
        compiled = compile_schema(context, target.schema_name, self.destination_crs)
        key = DataStoreKey(context.entity_type, geometry_type, self._scope(layer_prefix, sub_key))
        registry.claim(key, target.path, target.schema_name)
        store = registry.open(key, target.path)
        count = EntityWriter(self.destination_crs).write(
            store, compiled, context, entities, self.transform, log_prefix)
        self.written[target.schema_name] = count
        return count
