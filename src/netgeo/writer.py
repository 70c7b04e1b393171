"""
Entity row writing.

``EntityWriter`` persists a collection of entities into a datastore: it registers the compiled
schema, opens a feature writer on the schema name and writes one row per entity, taking each
attribute value from the feature context. The geometry passes through the CRS transform.
"""

import logging
from typing import Any, Iterable, Optional

from .crs import GeometryTransform, apply_transform
from .datastore import FionaDataStore
from .featurecontext.base import EntityFeatureContext
from .types import CompiledSchema, EntityWriteError, FeatureContextError

logger = logging.getLogger(__name__)


class EntityWriter:
    """Writes entities of one type (or geometry bucket) to a datastore."""

    def __init__(self, destination_crs: Any = None):
        self.destination_crs = destination_crs

    def write(
        self,
        store: FionaDataStore,
        compiled: CompiledSchema,
        context: EntityFeatureContext,
        entities: Iterable[Any],
        transform: Optional[GeometryTransform] = None,
        layer_log_prefix: str = "",
    ) -> int:
        """
        Write one row per entity.

        Args:
            store: Datastore to write to
            compiled: Schema compiled from context, registered on the store before writing
            context: Feature context declaring the attributes
            entities: Entities to persist, all of the context's entity type
            transform: Geometry transform to the destination CRS, None for identity
            layer_log_prefix: Prefix identifying the layer in messages

        Returns:
            Number of rows written

        Raises:
            EntityWriteError: If the schema cannot be registered or any row fails; rows written
                before the failure remain in the output
        """
        entity_type = context.entity_type
        scalar_attributes = context.attributes[:-1]
        geometry_attribute = context.geometry_attribute
        try:
            store.register_schema(compiled, crs=self.destination_crs)
            with store.feature_writer(compiled.name) as feature_writer:
                for entity in entities:
                    if not isinstance(entity, entity_type):
                        raise FeatureContextError(
                            f"Feature context for {entity_type.__name__} cannot write {type(entity).__name__}")
                    properties = {descriptor.name: descriptor.extract(entity) for descriptor in scalar_attributes}
                    geometry = apply_transform(geometry_attribute.extract(entity), transform)
                    feature_writer.write(properties, geometry)
                count = feature_writer.count
        except EntityWriteError:
            raise
        except Exception as e:
            raise EntityWriteError(layer_log_prefix, entity_type, str(e)) from e

        logger.info(f"{layer_log_prefix} Persisted {count} {entity_type.__name__} feature(s) to {compiled.name}".strip())
        return count
