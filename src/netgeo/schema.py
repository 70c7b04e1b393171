"""
Feature schema compilation.

Serializes an ``EntityFeatureContext`` into the flat schema string used to create feature
types, ``name1:type1,name2:type2,...,*geom:<Geometry>[:srid=<code>]``. The geometry attribute
is last, so the srid addendum is appended once to the end of the string.
"""

import logging
from typing import Any

from .crs import identifier_code
from .featurecontext.base import EntityFeatureContext
from .types import FEATURE_DELIMITER, FEATURE_KEY_VALUE_DELIMITER, SRID_PREFIX, CompiledSchema

logger = logging.getLogger(__name__)


def compile_field_spec(context: EntityFeatureContext) -> str:
    """Positional ``name:type`` entries of the context, without srid addendum."""
    return FEATURE_DELIMITER.join(
        f"{descriptor.name}{FEATURE_KEY_VALUE_DELIMITER}{descriptor.declared_type}"
        for descriptor in context.attributes)


def compile_schema(context: EntityFeatureContext, name: str, destination_crs: Any) -> CompiledSchema:
    """
    Compile a feature context into a named schema.

    Args:
        context: Feature context of the entity type (or geometry bucket)
        name: Schema name, supplied by the output path namer
        destination_crs: CRS the geometries are persisted in, may be None

    Returns:
        CompiledSchema, with srid None when the CRS is absent or has no identifier; a warning
        is logged in that case and the schema carries no spatial reference identifier
    """
    if not name or not name.strip():
        raise ValueError(f"Schema name for {context.entity_type.__name__} cannot be empty")

    field_spec = compile_field_spec(context)
    srid = identifier_code(destination_crs) if destination_crs is not None else None
    if srid is None:
        logger.warning(
            f"Destination CRS {'absent' if destination_crs is None else 'has no identifier'} "
            f"for {context.entity_type.__name__} schema {name}, no spatial reference identifier attached")
    else:
        field_spec = f"{field_spec}{FEATURE_KEY_VALUE_DELIMITER}{SRID_PREFIX}{srid}"

    logger.debug(f"Compiled schema {name}: {field_spec}")
    return CompiledSchema(name=name, field_spec=field_spec, geometry_type=context.geometry_type, srid=srid)
