"""
Type definitions for the netgeo export engine.

This module provides the immutable value types shared between schema compilation,
datastore management and row writing, together with the exception hierarchy used
throughout the package.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from .domain.enums import GeometryType

T = TypeVar("T")

# delimiter separating an attribute name from its type within the schema string
FEATURE_KEY_VALUE_DELIMITER = ":"

# delimiter separating attribute entries within the schema string
FEATURE_DELIMITER = ","

# prefix of the srid addendum appended to the geometry entry
SRID_PREFIX = "srid="


@dataclass(frozen=True)
class CompiledSchema:
    """Flat schema specification consumed by a datastore to create a feature type.

    The field spec is positional, e.g. ``mapped_id:String,id:Long,*geom:Point:srid=4326``.
    A ``srid`` of None signals that no spatial reference identifier could be attached.
    """
    name: str
    field_spec: str
    geometry_type: GeometryType
    srid: Optional[str] = None

    @property
    def has_srid(self) -> bool:
        return self.srid is not None

    def fields(self) -> list[tuple[str, str]]:
        """Parse the field spec back into ordered (name, type) pairs, srid addendum removed."""
        result = []
        for entry in self.field_spec.split(FEATURE_DELIMITER):
            parts = entry.split(FEATURE_KEY_VALUE_DELIMITER)
            if len(parts) < 2:
                raise ValueError(f"Malformed schema entry '{entry}' in schema {self.name}")
            result.append((parts[0], parts[1]))
        return result


@dataclass(frozen=True)
class DataStoreKey:
    """Identity of a datastore in the registry.

    Entities with one fixed geometry shape use the entity type only, entities persisted per
    geometry shape (zones) add the geometry type. The scope distinguishes layer or mode
    specific outputs of the same entity type.
    """
    entity_type: type
    geometry_type: Optional[GeometryType] = None
    scope: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.entity_type.__name__]
        if self.geometry_type is not None:
            parts.append(self.geometry_type.value)
        if self.scope:
            parts.append(self.scope)
        return "/".join(parts)


@dataclass
class GeometryBucket(Generic[T]):
    """Geometry homogeneous subset of an entity collection."""
    geometry_type: GeometryType
    members: list[T] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class OutputTarget:
    """Schema name and file path that belong together for one persisted feature class."""
    schema_name: str
    path: Any


# Exception hierarchy
class GeoIoError(Exception):
    """Base exception for netgeo export operations."""
    pass


class FeatureContextError(GeoIoError):
    """Feature context missing, inconsistent or not matching the entity being written."""
    pass


class ModeShortNameError(FeatureContextError):
    """No attribute short name within the width budget could be derived for a mode."""
    pass


class UnsupportedGeometryError(FeatureContextError):
    """Geometry shape that cannot be persisted as a feature class."""
    pass


class DataStoreError(GeoIoError):
    """Error creating, accessing or disposing a datastore."""
    pass


class SchemaNotFoundError(DataStoreError):
    """Feature writer requested for a schema name the datastore does not know."""
    def __init__(self, schema_name: str, available: list[str]):
        self.schema_name = schema_name
        self.available = available
        super().__init__(
            f"Schema '{schema_name}' not registered on datastore, available: [{','.join(available)}]")


class EntityWriteError(GeoIoError):
    """Failure persisting the entities of one entity type (or geometry bucket)."""
    def __init__(self, layer_log_prefix: str, entity_type: type, message: str):
        self.layer_log_prefix = layer_log_prefix
        self.entity_type = entity_type
        prefix = f"{layer_log_prefix} " if layer_log_prefix else ""
        super().__init__(f"{prefix}Unable to persist entities for {entity_type.__name__}: {message}")
