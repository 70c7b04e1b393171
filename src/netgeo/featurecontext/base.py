"""
Entity to feature mapping.

An ``EntityFeatureContext`` declares, for one entity type, the ordered list of attributes that
become the columns of its feature class. Each ``AttributeDescriptor`` pairs a column name and
schema type tag with a pure extractor function. The geometry attribute is always named
``*geom`` and always last, which the compiled schema string relies on.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..domain.enums import GeometryType
from ..types import FeatureContextError

T = TypeVar("T")

# name of the default geometry attribute, the leading * marks it as default geometry
GEOMETRY_ATTRIBUTE_KEY = "*geom"

# schema type tags of scalar attributes
STRING = "String"
LONG = "Long"
INTEGER = "Integer"
DOUBLE = "Double"
BOOLEAN = "Boolean"

SCALAR_TYPES = frozenset({STRING, LONG, INTEGER, DOUBLE, BOOLEAN})
GEOMETRY_TYPES = frozenset(geometry_type.value for geometry_type in GeometryType)


@dataclass(frozen=True)
class AttributeDescriptor(Generic[T]):
    """One named, typed output column with the function extracting its value from an entity."""
    name: str
    declared_type: str
    extractor: Callable[[T], Any]

    @property
    def is_geometry(self) -> bool:
        return self.name == GEOMETRY_ATTRIBUTE_KEY

    def extract(self, entity: T) -> Any:
        return self.extractor(entity)


def attribute(name: str, declared_type: str, extractor: Callable[[Any], Any]) -> AttributeDescriptor:
    """Shorthand for a scalar attribute descriptor."""
    return AttributeDescriptor(name, declared_type, extractor)


def geometry_attribute(geometry_type: GeometryType, extractor: Callable[[Any], Any]) -> AttributeDescriptor:
    """Shorthand for the geometry attribute descriptor."""
    return AttributeDescriptor(GEOMETRY_ATTRIBUTE_KEY, GeometryType(geometry_type).value, extractor)


class EntityFeatureContext(Generic[T]):
    """
    Ordered attribute declaration for one entity type.

    Invariants, checked on construction:
    - attribute names are unique and non-blank
    - scalar attributes use a known type tag
    - exactly one geometry attribute exists, it is the last one and its type is a geometry type

    Raises:
        FeatureContextError: If any of the invariants is violated
    """

    def __init__(self, entity_type: type, attributes: list[AttributeDescriptor[T]]):
        self._entity_type = entity_type
        self._attributes = tuple(attributes)
        self._validate()

    def _validate(self) -> None:
        name = self._entity_type.__name__
        if not self._attributes:
            raise FeatureContextError(f"Feature context for {name} has no attributes")

        seen = set()
        for descriptor in self._attributes:
            if not descriptor.name or not descriptor.name.strip():
                raise FeatureContextError(f"Feature context for {name} has an attribute without name")
            if descriptor.name in seen:
                raise FeatureContextError(f"Duplicate attribute '{descriptor.name}' in feature context for {name}")
            seen.add(descriptor.name)
            if not descriptor.is_geometry and descriptor.declared_type not in SCALAR_TYPES:
                raise FeatureContextError(
                    f"Attribute '{descriptor.name}' of {name} has unsupported type '{descriptor.declared_type}'")

        geometry_attributes = [d for d in self._attributes if d.is_geometry]
        if len(geometry_attributes) != 1:
            raise FeatureContextError(
                f"Feature context for {name} requires exactly one {GEOMETRY_ATTRIBUTE_KEY} attribute, "
                f"found {len(geometry_attributes)}")
        if not self._attributes[-1].is_geometry:
            raise FeatureContextError(
                f"Geometry attribute of {name} must be the last attribute, found '{self._attributes[-1].name}'")
        if geometry_attributes[0].declared_type not in GEOMETRY_TYPES:
            raise FeatureContextError(
                f"Geometry attribute of {name} has unsupported geometry type '{geometry_attributes[0].declared_type}'")

    @property
    def entity_type(self) -> type:
        return self._entity_type

    @property
    def attributes(self) -> tuple[AttributeDescriptor[T], ...]:
        return self._attributes

    @property
    def geometry_attribute_name(self) -> str:
        return GEOMETRY_ATTRIBUTE_KEY

    @property
    def geometry_attribute(self) -> AttributeDescriptor[T]:
        return self._attributes[-1]

    @property
    def geometry_type(self) -> GeometryType:
        return GeometryType(self.geometry_attribute.declared_type)

    @property
    def attribute_names(self) -> list[str]:
        return [descriptor.name for descriptor in self._attributes]

    def with_geometry_type(self, geometry_type: GeometryType) -> "EntityFeatureContext[T]":
        """Copy of this context whose geometry attribute declares another geometry type."""
        geometry = self.geometry_attribute
        return EntityFeatureContext(
            self._entity_type,
            list(self._attributes[:-1]) + [geometry_attribute(geometry_type, geometry.extractor)])

    def find(self, name: str) -> Optional[AttributeDescriptor[T]]:
        for descriptor in self._attributes:
            if descriptor.name == name:
                return descriptor
        return None

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"EntityFeatureContext({self._entity_type.__name__}, {self.attribute_names})"
