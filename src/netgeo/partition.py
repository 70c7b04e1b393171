"""
Geometry partitioning of entity collections.

Feature classes hold a single geometry shape. Entities whose shape is not fixed by design
(zones can be points or polygons) are split into geometry homogeneous buckets before writing.
"""

import logging
from typing import Callable, Iterable, Optional, TypeVar

from shapely.geometry import LineString, MultiLineString, MultiPoint, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry

from .domain.enums import GeometryType
from .types import GeometryBucket, UnsupportedGeometryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GEOMETRY_TYPES = {
    Point: GeometryType.POINT,
    LineString: GeometryType.LINESTRING,
    Polygon: GeometryType.POLYGON,
    MultiPoint: GeometryType.MULTIPOINT,
    MultiLineString: GeometryType.MULTILINESTRING,
    MultiPolygon: GeometryType.MULTIPOLYGON,
}


def classify_geometry(geometry: BaseGeometry) -> GeometryType:
    """
    Geometry type of a geometry by its exact class.

    Raises:
        UnsupportedGeometryError: For geometries outside GeometryType (LinearRing, collections, ...)
    """
    geometry_type = _GEOMETRY_TYPES.get(type(geometry))
    if geometry_type is None:
        raise UnsupportedGeometryError(f"Unsupported geometry type {type(geometry).__name__}")
    return geometry_type


def partition_by_geometry(
    entities: Iterable[T],
    geometry_of: Callable[[T], Optional[BaseGeometry]],
    describe: Callable[[T], str] = repr,
) -> tuple[list[GeometryBucket[T]], list[T]]:
    """
    Split entities into geometry homogeneous buckets.

    Entities without geometry are skipped and logged. Buckets are ordered by geometry type
    name, members keep the order of the input.

    Args:
        entities: Entities to partition
        geometry_of: Geometry of an entity, None when absent
        describe: Description of an entity used in the skip warning

    Returns:
        Tuple of (buckets, skipped entities)
    """
    buckets: dict[GeometryType, GeometryBucket[T]] = {}
    skipped: list[T] = []
    for entity in entities:
        geometry = geometry_of(entity)
        if geometry is None or geometry.is_empty:
            logger.warning(f"IGNORE: {describe(entity)} without geometry, not persisted")
            skipped.append(entity)
            continue
        try:
            geometry_type = classify_geometry(geometry)
        except UnsupportedGeometryError as e:
            raise UnsupportedGeometryError(f"{describe(entity)}: {e}") from e
        bucket = buckets.get(geometry_type)
        if bucket is None:
            bucket = buckets[geometry_type] = GeometryBucket(geometry_type)
        bucket.members.append(entity)

    ordered = [buckets[geometry_type] for geometry_type in sorted(buckets, key=lambda t: t.value)]
    return ordered, skipped
