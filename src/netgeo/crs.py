"""
Coordinate reference system services.

Thin wrappers around pyproj for the two things the export needs: the identifier code of a
destination CRS (attached to the geometry column as srid) and a geometry transform from the
source CRS of the model to the destination CRS.
"""

import logging
from functools import partial
from typing import Any, Callable, Optional

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

logger = logging.getLogger(__name__)

GeometryTransform = Callable[[BaseGeometry], BaseGeometry]


def to_crs(value: Any) -> Optional[CRS]:
    """
    Parse a user supplied CRS (EPSG string, integer code, WKT or CRS instance).

    Returns:
        The parsed CRS, None when value is None or blank

    Raises:
        ValueError: If the value cannot be interpreted as a CRS
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, CRS):
        return value
    try:
        return CRS.from_user_input(value)
    except CRSError as e:
        raise ValueError(f"Invalid coordinate reference system '{value}': {e}") from e


def identifier_code(crs: Any) -> Optional[str]:
    """Authority code of the CRS (e.g. '4326'), None when absent or not identifiable."""
    parsed = to_crs(crs)
    if parsed is None:
        return None
    authority = parsed.to_authority()
    if authority is None:
        logger.debug(f"No authority identifier found for CRS {parsed.name}")
        return None
    return authority[1]


def create_transformer(source: Any, destination: Any) -> Optional[GeometryTransform]:
    """
    Create a geometry transform between two coordinate reference systems.

    Args:
        source: CRS of the geometries in the model
        destination: CRS the geometries are persisted in

    Returns:
        Callable transforming a shapely geometry, None when no transform is needed
        (either side absent or both equal)
    """
    source_crs = to_crs(source)
    destination_crs = to_crs(destination)
    if source_crs is None or destination_crs is None:
        return None
    if source_crs == destination_crs:
        return None

    transformer = Transformer.from_crs(source_crs, destination_crs, always_xy=True)
    logger.debug(f"Created geometry transform {source_crs.name} -> {destination_crs.name}")
    return partial(transform, transformer.transform)


def apply_transform(geometry: Optional[BaseGeometry],
                    geometry_transform: Optional[GeometryTransform]) -> Optional[BaseGeometry]:
    """Apply a geometry transform, None meaning identity."""
    if geometry is None or geometry_transform is None:
        return geometry
    return geometry_transform(geometry)
