"""
Domain Enumerations

Core enums for geometry shapes, predefined transport modes and id mapping strategies.
"""

from enum import Enum


class GeometryType(str, Enum):
    """Geometry shapes that can be persisted, one per feature class."""
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTIPOINT = "MultiPoint"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"

    @property
    def suffix(self) -> str:
        """Lower cased simple type name used to tell geometry specific outputs apart"""
        return self.value.lower()


class PredefinedModeType(str, Enum):
    """Predefined transport mode types, anything else is CUSTOM."""
    CAR = "car"
    BUS = "bus"
    TRAIN = "train"
    TRAM = "tram"
    FERRY = "ferry"
    GOODS_VEHICLE = "goods"
    HEAVY_GOODS_VEHICLE = "hgv"
    LARGE_HEAVY_GOODS_VEHICLE = "lhgv"
    BICYCLE = "bicycle"
    CAR_SHARE = "carshare"
    CAR_HIGH_OCCUPANCY = "car_hov"
    PEDESTRIAN = "pedestrian"
    MOTOR_BIKE = "motorbike"
    SUBWAY = "subway"
    LIGHTRAIL = "lightrail"
    CUSTOM = "custom"


class IdMapperType(str, Enum):
    """Which identifier of an entity is used as its persisted (mapped) id."""
    ID = "id"               # Internal id, unique per entity type
    XML = "xml"             # XML id as provided by the source
    EXTERNAL = "external"   # External id, may be absent
