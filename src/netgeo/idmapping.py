"""
Id mapping for persisted entities.

Each exported entity carries a ``mapped_id`` column, and every reference to another entity
(a link's nodes, a connectoid's zones, ...) is persisted through the mapper of the referenced
type. Which identifier is used is configurable per export via ``IdMapperType``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .domain.enums import IdMapperType

IdMapper = Callable[[Any], Optional[str]]


def _internal_id(entity: Any) -> Optional[str]:
    return str(entity.id)


def _xml_id(entity: Any) -> Optional[str]:
    return entity.xml_id


def _external_id(entity: Any) -> Optional[str]:
    return entity.external_id


_MAPPERS: dict[IdMapperType, IdMapper] = {
    IdMapperType.ID: _internal_id,
    IdMapperType.XML: _xml_id,
    IdMapperType.EXTERNAL: _external_id,
}


def create_id_mapper(mapper_type: IdMapperType) -> IdMapper:
    """Id mapping function for the given strategy."""
    try:
        return _MAPPERS[IdMapperType(mapper_type)]
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unsupported id mapper type: {mapper_type}") from e


@dataclass(frozen=True)
class NetworkIdMapper:
    """Id mappers for physical network entities."""
    id_mapper_type: IdMapperType
    node: IdMapper
    link: IdMapper
    link_segment: IdMapper
    link_segment_type: IdMapper
    mode: IdMapper

    @classmethod
    def create(cls, id_mapper_type: IdMapperType) -> "NetworkIdMapper":
        mapper = create_id_mapper(id_mapper_type)
        return cls(id_mapper_type, mapper, mapper, mapper, mapper, mapper)


@dataclass(frozen=True)
class ZoningIdMapper:
    """Id mappers for zones and connectoids."""
    id_mapper_type: IdMapperType
    zone: IdMapper
    connectoid: IdMapper

    @classmethod
    def create(cls, id_mapper_type: IdMapperType) -> "ZoningIdMapper":
        mapper = create_id_mapper(id_mapper_type)
        return cls(id_mapper_type, mapper, mapper)


@dataclass(frozen=True)
class VirtualNetworkIdMapper:
    """Id mappers for connectoid edges and segments."""
    id_mapper_type: IdMapperType
    connectoid_edge: IdMapper
    connectoid_segment: IdMapper

    @classmethod
    def create(cls, id_mapper_type: IdMapperType) -> "VirtualNetworkIdMapper":
        mapper = create_id_mapper(id_mapper_type)
        return cls(id_mapper_type, mapper, mapper)


@dataclass(frozen=True)
class ServiceNetworkIdMapper:
    """Id mappers for service nodes, legs and leg segments."""
    id_mapper_type: IdMapperType
    service_node: IdMapper
    service_leg: IdMapper
    service_leg_segment: IdMapper

    @classmethod
    def create(cls, id_mapper_type: IdMapperType) -> "ServiceNetworkIdMapper":
        mapper = create_id_mapper(id_mapper_type)
        return cls(id_mapper_type, mapper, mapper, mapper)


@dataclass(frozen=True)
class RoutedServicesIdMapper:
    """Id mapper for routed services."""
    id_mapper_type: IdMapperType
    routed_service: IdMapper

    @classmethod
    def create(cls, id_mapper_type: IdMapperType) -> "RoutedServicesIdMapper":
        mapper = create_id_mapper(id_mapper_type)
        return cls(id_mapper_type, mapper)
