"""
Configuration module for netgeo exports.
"""

from .settings import (
    Config,
    ConfigurationError,
    GeoIoWriterSettings,
    IntermodalWriterSettings,
    NetworkWriterSettings,
    OutputConfig,
    RoutedServicesWriterSettings,
    ServiceNetworkWriterSettings,
    ZoningWriterSettings,
)

__all__ = [
    'Config',
    'ConfigurationError',
    'OutputConfig',
    'GeoIoWriterSettings',
    'NetworkWriterSettings',
    'ZoningWriterSettings',
    'ServiceNetworkWriterSettings',
    'RoutedServicesWriterSettings',
    'IntermodalWriterSettings',
]
