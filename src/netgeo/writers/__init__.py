"""
Geometry writers per model.
"""

from .base import GeometryIoWriter
from .intermodal import GeometryIntermodalWriter
from .network import GeometryNetworkWriter
from .routed_services import GeometryRoutedServicesWriter
from .service_network import GeometryServiceNetworkWriter
from .zoning import GeometryZoningWriter

__all__ = [
    "GeometryIoWriter",
    "GeometryNetworkWriter",
    "GeometryZoningWriter",
    "GeometryServiceNetworkWriter",
    "GeometryRoutedServicesWriter",
    "GeometryIntermodalWriter",
]
