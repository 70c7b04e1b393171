"""
netgeo: export transport network models to GIS feature files.
"""

__version__ = "0.1.0"
