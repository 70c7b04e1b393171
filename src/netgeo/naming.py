"""
Output naming.

The schema name and output file of a feature class are composed from, left to right, the
layer prefix, an optional sub key (e.g. a mode), the base file name and an optional geometry
suffix. The same ``OutputPathNamer.resolve`` result is used for creating the datastore, its
schema and the feature writer, so the names cannot drift apart.
"""

from pathlib import Path
from typing import Optional, Union

from .domain.enums import GeometryType
from .types import OutputTarget

DEFAULT_LAYER_PREFIX = "layer"
DEFAULT_MODE_PREFIX = "mode"


class OutputPathNamer:
    """Deterministic schema name and path composition."""

    def __init__(self, separator: str = "_"):
        if not separator:
            raise ValueError("Separator cannot be empty")
        self.separator = separator

    def layer_prefix(self, layer_id: Union[str, int]) -> str:
        """Prefix of layer scoped outputs, e.g. ``layer_0``."""
        return self.separator.join([DEFAULT_LAYER_PREFIX, self._component(layer_id, "layer id")])

    def mode_sub_key(self, mode_id: Union[str, int]) -> str:
        """Sub key of mode scoped outputs, e.g. ``mode_bus``."""
        return self.separator.join([DEFAULT_MODE_PREFIX, self._component(mode_id, "mode id")])

    @staticmethod
    def _component(value: Optional[Union[str, int]], description: str) -> str:
        if value is None or not str(value).strip():
            raise ValueError(f"Blank {description} in output name")
        return str(value)

    def schema_name(
        self,
        base_name: str,
        layer_prefix: Optional[str] = None,
        sub_key: Optional[str] = None,
        geometry_type: Optional[GeometryType] = None,
    ) -> str:
        """
        Compose the schema name, e.g. ``layer_0_mode_1_planit_service``.

        Raises:
            ValueError: If the base name, or any provided component, is blank
        """
        parts = []
        if layer_prefix is not None:
            parts.append(self._component(layer_prefix, "layer prefix"))
        if sub_key is not None:
            parts.append(self._component(sub_key, "sub key"))
        parts.append(self._component(base_name, "base name"))
        if geometry_type is not None:
            parts.append(GeometryType(geometry_type).suffix)
        return self.separator.join(parts)

    def resolve(
        self,
        output_directory: Union[str, Path],
        extension: str,
        base_name: str,
        layer_prefix: Optional[str] = None,
        sub_key: Optional[str] = None,
        geometry_type: Optional[GeometryType] = None,
    ) -> OutputTarget:
        """Schema name and the file path derived from it, ``<output_directory>/<schema name><extension>``."""
        name = self.schema_name(base_name, layer_prefix, sub_key, geometry_type)
        extension = self._component(extension, "extension")
        if not extension.startswith("."):
            extension = f".{extension}"
        return OutputTarget(schema_name=name, path=Path(output_directory) / f"{name}{extension}")
