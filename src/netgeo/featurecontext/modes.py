"""
Short names for mode specific attribute columns.

Shapefile attribute names are limited to 10 characters. Mode specific columns take the form
``<short>_<suffix>`` with suffixes of up to 4 characters, so mode short names are limited to
5 characters.
"""

from ..domain.enums import PredefinedModeType
from ..domain.network import Mode
from ..types import ModeShortNameError

MAX_SHORT_NAME_LENGTH = 5

# predefined modes whose type value already fits
_VERBATIM = frozenset({
    PredefinedModeType.CAR,
    PredefinedModeType.BUS,
    PredefinedModeType.TRAIN,
    PredefinedModeType.TRAM,
    PredefinedModeType.FERRY,
    PredefinedModeType.GOODS_VEHICLE,
    PredefinedModeType.HEAVY_GOODS_VEHICLE,
    PredefinedModeType.LARGE_HEAVY_GOODS_VEHICLE,
})

_ABBREVIATED = {
    PredefinedModeType.BICYCLE: "cycle",
    PredefinedModeType.CAR_SHARE: "crsh",
    PredefinedModeType.CAR_HIGH_OCCUPANCY: "crhov",
    PredefinedModeType.PEDESTRIAN: "pdstr",
    PredefinedModeType.MOTOR_BIKE: "mtrbk",
    PredefinedModeType.SUBWAY: "sbway",
    PredefinedModeType.LIGHTRAIL: "lrail",
}

# suffixes of the per mode link segment columns
BANNED_SUFFIX = "ban"
SPEED_SUFFIX = "spd"
CRITICAL_SPEED_SUFFIX = "spdc"


def mode_short_name(mode: Mode, mapped_id: str) -> str:
    """
    Short name (at most 5 characters) of a mode for use in attribute names.

    Predefined modes map to fixed tokens. Custom modes use their name when short enough,
    otherwise ``m<mapped id>``.

    Raises:
        ModeShortNameError: If a custom mode has neither a short enough name nor id
    """
    if mode.predefined_type in _VERBATIM:
        return mode.predefined_type.value
    if mode.predefined_type in _ABBREVIATED:
        return _ABBREVIATED[mode.predefined_type]

    if mode.name and len(mode.name) <= MAX_SHORT_NAME_LENGTH:
        return mode.name
    if mapped_id is not None and len(str(mapped_id)) < MAX_SHORT_NAME_LENGTH:
        return f"m{mapped_id}"
    raise ModeShortNameError(
        f"Unable to derive short name for custom mode (name: {mode.name}, id: {mapped_id}), "
        f"name must be shorter than {MAX_SHORT_NAME_LENGTH + 1} or id shorter than {MAX_SHORT_NAME_LENGTH} characters")


def mode_attribute_name(short_name: str, suffix: str) -> str:
    return f"{short_name}_{suffix}"
