from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Parameter(str, Enum):
    METAL_TEMPERATURE = "metal_temperature"
    SOLIDIFICATION_TIME = "solidification_time"
    TILTING_ANGLE = "tilting_angle"
    TILTING_SPEED = "tilting_speed"
    TOP_DIE_TEMPERATURE = "top_die_temperature"

    @property
    def label(self) -> str:
        return PARAMETER_LABELS[self]


PARAMETER_LABELS: Dict[Parameter, str] = {
    Parameter.METAL_TEMPERATURE: "Metal Temperature (°C)",
    Parameter.SOLIDIFICATION_TIME: "Solidification Time (sec)",
    Parameter.TILTING_ANGLE: "Tilting Angle (°)",
    Parameter.TILTING_SPEED: "Tilting Speed (rpm)",
    Parameter.TOP_DIE_TEMPERATURE: "Top Die Temperature (°C)",
}


class UnknownParameter(KeyError):
    """Raised for an identifier that is not one of the monitored parameters."""


@dataclass(frozen=True)
class Thresholds:
    lower: Optional[Number] = None
    upper: Optional[Number] = None


# Standard specification limits per parameter (engineering constants).
DEFAULT_THRESHOLDS: Dict[Parameter, Thresholds] = {
    Parameter.METAL_TEMPERATURE: Thresholds(lower=710, upper=730),
    Parameter.SOLIDIFICATION_TIME: Thresholds(lower=180, upper=180),
    Parameter.TILTING_ANGLE: Thresholds(lower=90, upper=90),
    Parameter.TILTING_SPEED: Thresholds(lower=6, upper=8),
    Parameter.TOP_DIE_TEMPERATURE: Thresholds(lower=300, upper=380),
}

SIDES = ("lower", "upper")


def to_parameter(parameter: Union[Parameter, str]) -> Parameter:
    try:
        return Parameter(parameter)
    except ValueError:
        raise UnknownParameter(parameter) from None


def parse_int_input(value: object) -> Optional[int]:
    """
    Parse operator input as an integer the way a browser number field does:
    leading sign and digits are taken, anything after them is ignored
    ('725abc' -> 725, '7.9' -> 7). Returns None when nothing parses.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


class ThresholdStore:
    """Current (lower, upper) specification limits for every parameter."""

    def __init__(self, defaults: Optional[Dict[Parameter, Thresholds]] = None) -> None:
        self._defaults = dict(DEFAULT_THRESHOLDS if defaults is None else defaults)
        missing = set(Parameter) - set(self._defaults)
        if missing:
            raise ValueError(f"Missing thresholds for: {sorted(p.value for p in missing)}")
        self._thresholds: Dict[Parameter, Thresholds] = dict(self._defaults)

    def get(self, parameter: Union[Parameter, str]) -> Thresholds:
        return self._thresholds[to_parameter(parameter)]

    def set(self, parameter: Union[Parameter, str], side: str, value: object) -> bool:
        """
        Update one bound from raw operator input. Input that does not parse
        as an integer is ignored and the previous value is kept, so partial
        keystrokes never clear a limit. Returns False when the input was
        rejected.
        """
        key = to_parameter(parameter)
        if side not in SIDES:
            raise ValueError(f"Unsupported threshold side: {side!r}")
        parsed = parse_int_input(value)
        if parsed is None:
            logger.debug("Ignoring non-numeric %s threshold for %s: %r", side, key.value, value)
            return False
        self._thresholds[key] = replace(self._thresholds[key], **{side: parsed})
        return True

    def reset(self) -> None:
        self._thresholds = dict(self._defaults)
