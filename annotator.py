from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from constants import DOMAIN_PADDING_RATIO, FALLBACK_DOMAIN, FLAT_SERIES_PADDING
from thresholds import Parameter, to_parameter


def as_number(value: Any) -> Optional[float]:
    """Numeric value or None. Missing, null, NaN, infinity, bool and text are all absent."""
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class Reading:
    time: str
    values: Mapping[Parameter, Any] = field(default_factory=dict)
    # Computed upstream for the parameter the series was queried for.
    is_violation: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Reading":
        values = {p: record[p.value] for p in Parameter if p.value in record}
        return cls(
            time=str(record.get("time", "")),
            values=values,
            is_violation=bool(record.get("is_violation") or False),
        )

    def value_for(self, parameter: Parameter) -> Optional[float]:
        return as_number(self.values.get(parameter))


@dataclass(frozen=True)
class AnnotatedPoint:
    time: str
    value: Optional[float]
    is_violation: bool = False


class Domain(NamedTuple):
    lower: int
    upper: int


@dataclass(frozen=True)
class ExtremaPair:
    min_point: Optional[AnnotatedPoint] = None
    max_point: Optional[AnnotatedPoint] = None
    points: Tuple[AnnotatedPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)


def project(
    readings: Iterable[Reading], parameter: Union[Parameter, str]
) -> Tuple[AnnotatedPoint, ...]:
    """Strip readings down to one parameter, keeping order and gaps."""
    key = to_parameter(parameter)
    return tuple(
        AnnotatedPoint(time=r.time, value=r.value_for(key), is_violation=r.is_violation)
        for r in readings
    )


def _defined_values(points: Iterable[AnnotatedPoint]) -> list:
    return [v for v in (as_number(p.value) for p in points) if v is not None]


def domain(points: Sequence[AnnotatedPoint]) -> Domain:
    """
    Value-axis range covering every defined point with 10% padding on each
    side. Lower bound is floored and upper bound ceiled so rounding never
    clips a point. A flat series gets a fixed padding instead.
    """
    values = _defined_values(points)
    if not values:
        return Domain(*FALLBACK_DOMAIN)
    min_value, max_value = min(values), max(values)
    value_range = max_value - min_value
    padding = value_range * DOMAIN_PADDING_RATIO if value_range > 0 else FLAT_SERIES_PADDING
    return Domain(math.floor(min_value - padding), math.ceil(max_value + padding))


def extrema(points: Sequence[AnnotatedPoint]) -> ExtremaPair:
    """First-occurring minimum and maximum points over defined values."""
    min_idx: Optional[int] = None
    max_idx: Optional[int] = None
    min_value = max_value = None
    for idx, point in enumerate(points):
        value = as_number(point.value)
        if value is None:
            continue
        # strict comparisons keep the first occurrence on ties
        if min_value is None or value < min_value:
            min_idx, min_value = idx, value
        if max_value is None or value > max_value:
            max_idx, max_value = idx, value
    if min_idx is None:
        return ExtremaPair()
    min_point, max_point = points[min_idx], points[max_idx]
    if min_idx == max_idx:
        return ExtremaPair(min_point=min_point, max_point=max_point, points=(min_point,))
    return ExtremaPair(min_point=min_point, max_point=max_point, points=(min_point, max_point))


@dataclass(frozen=True)
class AnnotatedSeries:
    parameter: Parameter
    points: Tuple[AnnotatedPoint, ...]
    domain: Domain
    extrema: ExtremaPair

    @property
    def violations(self) -> Tuple[AnnotatedPoint, ...]:
        return tuple(p for p in self.points if p.is_violation and p.value is not None)

    def __len__(self) -> int:
        return len(self.points)


def annotate(readings: Iterable[Reading], parameter: Union[Parameter, str]) -> AnnotatedSeries:
    """Run project, domain and extrema once and freeze the results together."""
    key = to_parameter(parameter)
    points = project(readings, key)
    return AnnotatedSeries(
        parameter=key, points=points, domain=domain(points), extrema=extrema(points)
    )
