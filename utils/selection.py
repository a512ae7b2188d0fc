from __future__ import annotations

from typing import Any, Collection, Dict, Iterable, List, Sequence

from thresholds import Parameter


def resolve_machine(machines: Sequence[str], current: str, after_upload: bool = False) -> str:
    """
    Machine to show after the machine list is (re)fetched. A fresh upload
    always jumps to the first machine; otherwise the current one is kept
    while it still exists.
    """
    if not machines:
        return ""
    if after_upload or current not in machines:
        return machines[0]
    return current


def served_parameters(feature_columns: Iterable[str]) -> List[Parameter]:
    """Known parameters the server has data for, in dropdown order."""
    served = set(feature_columns)
    return [p for p in Parameter if p.value in served]


def resolve_parameter(feature_columns: Sequence[str], current: str) -> str:
    if feature_columns and current not in feature_columns:
        return feature_columns[0]
    return current


def visible_alerts(
    alerts: Iterable[Dict[str, Any]], dismissed_ids: Collection[Any]
) -> List[Dict[str, Any]]:
    return [a for a in alerts if a.get("id") not in dismissed_ids]
