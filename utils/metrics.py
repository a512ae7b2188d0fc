from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

# (metrics key, card title) shown for the selected machine
METRIC_CARDS: Tuple[Tuple[str, str], ...] = (
    ("idle_time_violations", "Downtime Incidents"),
    ("temperature_violations", "Die Temp Violations"),
    ("total_strokes", "Total Strokes"),
)

MISSING = "N/A"


def machine_metric_cards(
    metrics: Optional[Dict[str, Any]], machine: str
) -> List[Tuple[str, Any]]:
    """Card titles and values for one machine. Missing figures read 'N/A'."""
    machine_metrics = (metrics or {}).get(machine)
    if not isinstance(machine_metrics, dict):
        machine_metrics = {}
    cards = []
    for key, title in METRIC_CARDS:
        value = machine_metrics.get(key)
        cards.append((title, MISSING if value is None else value))
    return cards
