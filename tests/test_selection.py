from thresholds import Parameter
from utils.selection import (
    resolve_machine,
    resolve_parameter,
    served_parameters,
    visible_alerts,
)


def test_resolve_machine_keeps_valid_selection():
    assert resolve_machine(["M1", "M2"], "M2") == "M2"


def test_resolve_machine_falls_back_to_first():
    assert resolve_machine(["M1", "M2"], "") == "M1"
    assert resolve_machine(["M1", "M2"], "M9") == "M1"
    assert resolve_machine(["M1", "M2"], "M2", after_upload=True) == "M1"
    assert resolve_machine([], "M1") == ""


def test_resolve_parameter():
    assert resolve_parameter(["metal_temperature", "tilting_angle"], "tilting_angle") == "tilting_angle"
    assert resolve_parameter(["tilting_speed"], "metal_temperature") == "tilting_speed"
    assert resolve_parameter([], "metal_temperature") == "metal_temperature"


def test_visible_alerts_hides_dismissed_in_order():
    alerts = [{"id": 1}, {"id": 2}, {"id": 3}]
    assert visible_alerts(alerts, {2}) == [{"id": 1}, {"id": 3}]
    assert visible_alerts(alerts, set()) == alerts


def test_served_parameters_limits_dropdown_to_server_columns():
    columns = ["top_die_temperature", "cycle_id", "metal_temperature"]
    assert served_parameters(columns) == [
        Parameter.METAL_TEMPERATURE,
        Parameter.TOP_DIE_TEMPERATURE,
    ]


def test_served_parameters_empty_when_server_reports_none():
    assert served_parameters([]) == []
    assert served_parameters(["cycle_id"]) == []
