from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import streamlit as st

from annotator import annotate
from api_client import (
    ApiError,
    ChartData,
    NoDataFileError,
    check_health,
    fetch_alerts,
    fetch_chart_data,
    fetch_machines,
    fetch_metrics,
)
from charts import build_parameter_figure
from constants import ALERT_REFRESH_SECONDS, DEFAULT_PARAMETER, LOG_LEVEL
from forms import (
    render_parameter_select,
    render_retrain_button,
    render_threshold_inputs,
    render_upload_form,
)
from thresholds import Parameter, ThresholdStore
from utils.metrics import machine_metric_cards
from utils.selection import (
    resolve_machine,
    resolve_parameter,
    served_parameters,
    visible_alerts,
)

logger = logging.getLogger(__name__)


@st.cache_data(ttl=ALERT_REFRESH_SECONDS, show_spinner=False)
def _cached_alerts() -> List[Dict[str, Any]]:
    return fetch_alerts()


@st.cache_data(ttl=ALERT_REFRESH_SECONDS, show_spinner=False)
def _cached_metrics() -> Optional[Dict[str, Any]]:
    return fetch_metrics()


@st.cache_data(show_spinner=False)
def _cached_chart_data(machine: str, parameter: str) -> ChartData:
    return fetch_chart_data(machine, parameter)


def _init_session_state() -> None:
    if "threshold_store" not in st.session_state:
        st.session_state["threshold_store"] = ThresholdStore()
    st.session_state.setdefault("selected_machine", "")
    st.session_state.setdefault("selected_parameter", Parameter(DEFAULT_PARAMETER))
    st.session_state.setdefault("dismissed_alerts", set())
    st.session_state.setdefault("after_upload", False)


def _on_new_data() -> None:
    # Server data changed: drop every cached response and reselect the machine
    st.cache_data.clear()
    st.session_state["after_upload"] = True
    st.session_state["dismissed_alerts"] = set()


def _render_alerts(alerts: List[Dict[str, Any]]) -> None:
    shown = visible_alerts(alerts, st.session_state["dismissed_alerts"])
    if not shown:
        return
    st.subheader("Active Alerts")
    for alert in shown:
        col_text, col_btn = st.columns([12, 1])
        body = (
            f"**{alert.get('machine')}**: {alert.get('parameter')} out of range  \n"
            f"Value: **{alert.get('value')}** | Standard Specification: "
            f"**{alert.get('threshold')}** | Time: **{alert.get('time')}**"
        )
        with col_text:
            if alert.get("severity") == "high":
                st.error(body)
            else:
                st.warning(body)
        with col_btn:
            if st.button("✕", key=f"dismiss_{alert.get('id')}"):
                st.session_state["dismissed_alerts"].add(alert.get("id"))
                st.rerun()


def _render_metrics(metrics: Optional[Dict[str, Any]], machine: str) -> None:
    cards = machine_metric_cards(metrics, machine)
    for col, (title, value) in zip(st.columns(len(cards)), cards):
        with col:
            st.metric(title, value)
            st.caption(machine or "No Machine")


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - [%(name)s] - %(levelname)s - %(message)s",
    )
    st.set_page_config(page_title="Die-Casting Machine Monitor", page_icon="🏭", layout="wide")
    st.title("🏭 Die-Casting Machine Monitor")
    st.caption("LSTM-powered machine monitor: readings, specification limits and alerts.")

    _init_session_state()
    store: ThresholdStore = st.session_state["threshold_store"]

    connected = check_health()
    col_status, col_retrain = st.columns([4, 1])
    with col_status:
        if connected:
            st.success("API Connected")
        else:
            st.error("API Disconnected")
    with col_retrain:
        trained = render_retrain_button(disabled=not connected)
    if trained is not None and trained.success:
        _on_new_data()

    uploaded = render_upload_form()
    if uploaded is not None and uploaded.success:
        _on_new_data()

    if not connected:
        st.info("Connecting to server...")
        return

    try:
        machines = fetch_machines()
    except NoDataFileError as e:
        st.info(str(e))
        return
    except ApiError as e:
        logger.error("Machine list unavailable: %s", e)
        st.error(str(e))
        return

    machine = resolve_machine(
        machines,
        st.session_state["selected_machine"],
        after_upload=st.session_state["after_upload"],
    )
    st.session_state["after_upload"] = False
    if not machine:
        st.info("No machines available.")
        return

    _render_alerts(_cached_alerts())

    col_machine, col_param = st.columns(2)
    with col_machine:
        machine = st.selectbox("Machine", options=machines, index=machines.index(machine))
    st.session_state["selected_machine"] = machine
    _render_metrics(_cached_metrics(), machine)

    current: Parameter = st.session_state["selected_parameter"]
    chart = _cached_chart_data(machine, current.value)
    known = [c for c in chart.feature_columns if c in {p.value for p in Parameter}]
    resolved = resolve_parameter(known, current.value)
    if resolved != current.value:
        logger.info("Parameter %s not served for %s, switching to %s", current.value, machine, resolved)
        st.session_state["selected_parameter"] = Parameter(resolved)
        st.rerun()

    with col_param:
        parameter = render_parameter_select(served_parameters(known), current)
    if parameter != current:
        st.session_state["selected_parameter"] = parameter
        st.rerun()

    render_threshold_inputs(store, parameter)

    series = annotate(chart.readings, parameter)
    if not len(series):
        st.info("No readings for this machine and parameter.")
    fig = build_parameter_figure(series, store.get(parameter))
    st.plotly_chart(fig, use_container_width=True)


if __name__ == "__main__":
    main()
