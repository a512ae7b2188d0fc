from __future__ import annotations

from typing import Optional, Sequence

import streamlit as st

from api_client import UploadResult, train_model, upload_file
from thresholds import Parameter, ThresholdStore


def _bound_text(value) -> str:
    return "" if value is None else str(value)


def render_parameter_select(options: Sequence[Parameter], current: Parameter) -> Parameter:
    """Dropdown of the parameters the server serves for this machine."""
    if not options:
        st.selectbox("Parameter", options=["No features available"], disabled=True)
        return current
    index = list(options).index(current) if current in options else 0
    return st.selectbox(
        "Parameter",
        options=list(options),
        index=index,
        format_func=lambda p: p.label,
    )


def render_threshold_inputs(store: ThresholdStore, parameter: Parameter) -> None:
    """Lower/upper limit inputs for the selected parameter only."""
    current = store.get(parameter)
    col1, col2 = st.columns(2)
    with col1:
        lower_txt = st.text_input(
            "Lower Std Spec",
            value=_bound_text(current.lower),
            key=f"lower_{parameter.value}",
        )
    with col2:
        upper_txt = st.text_input(
            "Upper Std Spec",
            value=_bound_text(current.upper),
            key=f"upper_{parameter.value}",
        )
    # Half-typed or non-numeric text is ignored by the store
    store.set(parameter, "lower", lower_txt)
    store.set(parameter, "upper", upper_txt)


def render_upload_form() -> Optional[UploadResult]:
    st.subheader("Data Management")
    with st.form("upload_form", clear_on_submit=True):
        uploaded = st.file_uploader("Data file", type=["csv", "xlsx", "xls"])
        submitted = st.form_submit_button("Upload & Train")
        if submitted:
            if uploaded is None:
                st.warning("Please select a file first")
                return None
            with st.spinner("Uploading & Training Model..."):
                result = upload_file(uploaded.name, uploaded.getvalue(), auto_train=True)
            if result.success:
                st.success(result.message)
            else:
                st.error(result.message)
            return result
    return None


def render_retrain_button(disabled: bool = False) -> Optional[UploadResult]:
    if st.button("Force Retrain", disabled=disabled, key="force_retrain"):
        with st.spinner("Training model..."):
            result = train_model()
        if result.success:
            st.success(result.message)
        else:
            st.error(result.message)
        return result
    return None
