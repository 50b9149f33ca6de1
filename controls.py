from __future__ import annotations

import streamlit as st

from constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, MIN_SURFACE, ViewMode
from interaction import MatrixController

MODE_BUTTON_LABELS = {
    ViewMode.MAX: "Showing: Max Temperature ▲",
    ViewMode.MIN: "Showing: Min Temperature ▼",
}


def render_mode_toggle(controller: MatrixController) -> None:
    col_btn, col_hint = st.columns([1, 2])
    with col_btn:
        st.button(
            MODE_BUTTON_LABELS[controller.mode],
            key="toggle_mode",
            type="primary" if controller.mode is ViewMode.MAX else "secondary",
            help="Click to switch between Max and Min temperature",
            on_click=controller.toggle_mode,
        )
    with col_hint:
        st.caption("(Click button to toggle Max / Min)")


def render_surface_size_inputs() -> tuple[int, int]:
    st.sidebar.subheader("Chart size")
    width = st.sidebar.number_input(
        "Width (px)", min_value=MIN_SURFACE, max_value=4000, step=20, value=DEFAULT_WIDTH
    )
    height = st.sidebar.number_input(
        "Height (px)", min_value=MIN_SURFACE, max_value=3000, step=20, value=DEFAULT_HEIGHT
    )
    return int(width), int(height)


def render_data_source_input():
    st.sidebar.subheader("Data")
    return st.sidebar.file_uploader(
        "Daily temperature CSV",
        type=["csv"],
        help="Columns: date, max_temperature, min_temperature. Leave empty to use the bundled file.",
    )
