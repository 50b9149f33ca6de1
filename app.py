from __future__ import annotations

import io
import logging
from typing import Optional

import streamlit as st

from controls import render_data_source_input, render_mode_toggle, render_surface_size_inputs
from data import DATA_PATH, load_rows
from interaction import MatrixController, SurfaceSizeStream

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@st.cache_data(show_spinner=False)
def _cached_rows(source_id: str, payload: Optional[bytes]) -> list[dict]:
    if payload is not None:
        return load_rows(io.BytesIO(payload))
    return load_rows(DATA_PATH)


def _get_controller(upload) -> tuple[MatrixController, SurfaceSizeStream]:
    # One controller per data source; a new source tears down the old subscription.
    source_id = f"upload:{upload.name}:{upload.size}" if upload is not None else f"file:{DATA_PATH}"
    state = st.session_state.get("matrix")
    if state is not None and state["source"] == source_id:
        return state["controller"], state["sizes"]
    if state is not None:
        state["controller"].unmount()

    controller = MatrixController()
    sizes = SurfaceSizeStream()
    controller.mount(sizes)
    payload = upload.getvalue() if upload is not None else None
    with st.spinner("Loading data…"):
        controller.load(lambda: _cached_rows(source_id, payload))
    st.session_state["matrix"] = {"source": source_id, "controller": controller, "sizes": sizes}
    return controller, sizes


def main() -> None:
    st.set_page_config(page_title="Hong Kong Monthly Temperature", page_icon="🌡️", layout="wide")
    st.title("Hong Kong Monthly Temperature")

    upload = render_data_source_input()
    width, height = render_surface_size_inputs()
    controller, sizes = _get_controller(upload)

    if controller.error:
        st.error(f"Error: {controller.error}")
        return

    render_mode_toggle(controller)
    sizes.publish(width, height)

    if controller.figure is None:
        st.info("Loading data…")
        return
    st.plotly_chart(
        controller.figure,
        use_container_width=False,
        config={"displayModeBar": False},
    )


if __name__ == "__main__":
    main()
