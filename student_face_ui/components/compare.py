"""Student comparison component."""

import streamlit as st

from .. import ui_config as config
from ..flows import submit_comparison
from ..state import CompareState, Phase, get_screen_state
from ..utils.camera import frame_source, live_camera
from ..utils.detector import get_detector
from ..utils.ui import request_details

SCREEN_KEY = "compare"


def compare_student_ui(api_url: str) -> None:
    """UI for comparing a live camera photo against a registered student.

    Args:
        api_url: Base URL for the API
    """
    st.subheader("Comparar Estudiante")

    state = get_screen_state(SCREEN_KEY, CompareState)
    detector = get_detector(config.DETECTOR_BACKEND)

    st.write("Foto:")
    camera = live_camera("comparar_camara", detector)
    if camera is not None and state.phase == Phase.IDLE:
        state.phase = Phase.CAMERA_ACTIVE

    with st.form("comparar_estudiante"):
        estudiante_id = st.text_input("ID del Estudiante:", key="comparar_estudiante_id")
        submitted = st.form_submit_button("Comparar Estudiante", width="stretch")

    if submitted:
        state.set_estudiante_id(estudiante_id.strip())
        with st.spinner("Comparando caras..."):
            submit_comparison(state, frame_source(camera), detector, st.error, api_url)
        if state.photo is not None:
            request_details(
                f"{api_url}/{config.COMPARE_ENDPOINT}",
                {"estudiante_id": state.estudiante_id},
                state.photo,
            )

    if state.resultado:
        st.info(state.resultado)
