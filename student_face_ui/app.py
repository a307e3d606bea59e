"""
Streamlit UI for student face comparison and registration.
Run by `streamlit run streamlit_app.py`.
"""

import logging

import streamlit as st

from . import ui_config as config
from .components.compare import compare_student_ui
from .components.register import register_student_ui
from .utils.detector import load_detector

SCREENS = {
    "Comparar Estudiante": compare_student_ui,
    "Registrar Estudiante": register_student_ui,
}


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@st.cache_resource
def warm_up_detector(backend: str) -> bool:
    """Load the detector models once per server process."""
    return load_detector(backend)


def main():
    """Main application entry point."""
    configure_logging()
    st.set_page_config(page_title="Estudiantes", layout="wide")

    if "screen_selection" not in st.session_state:
        st.session_state.screen_selection = "Comparar Estudiante"

    screen = st.sidebar.radio("Pantalla", tuple(SCREENS.keys()), key="screen_selection")

    st.sidebar.write("---")
    st.sidebar.info(
        "La foto se valida con detección de caras antes de enviarse. "
        "Los recuadros sobre el video muestran las caras detectadas."
    )
    st.sidebar.caption(f"Backend: {config.API_URL}")

    if not warm_up_detector(config.DETECTOR_BACKEND):
        st.sidebar.warning("No se pudieron cargar los modelos de detección")

    SCREENS[screen](config.API_URL)
