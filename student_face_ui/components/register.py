"""Student registration component."""

import streamlit as st

from .. import ui_config as config
from ..flows import submit_registration, take_registration_photo
from ..state import Photo, PhotoSource, RegisterState, get_screen_state
from ..utils.camera import frame_source, live_camera
from ..utils.detector import get_detector
from ..utils.ui import SUPPORTED_FORMATS, request_details

SCREEN_KEY = "register"


def register_student_ui(api_url: str) -> None:
    """UI for registering a student with an uploaded file or a camera photo.

    Args:
        api_url: Base URL for the API
    """
    st.subheader("Registrar Estudiante")

    state = get_screen_state(SCREEN_KEY, RegisterState)
    detector = get_detector(config.DETECTOR_BACKEND)
    camera = None

    col_form, col_photo = st.columns([2, 1])
    with col_form:
        state.nombre = st.text_input("Nombre:", key="registro_nombre")
        state.apellido = st.text_input("Apellido:", key="registro_apellido")
        state.correo = st.text_input("Correo:", key="registro_correo")
        state.numero_matricula = st.text_input("Número de Matrícula:", key="registro_matricula")

        st.write("Foto:")
        if state.photo_source == PhotoSource.CAMERA:
            # Only this branch renders the camera component; leaving it
            # unmounts the component, which stops the browser stream
            camera = live_camera("registro_camara", detector)
            if st.button("Tomar Foto", width="stretch"):
                take_registration_photo(state, frame_source(camera), detector, st.error)
            if st.button("Elegir Archivo", width="stretch"):
                state.use_source(PhotoSource.FILE)
                st.rerun()
        else:
            uploaded = st.file_uploader("Archivo de foto", type=SUPPORTED_FORMATS, key="registro_foto")
            state.photo = Photo.from_upload(uploaded) if uploaded is not None else None
            if st.button("Usar Cámara", width="stretch"):
                state.use_source(PhotoSource.CAMERA)
                st.rerun()

        if st.button("Registrar Estudiante", type="primary", width="stretch"):
            with st.spinner("Registrando estudiante..."):
                ok = submit_registration(state, frame_source(camera), detector, st.error, api_url)
            if ok:
                st.success(state.status_message)
            request_details(f"{api_url}/{config.REGISTER_ENDPOINT}", state.fields(), state.photo)

    with col_photo:
        if state.photo is not None and state.photo_source == PhotoSource.CAMERA:
            st.image(state.photo.data, caption="Foto tomada", width=256)
