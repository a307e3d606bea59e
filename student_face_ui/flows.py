"""
Capture and submit operations behind the two student screens.

Nothing here touches Streamlit: every operation takes the screen's state
struct and a ``notify`` callable that shows a message to the user. The
screens pass ``st.error``; tests pass a list's ``append``.
"""
import logging
import re
from typing import Callable, Optional

import numpy as np
import requests

from . import ui_config as config
from .state import CompareState, Phase, Photo, PhotoSource, RegisterState
from .utils.api import BackendError, compare_student, register_student
from .utils.capture import capture_photo, comparison_filename, registration_filename
from .utils.detector import FaceDetector, MultipleFacesDetected, NoFaceDetected

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]
FrameSource = Callable[[], Optional[np.ndarray]]

SIMILAR_MESSAGE = "Las caras son similares"
NOT_SIMILAR_MESSAGE = "Las caras no son similares"
REGISTERED_MESSAGE = "Estudiante registrado exitosamente"
CAPTURE_FAILED_MESSAGE = "No se pudo capturar la foto."
COMPARE_FAILED_MESSAGE = "Error al comparar las caras"
REGISTER_FAILED_MESSAGE = "Error al registrar el estudiante"
MISSING_ID_MESSAGE = "Por favor, proporciona el ID del estudiante."
MISSING_FILE_MESSAGE = "Por favor, selecciona una foto."

REGISTER_LABELS = {
    "nombre": "Nombre",
    "apellido": "Apellido",
    "correo": "Correo",
    "numero_matricula": "Número de Matrícula",
}

# Same shape check a browser applies to <input type="email">
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


class ValidationError(Exception):
    """A required form field is missing or malformed."""


def validate_registration(state: RegisterState) -> None:
    for name, value in state.fields().items():
        if not value.strip():
            raise ValidationError(f"Por favor, completa el campo: {REGISTER_LABELS[name]}")
    if not EMAIL_PATTERN.match(state.correo.strip()):
        raise ValidationError("Por favor, introduce un correo válido.")


def _capture(frame_source: FrameSource, filename: str, detector: FaceDetector,
             notify: Notify) -> Optional[Photo]:
    """Shared capture flow; returns None after alerting the user on failure."""
    frame = frame_source()
    if frame is None:
        logger.warning("No camera frame available for %s", filename)
        notify(CAPTURE_FAILED_MESSAGE)
        return None
    try:
        return capture_photo(frame, filename, detector,
                             allow_multiple=config.ALLOW_MULTIPLE_FACES)
    except (NoFaceDetected, MultipleFacesDetected) as e:
        logger.info("Capture of %s rejected: %s", filename, e)
        notify(str(e))
        return None
    except Exception:
        # Detector failures (models not loaded, library errors) end this capture only
        logger.exception("Face detection failed while capturing %s", filename)
        notify(CAPTURE_FAILED_MESSAGE)
        return None


def take_comparison_photo(state: CompareState, frame_source: FrameSource,
                          detector: FaceDetector, notify: Notify) -> bool:
    photo = _capture(frame_source, comparison_filename(state.estudiante_id), detector, notify)
    if photo is None:
        return False
    state.photo = photo
    state.phase = Phase.PHOTO_CAPTURED
    return True


def take_registration_photo(state: RegisterState, frame_source: FrameSource,
                            detector: FaceDetector, notify: Notify) -> bool:
    photo = _capture(frame_source, registration_filename(state.nombre, state.apellido),
                     detector, notify)
    if photo is None:
        return False
    state.photo = photo
    state.phase = Phase.PHOTO_CAPTURED
    return True


def submit_comparison(
    state: CompareState,
    frame_source: FrameSource,
    detector: FaceDetector,
    notify: Notify,
    api_url: str = config.API_URL,
) -> bool:
    """Validate, freeze the current frame and post the comparison request.

    Every comparison is made against a fresh frame, so any earlier photo is
    dropped before capturing.

    Returns:
        True when the backend answered and ``state.resultado`` was updated
    """
    if not state.estudiante_id.strip():
        notify(MISSING_ID_MESSAGE)
        return False

    state.photo = None
    if not take_comparison_photo(state, frame_source, detector, notify):
        state.phase = Phase.CAMERA_ACTIVE
        return False

    state.phase = Phase.SUBMITTING
    try:
        data = compare_student(state.estudiante_id, state.photo, api_url)
    except BackendError as e:
        state.phase = Phase.FAILED
        notify(f"Error: {e.message}")
        return False
    except (requests.RequestException, ValueError) as e:
        state.phase = Phase.FAILED
        logger.error("Comparison request failed: %s", e)
        notify(COMPARE_FAILED_MESSAGE)
        return False

    state.resultado = SIMILAR_MESSAGE if data.get("es_similar") else NOT_SIMILAR_MESSAGE
    state.phase = Phase.SUCCESS
    return True


def submit_registration(
    state: RegisterState,
    frame_source: Optional[FrameSource],
    detector: Optional[FaceDetector],
    notify: Notify,
    api_url: str = config.API_URL,
) -> bool:
    """Validate the form, make sure a photo exists and post the registration.

    ``frame_source`` and ``detector`` are only used in camera mode.

    Returns:
        True when the backend reported ``status == "success"``
    """
    try:
        validate_registration(state)
    except ValidationError as e:
        notify(str(e))
        return False

    if state.photo is None:
        if state.photo_source == PhotoSource.FILE or frame_source is None:
            notify(MISSING_FILE_MESSAGE)
            return False
        if not take_registration_photo(state, frame_source, detector, notify):
            return False

    state.phase = Phase.SUBMITTING
    try:
        data = register_student(
            state.nombre, state.apellido, state.correo, state.numero_matricula,
            state.photo, api_url,
        )
    except BackendError as e:
        state.phase = Phase.FAILED
        notify(f"Error: {e.message}")
        return False
    except (requests.RequestException, ValueError) as e:
        state.phase = Phase.FAILED
        logger.error("Registration request failed: %s", e)
        notify(REGISTER_FAILED_MESSAGE)
        return False

    if data.get("status") == "success":
        state.status_message = REGISTERED_MESSAGE
        state.phase = Phase.SUCCESS
        return True

    state.phase = Phase.FAILED
    message = data.get("message")
    notify(f"Error: {message}" if message else REGISTER_FAILED_MESSAGE)
    return False
