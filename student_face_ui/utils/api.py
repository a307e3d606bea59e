"""API utilities for the student backend."""

import logging
from typing import Any, Dict, Optional

import requests

from .. import ui_config as config
from ..state import Photo

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The backend answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: requests.Response) -> str:
    """Pull the server-provided ``message`` out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return str(payload)


def api_request(
    endpoint: str,
    data: Dict[str, str],
    files: Dict[str, Any],
    api_url: str,
    timeout: Optional[float] = config.API_TIMEOUT,
) -> Dict:
    """Post a multipart form to the backend.

    A single attempt is made; duplicate submits produce duplicate calls.

    Args:
        endpoint: API endpoint path
        data: Plain form fields
        files: Multipart file fields as (filename, bytes, content type)
        api_url: Base URL for the API
        timeout: Seconds to wait for the backend, None to wait indefinitely

    Returns:
        Decoded JSON response

    Raises:
        BackendError: on non-2xx responses
        requests.RequestException: on transport errors
        ValueError: when a success response is not a JSON object
    """
    url = f"{api_url.rstrip('/')}/{endpoint}"
    logger.info("POST %s fields=%s files=%s", url, list(data.keys()), list(files.keys()))
    logger.debug("Form data: %s", data)

    response = requests.post(url, data=data, files=files, timeout=timeout)
    if not response.ok:
        message = _error_message(response)
        logger.error("Backend error %s from %s: %s", response.status_code, url, message)
        raise BackendError(message, response.status_code)

    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"Unexpected response from {url}: {payload!r}")
    return payload


def compare_student(estudiante_id: str, photo: Photo, api_url: str = config.API_URL) -> Dict:
    """Compare a captured photo against the stored photo of a student.

    Returns:
        Backend payload, ``{"es_similar": bool}`` on success
    """
    return api_request(
        config.COMPARE_ENDPOINT,
        {"estudiante_id": estudiante_id},
        {"foto": photo.as_upload()},
        api_url,
    )


def register_student(
    nombre: str,
    apellido: str,
    correo: str,
    numero_matricula: str,
    photo: Photo,
    api_url: str = config.API_URL,
) -> Dict:
    """Register a new student with their photo.

    Returns:
        Backend payload, ``{"status": "success"}`` or ``{"status": ..., "message": ...}``
    """
    return api_request(
        config.REGISTER_ENDPOINT,
        {
            "nombre": nombre,
            "apellido": apellido,
            "correo": correo,
            "numero_matricula": numero_matricula,
        },
        {"foto": photo.as_upload()},
        api_url,
    )
