"""Per-screen form state for the student screens.

Each screen owns one state struct that lives in ``st.session_state`` and is
passed explicitly to the capture and submit operations in :mod:`flows`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple, TypeVar

import streamlit as st

T = TypeVar("T")


class Phase(str, Enum):
    IDLE = "idle"
    CAMERA_ACTIVE = "camera_active"
    PHOTO_CAPTURED = "photo_captured"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class PhotoSource(str, Enum):
    CAMERA = "camera"
    FILE = "file"


@dataclass
class Photo:
    """A photo ready to be posted as the ``foto`` multipart field."""

    filename: str
    data: bytes
    content_type: str = "image/jpeg"

    def as_upload(self) -> Tuple[str, bytes, str]:
        return (self.filename, self.data, self.content_type)

    @classmethod
    def from_upload(cls, uploaded) -> "Photo":
        """Wrap a Streamlit ``UploadedFile`` without touching its bytes."""
        return cls(
            filename=uploaded.name,
            data=uploaded.getvalue(),
            content_type=uploaded.type or "application/octet-stream",
        )


@dataclass
class CompareState:
    estudiante_id: str = ""
    photo: Optional[Photo] = None
    resultado: Optional[str] = None
    phase: Phase = Phase.IDLE

    def set_estudiante_id(self, estudiante_id: str) -> None:
        # The photo filename embeds the id, so a new id needs a new photo
        if estudiante_id != self.estudiante_id:
            self.photo = None
        self.estudiante_id = estudiante_id


@dataclass
class RegisterState:
    nombre: str = ""
    apellido: str = ""
    correo: str = ""
    numero_matricula: str = ""
    photo: Optional[Photo] = None
    photo_source: PhotoSource = PhotoSource.FILE
    status_message: Optional[str] = None
    phase: Phase = Phase.IDLE

    def use_source(self, source: PhotoSource) -> None:
        if source != self.photo_source:
            self.photo = None
            self.photo_source = source
        self.phase = Phase.CAMERA_ACTIVE if source == PhotoSource.CAMERA else Phase.IDLE

    def fields(self) -> dict:
        return {
            "nombre": self.nombre,
            "apellido": self.apellido,
            "correo": self.correo,
            "numero_matricula": self.numero_matricula,
        }


# ---------- Streamlit session helpers ----------

_STATE_PREFIX = "screen_state::"


def get_screen_state(key: str, factory: Callable[[], T]) -> T:
    """Return the state struct for a screen, creating it on first use."""
    session_key = _STATE_PREFIX + key
    if session_key not in st.session_state:
        st.session_state[session_key] = factory()
    return st.session_state[session_key]
