"""Freeze a camera frame into the fixed-size JPEG the backend expects."""

import logging

import numpy as np

from .. import ui_config as config
from ..state import Photo
from .detector import CAPTURE_OPTIONS, FaceDetector, require_face
from .image import pil_to_bgr, pil_to_bytes, resize_still

logger = logging.getLogger(__name__)


def comparison_filename(estudiante_id: str) -> str:
    return f"comparacion_{estudiante_id}.jpg"


def registration_filename(nombre: str, apellido: str) -> str:
    return f"{nombre}_{apellido}.jpg"


def capture_photo(
    frame: np.ndarray,
    filename: str,
    detector: FaceDetector,
    size: int = config.CAPTURE_SIZE,
    allow_multiple: bool = config.ALLOW_MULTIPLE_FACES,
) -> Photo:
    """Resize ``frame`` to ``size`` x ``size``, check it has a face and encode it.

    Raises:
        NoFaceDetected: the still has no face; nothing is produced
        MultipleFacesDetected: several faces while ``allow_multiple`` is off
    """
    still = resize_still(frame, size)
    detections = detector.detect(pil_to_bgr(still), CAPTURE_OPTIONS)
    require_face(detections, allow_multiple=allow_multiple)

    data = pil_to_bytes(still, format="JPEG")
    logger.info("Captured %s (%dx%d, %d bytes, %d face(s))",
                filename, size, size, len(data), len(detections))
    return Photo(filename=filename, data=data, content_type="image/jpeg")
