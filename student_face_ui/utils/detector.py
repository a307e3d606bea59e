"""
Face detection for the capture screens.

Thin wrapper over DeepFace's detector backends: frames go in, face boxes
come out. The same detector drives the live preview overlay and the gate
that every captured photo has to pass before it can be submitted.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import cv2
import numpy as np

from .. import ui_config as config

logger = logging.getLogger(__name__)

NO_FACE_MESSAGE = "No se encontró ninguna cara en la imagen"
MULTIPLE_FACES_MESSAGE = "Se encontró más de una cara en la imagen"


class NoFaceDetected(Exception):
    """The image did not contain any face above the score threshold."""

    def __init__(self, message: str = NO_FACE_MESSAGE):
        super().__init__(message)


class MultipleFacesDetected(Exception):
    """More than one face found while multiple faces are not allowed."""

    def __init__(self, count: int, message: str = MULTIPLE_FACES_MESSAGE):
        super().__init__(message)
        self.count = count


@dataclass(frozen=True)
class DetectorOptions:
    input_size: int
    score_threshold: float


LIVE_OPTIONS = DetectorOptions(config.LIVE_INPUT_SIZE, config.LIVE_SCORE_THRESHOLD)
CAPTURE_OPTIONS = DetectorOptions(config.CAPTURE_INPUT_SIZE, config.CAPTURE_SCORE_THRESHOLD)


@dataclass
class Detection:
    x: int
    y: int
    w: int
    h: int
    score: float

    def as_bbox(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


def _deepface_extract_faces(**kwargs):
    # Imported lazily: loading DeepFace pulls in the whole TensorFlow stack
    from deepface import DeepFace
    return DeepFace.extract_faces(**kwargs)


class FaceDetector:
    """Run a DeepFace detector backend over BGR images.

    Args:
        backend: DeepFace detector backend name (opencv, ssd, retinaface, ...)
        extract_faces: Callable with the ``DeepFace.extract_faces`` signature
    """

    def __init__(self, backend: str = config.DETECTOR_BACKEND,
                 extract_faces: Optional[Callable] = None):
        self.backend = backend
        self._extract_faces = extract_faces or _deepface_extract_faces

    def detect(self, image: np.ndarray, options: DetectorOptions = LIVE_OPTIONS) -> List[Detection]:
        """Return the faces found in ``image`` in its own pixel coordinates."""
        if image is None or image.size == 0:
            return []

        height, width = image.shape[:2]
        scale = options.input_size / float(max(height, width))
        if scale != 1.0:
            resized = cv2.resize(
                image,
                (max(1, int(round(width * scale))), max(1, int(round(height * scale)))),
                interpolation=cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR,
            )
        else:
            resized = image

        faces = self._extract_faces(
            img_path=resized,
            detector_backend=self.backend,
            enforce_detection=False,
            align=False,
        )

        detections = []
        for face in faces:
            # With enforce_detection=False DeepFace reports "no face" as the
            # whole image at confidence 0, which the threshold filters out
            score = float(face.get("confidence") or 0.0)
            if score < options.score_threshold:
                continue
            area = face.get("facial_area") or {}
            detections.append(Detection(
                x=int(round(area.get("x", 0) / scale)),
                y=int(round(area.get("y", 0) / scale)),
                w=int(round(area.get("w", 0) / scale)),
                h=int(round(area.get("h", 0) / scale)),
                score=score,
            ))
        return detections


# ---------- detector cache (load once per process) ----------
_detectors_lock = threading.Lock()
_detectors: Dict[str, FaceDetector] = {}


def get_detector(backend: str = config.DETECTOR_BACKEND) -> FaceDetector:
    """Get or create the detector for a backend, with thread-safe caching."""
    with _detectors_lock:
        if backend not in _detectors:
            _detectors[backend] = FaceDetector(backend)
        return _detectors[backend]


def load_detector(backend: str = config.DETECTOR_BACKEND) -> bool:
    """Warm up the detector models so the first frame is not slow.

    Failures are logged, not raised; detection is retried on every frame.
    """
    detector = get_detector(backend)
    blank = np.zeros((config.CAPTURE_SIZE, config.CAPTURE_SIZE, 3), dtype=np.uint8)
    try:
        detector.detect(blank, CAPTURE_OPTIONS)
    except Exception:
        logger.exception("Error loading face detector models (%s)", backend)
        return False
    logger.info("Face detector models loaded (%s)", backend)
    return True


def require_face(detections: List[Detection],
                 allow_multiple: bool = config.ALLOW_MULTIPLE_FACES) -> Detection:
    """Detection gate: return the first face or raise if the photo is unusable."""
    if not detections:
        raise NoFaceDetected()
    if len(detections) > 1:
        if not allow_multiple:
            raise MultipleFacesDetected(len(detections))
        logger.warning("%d faces detected in captured photo, submitting it whole", len(detections))
    return detections[0]
