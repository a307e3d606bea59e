import logging

import numpy as np
import pytest

from student_face_ui.utils import detector as detector_module
from student_face_ui.utils.detector import (
    CAPTURE_OPTIONS,
    Detection,
    DetectorOptions,
    FaceDetector,
    MultipleFacesDetected,
    NoFaceDetected,
    load_detector,
    require_face,
)


class FakeExtract:
    def __init__(self, faces):
        self.faces = faces
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self.faces


def _face(x, y, w, h, confidence):
    return {"face": None, "facial_area": {"x": x, "y": y, "w": w, "h": h}, "confidence": confidence}


def test_detect_rescales_to_input_size_and_maps_boxes_back():
    extract = FakeExtract([_face(65, 65, 130, 130, 0.9)])
    detector = FaceDetector("opencv", extract_faces=extract)
    image = np.zeros((480, 640, 3), dtype=np.uint8)

    detections = detector.detect(image, DetectorOptions(input_size=416, score_threshold=0.5))

    assert detections == [Detection(100, 100, 200, 200, 0.9)]
    call = extract.calls[0]
    assert call["img_path"].shape == (312, 416, 3)
    assert call["detector_backend"] == "opencv"
    assert call["enforce_detection"] is False


def test_detect_drops_faces_below_threshold():
    # DeepFace reports "no face" as the whole image with confidence 0
    extract = FakeExtract([_face(0, 0, 128, 128, 0), _face(10, 10, 40, 40, 0.4), _face(20, 20, 50, 50, 0.8)])
    detector = FaceDetector("opencv", extract_faces=extract)

    detections = detector.detect(np.zeros((128, 128, 3), dtype=np.uint8), CAPTURE_OPTIONS)

    assert [d.score for d in detections] == [0.8]
    assert detections[0].as_bbox() == {"x": 20, "y": 20, "w": 50, "h": 50}
    # Already at input size, passed through untouched
    assert extract.calls[0]["img_path"].shape == (128, 128, 3)


def test_detect_empty_image_skips_library():
    extract = FakeExtract([_face(0, 0, 1, 1, 1.0)])
    detector = FaceDetector("opencv", extract_faces=extract)

    assert detector.detect(np.zeros((0, 0, 3), dtype=np.uint8), CAPTURE_OPTIONS) == []
    assert extract.calls == []


def test_require_face_returns_first_detection():
    first = Detection(1, 2, 3, 4, 0.9)
    assert require_face([first]) is first


def test_require_face_rejects_empty():
    with pytest.raises(NoFaceDetected, match="No se encontró ninguna cara en la imagen"):
        require_face([])


def test_require_face_multiple_faces_policy(caplog):
    faces = [Detection(1, 2, 3, 4, 0.9), Detection(50, 50, 10, 10, 0.7)]

    with caplog.at_level(logging.WARNING):
        assert require_face(faces, allow_multiple=True) is faces[0]
    assert "2 faces detected" in caplog.text

    with pytest.raises(MultipleFacesDetected) as exc:
        require_face(faces, allow_multiple=False)
    assert exc.value.count == 2


def test_get_detector_caches_per_backend():
    assert detector_module.get_detector("ssd") is detector_module.get_detector("ssd")
    assert detector_module.get_detector("ssd") is not detector_module.get_detector("mtcnn")


def test_load_detector_logs_failure(monkeypatch, caplog):
    def broken(**kwargs):
        raise RuntimeError("weights missing")

    monkeypatch.setitem(detector_module._detectors, "broken", FaceDetector("broken", extract_faces=broken))

    with caplog.at_level(logging.ERROR):
        assert load_detector("broken") is False
    assert "Error loading face detector models" in caplog.text


def test_load_detector_success(monkeypatch):
    monkeypatch.setitem(detector_module._detectors, "fake", FaceDetector("fake", extract_faces=FakeExtract([])))
    assert load_detector("fake") is True
