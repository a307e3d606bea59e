import json

import numpy as np
import pytest
import requests

from student_face_ui.utils.detector import Detection


class FakeDetector:
    """Returns canned detections and remembers what it was asked."""

    def __init__(self, detections=None):
        self.detections = list(detections or [])
        self.calls = []

    def detect(self, image, options=None):
        self.calls.append((image.shape, options))
        return list(self.detections)


def make_response(status_code, payload=None, text=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.url = "http://backend.test/"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    return response


class RecordingPost:
    """Replacement for requests.post that records every call."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def __call__(self, url, data=None, files=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "data": data, "files": files, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def one_face():
    return FakeDetector([Detection(10, 12, 60, 70, 0.93)])


@pytest.fixture
def no_face():
    return FakeDetector([])


@pytest.fixture
def frame():
    # Gradient so the JPEG encoder has something to work with
    row = np.linspace(0, 255, 640, dtype=np.uint8)
    gray = np.tile(row, (480, 1))
    return np.dstack([gray, gray[:, ::-1], np.full_like(gray, 128)])


@pytest.fixture
def post(monkeypatch):
    from student_face_ui.utils import api

    recorder = RecordingPost()
    monkeypatch.setattr(api.requests, "post", recorder)
    return recorder
