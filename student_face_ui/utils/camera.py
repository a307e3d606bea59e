"""
Browser camera for the capture screens.

Video comes from the user's browser over WebRTC (``getUserMedia`` prompt on
the client side). Each frame runs through :class:`FaceOverlayProcessor`,
which draws the detected faces for the live view and keeps the last raw
frame for the capture flow. The WebRTC component owns the stream: it stops
and releases the camera when the user stops it or the screen stops
rendering it.
"""
import logging
import threading
from typing import Callable, List, Optional, Tuple

import av
import numpy as np
from streamlit_webrtc import VideoProcessorBase, WebRtcMode, webrtc_streamer

from .. import ui_config as config
from .detector import Detection, FaceDetector, LIVE_OPTIONS
from .image import create_annotated_image, pil_to_bgr

logger = logging.getLogger(__name__)


class FaceOverlayProcessor(VideoProcessorBase):
    """Per-frame face detection on the browser stream.

    ``recv`` runs on streamlit-webrtc's worker thread; the latest frame is
    read from the script thread, hence the lock.
    """

    def __init__(self, detector: FaceDetector):
        self.detector = detector
        self.lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None
        self._detections: List[Detection] = []

    def process(self, image: np.ndarray) -> np.ndarray:
        """Detect faces on a BGR frame and return it with boxes drawn."""
        try:
            detections = self.detector.detect(image, LIVE_OPTIONS)
        except Exception:
            logger.exception("Face detection failed on live frame")
            detections = []

        with self.lock:
            self._frame = image.copy()
            self._detections = detections

        if not detections:
            return image
        return pil_to_bgr(create_annotated_image(image, detections)[0])

    def recv(self, frame: av.VideoFrame) -> av.VideoFrame:
        image = frame.to_ndarray(format="bgr24")
        return av.VideoFrame.from_ndarray(self.process(image), format="bgr24")

    def latest(self) -> Tuple[Optional[np.ndarray], List[Detection]]:
        with self.lock:
            if self._frame is None:
                return None, []
            return self._frame.copy(), list(self._detections)

    def latest_frame(self) -> Optional[np.ndarray]:
        return self.latest()[0]


def live_camera(key: str, detector: FaceDetector) -> Optional[FaceOverlayProcessor]:
    """Render the browser camera with the face overlay.

    Returns:
        The running processor, or None until the user has started the camera
    """
    ctx = webrtc_streamer(
        key=key,
        mode=WebRtcMode.SENDRECV,
        rtc_configuration=config.RTC_CONFIGURATION,
        media_stream_constraints={
            "video": {"width": config.CAMERA_WIDTH, "height": config.CAMERA_HEIGHT},
            "audio": False,
        },
        video_processor_factory=lambda: FaceOverlayProcessor(detector),
        async_processing=True,
    )
    if not ctx.state.playing:
        return None
    return ctx.video_processor


def frame_source(processor: Optional[FaceOverlayProcessor]) -> Callable[[], Optional[np.ndarray]]:
    """Frame getter for the capture flow; yields None while the camera is off."""
    def latest() -> Optional[np.ndarray]:
        if processor is None:
            return None
        return processor.latest_frame()
    return latest
