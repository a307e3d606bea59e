"""Front‑end global settings."""
import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_timeout(name: str):
    value = os.getenv(name)
    return float(value) if value else None


# URL where the student backend lives
API_URL = os.getenv("API_URL", "http://localhost:8000")
COMPARE_ENDPOINT = "api/comparar_estudiante/"
REGISTER_ENDPOINT = "api/registrar_estudiante/"
# Seconds; unset means requests waits indefinitely
API_TIMEOUT = _env_timeout("API_TIMEOUT")

# Browser camera (WebRTC); the resolution is what getUserMedia is asked for
CAMERA_WIDTH = int(os.getenv("CAMERA_WIDTH", "640"))
CAMERA_HEIGHT = int(os.getenv("CAMERA_HEIGHT", "480"))
STUN_URL = os.getenv("STUN_URL", "stun:stun.l.google.com:19302")
RTC_CONFIGURATION = {"iceServers": [{"urls": [STUN_URL]}]}

# Face detector
DETECTOR_BACKEND = os.getenv("DETECTOR_BACKEND", "opencv")
LIVE_INPUT_SIZE = int(os.getenv("LIVE_INPUT_SIZE", "416"))
LIVE_SCORE_THRESHOLD = float(os.getenv("LIVE_SCORE_THRESHOLD", "0.5"))

# Still photo sent to the backend
CAPTURE_SIZE = 128
CAPTURE_INPUT_SIZE = int(os.getenv("CAPTURE_INPUT_SIZE", "128"))
CAPTURE_SCORE_THRESHOLD = float(os.getenv("CAPTURE_SCORE_THRESHOLD", "0.5"))
ALLOW_MULTIPLE_FACES = _env_bool("ALLOW_MULTIPLE_FACES", True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
