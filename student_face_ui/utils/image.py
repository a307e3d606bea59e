"""Image processing utilities for the student screens."""

import io
from typing import List, Tuple

import cv2
import numpy as np
from PIL import Image, ImageDraw

from .detector import Detection

# Light blue boxes over detected faces
BOX_COLOR = (0, 191, 255)


def bgr_to_pil(frame: np.ndarray) -> Image.Image:
    """Convert an OpenCV BGR frame to an RGB PIL Image."""
    return Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))


def pil_to_bgr(image: Image.Image) -> np.ndarray:
    """Convert a PIL Image to an OpenCV BGR ndarray."""
    return cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2BGR)


def pil_to_bytes(image: Image.Image, format: str = "JPEG") -> bytes:
    """Convert PIL Image to bytes.

    Args:
        image: PIL Image object
        format: Image format (default: JPEG)

    Returns:
        Image bytes
    """
    buffer = io.BytesIO()
    image.save(buffer, format=format)
    return buffer.getvalue()


def resize_still(frame: np.ndarray, size: int) -> Image.Image:
    """Squeeze a whole frame into a ``size`` x ``size`` still.

    The frame is stretched, not cropped, so the still shows exactly what
    the preview showed.
    """
    return bgr_to_pil(frame).resize((size, size), Image.BILINEAR)


def draw_bbox_with_label(
    image: Image.Image,
    detection: Detection,
    label: str
) -> Image.Image:
    """Draw bounding box with label on image.

    Args:
        image: PIL Image object
        detection: Face box in image coordinates
        label: Text to display above box

    Returns:
        PIL Image with box and label
    """
    image_copy = image.copy()
    draw = ImageDraw.Draw(image_copy)

    x, y, w, h = detection.x, detection.y, detection.w, detection.h

    draw.rectangle([(x, y), (x + w, y + h)], outline=BOX_COLOR, width=3)

    # Label sits above the box, or inside it when the face touches the top edge
    text_w, text_h = draw.textbbox((0, 0), label)[2:4]
    top = y - text_h - 4 if y - text_h - 4 >= 0 else y
    draw.rectangle([(x, top), (x + text_w + 4, top + text_h + 4)], fill=BOX_COLOR)
    draw.text((x + 2, top + 2), label, fill=(0, 0, 0))

    return image_copy


def create_annotated_image(
    frame: np.ndarray,
    detections: List[Detection],
) -> Tuple[Image.Image, int]:
    """Draw every detection over a copy of the frame.

    The overlay always has the frame's own size, so boxes line up with the
    video regardless of the resolution the camera actually delivered.

    Returns:
        Tuple of (annotated image, number of faces drawn)
    """
    annotated = bgr_to_pil(frame)
    for detection in detections:
        annotated = draw_bbox_with_label(annotated, detection, f"{detection.score:.2f}")
    return annotated, len(detections)
