"""
Visualization for the face detection pipeline.

Responsibility:
    Draw bounding boxes, confidence labels, facial landmarks and an
    optional FPS label onto a frame. This is a pure rendering module —
    it produces an annotated copy of the frame and performs no I/O.

Non-goals:
    - No file writing or window lifecycle management.
    - No detection or model logic.
"""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from yunet_face.detection import DetectionRecord

Color = Tuple[int, int, int]

# Hard-coded rendering constants (cosmetic internals, not user-facing)
BOX_COLOR: Color = (0, 255, 0)

# Indexed by landmark position; must follow LANDMARK_NAMES order.
LANDMARK_COLORS: Tuple[Color, ...] = (
    (255, 0, 0),    # right eye
    (0, 0, 255),    # left eye
    (0, 255, 0),    # nose tip
    (255, 0, 255),  # right mouth corner
    (0, 255, 255),  # left mouth corner
)

_FPS_ORIGIN = (0, 15)
_FPS_FONT = cv2.FONT_HERSHEY_SIMPLEX
_LABEL_FONT = cv2.FONT_HERSHEY_DUPLEX
_FONT_SCALE = 0.5
_LABEL_OFFSET = 10
_LANDMARK_RADIUS = 2
_THICKNESS = 1
# Hard edges for every primitive, set explicitly on each call
_LINE_TYPE = cv2.LINE_8


def visualize(
    image: np.ndarray,
    detections: Sequence[DetectionRecord],
    fps: Optional[float] = -1.0,
) -> np.ndarray:
    """Draw detections (and an FPS label if fps >= 0) onto a copy of image.

    Args:
        image: Input BGR image (not modified — a copy is returned).
        detections: DetectionRecord objects to render, drawn in order.
        fps: Frames per second to label; None or a negative value
             means no label.

    Returns:
        A new BGR numpy array with detections drawn.
    """
    annotated = image.copy()

    if fps is not None and fps >= 0:
        cv2.putText(
            annotated,
            f"FPS: {fps:.2f}",
            _FPS_ORIGIN,
            _FPS_FONT,
            _FONT_SCALE,
            BOX_COLOR,
            thickness=_THICKNESS,
            lineType=_LINE_TYPE,
        )

    for det in detections:
        cv2.rectangle(
            annotated,
            (det.x, det.y),
            (det.x2, det.y2),
            color=BOX_COLOR,
            thickness=_THICKNESS,
            lineType=_LINE_TYPE,
        )

        cv2.putText(
            annotated,
            f"{det.confidence:.4f}",
            (det.x + det.width // 2, det.y - _LABEL_OFFSET),
            _LABEL_FONT,
            _FONT_SCALE,
            BOX_COLOR,
            thickness=_THICKNESS,
            lineType=_LINE_TYPE,
        )

        for color, point in zip(LANDMARK_COLORS, det.landmarks):
            cv2.circle(
                annotated, point, _LANDMARK_RADIUS, color,
                thickness=cv2.FILLED, lineType=_LINE_TYPE,
            )

    return annotated


def show_image(window_name: str, image: np.ndarray, wait_ms: int) -> int:
    """Show image in a named window and wait for a key press.

    Args:
        window_name: Title of the OpenCV window.
        image: BGR image to display.
        wait_ms: Milliseconds to wait; 0 blocks until a key is pressed.

    Returns:
        The key code pressed during the wait, or -1 if none.
    """
    cv2.imshow(window_name, image)
    return cv2.waitKey(wait_ms)
