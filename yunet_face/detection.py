"""
Detection data transfer objects.

This module defines DetectionRecord, the structured view of one face
returned by Detector.infer(), and DetectionTable, the per-frame sequence
of records. Records are frozen, serializable containers with no behavior
beyond data access.

Landmark order is a contract shared with the visualizer's color mapping:
right eye, left eye, nose tip, right mouth corner, left mouth corner.

Non-goals:
    - No rendering logic.
    - No file I/O.
    - No decoding of raw model output (that belongs in postprocessor).
"""

from dataclasses import dataclass
from typing import Tuple

Point = Tuple[int, int]

LANDMARK_NAMES: Tuple[str, ...] = (
    "right_eye",
    "left_eye",
    "nose_tip",
    "right_mouth_corner",
    "left_mouth_corner",
)

NUM_LANDMARKS = len(LANDMARK_NAMES)


@dataclass(frozen=True, slots=True)
class DetectionRecord:
    """A single detected face with bounding box, confidence and landmarks.

    Attributes:
        x: Top-left x coordinate (absolute pixels).
        y: Top-left y coordinate (absolute pixels).
        width: Box width in pixels (>= 0).
        height: Box height in pixels (>= 0).
        confidence: Detection confidence score in [0.0, 1.0].
        landmarks: Five (x, y) points in LANDMARK_NAMES order.

    All coordinates are in absolute pixel values relative to the
    source image dimensions.
    """

    x: int
    y: int
    width: int
    height: int
    confidence: float
    landmarks: Tuple[Point, ...]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Box size must be non-negative, got "
                f"width={self.width}, height={self.height}."
            )
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(
                f"confidence must be in [0.0, 1.0], got {self.confidence}."
            )
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(self.landmarks)}."
            )

    def to_dict(self) -> dict:
        """Return a plain dict suitable for JSON serialization."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "confidence": round(self.confidence, 4),
            "landmarks": {
                name: [px, py]
                for name, (px, py) in zip(LANDMARK_NAMES, self.landmarks)
            },
        }

    @property
    def x2(self) -> int:
        """Bottom-right x coordinate in pixels."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Bottom-right y coordinate in pixels."""
        return self.y + self.height

    @property
    def area(self) -> int:
        """Bounding box area in pixels."""
        return self.width * self.height


# Detections for one frame, in the order the model reported them.
DetectionTable = Tuple[DetectionRecord, ...]
