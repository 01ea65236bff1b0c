"""
Input handling for the face detection pipeline.

Responsibility:
    Load still images and open camera/video capture sources. A source
    string selects exactly one input kind:
        - Digit string            → camera device index
        - Image file extension    → still image
        - Anything else           → video file path

Non-goals:
    - No detection, drawing, or output writing.
    - No retry on bad sources.
    - No frame resizing (the detector adapts to the source size).

Robustness:
    - Validates the source at open time, naming the device or path.
    - Releases the capture handle on every exit path.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from yunet_face.errors import ImageReadError, SourceError

logger = logging.getLogger(__name__)

# Image extensions recognized by this handler
_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp"}


def is_image_source(source: Union[str, int]) -> bool:
    """Return True if source names a still image rather than a stream."""
    source_str = str(source).strip()
    if source_str.isdigit():
        return False
    return Path(source_str).suffix.lower() in _IMAGE_EXTENSIONS


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Read a still image as a BGR array.

    Raises:
        ImageReadError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise ImageReadError(f"Input image not found: '{path}'.")

    image = cv2.imread(str(path))
    if image is None:
        raise ImageReadError(
            f"Could not decode image '{path}'. "
            f"Supported formats: {sorted(_IMAGE_EXTENSIONS)}."
        )

    logger.info("Loaded image %s (%dx%d)", path, image.shape[1], image.shape[0])
    return image


class VideoSource:
    """Camera or video-file capture with guaranteed release.

    Usage:
        with VideoSource("0") as source:
            width, height = source.frame_size
            frame = source.read()
            while frame is not None:
                ...
                frame = source.read()

    read() returns None once the stream is exhausted or the device
    fails; that is the normal end-of-stream signal.
    """

    def __init__(self, source: Union[str, int]) -> None:
        """Open the capture.

        Args:
            source: Camera device index (int or digit string) or video path.

        Raises:
            SourceError: If the source cannot be opened.
        """
        source_str = str(source).strip()
        if source_str.isdigit():
            self._source: Union[str, int] = int(source_str)
            self._description = f"camera device {self._source}"
        else:
            self._source = source_str
            self._description = f"video file '{source_str}'"

        self._cap: Optional[cv2.VideoCapture] = cv2.VideoCapture(self._source)
        if not self._cap.isOpened():
            self.release()
            raise SourceError(
                f"Failed to open {self._description}. "
                f"Ensure the source exists and is accessible."
            )

        logger.info("Opened %s", self._description)

    @property
    def description(self) -> str:
        """Human-readable name of the source (for logs and errors)."""
        return self._description

    @property
    def frame_size(self) -> Tuple[int, int]:
        """Native (width, height) reported by the capture."""
        width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return width, height

    def read(self) -> Optional[np.ndarray]:
        """Return the next BGR frame, or None at end of stream."""
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame

    def release(self) -> None:
        """Release the capture handle. Safe to call more than once."""
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("VideoCapture released: %s", self._description)

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
