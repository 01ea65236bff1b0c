"""
Detector — the single public API for face detection.

This module is the ONLY intended programmatic entry point for running
the model. Pipelines and consumers go through Detector; model loading
and raw-output decoding are internal.

Public contract:
    Detector.set_input_size(width, height) -> None
    Detector.infer(image: np.ndarray) -> DetectionTable

Constraints:
    - Input must be a BGR numpy array (as returned by OpenCV) whose size
      matches the configured input size.
    - The configuration is immutable; only the input size changes.
    - Thread-safety is not guaranteed. Give each worker its own Detector.

Non-goals:
    - No file reading, camera access, or I/O of any kind.
    - No visualization or output writing.
    - No tracking or temporal state.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from yunet_face.backends import parse_backend, parse_target
from yunet_face.config import AppConfig, load_config, validate, validate_input_size
from yunet_face.detection import DetectionTable
from yunet_face.errors import InferenceError
from yunet_face.model_loader import load_model
from yunet_face.postprocessor import decode

logger = logging.getLogger(__name__)


class Detector:
    """Face detector using YuNet via cv2.FaceDetectorYN.

    Usage:
        detector = Detector()                       # Uses safe defaults
        detector = Detector(config=my_config)       # Custom config
        detector.set_input_size(w, h)               # Match the image size
        faces = detector.infer(frame)               # BGR numpy array

    The constructor validates the configuration and loads the model once.
    Subsequent infer() calls reuse the loaded model.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        """Validate the configuration and load the model.

        Args:
            config: Application configuration. If None, safe defaults
                    are used (no config file required).

        Raises:
            ConfigurationError: If thresholds, backend/target or the
                                model file are invalid.
        """
        if config is None:
            config = load_config()

        validate(config)

        self._config = config
        self._input_size: Tuple[int, int] = validate_input_size(config.model.input_size)
        self._model = load_model(config.model, config.detection)

        logger.info(
            "Detector initialized (backend=%s, target=%s, "
            "confidence_threshold=%.2f, nms_threshold=%.2f, top_k=%d)",
            parse_backend(config.model.backend).value,
            parse_target(config.model.target).value,
            config.detection.confidence_threshold,
            config.detection.nms_threshold,
            config.detection.top_k,
        )

    @property
    def config(self) -> AppConfig:
        """Return the active configuration (read-only)."""
        return self._config

    @property
    def input_size(self) -> Tuple[int, int]:
        """Return the currently configured (width, height)."""
        return self._input_size

    def set_input_size(self, width: int, height: int) -> None:
        """Reconfigure the expected input resolution without reloading.

        Calling this again with the current size does nothing.

        Raises:
            ConfigurationError: If either dimension is not positive.
        """
        size = validate_input_size((width, height))
        if size == self._input_size:
            return

        self._model.setInputSize(size)
        self._input_size = size
        logger.debug("Input size set to %dx%d", *size)

    def infer(self, image: np.ndarray) -> DetectionTable:
        """Detect faces in a single BGR image.

        Args:
            image: A BGR image as a numpy array with shape (H, W, 3)
                   and dtype uint8, where (W, H) equals input_size.
                   The array is not modified.

        Returns:
            A tuple of DetectionRecord objects in the order the model
            reported them. Empty if no faces are detected.

        Raises:
            InferenceError: If the image is malformed or the model fails.
        """
        self._validate_image(image)

        try:
            _, raw = self._model.detect(image)
        except cv2.error as e:
            raise InferenceError(
                f"Face detector failed on image of shape {image.shape}: {e}"
            ) from e

        return decode(raw)

    def _validate_image(self, image: np.ndarray) -> None:
        """Validate that the input image meets the API contract.

        Raises:
            InferenceError: If the image is not an ndarray, is empty, has
                            the wrong dimensions, or the wrong size.
        """
        if not isinstance(image, np.ndarray):
            raise InferenceError(
                f"Expected image to be a numpy ndarray, "
                f"got {type(image).__name__}. "
                f"Use cv2.imread() or VideoCapture.read() to obtain frames."
            )

        if image.size == 0:
            raise InferenceError(
                "Image is empty (zero size). "
                "Ensure the input source is providing valid frames."
            )

        if image.ndim != 3:
            raise InferenceError(
                f"Expected a 3-dimensional image (H, W, C), "
                f"got {image.ndim} dimensions with shape {image.shape}. "
                f"Grayscale images must be converted to BGR first."
            )

        if image.shape[2] != 3:
            raise InferenceError(
                f"Expected 3 channels (BGR), got {image.shape[2]} channels. "
                f"Input must be a BGR image as returned by OpenCV."
            )

        height, width = image.shape[:2]
        if (width, height) != self._input_size:
            raise InferenceError(
                f"Image size {width}x{height} does not match the configured "
                f"input size {self._input_size[0]}x{self._input_size[1]}. "
                f"Call set_input_size() first."
            )
