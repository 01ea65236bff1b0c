"""
Model loading for the face detection system.

Responsibility:
    Locate the YuNet model file, select the compute backend/target,
    and return a ready-to-infer cv2.FaceDetectorYN object.

Non-goals:
    - No inference or frame-level logic.
    - No automatic model downloading.
    - No fallback to alternative models.

Failure behavior:
    - A missing model file raises ConfigurationError with the exact
      missing path.
    - An OpenCV failure while creating the detector (unreadable model,
      backend not compiled in) raises ConfigurationError.
"""

import logging
from pathlib import Path

import cv2

from yunet_face.backends import backend_id, parse_backend, parse_target, target_id
from yunet_face.config import DetectionConfig, ModelConfig, get_project_root
from yunet_face.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_model_path(config: ModelConfig) -> Path:
    """Resolve the model path against the project root if relative."""
    path = Path(config.model_path)
    if not path.is_absolute():
        path = get_project_root() / path
    return path


def load_model(model: ModelConfig, detection: DetectionConfig) -> "cv2.FaceDetectorYN":
    """Create the YuNet face detector.

    Args:
        model: ModelConfig with file path, backend, target and input size.
        detection: DetectionConfig with thresholds and top_k.

    Returns:
        A configured cv2.FaceDetectorYN ready for detect().

    Raises:
        ConfigurationError: If the model file is missing or OpenCV
                            rejects the model/backend/target.
    """
    path = resolve_model_path(model)

    # Fail fast with the resolved path
    if not path.is_file():
        raise ConfigurationError(
            f"Model file not found.\n"
            f"  Expected: {path}\n"
            f"  Download face_detection_yunet_2023mar.onnx and place it at the\n"
            f"  path above, or update 'model.model_path' in your config."
        )

    backend = parse_backend(model.backend)
    target = parse_target(model.target)

    logger.info(
        "Loading model: %s (backend=%s, target=%s, input_size=%s)",
        path, backend.value, target.value, model.input_size,
    )
    try:
        detector = cv2.FaceDetectorYN.create(
            str(path),
            "",
            tuple(model.input_size),
            detection.confidence_threshold,
            detection.nms_threshold,
            detection.top_k,
            backend_id(backend),
            target_id(target),
        )
    except cv2.error as e:
        raise ConfigurationError(
            f"Failed to create face detector from {path} "
            f"(backend={backend.value}, target={target.value}).\n"
            f"  OpenCV error: {e}"
        ) from e

    logger.info("Model loaded successfully.")
    return detector
