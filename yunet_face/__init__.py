"""
YuNet Face Detection — face detection with landmarks using OpenCV's YuNet.

Public API:
    - Detector: Runs the model on one image at a time.
    - DetectionRecord / DetectionTable: Decoded per-face results.
    - visualize: Renders detections onto a copy of an image.
    - run_image / run_stream: Still-image and streaming pipelines.
    - load_config / AppConfig: Layered configuration.

Usage:
    from yunet_face import Detector, visualize

    detector = Detector()
    detector.set_input_size(width, height)
    faces = detector.infer(frame)
    annotated = visualize(frame, faces)
"""

from yunet_face.backends import Backend, Target
from yunet_face.config import AppConfig, load_config
from yunet_face.detection import LANDMARK_NAMES, DetectionRecord, DetectionTable
from yunet_face.detector import Detector
from yunet_face.errors import (
    ConfigurationError,
    FaceDetectionError,
    ImageReadError,
    InferenceError,
    SourceError,
)
from yunet_face.pipeline import ImageResult, StreamStats, run_image, run_stream
from yunet_face.visualizer import visualize

__all__ = [
    "AppConfig",
    "Backend",
    "ConfigurationError",
    "DetectionRecord",
    "DetectionTable",
    "Detector",
    "FaceDetectionError",
    "ImageReadError",
    "ImageResult",
    "InferenceError",
    "LANDMARK_NAMES",
    "SourceError",
    "StreamStats",
    "Target",
    "load_config",
    "run_image",
    "run_stream",
    "visualize",
]
