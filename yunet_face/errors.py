"""
Error taxonomy for the face detection system.

Every error derives from a built-in exception type as well, so callers
that already catch ValueError / OSError keep working.

    ConfigurationError  fatal, raised before any inference.
    SourceError         fatal for the run (camera/video cannot be opened).
    ImageReadError      fatal for the run (still image cannot be decoded).
    InferenceError      per-frame; streams skip the frame, still images abort.

End-of-stream is not an error and has no exception type.
"""


class FaceDetectionError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(FaceDetectionError, ValueError):
    """Invalid thresholds, unsupported backend/target, or missing model."""


class SourceError(FaceDetectionError, OSError):
    """A camera device or video file could not be opened."""


class ImageReadError(FaceDetectionError, OSError):
    """A still image could not be opened or decoded."""


class InferenceError(FaceDetectionError, ValueError):
    """A frame could not be run through the detector."""
