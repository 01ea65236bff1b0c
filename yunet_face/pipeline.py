"""
Processing pipelines: one-shot still image and live stream.

Still image:
    Load → Configure → Infer → Report → Render → Persist? → Display? → Done

Stream:
    Open → ConfigureOnce → {Acquire → Infer → Time → Render → Display}* → Closed

Both pipelines are single-threaded and blocking. Capture handles,
video writers and windows are released on every exit path.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Union

import numpy as np

from yunet_face.config import OutputConfig
from yunet_face.detection import DetectionTable
from yunet_face.detector import Detector
from yunet_face.errors import InferenceError, SourceError
from yunet_face.input_handler import VideoSource, load_image
from yunet_face.output_handler import OutputHandler, print_report
from yunet_face.visualizer import visualize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageResult:
    """Outcome of the still-image pipeline."""

    detections: DetectionTable
    annotated: np.ndarray
    saved_to: Optional[Path] = None


@dataclass
class StreamStats:
    """Summary of a streaming run.

    Attributes:
        frames: Frames that were inferred, rendered and displayed.
        skipped: Frames dropped because inference failed.
        cancelled: True if the user stopped the stream with a key press.
    """

    frames: int = 0
    skipped: int = 0
    cancelled: bool = False


def run_image(
    detector: Detector,
    image_path: Union[str, Path],
    output_config: OutputConfig,
    stream: Optional[TextIO] = None,
) -> ImageResult:
    """Detect faces in one still image, report, and render.

    Args:
        detector: Detector whose input size is set to the image size.
        image_path: Path of the image to process.
        output_config: Save / visualize toggles.
        stream: Where the per-face report goes (stdout by default).

    Raises:
        ImageReadError: If the image cannot be read. Nothing is written.
        InferenceError: If the detector rejects the image.
        OSError: If saving was requested and the write failed.
    """
    image = load_image(image_path)

    height, width = image.shape[:2]
    detector.set_input_size(width, height)

    faces = detector.infer(image)
    print_report(faces, stream)

    annotated = visualize(image, faces)

    saved_to = None
    with OutputHandler(output_config) as output:
        if output_config.save:
            saved_to = output.save_image(annotated)
        if output_config.visualize:
            output.show_still(annotated)

    return ImageResult(detections=faces, annotated=annotated, saved_to=saved_to)


def run_stream(
    detector: Detector,
    source: Union[str, int],
    output_config: OutputConfig,
) -> StreamStats:
    """Run detection on every frame of a camera or video source.

    The loop ends normally when the source stops delivering frames or
    the user presses a key; the current frame is always fully rendered
    and displayed first. A frame that fails inference is logged and
    skipped.

    Raises:
        SourceError: If the source cannot be opened or reports no size.
    """
    stats = StreamStats()

    with VideoSource(source) as capture:
        width, height = capture.frame_size
        if width <= 0 or height <= 0:
            raise SourceError(
                f"{capture.description} reported an invalid frame size "
                f"{width}x{height}."
            )
        detector.set_input_size(width, height)
        logger.info("Streaming from %s at %dx%d", capture.description, width, height)

        with OutputHandler(output_config) as output:
            while True:
                frame = capture.read()
                if frame is None:
                    logger.info("No frames grabbed! Exiting ...")
                    break

                start = time.perf_counter()
                try:
                    faces = detector.infer(frame)
                except InferenceError as e:
                    stats.skipped += 1
                    logger.warning("Skipping frame %d: %s", stats.frames + stats.skipped, e)
                    continue
                elapsed = time.perf_counter() - start
                fps = 1.0 / elapsed if elapsed > 0 else 0.0

                annotated = visualize(frame, faces, fps)
                stats.frames += 1
                logger.debug("Frame %d: %d faces, %.2f FPS", stats.frames, len(faces), fps)

                if not output.process_frame(annotated):
                    stats.cancelled = True
                    break

    logger.info(
        "Stream finished. Frames: %d, skipped: %d, cancelled: %s.",
        stats.frames, stats.skipped, stats.cancelled,
    )
    return stats
