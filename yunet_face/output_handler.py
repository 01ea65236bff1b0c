"""
Output handling for the face detection pipeline.

Responsibility:
    Route results to the configured sinks: the per-face text report,
    saved images or video, and display windows. Save and display are
    independent toggles; either, neither, or both may be active.

Non-goals:
    - No detection logic.
    - No input acquisition.
    - No rendering (frames arrive already annotated).
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

import cv2
import numpy as np

from yunet_face.config import OutputConfig, get_project_root
from yunet_face.detection import DetectionRecord
from yunet_face.visualizer import show_image

logger = logging.getLogger(__name__)

IMAGE_WINDOW = "Face Detection Result"
STREAM_WINDOW = "YuNet Demo"

_IMAGE_FILENAME = "result.jpg"
_VIDEO_FILENAME = "result.avi"
_VIDEO_FPS = 20.0


def format_report(detections: Sequence[DetectionRecord]) -> List[str]:
    """Format the per-face report lines for one image."""
    lines = [f"{len(detections)} faces detected:"]
    for idx, det in enumerate(detections):
        lines.append(
            f"{idx}: x1={det.x}, y1={det.y}, w={det.width}, h={det.height}, "
            f"conf={det.confidence:.4f}"
        )
    return lines


def print_report(
    detections: Sequence[DetectionRecord],
    stream: Optional[TextIO] = None,
) -> None:
    """Print the per-face report to stream (stdout by default)."""
    stream = stream if stream is not None else sys.stdout
    for line in format_report(detections):
        print(line, file=stream)


class OutputHandler:
    """Routes annotated frames to configured output sinks.

    Still images:
        - save_image(): write the annotated image.
        - show_still(): blocking window until a key press.

    Streams:
        - process_frame(): write to video (if saving) and display
          (if visualizing). Returns False when the user pressed a key.

    Usage:
        with OutputHandler(config.output) as output:
            output.process_frame(annotated)
    """

    def __init__(self, config: OutputConfig) -> None:
        """Initialize the output handler.

        Args:
            config: Output configuration (save/visualize toggles, path).
        """
        self._config = config
        self._video_writer: Optional[cv2.VideoWriter] = None
        self._window_opened = False

        # Resolve output path
        save_path = Path(config.save_path)
        if not save_path.is_absolute():
            save_path = get_project_root() / save_path
        self._save_path = save_path

        logger.info(
            "OutputHandler initialized: save=%s, visualize=%s, save_path=%s",
            config.save, config.visualize, self._save_path,
        )

    @property
    def save_path(self) -> Path:
        """Resolved output directory."""
        return self._save_path

    def save_image(self, image: np.ndarray) -> Path:
        """Write the annotated still image and return its path.

        Raises:
            OSError: If the image could not be written.
        """
        self._save_path.mkdir(parents=True, exist_ok=True)
        output_file = self._save_path / _IMAGE_FILENAME
        if not cv2.imwrite(str(output_file), image):
            raise OSError(f"Failed to write result image: {output_file}")
        logger.info("Results saved to %s", output_file)
        return output_file

    def show_still(self, image: np.ndarray) -> None:
        """Show a still image and block until a key is pressed."""
        cv2.namedWindow(IMAGE_WINDOW, cv2.WINDOW_AUTOSIZE)
        self._window_opened = True
        show_image(IMAGE_WINDOW, image, 0)

    def process_frame(self, image: np.ndarray) -> bool:
        """Send one annotated stream frame to the active sinks.

        Returns:
            True to continue processing, False if the user pressed a key
            during the per-frame wait.
        """
        if self._config.save:
            self._write_video_frame(image)

        if self._config.visualize:
            self._window_opened = True
            key = show_image(STREAM_WINDOW, image, 1)
            if key >= 0:
                logger.info("Quit signal received (key press).")
                return False

        return True

    def _write_video_frame(self, image: np.ndarray) -> None:
        """Write an annotated frame, opening the writer on first use."""
        if self._video_writer is None:
            self._save_path.mkdir(parents=True, exist_ok=True)
            output_file = str(self._save_path / _VIDEO_FILENAME)
            h, w = image.shape[:2]
            fourcc = cv2.VideoWriter_fourcc(*"XVID")
            self._video_writer = cv2.VideoWriter(output_file, fourcc, _VIDEO_FPS, (w, h))
            logger.info("Video writer opened: %s (%dx%d)", output_file, w, h)

        self._video_writer.write(image)

    def finalize(self) -> None:
        """Release the video writer and close windows. Idempotent."""
        if self._video_writer is not None:
            self._video_writer.release()
            self._video_writer = None
            logger.info("Video writer released.")

        if self._window_opened:
            cv2.destroyAllWindows()
            self._window_opened = False

    def __enter__(self) -> "OutputHandler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finalize()
