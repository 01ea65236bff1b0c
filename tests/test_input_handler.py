"""
Tests for the input handling module.
"""

from unittest.mock import MagicMock, patch

import cv2
import numpy as np
import pytest

from yunet_face.errors import ImageReadError, SourceError
from yunet_face.input_handler import VideoSource, is_image_source, load_image


@pytest.mark.parametrize(
    "source,expected",
    [
        ("photo.jpg", True),
        ("dir/PHOTO.PNG", True),
        ("0", False),
        (1, False),
        ("clip.mp4", False),
        ("rtsp://camera/stream", False),
    ],
)
def test_is_image_source(source, expected):
    assert is_image_source(source) is expected


def test_load_image(tmp_path):
    """Test reading a real image from disk."""
    path = tmp_path / "frame.png"
    frame = np.full((12, 16, 3), 7, dtype=np.uint8)
    cv2.imwrite(str(path), frame)

    loaded = load_image(path)

    np.testing.assert_array_equal(loaded, frame)


def test_load_image_missing(tmp_path):
    """Test that a missing image names the path and is an IOError."""
    path = tmp_path / "missing.jpg"
    with pytest.raises(ImageReadError, match="missing.jpg"):
        load_image(path)
    with pytest.raises(IOError):
        load_image(path)


def test_load_image_undecodable(tmp_path):
    """Test that a corrupt image is reported."""
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image")
    with pytest.raises(ImageReadError, match="decode"):
        load_image(path)


def _capture(opened=True, frames=(), size=(640, 480)):
    cap = MagicMock()
    cap.isOpened.return_value = opened
    cap.get.side_effect = lambda prop: {
        cv2.CAP_PROP_FRAME_WIDTH: size[0],
        cv2.CAP_PROP_FRAME_HEIGHT: size[1],
    }[prop]
    cap.read.side_effect = [(True, f) for f in frames] + [(False, None)]
    return cap


def test_video_source_camera_index():
    """Test that digit strings open a camera device."""
    cap = _capture()
    with patch("yunet_face.input_handler.cv2.VideoCapture", return_value=cap) as ctor:
        with VideoSource("2") as source:
            assert source.frame_size == (640, 480)
            assert source.description == "camera device 2"
    ctor.assert_called_once_with(2)
    cap.release.assert_called_once()


def test_video_source_reads_until_exhausted():
    """Test that read() returns None once the stream ends."""
    frame = np.zeros((4, 4, 3), dtype=np.uint8)
    cap = _capture(frames=[frame, frame])
    with patch("yunet_face.input_handler.cv2.VideoCapture", return_value=cap):
        source = VideoSource("clip.mp4")
        assert source.read() is frame
        assert source.read() is frame
        assert source.read() is None
        source.release()
        source.release()
        assert source.read() is None
    cap.release.assert_called_once()


def test_video_source_open_failure():
    """Test that an unopenable source raises SourceError naming it."""
    cap = _capture(opened=False)
    with patch("yunet_face.input_handler.cv2.VideoCapture", return_value=cap):
        with pytest.raises(SourceError, match="camera device 3"):
            VideoSource(3)
        with pytest.raises(SourceError, match="missing.mp4"):
            VideoSource("missing.mp4")
    cap.read.assert_not_called()
