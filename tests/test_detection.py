"""
Tests for the detection data model.
"""

import dataclasses

import pytest

from yunet_face.detection import LANDMARK_NAMES, DetectionRecord

_LANDMARKS = ((1, 2), (3, 4), (5, 6), (7, 8), (9, 10))


def test_record_properties():
    """Test derived box properties."""
    det = DetectionRecord(x=10, y=20, width=50, height=60, confidence=0.5, landmarks=_LANDMARKS)
    assert det.x2 == 60
    assert det.y2 == 80
    assert det.area == 3000


def test_record_is_immutable():
    """Test that records cannot be modified after creation."""
    det = DetectionRecord(x=0, y=0, width=1, height=1, confidence=0.5, landmarks=_LANDMARKS)
    with pytest.raises(dataclasses.FrozenInstanceError):
        det.confidence = 0.9


@pytest.mark.parametrize(
    "kwargs,match",
    [
        ({"width": -1}, "non-negative"),
        ({"height": -5}, "non-negative"),
        ({"confidence": 1.01}, "confidence"),
        ({"confidence": -0.1}, "confidence"),
        ({"landmarks": _LANDMARKS[:4]}, "5 landmarks"),
    ],
)
def test_record_invariants(kwargs, match):
    """Test that invalid records are rejected at construction."""
    fields = dict(x=0, y=0, width=10, height=10, confidence=0.5, landmarks=_LANDMARKS)
    fields.update(kwargs)
    with pytest.raises(ValueError, match=match):
        DetectionRecord(**fields)


def test_to_dict():
    """Test JSON-friendly serialization keeps landmark order and names."""
    det = DetectionRecord(x=1, y=2, width=3, height=4, confidence=0.123456, landmarks=_LANDMARKS)
    payload = det.to_dict()
    assert payload["confidence"] == 0.1235
    assert list(payload["landmarks"]) == list(LANDMARK_NAMES)
    assert payload["landmarks"]["right_eye"] == [1, 2]
    assert payload["landmarks"]["left_mouth_corner"] == [9, 10]
