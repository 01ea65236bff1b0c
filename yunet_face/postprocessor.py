"""
Postprocessing for the face detection pipeline.

Responsibility:
    Decode the raw YuNet output rows into a DetectionTable. This is the
    only module that knows the column layout; raw indices never leave it.

Non-goals:
    - No thresholding, NMS or sorting (the model already applied them).
    - No drawing, saving, or display logic.
    - No model loading or inference.

Hard-coded:
    - YuNet output layout: (N, 15) float32, each row is
      [x, y, w, h, x_re, y_re, x_le, y_le, x_nt, y_nt, x_rcm, y_rcm,
       x_lcm, y_lcm, score], in absolute pixels. The model returns None
      when no face is found.
"""

from typing import List, Optional

import numpy as np

from yunet_face.detection import NUM_LANDMARKS, DetectionRecord, DetectionTable
from yunet_face.errors import InferenceError

_BOX_COLUMNS = slice(0, 4)
_LANDMARK_OFFSET = 4
_SCORE_COLUMN = 14
_NUM_COLUMNS = 15


def decode(raw: Optional[np.ndarray]) -> DetectionTable:
    """Decode raw YuNet output into a DetectionTable.

    Args:
        raw: Array returned by FaceDetectorYN.detect(), shape (N, 15),
             or None when no faces were found.

    Returns:
        A tuple of DetectionRecord objects in model order. Empty tuple
        if there are no rows.

    Raises:
        InferenceError: If the array does not have the expected layout
                        or a row contains NaN or infinite values.
    """
    if raw is None:
        return ()

    raw = np.asarray(raw, dtype=np.float32)
    if raw.size == 0:
        return ()

    if raw.ndim != 2 or raw.shape[1] < _NUM_COLUMNS:
        raise InferenceError(
            f"Unexpected detector output shape {raw.shape}; "
            f"expected (N, {_NUM_COLUMNS})."
        )

    records: List[DetectionRecord] = []
    for idx, row in enumerate(raw):
        if not np.isfinite(row[:_NUM_COLUMNS]).all():
            raise InferenceError(
                f"Detector output row {idx} contains non-finite values: "
                f"{row[:_NUM_COLUMNS].tolist()}"
            )

        x, y, w, h = (int(v) for v in row[_BOX_COLUMNS])

        landmarks = tuple(
            (int(row[_LANDMARK_OFFSET + 2 * j]), int(row[_LANDMARK_OFFSET + 2 * j + 1]))
            for j in range(NUM_LANDMARKS)
        )

        # Keep noisy rows inside the record invariants
        confidence = min(max(float(row[_SCORE_COLUMN]), 0.0), 1.0)

        records.append(DetectionRecord(
            x=x,
            y=y,
            width=max(w, 0),
            height=max(h, 0),
            confidence=confidence,
            landmarks=landmarks,
        ))

    return tuple(records)
