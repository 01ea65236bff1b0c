"""
Compute backend / target selection for the DNN model.

Backends and targets are closed enumerations. Human-readable names are
parsed once, at configuration time, and unknown names or unsupported
pairings fail immediately with ConfigurationError.

The numeric OpenCV constants are looked up lazily because TIM-VX and CANN
are only present in some OpenCV builds.
"""

from enum import Enum
from typing import Dict, FrozenSet

import cv2

from yunet_face.errors import ConfigurationError


class Backend(str, Enum):
    """Compute library used to execute the model."""

    OPENCV = "opencv"
    CUDA = "cuda"
    TIMVX = "timvx"
    CANN = "cann"


class Target(str, Enum):
    """Hardware device the backend runs on."""

    CPU = "cpu"
    CUDA = "cuda"
    CUDA_FP16 = "cuda_fp16"
    NPU = "npu"


_SUPPORTED_PAIRS: Dict[Backend, FrozenSet[Target]] = {
    Backend.OPENCV: frozenset({Target.CPU}),
    Backend.CUDA: frozenset({Target.CUDA, Target.CUDA_FP16}),
    Backend.TIMVX: frozenset({Target.NPU}),
    Backend.CANN: frozenset({Target.NPU}),
}

_BACKEND_CONSTANTS: Dict[Backend, str] = {
    Backend.OPENCV: "DNN_BACKEND_OPENCV",
    Backend.CUDA: "DNN_BACKEND_CUDA",
    Backend.TIMVX: "DNN_BACKEND_TIMVX",
    Backend.CANN: "DNN_BACKEND_CANN",
}

_TARGET_CONSTANTS: Dict[Target, str] = {
    Target.CPU: "DNN_TARGET_CPU",
    Target.CUDA: "DNN_TARGET_CUDA",
    Target.CUDA_FP16: "DNN_TARGET_CUDA_FP16",
    Target.NPU: "DNN_TARGET_NPU",
}


def parse_backend(name) -> Backend:
    """Parse a backend name (case-insensitive). Raises ConfigurationError."""
    if isinstance(name, Backend):
        return name
    try:
        return Backend(str(name).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Invalid model.backend: '{name}'. "
            f"Must be one of {[b.value for b in Backend]}."
        ) from None


def parse_target(name) -> Target:
    """Parse a target name (case-insensitive). Raises ConfigurationError."""
    if isinstance(name, Target):
        return name
    try:
        return Target(str(name).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Invalid model.target: '{name}'. "
            f"Must be one of {[t.value for t in Target]}."
        ) from None


def validate_pair(backend: Backend, target: Target) -> None:
    """Raise ConfigurationError if the backend cannot run on the target."""
    supported = _SUPPORTED_PAIRS[backend]
    if target not in supported:
        raise ConfigurationError(
            f"Unsupported backend/target combination: "
            f"backend='{backend.value}', target='{target.value}'. "
            f"Backend '{backend.value}' supports targets "
            f"{sorted(t.value for t in supported)}."
        )


def backend_id(backend: Backend) -> int:
    """Return OpenCV's numeric id for a backend."""
    return _lookup_dnn_constant(_BACKEND_CONSTANTS[backend], backend.value)


def target_id(target: Target) -> int:
    """Return OpenCV's numeric id for a target."""
    return _lookup_dnn_constant(_TARGET_CONSTANTS[target], target.value)


def _lookup_dnn_constant(attr: str, name: str) -> int:
    value = getattr(cv2.dnn, attr, None)
    if value is None:
        raise ConfigurationError(
            f"'{name}' is not available in this OpenCV build "
            f"(cv2.dnn.{attr} missing, OpenCV {cv2.__version__})."
        )
    return int(value)
