"""
Configuration management for the YuNet face detection system.

Provides a layered configuration system with the following precedence
(highest to lowest):

    CLI arguments > Environment variables > YAML config file > Defaults

Design constraints:
    - The system MUST run with zero configuration (safe defaults only).
    - Missing or invalid values fail early and loudly.
    - No detection logic, I/O, or model loading belongs here.

Non-goals:
    - No dynamic reloading.
    - No database-backed or remote configuration.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

from yunet_face.backends import (
    Backend,
    Target,
    parse_backend,
    parse_target,
    validate_pair,
)
from yunet_face.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Project root resolution
# ---------------------------------------------------------------------------
# Resolved relative to this file's location: yunet_face/config.py → project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Return the resolved project root directory."""
    return _PROJECT_ROOT


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModelConfig:
    """Model-related configuration.

    Attributes:
        model_path: Path to the YuNet .onnx file (relative to project root).
        backend: Compute backend.
        target: Compute target; must be compatible with the backend.
        input_size: Initial (width, height) the model expects. The detector
                    is reconfigured to the real image/frame size before use.
    """

    model_path: str = "models/face_detection_yunet_2023mar.onnx"
    backend: Backend = Backend.OPENCV
    target: Target = Target.CPU
    input_size: Tuple[int, int] = (320, 320)


@dataclass(frozen=True)
class DetectionConfig:
    """Detection thresholds.

    Attributes:
        confidence_threshold: Minimum confidence to accept a detection.
        nms_threshold: IoU threshold for non-maximum suppression.
        top_k: Maximum number of candidates kept before NMS.
    """

    confidence_threshold: float = 0.9
    nms_threshold: float = 0.3
    top_k: int = 5000


@dataclass(frozen=True)
class InputConfig:
    """Input source configuration.

    Attributes:
        source: A still image path, a video file path, or an integer
                camera device index (as string).
    """

    source: str = "0"


@dataclass(frozen=True)
class OutputConfig:
    """Output behavior configuration.

    Attributes:
        save: Persist the annotated result (image, or video for streams).
        visualize: Show the annotated result in a window.
        save_path: Directory where output artifacts are written.
    """

    save: bool = False
    visualize: bool = True
    save_path: str = "output/"


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    Aggregates all sub-configurations into a single, frozen object.
    """

    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_input_size(size) -> Tuple[int, int]:
    """Return size as an (int, int) tuple or raise ConfigurationError."""
    if not isinstance(size, (list, tuple)) or len(size) != 2:
        raise ConfigurationError(
            f"model.input_size must be a (width, height) tuple, got {size}."
        )
    try:
        width, height = (int(v) for v in size)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"model.input_size values must be integers, got {size}."
        ) from None
    if width <= 0 or height <= 0:
        raise ConfigurationError(
            f"model.input_size dimensions must be positive, got {size}."
        )
    return width, height


def validate(config: AppConfig) -> None:
    """Validate configuration values. Raises ConfigurationError on invalid state."""

    validate_pair(
        parse_backend(config.model.backend),
        parse_target(config.model.target),
    )

    validate_input_size(config.model.input_size)

    if not (0.0 <= config.detection.confidence_threshold <= 1.0):
        raise ConfigurationError(
            f"detection.confidence_threshold must be in [0.0, 1.0], "
            f"got {config.detection.confidence_threshold}."
        )

    if not (0.0 <= config.detection.nms_threshold <= 1.0):
        raise ConfigurationError(
            f"detection.nms_threshold must be in [0.0, 1.0], "
            f"got {config.detection.nms_threshold}."
        )

    if config.detection.top_k <= 0:
        raise ConfigurationError(
            f"detection.top_k must be a positive integer, "
            f"got {config.detection.top_k}."
        )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _parse_bool(value, name: str) -> bool:
    """Convert a YAML bool or an environment string into a bool."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{value}'.")


def _parse_number(value, name: str, cast_type=float):
    try:
        return cast_type(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{name} must be a {cast_type.__name__}, got '{value}'."
        ) from None


def _section(raw: dict, name: str) -> dict:
    """Return one top-level section of the raw config as a dict."""
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Config section '{name}' must be a mapping, got {section!r}."
        )
    return section


def _build_model_config(raw: dict) -> ModelConfig:
    """Build ModelConfig from a raw YAML dict."""
    kwargs = {}
    if "model_path" in raw:
        kwargs["model_path"] = str(raw["model_path"])
    if "backend" in raw:
        kwargs["backend"] = parse_backend(raw["backend"])
    if "target" in raw:
        kwargs["target"] = parse_target(raw["target"])
    if "input_size" in raw:
        kwargs["input_size"] = validate_input_size(raw["input_size"])
    return ModelConfig(**kwargs)


def _build_detection_config(raw: dict) -> DetectionConfig:
    """Build DetectionConfig from a raw YAML dict."""
    kwargs = {}
    if "confidence_threshold" in raw:
        kwargs["confidence_threshold"] = _parse_number(
            raw["confidence_threshold"], "detection.confidence_threshold"
        )
    if "nms_threshold" in raw:
        kwargs["nms_threshold"] = _parse_number(
            raw["nms_threshold"], "detection.nms_threshold"
        )
    if "top_k" in raw:
        kwargs["top_k"] = _parse_number(raw["top_k"], "detection.top_k", int)
    return DetectionConfig(**kwargs)


def _build_input_config(raw: dict) -> InputConfig:
    """Build InputConfig from a raw YAML dict."""
    kwargs = {}
    if "source" in raw:
        kwargs["source"] = str(raw["source"])
    return InputConfig(**kwargs)


def _build_output_config(raw: dict) -> OutputConfig:
    """Build OutputConfig from a raw YAML dict."""
    kwargs = {}
    if "save" in raw:
        kwargs["save"] = _parse_bool(raw["save"], "output.save")
    if "visualize" in raw:
        kwargs["visualize"] = _parse_bool(raw["visualize"], "output.visualize")
    if "save_path" in raw:
        kwargs["save_path"] = str(raw["save_path"])
    return OutputConfig(**kwargs)


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "FACE_YUNET_"


def _apply_env_overrides(raw: dict) -> dict:
    """Apply environment variable overrides to the raw config dict.

    Environment variables follow the pattern:
        FACE_YUNET_MODEL_BACKEND=cuda
        FACE_YUNET_DETECTION_CONFIDENCE_THRESHOLD=0.7
    """
    env_map = {
        f"{_ENV_PREFIX}MODEL_PATH": ("model", "model_path"),
        f"{_ENV_PREFIX}MODEL_BACKEND": ("model", "backend"),
        f"{_ENV_PREFIX}MODEL_TARGET": ("model", "target"),
        f"{_ENV_PREFIX}DETECTION_CONFIDENCE_THRESHOLD": ("detection", "confidence_threshold"),
        f"{_ENV_PREFIX}DETECTION_NMS_THRESHOLD": ("detection", "nms_threshold"),
        f"{_ENV_PREFIX}DETECTION_TOP_K": ("detection", "top_k"),
        f"{_ENV_PREFIX}INPUT_SOURCE": ("input", "source"),
        f"{_ENV_PREFIX}OUTPUT_SAVE": ("output", "save"),
        f"{_ENV_PREFIX}OUTPUT_VISUALIZE": ("output", "visualize"),
        f"{_ENV_PREFIX}OUTPUT_SAVE_PATH": ("output", "save_path"),
    }

    for env_var, (section, key) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            raw.setdefault(section, {})[key] = value
            logger.debug("Config override from env: %s=%s", env_var, value)

    return raw


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------

def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration.

    Precedence (highest → lowest):
        Environment variables > YAML file > Hard-coded defaults

    Args:
        config_path: Path to a YAML configuration file. If None,
                     the system runs entirely on defaults (safe for
                     programmatic usage).

    Returns:
        A validated, frozen AppConfig instance.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ConfigurationError: If any configuration value is invalid or the
                            YAML file is malformed.
    """
    raw: dict = {}

    # --- Layer 1: YAML file ---
    if config_path is not None:
        resolved = Path(config_path)
        if not resolved.is_absolute():
            resolved = _PROJECT_ROOT / resolved

        if not resolved.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {resolved}. "
                f"Provide a valid path or omit to use defaults."
            )

        logger.info("Loading config from: %s", resolved)
        with open(resolved, "r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Malformed YAML in configuration file {resolved}: {e}"
                ) from e

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Configuration file {resolved} must contain a mapping, "
                f"got {type(raw).__name__}."
            )

    # --- Layer 2: Environment variable overrides ---
    raw = _apply_env_overrides(raw)

    # --- Build typed configs ---
    config = AppConfig(
        model=_build_model_config(_section(raw, "model")),
        detection=_build_detection_config(_section(raw, "detection")),
        input=_build_input_config(_section(raw, "input")),
        output=_build_output_config(_section(raw, "output")),
    )

    # --- Validate ---
    validate(config)

    logger.debug("Configuration loaded: %s", config)
    return config
