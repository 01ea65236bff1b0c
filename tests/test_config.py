"""
Tests for the configuration module.
"""

import pytest

from yunet_face.backends import Backend, Target
from yunet_face.config import (
    AppConfig,
    DetectionConfig,
    ModelConfig,
    OutputConfig,
    load_config,
    validate,
)
from yunet_face.errors import ConfigurationError


def test_load_defaults():
    """Test loading configuration without any file."""
    config = load_config(None)
    assert isinstance(config, AppConfig)
    assert config.model.backend is Backend.OPENCV
    assert config.model.target is Target.CPU
    assert config.model.input_size == (320, 320)
    assert config.detection.confidence_threshold == 0.9
    assert config.detection.nms_threshold == 0.3
    assert config.detection.top_k == 5000
    assert config.output == OutputConfig(save=False, visualize=True, save_path="output/")


def test_validation_failure():
    """Test fail-fast validation."""
    # Invalid confidence
    bad_config = AppConfig(detection=DetectionConfig(confidence_threshold=1.5))
    with pytest.raises(ConfigurationError, match="confidence_threshold"):
        validate(bad_config)

    # Invalid NMS
    bad_config = AppConfig(detection=DetectionConfig(nms_threshold=-0.1))
    with pytest.raises(ConfigurationError, match="nms_threshold"):
        validate(bad_config)

    # Invalid top_k
    bad_config = AppConfig(detection=DetectionConfig(top_k=0))
    with pytest.raises(ConfigurationError, match="top_k"):
        validate(bad_config)

    # Invalid backend
    bad_config = AppConfig(model=ModelConfig(backend="invalid"))
    with pytest.raises(ConfigurationError, match="backend"):
        validate(bad_config)

    # Invalid input size
    bad_config = AppConfig(model=ModelConfig(input_size=(0, 240)))
    with pytest.raises(ConfigurationError, match="input_size"):
        validate(bad_config)


def test_configuration_error_is_value_error():
    """Callers catching ValueError still see configuration failures."""
    with pytest.raises(ValueError):
        validate(AppConfig(detection=DetectionConfig(confidence_threshold=2.0)))


def test_unsupported_backend_target_pair():
    """Test that an incompatible backend/target pairing is rejected."""
    bad_config = AppConfig(model=ModelConfig(backend=Backend.OPENCV, target=Target.NPU))
    with pytest.raises(ConfigurationError, match="opencv.*npu"):
        validate(bad_config)


def test_env_override(monkeypatch):
    """Test environment variable overrides."""
    monkeypatch.setenv("FACE_YUNET_DETECTION_CONFIDENCE_THRESHOLD", "0.7")
    monkeypatch.setenv("FACE_YUNET_DETECTION_TOP_K", "100")
    monkeypatch.setenv("FACE_YUNET_MODEL_BACKEND", "CUDA")
    monkeypatch.setenv("FACE_YUNET_MODEL_TARGET", "cuda_fp16")
    monkeypatch.setenv("FACE_YUNET_OUTPUT_SAVE", "true")
    monkeypatch.setenv("FACE_YUNET_OUTPUT_VISUALIZE", "no")

    config = load_config(None)

    assert config.detection.confidence_threshold == 0.7
    assert config.detection.top_k == 100
    assert config.model.backend is Backend.CUDA
    assert config.model.target is Target.CUDA_FP16
    assert config.output.save is True
    assert config.output.visualize is False


def test_env_override_invalid_bool(monkeypatch):
    """Test that an unparseable boolean fails with the setting name."""
    monkeypatch.setenv("FACE_YUNET_OUTPUT_SAVE", "maybe")
    with pytest.raises(ConfigurationError, match="output.save"):
        load_config(None)


def test_yaml_file(tmp_path):
    """Test loading a YAML file with partial overrides."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "model:\n"
        "  input_size: [640, 480]\n"
        "detection:\n"
        "  confidence_threshold: 0.6\n"
        "input:\n"
        "  source: photo.jpg\n"
        "output:\n"
        "  save: true\n",
        encoding="utf-8",
    )

    config = load_config(str(config_file))

    assert config.model.input_size == (640, 480)
    assert config.detection.confidence_threshold == 0.6
    assert config.detection.nms_threshold == 0.3
    assert config.input.source == "photo.jpg"
    assert config.output.save is True
    assert config.output.visualize is True


def test_yaml_unknown_target(tmp_path):
    """Test that unknown target names fail at configuration time."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("model:\n  target: tpu\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="tpu"):
        load_config(str(config_file))


def test_missing_config_file(tmp_path):
    """Test that a missing config file is reported with its path."""
    with pytest.raises(FileNotFoundError, match="missing.yaml"):
        load_config(str(tmp_path / "missing.yaml"))


def test_malformed_yaml(tmp_path):
    """Test that unparseable YAML is a configuration error naming the file."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("model: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="broken.yaml"):
        load_config(str(config_file))


def test_non_numeric_input_size(tmp_path):
    """Test that non-integer input sizes name the setting."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("model:\n  input_size: [a, 3]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="model.input_size"):
        load_config(str(config_file))


@pytest.mark.parametrize("content", ["- just\n- a list\n", "model: 5\n"])
def test_yaml_wrong_structure(tmp_path, content):
    """Test that YAML with the wrong shape is rejected."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError, match="mapping"):
        load_config(str(config_file))
