"""
YuNet Face Detection CLI Entrypoint.

Responsibility:
    Load configuration, build the detector, and run either the
    still-image pipeline or the streaming pipeline depending on the
    selected source.

Usage:
    python main.py                                  # Default camera (device 0)
    python main.py --source photo.jpg               # Still image
    python main.py --source video.mp4               # Video file
    python main.py --config my_config.yaml

All other settings (model path, backend/target, thresholds, save and
visualize toggles) come from the YAML file or FACE_YUNET_* environment
variables.

This module is the executable entry point. It should not be imported
by other modules.
"""

import argparse
import logging
import sys

# Configure logging before importing local modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("main")

from yunet_face.config import InputConfig, load_config
from yunet_face.detector import Detector
from yunet_face.errors import (
    ConfigurationError,
    ImageReadError,
    InferenceError,
    SourceError,
)
from yunet_face.input_handler import is_image_source
from yunet_face.pipeline import run_image, run_stream


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="YuNet Face Detection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--source",
        type=str,
        help="Input source: camera index (e.g. '0'), image file, or video file. "
             "Overrides config.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file.",
    )

    return parser.parse_args()


def main() -> int:
    """Run the selected pipeline and return the process exit code."""
    args = parse_args()

    # 1. Load Configuration (CLI args > ENV > YAML > Defaults)
    try:
        config = load_config(args.config)

        if args.source is not None:
            # We must use object.__setattr__ because the dataclass is frozen
            object.__setattr__(config, "input", InputConfig(source=args.source))

        logger.info("Configuration active for this run.")

    except Exception as e:
        logger.error("Configuration error: %s", e)
        return 1

    # 2. Initialize Detector
    try:
        detector = Detector(config)
    except ConfigurationError as e:
        logger.error("Initialization failed: %s", e)
        return 1
    except Exception as e:
        logger.exception("Unexpected initialization error: %s", e)
        return 1

    # 3. Run
    source = config.input.source
    try:
        if is_image_source(source):
            run_image(detector, source, config.output)
        else:
            logger.info("Starting stream. Press any key in the window to quit.")
            run_stream(detector, source, config.output)

    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    except (ImageReadError, SourceError) as e:
        logger.error("Input error: %s", e)
        return 1
    except (ConfigurationError, InferenceError) as e:
        logger.error("Inference failed for %s: %s", source, e)
        return 1
    except OSError as e:
        logger.error("Output error: %s", e)
        return 1
    except Exception as e:
        logger.exception("Runtime error during processing: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
