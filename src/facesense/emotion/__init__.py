"""Emotion CLI: classify the expression of the main face in a photo."""

import argparse
import sys


def main() -> None:
    """CLI entry point for emotion detection."""
    from facesense.config import LOG_LEVEL

    parser = argparse.ArgumentParser(description="Detect the emotion of the main face in a photo")
    parser.add_argument("image", help="Path or http(s) URL of the image")
    parser.add_argument(
        "--log-level", default=LOG_LEVEL, help=f"Logging level (default: {LOG_LEVEL})"
    )
    args = parser.parse_args()

    from facesense.emotion.detector import detect_emotion
    from facesense.emotion.vision_client import VisionClient
    from facesense.errors import FaceSenseError
    from facesense.images import load_image
    from facesense.log import setup_logging
    from facesense.models import NoFaceDetected

    setup_logging(args.log_level)

    try:
        image = load_image(args.image)
        result = detect_emotion(image, VisionClient())
    except (FaceSenseError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if isinstance(result, NoFaceDetected):
        print("No faces found.")
    else:
        print(result.value)
