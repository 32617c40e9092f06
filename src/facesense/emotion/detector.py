"""Image-to-emotion flow: detect faces, then classify the primary one."""

import logging

from facesense.emotion.classifier import classify
from facesense.emotion.vision_client import FaceDetectionProvider
from facesense.images import validate_image
from facesense.models import EmotionLabel, NoFaceDetected

logger = logging.getLogger(__name__)


def detect_emotion(image: bytes, provider: FaceDetectionProvider) -> EmotionLabel | NoFaceDetected:
    """Return the primary face's emotion, or ``NoFaceDetected``.

    Unreadable images raise ``InvalidInputError`` before the provider is
    called; provider failures propagate as ``ProviderError``.
    """
    image_format = validate_image(image)
    logger.debug("Classifying %s image (%d bytes)", image_format, len(image))

    annotations = provider.detect(image)
    if not annotations:
        logger.info("No faces found.")
        return NoFaceDetected()
    return classify(annotations)
