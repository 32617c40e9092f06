"""Confidence-gated classifier from expression likelihoods to an emotion label."""

import logging
from collections.abc import Sequence

from facesense.errors import InvalidInputError
from facesense.models import Annotation, EmotionLabel

logger = logging.getLogger(__name__)


def derive_threshold(joy: int, anger: int, sorrow: int, confidence_pct: float) -> int:
    """Minimum likelihood a candidate must reach to win.

    Confident detections use a fixed low bar. Otherwise the bar is one above
    the truncated mean of the three scores, e.g. (4, 1, 1) -> 6 // 3 + 1 = 3.
    """
    if 65 < confidence_pct < 80:
        return 2
    if confidence_pct >= 80:
        return 1
    return (joy + anger + sorrow) // 3 + 1


def select_label(joy: int, anger: int, sorrow: int, threshold: int) -> EmotionLabel:
    """Pick the first candidate, in joy/anger/sorrow order, that clears the bar and is maximal."""
    candidates = (
        (EmotionLabel.HAPPY, joy, (anger, sorrow)),
        (EmotionLabel.ANGRY, anger, (joy, sorrow)),
        (EmotionLabel.SAD, sorrow, (joy, anger)),
    )
    for label, value, others in candidates:
        if value >= threshold and all(value >= other for other in others):
            return label
    return EmotionLabel.NEUTRAL


def classify(annotations: Sequence[Annotation]) -> EmotionLabel:
    """Classify the primary (first) face of a detection result.

    Args:
        annotations: Faces in provider prominence order. Must not be empty;
            callers report ``NoFaceDetected`` themselves.

    Returns:
        The emotion label for the first face.
    """
    if not annotations:
        raise InvalidInputError("classify() needs at least one face annotation")

    face = annotations[0]
    joy = int(face.joy_likelihood)
    anger = int(face.anger_likelihood)
    sorrow = int(face.sorrow_likelihood)
    confidence_pct = face.confidence_pct

    threshold = derive_threshold(joy, anger, sorrow, confidence_pct)
    label = select_label(joy, anger, sorrow, threshold)
    logger.debug(
        "Faces: %d | Confidence: %.1f | Joy: %d Anger: %d Sorrow: %d | Threshold: %d -> %s",
        len(annotations),
        confidence_pct,
        joy,
        anger,
        sorrow,
        threshold,
        label.value,
    )
    return label
