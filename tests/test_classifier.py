"""Tests for the likelihood classifier."""

import itertools

import pytest
from conftest import make_annotation

from facesense.emotion.classifier import classify, derive_threshold, select_label
from facesense.errors import InvalidInputError
from facesense.models import EmotionLabel


def test_high_confidence_threshold_is_one():
    for joy, anger, sorrow in itertools.product(range(6), repeat=3):
        assert derive_threshold(joy, anger, sorrow, 85) == 1


def test_mid_confidence_threshold_is_two():
    for joy, anger, sorrow in itertools.product(range(6), repeat=3):
        assert derive_threshold(joy, anger, sorrow, 70) == 2


def test_confidence_boundaries():
    assert derive_threshold(5, 5, 5, 65) == 6  # 65 is not inside (65, 80)
    assert derive_threshold(5, 5, 5, 65.1) == 2
    assert derive_threshold(5, 5, 5, 79.9) == 2
    assert derive_threshold(5, 5, 5, 80) == 1


def test_low_confidence_threshold_truncates():
    assert derive_threshold(4, 1, 1, 50) == 3
    # 7 // 3 + 1 == 3, not the rounded mean plus one
    assert derive_threshold(4, 2, 1, 50) == 3
    assert derive_threshold(5, 5, 4, 50) == 5


def test_joy_wins_with_low_confidence():
    assert classify([make_annotation(4, 1, 1, confidence=0.5)]) is EmotionLabel.HAPPY


def test_all_zero_is_neutral():
    assert classify([make_annotation(0, 0, 0, confidence=0.3)]) is EmotionLabel.NEUTRAL
    assert classify([make_annotation(0, 0, 0, confidence=0.0)]) is EmotionLabel.NEUTRAL


def test_tie_goes_to_earlier_candidate():
    assert classify([make_annotation(3, 3, 0, confidence=0.5)]) is EmotionLabel.HAPPY
    assert select_label(0, 4, 4, threshold=2) is EmotionLabel.ANGRY


def test_anger_and_sorrow_labels():
    assert classify([make_annotation(1, 4, 1, confidence=0.9)]) is EmotionLabel.ANGRY
    assert classify([make_annotation(1, 1, 5, confidence=0.7)]) is EmotionLabel.SAD


def test_nothing_reaches_threshold_is_neutral():
    # (1, 1, 1) at low confidence -> threshold 2
    assert classify([make_annotation(1, 1, 1, confidence=0.4)]) is EmotionLabel.NEUTRAL


def test_only_first_face_is_used():
    faces = [make_annotation(0, 0, 5, confidence=0.9), make_annotation(5, 0, 0, confidence=0.99)]
    assert classify(faces) is EmotionLabel.SAD


def test_classify_is_total_and_deterministic():
    for joy, anger, sorrow in itertools.product(range(6), repeat=3):
        for confidence in (0.0, 0.5, 0.65, 0.7, 0.8, 1.0):
            faces = [make_annotation(joy, anger, sorrow, confidence)]
            first = classify(faces)
            assert first in set(EmotionLabel)
            assert classify(faces) is first


def test_empty_sequence_is_rejected():
    with pytest.raises(InvalidInputError):
        classify([])
