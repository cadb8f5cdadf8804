"""
Tests for PromotionPolicy.
"""

from datetime import datetime, timezone

import pytest

from answer_cache.config import Settings
from answer_cache.entities import LearnedPattern
from answer_cache.services import PromotionPolicy

NOW = datetime(2025, 3, 10, tzinfo=timezone.utc)


def pattern(frequency, promoted=False, pattern_id="p"):
    return LearnedPattern(
        id=pattern_id,
        question="¿Dónde queda el bloque 14?",
        category="ubicacion",
        frequency=frequency,
        first_asked=NOW,
        last_asked=NOW,
        added_to_training=promoted,
        answer="Junto a la biblioteca" if promoted else None,
    )


def test_eligible_at_threshold():
    """Test patterns become eligible at the threshold."""
    policy = PromotionPolicy(threshold=3)

    assert not policy.is_eligible(pattern(2))
    assert policy.is_eligible(pattern(3))
    assert policy.is_eligible(pattern(7))


def test_promoted_patterns_are_never_eligible():
    """Test promoted patterns are never candidates."""
    assert not PromotionPolicy(threshold=1).is_eligible(pattern(10, promoted=True))


def test_candidates_keep_input_order():
    """Test candidates keep the order they are given in."""
    policy = PromotionPolicy(threshold=2)
    patterns = [pattern(5, pattern_id="a"), pattern(1, pattern_id="b"), pattern(2, pattern_id="c")]

    assert [p.id for p in policy.candidates(patterns)] == ["a", "c"]


def test_threshold_must_be_positive():
    """Test a zero threshold is rejected."""
    with pytest.raises(ValueError):
        PromotionPolicy(threshold=0)


def test_from_settings():
    """Test the policy threshold comes from settings."""
    assert PromotionPolicy.from_settings(Settings(promotion_threshold=7)).threshold == 7
