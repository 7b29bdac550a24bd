"""Tests for session difficulty adjustment."""
import pytest

from jlptdrill.services.difficulty import DifficultyTracker


def test_promotion_then_demotion() -> None:
    """Test five correct answers promote and three misses demote again."""
    tracker = DifficultyTracker()
    assert tracker.tier == "beginner"

    for _ in range(4):
        assert tracker.record(True) == "beginner"
    assert tracker.record(True) == "intermediate"
    assert tracker.consecutive_correct == 0

    assert tracker.record(False) == "intermediate"
    assert tracker.record(False) == "intermediate"
    assert tracker.record(False) == "beginner"
    assert tracker.consecutive_incorrect == 0
    assert tracker.session_rate == pytest.approx(5 / 8)


def test_promotion_needs_high_session_rate() -> None:
    """Test a streak alone does not promote when the session rate is low."""
    tracker = DifficultyTracker(tier="intermediate")
    for _ in range(6):
        tracker.record(False)
    assert tracker.tier == "beginner"

    for _ in range(5):
        tracker.record(True)
    # 5 of 11 correct is below the promotion rate
    assert tracker.tier == "beginner"


def test_tier_is_capped() -> None:
    """Test the tier never moves past either end."""
    tracker = DifficultyTracker(tier="advanced")
    for _ in range(10):
        tracker.record(True)
    assert tracker.tier == "advanced"

    tracker = DifficultyTracker()
    for _ in range(10):
        tracker.record(False)
    assert tracker.tier == "beginner"


def test_low_session_rate_demotes() -> None:
    """Test a session rate under 0.4 demotes without a miss streak."""
    tracker = DifficultyTracker(tier="advanced")
    tracker.record(True)
    tracker.record(False)
    tracker.record(False)
    # 1 of 3 correct
    assert tracker.tier == "intermediate"


def test_unknown_tier_rejected() -> None:
    with pytest.raises(ValueError):
        DifficultyTracker(tier="expert")


def test_reset() -> None:
    tracker = DifficultyTracker(tier="advanced")
    tracker.record(True)
    tracker.reset()
    assert tracker.tier == "beginner"
    assert tracker.attempted == 0
    assert tracker.is_lowest()
    assert not tracker.is_lowest("advanced")
