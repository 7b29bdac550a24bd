"""Progress records owned by the schedulers."""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class WordState(Enum):
    """Leitner states of a vocabulary item."""
    NEW = "new"
    LEARNING_1 = "learning_1"
    LEARNING_2 = "learning_2"
    REVIEW_1 = "review_1"
    REVIEW_2 = "review_2"
    MASTERED = "mastered"

    @property
    def bucket(self) -> str:
        """Coarse bucket used for counts: new, learning, review or mastered."""
        return self.value.split("_", 1)[0]


class ParticleState(Enum):
    """Coarse states of a particle."""
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    MASTERED = "mastered"


# state -> (on correct, on incorrect)
STATE_PROGRESSIONS: Dict[WordState, tuple] = {
    WordState.NEW: (WordState.LEARNING_1, WordState.NEW),
    WordState.LEARNING_1: (WordState.LEARNING_2, WordState.NEW),
    WordState.LEARNING_2: (WordState.REVIEW_1, WordState.LEARNING_1),
    WordState.REVIEW_1: (WordState.REVIEW_2, WordState.LEARNING_1),
    WordState.REVIEW_2: (WordState.MASTERED, WordState.LEARNING_1),
    WordState.MASTERED: (WordState.MASTERED, WordState.REVIEW_1),
}


def next_word_state(state: WordState, is_correct: bool) -> WordState:
    """Look up the transition for an answer outcome."""
    on_correct, on_incorrect = STATE_PROGRESSIONS[state]
    return on_correct if is_correct else on_incorrect


def next_particle_state(state: ParticleState, is_correct: bool, rate: float, attempts: int) -> ParticleState:
    """Promote or demote a particle from its lifetime success rate.

    Promotion thresholds are stricter than demotion thresholds, so a particle
    hovering around one threshold does not flip back and forth.
    """
    if is_correct:
        if state is ParticleState.NEW and rate >= 0.6:
            return ParticleState.LEARNING
        if state is ParticleState.LEARNING and rate >= 0.8 and attempts >= 3:
            return ParticleState.REVIEW
        if state is ParticleState.REVIEW and rate >= 0.9 and attempts >= 5:
            return ParticleState.MASTERED
    else:
        if state is ParticleState.MASTERED and rate < 0.8:
            return ParticleState.REVIEW
        if state is ParticleState.REVIEW and rate < 0.6:
            return ParticleState.LEARNING
    return state


def success_rate(correct: int, attempts: int, prior: float = 0.5) -> float:
    """Return correct/attempts, or the prior when nothing was attempted."""
    if attempts <= 0:
        return prior
    return correct / attempts


@dataclass
class WordProgress:
    """Learning state of one vocabulary item. Timestamps are epoch milliseconds."""
    state: WordState
    next_review_at: int
    created_at: int
    last_reviewed_at: Optional[int] = None
    total_attempts: int = 0
    correct_attempts: int = 0
    correct_streak: int = 0

    @classmethod
    def new(cls, now: int) -> "WordProgress":
        """Create a fresh record that is due immediately."""
        return cls(state=WordState.NEW, next_review_at=now, created_at=now)

    def is_due(self, now: int) -> bool:
        """Check if the item is due for review."""
        return self.next_review_at <= now

    def to_data(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        data = asdict(self)
        data["state"] = self.state.value
        return data

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "WordProgress":
        """Create a record from stored data. Raises on malformed input."""
        progress = cls(
            state=WordState(data["state"]),
            next_review_at=int(data["next_review_at"]),
            created_at=int(data["created_at"]),
            last_reviewed_at=None if data.get("last_reviewed_at") is None else int(data["last_reviewed_at"]),
            total_attempts=int(data.get("total_attempts", 0)),
            correct_attempts=int(data.get("correct_attempts", 0)),
            correct_streak=int(data.get("correct_streak", 0)),
        )
        if progress.total_attempts < 0 or progress.correct_attempts < 0 or progress.correct_streak < 0:
            raise ValueError("Attempt counters cannot be negative")
        if progress.correct_attempts > progress.total_attempts:
            raise ValueError("correct_attempts exceeds total_attempts")
        return progress


@dataclass
class ParticleProgress:
    """Lifetime progress of one particle."""
    state: ParticleState = ParticleState.NEW
    attempts: int = 0
    correct: int = 0
    last_seen_at: Optional[int] = None

    @property
    def success_rate(self) -> float:
        return success_rate(self.correct, self.attempts)

    def to_data(self) -> Dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        return data

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ParticleProgress":
        return cls(
            state=ParticleState(data.get("state", ParticleState.NEW.value)),
            attempts=int(data.get("attempts", 0)),
            correct=int(data.get("correct", 0)),
            last_seen_at=None if data.get("last_seen_at") is None else int(data["last_seen_at"]),
        )


@dataclass
class ExampleProgress:
    """Progress of one example sentence, keyed by ``particle#index``."""
    attempts: int = 0
    correct: int = 0
    last_seen_at: Optional[int] = None
    cooldown_until: int = 0

    @property
    def success_rate(self) -> float:
        return success_rate(self.correct, self.attempts)

    def is_cooling_down(self, now: int) -> bool:
        return now < self.cooldown_until

    def to_data(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "ExampleProgress":
        return cls(
            attempts=int(data.get("attempts", 0)),
            correct=int(data.get("correct", 0)),
            last_seen_at=None if data.get("last_seen_at") is None else int(data["last_seen_at"]),
            cooldown_until=int(data.get("cooldown_until", 0)),
        )


def example_key(particle: str, index: int) -> str:
    """Build the progress key of an example."""
    return f"{particle}#{index}"
