"""Session-level difficulty adjustment for the particle quiz."""
import logging
from typing import List, Optional

from jlptdrill.config import DifficultySettings, settings
from jlptdrill.monitoring import difficulty_tier

logger = logging.getLogger(__name__)


class DifficultyTracker:
    """Moves the difficulty tier up or down based on session performance.

    The tier rises after a run of correct answers with a high session rate
    and falls after a run of mistakes or when the session rate drops low.
    Only the counter that triggered a change is reset.
    """

    def __init__(self, tier: Optional[str] = None, config: Optional[DifficultySettings] = None):
        self.config = config or settings.difficulty
        self.tiers: List[str] = list(self.config.tiers)
        self.tier = tier or self.tiers[0]
        if self.tier not in self.tiers:
            raise ValueError(f"Unknown difficulty tier: {self.tier}")
        self.attempted = 0
        self.correct = 0
        self.consecutive_correct = 0
        self.consecutive_incorrect = 0
        difficulty_tier.set(self.tiers.index(self.tier))

    @property
    def session_rate(self) -> float:
        return self.correct / self.attempted if self.attempted > 0 else 0.0

    def is_lowest(self, tier: Optional[str] = None) -> bool:
        """Check if ``tier`` (the current tier by default) is the bottom one."""
        return (tier or self.tier) == self.tiers[0]

    def record(self, is_correct: bool) -> str:
        """Record an answer, adjust the tier and return it."""
        self.attempted += 1
        if is_correct:
            self.correct += 1
            self.consecutive_correct += 1
            self.consecutive_incorrect = 0
        else:
            self.consecutive_incorrect += 1
            self.consecutive_correct = 0
        return self.adjust()

    def adjust(self) -> str:
        """Apply the promotion/demotion band to the current counters."""
        if self.attempted == 0:
            return self.tier

        index = self.tiers.index(self.tier)
        rate = self.session_rate

        if self.consecutive_correct >= self.config.promote_streak and rate >= self.config.promote_rate:
            if index < len(self.tiers) - 1:
                self._set_tier(self.tiers[index + 1], "increased")
                self.consecutive_correct = 0
        elif self.consecutive_incorrect >= self.config.demote_streak or rate < self.config.demote_rate:
            if index > 0:
                self._set_tier(self.tiers[index - 1], "decreased")
                self.consecutive_incorrect = 0
        return self.tier

    def _set_tier(self, tier: str, direction: str) -> None:
        logger.info(f"Difficulty {direction} to {tier} (session rate {self.session_rate:.2f})")
        self.tier = tier
        difficulty_tier.set(self.tiers.index(tier))

    def reset(self) -> None:
        self.tier = self.tiers[0]
        self.attempted = 0
        self.correct = 0
        self.consecutive_correct = 0
        self.consecutive_incorrect = 0
        difficulty_tier.set(0)
