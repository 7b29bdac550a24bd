"""Service tying user actions to the word scheduler and particle selector."""
import logging
import random
from dataclasses import asdict
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from jlptdrill.config import settings
from jlptdrill.models.content_models import ParticleDefinition, VocabularyItem
from jlptdrill.models.progress_models import WordProgress
from jlptdrill.models.quiz_models import (
    AnswerResult,
    ParticleQuestion,
    WordAnswerResult,
    WordBatch,
    WordQuestion,
)
from jlptdrill.services.clock import Clock, system_clock
from jlptdrill.services.particle_selector import ParticleSelector
from jlptdrill.services.store import KeyValueStore
from jlptdrill.services.vocabulary_quiz import VocabularyQuiz
from jlptdrill.services.word_scheduler import ALL, WordScheduler

logger = logging.getLogger(__name__)


class SessionController:
    """Drives a study session: decks of flashcards plus particle questions."""

    def __init__(
        self,
        store: KeyValueStore,
        vocabulary: Mapping[str, Sequence[VocabularyItem]],
        particles: Mapping[str, Sequence[ParticleDefinition]],
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
        level: Optional[str] = None,
    ):
        """Initialize the session with content providers and a store."""
        self.store = store
        self.vocabulary = vocabulary
        self.particles = particles
        self.clock = clock
        self.rng = rng or random.Random()
        self.level = level or settings.study.default_level
        if self.level not in self.vocabulary:
            raise ValueError(f"Unknown level: {self.level}")

        self.active_filters = {ALL}
        self.deck = WordBatch()
        self.card_index = 0
        self.schedulers: Dict[str, WordScheduler] = {}
        self.particle_selector = ParticleSelector(store, clock=clock, rng=self.rng)
        self.quiz = VocabularyQuiz(store, rng=self.rng)

    def _get_scheduler(self, level: str) -> WordScheduler:
        """Get the scheduler of a level, creating it on first use.

        Each level persists under its own key so switching levels never
        prunes the progress of another level.
        """
        scheduler = self.schedulers.get(level)
        if scheduler is None:
            scheduler = WordScheduler(
                self.store,
                clock=self.clock,
                rng=self.rng,
                storage_key=f"{settings.scheduler.word_progress_key}-{level}",
            )
            scheduler.initialize(self.vocabulary.get(level, []))
            self.schedulers[level] = scheduler
        return scheduler

    @property
    def word_scheduler(self) -> WordScheduler:
        return self._get_scheduler(self.level)

    def start(self) -> WordBatch:
        """Initialize both engines and deal the first deck."""
        logger.info(f"Starting session at level {self.level}")
        self.particle_selector.initialize(self.particles)
        self.quiz.initialize()
        return self.load_new_deck()

    def load_new_deck(self) -> WordBatch:
        """Replace the current deck with a freshly composed batch."""
        self.deck = self.word_scheduler.select_batch(settings.scheduler.deck_size, self.active_filters)
        self.card_index = 0
        logger.info(f"Loaded deck with {len(self.deck)} cards ({self.deck.due_count} due)")
        return self.deck

    def current_card(self) -> Optional[VocabularyItem]:
        if not self.deck.items:
            return None
        return self.deck[min(self.card_index, len(self.deck) - 1)]

    def advance(self) -> Optional[VocabularyItem]:
        """Move to the next card, dealing a new deck at the end."""
        if self.card_index < len(self.deck) - 1:
            self.card_index += 1
        else:
            logger.info("End of deck reached, loading new deck")
            self.load_new_deck()
        return self.current_card()

    def answer_card(self, is_correct: bool) -> Optional[WordProgress]:
        """Record an answer for the current card and advance."""
        card = self.current_card()
        if card is None:
            logger.warning("Answer submitted with an empty deck")
            return None
        progress = self.word_scheduler.record_answer(card.key, is_correct)
        self.advance()
        return progress

    def set_filters(self, categories: Iterable[str]) -> WordBatch:
        """Change the category filter and redeal."""
        self.active_filters = set(categories) or {ALL}
        logger.info(f"Filters changed to {sorted(self.active_filters)}")
        return self.load_new_deck()

    def switch_level(self, level: str) -> bool:
        """Switch to another JLPT level. Returns False if already there."""
        if level == self.level:
            logger.info(f"Already on level {level}")
            return False
        if level not in self.vocabulary:
            raise ValueError(f"Unknown level: {level}")

        logger.info(f"Switching from {self.level} to {level}")
        self.level = level
        self.particle_selector.current_question = None
        self.quiz.current_question = None
        self.load_new_deck()
        return True

    def next_word_question(self) -> Optional[WordQuestion]:
        """Turn the current card into a multiple choice question."""
        card = self.current_card()
        if card is None:
            return None
        return self.quiz.start_question(card, self.vocabulary.get(self.level, []), self.level)

    def answer_word_question(self, selected_key: str) -> WordAnswerResult:
        """Record a quiz answer for the current card and advance."""
        result = self.quiz.validate_answer(selected_key, self.word_scheduler)
        if result.has_question:
            self.advance()
        return result

    def next_particle_question(self) -> Optional[ParticleQuestion]:
        return self.particle_selector.select_question(self.level)

    def answer_particle(self, selected_particle: str) -> AnswerResult:
        return self.particle_selector.validate_answer(selected_particle)

    def summary(self) -> Dict[str, Any]:
        """Snapshot of the session for display."""
        scheduler = self.word_scheduler
        return {
            "level": self.level,
            "filters": sorted(self.active_filters),
            "deck_size": len(self.deck),
            "deck_due": self.deck.due_count,
            "card_index": self.card_index,
            "due_counts": asdict(scheduler.due_counts(self.active_filters)),
            "study_stats": asdict(scheduler.get_study_stats()),
            "retention_rate": scheduler.get_retention_rate(),
            "difficulty": self.particle_selector.difficulty.tier,
            "quiz_mode": self.quiz.mode,
            "quiz_stats": self.quiz.get_category_stats(self.level),
        }
