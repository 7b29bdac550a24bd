"""Spaced repetition scheduler for vocabulary items."""
import logging
import math
import random
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from jlptdrill.config import DAY_MS, settings
from jlptdrill.models.content_models import VocabularyItem
from jlptdrill.models.progress_models import (
    STATE_PROGRESSIONS,
    WordProgress,
    WordState,
    next_word_state,
)
from jlptdrill.models.quiz_models import DueCounts, MasteryPrediction, StudyStats, WordBatch
from jlptdrill.monitoring import answers_recorded, batches_selected, missing_progress
from jlptdrill.services.clock import Clock, system_clock
from jlptdrill.services.persistence import load_blob, save_blob
from jlptdrill.services.shuffle import interleaved_shuffle
from jlptdrill.services.store import KeyValueStore

logger = logging.getLogger(__name__)

ALL = "all"

CategoryFilter = Union[str, Iterable[str], None]

# state -> (days if accuracy is high, days otherwise, accuracy threshold)
MASTERY_ESTIMATES = {
    WordState.NEW: (7, 14, 0.8),
    WordState.LEARNING_1: (5, 10, 0.7),
    WordState.LEARNING_2: (3, 7, 0.8),
    WordState.REVIEW_1: (2, 5, 0.9),
    WordState.REVIEW_2: (1, 3, 0.9),
}


class WordScheduler:
    """Owns word progress and composes study batches.

    Each item moves through a fixed Leitner automaton on every answer and
    becomes due again after the interval of the state it enters.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
        storage_key: Optional[str] = None,
    ):
        """Initialize the scheduler with its store and clock."""
        self.store = store
        self.clock = clock
        self.rng = rng or random.Random()
        self.storage_key = storage_key or settings.scheduler.word_progress_key
        self.intervals: Dict[str, int] = settings.scheduler.learning_intervals
        self.word_progress: Dict[str, WordProgress] = {}
        self.items: List[VocabularyItem] = []
        self.is_loaded = False

    def _load(self) -> Dict[str, WordProgress]:
        """Read persisted progress, dropping anything that does not parse."""
        data = load_blob(self.store, self.storage_key)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Word progress in {self.storage_key} is not a mapping, starting fresh")
            return {}

        progress = {}
        for key, record in data.items():
            try:
                progress[key] = WordProgress.from_data(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed progress for {key}: {e}")
        return progress

    def _save(self) -> bool:
        data = {key: progress.to_data() for key, progress in self.word_progress.items()}
        return save_blob(self.store, self.storage_key, data)

    def initialize(self, active_items: Sequence[VocabularyItem]) -> None:
        """Create missing progress records and prune stale ones."""
        if not self.is_loaded:
            self.word_progress = self._load()
            self.is_loaded = True

        now = self.clock()
        items = []
        seen = set()
        for item in active_items:
            if item.key in seen:
                logger.warning(f"Duplicate vocabulary key ignored: {item.key}")
                continue
            seen.add(item.key)
            items.append(item)
        self.items = items

        created = 0
        for item in self.items:
            if item.key not in self.word_progress:
                self.word_progress[item.key] = WordProgress.new(now)
                created += 1

        stale = [key for key in self.word_progress if key not in seen]
        for key in stale:
            del self.word_progress[key]

        logger.info(
            f"Word progress initialized: {len(self.word_progress)} records "
            f"({created} created, {len(stale)} pruned)"
        )
        self._save()

    def get_progress(self, item_key: str) -> Optional[WordProgress]:
        """Get the progress record of an item, or None if it has none."""
        return self.word_progress.get(item_key)

    def record_answer(self, item_key: str, is_correct: bool) -> Optional[WordProgress]:
        """Apply an answer to an item and return its updated progress."""
        progress = self.word_progress.get(item_key)
        if progress is None:
            logger.warning(f"No progress found for: {item_key}")
            missing_progress.labels(engine="word").inc()
            return None

        now = self.clock()
        progress.total_attempts += 1
        progress.last_reviewed_at = now
        if is_correct:
            progress.correct_attempts += 1
            progress.correct_streak += 1
        else:
            progress.correct_streak = 0

        previous = progress.state
        progress.state = next_word_state(previous, is_correct)
        progress.next_review_at = now + self.intervals[progress.state.value]

        logger.debug(f"{item_key}: {previous.value} -> {progress.state.value} (correct={is_correct})")
        answers_recorded.labels(engine="word", outcome="correct" if is_correct else "incorrect").inc()
        self._save()
        return progress

    def _filter_items(self, category_filter: CategoryFilter) -> List[VocabularyItem]:
        if category_filter is None or category_filter == ALL:
            return list(self.items)
        categories = {category_filter} if isinstance(category_filter, str) else set(category_filter)
        if ALL in categories:
            return list(self.items)
        return [item for item in self.items if item.category in categories]

    def _shuffle(self, items: Sequence[VocabularyItem]) -> List[VocabularyItem]:
        return interleaved_shuffle(
            items,
            lambda item: item.category,
            rng=self.rng,
            swap_ratio=settings.scheduler.interleave_swap_ratio,
        )

    def _is_due(self, item: VocabularyItem, now: int) -> bool:
        progress = self.word_progress.get(item.key)
        return progress is not None and progress.is_due(now)

    def select_batch(self, size: int, category_filter: CategoryFilter = ALL) -> WordBatch:
        """Compose a study batch of at most ``size`` distinct items."""
        if size <= 0:
            return WordBatch()

        filtered = self._filter_items(category_filter)
        if not filtered and self.items:
            logger.warning("No words match current filters, using all words")
            filtered = list(self.items)

        now = self.clock()
        due_words: List[VocabularyItem] = []
        new_words: List[VocabularyItem] = []
        future_words: List[VocabularyItem] = []

        for item in filtered:
            progress = self.word_progress.get(item.key)
            if progress is None:
                new_words.append(item)
            elif progress.is_due(now):
                due_words.append(item)
            elif progress.state is WordState.NEW and progress.total_attempts == 0:
                new_words.append(item)
            else:
                future_words.append(item)

        # Prioritize due cards, then new cards, then future cards
        due_limit = math.ceil(round(size * settings.scheduler.due_ratio, 6))
        result = self._shuffle(due_words)[:due_limit]
        for bucket in (new_words, future_words):
            if len(result) >= size:
                break
            needed = size - len(result)
            result.extend(self._shuffle(bucket)[:needed])

        result = self._shuffle(result)

        batch = WordBatch(
            items=result,
            due_count=sum(1 for item in result if self._is_due(item, now)),
            due_total=len(due_words),
            new_total=len(new_words),
        )
        logger.info(
            f"Selected batch of {len(batch)} words ({batch.due_count} due, "
            f"{len(due_words)} due / {len(new_words)} new / {len(future_words)} future available)"
        )
        batches_selected.inc()
        return batch

    def due_counts(self, category_filter: CategoryFilter = ALL) -> DueCounts:
        """Count filtered items per coarse learning bucket."""
        counts = DueCounts()
        for item in self._filter_items(category_filter):
            progress = self.word_progress.get(item.key)
            if progress is None:
                continue
            bucket = progress.state.bucket
            setattr(counts, bucket, getattr(counts, bucket) + 1)
        return counts

    def get_word_state(self, item_key: str) -> WordState:
        """Get the state of an item, NEW if it has no progress."""
        progress = self.word_progress.get(item_key)
        return progress.state if progress else WordState.NEW

    def get_study_stats(self) -> StudyStats:
        """Aggregate statistics over all progress records."""
        stats = StudyStats(total_words=len(self.word_progress))
        total_attempts = 0
        total_correct = 0

        for progress in self.word_progress.values():
            if progress.total_attempts == 0:
                continue
            stats.studied_words += 1
            total_attempts += progress.total_attempts
            total_correct += progress.correct_attempts
            if progress.state is WordState.MASTERED:
                stats.mastered_words += 1
            stats.longest_streak = max(stats.longest_streak, progress.correct_streak)
            if progress.correct_streak > 0:
                stats.current_streak += 1

        if total_attempts > 0:
            stats.average_accuracy = round(total_correct / total_attempts * 100)
        return stats

    def get_retention_rate(self, days: int = 7) -> int:
        """Percent of recently reviewed words whose streak is still positive."""
        cutoff = self.clock() - days * DAY_MS
        recent = [
            progress for progress in self.word_progress.values()
            if progress.last_reviewed_at is not None and progress.last_reviewed_at > cutoff
        ]
        if not recent:
            return 0
        retained = sum(1 for progress in recent if progress.correct_streak > 0)
        return round(retained / len(recent) * 100)

    def get_predicted_mastery(self, item_key: str) -> MasteryPrediction:
        """Estimate confidence and days until an item is mastered."""
        progress = self.word_progress.get(item_key)
        if progress is None or progress.total_attempts == 0:
            return MasteryPrediction(confidence=0, estimated_days=None)
        if progress.state is WordState.MASTERED:
            return MasteryPrediction(confidence=100, estimated_days=0)

        accuracy = progress.correct_attempts / progress.total_attempts
        fast, slow, threshold = MASTERY_ESTIMATES[progress.state]
        return MasteryPrediction(
            confidence=min(100, round(accuracy * 100)),
            estimated_days=fast if accuracy > threshold else slow,
        )

    def reset_word_progress(self, item_key: str) -> bool:
        """Reset one item to a fresh NEW record, keeping its creation time."""
        progress = self.word_progress.get(item_key)
        if progress is None:
            return False

        fresh = WordProgress.new(self.clock())
        fresh.created_at = progress.created_at
        self.word_progress[item_key] = fresh
        return self._save()

    def reset_all_progress(self) -> bool:
        """Reset every active item to NEW."""
        now = self.clock()
        self.word_progress = {item.key: WordProgress.new(now) for item in self.items}
        logger.info(f"Reset progress for {len(self.word_progress)} words")
        return self._save()

    def export_progress(self) -> Dict[str, Any]:
        """Export progress together with the schedule it was built on."""
        return {
            "word_progress": {key: progress.to_data() for key, progress in self.word_progress.items()},
            "intervals": dict(self.intervals),
            "state_progressions": {
                state.value: {"correct": on_correct.value, "incorrect": on_incorrect.value}
                for state, (on_correct, on_incorrect) in STATE_PROGRESSIONS.items()
            },
            "export_date": datetime.now(UTC).isoformat(),
        }

    def import_progress(self, data: Dict[str, Any]) -> bool:
        """Replace progress with an exported document. Returns False if unusable."""
        if not isinstance(data, dict) or not isinstance(data.get("word_progress"), dict):
            logger.error("Import rejected: no word_progress mapping")
            return False

        imported = {}
        for key, record in data["word_progress"].items():
            try:
                imported[key] = WordProgress.from_data(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed imported progress for {key}: {e}")

        self.word_progress = imported
        self.is_loaded = True
        logger.info(f"Imported progress for {len(imported)} words")
        if self.items:
            self.initialize(self.items)
            return True
        return self._save()
