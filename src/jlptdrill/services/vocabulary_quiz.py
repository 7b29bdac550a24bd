"""Multiple choice vocabulary quiz on top of the word scheduler."""
import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from jlptdrill.config import settings
from jlptdrill.models.content_models import VocabularyItem
from jlptdrill.models.quiz_models import WordAnswerResult, WordQuestion
from jlptdrill.monitoring import quiz_answers
from jlptdrill.services.persistence import load_blob, save_blob
from jlptdrill.services.store import KeyValueStore
from jlptdrill.services.word_scheduler import WordScheduler

logger = logging.getLogger(__name__)


def _counter(record: Any, name: str) -> int:
    value = int(record.get(name, 0))
    if value < 0:
        raise ValueError(f"{name} cannot be negative")
    return value


class VocabularyQuiz:
    """Asks for the meaning of a word (or the word for a meaning).

    Answers go through the word scheduler like flashcard answers. Quiz
    attempts are also counted per level and category, and those counters
    are persisted together with the chosen quiz mode.
    """

    def __init__(
        self,
        store: KeyValueStore,
        rng: Optional[random.Random] = None,
        storage_key: Optional[str] = None,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.config = settings.quiz
        self.storage_key = storage_key or self.config.quiz_stats_key
        self.mode = self.config.mode
        self.category_stats: Dict[str, Dict[str, Dict[str, int]]] = {}
        self.current_question: Optional[WordQuestion] = None
        self.answered = 0
        self.is_loaded = False

    def _load(self) -> None:
        data = load_blob(self.store, self.storage_key)
        if not isinstance(data, dict):
            return

        if data.get("mode") in self.config.modes:
            self.mode = data["mode"]

        levels = data.get("category_stats")
        if not isinstance(levels, dict):
            return
        for level, categories in levels.items():
            if not isinstance(categories, dict):
                logger.warning(f"Dropping malformed quiz stats for level {level}")
                continue
            for category, record in categories.items():
                try:
                    self.category_stats.setdefault(level, {})[category] = {
                        "quiz_attempts": _counter(record, "quiz_attempts"),
                        "quiz_correct": _counter(record, "quiz_correct"),
                    }
                except (AttributeError, TypeError, ValueError) as e:
                    logger.warning(f"Dropping malformed quiz stats for {level}/{category}: {e}")

    def _save(self) -> bool:
        return save_blob(self.store, self.storage_key, {
            "mode": self.mode,
            "category_stats": self.category_stats,
        })

    def initialize(self) -> None:
        """Load the persisted mode and counters once."""
        if not self.is_loaded:
            self._load()
            self.is_loaded = True

    def set_mode(self, mode: str) -> None:
        """Change the question direction mode and persist it."""
        if mode not in self.config.modes:
            raise ValueError(f"Unknown quiz mode: {mode}")
        self.mode = mode
        self._save()

    def _direction(self) -> str:
        if self.mode == "mixed-challenge":
            return "jp-to-en" if self.rng.random() < 0.5 else "en-to-jp"
        return self.mode

    def _generate_options(self, item: VocabularyItem, pool: Sequence[VocabularyItem]) -> List[VocabularyItem]:
        count = self.config.option_count - 1
        others = list({other.key: other for other in pool if other.key != item.key}.values())
        same_category = [other for other in others if other.category == item.category]
        options = self.rng.sample(same_category, min(count, len(same_category)))

        # Not enough words in the category, fill from the rest of the level
        if len(options) < count:
            rest = [other for other in others if other.category != item.category]
            options.extend(self.rng.sample(rest, min(count - len(options), len(rest))))

        options.append(item)
        self.rng.shuffle(options)
        return options

    def start_question(self, item: VocabularyItem, pool: Sequence[VocabularyItem], level: str) -> WordQuestion:
        """Build a question for ``item`` with distractors drawn from ``pool``."""
        self.initialize()
        self.current_question = WordQuestion(
            item=item,
            direction=self._direction(),
            options=self._generate_options(item, pool),
            level=level,
        )
        logger.debug(f"Quiz question for {item.key} ({self.current_question.direction})")
        return self.current_question

    def validate_answer(self, selected_key: str, scheduler: WordScheduler) -> WordAnswerResult:
        """Check the selected option by its key and record the answer."""
        question = self.current_question
        if question is None:
            logger.warning("Quiz answer submitted with no active question")
            return WordAnswerResult.no_active_question()
        self.current_question = None

        is_correct = selected_key == question.item.key
        progress = scheduler.record_answer(question.item.key, is_correct)

        stats = self.category_stats.setdefault(question.level, {}).setdefault(
            question.item.category, {"quiz_attempts": 0, "quiz_correct": 0}
        )
        stats["quiz_attempts"] += 1
        if is_correct:
            stats["quiz_correct"] += 1
        self.answered += 1

        quiz_answers.labels(
            category=question.item.category, outcome="correct" if is_correct else "incorrect"
        ).inc()
        self._save()

        return WordAnswerResult(
            is_correct=is_correct,
            correct_item=question.item,
            progress=progress,
            batch_complete=self.is_batch_complete(),
        )

    def is_batch_complete(self) -> bool:
        """True after every ``batch_size`` answered questions."""
        return self.answered > 0 and self.answered % self.config.batch_size == 0

    def get_category_stats(self, level: str) -> Dict[str, Dict[str, int]]:
        """Quiz attempts, correct answers and accuracy per category of a level."""
        result = {}
        for category, stats in self.category_stats.get(level, {}).items():
            attempts = stats["quiz_attempts"]
            result[category] = {
                "quiz_attempts": attempts,
                "quiz_correct": stats["quiz_correct"],
                "accuracy": round(stats["quiz_correct"] / attempts * 100) if attempts else 0,
            }
        return result

    def reset_stats(self, level: Optional[str] = None) -> bool:
        """Forget quiz counters of one level, or of every level."""
        if level is None:
            self.category_stats = {}
        else:
            self.category_stats.pop(level, None)
        self.answered = 0
        logger.info(f"Quiz stats reset for {level or 'all levels'}")
        return self._save()
