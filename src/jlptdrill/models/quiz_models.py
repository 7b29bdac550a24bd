"""Models for values handed out by the schedulers."""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from jlptdrill.models.content_models import ParticleExample, VocabularyItem
from jlptdrill.models.progress_models import WordProgress


@dataclass
class WordBatch:
    """An ordered study batch plus bookkeeping for statistics."""
    items: List[VocabularyItem] = field(default_factory=list)
    due_count: int = 0  # returned items that were due
    due_total: int = 0
    new_total: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[VocabularyItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> VocabularyItem:
        return self.items[index]

    @property
    def keys(self) -> List[str]:
        return [item.key for item in self.items]


@dataclass
class DueCounts:
    """Counts of items per coarse learning bucket."""
    new: int = 0
    learning: int = 0
    review: int = 0
    mastered: int = 0

    @property
    def total(self) -> int:
        return self.new + self.learning + self.review + self.mastered


@dataclass
class StudyStats:
    """Aggregate statistics across all word progress records."""
    total_words: int = 0
    studied_words: int = 0
    mastered_words: int = 0
    average_accuracy: int = 0  # percent
    longest_streak: int = 0
    current_streak: int = 0  # words with a positive streak


@dataclass
class MasteryPrediction:
    """Rough estimate of how close a word is to mastery."""
    confidence: int
    estimated_days: Optional[int]


@dataclass
class ParticleQuestion:
    """A multiple choice particle question."""
    particle: str
    reading: str
    function: str
    description: str
    example: ParticleExample
    options: List[str]
    key: str  # particle#index of the example


@dataclass
class AnswerResult:
    """Outcome of validating a particle answer."""
    is_correct: bool
    correct_particle: str
    explanation: str
    reading: str = ""
    function: str = ""
    description: str = ""
    has_question: bool = True

    @classmethod
    def no_active_question(cls) -> "AnswerResult":
        return cls(
            is_correct=False,
            correct_particle="?",
            explanation="No active question",
            has_question=False,
        )


@dataclass
class WordQuestion:
    """A multiple choice vocabulary question.

    ``jp-to-en`` shows the Japanese word and asks for its meaning,
    ``en-to-jp`` shows the meaning and asks for the word.
    """
    item: VocabularyItem
    direction: str
    options: List[VocabularyItem]
    level: str

    @property
    def prompt(self) -> str:
        return self.item.japanese if self.direction == "jp-to-en" else self.item.meaning

    def option_label(self, option: VocabularyItem) -> str:
        return option.meaning if self.direction == "jp-to-en" else option.japanese


@dataclass
class WordAnswerResult:
    """Outcome of validating a vocabulary quiz answer."""
    is_correct: bool
    correct_item: Optional[VocabularyItem]
    progress: Optional[WordProgress] = None
    batch_complete: bool = False
    has_question: bool = True

    @classmethod
    def no_active_question(cls) -> "WordAnswerResult":
        return cls(is_correct=False, correct_item=None, has_question=False)
