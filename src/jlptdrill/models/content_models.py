"""Static study content: vocabulary items and particle definitions."""
from dataclasses import dataclass, field
from typing import List

BLANK = "＿"


@dataclass(frozen=True)
class VocabularyItem:
    """A vocabulary card. ``japanese`` is its natural key."""
    japanese: str
    reading: str
    meaning: str
    category: str

    @property
    def key(self) -> str:
        return self.japanese


@dataclass(frozen=True)
class ParticleExample:
    """A practice sentence with one blank to be filled by ``correct``."""
    sentence: str
    english: str
    correct: str
    options: List[str]
    explanation: str
    jlpt_level: str = "N5"
    difficulty: str = "beginner"
    category: str = "general"

    def filled(self, particle: str = None) -> str:
        """Return the sentence with the blank replaced."""
        return self.sentence.replace(BLANK, particle or self.correct, 1)


@dataclass(frozen=True)
class ParticleDefinition:
    """A particle with its reading, grammatical function and examples."""
    particle: str
    reading: str
    function: str
    description: str
    examples: List[ParticleExample] = field(default_factory=list)
