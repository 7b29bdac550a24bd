"""Test configuration."""
import os
import random
from pathlib import Path
from typing import List, Optional

import pytest
from dotenv import load_dotenv
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from jlptdrill.models.content_models import ParticleDefinition, ParticleExample, VocabularyItem
from jlptdrill.services.store import KeyValueStore, MemoryStore, StoreError

CATEGORIES = ["noun", "verb", "i-adjective", "na-adjective"]

START_MS = 1_700_000_000_000


class FakeClock:
    """Controllable clock returning epoch milliseconds."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FailingStore(KeyValueStore):
    """Store whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.data = {}

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StoreError("disk unavailable")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StoreError("quota exceeded")
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


def make_vocabulary(count: int, fake: Faker, categories: List[str] = CATEGORIES) -> List[VocabularyItem]:
    """Build items with unique keys, cycling through categories."""
    return [
        VocabularyItem(
            japanese=f"{fake.word()}{index}",
            reading=fake.word(),
            meaning=fake.word(),
            category=categories[index % len(categories)],
        )
        for index in range(count)
    ]


def make_particle(particle: str, examples: int = 2, level: str = "N5") -> ParticleDefinition:
    """Build a particle definition with simple numbered examples."""
    return ParticleDefinition(
        particle=particle,
        reading=particle,
        function=f"{particle} function",
        description=f"{particle} description",
        examples=[
            ParticleExample(
                sentence=f"文{index}＿です",
                english=f"sentence {index}",
                correct=particle,
                options=[particle],
                explanation=f"{particle} explanation {index}",
                jlpt_level=level,
            )
            for index in range(examples)
        ],
    )


@pytest.fixture
def fake() -> Faker:
    fake = Faker("ja_JP")
    fake.seed_instance(1234)
    return fake


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def particle_set():
    """Two levels: N5 with seven particles, N4 with one."""
    n5 = [make_particle(p) for p in ["は", "が", "を", "に", "で", "から", "まで"]]
    n4 = [make_particle("より", level="N4")]
    return {"N5": n5, "N4": n4}
