"""Weighted question selection for the particle quiz."""
import logging
import random
from collections import deque
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from jlptdrill.config import HOUR_MS, MINUTE_MS, settings
from jlptdrill.models.content_models import ParticleDefinition, ParticleExample
from jlptdrill.models.progress_models import (
    ExampleProgress,
    ParticleProgress,
    example_key,
    next_particle_state,
)
from jlptdrill.models.quiz_models import AnswerResult, ParticleQuestion
from jlptdrill.monitoring import answers_recorded, cooldown_resets, missing_progress, questions_selected
from jlptdrill.services.clock import Clock, system_clock
from jlptdrill.services.difficulty import DifficultyTracker
from jlptdrill.services.persistence import load_blob, save_blob
from jlptdrill.services.store import KeyValueStore

logger = logging.getLogger(__name__)

# (definition, example index, example, example key)
Candidate = Tuple[ParticleDefinition, int, ParticleExample, str]


def _mapping(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


class RecencyWindow:
    """Fixed-capacity FIFO of recently shown keys with O(1) membership."""

    def __init__(self, capacity: int = 8, keys: Iterable[str] = ()):
        self.capacity = capacity
        self._order: deque = deque()
        self._members: set = set()
        for key in keys:
            self.push(key)

    def push(self, key: str) -> None:
        """Append a key, evicting the oldest beyond capacity."""
        if key in self._members:
            self._order.remove(key)
        else:
            self._members.add(key)
        self._order.append(key)
        while len(self._order) > self.capacity:
            self._members.discard(self._order.popleft())

    def clear(self) -> None:
        self._order.clear()
        self._members.clear()

    def to_list(self) -> List[str]:
        return list(self._order)

    def __contains__(self, key: object) -> bool:
        return key in self._members

    def __len__(self) -> int:
        return len(self._order)


class ParticleSelector:
    """Picks particle questions, favouring weak and long-unseen examples.

    Progress is kept at two levels: a coarse state per particle and attempt
    counters plus a cooldown per example sentence. Recently shown examples
    are excluded through a small recency window.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
        storage_key: Optional[str] = None,
        difficulty: Optional[DifficultyTracker] = None,
    ):
        self.store = store
        self.clock = clock
        self.rng = rng or random.Random()
        self.storage_key = storage_key or settings.particles.particle_progress_key
        self.config = settings.particles
        self.difficulty = difficulty or DifficultyTracker()

        self.particle_set: Dict[str, List[ParticleDefinition]] = {}
        self.definitions: Dict[str, ParticleDefinition] = {}
        self.particle_progress: Dict[str, ParticleProgress] = {}
        self.example_progress: Dict[str, ExampleProgress] = {}
        self.recently_shown = RecencyWindow(self.config.recency_window_size)
        self.current_question: Optional[ParticleQuestion] = None
        self.session_stats: Dict[str, Dict[str, int]] = {}
        self.is_loaded = False

    def _load(self) -> None:
        data = load_blob(self.store, self.storage_key)
        if data is None:
            return
        if not isinstance(data, dict):
            logger.warning(f"Particle progress in {self.storage_key} is not a mapping, starting fresh")
            return

        for particle, record in _mapping(data, "particle_progress").items():
            try:
                self.particle_progress[particle] = ParticleProgress.from_data(record)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed progress for particle {particle}: {e}")

        for key, record in _mapping(data, "example_progress").items():
            try:
                self.example_progress[key] = ExampleProgress.from_data(record)
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed progress for example {key}: {e}")

        recent = data.get("recently_shown") or []
        if isinstance(recent, list):
            self.recently_shown = RecencyWindow(
                self.config.recency_window_size,
                [key for key in recent if isinstance(key, str)],
            )

    def _save(self) -> bool:
        data = {
            "particle_progress": {p: progress.to_data() for p, progress in self.particle_progress.items()},
            "example_progress": {k: progress.to_data() for k, progress in self.example_progress.items()},
            "recently_shown": self.recently_shown.to_list(),
        }
        return save_blob(self.store, self.storage_key, data)

    def initialize(self, particle_set: Mapping[str, Sequence[ParticleDefinition]]) -> None:
        """Ensure every particle and example has progress, keeping history."""
        if not self.is_loaded:
            self._load()
            self.is_loaded = True

        self.particle_set = {level: list(definitions) for level, definitions in particle_set.items()}
        for definitions in self.particle_set.values():
            for definition in definitions:
                self.definitions.setdefault(definition.particle, definition)

        for definition in self.definitions.values():
            self.particle_progress.setdefault(definition.particle, ParticleProgress())
            for index in range(len(definition.examples)):
                self.example_progress.setdefault(example_key(definition.particle, index), ExampleProgress())

        logger.info(
            f"Particle progress initialized: {len(self.particle_progress)} particles, "
            f"{len(self.example_progress)} examples"
        )
        self._save()

    def candidate_particles(self, jlpt_level: str, difficulty_tier: Optional[str] = None) -> List[ParticleDefinition]:
        """Particles eligible at a level; the lowest tier only gets the first few."""
        particles = self.particle_set.get(jlpt_level, [])
        if self.difficulty.is_lowest(difficulty_tier):
            particles = particles[:self.config.beginner_particle_limit]
        return particles

    def _eligible_examples(self, particles: Sequence[ParticleDefinition], now: int) -> List[Candidate]:
        candidates = []
        for definition in particles:
            for index, example in enumerate(definition.examples):
                key = example_key(definition.particle, index)
                if key in self.recently_shown:
                    continue
                progress = self.example_progress.get(key)
                if progress is not None and progress.is_cooling_down(now):
                    continue
                candidates.append((definition, index, example, key))
        return candidates

    def eligible_keys(self, jlpt_level: str, difficulty_tier: Optional[str] = None) -> List[str]:
        """Keys of examples that could be asked right now."""
        particles = self.candidate_particles(jlpt_level, difficulty_tier)
        return [key for _, _, _, key in self._eligible_examples(particles, self.clock())]

    def _reset_cooldowns(self) -> None:
        for progress in self.example_progress.values():
            progress.cooldown_until = 0
        self.recently_shown.clear()

    def _weight(self, candidate: Candidate, now: int) -> float:
        definition, _, _, key = candidate
        particle = self.particle_progress.get(definition.particle) or ParticleProgress()
        example = self.example_progress.get(key) or ExampleProgress()

        particle_weight = max(0.1, 1 - particle.success_rate)
        example_weight = max(0.1, 1 - example.success_rate)
        if example.last_seen_at is None:
            time_weight = self.config.max_time_weight
        else:
            time_weight = min(self.config.max_time_weight, max(0, now - example.last_seen_at) / HOUR_MS)

        return (
            self.config.particle_weight * particle_weight
            + self.config.example_weight * example_weight
            + self.config.time_weight * time_weight
        )

    def _weighted_choice(self, candidates: Sequence[Candidate], weights: Sequence[float]) -> Candidate:
        total_weight = sum(weights)
        remaining = self.rng.uniform(0, total_weight)
        for candidate, weight in zip(candidates, weights):
            remaining -= weight
            if remaining <= 0:
                return candidate
        return candidates[-1]

    def _generate_options(self, correct: str, particles: Sequence[ParticleDefinition]) -> List[str]:
        option_count = self.config.option_count
        others = [p for p in dict.fromkeys(d.particle for d in particles) if p != correct]
        options = [correct] + self.rng.sample(others, min(option_count - 1, len(others)))

        # Not enough distractors at this level, borrow from the full set
        if len(options) < option_count:
            pool = [p for p in self.definitions if p not in options]
            options.extend(self.rng.sample(pool, min(option_count - len(options), len(pool))))

        self.rng.shuffle(options)
        return options

    def select_question(self, jlpt_level: str, difficulty_tier: Optional[str] = None) -> Optional[ParticleQuestion]:
        """Pick the next question, or None if the level has no examples."""
        particles = self.candidate_particles(jlpt_level, difficulty_tier)
        if not particles:
            logger.warning(f"No particles available for level {jlpt_level}")
            return None

        now = self.clock()
        candidates = self._eligible_examples(particles, now)
        if not candidates:
            logger.info(f"All {jlpt_level} examples cooling down, resetting cooldowns")
            cooldown_resets.inc()
            self._reset_cooldowns()
            candidates = self._eligible_examples(particles, now)
        if not candidates:
            logger.warning(f"No question available for level {jlpt_level}")
            return None

        weights = [self._weight(candidate, now) for candidate in candidates]
        definition, index, example, key = self._weighted_choice(candidates, weights)

        self.recently_shown.push(key)
        progress = self.example_progress.setdefault(key, ExampleProgress())
        progress.last_seen_at = now

        self.current_question = ParticleQuestion(
            particle=definition.particle,
            reading=definition.reading,
            function=definition.function,
            description=definition.description,
            example=example,
            options=self._generate_options(example.correct, particles),
            key=key,
        )
        logger.debug(f"Generated particle question {key} from {len(candidates)} candidates")
        questions_selected.labels(level=jlpt_level).inc()
        self._save()
        return self.current_question

    def validate_answer(self, selected_particle: str) -> AnswerResult:
        """Check an answer against the last question and update progress."""
        question = self.current_question
        if question is None:
            logger.warning("Answer submitted with no active question")
            return AnswerResult.no_active_question()
        self.current_question = None

        now = self.clock()
        is_correct = selected_particle == question.example.correct

        particle = self.particle_progress.get(question.particle)
        example = self.example_progress.get(question.key)
        if particle is None or example is None:
            logger.warning(f"No progress found for: {question.key}")
            missing_progress.labels(engine="particle").inc()
        else:
            particle.attempts += 1
            if is_correct:
                particle.correct += 1
            particle.last_seen_at = now
            particle.state = next_particle_state(
                particle.state, is_correct, particle.success_rate, particle.attempts
            )

            example.attempts += 1
            if is_correct:
                example.correct += 1
            cooldown = self.config.correct_cooldown_minutes if is_correct else self.config.incorrect_cooldown_minutes
            example.cooldown_until = now + cooldown * MINUTE_MS

        stats = self.session_stats.setdefault(question.particle, {"attempted": 0, "correct": 0})
        stats["attempted"] += 1
        if is_correct:
            stats["correct"] += 1
        self.difficulty.record(is_correct)

        answers_recorded.labels(engine="particle", outcome="correct" if is_correct else "incorrect").inc()
        self._save()

        return AnswerResult(
            is_correct=is_correct,
            correct_particle=question.example.correct,
            explanation=question.example.explanation,
            reading=question.reading,
            function=question.function,
            description=question.description,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Session counters, current tier and per-particle success rates."""
        particle_stats = {}
        for particle, progress in self.particle_progress.items():
            particle_stats[particle] = {
                "state": progress.state.value,
                "attempts": progress.attempts,
                "correct": progress.correct,
                "success_rate": round(progress.correct / progress.attempts * 100) if progress.attempts else 0,
            }
        return {
            "session": {
                "attempted": self.difficulty.attempted,
                "correct": self.difficulty.correct,
                "particles": {p: dict(stats) for p, stats in self.session_stats.items()},
            },
            "difficulty": self.difficulty.tier,
            "particle_progress": particle_stats,
        }

    def reset_progress(self) -> None:
        """Forget all particle history and start the session over."""
        self.particle_progress = {}
        self.example_progress = {}
        self.recently_shown.clear()
        self.current_question = None
        self.session_stats = {}
        self.difficulty.reset()
        self.is_loaded = True
        self.initialize(self.particle_set)
        logger.info("Particle quiz progress reset")
