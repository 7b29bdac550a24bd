"""Tests for the word scheduler."""
import json
import random

import pytest
from faker import Faker

from jlptdrill.config import DAY_MS, MINUTE_MS
from jlptdrill.models.content_models import VocabularyItem
from jlptdrill.models.progress_models import WordState
from jlptdrill.services.persistence import encode_blob
from jlptdrill.services.store import MemoryStore
from jlptdrill.services.word_scheduler import WordScheduler
from jlptdrill.tests.conftest import FailingStore, FakeClock, make_vocabulary

KEY = "jlpt-word-progress"


@pytest.fixture
def items(fake: Faker):
    return make_vocabulary(20, fake)


@pytest.fixture
def scheduler(store: MemoryStore, clock: FakeClock, rng: random.Random, items) -> WordScheduler:
    scheduler = WordScheduler(store, clock=clock, rng=rng, storage_key=KEY)
    scheduler.initialize(items)
    return scheduler


@pytest.mark.parametrize(
    "state, is_correct, expected, interval",
    [
        (WordState.NEW, True, WordState.LEARNING_1, 30 * MINUTE_MS),
        (WordState.NEW, False, WordState.NEW, 0),
        (WordState.LEARNING_1, True, WordState.LEARNING_2, DAY_MS),
        (WordState.LEARNING_1, False, WordState.NEW, 0),
        (WordState.LEARNING_2, True, WordState.REVIEW_1, 3 * DAY_MS),
        (WordState.LEARNING_2, False, WordState.LEARNING_1, 30 * MINUTE_MS),
        (WordState.REVIEW_1, True, WordState.REVIEW_2, 7 * DAY_MS),
        (WordState.REVIEW_1, False, WordState.LEARNING_1, 30 * MINUTE_MS),
        (WordState.REVIEW_2, True, WordState.MASTERED, 14 * DAY_MS),
        (WordState.REVIEW_2, False, WordState.LEARNING_1, 30 * MINUTE_MS),
        (WordState.MASTERED, True, WordState.MASTERED, 14 * DAY_MS),
        (WordState.MASTERED, False, WordState.REVIEW_1, 3 * DAY_MS),
    ],
)
def test_transition_table(scheduler: WordScheduler, clock: FakeClock, items, state, is_correct, expected, interval):
    """Test every state/outcome pair of the transition table."""
    key = items[0].key
    scheduler.get_progress(key).state = state

    progress = scheduler.record_answer(key, is_correct)

    assert progress.state is expected
    assert progress.next_review_at == clock.now + interval
    assert progress.last_reviewed_at == clock.now


def test_counters_are_monotonic(scheduler: WordScheduler, items) -> None:
    """Test attempts grow by one per answer and correct never exceeds total."""
    key = items[0].key
    outcomes = random.Random(7).choices([True, False], k=40)
    for expected_total, outcome in enumerate(outcomes, start=1):
        progress = scheduler.record_answer(key, outcome)
        assert progress.total_attempts == expected_total
        assert progress.correct_attempts <= progress.total_attempts
    assert progress.correct_attempts == sum(outcomes)


def test_streak_resets_on_mistake(scheduler: WordScheduler, items) -> None:
    """Test correct answers extend the streak and a mistake clears it."""
    key = items[0].key
    for expected in (1, 2, 3):
        assert scheduler.record_answer(key, True).correct_streak == expected
    assert scheduler.record_answer(key, False).correct_streak == 0
    assert scheduler.record_answer(key, True).correct_streak == 1


def test_record_answer_unknown_key(scheduler: WordScheduler, store: MemoryStore) -> None:
    """Test answering an unknown item is a logged no-op."""
    before = store.get(KEY)
    assert scheduler.record_answer("存在しない", True) is None
    assert store.get(KEY) == before


def test_initialize_creates_and_prunes(store: MemoryStore, clock: FakeClock, items) -> None:
    """Test missing records are created due now and stale ones removed."""
    scheduler = WordScheduler(store, clock=clock, storage_key=KEY)
    scheduler.initialize(items)

    assert set(scheduler.word_progress) == {item.key for item in items}
    for progress in scheduler.word_progress.values():
        assert progress.state is WordState.NEW
        assert progress.next_review_at == clock.now
        assert progress.created_at == clock.now

    scheduler.initialize(items[:5])
    assert set(scheduler.word_progress) == {item.key for item in items[:5]}
    assert set(json.loads(store.get(KEY))["data"]) == {item.key for item in items[:5]}


def test_initialize_is_idempotent(scheduler: WordScheduler, clock: FakeClock, items) -> None:
    """Test calling initialize twice changes nothing."""
    scheduler.record_answer(items[0].key, True)
    before = {key: progress.to_data() for key, progress in scheduler.word_progress.items()}

    clock.advance(MINUTE_MS)
    scheduler.initialize(items)
    after = {key: progress.to_data() for key, progress in scheduler.word_progress.items()}

    assert after == before


def test_progress_survives_new_instance(scheduler: WordScheduler, store: MemoryStore, clock: FakeClock, items) -> None:
    """Test persisted progress is picked up by a fresh scheduler."""
    scheduler.record_answer(items[0].key, True)

    reloaded = WordScheduler(store, clock=clock, storage_key=KEY)
    reloaded.initialize(items)

    progress = reloaded.get_progress(items[0].key)
    assert progress.state is WordState.LEARNING_1
    assert progress.total_attempts == 1


def test_corrupt_state_is_rebuilt(clock: FakeClock, items) -> None:
    """Test an unparsable blob is treated as empty state."""
    store = MemoryStore({KEY: "{not json"})
    scheduler = WordScheduler(store, clock=clock, storage_key=KEY)
    scheduler.initialize(items)

    assert len(scheduler.word_progress) == len(items)
    assert json.loads(store.get(KEY))["version"] == 1


def test_malformed_record_is_dropped(clock: FakeClock, items) -> None:
    """Test a single bad record is rebuilt while good ones are kept."""
    good = {
        "state": "review_1",
        "next_review_at": clock.now + DAY_MS,
        "created_at": clock.now,
        "total_attempts": 4,
        "correct_attempts": 3,
        "correct_streak": 3,
    }
    bad = {"state": "sleeping", "next_review_at": 0, "created_at": 0}
    store = MemoryStore({KEY: encode_blob({items[0].key: good, items[1].key: bad})})

    scheduler = WordScheduler(store, clock=clock, storage_key=KEY)
    scheduler.initialize(items)

    assert scheduler.get_word_state(items[0].key) is WordState.REVIEW_1
    assert scheduler.get_word_state(items[1].key) is WordState.NEW
    assert scheduler.get_progress(items[1].key).total_attempts == 0


def test_write_failure_keeps_memory_state(clock: FakeClock, items) -> None:
    """Test a failing store does not roll back or raise."""
    scheduler = WordScheduler(FailingStore(), clock=clock, storage_key=KEY)
    scheduler.initialize(items)

    progress = scheduler.record_answer(items[0].key, True)

    assert progress.state is WordState.LEARNING_1
    assert scheduler.get_word_state(items[0].key) is WordState.LEARNING_1


def test_read_failure_starts_empty(clock: FakeClock, items) -> None:
    """Test an unreadable store degrades to an empty rebuild."""
    scheduler = WordScheduler(FailingStore(fail_reads=True), clock=clock, storage_key=KEY)
    scheduler.initialize(items)
    assert len(scheduler.word_progress) == len(items)


@pytest.mark.parametrize("size", [1, 3, 10, 20, 50])
@pytest.mark.parametrize("category_filter", ["all", {"noun"}, {"verb", "na-adjective"}])
def test_batch_bound_and_uniqueness(scheduler: WordScheduler, items, size, category_filter) -> None:
    """Test batches never exceed size, repeat items or leave the filter."""
    for item in items[::3]:
        scheduler.record_answer(item.key, True)

    batch = scheduler.select_batch(size, category_filter)

    allowed = items if category_filter == "all" else [i for i in items if i.category in category_filter]
    assert len(batch) <= size
    assert len(set(batch.keys)) == len(batch)
    assert set(batch.keys) <= {item.key for item in allowed}


def test_batch_zero_size(scheduler: WordScheduler) -> None:
    """Test a zero-size request returns an empty batch."""
    assert len(scheduler.select_batch(0)) == 0


def test_batch_filter_fallback(scheduler: WordScheduler, items) -> None:
    """Test an over-restrictive filter falls back to all items."""
    batch = scheduler.select_batch(50, {"adverb"})
    assert len(batch) > 0
    assert set(batch.keys) <= {item.key for item in items}


def test_batch_prefers_due_items(scheduler: WordScheduler, items) -> None:
    """Test due items fill at most 60% and future items fill the rest."""
    for item in items[:10]:
        scheduler.record_answer(item.key, True)

    batch = scheduler.select_batch(10)

    future_keys = {item.key for item in items[:10]}
    assert len(batch) == 10
    assert batch.due_count == 6
    assert batch.due_total == 10
    assert len([key for key in batch.keys if key in future_keys]) == 4


def test_batch_fills_new_before_future(store: MemoryStore, clock: FakeClock, rng: random.Random, fake: Faker) -> None:
    """Test unattempted items not yet due are taken ahead of answered ones."""
    items = make_vocabulary(6, fake)
    scheduler = WordScheduler(store, clock=clock, rng=rng, storage_key=KEY)
    scheduler.initialize(items)
    for item in items[:3]:
        scheduler.record_answer(item.key, True)
    for item in items[3:]:
        scheduler.get_progress(item.key).next_review_at = clock.now + 1_000_000_000

    batch = scheduler.select_batch(3)

    assert set(batch.keys) == {item.key for item in items[3:]}
    assert batch.new_total == 3
    assert batch.due_total == 0
    assert batch.due_count == 0


def test_batch_small_set_is_not_padded(store: MemoryStore, clock: FakeClock, rng: random.Random, fake: Faker) -> None:
    """Test a small active set is returned without duplicates."""
    scheduler = WordScheduler(store, clock=clock, rng=rng, storage_key=KEY)
    scheduler.initialize(make_vocabulary(2, fake))
    batch = scheduler.select_batch(10)
    assert len(batch) == 2


def test_end_to_end_due_filtering(store: MemoryStore, clock: FakeClock, rng: random.Random) -> None:
    """Test an answered word leaves the due bucket until its interval passes."""
    items = [
        VocabularyItem("A", "a", "a", "noun"),
        VocabularyItem("B", "b", "b", "verb"),
        VocabularyItem("C", "c", "c", "noun"),
    ]
    scheduler = WordScheduler(store, clock=clock, rng=rng, storage_key=KEY)
    scheduler.initialize(items)

    batch = scheduler.select_batch(10, "all")
    assert sorted(batch.keys) == ["A", "B", "C"]
    assert batch.due_count == 3

    progress = scheduler.record_answer("A", True)
    assert progress.state is WordState.LEARNING_1
    assert progress.next_review_at == clock.now + 30 * MINUTE_MS

    batch = scheduler.select_batch(10, "all")
    assert batch.due_total == 2
    assert batch.due_count == 2
    assert not scheduler.get_progress("A").is_due(clock.now)

    clock.advance(30 * MINUTE_MS)
    assert scheduler.select_batch(10, "all").due_count == 3


def test_due_counts(scheduler: WordScheduler, items) -> None:
    """Test items are counted in their coarse bucket."""
    scheduler.record_answer(items[0].key, True)  # learning_1
    scheduler.get_progress(items[1].key).state = WordState.REVIEW_2
    scheduler.get_progress(items[2].key).state = WordState.MASTERED

    counts = scheduler.due_counts()
    assert (counts.new, counts.learning, counts.review, counts.mastered) == (17, 1, 1, 1)
    assert counts.total == len(items)

    nouns = scheduler.due_counts({"noun"})
    assert nouns.total == len([item for item in items if item.category == "noun"])


def test_study_stats_and_retention(scheduler: WordScheduler, clock: FakeClock, items) -> None:
    """Test accuracy, streak and retention statistics."""
    scheduler.record_answer(items[0].key, True)
    scheduler.record_answer(items[0].key, True)
    scheduler.record_answer(items[1].key, False)
    scheduler.record_answer(items[2].key, True)

    stats = scheduler.get_study_stats()
    assert stats.total_words == len(items)
    assert stats.studied_words == 3
    assert stats.average_accuracy == 75
    assert stats.longest_streak == 2
    assert stats.current_streak == 2
    assert scheduler.get_retention_rate() == 67

    clock.advance(8 * DAY_MS)
    assert scheduler.get_retention_rate() == 0


def test_predicted_mastery(scheduler: WordScheduler, items) -> None:
    """Test mastery predictions for unseen, learning and mastered words."""
    assert scheduler.get_predicted_mastery(items[0].key).estimated_days is None

    scheduler.record_answer(items[0].key, True)
    prediction = scheduler.get_predicted_mastery(items[0].key)
    assert prediction.confidence == 100
    assert prediction.estimated_days == 5

    scheduler.get_progress(items[0].key).state = WordState.MASTERED
    assert scheduler.get_predicted_mastery(items[0].key).estimated_days == 0


def test_reset_word_progress(scheduler: WordScheduler, clock: FakeClock, items) -> None:
    """Test resetting a single word and all words."""
    scheduler.record_answer(items[0].key, True)
    clock.advance(MINUTE_MS)

    assert scheduler.reset_word_progress(items[0].key) is True
    progress = scheduler.get_progress(items[0].key)
    assert progress.state is WordState.NEW
    assert progress.total_attempts == 0
    assert progress.next_review_at == clock.now
    assert scheduler.reset_word_progress("missing") is False

    scheduler.record_answer(items[1].key, True)
    scheduler.reset_all_progress()
    assert scheduler.get_study_stats().studied_words == 0


def test_export_import_progress(scheduler: WordScheduler, store: MemoryStore, clock: FakeClock, items) -> None:
    """Test an exported document restores progress into another scheduler."""
    scheduler.record_answer(items[0].key, True)
    exported = scheduler.export_progress()
    assert exported["state_progressions"]["new"] == {"correct": "learning_1", "incorrect": "new"}
    assert exported["intervals"]["learning_1"] == 30 * MINUTE_MS

    other = WordScheduler(MemoryStore(), clock=clock, storage_key=KEY)
    other.initialize(items)
    assert other.import_progress(json.loads(json.dumps(exported))) is True
    assert other.get_word_state(items[0].key) is WordState.LEARNING_1
    assert len(other.word_progress) == len(items)

    assert other.import_progress({"nothing": True}) is False
