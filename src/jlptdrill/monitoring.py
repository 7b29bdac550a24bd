"""Monitoring configuration for the drill scheduler."""
from prometheus_client import Counter, Gauge, start_http_server

# Answer metrics
answers_recorded = Counter(
    "jlptdrill_answers_recorded_total",
    "Total number of answers applied to progress state",
    ["engine", "outcome"],
)

missing_progress = Counter(
    "jlptdrill_missing_progress_total",
    "Answers submitted for items without a progress record",
    ["engine"],
)

# Selection metrics
batches_selected = Counter(
    "jlptdrill_batches_selected_total",
    "Total number of word batches composed",
)

questions_selected = Counter(
    "jlptdrill_questions_selected_total",
    "Total number of particle questions generated",
    ["level"],
)

quiz_answers = Counter(
    "jlptdrill_quiz_answers_total",
    "Vocabulary quiz answers by word category",
    ["category", "outcome"],
)

cooldown_resets = Counter(
    "jlptdrill_cooldown_resets_total",
    "Times the particle candidate pool was empty and cooldowns were reset",
)

difficulty_tier = Gauge(
    "jlptdrill_difficulty_tier",
    "Current particle quiz difficulty tier index (0 = beginner)",
)

# Persistence metrics
corrupt_state_loads = Counter(
    "jlptdrill_corrupt_state_loads_total",
    "Persisted blobs that could not be decoded and were discarded",
    ["key"],
)

persistence_errors = Counter(
    "jlptdrill_persistence_errors_total",
    "Total number of failed store reads and writes",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
