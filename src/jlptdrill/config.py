"""Configuration settings for the drill scheduler."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

# Word scheduler settings
LEARNING_INTERVALS = {
    "new": 0,
    "learning_1": 30 * MINUTE_MS,
    "learning_2": DAY_MS,
    "review_1": 3 * DAY_MS,
    "review_2": 7 * DAY_MS,
    "mastered": 14 * DAY_MS,
}

# Vocabulary quiz settings
QUIZ_MODES = ["jp-to-en", "en-to-jp", "mixed-challenge"]

# Particle quiz settings
DIFFICULTY_TIERS = ["beginner", "intermediate", "advanced"]


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///jlptdrill.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class SchedulerSettings:
    """Word scheduler settings."""
    deck_size: int = int(os.getenv("DECK_SIZE", "50"))
    due_ratio: float = float(os.getenv("DUE_RATIO", "0.6"))
    interleave_swap_ratio: float = float(os.getenv("INTERLEAVE_SWAP_RATIO", "0.15"))
    word_progress_key: str = os.getenv("WORD_PROGRESS_KEY", "jlpt-word-progress")
    learning_intervals: dict[str, int] = field(default_factory=lambda: dict(LEARNING_INTERVALS))


@dataclass
class ParticleSettings:
    """Particle quiz selection settings."""
    recency_window_size: int = int(os.getenv("RECENCY_WINDOW_SIZE", "8"))
    beginner_particle_limit: int = int(os.getenv("BEGINNER_PARTICLE_LIMIT", "5"))
    correct_cooldown_minutes: int = int(os.getenv("CORRECT_COOLDOWN_MINUTES", "30"))
    incorrect_cooldown_minutes: int = int(os.getenv("INCORRECT_COOLDOWN_MINUTES", "10"))
    option_count: int = int(os.getenv("OPTION_COUNT", "4"))
    particle_progress_key: str = os.getenv("PARTICLE_PROGRESS_KEY", "jlpt-particle-progress")
    particle_weight: float = 0.4
    example_weight: float = 0.4
    time_weight: float = 0.2
    max_time_weight: float = 2.0


@dataclass
class DifficultySettings:
    """Session difficulty adjustment thresholds."""
    promote_streak: int = int(os.getenv("DIFFICULTY_PROMOTE_STREAK", "5"))
    promote_rate: float = float(os.getenv("DIFFICULTY_PROMOTE_RATE", "0.8"))
    demote_streak: int = int(os.getenv("DIFFICULTY_DEMOTE_STREAK", "3"))
    demote_rate: float = float(os.getenv("DIFFICULTY_DEMOTE_RATE", "0.4"))
    tiers: list[str] = field(default_factory=lambda: list(DIFFICULTY_TIERS))


@dataclass
class QuizSettings:
    """Vocabulary multiple choice quiz settings."""
    mode: str = os.getenv("QUIZ_MODE", "jp-to-en")
    option_count: int = int(os.getenv("QUIZ_OPTION_COUNT", "4"))
    batch_size: int = int(os.getenv("QUIZ_BATCH_SIZE", "10"))
    quiz_stats_key: str = os.getenv("QUIZ_STATS_KEY", "jlpt-quiz-stats")
    modes: list[str] = field(default_factory=lambda: list(QUIZ_MODES))


@dataclass
class StudySettings:
    """Study session settings."""
    default_level: str = os.getenv("DEFAULT_LEVEL", "N5")


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_scheduler_settings() -> SchedulerSettings:
    """Get word scheduler settings."""
    return SchedulerSettings()


def get_particle_settings() -> ParticleSettings:
    """Get particle quiz settings."""
    return ParticleSettings()


def get_difficulty_settings() -> DifficultySettings:
    """Get difficulty settings."""
    return DifficultySettings()


def get_quiz_settings() -> QuizSettings:
    """Get vocabulary quiz settings."""
    return QuizSettings()


def get_study_settings() -> StudySettings:
    """Get study settings."""
    return StudySettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    scheduler: SchedulerSettings = field(default_factory=get_scheduler_settings)
    particles: ParticleSettings = field(default_factory=get_particle_settings)
    difficulty: DifficultySettings = field(default_factory=get_difficulty_settings)
    quiz: QuizSettings = field(default_factory=get_quiz_settings)
    study: StudySettings = field(default_factory=get_study_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.scheduler.deck_size < 1:
            raise ValueError("DECK_SIZE must be positive")

        if self.scheduler.due_ratio < 0 or self.scheduler.due_ratio > 1:
            raise ValueError("DUE_RATIO must be between 0 and 1")

        if self.scheduler.interleave_swap_ratio < 0 or self.scheduler.interleave_swap_ratio > 1:
            raise ValueError("INTERLEAVE_SWAP_RATIO must be between 0 and 1")

        if self.particles.recency_window_size < 1:
            raise ValueError("RECENCY_WINDOW_SIZE must be positive")

        if self.particles.option_count < 2:
            raise ValueError("OPTION_COUNT must be at least 2")

        if self.particles.correct_cooldown_minutes < 0 or self.particles.incorrect_cooldown_minutes < 0:
            raise ValueError("Cooldowns cannot be negative")

        if self.quiz.mode not in self.quiz.modes:
            raise ValueError(f"QUIZ_MODE must be one of {self.quiz.modes}")

        if self.quiz.option_count < 2:
            raise ValueError("QUIZ_OPTION_COUNT must be at least 2")

        if self.quiz.batch_size < 1:
            raise ValueError("QUIZ_BATCH_SIZE must be positive")

        if self.difficulty.demote_rate > self.difficulty.promote_rate:
            raise ValueError("DIFFICULTY_DEMOTE_RATE cannot be greater than DIFFICULTY_PROMOTE_RATE")


# Create global settings instance
settings = Settings()
settings.validate()
