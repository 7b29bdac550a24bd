"""Console drill entry point: ``python -m jlptdrill [words|quiz|particles] [category]``."""
import logging
import sys

from jlptdrill.config import settings
from jlptdrill.data.particles import PARTICLES_BY_LEVEL
from jlptdrill.data.vocabulary import CATEGORIES, VOCABULARY_BY_LEVEL
from jlptdrill.logging_config import setup_logging
from jlptdrill.models.base import init_db
from jlptdrill.monitoring import start_monitoring
from jlptdrill.services.session_service import SessionController
from jlptdrill.services.store import SqlAlchemyStore

logger = logging.getLogger(__name__)

MODES = ("words", "quiz", "particles")
QUIT = {"q", "quit", "exit"}


def drill_words(session: SessionController) -> None:
    """Flashcard loop: show the word, reveal, self-grade."""
    while True:
        card = session.current_card()
        if card is None:
            print("No cards available.")
            return
        reply = input(f"\n{card.japanese}  [enter to reveal, q to quit] ").strip().lower()
        if reply in QUIT:
            return
        print(f"  {card.reading} - {card.meaning} ({card.category})")
        reply = input("  Did you know it? [y/n] ").strip().lower()
        if reply in QUIT:
            return
        progress = session.answer_card(reply.startswith("y"))
        if progress:
            print(f"  -> {progress.state.value}")


def drill_quiz(session: SessionController) -> None:
    """Multiple choice loop over the cards of the current deck."""
    while True:
        question = session.next_word_question()
        if question is None:
            print("No cards available.")
            return
        print(f"\n{question.prompt}")
        for number, option in enumerate(question.options, start=1):
            print(f"  {number}. {question.option_label(option)}")
        reply = input("Your answer [number, q to quit]: ").strip().lower()
        if reply in QUIT:
            return
        try:
            selected = question.options[int(reply) - 1].key
        except (ValueError, IndexError):
            selected = reply
        result = session.answer_word_question(selected)
        item = result.correct_item
        verdict = "Correct!" if result.is_correct else "Wrong,"
        print(f"  {verdict} {item.japanese} ({item.reading}) = {item.meaning}")
        if result.batch_complete:
            print(f"  Batch complete: {session.quiz.get_category_stats(session.level)}")


def drill_particles(session: SessionController) -> None:
    """Multiple choice loop over particle questions."""
    while True:
        question = session.next_particle_question()
        if question is None:
            print("No particle questions available for this level.")
            return
        print(f"\n{question.example.sentence}  ({question.example.english})")
        for number, option in enumerate(question.options, start=1):
            print(f"  {number}. {option}")
        reply = input("Your answer [number, q to quit]: ").strip().lower()
        if reply in QUIT:
            return
        try:
            selected = question.options[int(reply) - 1]
        except (ValueError, IndexError):
            selected = reply
        result = session.answer_particle(selected)
        verdict = "Correct!" if result.is_correct else f"Wrong, it's {result.correct_particle}"
        print(f"  {verdict} {question.example.filled()}")
        print(f"  {result.explanation}")
        print(f"  Difficulty: {session.particle_selector.difficulty.tier}")


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv if argv is None else argv
    mode = argv[1] if len(argv) > 1 else "words"
    category = argv[2] if len(argv) > 2 else None
    if mode not in MODES or (category is not None and category not in CATEGORIES):
        print(__doc__)
        print(f"Categories: {', '.join(CATEGORIES)}")
        return 2

    setup_logging("Starting jlptdrill ...")
    init_db()
    if settings.monitoring.enabled:
        start_monitoring(settings.monitoring.port)

    session = SessionController(SqlAlchemyStore(), VOCABULARY_BY_LEVEL, PARTICLES_BY_LEVEL)
    session.start()
    if category is not None:
        session.set_filters([category])
    try:
        if mode == "words":
            drill_words(session)
        elif mode == "quiz":
            drill_quiz(session)
        else:
            drill_particles(session)
    except (KeyboardInterrupt, EOFError):
        print()
    logger.info(f"Session summary: {session.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
