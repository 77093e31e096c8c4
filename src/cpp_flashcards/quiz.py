"""Quiz engine for chapter practice quizzes."""
import logging
import random
from dataclasses import replace

from cpp_flashcards.models import QuizSession

logger = logging.getLogger(__name__)

QUESTIONS_PER_QUIZ = 50


def get_question_bank(banks: dict, chapter_number: int) -> list | None:
    """Return the chapter's bank, or None if no bank is registered for it."""
    return banks.get(chapter_number)


def generate_quiz(
    banks: dict,
    chapter_number: int,
    count: int = QUESTIONS_PER_QUIZ,
    rng: random.Random | None = None,
) -> QuizSession:
    """Draw up to ``count`` questions uniformly at random from the chapter's bank.

    An unregistered or empty bank gives a session with no questions; callers
    check ``session.is_empty`` before presenting it.
    """
    bank = get_question_bank(banks, chapter_number)
    if not bank:
        logger.info("No quiz questions for chapter %d", chapter_number)
        return QuizSession(chapter_number=chapter_number)
    pool = list(bank)
    # random.shuffle is Fisher-Yates: every ordering is equally likely.
    (rng or random).shuffle(pool)
    picked = pool[:max(0, min(count, len(pool)))]
    questions = [replace(q, selected_answer_index=None) for q in picked]
    logger.debug("Generated quiz for chapter %d with %d questions", chapter_number, len(questions))
    return QuizSession(chapter_number=chapter_number, questions=questions)


def select_answer(session: QuizSession, question_idx: int, answer_idx: int) -> bool:
    """Record an answer. Returns False if the session is finished or an index is invalid."""
    if session.completed:
        return False
    if not 0 <= question_idx < len(session.questions):
        return False
    question = session.questions[question_idx]
    if not 0 <= answer_idx < len(question.options):
        return False
    question.selected_answer_index = answer_idx
    return True


def finish_quiz(session: QuizSession) -> QuizSession:
    """Score the session and mark it completed. A completed session is returned as-is."""
    if session.completed:
        return session
    session.score = sum(1 for q in session.questions if q.is_correct)
    session.completed = True
    return session


def get_quiz_percentage(session: QuizSession) -> float:
    if not session.questions:
        return 0.0
    return round(session.score / len(session.questions) * 100, 1)


def get_overall_quiz_score(history) -> float:
    """Percentage of correct answers across all completed sessions."""
    total = sum(len(s.questions) for s in history if s.completed)
    if total == 0:
        return 0.0
    correct = sum(s.score for s in history if s.completed)
    return round(correct / total * 100, 1)


def get_chapter_quiz_scores(history) -> dict:
    """Quiz scores broken down by chapter number."""
    totals: dict[int, list[int]] = {}
    for session in history:
        if not session.completed or not session.questions:
            continue
        t = totals.setdefault(session.chapter_number, [0, 0])
        t[0] += session.score
        t[1] += len(session.questions)
    return {
        number: round(correct / total * 100, 1)
        for number, (correct, total) in sorted(totals.items())
    }


def get_weak_chapters(history, threshold: float = 70.0) -> list[dict]:
    """Chapters whose quiz score is below threshold (sorted worst first)."""
    scores = get_chapter_quiz_scores(history)
    weak = [
        {"chapter_number": number, "score": score}
        for number, score in scores.items()
        if score < threshold
    ]
    return sorted(weak, key=lambda w: w["score"])
