"""Dashboard metrics: readiness, chapter breakdown and recent activity."""
from datetime import date, timedelta

from cpp_flashcards.quiz import get_chapter_quiz_scores, get_overall_quiz_score
from cpp_flashcards.study import get_current_streak


def get_readiness_label(score: float) -> str:
    if score >= 80:
        return "READY"
    elif score >= 65:
        return "LIKELY"
    elif score >= 50:
        return "NEEDS WORK"
    return "NOT READY"


def get_readiness_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def calc_readiness_score(store) -> float:
    """Blend of flashcard mastery and quiz accuracy.

    With no quizzes taken, mastery alone counts.
    """
    mastery = store.overall_progress()
    if not any(s.completed and s.questions for s in store.quiz_history):
        return round(mastery, 1)
    quiz = get_overall_quiz_score(store.quiz_history)
    # Weighted: mastery 60%, quiz 40%
    return round(mastery * 0.6 + quiz * 0.4, 1)


def get_chapter_scores(store) -> list[dict]:
    quiz_scores = get_chapter_quiz_scores(store.quiz_history)
    results = []
    for idx, chapter in enumerate(store.chapters):
        progress = chapter.progress_percentage
        results.append({
            "index": idx,
            "number": chapter.number,
            "title": chapter.title,
            "cards": len(chapter.flashcards),
            "mastered": chapter.mastered_count,
            "progress": round(progress, 1),
            "quiz_score": quiz_scores.get(chapter.number),
            "label": get_readiness_label(progress),
        })
    return results


def get_last_seven_days(today: date | None = None) -> list[date]:
    today = today or date.today()
    return [today - timedelta(days=offset) for offset in range(6, -1, -1)]


def get_daily_progress(store, day: date) -> float:
    """Share of all cards mastered on ``day`` (0.0 - 1.0)."""
    total = store.total_cards()
    if total == 0:
        return 0.0
    mastered = sum(
        1
        for chapter in store.chapters
        for card in chapter.flashcards
        if card.is_mastered and card.last_review_date and card.last_review_date.date() == day
    )
    return mastered / total


def get_study_stats(store, today: date | None = None) -> dict:
    stats = store.study_stats
    completed = [s for s in store.quiz_history if s.completed]
    return {
        "total_cards": store.total_cards(),
        "mastered_cards": store.mastered_cards(),
        "favorite_cards": store.favorite_cards(),
        "cards_reviewed": stats.total_cards_reviewed,
        "study_streak": get_current_streak(stats, today),
        "minutes_studied": round(stats.time_spent_studying / 60),
        "quizzes_taken": len(completed),
        "avg_quiz_score": get_overall_quiz_score(completed),
    }
