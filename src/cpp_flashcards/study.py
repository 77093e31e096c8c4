"""Study activity tracking: cards reviewed, daily streak and time studied."""
from datetime import date

from cpp_flashcards.models import StudyStats


def record_study_activity(stats: StudyStats, today: date | None = None) -> StudyStats:
    """Count one reviewed card and advance the daily streak."""
    today = today or date.today()
    stats.total_cards_reviewed += 1
    if stats.last_study_date == today:
        return stats
    if stats.last_study_date and (today - stats.last_study_date).days == 1:
        stats.study_streak += 1
    else:
        stats.study_streak = 1
    stats.last_study_date = today
    return stats


def add_study_time(stats: StudyStats, seconds: float) -> StudyStats:
    if seconds > 0:
        stats.time_spent_studying += seconds
    return stats


def get_current_streak(stats: StudyStats, today: date | None = None) -> int:
    """Streak as of today; a streak lapses once a full day passes without study."""
    if not stats.last_study_date:
        return 0
    today = today or date.today()
    if (today - stats.last_study_date).days > 1:
        return 0
    return stats.study_streak


def get_days_since_last_study(stats: StudyStats, today: date | None = None) -> int | None:
    if not stats.last_study_date:
        return None
    today = today or date.today()
    return (today - stats.last_study_date).days
