# tests/test_study.py
from datetime import date

from cpp_flashcards.models import StudyStats
from cpp_flashcards.study import (
    add_study_time, get_current_streak, get_days_since_last_study,
    record_study_activity,
)

MONDAY = date(2026, 3, 9)


def test_first_activity_starts_streak():
    stats = record_study_activity(StudyStats(), MONDAY)
    assert stats.total_cards_reviewed == 1
    assert stats.study_streak == 1
    assert stats.last_study_date == MONDAY


def test_same_day_activity_keeps_streak():
    stats = StudyStats()
    for _ in range(3):
        record_study_activity(stats, MONDAY)
    assert stats.total_cards_reviewed == 3
    assert stats.study_streak == 1


def test_consecutive_days_extend_streak():
    stats = StudyStats()
    for offset in range(4):
        record_study_activity(stats, date(2026, 3, 9 + offset))
    assert stats.study_streak == 4
    assert stats.last_study_date == date(2026, 3, 12)


def test_gap_resets_streak():
    stats = StudyStats(total_cards_reviewed=10, study_streak=5, last_study_date=MONDAY)
    record_study_activity(stats, date(2026, 3, 12))
    assert stats.study_streak == 1
    assert stats.total_cards_reviewed == 11


def test_streak_across_month_boundary():
    stats = StudyStats(study_streak=2, last_study_date=date(2026, 2, 28))
    record_study_activity(stats, date(2026, 3, 1))
    assert stats.study_streak == 3


def test_add_study_time():
    stats = StudyStats()
    add_study_time(stats, 90)
    add_study_time(stats, 30.5)
    assert stats.time_spent_studying == 120.5


def test_add_study_time_ignores_non_positive():
    stats = StudyStats(time_spent_studying=60)
    add_study_time(stats, 0)
    add_study_time(stats, -10)
    assert stats.time_spent_studying == 60


def test_current_streak():
    stats = StudyStats(study_streak=3, last_study_date=MONDAY)
    assert get_current_streak(stats, MONDAY) == 3
    assert get_current_streak(stats, date(2026, 3, 10)) == 3
    assert get_current_streak(stats, date(2026, 3, 11)) == 0


def test_current_streak_never_studied():
    assert get_current_streak(StudyStats(), MONDAY) == 0


def test_days_since_last_study():
    assert get_days_since_last_study(StudyStats(), MONDAY) is None
    stats = StudyStats(last_study_date=MONDAY)
    assert get_days_since_last_study(stats, date(2026, 3, 16)) == 7
