"""Save and restore study progress, quiz history and study stats.

Only mutable state is written; question and answer text always comes from
the static content. Every save is best-effort: failures are logged and
swallowed so the study action that triggered them still completes.
"""
import json
import logging
import sqlite3
from datetime import date, datetime
from uuid import uuid4

from cpp_flashcards.db import get_value, set_value
from cpp_flashcards.models import (
    CardProgress, ProgressSnapshot, QuizQuestion, QuizSession, StudyStats,
)

logger = logging.getLogger(__name__)

PROGRESS_KEY = "ChapterProgress"
QUIZ_HISTORY_KEY = "QuizHistory"
STUDY_STATS_KEY = "StudyStats"

STORAGE_ERRORS = (sqlite3.Error, OSError)
DECODE_ERRORS = (TypeError, ValueError, KeyError, AttributeError)


def _encode_datetime(value):
    return value.isoformat() if value else None


def _decode_datetime(value):
    return datetime.fromisoformat(value) if value else None


def _write(db_path: str, key: str, payload) -> bool:
    try:
        set_value(db_path, key, json.dumps(payload))
    except STORAGE_ERRORS + DECODE_ERRORS as e:
        logger.warning("Could not save %s: %s", key, e)
        return False
    return True


def _read(db_path: str, key: str):
    try:
        raw = get_value(db_path, key)
    except STORAGE_ERRORS as e:
        logger.warning("Could not read %s: %s", key, e)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning("Ignoring undecodable %s record: %s", key, e)
        return None


# --- Chapter progress ---


def snapshot_chapters(chapters) -> ProgressSnapshot:
    return ProgressSnapshot(chapters=[
        [
            CardProgress(
                card_id=card.card_id or None,
                is_reviewed=card.is_reviewed,
                is_mastered=card.is_mastered,
                attempt_count=card.attempt_count,
                last_review_date=card.last_review_date,
                is_favorite=card.is_favorite,
            )
            for card in chapter.flashcards
        ]
        for chapter in chapters
    ])


def encode_snapshot(snapshot: ProgressSnapshot) -> list:
    return [
        [
            {
                "cardId": entry.card_id,
                "isReviewed": entry.is_reviewed,
                "isMastered": entry.is_mastered,
                "attemptCount": entry.attempt_count,
                "lastReviewDate": _encode_datetime(entry.last_review_date),
                "isFavorite": entry.is_favorite,
            }
            for entry in chapter
        ]
        for chapter in snapshot.chapters
    ]


def decode_snapshot(data) -> ProgressSnapshot:
    """Build a snapshot from decoded JSON. Raises on a malformed layout."""
    if not isinstance(data, list):
        raise TypeError("progress snapshot must be a list of chapters")
    chapters = []
    for chapter in data:
        if not isinstance(chapter, list):
            raise TypeError("chapter entry must be a list of cards")
        chapters.append([
            CardProgress(
                card_id=entry.get("cardId"),
                is_reviewed=bool(entry.get("isReviewed", False)),
                is_mastered=bool(entry.get("isMastered", False)),
                attempt_count=max(0, int(entry.get("attemptCount", 0))),
                last_review_date=_decode_datetime(entry.get("lastReviewDate")),
                is_favorite=bool(entry.get("isFavorite", False)),
            )
            for entry in chapter
        ])
    return ProgressSnapshot(chapters=chapters)


def save_progress(db_path: str, chapters) -> bool:
    """Write the progress snapshot for all chapters. Returns False on failure."""
    return _write(db_path, PROGRESS_KEY, encode_snapshot(snapshot_chapters(chapters)))


def load_progress(db_path: str) -> ProgressSnapshot | None:
    """Read the saved snapshot, or None if there is none or it is unreadable."""
    data = _read(db_path, PROGRESS_KEY)
    if data is None:
        return None
    try:
        return decode_snapshot(data)
    except DECODE_ERRORS as e:
        logger.warning("Ignoring corrupt progress snapshot: %s", e)
        return None


def _copy_progress(entry: CardProgress, card) -> None:
    card.is_reviewed = entry.is_reviewed
    card.is_mastered = entry.is_mastered
    card.attempt_count = entry.attempt_count
    card.last_review_date = entry.last_review_date
    card.is_favorite = entry.is_favorite


def apply_progress(snapshot: ProgressSnapshot, chapters) -> int:
    """Copy saved progress onto live flashcards. Returns the number of cards restored.

    Entries with a card id are matched by id, so reordered content keeps each
    learner's progress on the right card. Entries without an id come from
    positional saves and are applied by chapter and card position, clamped to
    whichever side is shorter.
    """
    by_id = {
        card.card_id: card
        for chapter in chapters
        for card in chapter.flashcards
        if card.card_id
    }
    restored = 0
    for chapter_idx, entries in enumerate(snapshot.chapters):
        for card_idx, entry in enumerate(entries):
            if entry.card_id is not None:
                card = by_id.get(entry.card_id)
            elif chapter_idx < len(chapters) and card_idx < len(chapters[chapter_idx].flashcards):
                card = chapters[chapter_idx].flashcards[card_idx]
            else:
                card = None
            if card is None:
                continue
            _copy_progress(entry, card)
            restored += 1
    return restored


# --- Quiz history ---


def encode_session(session: QuizSession) -> dict:
    return {
        "id": session.session_id,
        "chapterNumber": session.chapter_number,
        "score": session.score,
        "completed": session.completed,
        "dateTaken": _encode_datetime(session.date_taken),
        "questions": [
            {
                "id": q.question_id,
                "question": q.question,
                "options": list(q.options),
                "correctAnswerIndex": q.correct_answer_index,
                "explanation": q.explanation,
                "selectedAnswerIndex": q.selected_answer_index,
            }
            for q in session.questions
        ],
    }


def decode_session(data: dict) -> QuizSession:
    chapter_number = int(data["chapterNumber"])
    return QuizSession(
        chapter_number=chapter_number,
        questions=[
            QuizQuestion(
                chapter_number=chapter_number,
                question=q["question"],
                options=list(q["options"]),
                correct_answer_index=int(q["correctAnswerIndex"]),
                explanation=q.get("explanation"),
                question_id=str(q.get("id", "")),
                selected_answer_index=q.get("selectedAnswerIndex"),
            )
            for q in data.get("questions", [])
        ],
        score=int(data.get("score", 0)),
        completed=bool(data.get("completed", False)),
        session_id=data.get("id") or uuid4().hex,
        date_taken=_decode_datetime(data.get("dateTaken")) or datetime.now(),
    )


def save_quiz_history(db_path: str, sessions) -> bool:
    return _write(db_path, QUIZ_HISTORY_KEY, [encode_session(s) for s in sessions])


def load_quiz_history(db_path: str) -> list[QuizSession]:
    """Read the quiz history. An absent or corrupt record yields an empty history."""
    data = _read(db_path, QUIZ_HISTORY_KEY)
    if data is None:
        return []
    try:
        return [decode_session(entry) for entry in data]
    except DECODE_ERRORS as e:
        logger.warning("Ignoring corrupt quiz history: %s", e)
        return []


# --- Study stats ---


def save_study_stats(db_path: str, stats: StudyStats) -> bool:
    return _write(db_path, STUDY_STATS_KEY, {
        "totalCardsReviewed": stats.total_cards_reviewed,
        "studyStreak": stats.study_streak,
        "lastStudyDate": stats.last_study_date.isoformat() if stats.last_study_date else None,
        "timeSpentStudying": stats.time_spent_studying,
    })


def load_study_stats(db_path: str) -> StudyStats:
    data = _read(db_path, STUDY_STATS_KEY)
    if data is None:
        return StudyStats()
    try:
        last = data.get("lastStudyDate")
        return StudyStats(
            total_cards_reviewed=int(data.get("totalCardsReviewed", 0)),
            study_streak=int(data.get("studyStreak", 0)),
            last_study_date=date.fromisoformat(last) if last else None,
            time_spent_studying=float(data.get("timeSpentStudying", 0.0)),
        )
    except DECODE_ERRORS as e:
        logger.warning("Ignoring corrupt study stats: %s", e)
        return StudyStats()
