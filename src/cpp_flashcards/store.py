"""Progress store: the single owner of chapter and flashcard study state."""
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from cpp_flashcards import persistence
from cpp_flashcards.content import (
    CHAPTERS_FILE, QUESTIONS_FILE, load_chapters, load_question_banks,
)
from cpp_flashcards.db import DEFAULT_DB_PATH, init_db
from cpp_flashcards.models import StudyStats
from cpp_flashcards.study import add_study_time, record_study_activity

logger = logging.getLogger(__name__)


class ProgressStore:
    """Holds chapters and drives every study-state mutation.

    Out-of-range indices are ignored unless ``strict`` is set, in which case
    they raise IndexError. Each effective mutation is persisted (when a
    ``db_path`` is given) and then announced to subscribers.
    """

    def __init__(self, chapters, db_path: str | None = None, quiz_history=None,
                 study_stats=None, clock=datetime.now, strict: bool = False):
        self.chapters = chapters
        self.db_path = db_path
        self.quiz_history = list(quiz_history or [])
        self.study_stats = study_stats or StudyStats()
        self.clock = clock
        self.strict = strict
        self._listeners = []

    # --- Change notification ---

    def subscribe(self, listener):
        """Register ``listener(event)``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _changed(self, event: str) -> None:
        self.save()
        self._notify(event)

    # --- Lookup ---

    def _card(self, chapter_idx: int, card_idx: int):
        chapter = self._chapter(chapter_idx)
        if chapter is None:
            return None
        if 0 <= card_idx < len(chapter.flashcards):
            return chapter.flashcards[card_idx]
        if self.strict:
            raise IndexError(f"card index {card_idx} out of range for chapter {chapter_idx}")
        return None

    def _chapter(self, chapter_idx: int):
        if 0 <= chapter_idx < len(self.chapters):
            return self.chapters[chapter_idx]
        if self.strict:
            raise IndexError(f"chapter index {chapter_idx} out of range")
        return None

    # --- Mutations ---

    def mark_reviewed(self, chapter_idx: int, card_idx: int) -> None:
        card = self._card(chapter_idx, card_idx)
        if card is None:
            return
        card.is_reviewed = True
        record_study_activity(self.study_stats, self.clock().date())
        self._changed("reviewed")

    def mark_mastered(self, chapter_idx: int, card_idx: int) -> None:
        card = self._card(chapter_idx, card_idx)
        if card is None:
            return
        # mastery is only reachable after seeing the answer
        card.is_reviewed = True
        card.is_mastered = True
        card.last_review_date = self.clock()
        card.attempt_count += 1
        self._changed("mastered")

    def mark_for_review(self, chapter_idx: int, card_idx: int) -> None:
        card = self._card(chapter_idx, card_idx)
        if card is None:
            return
        card.is_mastered = False
        card.last_review_date = self.clock()
        self._changed("needs_review")

    def toggle_favorite(self, chapter_idx: int, card_idx: int) -> None:
        card = self._card(chapter_idx, card_idx)
        if card is None:
            return
        card.is_favorite = not card.is_favorite
        self._changed("favorite")

    def reset_chapter_progress(self, chapter_idx: int) -> None:
        chapter = self._chapter(chapter_idx)
        if chapter is None:
            return
        for card in chapter.flashcards:
            card.reset()
        self._changed("chapter_reset")

    def reset_all_progress(self) -> None:
        for chapter in self.chapters:
            for card in chapter.flashcards:
                card.reset()
        self.study_stats = StudyStats()
        self._changed("reset")

    def add_study_time(self, seconds: float) -> None:
        add_study_time(self.study_stats, seconds)
        if self.db_path:
            persistence.save_study_stats(self.db_path, self.study_stats)

    def record_quiz(self, session) -> None:
        """Append a finished quiz to the history log."""
        if not session.completed:
            logger.warning("Not recording unfinished quiz for chapter %d", session.chapter_number)
            return
        self.quiz_history.append(session)
        if self.db_path:
            persistence.save_quiz_history(self.db_path, self.quiz_history)
        self._notify("quiz_recorded")

    # --- Queries ---

    def get_favorite_flashcards(self) -> list[tuple]:
        return [
            (chapter_idx, card_idx, card)
            for chapter_idx, chapter in enumerate(self.chapters)
            for card_idx, card in enumerate(chapter.flashcards)
            if card.is_favorite
        ]

    def get_cards_for_review(self) -> list[tuple]:
        """Every card not yet mastered, in chapter-then-card order."""
        return [
            (chapter_idx, card_idx, card)
            for chapter_idx, chapter in enumerate(self.chapters)
            for card_idx, card in enumerate(chapter.flashcards)
            if not card.is_mastered
        ]

    def get_chapter_progress(self, chapter_idx: int) -> float:
        if not 0 <= chapter_idx < len(self.chapters):
            return 0.0
        return self.chapters[chapter_idx].progress_percentage

    def total_cards(self) -> int:
        return sum(len(c.flashcards) for c in self.chapters)

    def mastered_cards(self) -> int:
        return sum(c.mastered_count for c in self.chapters)

    def favorite_cards(self) -> int:
        return len(self.get_favorite_flashcards())

    def overall_progress(self) -> float:
        total = self.total_cards()
        if total == 0:
            return 0.0
        return self.mastered_cards() / total * 100

    # --- Persistence ---

    def save(self) -> None:
        if not self.db_path:
            return
        persistence.save_progress(self.db_path, self.chapters)
        persistence.save_study_stats(self.db_path, self.study_stats)


def open_store(db_path: str | None = DEFAULT_DB_PATH, content_dir=None, **kwargs):
    """Load static content and saved progress; returns (store, question_banks)."""
    chapters_path = questions_path = None
    if content_dir:
        chapters_path = Path(content_dir) / CHAPTERS_FILE
        questions_path = Path(content_dir) / QUESTIONS_FILE
    chapters = load_chapters(chapters_path)
    banks = load_question_banks(questions_path)

    if db_path:
        try:
            init_db(db_path)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Progress storage unavailable, continuing without saving: %s", e)
            db_path = None

    history = []
    stats = None
    if db_path:
        snapshot = persistence.load_progress(db_path)
        if snapshot is not None:
            restored = persistence.apply_progress(snapshot, chapters)
            logger.debug("Restored progress for %d cards", restored)
        history = persistence.load_quiz_history(db_path)
        stats = persistence.load_study_stats(db_path)
    store = ProgressStore(chapters, db_path=db_path, quiz_history=history, study_stats=stats, **kwargs)
    return store, banks
