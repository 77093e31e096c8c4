from datetime import datetime

import pytest

from cpp_flashcards.models import Chapter, Flashcard, QuizQuestion
from cpp_flashcards.store import ProgressStore


def make_chapters():
    """Three small chapters; the last one has no cards."""
    return [
        Chapter(title="Security Principles", number=1, flashcards=[
            Flashcard(question=f"P{i}?", answer=f"P{i}", card_id=f"1-{i:02d}") for i in range(1, 5)
        ]),
        Chapter(title="Investigations", number=2, flashcards=[
            Flashcard(question=f"I{i}?", answer=f"I{i}", card_id=f"2-{i:02d}") for i in range(1, 4)
        ]),
        Chapter(title="Empty", number=3, flashcards=[]),
    ]


def make_bank(chapter_number, size):
    return [
        QuizQuestion(
            chapter_number=chapter_number,
            question=f"Question {n}",
            options=["A", "B", "C", "D"],
            correct_answer_index=n % 4,
            explanation=f"Because {n}",
            question_id=str(n),
        )
        for n in range(size)
    ]


class FixedClock:
    def __init__(self, now=datetime(2026, 3, 14, 9, 30)):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_progress.db")
    return db_path


@pytest.fixture
def chapters():
    return make_chapters()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(chapters, clock):
    """In-memory store with no persistence."""
    return ProgressStore(chapters, clock=clock)
