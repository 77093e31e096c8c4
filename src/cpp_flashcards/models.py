"""Data classes for the flashcard domain model."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional
from uuid import uuid4


@dataclass
class Flashcard:
    question: str
    answer: str
    card_id: str = ""
    is_reviewed: bool = False
    is_mastered: bool = False
    is_favorite: bool = False
    attempt_count: int = 0
    last_review_date: Optional[datetime] = None

    def reset(self) -> None:
        """Return study fields to defaults. Favorites are kept."""
        self.is_reviewed = False
        self.is_mastered = False
        self.attempt_count = 0
        self.last_review_date = None


@dataclass
class Chapter:
    title: str
    number: int
    flashcards: list = field(default_factory=list)

    @property
    def mastered_count(self) -> int:
        return sum(1 for card in self.flashcards if card.is_mastered)

    @property
    def progress_percentage(self) -> float:
        if not self.flashcards:
            return 0.0
        return self.mastered_count / len(self.flashcards) * 100


@dataclass
class QuizQuestion:
    chapter_number: int
    question: str
    options: list
    correct_answer_index: int
    explanation: Optional[str] = None
    question_id: str = ""
    selected_answer_index: Optional[int] = None

    @property
    def is_answered(self) -> bool:
        return self.selected_answer_index is not None

    @property
    def is_correct(self) -> bool:
        return self.is_answered and self.selected_answer_index == self.correct_answer_index


@dataclass
class QuizSession:
    chapter_number: int
    questions: list = field(default_factory=list)
    score: int = 0
    completed: bool = False
    session_id: str = field(default_factory=lambda: uuid4().hex)
    date_taken: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        return not self.questions


@dataclass
class CardProgress:
    """Persisted subset of a flashcard's state."""
    card_id: Optional[str] = None
    is_reviewed: bool = False
    is_mastered: bool = False
    attempt_count: int = 0
    last_review_date: Optional[datetime] = None
    is_favorite: bool = False


@dataclass
class ProgressSnapshot:
    chapters: list = field(default_factory=list)  # list[list[CardProgress]]


@dataclass
class StudyStats:
    total_cards_reviewed: int = 0
    study_streak: int = 0
    last_study_date: Optional[date] = None
    time_spent_studying: float = 0.0
