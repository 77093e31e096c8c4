"""Load the static chapter, flashcard and quiz bank content."""
import json
import logging
from pathlib import Path

import yaml

from cpp_flashcards.models import Chapter, Flashcard, QuizQuestion

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
CHAPTERS_FILE = "chapters.json"
QUESTIONS_FILE = "questions.json"


class ContentError(ValueError):
    """Raised when the static content definition is malformed."""


def read_content_file(file_path) -> dict:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    raise ContentError(f"Unsupported content format: {path.name}")


def load_chapters(path=None) -> list[Chapter]:
    """Build the ordered chapter list with fresh, unstudied flashcards."""
    path = Path(path) if path else CONTENT_DIR / CHAPTERS_FILE
    data = read_content_file(path)
    chapters = []
    seen_numbers = set()
    seen_ids = set()
    for entry in data.get("chapters", []):
        number = int(entry["number"])
        if number in seen_numbers:
            raise ContentError(f"Duplicate chapter number {number} in {path.name}")
        seen_numbers.add(number)
        cards = []
        for index, card in enumerate(entry.get("flashcards", [])):
            card_id = str(card.get("id") or f"{number}-{index + 1:02d}")
            if card_id in seen_ids:
                raise ContentError(f"Duplicate flashcard id {card_id!r} in {path.name}")
            seen_ids.add(card_id)
            cards.append(Flashcard(question=card["question"], answer=card["answer"], card_id=card_id))
        chapters.append(Chapter(title=entry["title"], number=number, flashcards=cards))
    logger.debug("Loaded %d chapters from %s", len(chapters), path)
    return chapters


def chapter_number_from_domain(domain: str) -> int:
    """Extract the chapter number from a bank domain label ("Domain 3" -> 3)."""
    last = str(domain).split()[-1:] or [""]
    try:
        return int(last[0])
    except ValueError:
        return 0


def parse_question(raw: dict) -> QuizQuestion | None:
    """Convert one bank entry to a QuizQuestion, or None if it is unusable."""
    options = raw.get("options") or {}
    if isinstance(options, dict):
        keys = sorted(options)
        option_texts = [options[k] for k in keys]
        correct = str(raw.get("correct_answer", "")).strip().upper()
        correct_index = keys.index(correct) if correct in keys else None
    else:
        option_texts = list(options)
        correct_index = raw.get("correct_answer_index")
    if not raw.get("question") or len(option_texts) != 4:
        return None
    if not isinstance(correct_index, int) or not 0 <= correct_index < 4:
        return None
    return QuizQuestion(
        chapter_number=chapter_number_from_domain(raw.get("domain", "")),
        question=raw["question"],
        options=option_texts,
        correct_answer_index=correct_index,
        explanation=raw.get("explanation") or None,
        question_id=str(raw.get("number", "")),
    )


def load_question_banks(path=None) -> dict[int, list[QuizQuestion]]:
    """Group the quiz bank by chapter number. Chapters with no entries are absent."""
    path = Path(path) if path else CONTENT_DIR / QUESTIONS_FILE
    data = read_content_file(path)
    banks: dict[int, list[QuizQuestion]] = {}
    for raw in data.get("questions", []):
        question = parse_question(raw)
        if question is None:
            logger.warning("Skipping malformed quiz question %s", raw.get("number", "?"))
            continue
        banks.setdefault(question.chapter_number, []).append(question)
    for number in sorted(banks):
        logger.debug("Chapter %d: %d questions", number, len(banks[number]))
    return banks
