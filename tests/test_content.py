import json

import pytest

from cpp_flashcards.content import (
    ContentError, chapter_number_from_domain, load_chapters, load_question_banks,
    parse_question, read_content_file,
)


def test_load_chapters_from_package_content():
    chapters = load_chapters()
    assert len(chapters) == 7
    assert [c.number for c in chapters] == [1, 2, 3, 4, 5, 6, 7]
    assert chapters[0].title == "Security Principles and Practices"
    assert all(len(c.flashcards) == 6 for c in chapters)


def test_loaded_cards_start_unstudied():
    for chapter in load_chapters():
        for card in chapter.flashcards:
            assert card.question and card.answer
            assert not card.is_reviewed and not card.is_mastered and not card.is_favorite
            assert card.attempt_count == 0


def test_card_ids_are_unique():
    ids = [card.card_id for c in load_chapters() for card in c.flashcards]
    assert len(ids) == len(set(ids))
    assert ids[0] == "1-01"


def test_load_chapters_returns_fresh_objects():
    first = load_chapters()
    first[0].flashcards[0].is_mastered = True
    assert load_chapters()[0].flashcards[0].is_mastered is False


def test_load_question_banks_from_package_content():
    banks = load_question_banks()
    assert sorted(banks) == [1, 2, 3, 4, 5, 6, 7]
    assert sum(len(b) for b in banks.values()) == 24
    assert len(banks[1]) == 4
    for number, bank in banks.items():
        for q in bank:
            assert q.chapter_number == number
            assert len(q.options) == 4
            assert 0 <= q.correct_answer_index < 4
            assert q.explanation


def test_parse_question_maps_letter_to_index():
    q = parse_question({
        "number": 9, "domain": "Domain 3", "question": "Which?",
        "options": {"B": "two", "A": "one", "D": "four", "C": "three"},
        "correct_answer": "C", "explanation": "Third.",
    })
    assert q.options == ["one", "two", "three", "four"]
    assert q.correct_answer_index == 2
    assert q.chapter_number == 3
    assert q.question_id == "9"


def test_parse_question_accepts_option_list():
    q = parse_question({
        "domain": "Domain 1", "question": "Which?", "options": ["a", "b", "c", "d"],
        "correct_answer_index": 3,
    })
    assert q.correct_answer_index == 3
    assert q.explanation is None


# --- Edge case tests ---


def test_chapter_number_from_domain():
    assert chapter_number_from_domain("Domain 1") == 1
    assert chapter_number_from_domain("Domain 12") == 12
    assert chapter_number_from_domain("Crisis") == 0
    assert chapter_number_from_domain("") == 0


def test_parse_question_rejects_unknown_correct_letter():
    raw = {"domain": "Domain 1", "question": "?", "options": {"A": "1", "B": "2", "C": "3", "D": "4"},
           "correct_answer": "E"}
    assert parse_question(raw) is None


def test_parse_question_rejects_wrong_option_count():
    raw = {"domain": "Domain 1", "question": "?", "options": {"A": "1", "B": "2"}, "correct_answer": "A"}
    assert parse_question(raw) is None


def test_load_question_banks_skips_malformed(tmp_path):
    f = tmp_path / "questions.json"
    f.write_text(json.dumps({"questions": [
        {"number": 1, "domain": "Domain 2", "question": "ok",
         "options": {"A": "1", "B": "2", "C": "3", "D": "4"}, "correct_answer": "A"},
        {"number": 2, "domain": "Domain 2", "question": "bad", "options": {}, "correct_answer": "A"},
    ]}))
    banks = load_question_banks(f)
    assert list(banks) == [2]
    assert len(banks[2]) == 1


def test_load_chapters_from_yaml(tmp_path):
    f = tmp_path / "chapters.yaml"
    f.write_text(
        "chapters:\n"
        "  - number: 1\n"
        "    title: Basics\n"
        "    flashcards:\n"
        "      - question: What is risk?\n"
        "        answer: Likelihood and impact.\n"
    )
    chapters = load_chapters(f)
    assert chapters[0].title == "Basics"
    assert chapters[0].flashcards[0].card_id == "1-01"


def test_load_chapters_rejects_duplicate_numbers(tmp_path):
    f = tmp_path / "chapters.json"
    f.write_text(json.dumps({"chapters": [
        {"number": 1, "title": "A", "flashcards": []},
        {"number": 1, "title": "B", "flashcards": []},
    ]}))
    with pytest.raises(ContentError):
        load_chapters(f)


def test_load_chapters_rejects_duplicate_card_ids(tmp_path):
    f = tmp_path / "chapters.json"
    f.write_text(json.dumps({"chapters": [
        {"number": 1, "title": "A", "flashcards": [
            {"id": "x", "question": "q", "answer": "a"},
            {"id": "x", "question": "q2", "answer": "a2"},
        ]},
    ]}))
    with pytest.raises(ContentError):
        load_chapters(f)


def test_read_content_file_unsupported_format(tmp_path):
    f = tmp_path / "notes.txt"
    f.write_text("plain")
    with pytest.raises(ContentError):
        read_content_file(f)
