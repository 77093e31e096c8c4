"""Interactive CLI application."""
import logging
import time

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from cpp_flashcards.dashboard import (
    calc_readiness_score, get_chapter_scores, get_daily_progress,
    get_last_seven_days, get_readiness_color, get_readiness_label, get_study_stats,
)
from cpp_flashcards.db import DEFAULT_DB_PATH
from cpp_flashcards.quiz import (
    finish_quiz, generate_quiz, get_quiz_percentage, get_weak_chapters, select_answer,
)
from cpp_flashcards.store import open_store

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
OPTION_LETTERS = "abcd"


class SessionExitRequested(Exception):
    """Raised when the user leaves a drill or quiz before it finishes."""


def configure_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def session_prompt(prompt: str, choices: list | None = None, default: str = "") -> str:
    if choices:
        answer = Prompt.ask(prompt, choices=list(choices) + ["q"])
    else:
        answer = Prompt.ask(prompt, default=default, show_default=False)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer.strip()


def session_int_prompt(prompt: str, choices: list) -> int:
    return int(session_prompt(prompt, choices=choices))


def show_welcome():
    console.print(Panel(
        "[bold]ASIS Certified Protection Professional[/bold]\n[dim]Flashcards & Practice Quizzes[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("chapters", "Chapter list + progress"),
        ("study", "Study a chapter's flashcards"),
        ("review", "Drill cards not yet mastered"),
        ("favorites", "Drill favorite cards"),
        ("quiz", "Chapter practice quiz"),
        ("history", "Past quiz results"),
        ("dashboard", "Readiness + statistics"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose_chapter(store) -> int:
    for chapter in store.chapters:
        console.print(f"  [cyan]{chapter.number}[/cyan]) {chapter.title}")
    number = session_int_prompt("Select chapter", choices=[str(c.number) for c in store.chapters])
    return next(i for i, c in enumerate(store.chapters) if c.number == number)


def run_flashcard_session(store, cards: list) -> None:
    """Drill (chapter_idx, card_idx, card) triples, saving each rating as it is given."""
    if not cards:
        console.print("[yellow]No flashcards to study here![/yellow]")
        return
    console.print(f"\n[bold]Flashcard Session[/bold] — {len(cards)} cards [dim](q to stop)[/dim]\n")
    started = time.monotonic()
    try:
        for i, (chapter_idx, card_idx, card) in enumerate(cards, 1):
            star = " [yellow]★[/yellow]" if card.is_favorite else ""
            console.print(Panel(card.question, title=f"Card {i}/{len(cards)}{star}", border_style="cyan"))
            session_prompt("[dim]Press Enter to reveal answer[/dim]")
            console.print(Panel(card.answer, border_style="green"))
            store.mark_reviewed(chapter_idx, card_idx)
            while True:
                choice = session_prompt(
                    "[m]astered, [r]eview again, [f]avorite, [s]kip", choices=["m", "r", "f", "s"],
                ).lower()
                if choice == "f":
                    store.toggle_favorite(chapter_idx, card_idx)
                    state = "added to" if card.is_favorite else "removed from"
                    console.print(f"[yellow]Card {state} favorites.[/yellow]")
                    continue
                if choice == "m":
                    store.mark_mastered(chapter_idx, card_idx)
                elif choice == "r":
                    store.mark_for_review(chapter_idx, card_idx)
                break
            console.print()
    finally:
        store.add_study_time(time.monotonic() - started)


def run_quiz_session(store, banks: dict, chapter_number: int):
    """Run a chapter quiz. Returns the finished session, or None if there were no questions."""
    session = generate_quiz(banks, chapter_number)
    if session.is_empty:
        console.print("[yellow]No questions available for this chapter![/yellow]")
        return None
    console.print(f"\n[bold]Quiz[/bold] — {len(session.questions)} questions [dim](q to abandon)[/dim]\n")
    for i, q in enumerate(session.questions):
        console.print(f"[bold]Q{i + 1}.[/bold] {q.question}\n")
        for letter, option in zip(OPTION_LETTERS, q.options):
            console.print(f"  [cyan]{letter})[/cyan] {option}")
        answer = session_prompt("\nYour answer", choices=list(OPTION_LETTERS)).lower()
        select_answer(session, i, OPTION_LETTERS.index(answer))
        console.print()

    finish_quiz(session)
    store.record_quiz(session)
    total = len(session.questions)
    console.print(f"[bold]Score: {session.score}/{total} ({get_quiz_percentage(session):.0f}%)[/bold]\n")
    for i, q in enumerate(session.questions, 1):
        if q.is_correct:
            continue
        correct = q.options[q.correct_answer_index]
        console.print(f"[red]Q{i}[/red] {q.question}\n  Answer: [green]{correct}[/green]")
        if q.explanation:
            console.print(f"  [dim]{q.explanation}[/dim]")
    return session


def cmd_chapters(store):
    table = Table(title="Chapters")
    table.add_column("#", justify="right")
    table.add_column("Chapter", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Mastered", justify="right")
    table.add_column("Progress", justify="right")
    for row in get_chapter_scores(store):
        color = get_readiness_color(row["progress"])
        table.add_row(
            str(row["number"]), row["title"], str(row["cards"]), str(row["mastered"]),
            f"[{color}]{row['progress']:.0f}%[/{color}]",
        )
    console.print(table)


def cmd_study(store):
    chapter_idx = choose_chapter(store)
    chapter = store.chapters[chapter_idx]
    console.print(Panel(f"[bold]{chapter.number}. {chapter.title}[/bold]", title="Study"))
    cards = [(chapter_idx, j, card) for j, card in enumerate(chapter.flashcards)]
    run_flashcard_session(store, cards)


def cmd_review(store):
    console.print("\n[bold]Cards for Review[/bold]")
    cards = store.get_cards_for_review()
    if not cards:
        console.print("[green]All cards have been mastered![/green]")
        return
    run_flashcard_session(store, cards)


def cmd_favorites(store):
    console.print("\n[bold]Favorites[/bold]")
    run_flashcard_session(store, store.get_favorite_flashcards())


def cmd_quiz(store, banks):
    console.print("\n[bold]Practice Quiz[/bold]")
    chapter_idx = choose_chapter(store)
    run_quiz_session(store, banks, store.chapters[chapter_idx].number)


def cmd_history(store):
    if not store.quiz_history:
        console.print("[yellow]No quizzes taken yet.[/yellow]")
        return
    titles = {c.number: c.title for c in store.chapters}
    table = Table(title="Quiz History")
    table.add_column("Date")
    table.add_column("Chapter", style="cyan")
    table.add_column("Score", justify="right")
    for session in reversed(store.quiz_history):
        pct = get_quiz_percentage(session)
        color = get_readiness_color(pct)
        table.add_row(
            session.date_taken.strftime("%Y-%m-%d %H:%M"),
            titles.get(session.chapter_number, str(session.chapter_number)),
            f"[{color}]{session.score}/{len(session.questions)} ({pct:.0f}%)[/{color}]",
        )
    console.print(table)


def cmd_dashboard(store):
    score = calc_readiness_score(store)
    label = get_readiness_label(score)
    color = get_readiness_color(score)
    stats = get_study_stats(store)

    console.print(Panel("[bold]Study Progress[/bold]", title="CPP Readiness Dashboard", border_style="blue"))

    bar_filled = int(score / 5)
    bar_empty = 20 - bar_filled
    bar = f"[{color}]{'█' * bar_filled}{'░' * bar_empty}[/{color}]"
    console.print(f"\n  Overall Readiness: [bold]{score}%[/bold] {bar} [{color}]{label}[/{color}]\n")

    table = Table(title="Chapter Breakdown")
    table.add_column("Chapter", style="cyan")
    table.add_column("Mastery", justify="right")
    table.add_column("Quiz", justify="right")
    table.add_column("Status")
    for row in get_chapter_scores(store):
        sc_color = get_readiness_color(row["progress"])
        quiz = f"{row['quiz_score']}%" if row["quiz_score"] is not None else "-"
        table.add_row(
            f"{row['number']}. {row['title']}",
            f"{row['progress']:.0f}%",
            quiz,
            f"[{sc_color}]{row['label']}[/{sc_color}]",
        )
    console.print(table)

    days = Table(title="Mastered in the Last 7 Days")
    for day in get_last_seven_days():
        days.add_column(day.strftime("%a"), justify="center")
    days.add_row(*(f"{get_daily_progress(store, day) * 100:.0f}%" for day in get_last_seven_days()))
    console.print(days)

    console.print(f"\n  Mastered: [bold]{stats['mastered_cards']}/{stats['total_cards']}[/bold]  |  "
                  f"Favorites: [bold]{stats['favorite_cards']}[/bold]  |  "
                  f"Reviewed: [bold]{stats['cards_reviewed']}[/bold]  |  "
                  f"Streak: [bold]{stats['study_streak']}d[/bold]  |  "
                  f"Studied: [bold]{stats['minutes_studied']} min[/bold]  |  "
                  f"Quizzes: [bold]{stats['quizzes_taken']}[/bold]  |  "
                  f"Avg Quiz: [bold]{stats['avg_quiz_score']}%[/bold]")

    weak = get_weak_chapters(store.quiz_history)
    if weak:
        titles = {c.number: c.title for c in store.chapters}
        weakest = weak[0]
        console.print(f"\n  [yellow]Recommendation: Focus on {titles.get(weakest['chapter_number'])}[/yellow]")


def cmd_reset(store):
    if Confirm.ask("[red]This permanently erases all progress. Continue?[/red]", default=False):
        store.reset_all_progress()
        console.print("[green]Progress reset.[/green]")


def main(db_path: str = DEFAULT_DB_PATH):
    configure_logging()
    store, banks = open_store(db_path)
    store.subscribe(lambda event: logger.debug("Store changed: %s", event))

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="study").strip().lower()
        try:
            if choice == "chapters":
                cmd_chapters(store)
            elif choice == "study":
                cmd_study(store)
            elif choice == "review":
                cmd_review(store)
            elif choice == "favorites":
                cmd_favorites(store)
            elif choice == "quiz":
                cmd_quiz(store, banks)
            elif choice == "history":
                cmd_history(store)
            elif choice == "dashboard":
                cmd_dashboard(store)
            elif choice == "reset":
                cmd_reset(store)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("\n[dim]Back to menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
